"""Exception taxonomy.

Every error carries a `Diagnostic` with its kind, 1-based line and the text of
the offending line. Resolution is all-or-nothing: any of these aborts the
whole session.
"""

from __future__ import annotations

from runecfg.diagnostics.diagnostic import Diagnostic


class RuneError(Exception):
    """Base exception for all RUNE errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(_summary(diagnostic))

    @property
    def code(self) -> str:
        return self.diagnostic.code

    @property
    def kind(self) -> str:
        return self.diagnostic.kind

    @property
    def line(self) -> int:
        return self.diagnostic.line

    @property
    def column(self) -> int:
        return self.diagnostic.column

    @property
    def line_text(self) -> str:
        return self.diagnostic.line_text


class LexError(RuneError):
    """Raised when source text cannot be tokenized."""


class ParseError(RuneError):
    """Raised when the token stream does not match the grammar."""


class RuneImportError(RuneError):
    """Raised when a `gather` directive cannot be satisfied."""


class ImportNotFoundError(RuneImportError):
    """Raised when the file loader cannot read a gathered file."""


class ImportCycleError(RuneImportError):
    """Raised when a file (transitively) gathers itself."""

    def __init__(self, diagnostic: Diagnostic, chain: tuple[str, ...]):
        self.chain = chain
        super().__init__(diagnostic)


class UnresolvedReferenceError(RuneError):
    """Raised for unknown identifiers, aliases, path segments or $sys keys."""


class TypeMismatchError(RuneError):
    """Raised when values of incompatible kinds meet."""


class RegexCompileError(RuneError):
    """Raised when a raw-string literal is not a valid regular expression."""

    def __init__(self, diagnostic: Diagnostic, pattern: str):
        self.pattern = pattern
        super().__init__(diagnostic)


class QueryError(RuneError):
    """Raised by the query API."""

    def __init__(self, diagnostic: Diagnostic, path: str):
        self.path = path
        super().__init__(diagnostic)


class QueryNotFoundError(QueryError):
    """Raised when a queried path does not exist."""


class QueryTypeError(QueryError, TypeMismatchError):
    """Raised when a queried value does not have the requested type."""


class ValidationError(RuneError):
    """Raised when a queried value fails a caller-supplied validation."""


def _summary(diagnostic: Diagnostic) -> str:
    if diagnostic.line > 0:
        return f"{diagnostic.message} (line {diagnostic.line}: {diagnostic.line_text.strip()})"
    return diagnostic.message
