"""Diagnostics core types."""

from dataclasses import dataclass

from runecfg.diagnostics.codes import DiagnosticSpec, Severity
from runecfg.text import LineIndex, TextRange


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic attached to every error raised by the engine."""

    code: str
    message: str
    range: TextRange
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None
    line: int = 0
    column: int = 0
    line_text: str = ""
    source_path: str | None = None

    @property
    def kind(self) -> str:
        return self.category or "error"


def diagnostic_at(
    spec: DiagnosticSpec,
    source_text: str,
    range: TextRange,
    *,
    source_path: str | None = None,
    message: str | None = None,
    hint: str | None = None,
    index: LineIndex | None = None,
) -> Diagnostic:
    """Build a diagnostic for `range`, filling in line/column and the offending line text."""
    line_index = index if index is not None else LineIndex(source_text)
    position = line_index.line_col(range.start)
    return Diagnostic(
        code=spec.code,
        message=message if message is not None else spec.message,
        range=range,
        severity=spec.severity,
        hint=hint if hint is not None else spec.hint,
        category=spec.category,
        line=position.line,
        column=position.column,
        line_text=line_index.line_text(position.line),
        source_path=source_path,
    )


def detached_diagnostic(
    spec: DiagnosticSpec,
    *,
    message: str | None = None,
    hint: str | None = None,
    line: int = 0,
    line_text: str = "",
    source_path: str | None = None,
) -> Diagnostic:
    """Build a diagnostic that is not tied to a source offset (query/validation errors)."""
    return Diagnostic(
        code=spec.code,
        message=message if message is not None else spec.message,
        range=TextRange.empty(),
        severity=spec.severity,
        hint=hint if hint is not None else spec.hint,
        category=spec.category,
        line=line,
        column=1 if line else 0,
        line_text=line_text,
        source_path=source_path,
    )


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Where a binding was written, kept so later query errors can point at it."""

    line: int
    column: int
    line_text: str
    source_path: str | None = None


def location_of(
    source_text: str,
    range: TextRange,
    *,
    source_path: str | None = None,
    index: LineIndex | None = None,
) -> SourceLocation:
    line_index = index if index is not None else LineIndex(source_text)
    position = line_index.line_col(range.start)
    return SourceLocation(
        line=position.line,
        column=position.column,
        line_text=line_index.line_text(position.line),
        source_path=source_path,
    )
