"""Diagnostics."""

from runecfg.diagnostics.codes import DiagnosticSpec, Severity
from runecfg.diagnostics.diagnostic import (
    Diagnostic,
    SourceLocation,
    detached_diagnostic,
    diagnostic_at,
    location_of,
)
from runecfg.diagnostics.errors import (
    ImportCycleError,
    ImportNotFoundError,
    LexError,
    ParseError,
    QueryError,
    QueryNotFoundError,
    QueryTypeError,
    RegexCompileError,
    RuneError,
    RuneImportError,
    TypeMismatchError,
    UnresolvedReferenceError,
    ValidationError,
)
from runecfg.diagnostics.report import format_diagnostic

__all__ = [
    "Diagnostic",
    "DiagnosticSpec",
    "ImportCycleError",
    "ImportNotFoundError",
    "LexError",
    "ParseError",
    "QueryError",
    "QueryNotFoundError",
    "QueryTypeError",
    "RegexCompileError",
    "RuneError",
    "RuneImportError",
    "Severity",
    "SourceLocation",
    "TypeMismatchError",
    "UnresolvedReferenceError",
    "ValidationError",
    "detached_diagnostic",
    "diagnostic_at",
    "format_diagnostic",
    "location_of",
]
