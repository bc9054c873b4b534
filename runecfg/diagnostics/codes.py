"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with the same quote it was opened with.",
    category="lexer",
)

LEXER_UNTERMINATED_RAW_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_RAW_STRING",
    message="Unterminated raw string literal.",
    hint='Close the pattern with a double quote, e.g. r"^abc$".',
    category="lexer",
)

LEXER_MALFORMED_NUMBER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_MALFORMED_NUMBER",
    message="Malformed number literal.",
    hint="Numbers look like 42, -7 or 3.14.",
    category="lexer",
)

LEXER_UNEXPECTED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNEXPECTED_CHARACTER",
    message="Unexpected character.",
    category="lexer",
)

LEXER_UNKNOWN_NAMESPACE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNKNOWN_NAMESPACE",
    message="Unknown `$` namespace.",
    hint="Use $env.NAME or $sys.KEY.",
    category="lexer",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    category="parser",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    category="parser",
)

PARSER_EXPECTED_VALUE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_VALUE",
    message="Expected a value",
    hint="Values must start on the same line as their key.",
    category="parser",
)

PARSER_UNCLOSED_BLOCK: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNCLOSED_BLOCK",
    message="Object block is missing its closing `end`.",
    hint="Close object blocks with `end`.",
    category="parser",
)

PARSER_UNCLOSED_CONDITIONAL: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNCLOSED_CONDITIONAL",
    message="Block conditional is missing its closing `endif`.",
    hint="Close if-blocks with `endif`, not `end`.",
    category="parser",
)

PARSER_MALFORMED_CONDITION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MALFORMED_CONDITION",
    message="Malformed condition.",
    hint='Conditions look like `name = "value"` or `$env.NAME = "1"`.',
    category="parser",
)

IMPORT_NOT_FOUND: Final[DiagnosticSpec] = DiagnosticSpec(
    code="IMPORT_NOT_FOUND",
    message="Could not load gathered file.",
    hint="Check that the file exists relative to the importing file.",
    category="import",
)

IMPORT_CYCLE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="IMPORT_CYCLE",
    message="Import cycle detected.",
    hint="Break the cycle by moving shared values into a separate file.",
    category="import",
)

RESOLVE_UNRESOLVED_REFERENCE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_UNRESOLVED_REFERENCE",
    message="Unresolved reference.",
    hint="Define the name before using it, or check for typos.",
    category="resolve",
)

RESOLVE_UNKNOWN_ALIAS: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_UNKNOWN_ALIAS",
    message="Unknown import alias.",
    category="resolve",
)

RESOLVE_REFERENCE_CYCLE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_REFERENCE_CYCLE",
    message="Reference cycle detected.",
    hint="A value cannot depend on itself.",
    category="resolve",
)

RESOLVE_UNKNOWN_SYS_KEY: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_UNKNOWN_SYS_KEY",
    message="Unknown $sys key.",
    hint=(
        "Available keys: os, hostname, kernel_version, os_version, cpu_arch, cpu_count, "
        "memory_total, memory_free, memory_used, uptime, product_name"
    ),
    category="resolve",
)

RESOLVE_TYPE_MISMATCH: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_TYPE_MISMATCH",
    message="Condition compares incompatible values.",
    hint="Compare numbers with numbers and strings with strings.",
    category="type",
)

REGEX_COMPILE_FAILED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="REGEX_COMPILE_FAILED",
    message="Invalid regex pattern.",
    hint="Check your regex syntax.",
    category="regex",
)

QUERY_NOT_FOUND: Final[DiagnosticSpec] = DiagnosticSpec(
    code="QUERY_NOT_FOUND",
    message="Path not found in configuration.",
    hint="Check that the path exists in your config file.",
    category="query",
)

QUERY_TYPE_MISMATCH: Final[DiagnosticSpec] = DiagnosticSpec(
    code="QUERY_TYPE_MISMATCH",
    message="Value has the wrong type.",
    category="query",
)

VALIDATION_INVALID_VALUE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="VALIDATION_INVALID_VALUE",
    message="Invalid configuration value.",
    category="validation",
)
