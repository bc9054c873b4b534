"""Diagnostics helpers."""

from __future__ import annotations

from runecfg.diagnostics.diagnostic import Diagnostic


def format_diagnostic(diagnostic: Diagnostic, *, with_hint: bool = True) -> str:
    """Render a diagnostic the way it is shown to humans.

    ```text
    Error [REGEX_COMPILE_FAILED]: Invalid regex pattern: unterminated character set
      --> config.rune:15:9
      | pattern r"[a-z"
    Hint: Check your regex syntax.
    ```
    """
    label = "Error" if diagnostic.severity == "error" else "Warning"
    lines = [f"{label} [{diagnostic.code}]: {diagnostic.message}"]

    if diagnostic.line > 0:
        where = diagnostic.source_path or "<memory>"
        lines.append(f"  --> {where}:{diagnostic.line}:{diagnostic.column}")
        lines.append(f"  | {diagnostic.line_text}")
    elif diagnostic.source_path:
        lines.append(f"  --> {diagnostic.source_path}")

    if with_hint and diagnostic.hint:
        lines.append(f"Hint: {diagnostic.hint}")
    return "\n".join(lines)
