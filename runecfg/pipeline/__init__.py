"""Pipeline entrypoints."""

from runecfg.pipeline.entrypoints import resolve_file, resolve_file_with_fallback, resolve_text

__all__ = [
    "resolve_file",
    "resolve_file_with_fallback",
    "resolve_text",
]
