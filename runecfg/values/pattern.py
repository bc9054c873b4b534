"""Raw-string pattern compilation."""

import logging
import re

from runecfg.diagnostics import RegexCompileError, detached_diagnostic, diagnostic_at
from runecfg.diagnostics.codes import REGEX_COMPILE_FAILED
from runecfg.text import TextRange
from runecfg.values.model import PatternValue

log = logging.getLogger(__name__)


class PatternCache:
    """Session-scoped memo of compiled raw strings, keyed by exact source text."""

    def __init__(self) -> None:
        self._patterns: dict[str, PatternValue] = {}
        self._hits = 0

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, source: object) -> bool:
        return source in self._patterns

    @property
    def hits(self) -> int:
        return self._hits

    def compile(
        self,
        source: str,
        *,
        source_text: str | None = None,
        range: TextRange | None = None,
        source_path: str | None = None,
    ) -> PatternValue:
        cached = self._patterns.get(source)
        if cached is not None:
            self._hits += 1
            return cached

        try:
            compiled = re.compile(source)
        except re.error as exc:
            message = f"Invalid regex pattern: {exc.msg}"
            if source_text is not None and range is not None:
                diagnostic = diagnostic_at(
                    REGEX_COMPILE_FAILED,
                    source_text,
                    range,
                    source_path=source_path,
                    message=message,
                )
            else:
                diagnostic = detached_diagnostic(REGEX_COMPILE_FAILED, message=message, source_path=source_path)
            raise RegexCompileError(diagnostic, source) from exc

        pattern = PatternValue(source=source, compiled=compiled)
        self._patterns[source] = pattern
        log.debug("Compiled pattern %r", source)
        return pattern
