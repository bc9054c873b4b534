"""Text positions."""

from runecfg.text.text import (
    ZERO,
    LineColumn,
    LineIndex,
    TextRange,
    TextSize,
)

__all__ = [
    "ZERO",
    "LineColumn",
    "LineIndex",
    "TextRange",
    "TextSize",
]
