"""Path lookup and typed extraction over resolved values."""

import re
from collections.abc import Mapping
from typing import Any, Final

from runecfg.values import (
    ArrayValue,
    BoolValue,
    NullValue,
    NumberValue,
    ObjectValue,
    PatternValue,
    StringValue,
    Value,
    split_path,
)

MISMATCH: Final = object()

_VALUE_CLASSES: Final[tuple[type, ...]] = (
    StringValue,
    NumberValue,
    BoolValue,
    NullValue,
    ArrayValue,
    ObjectValue,
    PatternValue,
)


def find_value(root: Mapping[str, Value], path: str) -> Value | None:
    """Walk a dotted path from a namespace mapping.

    Segments are canonicalised, so `log-level` and `log_level` are the same key.
    Integer segments index into arrays (`servers.0.host`).
    """
    segments = split_path(path)
    if not segments:
        return None

    current: Value | None = root.get(segments[0])
    for segment in segments[1:]:
        match current:
            case ObjectValue():
                current = current.get(segment)
            case ArrayValue(items=items) if segment.isdigit() and int(segment) < len(items):
                current = items[int(segment)]
            case _:
                return None
        if current is None:
            return None
    return current


def extract(value: Value, expected: type | None) -> Any:
    """Convert `value` to `expected`, or return `MISMATCH`.

    `None` means "whatever Python type the value naturally has".
    """
    if expected is None:
        return value.to_python()

    if expected in _VALUE_CLASSES:
        return value if isinstance(value, expected) else MISMATCH

    match value:
        case StringValue(value=text) if expected is str:
            return text
        case BoolValue(value=flag) if expected is bool:
            return flag
        case NumberValue(value=number) if expected is int:
            if isinstance(number, int):
                return number
            return int(number) if number.is_integer() else MISMATCH
        case NumberValue(value=number) if expected is float:
            return float(number)
        case ArrayValue() if expected in (list, tuple):
            return expected(value.to_python())
        case ObjectValue() if expected is dict:
            return value.to_python()
        case PatternValue(compiled=compiled) if expected is re.Pattern:
            return compiled
        case _:
            return MISMATCH


def describe_expected(expected: type) -> str:
    return "pattern" if expected is re.Pattern else expected.__name__
