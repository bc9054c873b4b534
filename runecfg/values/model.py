"""Resolved value model."""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Final, TypeAlias

from runecfg.values.keys import canonical_key


class ValueKind(StrEnum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"
    PATTERN = "pattern"


@dataclass(frozen=True, slots=True)
class StringValue:
    value: str

    @property
    def kind(self) -> ValueKind:
        return ValueKind.STRING

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class NumberValue:
    value: int | float

    @property
    def kind(self) -> ValueKind:
        return ValueKind.NUMBER

    @property
    def is_integral(self) -> bool:
        return isinstance(self.value, int) or self.value.is_integer()

    def to_python(self) -> int | float:
        return self.value


@dataclass(frozen=True, slots=True)
class BoolValue:
    value: bool

    @property
    def kind(self) -> ValueKind:
        return ValueKind.BOOL

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class NullValue:
    @property
    def kind(self) -> ValueKind:
        return ValueKind.NULL

    def to_python(self) -> None:
        return None


NULL: Final[NullValue] = NullValue()


@dataclass(frozen=True, slots=True)
class PatternValue:
    """Compiled raw-string literal. Equality and hashing use the source text only."""

    source: str
    compiled: re.Pattern[str] = field(compare=False, repr=False)

    @property
    def kind(self) -> ValueKind:
        return ValueKind.PATTERN

    def matches(self, candidate: str) -> bool:
        """Unanchored search, so `r"^abc$"` must be anchored explicitly."""
        return self.compiled.search(candidate) is not None

    def to_python(self) -> re.Pattern[str]:
        return self.compiled


@dataclass(frozen=True, slots=True)
class ArrayValue:
    items: tuple[Value, ...]

    @property
    def kind(self) -> ValueKind:
        return ValueKind.ARRAY

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def matches(self, candidate: str) -> bool:
        """True when any element matches: patterns by search, strings by equality."""
        for item in self.items:
            match item:
                case PatternValue():
                    if item.matches(candidate):
                        return True
                case StringValue(value=value):
                    if value == candidate:
                        return True
        return False

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]


@dataclass(frozen=True, slots=True, eq=False)
class ObjectValue:
    """Ordered mapping of canonical keys to values."""

    entries: Mapping[str, Value]

    def __post_init__(self) -> None:
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    @property
    def kind(self) -> ValueKind:
        return ValueKind.OBJECT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ObjectValue):
            return NotImplemented
        return list(self.entries.items()) == list(other.entries.items())

    def __hash__(self) -> int:
        return hash(tuple(self.entries.items()))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and canonical_key(key) in self.entries

    def get(self, key: str) -> Value | None:
        return self.entries.get(canonical_key(key))

    def keys(self) -> tuple[str, ...]:
        return tuple(self.entries)

    def to_python(self) -> dict[str, Any]:
        return {key: value.to_python() for key, value in self.entries.items()}


Value: TypeAlias = StringValue | NumberValue | BoolValue | NullValue | ArrayValue | ObjectValue | PatternValue


def to_text(value: Value) -> str:
    """String form used for interpolation and `$env`/`$sys` comparisons."""
    match value:
        case StringValue(value=text):
            return text
        case BoolValue(value=flag):
            return "true" if flag else "false"
        case NumberValue(value=number):
            if isinstance(number, float) and number.is_integer():
                return str(int(number))
            return str(number)
        case NullValue():
            return ""
        case PatternValue(source=source):
            return source
        case ArrayValue(items=items):
            return ", ".join(to_text(item) for item in items)
        case ObjectValue():
            return str(value.to_python())


__all__ = [
    "NULL",
    "ArrayValue",
    "BoolValue",
    "NullValue",
    "NumberValue",
    "ObjectValue",
    "PatternValue",
    "StringValue",
    "Value",
    "ValueKind",
    "to_text",
]
