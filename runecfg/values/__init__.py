"""Resolved values, key canonicalisation and pattern compilation."""

from runecfg.values.keys import canonical_key, split_path
from runecfg.values.model import (
    NULL,
    ArrayValue,
    BoolValue,
    NullValue,
    NumberValue,
    ObjectValue,
    PatternValue,
    StringValue,
    Value,
    ValueKind,
    to_text,
)
from runecfg.values.pattern import PatternCache

__all__ = [
    "NULL",
    "ArrayValue",
    "BoolValue",
    "NullValue",
    "NumberValue",
    "ObjectValue",
    "PatternCache",
    "PatternValue",
    "StringValue",
    "Value",
    "ValueKind",
    "canonical_key",
    "split_path",
    "to_text",
]
