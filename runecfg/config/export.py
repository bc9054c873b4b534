"""Export of resolved namespaces to plain data and JSON."""

import json
from collections.abc import Mapping
from typing import Any

from runecfg.values import (
    ArrayValue,
    BoolValue,
    NullValue,
    NumberValue,
    ObjectValue,
    PatternValue,
    StringValue,
    Value,
)


def export_value(value: Value) -> Any:
    """JSON-ready form of a value; patterns become their source text."""
    match value:
        case StringValue(value=text):
            return text
        case NumberValue(value=number):
            return number
        case BoolValue(value=flag):
            return flag
        case NullValue():
            return None
        case PatternValue(source=source):
            return source
        case ArrayValue(items=items):
            return [export_value(item) for item in items]
        case ObjectValue(entries=entries):
            return export_namespace(entries)


def export_namespace(entries: Mapping[str, Value]) -> dict[str, Any]:
    return {key: export_value(value) for key, value in entries.items()}


def export_document(
    globals: Mapping[str, Value],
    items: Mapping[str, Value],
    metadata: Mapping[str, Value],
) -> dict[str, dict[str, Any]]:
    return {
        "globals": export_namespace(globals),
        "items": export_namespace(items),
        "metadata": export_namespace(metadata),
    }


def dumps(document: Mapping[str, Any], *, indent: int | None = 2) -> str:
    return json.dumps(document, indent=indent, ensure_ascii=False)
