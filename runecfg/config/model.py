"""Resolved configuration and its query API."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeVar, cast, overload

from runecfg.config.export import dumps, export_document
from runecfg.config.query import MISMATCH, describe_expected, extract, find_value
from runecfg.diagnostics import (
    Diagnostic,
    QueryNotFoundError,
    QueryTypeError,
    SourceLocation,
    ValidationError,
    detached_diagnostic,
)
from runecfg.diagnostics.codes import (
    QUERY_NOT_FOUND,
    QUERY_TYPE_MISMATCH,
    VALIDATION_INVALID_VALUE,
    DiagnosticSpec,
)
from runecfg.resolve.session import LocationKey, Namespace
from runecfg.values import ObjectValue, Value, split_path

if TYPE_CHECKING:
    from runecfg.resolve.services import ResolveServices

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RuneConfig:
    """Immutable result of one resolution.

    Dotted-path queries run over `items` unless `root` says otherwise.
    """

    globals: Mapping[str, Value] = field(default_factory=lambda: MappingProxyType({}))
    items: Mapping[str, Value] = field(default_factory=lambda: MappingProxyType({}))
    metadata: Mapping[str, Value] = field(default_factory=lambda: MappingProxyType({}))
    source_path: str | None = None
    locations: Mapping[LocationKey, SourceLocation] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        services: ResolveServices | None = None,
        source_path: str | os.PathLike[str] | None = None,
    ) -> RuneConfig:
        from runecfg.pipeline import resolve_text

        return resolve_text(text, services=services, source_path=source_path)

    @classmethod
    def from_file(
        cls,
        path: str | os.PathLike[str],
        *,
        services: ResolveServices | None = None,
    ) -> RuneConfig:
        from runecfg.pipeline import resolve_file

        return resolve_file(path, services=services)

    # -------------------------
    # Queries
    # -------------------------

    def namespace(self, root: Namespace | str = Namespace.ITEMS) -> Mapping[str, Value]:
        match Namespace(root):
            case Namespace.GLOBALS:
                return self.globals
            case Namespace.ITEMS:
                return self.items
            case Namespace.METADATA:
                return self.metadata

    def get_value(self, path: str, *, root: Namespace | str = Namespace.ITEMS) -> Value:
        """Return the resolved value at `path` for structural inspection."""
        value = find_value(self.namespace(root), path)
        if value is None:
            raise QueryNotFoundError(
                self._diagnostic(
                    QUERY_NOT_FOUND,
                    path,
                    root,
                    message=f"Path '{path}' not found in configuration",
                ),
                path,
            )
        return value

    @overload
    def get(self, path: str, expected: None = None, *, root: Namespace | str = ...) -> Any: ...

    @overload
    def get(self, path: str, expected: type[T], *, root: Namespace | str = ...) -> T: ...

    def get(self, path: str, expected: type | None = None, *, root: Namespace | str = Namespace.ITEMS) -> Any:
        """Typed extraction; raises `QueryNotFoundError` or `QueryTypeError`."""
        value = self.get_value(path, root=root)
        converted = extract(value, expected)
        if converted is MISMATCH:
            raise QueryTypeError(
                self._diagnostic(
                    QUERY_TYPE_MISMATCH,
                    path,
                    root,
                    message=f"Expected {describe_expected(cast(type, expected))} at '{path}', found {value.kind}",
                ),
                path,
            )
        return converted

    def get_optional(
        self,
        path: str,
        expected: type | None = None,
        *,
        root: Namespace | str = Namespace.ITEMS,
    ) -> Any:
        """Like `get`, but absence returns `None`. Type mismatches still raise.

        Without `expected` the resolved `Value` itself is returned, so an explicit
        `null` comes back as `NULL` rather than `None`.
        """
        value = find_value(self.namespace(root), path)
        if value is None:
            return None
        if expected is None:
            return value
        return self.get(path, expected, root=root)

    def get_or(
        self,
        path: str,
        default: T,
        expected: type | None = None,
        *,
        root: Namespace | str = Namespace.ITEMS,
    ) -> T | Any:
        """Never raises: absence or a type mismatch yields `default`.

        When `expected` is omitted and `default` is not `None`, the default's type
        is used as the expected type.
        """
        value = find_value(self.namespace(root), path)
        if value is None:
            return default
        wanted = expected if expected is not None else (type(default) if default is not None else None)
        converted = extract(value, wanted)
        return default if converted is MISMATCH else converted

    def has(self, path: str, *, root: Namespace | str = Namespace.ITEMS) -> bool:
        return find_value(self.namespace(root), path) is not None

    def keys(self, path: str = "", *, root: Namespace | str = Namespace.ITEMS) -> tuple[str, ...]:
        """Keys of the object at `path` (or of the namespace itself for an empty path)."""
        if not split_path(path):
            return tuple(self.namespace(root))
        value = self.get_value(path, root=root)
        if not isinstance(value, ObjectValue):
            raise QueryTypeError(
                self._diagnostic(
                    QUERY_TYPE_MISMATCH,
                    path,
                    root,
                    message=f"Path '{path}' is not an object",
                    hint="Only objects have keys.",
                ),
                path,
            )
        return value.keys()

    def get_enum(
        self,
        path: str,
        allowed: Iterable[str],
        *,
        root: Namespace | str = Namespace.ITEMS,
    ) -> str:
        """String value that must case-insensitively equal one of `allowed`."""
        choices = tuple(allowed)
        value = self.get(path, str, root=root)
        if value.lower() not in {choice.lower() for choice in choices}:
            raise ValidationError(
                self._diagnostic(
                    VALIDATION_INVALID_VALUE,
                    path,
                    root,
                    message=f"Invalid value '{value}' for `{path}`",
                    hint=f"Expected one of: {', '.join(choices)}",
                )
            )
        return value

    def get_validated(
        self,
        path: str,
        predicate: Callable[[Any], bool],
        expected: type | None = None,
        *,
        valid_values: str | None = None,
        root: Namespace | str = Namespace.ITEMS,
    ) -> Any:
        """Typed extraction followed by `predicate`; a false result raises `ValidationError`."""
        value = self.get(path, expected, root=root)
        if not predicate(value):
            raise ValidationError(
                self._diagnostic(
                    VALIDATION_INVALID_VALUE,
                    path,
                    root,
                    message=f"Invalid value for `{path}`",
                    hint=f"Valid values are: {valid_values}" if valid_values else None,
                )
            )
        return value

    def location(self, path: str, *, root: Namespace | str = Namespace.ITEMS) -> SourceLocation | None:
        """Where the binding at `path` (or its nearest recorded ancestor) was written."""
        segments = split_path(path)
        namespace = Namespace(root)
        while segments:
            found = self.locations.get((namespace, segments))
            if found is not None:
                return found
            segments = segments[:-1]
        return None

    # -------------------------
    # Export
    # -------------------------

    def export(self) -> dict[str, dict[str, Any]]:
        return export_document(self.globals, self.items, self.metadata)

    def to_json(self, *, indent: int | None = 2) -> str:
        return dumps(self.export(), indent=indent)

    def _diagnostic(
        self,
        spec: DiagnosticSpec,
        path: str,
        root: Namespace | str,
        *,
        message: str,
        hint: str | None = None,
    ) -> Diagnostic:
        location = self.location(path, root=root)
        if location is None:
            return detached_diagnostic(spec, message=message, hint=hint, source_path=self.source_path)
        return detached_diagnostic(
            spec,
            message=message,
            hint=hint,
            line=location.line,
            line_text=location.line_text,
            source_path=location.source_path,
        )
