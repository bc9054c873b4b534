"""Resolution session: per-call caches, import stack and resolved modules."""

from __future__ import annotations

from typing import TypeAlias

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from runecfg.diagnostics import SourceLocation
from runecfg.parser import parse_text
from runecfg.resolve.services import ResolveServices
from runecfg.values import PatternCache, Value, canonical_key

log = logging.getLogger(__name__)


class Namespace(StrEnum):
    GLOBALS = "globals"
    ITEMS = "items"
    METADATA = "metadata"


LocationKey: TypeAlias = tuple[Namespace, tuple[str, ...]]


@dataclass(frozen=True, slots=True)
class ResolvedModule:
    """Fully evaluated namespaces of one document."""

    path: str | None
    globals: Mapping[str, Value]
    items: Mapping[str, Value]
    metadata: Mapping[str, Value]
    locations: Mapping[LocationKey, SourceLocation]

    def member(self, name: str) -> Value | None:
        """Look `name` up for `alias.name` references: items first, then globals."""
        key = canonical_key(name)
        if key in self.items:
            return self.items[key]
        return self.globals.get(key)


class ResolutionSession:
    """Owns everything shared while one top-level resolution runs.

    Nothing here outlives the call that created it.
    """

    def __init__(self, services: ResolveServices | None = None) -> None:
        self._services = services or ResolveServices()
        self._patterns = PatternCache()
        self._modules: dict[str, ResolvedModule] = {}
        self._stack: list[str] = []
        self._sys_values: dict[str, str | None] = {}

    @property
    def services(self) -> ResolveServices:
        return self._services

    @property
    def patterns(self) -> PatternCache:
        return self._patterns

    @property
    def active_paths(self) -> tuple[str, ...]:
        """Canonical paths currently being resolved, outermost first."""
        return tuple(self._stack)

    @property
    def modules(self) -> Mapping[str, ResolvedModule]:
        return self._modules

    def cached_module(self, path: str) -> ResolvedModule | None:
        return self._modules.get(path)

    def sys_value(self, key: str) -> str | None:
        if key not in self._sys_values:
            self._sys_values[key] = self._services.system.lookup(key)
        return self._sys_values[key]

    def resolve_source(self, text: str, path: str | None = None) -> ResolvedModule:
        """Parse, gather and evaluate one document.

        `path` must already be canonical; it is pushed on the import stack while
        the document's own imports are resolved.
        """
        from runecfg.resolve.evaluator import Evaluator
        from runecfg.resolve.imports import ImportResolver

        document = parse_text(text, source_path=path)
        directory = os.path.dirname(path) if path is not None else self._services.base_path()

        if path is not None:
            self._stack.append(path)
        try:
            aliases = ImportResolver(self).gather(document, directory)
            module = Evaluator(document, aliases, self).evaluate()
        finally:
            if path is not None:
                self._stack.pop()

        if path is not None:
            self._modules[path] = module
        log.debug(
            "Resolved %s: %d globals, %d items, %d metadata",
            path or "<text>",
            len(module.globals),
            len(module.items),
            len(module.metadata),
        )
        return module
