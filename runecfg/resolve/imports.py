"""`gather` directive resolution."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from runecfg.ast import Document, ImportDirective
from runecfg.diagnostics import ImportCycleError, ImportNotFoundError, diagnostic_at
from runecfg.diagnostics.codes import IMPORT_CYCLE, IMPORT_NOT_FOUND
from runecfg.resolve.services import canonical_path
from runecfg.values import canonical_key

if TYPE_CHECKING:
    from runecfg.resolve.session import ResolutionSession, ResolvedModule

log = logging.getLogger(__name__)


class ImportResolver:
    """Loads every gathered file of a document and binds it under its alias."""

    def __init__(self, session: ResolutionSession) -> None:
        self._session = session

    def gather(self, document: Document, directory: str) -> dict[str, ResolvedModule]:
        aliases: dict[str, ResolvedModule] = {}
        for directive in document.imports:
            aliases[canonical_key(directive.alias)] = self.load(directive, document, directory)
        return aliases

    def load(self, directive: ImportDirective, document: Document, directory: str) -> ResolvedModule:
        path = canonical_path(directive.path, directory)

        active = self._session.active_paths
        if path in active:
            chain = (*active[active.index(path) :], path)
            pretty = " -> ".join(os.path.basename(step) for step in chain)
            raise ImportCycleError(
                diagnostic_at(
                    IMPORT_CYCLE,
                    document.source_text,
                    directive.range,
                    source_path=document.source_path,
                    message=f"Import cycle detected: {pretty}",
                ),
                chain,
            )

        cached = self._session.cached_module(path)
        if cached is not None:
            log.debug("Reusing gathered module %s as %r", path, directive.alias)
            return cached

        try:
            text = self._session.services.loader.load(path)
        except OSError as exc:
            raise ImportNotFoundError(
                diagnostic_at(
                    IMPORT_NOT_FOUND,
                    document.source_text,
                    directive.range,
                    source_path=document.source_path,
                    message=f"Could not load gathered file {directive.path!r}: {exc.strerror or exc}",
                )
            ) from exc

        log.debug("Loaded gathered file %s (%d bytes) as %r", path, len(text), directive.alias)
        return self._session.resolve_source(text, path)
