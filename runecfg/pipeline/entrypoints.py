"""Resolution entrypoints: source text or file in, `RuneConfig` out."""

from __future__ import annotations

import logging
import os

from runecfg.config import RuneConfig
from runecfg.diagnostics import ImportNotFoundError, detached_diagnostic
from runecfg.diagnostics.codes import IMPORT_NOT_FOUND
from runecfg.resolve import ResolutionSession, ResolvedModule, ResolveServices, canonical_path

log = logging.getLogger(__name__)


def resolve_text(
    text: str,
    *,
    services: ResolveServices | None = None,
    source_path: str | os.PathLike[str] | None = None,
) -> RuneConfig:
    """Resolve in-memory source.

    Without `source_path`, gathered files are looked up relative to the
    services' base directory (the working directory by default).
    """
    session = ResolutionSession(services)
    path = canonical_path(source_path, session.services.base_path()) if source_path is not None else None
    module = session.resolve_source(text, path)
    return _finish(session, module)


def resolve_file(
    path: str | os.PathLike[str],
    *,
    services: ResolveServices | None = None,
) -> RuneConfig:
    session = ResolutionSession(services)
    canonical = canonical_path(path, session.services.base_path())
    text = _load_root(session, canonical, os.fspath(path))
    return _finish(session, session.resolve_source(text, canonical))


def resolve_file_with_fallback(
    primary: str | os.PathLike[str],
    fallback: str | os.PathLike[str],
    *,
    services: ResolveServices | None = None,
) -> RuneConfig:
    """Resolve `primary`, or `fallback` when `primary` cannot be read.

    Only a missing or unreadable primary file triggers the fallback; errors inside
    a readable primary propagate unchanged.
    """
    session = ResolutionSession(services)
    base = session.services.base_path()
    primary_path = canonical_path(primary, base)
    try:
        text = _load_root(session, primary_path, os.fspath(primary))
        chosen = primary_path
    except ImportNotFoundError as primary_error:
        log.debug("Primary config %s unavailable, trying fallback %s", primary_path, os.fspath(fallback))
        fallback_path = canonical_path(fallback, base)
        try:
            text = session.services.loader.load(fallback_path)
        except OSError as exc:
            raise ImportNotFoundError(
                detached_diagnostic(
                    IMPORT_NOT_FOUND,
                    message=(
                        f"Failed to load config from primary path '{os.fspath(primary)}' "
                        f"or fallback path '{os.fspath(fallback)}': {exc.strerror or exc}"
                    ),
                    hint="Check that at least one of the config files exists.",
                    source_path=f"{primary_path} (fallback: {fallback_path})",
                )
            ) from primary_error
        chosen = fallback_path

    return _finish(session, session.resolve_source(text, chosen))


def _load_root(session: ResolutionSession, path: str, display: str) -> str:
    try:
        return session.services.loader.load(path)
    except OSError as exc:
        raise ImportNotFoundError(
            detached_diagnostic(
                IMPORT_NOT_FOUND,
                message=f"Failed to read file '{display}': {exc.strerror or exc}",
                hint="Check that the file exists and is readable.",
                source_path=path,
            )
        ) from exc


def _finish(session: ResolutionSession, module: ResolvedModule) -> RuneConfig:
    log.debug(
        "Resolution of %s finished: %d gathered files, %d patterns compiled, %d pattern cache hits",
        module.path or "<text>",
        len(session.modules) - (1 if module.path is not None else 0),
        len(session.patterns),
        session.patterns.hits,
    )
    return RuneConfig(
        globals=module.globals,
        items=module.items,
        metadata=module.metadata,
        source_path=module.path,
        locations=module.locations,
    )
