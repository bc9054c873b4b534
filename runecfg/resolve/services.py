"""Collaborators and service wiring for resolution sessions."""

from __future__ import annotations

import os
import platform
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Final, Protocol

from runecfg.values import canonical_key

SYS_KEYS: Final[frozenset[str]] = frozenset(
    {
        "os",
        "hostname",
        "kernel_version",
        "os_version",
        "cpu_arch",
        "cpu_count",
        "memory_total",
        "memory_free",
        "memory_used",
        "uptime",
        "product_name",
    }
)


def canonical_path(path: str | os.PathLike[str], base_directory: str | os.PathLike[str] | None = None) -> str:
    """Absolute, normalised form of `path` (`~/` expanded, relative to `base_directory`)."""
    candidate = Path(os.path.expanduser(os.fspath(path)))
    if not candidate.is_absolute():
        base = Path(base_directory) if base_directory is not None else Path.cwd()
        candidate = base / candidate
    return str(candidate.resolve())


# -------------------------
# File loading
# -------------------------


class FileLoader(Protocol):
    """Reads source text for a canonical path, raising `OSError` when it cannot."""

    def load(self, path: str) -> str: ...


@dataclass(frozen=True, slots=True)
class FilesystemLoader:
    encoding: str = "utf-8"

    def load(self, path: str) -> str:
        return Path(path).read_text(encoding=self.encoding)


@dataclass(frozen=True, slots=True)
class InMemoryLoader:
    """Loader over a fixed mapping of paths to source text, for tests and embedding."""

    files: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        normalized = {canonical_path(path): text for path, text in self.files.items()}
        object.__setattr__(self, "files", MappingProxyType(normalized))

    def load(self, path: str) -> str:
        try:
            return self.files[canonical_path(path)]
        except KeyError:
            raise FileNotFoundError(f"No such file: {path!r}") from None


# -------------------------
# Environment
# -------------------------


class Environment(Protocol):
    def lookup(self, name: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class OsEnvironment:
    """Reads the process environment at lookup time."""

    def lookup(self, name: str) -> str | None:
        return os.environ.get(name)


@dataclass(frozen=True, slots=True)
class MappingEnvironment:
    variables: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, name: str) -> str | None:
        return self.variables.get(name)


# -------------------------
# Host system information
# -------------------------


class SystemInfo(Protocol):
    """Answers `$sys` keys (canonical snake_case); `None` when the value is unavailable."""

    def lookup(self, key: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class StaticSystemInfo:
    values: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def lookup(self, key: str) -> str | None:
        return self.values.get(canonical_key(key))


class HostSystemInfo:
    """Queries the running host through `platform`, `os`, `socket` and `/proc`."""

    def lookup(self, key: str) -> str | None:
        match canonical_key(key):
            case "os":
                return _os_release().get("NAME") or platform.system() or None
            case "hostname":
                return socket.gethostname() or None
            case "kernel_version":
                return platform.release() or None
            case "os_version":
                return _os_release().get("VERSION_ID") or platform.mac_ver()[0] or platform.version() or None
            case "cpu_arch":
                return platform.machine() or None
            case "cpu_count":
                return str(os.cpu_count() or 1)
            case "memory_total":
                total = _memory_pages("SC_PHYS_PAGES")
                return format_bytes(total) if total is not None else None
            case "memory_free":
                free = _memory_pages("SC_AVPHYS_PAGES")
                return format_bytes(free) if free is not None else None
            case "memory_used":
                total = _memory_pages("SC_PHYS_PAGES")
                free = _memory_pages("SC_AVPHYS_PAGES")
                if total is None or free is None:
                    return None
                return format_bytes(max(total - free, 0))
            case "uptime":
                seconds = _uptime_seconds()
                return format_uptime(seconds) if seconds is not None else None
            case "product_name":
                return _read_first_line("/sys/class/dmi/id/product_name")
            case _:
                return None


def _os_release() -> dict[str, str]:
    try:
        return platform.freedesktop_os_release()
    except OSError:
        return {}


def _memory_pages(name: str) -> int | None:
    try:
        pages = os.sysconf(name)
        page_size = os.sysconf("SC_PAGE_SIZE")
    except (AttributeError, ValueError, OSError):
        return None
    if pages < 0 or page_size < 0:
        return None
    return pages * page_size


def _uptime_seconds() -> int | None:
    first = _read_first_line("/proc/uptime")
    if first is None:
        return None
    try:
        return int(float(first.split()[0]))
    except (IndexError, ValueError):
        return None


def _read_first_line(path: str) -> str | None:
    try:
        with open(path, encoding="utf-8") as handle:
            line = handle.readline().strip()
    except OSError:
        return None
    return line or None


def format_bytes(count: int) -> str:
    """Human-readable byte count with binary units (`8.00 GB`)."""
    value = float(count)
    for unit, scale in (("TB", 1024.0**4), ("GB", 1024.0**3), ("MB", 1024.0**2), ("KB", 1024.0)):
        if value >= scale:
            return f"{value / scale:.2f} {unit}"
    return f"{count} B"


def format_uptime(seconds: int) -> str:
    """`42 secs`, `5 mins`, `3 hrs, 1 min`."""

    def plural(amount: int, unit: str) -> str:
        return f"{amount} {unit}{'' if amount == 1 else 's'}"

    if seconds < 60:
        return plural(seconds, "sec")
    if seconds < 3600:
        return plural(seconds // 60, "min")
    return f"{plural(seconds // 3600, 'hr')}, {plural((seconds % 3600) // 60, 'min')}"


# -------------------------
# Service bundle
# -------------------------


@dataclass(frozen=True, slots=True)
class ResolveServices:
    """Collaborators injected into a resolution session."""

    loader: FileLoader = field(default_factory=FilesystemLoader)
    environment: Environment = field(default_factory=OsEnvironment)
    system: SystemInfo = field(default_factory=HostSystemInfo)
    base_directory: str | None = None

    def base_path(self) -> str:
        if self.base_directory is not None:
            return canonical_path(self.base_directory)
        return str(Path.cwd())
