"""Import resolution, evaluation and session services."""

from runecfg.resolve.evaluator import Evaluator
from runecfg.resolve.imports import ImportResolver
from runecfg.resolve.services import (
    SYS_KEYS,
    Environment,
    FileLoader,
    FilesystemLoader,
    HostSystemInfo,
    InMemoryLoader,
    MappingEnvironment,
    OsEnvironment,
    ResolveServices,
    StaticSystemInfo,
    SystemInfo,
    canonical_path,
    format_bytes,
    format_uptime,
)
from runecfg.resolve.session import LocationKey, Namespace, ResolutionSession, ResolvedModule

__all__ = [
    "SYS_KEYS",
    "Environment",
    "Evaluator",
    "FileLoader",
    "FilesystemLoader",
    "HostSystemInfo",
    "ImportResolver",
    "InMemoryLoader",
    "LocationKey",
    "MappingEnvironment",
    "Namespace",
    "OsEnvironment",
    "ResolutionSession",
    "ResolveServices",
    "ResolvedModule",
    "StaticSystemInfo",
    "SystemInfo",
    "canonical_path",
    "format_bytes",
    "format_uptime",
]
