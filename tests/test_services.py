import os
from dataclasses import replace

import pytest

from runecfg.resolve import (
    HostSystemInfo,
    InMemoryLoader,
    MappingEnvironment,
    ResolutionSession,
    StaticSystemInfo,
    canonical_path,
    format_bytes,
    format_uptime,
)

from tests._helpers import make_services


@pytest.mark.parametrize(
    ("count", "expected"),
    [
        (512, "512 B"),
        (2048, "2.00 KB"),
        (5 * 1024**2, "5.00 MB"),
        (8 * 1024**3, "8.00 GB"),
        (3 * 1024**4, "3.00 TB"),
    ],
)
def test_format_bytes(count: int, expected: str) -> None:
    assert format_bytes(count) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (1, "1 sec"),
        (42, "42 secs"),
        (60, "1 min"),
        (300, "5 mins"),
        (3660, "1 hr, 1 min"),
        (3 * 3600 + 120, "3 hrs, 2 mins"),
    ],
)
def test_format_uptime(seconds: int, expected: str) -> None:
    assert format_uptime(seconds) == expected


def test_host_system_info_answers_basic_keys() -> None:
    system = HostSystemInfo()

    assert system.lookup("cpu_count") == str(os.cpu_count() or 1)
    assert system.lookup("cpu-count") == system.lookup("cpu_count")
    assert system.lookup("not_a_key") is None


def test_static_system_info_accepts_kebab_keys() -> None:
    system = StaticSystemInfo({"kernel_version": "6.1"})

    assert system.lookup("kernel-version") == "6.1"
    assert system.lookup("os") is None


def test_in_memory_loader_normalises_paths() -> None:
    loader = InMemoryLoader({"/cfg/a/../b.rune": "x 1\n"})

    assert loader.load("/cfg/b.rune") == "x 1\n"
    with pytest.raises(FileNotFoundError):
        loader.load("/cfg/missing.rune")


def test_mapping_environment() -> None:
    environment = MappingEnvironment({"HOME": "/home/ada"})

    assert environment.lookup("HOME") == "/home/ada"
    assert environment.lookup("SHELL") is None


def test_canonical_path_joins_relative_paths() -> None:
    assert canonical_path("x/y.rune", "/cfg") == os.path.realpath("/cfg/x/y.rune")
    assert canonical_path("/abs/../z.rune", "/cfg") == os.path.realpath("/z.rune")


def test_session_caches_sys_values() -> None:
    calls: list[str] = []

    class RecordingSystem:
        def lookup(self, key: str) -> str | None:
            calls.append(key)
            return "linux"

    session = ResolutionSession(replace(make_services(), system=RecordingSystem()))

    session.resolve_source('a $sys.os\nb "$sys.os"\n')

    assert calls == ["os"]
    assert len(session.modules) == 0
