import re

import pytest

from runecfg.config import RuneConfig
from runecfg.diagnostics import (
    QueryNotFoundError,
    QueryTypeError,
    TypeMismatchError,
    ValidationError,
)
from runecfg.values import NULL, ArrayValue, PatternValue

from tests._helpers import make_services, resolve

SOURCE = """
@schema "v2"
app_name "demo"
server:
  host "localhost"
  port 8080
  ratio 0.75
  timeout 80.0
  debug false
  log-level "Info"
  listeners [80, 443]
  upstreams:
    primary "10.0.0.1"
  end
end
rules:
  browsers [r"^fire", r"chrom(e|ium)", "epiphany"]
  single r"^term"
  servers [
    "alpha"
    "beta"
  ]
end
"""


@pytest.fixture
def config() -> RuneConfig:
    return resolve(SOURCE)


def test_typed_gets(config: RuneConfig) -> None:
    assert config.get("server.host", str) == "localhost"
    assert config.get("server.port", int) == 8080
    assert config.get("server.ratio", float) == 0.75
    assert config.get("server.port", float) == 8080.0
    assert config.get("server.debug", bool) is False
    assert config.get("server.listeners", list) == [80, 443]
    assert config.get("server.upstreams", dict) == {"primary": "10.0.0.1"}
    assert config.get("server.upstreams.primary") == "10.0.0.1"


def test_integral_float_reads_as_int(config: RuneConfig) -> None:
    assert config.get("server.timeout", int) == 80
    with pytest.raises(QueryTypeError):
        config.get("server.ratio", int)


def test_missing_path(config: RuneConfig) -> None:
    with pytest.raises(QueryNotFoundError) as excinfo:
        config.get("server.nope", str)

    error = excinfo.value
    assert error.path == "server.nope"
    assert error.code == "QUERY_NOT_FOUND"
    assert error.kind == "query"


def test_type_mismatch_points_at_binding(config: RuneConfig) -> None:
    with pytest.raises(QueryTypeError) as excinfo:
        config.get("server.host", int)

    error = excinfo.value
    assert isinstance(error, TypeMismatchError)
    assert error.path == "server.host"
    assert error.line == 4
    assert "Expected int" in error.diagnostic.message
    assert "string" in error.diagnostic.message


def test_get_optional(config: RuneConfig) -> None:
    assert config.get_optional("server.missing", str) is None
    assert config.get_optional("server.host", str) == "localhost"
    with pytest.raises(QueryTypeError):
        config.get_optional("server.host", bool)


def test_get_or(config: RuneConfig) -> None:
    assert config.get_or("server.missing", 10) == 10
    assert config.get_or("server.port", 10) == 8080
    assert config.get_or("server.host", 10) == 10
    assert config.get_or("server.host", None) == "localhost"
    assert config.get_or("server.port", "x", int) == 8080


def test_get_value_for_structural_inspection(config: RuneConfig) -> None:
    browsers = config.get_value("rules.browsers")

    assert isinstance(browsers, ArrayValue)
    assert browsers.matches("firefox")
    assert browsers.matches("chromium")
    assert browsers.matches("epiphany")
    assert not browsers.matches("lynx")


def test_single_pattern_value(config: RuneConfig) -> None:
    single = config.get("rules.single", PatternValue)

    assert single.matches("terminal")
    compiled = config.get("rules.single", re.Pattern)
    assert compiled.search("xterm") is None


def test_has_and_keys(config: RuneConfig) -> None:
    assert config.has("server.log_level")
    assert config.has("server.log-level")
    assert not config.has("server.nope")
    assert not config.has("server.host.deeper")
    assert config.keys() == ("server", "rules")
    assert config.keys("server.upstreams") == ("primary",)
    with pytest.raises(QueryTypeError):
        config.keys("server.port")


def test_get_enum_is_case_insensitive(config: RuneConfig) -> None:
    assert config.get_enum("server.log-level", ["debug", "info", "warn"]) == "Info"

    with pytest.raises(ValidationError) as excinfo:
        config.get_enum("server.log-level", ["debug", "warn"])

    error = excinfo.value
    assert error.kind == "validation"
    assert error.diagnostic.hint == "Expected one of: debug, warn"


def test_get_validated(config: RuneConfig) -> None:
    assert config.get_validated("server.port", lambda port: 0 < port < 65536, int) == 8080

    with pytest.raises(ValidationError) as excinfo:
        config.get_validated("server.port", lambda port: port < 1024, int, valid_values="0-1023")

    assert excinfo.value.diagnostic.hint == "Valid values are: 0-1023"
    assert excinfo.value.line == 5


def test_other_namespaces(config: RuneConfig) -> None:
    assert config.get("app_name", str, root="globals") == "demo"
    assert config.get("schema", str, root="metadata") == "v2"
    assert not config.has("app_name")


def test_array_index_segments(config: RuneConfig) -> None:
    assert config.get("rules.servers.1") == "beta"
    assert config.get("server.listeners.0", int) == 80
    assert not config.has("rules.servers.5")


def test_from_text_classmethod() -> None:
    config = RuneConfig.from_text('app:\n  name "x"\nend\n', services=make_services())

    assert config.get("app.name") == "x"
    assert config.source_path is None


def test_get_optional_keeps_null_apart_from_absence() -> None:
    config = resolve(
        """
        app:
          key null
        end
        """
    )

    assert config.get_optional("app.key") is NULL
    assert config.get_optional("app.nope") is None
    with pytest.raises(QueryTypeError):
        config.get_optional("app.key", str)
