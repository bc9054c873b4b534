import pytest

from runecfg.diagnostics import RegexCompileError, TypeMismatchError, UnresolvedReferenceError
from runecfg.values import NULL, NumberValue, ObjectValue, StringValue

from tests._helpers import resolve


def resolve_error(source: str, error: type[Exception] = UnresolvedReferenceError, **kwargs):
    with pytest.raises(error) as excinfo:
        resolve(source, **kwargs)
    return excinfo.value


def test_namespaces_are_kept_apart() -> None:
    config = resolve(
        """
        @version "1.0"
        name "app"
        server:
          port 8080
        end
        """
    )

    assert dict(config.globals) == {"name": StringValue("app")}
    assert dict(config.metadata) == {"version": StringValue("1.0")}
    assert tuple(config.items) == ("server",)
    assert isinstance(config.items["server"], ObjectValue)
    assert config.get("server.port") == 8080


def test_kebab_and_snake_keys_are_equivalent() -> None:
    config = resolve(
        """
        log-dir "/var/log"
        server:
          log-level "info"
          path log_dir
        end
        """
    )

    assert config.get("server.log_level") == "info"
    assert config.get("server.log-level") == "info"
    assert config.get("server.path") == "/var/log"
    assert "log_dir" in config.globals


def test_null_and_none_are_the_same_literal() -> None:
    config = resolve(
        """
        a null
        b None
        """
    )

    assert config.globals["a"] is NULL
    assert config.globals["b"] is NULL


def test_forward_references_between_globals() -> None:
    config = resolve(
        """
        url host
        host "example.org"
        """
    )

    assert config.globals["url"] == StringValue("example.org")
    assert tuple(config.globals) == ("url", "host")


def test_items_can_reference_later_items() -> None:
    config = resolve(
        """
        client:
          target server.host
        end
        server:
          host "db"
        end
        """
    )

    assert config.get("client.target") == "db"


def test_reference_cycle_is_reported() -> None:
    error = resolve_error(
        """
        a b
        b a
        """
    )

    assert error.code == "RESOLVE_REFERENCE_CYCLE"
    assert "a -> b -> a" in error.diagnostic.message


def test_later_duplicate_binding_wins() -> None:
    config = resolve(
        """
        port 1
        port 2
        """
    )

    assert config.globals["port"] == NumberValue(2)


def test_sibling_references_see_earlier_fields() -> None:
    config = resolve(
        """
        server:
          host "localhost"
          url host
        end
        """
    )

    assert config.get("server.url") == "localhost"


def test_sibling_shadows_global() -> None:
    config = resolve(
        """
        host "global"
        server:
          host "local"
          url host
        end
        other:
          url host
        end
        """
    )

    assert config.get("server.url") == "local"
    assert config.get("other.url") == "global"


def test_unresolved_reference_reports_line() -> None:
    error = resolve_error(
        """
        server:
          port missing
        end
        """
    )

    assert error.code == "RESOLVE_UNRESOLVED_REFERENCE"
    assert error.kind == "resolve"
    assert error.line == 2
    assert "missing" in error.diagnostic.message


def test_block_conditional_picks_a_branch() -> None:
    source = """
        server:
          if $env.MODE = "prod":
            port 443
            tls true
          else:
            port 8080
            debug true
          endif
        end
        """

    prod = resolve(source, env={"MODE": "prod"})
    dev = resolve(source, env={"MODE": "dev"})

    assert prod.get("server.port") == 443
    assert prod.get("server.tls") is True
    assert not prod.has("server.debug")
    assert dev.get("server.port") == 8080
    assert not dev.has("server.tls")


def test_unchosen_branches_are_not_evaluated() -> None:
    config = resolve(
        """
        debug true
        server:
          if debug:
            level "trace"
          else:
            level missing_name
          endif
          mode if debug "dev" else also_missing
        end
        """
    )

    assert config.get("server.level") == "trace"
    assert config.get("server.mode") == "dev"


def test_inline_conditional_without_else_is_null() -> None:
    config = resolve(
        """
        level if verbose "trace"
        """
    )

    assert config.globals["level"] is NULL


def test_nested_conditionals() -> None:
    source = """
        app:
          if $env.A = "1":
            if $env.B = "1":
              mode "both"
            else:
              mode "a"
            endif
          endif
        end
        """

    assert resolve(source, env={"A": "1", "B": "1"}).get("app.mode") == "both"
    assert resolve(source, env={"A": "1"}).get("app.mode") == "a"
    assert not resolve(source).has("app.mode")


def test_unset_environment_variable_is_null() -> None:
    config = resolve(
        """
        home $env.HOME
        shell $env.SHELL
        """,
        env={"SHELL": "/bin/zsh"},
    )

    assert config.globals["home"] is NULL
    assert config.globals["shell"] == StringValue("/bin/zsh")


def test_unset_environment_variable_only_equals_null() -> None:
    config = resolve(
        """
        unset if $env.NOPE = null "yes" else "no"
        empty if $env.NOPE = "" "yes" else "no"
        """
    )

    assert config.globals["unset"] == StringValue("yes")
    assert config.globals["empty"] == StringValue("no")


def test_environment_compares_as_text() -> None:
    config = resolve(
        """
        workers if $env.COUNT = 4 "four" else "other"
        flag if $env.ON = true "on" else "off"
        """,
        env={"COUNT": "4", "ON": "true"},
    )

    assert config.globals["workers"] == StringValue("four")
    assert config.globals["flag"] == StringValue("on")


def test_numeric_comparison() -> None:
    config = resolve(
        """
        port 8080
        app:
          if port = 8080.0:
            standard true
          endif
        end
        """
    )

    assert config.get("app.standard") is True


def test_mismatched_comparison_raises() -> None:
    error = resolve_error(
        """
        port 8080
        app:
          if port = "8080":
            standard true
          endif
        end
        """,
        TypeMismatchError,
    )

    assert error.code == "RESOLVE_TYPE_MISMATCH"
    assert error.kind == "type"
    assert error.line == 3


def test_null_never_equals_a_value() -> None:
    config = resolve(
        """
        missing null
        result if missing = 0 "zero" else "null"
        """
    )

    assert config.globals["result"] == StringValue("null")


def test_presence_conditions() -> None:
    config = resolve(
        """
        debug false
        nothing null
        a if debug "present" else "absent"
        b if nothing "present" else "absent"
        c if undefined_name "present" else "absent"
        d if $env.HOME "present" else "absent"
        """,
        env={"HOME": "/home/ada"},
    )

    assert config.globals["a"] == StringValue("present")
    assert config.globals["b"] == StringValue("absent")
    assert config.globals["c"] == StringValue("absent")
    assert config.globals["d"] == StringValue("present")


def test_sys_values() -> None:
    config = resolve(
        """
        os $sys.os
        cpus $sys.cpu-count
        native if $sys.os = "linux" true else false
        """,
        system={"os": "linux", "cpu_count": "8"},
    )

    assert config.globals["os"] == StringValue("linux")
    assert config.globals["cpus"] == StringValue("8")
    assert config.get("native", root="globals") is True


def test_unknown_sys_key() -> None:
    error = resolve_error("gpu $sys.gpu\n")

    assert error.code == "RESOLVE_UNKNOWN_SYS_KEY"


def test_unavailable_sys_value() -> None:
    error = resolve_error("up $sys.uptime\n")

    assert error.code == "RESOLVE_UNRESOLVED_REFERENCE"


def test_string_interpolation() -> None:
    config = resolve(
        """
        greeting "hi $env.USER on $sys.os"
        folder "${env.USER}_files"
        blank "[$env.NOPE]"
        """,
        env={"USER": "ada"},
        system={"os": "linux"},
    )

    assert config.globals["greeting"] == StringValue("hi ada on linux")
    assert config.globals["folder"] == StringValue("ada_files")
    assert config.globals["blank"] == StringValue("[]")


def test_identical_patterns_share_one_compiled_value() -> None:
    config = resolve(
        """
        a r"^fire\\w+"
        b r"^fire\\w+"
        apps:
          browsers [r"^fire\\w+", "chromium"]
        end
        """
    )

    assert config.globals["a"] is config.globals["b"]
    assert config.get_value("apps.browsers").items[0] is config.globals["a"]


def test_invalid_pattern_reports_line() -> None:
    with pytest.raises(RegexCompileError) as excinfo:
        resolve(
            """
            ok r"^a"
            bad r"(a"
            """
        )

    assert excinfo.value.line == 2
    assert excinfo.value.pattern == "(a"


def test_dotted_paths_into_local_items() -> None:
    config = resolve(
        """
        server:
          tls:
            port 443
          end
        end
        client:
          port server.tls.port
        end
        """
    )

    assert config.get("client.port") == 443


def test_dotted_path_to_missing_key() -> None:
    error = resolve_error(
        """
        server:
          port 1
        end
        client:
          port server.nope
        end
        """
    )

    assert error.code == "RESOLVE_UNRESOLVED_REFERENCE"
    assert error.line == 5


def test_dotted_path_with_unknown_head() -> None:
    error = resolve_error("port nothing.port\n")

    assert error.code == "RESOLVE_UNKNOWN_ALIAS"


def test_metadata_can_reference_globals() -> None:
    config = resolve(
        """
        name "app"
        @title name
        """
    )

    assert config.metadata["title"] == StringValue("app")


def test_locations_are_recorded() -> None:
    config = resolve(
        """
        name "app"
        server:
          host "x"
        end
        """
    )

    location = config.location("server.host")
    assert location is not None
    assert location.line == 3
    assert location.line_text.strip() == 'host "x"'
    assert config.location("name", root="globals").line == 1
    assert config.location("nope") is None


def test_operand_order_does_not_change_the_outcome() -> None:
    config = resolve(
        """
        port 8080
        a if $env.DEBUG = "1" "debug" else "release"
        b if "1" = $env.DEBUG "debug" else "release"
        c if port = 8080 "x" else "y"
        d if 8080 = port "x" else "y"
        e if null = $env.NOPE "unset" else "set"
        """,
        env={"DEBUG": "1"},
    )

    assert config.globals["a"] == config.globals["b"] == StringValue("debug")
    assert config.globals["c"] == config.globals["d"] == StringValue("x")
    assert config.globals["e"] == StringValue("unset")


def test_mismatch_is_reported_in_either_order() -> None:
    for condition in ('port = "8080"', '"8080" = port'):
        error = resolve_error(f"port 8080\nx if {condition} 1 else 2\n", TypeMismatchError)
        assert error.code == "RESOLVE_TYPE_MISMATCH"
