"""Tests for waypoint.config: RouterConfig and middleware option resolution."""

import pytest

from waypoint.config import RouterConfig, resolve_middleware_options
from waypoint.errors import ConfigurationError


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()

        assert cfg.prefix == "/"
        assert cfg.legacy is False
        assert cfg.sensitive is False
        assert cfg.strict is False
        assert cfg.end is True

    def test_override(self) -> None:
        cfg = RouterConfig(prefix="/api", strict=True)

        assert cfg.prefix == "/api"
        assert cfg.strict is True

    def test_frozen(self) -> None:
        cfg = RouterConfig()

        with pytest.raises(AttributeError):
            cfg.prefix = "/other"  # type: ignore[misc]


class TestMerge:
    def test_right_hand_side_wins(self) -> None:
        base = RouterConfig(prefix="/api", sensitive=True)
        merged = base.merge({"prefix": "/v2"})

        assert merged.prefix == "/v2"
        assert merged.sensitive is True
        assert base.prefix == "/api"

    def test_keywords_win_over_mapping(self) -> None:
        merged = RouterConfig().merge({"prefix": "/a"}, prefix="/b")
        assert merged.prefix == "/b"

    def test_config_contributes_every_field(self) -> None:
        merged = RouterConfig(prefix="/api", strict=True).merge(RouterConfig())
        assert merged == RouterConfig()

    def test_nothing_to_merge_returns_same(self) -> None:
        cfg = RouterConfig()
        assert cfg.merge() is cfg
        assert cfg.merge({}) is cfg

    def test_unrecognized_keys_kept_for_compiler(self) -> None:
        merged = RouterConfig().merge({"delimiter": "."}, prefix="/api")

        assert merged.prefix == "/api"
        assert merged.compiler_options == {"delimiter": "."}

    def test_compiler_options_merge_shallow(self) -> None:
        base = RouterConfig().merge(delimiter=".", encode=str)
        merged = base.merge({"delimiter": "-"})

        assert merged.compiler_options == {"delimiter": "-", "encode": str}
        assert base.compiler_options == {"delimiter": ".", "encode": str}

    def test_explicit_compiler_options_merged(self) -> None:
        base = RouterConfig(compiler_options={"a": 1})
        merged = base.merge(compiler_options={"b": 2})
        assert merged.compiler_options == {"a": 1, "b": 2}

    def test_compiler_options_read_only(self) -> None:
        options = {"delimiter": "."}
        cfg = RouterConfig(compiler_options=options)
        options["delimiter"] = "-"

        assert cfg.compiler_options == {"delimiter": "."}
        with pytest.raises(TypeError):
            cfg.compiler_options["delimiter"] = "-"  # type: ignore[index]

    def test_non_string_prefix_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="prefix must be a string"):
            RouterConfig().merge(prefix=42)

    def test_as_dict(self) -> None:
        assert RouterConfig(prefix="/x").as_dict() == {
            "prefix": "/x",
            "legacy": False,
            "sensitive": False,
            "strict": False,
            "end": True,
            "compiler_options": {},
        }


class TestResolveMiddlewareOptions:
    def test_none_means_modern(self) -> None:
        assert resolve_middleware_options(None, {}) == {"legacy": False}

    def test_bool_is_legacy_shorthand(self) -> None:
        assert resolve_middleware_options(True, {}) == {"legacy": True}
        assert resolve_middleware_options(False, {}) == {"legacy": False}

    def test_mapping_passes_through(self) -> None:
        values = resolve_middleware_options({"prefix": "/v2", "legacy": True}, {})
        assert values == {"prefix": "/v2", "legacy": True}

    def test_compiler_keys_pass_through(self) -> None:
        values = resolve_middleware_options({"delimiter": "."}, {})
        assert values == {"delimiter": ".", "legacy": False}

    def test_non_bool_legacy_becomes_false(self) -> None:
        assert resolve_middleware_options({"legacy": "yes"}, {})["legacy"] is False
        assert resolve_middleware_options({"legacy": 1}, {})["legacy"] is False

    def test_overrides_win(self) -> None:
        values = resolve_middleware_options({"prefix": "/a"}, {"prefix": "/b"})
        assert values["prefix"] == "/b"

    def test_router_config_contributes_fields(self) -> None:
        values = resolve_middleware_options(RouterConfig(prefix="/c", legacy=True), {})
        assert values["prefix"] == "/c"
        assert values["legacy"] is True

    def test_other_types_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="bool, mapping or RouterConfig"):
            resolve_middleware_options("legacy", {})  # type: ignore[arg-type]
