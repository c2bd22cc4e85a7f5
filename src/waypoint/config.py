"""Router configuration.

RouterConfig is a frozen dataclass, immutable after creation. Changing
configuration means building a new one with ``merge()``; later values
win per key (shallow merge).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any

from waypoint.errors import ConfigurationError


def _no_options() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(prefix="/api", strict=True)

    Keys that are not fields are kept verbatim in ``compiler_options``
    for custom pattern compilers::

        RouterConfig().merge(delimiter=".").compiler_options  # {"delimiter": "."}
    """

    # Routing
    prefix: str = "/"
    legacy: bool = False  # Only meaningful when given to Router.middleware()

    # Pattern compiler options (passed through to the compiler untouched)
    sensitive: bool = False  # Case-sensitive matching
    strict: bool = False  # Trailing slash is significant
    end: bool = True  # Pattern must match the whole path
    compiler_options: Mapping[str, Any] = field(default_factory=_no_options)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiler_options", MappingProxyType(dict(self.compiler_options)))

    def merge(
        self,
        options: "RouterConfig | Mapping[str, Any] | None" = None,
        **overrides: Any,
    ) -> "RouterConfig":
        """Return a new config with *options* and *overrides* applied on top.

        A ``RouterConfig`` given as *options* contributes every field.
        Unrecognized keys are shallow-merged into ``compiler_options``.
        Raises ``ConfigurationError`` when ``prefix`` is not a string.
        """
        values: dict[str, Any] = {}
        if isinstance(options, RouterConfig):
            values.update(options.as_dict())
        elif options is not None:
            values.update(options)
        values.update(overrides)
        if not values:
            return self

        known = _field_names()
        updates = {key: value for key, value in values.items() if key in known}
        extra = {key: value for key, value in values.items() if key not in known}
        if extra or "compiler_options" in updates:
            updates["compiler_options"] = {
                **self.compiler_options,
                **updates.get("compiler_options", {}),
                **extra,
            }
        if not isinstance(updates.get("prefix", self.prefix), str):
            msg = f"Router prefix must be a string, got {type(updates['prefix']).__name__}"
            raise ConfigurationError(msg)
        return replace(self, **updates)

    def as_dict(self) -> dict[str, Any]:
        values = {name: getattr(self, name) for name in _field_names()}
        values["compiler_options"] = dict(self.compiler_options)
        return values


def _field_names() -> frozenset[str]:
    return frozenset(f.name for f in fields(RouterConfig))


def resolve_middleware_options(
    options: "bool | RouterConfig | Mapping[str, Any] | None",
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    """Normalize the argument of ``Router.middleware()`` into merge values.

    ``True``/``False`` is shorthand for ``{"legacy": ...}``. ``legacy``
    is always resolved to a bool: anything that is not a bool becomes
    ``False``, so a dispatcher is modern unless legacy is asked for.
    Compiler-specific keys pass through untouched.
    """
    values: dict[str, Any] = {}
    if isinstance(options, bool):
        values["legacy"] = options
    elif isinstance(options, RouterConfig):
        values.update(options.as_dict())
    elif isinstance(options, Mapping):
        values.update(options)
    elif options is not None:
        msg = (
            "middleware() options must be a bool, mapping or RouterConfig, "
            f"got {type(options).__name__}"
        )
        raise ConfigurationError(msg)
    values.update(overrides)

    legacy = values.get("legacy")
    values["legacy"] = legacy if isinstance(legacy, bool) else False
    return values
