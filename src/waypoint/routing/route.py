"""Route, RouteBinding and RouteMatch.

A ``Route`` is created once per registration and lives as long as its
router. Everything about it is fixed except its binding (prefix, full
path, matcher), which only changes through ``Route.rebind()``.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from waypoint._internal.types import Handler, Matcher
from waypoint.middleware.compose import Chain, compose
from waypoint.routing.pattern import join_path

# HTTP verbs accepted at registration, in the order verb methods are listed
METHODS: tuple[str, ...] = (
    "GET",
    "POST",
    "PUT",
    "DELETE",
    "PATCH",
    "HEAD",
    "OPTIONS",
    "TRACE",
    "CONNECT",
)

DEFAULT_METHOD = "GET"


@dataclass(frozen=True, slots=True)
class RouteBinding:
    """Where a route currently lives: prefix, full path and its matcher.

    Always built as a unit so the three can never disagree.
    """

    prefix: str
    path: str
    matcher: Matcher

    @classmethod
    def create(cls, prefix: str, pattern: str, compile: Callable[[str], Matcher]) -> "RouteBinding":
        path = join_path(prefix, pattern)
        return cls(prefix=prefix, path=path, matcher=compile(path))


class Route:
    """One (method, pattern, handler chain) registration.

    ``handlers`` holds modern-convention callables only; legacy handlers
    are converted before a Route is built. ``chain`` is the composed
    handler sequence, built once.
    """

    __slots__ = ("_binding", "_chain", "_handlers", "_method", "_pattern")

    def __init__(
        self,
        method: str,
        pattern: str,
        handlers: tuple[Handler, ...],
        binding: RouteBinding,
    ) -> None:
        self._method = method
        self._pattern = pattern
        self._handlers = handlers
        self._chain = compose(handlers)
        self._binding = binding

    @property
    def method(self) -> str:
        return self._method

    @property
    def pattern(self) -> str:
        """The pattern as registered, without prefix."""
        return self._pattern

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers

    @property
    def chain(self) -> Chain:
        return self._chain

    @property
    def binding(self) -> RouteBinding:
        return self._binding

    @property
    def prefix(self) -> str:
        return self._binding.prefix

    @property
    def path(self) -> str:
        """Full path: prefix joined with the pattern."""
        return self._binding.path

    @property
    def matcher(self) -> Matcher:
        return self._binding.matcher

    def match(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        """Match *path* against the current binding.

        Returns a new params dict (possibly empty) or ``None``.
        """
        return self._binding.matcher(path, params)

    def rebind(self, prefix: str, compile: Callable[[str], Matcher]) -> None:
        """Move the route under *prefix*, recompiling its matcher.

        The new binding is built first and swapped in with a single
        assignment. Callers serialize rebinds; see ``Router.rebind()``.
        """
        self._binding = RouteBinding.create(prefix, self._pattern, compile)

    def __repr__(self) -> str:
        return f"Route({self._method!r}, {self.path!r}, handlers={len(self._handlers)})"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route lookup."""

    route: Route
    params: dict[str, Any]
