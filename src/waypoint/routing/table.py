"""Ordered route table with first-match-wins lookup."""

from collections.abc import Iterator, Mapping
from typing import Any

from waypoint.routing.route import Route, RouteMatch


class RouteTable:
    """Routes in registration order. Earlier routes take precedence.

    Duplicate (method, pattern) pairs are allowed; the first one wins.
    Appends are expected during setup only. Iteration walks a snapshot,
    so a late append never disturbs a lookup in progress.
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: list[Route] = []

    def append(self, route: Route) -> None:
        self._routes.append(route)

    def snapshot(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def match(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> RouteMatch | None:
        """Return the first route matching *method* and *path*, or ``None``."""
        method = method.upper()
        for route in self:
            if route.method != method:
                continue
            found = route.match(path, params)
            if found is not None:
                return RouteMatch(route=route, params=found)
        return None

    def __iter__(self) -> Iterator[Route]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return len(self._routes)

    def __getitem__(self, index: int) -> Route:
        return self._routes[index]
