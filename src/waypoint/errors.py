"""Waypoint exception hierarchy.

Shared across Router, RouteTable, the chain composer, and the pipeline
so every module raises and catches the same types.
"""

from dataclasses import dataclass


class WaypointError(Exception):
    """Base for all waypoint-specific errors."""


class ConfigurationError(WaypointError):
    """Raised when router configuration or a route pattern is invalid.

    Surfaces at construction or registration time, never per request.
    """


class InvalidArgument(WaypointError, TypeError):
    """A registration call received arguments of the wrong shape.

    Raised synchronously by ``Router.create_route()`` (and everything that
    forwards to it) when the method is not a string or an unknown verb,
    the route spec is neither a pattern, a handler, nor a handler sequence,
    or the resulting handler chain is empty or holds a non-callable.
    """


class ChainError(WaypointError):
    """A handler broke the chain protocol, e.g. called ``next()`` twice."""


@dataclass(frozen=True, slots=True)
class HTTPError(WaypointError):
    """An error that maps directly to an HTTP status code.

    Raised while matching or by handlers. The dispatcher never catches
    these; the hosting pipeline's error stage decides what to do.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400: a captured path parameter could not be decoded."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)
