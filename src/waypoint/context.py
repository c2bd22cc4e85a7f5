"""Request context consumed and produced by the dispatcher.

The dispatcher reads ``method``, ``path`` and ``params`` and, on a
match, writes ``route`` and ``params``. Any object with those attributes
works; ``RequestContext`` is the plain default used by ``Pipeline``
and in tests.

Match results live here, on the per-request object, never on the shared
``Route``. Concurrent requests matching the same route therefore never
see each other's parameters.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from waypoint.routing.route import Route


class Context(Protocol):
    """Structural type of anything the dispatcher can route."""

    method: str
    path: str
    params: dict[str, Any]
    route: "Route | None"


@dataclass(slots=True)
class RequestContext:
    """A mutable, per-request context.

    Usage::

        ctx = RequestContext("GET", "/users/42")
        await pipeline(ctx)
        ctx.params        # {"id": "42"}
        ctx.state["body"] # whatever the handlers stored
    """

    method: str
    path: str
    params: dict[str, Any] = field(default_factory=dict)
    route: "Route | None" = None
    state: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.method = self.method.upper()
