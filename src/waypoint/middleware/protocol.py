"""Middleware protocol.

A route handler or pipeline middleware is any callable matching::

    async def handler(ctx: Context, next: Next) -> Any: ...

No base class required. The composer checks the shape, not the lineage.
``next`` takes no arguments; awaiting ``next()`` runs everything that
follows in the chain and returns its outcome.
"""

from typing import Any, Protocol

from waypoint._internal.types import Next
from waypoint.context import Context


class Middleware(Protocol):
    """Protocol for waypoint handlers and middleware.

    Accepts both functions and callable objects::

        # Function handler
        async def show_user(ctx: Context, next: Next) -> Any:
            ctx.state["body"] = f"user {ctx.params['id']}"
            return await next()

        # Class handler
        class Timing:
            async def __call__(self, ctx: Context, next: Next) -> Any:
                start = time.monotonic()
                try:
                    return await next()
                finally:
                    ctx.state["elapsed"] = time.monotonic() - start
    """

    async def __call__(self, ctx: Context, next: Next) -> Any: ...
