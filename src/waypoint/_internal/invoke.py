"""Invoke helpers: call sync or async handlers uniformly.

Route handlers and continuations can be ``def`` or ``async def``. Any
code that calls a user-provided callable must handle both cases. This
module provides a single helper so the sync/async check lives in
exactly one place.

Usage::

    from waypoint._internal.invoke import invoke

    result = await invoke(handler, ctx, next)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: returns immediately, no await needed
        def stamp(ctx, next):
            ctx.state["seen"] = True
            return next()

        # async: returns coroutine, awaited automatically
        async def load(ctx, next):
            ctx.state["user"] = await fetch_user(ctx.params["id"])
            return await next()

    A sync handler that returns ``next()`` hands back an awaitable; it is
    awaited here so the downstream chain still runs.
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
