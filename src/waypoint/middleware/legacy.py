"""Legacy (generator-based) handler convention.

Legacy handlers are generator functions taking ``(ctx, next)``. They
suspend by yielding::

    def legacy_handler(ctx, next):
        ctx.state["before"] = True
        yield next                      # run the rest of the chain
        user = yield fetch_user(ctx)    # await any awaitable
        a, b = yield [load_a(), load_b()]  # resolve concurrently
        return user

Yieldable values are awaitables, generators (driven as nested legacy
routines), and lists, tuples or dicts of those (resolved concurrently).
Anything else is thrown back into the generator as ``TypeError``; so is
any exception raised while resolving a yielded value.

``convert()`` adapts a legacy handler to the modern ``(ctx, next)``
coroutine convention and ``back()`` does the reverse. Both return their
argument unchanged when it already has the target shape, so applying
either one twice is harmless.
"""

import functools
import inspect
from collections.abc import Generator
from typing import Any, TypeAlias

import anyio

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Handler, Next

Routine: TypeAlias = Generator[Any, Any, Any]


def is_legacy(handler: Any) -> bool:
    """Return True if *handler* follows the generator convention."""
    if inspect.isgeneratorfunction(handler):
        return True
    call = getattr(handler, "__call__", None)
    return call is not None and inspect.isgeneratorfunction(call)


def convert(handler: Handler) -> Handler:
    """Adapt a legacy generator handler to the modern convention."""
    if not is_legacy(handler):
        return handler

    @functools.wraps(handler)
    async def modern(ctx: Any, next: Next) -> Any:
        return await drive(handler(ctx, _downstream(next)))

    return modern


def back(handler: Handler) -> Handler:
    """Adapt a modern handler to the legacy generator convention.

    The legacy host passes a yieldable as ``next``; it is resolved only
    when the modern handler awaits its own ``next()``.
    """
    if is_legacy(handler):
        return handler

    @functools.wraps(handler)
    def legacy(ctx: Any, next: Any) -> Routine:
        return (yield invoke(handler, ctx, functools.partial(resolve, next)))

    return legacy


def _downstream(next: Next) -> Routine:
    """Wrap a modern continuation as a yieldable that runs it lazily."""
    return (yield invoke(next))


async def drive(routine: Routine) -> Any:
    """Run a legacy generator to completion and return its return value."""
    value: Any = None
    error: Exception | None = None
    try:
        while True:
            try:
                if error is None:
                    yielded = routine.send(value)
                else:
                    yielded = routine.throw(error)
            except StopIteration as stop:
                return stop.value

            value, error = None, None
            try:
                value = await resolve(yielded)
            except Exception as exc:
                error = exc
    finally:
        routine.close()


async def resolve(value: Any) -> Any:
    """Resolve one yielded value to its result."""
    if inspect.isgenerator(value):
        return await drive(value)
    if inspect.isawaitable(value):
        return await value
    if isinstance(value, list | tuple):
        results = await _gather(dict(enumerate(value)))
        return [results[i] for i in range(len(value))]
    if isinstance(value, dict):
        return await _gather(value)
    msg = (
        "Legacy handlers may only yield awaitables, generators, or lists, "
        f"tuples and dicts of them; got {type(value).__name__}"
    )
    raise TypeError(msg)


async def _gather(pending: dict[Any, Any]) -> dict[Any, Any]:
    """Resolve every value of *pending* concurrently."""
    results: dict[Any, Any] = {}

    async def _resolve(key: Any, item: Any) -> None:
        results[key] = await resolve(item)

    try:
        async with anyio.create_task_group() as tg:
            for key, item in pending.items():
                tg.start_soon(_resolve, key, item)
    except ExceptionGroup as group:
        # Surface a lone failure as itself so the generator can catch it
        if len(group.exceptions) == 1:
            raise group.exceptions[0] from None
        raise

    return {key: results[key] for key in pending}
