"""Handler chain composition.

``compose()`` turns an ordered sequence of handlers into one callable.
Each handler receives the context and a ``next`` continuation; nothing
downstream runs unless the handler calls it. A failure anywhere in the
chain propagates out of the composed callable unchanged.
"""

from collections.abc import Awaitable, Callable, Iterable
from functools import partial
from typing import Any, TypeAlias

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Handler, Next
from waypoint.errors import ChainError, InvalidArgument

Chain: TypeAlias = Callable[..., Awaitable[Any]]


def compose(handlers: Iterable[Handler]) -> Chain:
    """Compose *handlers* into ``chain(ctx, next=None)``.

    Handlers run strictly in order. When the last handler calls ``next()``
    the optional outer *next* continuation runs; without one, ``next()``
    resolves to ``None``. Handlers may be sync or async. Calling ``next()``
    twice from the same handler raises ``ChainError``.
    """
    chain = tuple(handlers)
    for handler in chain:
        if not callable(handler):
            msg = f"Handler chain must contain callables, got {type(handler).__name__}"
            raise InvalidArgument(msg)

    async def composed(ctx: Any, next: Next | None = None) -> Any:
        index = -1

        async def dispatch(i: int) -> Any:
            nonlocal index
            if i <= index:
                msg = "next() called multiple times"
                raise ChainError(msg)
            index = i

            if i == len(chain):
                if next is None:
                    return None
                return await invoke(next)
            return await invoke(chain[i], ctx, partial(dispatch, i + 1))

        return await dispatch(0)

    return composed
