"""A minimal hosting pipeline for mounting routers.

The dispatcher's ``next`` leads into whatever the host runs after it.
``Pipeline`` is that host in its simplest form: an ordered list of
middleware composed per request, with an optional error stage::

    pipeline = Pipeline(on_error=render_error)
    pipeline.use(api.middleware()).use(not_found)

    ctx = RequestContext("GET", "/api/users/42")
    await pipeline(ctx)
"""

import logging
from collections.abc import Callable
from typing import Any, Self, TypeAlias

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Handler, Next
from waypoint.errors import HTTPError, InvalidArgument
from waypoint.middleware.compose import compose
from waypoint.middleware.legacy import convert, is_legacy

logger = logging.getLogger("waypoint.pipeline")

ErrorHandler: TypeAlias = Callable[[Any, Exception], Any]


class Pipeline:
    """Ordered middleware host.

    Legacy generator middleware is converted when added. Errors escaping
    the chain propagate unless *on_error* is given, in which case it is
    called with ``(ctx, exc)`` (sync or async) and its result returned.
    """

    __slots__ = ("_middleware", "on_error")

    def __init__(self, *, on_error: ErrorHandler | None = None) -> None:
        self._middleware: list[Handler] = []
        self.on_error = on_error

    @property
    def middleware(self) -> tuple[Handler, ...]:
        return tuple(self._middleware)

    def use(self, middleware: Handler) -> Self:
        """Append *middleware*. Returns the pipeline for chaining."""
        if not callable(middleware):
            msg = f"Pipeline.use() expects a callable, got {type(middleware).__name__}"
            raise InvalidArgument(msg)
        if is_legacy(middleware):
            name = getattr(middleware, "__name__", repr(middleware))
            logger.debug("Converting legacy middleware %s", name)
        self._middleware.append(convert(middleware))
        return self

    async def __call__(self, ctx: Any, next: Next | None = None) -> Any:
        chain = compose(self._middleware)
        try:
            return await chain(ctx, next)
        except Exception as exc:
            if self.on_error is None:
                raise
            if isinstance(exc, HTTPError):
                logger.debug("%d %s %s: %s", exc.status, ctx.method, ctx.path, exc.detail)
            else:
                logger.exception("Unhandled error for %s %s", ctx.method, ctx.path)
            return await invoke(self.on_error, ctx, exc)
