"""Router: route registration and the dispatch middleware.

Usage::

    router = Router(prefix="/api")

    router.get("/users/:id", show_user)
    router.add_route("GET /users", list_users)
    router.add_route("POST", "/users", [authenticate, create_user])

    pipeline.use(router.middleware())

Thread safety:
    Registration happens at startup, before dispatch begins. Dispatch
    never writes to a Route except to rebind it to a changed prefix,
    and that goes through ``_lock`` with a double check so exactly one
    thread recompiles each route.
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any, Self

from waypoint._internal.invoke import invoke
from waypoint._internal.types import Compiler, Handler, Matcher, Next
from waypoint.config import RouterConfig, resolve_middleware_options
from waypoint.errors import InvalidArgument
from waypoint.middleware.legacy import back, convert
from waypoint.routing.pattern import compile_pattern
from waypoint.routing.route import DEFAULT_METHOD, METHODS, Route, RouteBinding, RouteMatch
from waypoint.routing.table import RouteTable

logger = logging.getLogger("waypoint.routing")


class Router:
    """Ordered route registry and dispatcher.

    *config* and keyword *options* are merged over ``RouterConfig()``,
    later values winning per key. *compiler* turns a full path into a
    matcher; it receives the router config and may read any of its
    pattern options, including unrecognized keys, which are kept verbatim
    in ``config.compiler_options``.
    """

    __slots__ = ("_compiler", "_dispatchers", "_lock", "_table", "config")

    def __init__(
        self,
        config: RouterConfig | Mapping[str, Any] | None = None,
        /,
        *,
        compiler: Compiler = compile_pattern,
        **options: Any,
    ) -> None:
        self.config: RouterConfig = RouterConfig().merge(config, **options)
        self._compiler = compiler
        self._table = RouteTable()
        self._lock = threading.Lock()
        self._dispatchers = 0

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes in match-priority order."""
        return self._table.snapshot()

    # -- Registration --

    def create_route(self, method: str, route: Any = None, /, *handlers: Any) -> Route:
        """Build a Route without adding it to the table.

        *method* is a verb (``"GET"``) or a verb and pattern
        (``"GET /users"``); an empty verb means GET. *route* is the
        pattern or, when the pattern came with *method*, the first
        handler or a sequence of handlers. Remaining arguments are
        handlers; lists and tuples among them are flattened one level.

        All of these build the same route::

            router.create_route("GET", "/x", h1, h2)
            router.create_route("GET /x", [h1, h2])
            router.create_route("GET /x", h1, h2)
        """
        if not isinstance(method, str):
            msg = f".create_route: expect `method` to be a string, got {type(method).__name__}"
            raise InvalidArgument(msg)

        verb, _, candidate = method.partition(" ")
        verb = (verb or DEFAULT_METHOD).upper()
        if verb not in METHODS:
            msg = f".create_route: unknown HTTP method {verb!r}"
            raise InvalidArgument(msg)

        chain = _flatten(handlers)
        if isinstance(route, list | tuple):
            chain = [*_flatten(route), *chain]
            route = candidate or None
        elif callable(route):
            chain = [route, *chain]
            route = candidate or None

        if not isinstance(route, str):
            msg = (
                ".create_route: expect `route` to be a string, a handler or a "
                f"sequence of handlers, got {type(route).__name__}"
            )
            raise InvalidArgument(msg)
        if not chain:
            msg = f".create_route: {verb} {route} needs at least one handler"
            raise InvalidArgument(msg)

        binding = RouteBinding.create(self.config.prefix, route, self._compile)
        return Route(verb, route, tuple(convert(fn) for fn in chain), binding)

    def add_route(self, method: str, route: Any = None, /, *handlers: Any) -> Self:
        """Create a route and append it to the table. Returns the router.

        Same arguments as ``create_route()``. Duplicates are allowed; the
        earliest registration wins at dispatch.
        """
        created = self.create_route(method, route, *handlers)
        self._table.append(created)
        logger.debug(
            "Registered %s %s (%d handlers)", created.method, created.path, len(created.handlers)
        )
        return self

    def load_methods(self) -> Self:
        """Kept for API parity: verb methods are always available."""
        return self

    def get(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("GET", route, *handlers)

    def post(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("POST", route, *handlers)

    def put(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("PUT", route, *handlers)

    def delete(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("DELETE", route, *handlers)

    def patch(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("PATCH", route, *handlers)

    def head(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("HEAD", route, *handlers)

    def options(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("OPTIONS", route, *handlers)

    def trace(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("TRACE", route, *handlers)

    def connect(self, route: Any = None, /, *handlers: Any) -> Self:
        return self.add_route("CONNECT", route, *handlers)

    # ``del`` is a keyword, so the short alias gets a trailing underscore
    del_ = delete

    GET = get
    POST = post
    PUT = put
    DELETE = delete
    PATCH = patch
    HEAD = head
    OPTIONS = options
    TRACE = trace
    CONNECT = connect

    # -- Lookup and configuration --

    def match(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> RouteMatch | None:
        """Return the first matching route and its params, or ``None``."""
        for route in self._table:
            self._ensure_bound(route)
        return self._table.match(method, path, params)

    def rebind(self, prefix: str) -> None:
        """Move every route under *prefix*.

        The prefix is router-wide: it applies to all dispatchers built
        from this router and to routes registered afterwards.
        """
        self._reconfigure(self.config.merge(prefix=prefix))

    def _reconfigure(self, config: RouterConfig) -> None:
        with self._lock:
            previous = self.config
            self.config = config
            recompile = previous.merge(prefix=config.prefix, legacy=config.legacy) != config
            moved = 0
            for route in self._table:
                if recompile or route.prefix != config.prefix:
                    route.rebind(config.prefix, self._compile)
                    moved += 1
        if moved:
            logger.debug("Rebound %d route(s) under prefix %r", moved, config.prefix)
        if self._dispatchers and previous.prefix != config.prefix:
            logger.warning(
                "Prefix moved from %r to %r under %d existing dispatcher(s)",
                previous.prefix,
                config.prefix,
                self._dispatchers,
            )

    def _ensure_bound(self, route: Route) -> None:
        """Rebind *route* if the router prefix moved since it was bound."""
        if route.prefix == self.config.prefix:
            return
        with self._lock:
            if route.prefix != self.config.prefix:
                route.rebind(self.config.prefix, self._compile)

    def _compile(self, path: str) -> Matcher:
        return self._compiler(path, self.config)

    # -- Dispatch --

    def middleware(
        self,
        options: bool | RouterConfig | Mapping[str, Any] | None = None,
        /,
        **overrides: Any,
    ) -> Handler:
        """Return the dispatch middleware ``dispatch(ctx, next)``.

        *options* may be a bool (shorthand for ``legacy``), a mapping or a
        ``RouterConfig``; keyword *overrides* win over it. The result is
        merged into the router config, so a new ``prefix`` rebinds every
        route and persists, including for dispatchers built earlier. Keys
        the config does not define go to the compiler untouched. With
        ``legacy=True`` the legacy generator dispatcher is returned instead.
        """
        values = resolve_middleware_options(options, overrides)
        self._reconfigure(self.config.merge(values))
        if self.config.legacy:
            return self.legacy_middleware()
        return self._dispatcher()

    def legacy_middleware(self) -> Handler:
        """Return the dispatcher adapted to the legacy generator convention."""
        return back(self._dispatcher())

    def _dispatcher(self) -> Handler:
        self._dispatchers += 1

        async def dispatch(ctx: Any, next: Next) -> Any:
            method = ctx.method.upper()
            for route in self._table:
                if route.method != method:
                    continue
                self._ensure_bound(route)

                params = route.match(ctx.path, ctx.params)
                if params is None:
                    continue

                ctx.route = route
                ctx.params = params
                # Failures propagate; next() runs only after the chain succeeds
                await route.chain(ctx)
                return await invoke(next)

            return await invoke(next)

        return dispatch

    def __repr__(self) -> str:
        return f"Router(prefix={self.config.prefix!r}, routes={len(self._table)})"


def _flatten(handlers: Any) -> list[Any]:
    """Flatten one level of lists/tuples and check every item is callable."""
    flat: list[Any] = []
    for item in handlers:
        if isinstance(item, list | tuple):
            flat.extend(item)
        else:
            flat.append(item)
    for fn in flat:
        if not callable(fn):
            msg = f".create_route: handlers must be callable, got {type(fn).__name__}"
            raise InvalidArgument(msg)
    return flat
