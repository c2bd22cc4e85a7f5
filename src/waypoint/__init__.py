"""Waypoint: an ordered route registry and dispatcher for middleware pipelines.

Registers (method, pattern, handler chain) routes, matches requests in
registration order, and runs the first matching chain with the matched
path parameters on the request context.

Basic usage::

    from waypoint import Pipeline, RequestContext, Router

    api = Router(prefix="/api")

    async def show_user(ctx, next):
        ctx.state["body"] = f"user {ctx.params['id']}"
        return await next()

    api.get("/users/:id", show_user)

    pipeline = Pipeline().use(api.middleware())
    await pipeline(RequestContext("GET", "/api/users/42"))

Legacy generator handlers are accepted anywhere a handler is::

    def audit(ctx, next):
        ctx.state["audited"] = True
        yield next

    api.post("/users", audit, create_user)
"""

__version__ = "0.1.0"
__all__ = [
    "BadRequest",
    "ChainError",
    "ConfigurationError",
    "Context",
    "HTTPError",
    "InvalidArgument",
    "METHODS",
    "Middleware",
    "Pipeline",
    "RequestContext",
    "Route",
    "RouteMatch",
    "Router",
    "RouterConfig",
    "WaypointError",
    "compile_pattern",
    "compose",
    "join_path",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waypoint`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from waypoint.routing.router import Router

        return Router

    if name in ("Route", "RouteMatch", "METHODS"):
        from waypoint.routing import route as _route

        return getattr(_route, name)

    if name in ("compile_pattern", "join_path"):
        from waypoint.routing import pattern as _pattern

        return getattr(_pattern, name)

    if name == "RouterConfig":
        from waypoint.config import RouterConfig

        return RouterConfig

    if name in ("Context", "RequestContext"):
        from waypoint import context as _ctx

        return getattr(_ctx, name)

    if name == "Pipeline":
        from waypoint.pipeline import Pipeline

        return Pipeline

    if name in ("Middleware", "compose"):
        from waypoint import middleware as _mw

        return getattr(_mw, name)

    if name in (
        "BadRequest",
        "ChainError",
        "ConfigurationError",
        "HTTPError",
        "InvalidArgument",
        "WaypointError",
    ):
        from waypoint import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
