"""Middleware: Protocol-based handler chains, no inheritance required.

A handler is any callable matching:
    async def handler(ctx: Context, next: Next) -> Any

Provided here:
    compose -- fold an ordered handler sequence into one callable
    convert / back -- adapt between legacy generator handlers and modern ones
    Middleware -- the structural protocol every handler satisfies
"""

from waypoint.middleware.compose import compose
from waypoint.middleware.legacy import back, convert, drive, is_legacy
from waypoint.middleware.protocol import Middleware

__all__ = [
    "Middleware",
    "back",
    "compose",
    "convert",
    "drive",
    "is_legacy",
]
