"""Shared type aliases used across waypoint modules."""

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, TypeAlias

# Continuation: zero-argument, runs whatever follows in the chain
Next: TypeAlias = Callable[[], Awaitable[Any]]

# Route handler, modern convention: handler(ctx, next), sync or async
Handler: TypeAlias = Callable[..., Any]

# Compiled path pattern: returns a fresh params dict, or None on no match
Matcher: TypeAlias = Callable[[str, Mapping[str, Any] | None], dict[str, Any] | None]

# Pattern compiler: compile(pattern, config) -> Matcher
Compiler: TypeAlias = Callable[..., Matcher]
