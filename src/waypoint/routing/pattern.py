"""Path pattern compilation: the PathMatcher capability.

Compiles a route pattern such as ``/users/:id`` into a matcher callable::

    matcher = compile_pattern("/users/:id")
    matcher("/users/42")         -> {"id": "42"}
    matcher("/posts/42")         -> None
    matcher("/users/42", {"a": 1}) -> {"a": 1, "id": "42"}

Syntax:

    ``:name``          one segment, captured as ``name``
    ``:name(\\d+)``     one segment restricted by a custom regex
    ``:name?``         optional segment (the preceding ``/`` is optional too)
    ``:name*``         zero or more segments, captured as a list
    ``:name+``         one or more segments, captured as a list
    ``(regex)``        unnamed group, captured under its index (0, 1, ...)
    ``*``              unnamed wildcard, same as ``(.*)``

A match always returns a *new* dict. An empty dict means "matched, no
parameters", so test the result with ``is None``, never truthiness.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote

from waypoint.config import RouterConfig
from waypoint.errors import BadRequest, ConfigurationError

# Groups: 1 escaped char, 2 prefix, 3 name, 4 custom regex, 5 unnamed group,
# 6 modifier, 7 bare asterisk
_TOKEN_RE = re.compile(
    r"(\\.)"
    r"|([/.])?(?:(?::(\w+)(?:\(((?:\\.|[^\\()])+)\))?|\(((?:\\.|[^\\()])+)\))([+*?])?|(\*))"
)

_DELIMITER = "/"
_SLASHES = re.compile(r"/{2,}")


@dataclass(frozen=True, slots=True)
class PatternKey:
    """A parameter declared in a route pattern."""

    name: str | int
    prefix: str
    optional: bool
    repeat: bool
    partial: bool
    pattern: str


def parse_pattern(pattern: str) -> list[str | PatternKey]:
    """Split *pattern* into literal strings and ``PatternKey`` tokens."""
    tokens: list[str | PatternKey] = []
    path = ""
    index = 0
    unnamed = 0

    for m in _TOKEN_RE.finditer(pattern):
        path += pattern[index : m.start()]
        index = m.end()

        escaped = m.group(1)
        if escaped:
            path += escaped[1]
            continue

        prefix, name, capture, group, modifier, asterisk = m.group(2, 3, 4, 5, 6, 7)
        following = pattern[index] if index < len(pattern) else None

        if path:
            tokens.append(path)
            path = ""

        if name is None:
            key_name: str | int = unnamed
            unnamed += 1
        else:
            key_name = name

        custom = capture or group
        if custom:
            regex = _escape_group(custom)
        elif asterisk:
            regex = ".*"
        else:
            regex = f"[^{re.escape(prefix or _DELIMITER)}]+?"

        tokens.append(
            PatternKey(
                name=key_name,
                prefix=prefix or "",
                optional=modifier in ("?", "*"),
                repeat=modifier in ("+", "*"),
                partial=prefix is not None and following is not None and following != prefix,
                pattern=regex,
            )
        )

    if index < len(pattern):
        path += pattern[index:]
    if path:
        tokens.append(path)
    return tokens


def _escape_group(group: str) -> str:
    return re.sub(r"([=!:$/()])", r"\\\1", group)


def _tokens_to_regex(tokens: list[str | PatternKey], *, strict: bool, end: bool) -> str:
    route = ""
    for token in tokens:
        if isinstance(token, str):
            route += re.escape(token)
            continue

        prefix = re.escape(token.prefix)
        capture = f"(?:{token.pattern})"
        if token.repeat:
            capture += f"(?:{prefix}{capture})*"
        if token.optional:
            if not token.partial:
                capture = f"(?:{prefix}({capture}))?"
            else:
                capture = f"{prefix}({capture})?"
        else:
            capture = f"{prefix}({capture})"
        route += capture

    delimiter = re.escape(_DELIMITER)
    ends_with_delimiter = route.endswith(delimiter)

    if not strict:
        if ends_with_delimiter:
            route = route[: -len(delimiter)]
        route += f"(?:{delimiter}(?=$))?"

    if end:
        route += "$"
    elif not (strict and ends_with_delimiter):
        route += f"(?={delimiter}|$)"
    return "^" + route


class PathMatcher:
    """A compiled route pattern. Call it with a request path.

    Instances are immutable and safe to share across concurrent requests.
    """

    __slots__ = ("_keys", "_regex", "pattern")

    def __init__(self, pattern: str, config: RouterConfig | None = None) -> None:
        config = config or RouterConfig()
        tokens = parse_pattern(pattern)
        source = _tokens_to_regex(tokens, strict=config.strict, end=config.end)
        try:
            self._regex = re.compile(source, 0 if config.sensitive else re.IGNORECASE)
        except re.error as exc:
            msg = f"Invalid route pattern {pattern!r}: {exc}"
            raise ConfigurationError(msg) from exc
        self._keys = tuple(t for t in tokens if isinstance(t, PatternKey))
        self.pattern = pattern

    @property
    def keys(self) -> tuple[PatternKey, ...]:
        return self._keys

    def __call__(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any] | None:
        m = self._regex.match(path)
        if m is None:
            return None

        result: dict[Any, Any] = dict(params or {})
        for key, value in zip(self._keys, m.groups()):
            if not value:
                continue
            decoded = _decode(value)
            result[key.name] = decoded.split(_DELIMITER) if key.repeat else decoded
        return result

    def __repr__(self) -> str:
        return f"PathMatcher({self.pattern!r})"


def _decode(value: str) -> str:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as exc:
        msg = f"Failed to decode path parameter {value!r}"
        raise BadRequest(msg) from exc


def compile_pattern(pattern: str, config: RouterConfig | None = None) -> PathMatcher:
    """Compile *pattern* into a matcher using the options in *config*."""
    return PathMatcher(pattern, config)


def join_path(prefix: str, pattern: str) -> str:
    """Join a router prefix and a route pattern with single slashes.

    Examples::

        join_path("/", "/users")     -> "/users"
        join_path("/api", "/users")  -> "/api/users"
        join_path("/api/", "users/") -> "/api/users"
        join_path("/api", "/")       -> "/api/"
        join_path("/", "/")          -> "/"
    """
    if pattern == "/":
        joined = _SLASHES.sub("/", f"/{prefix}/")
    else:
        joined = _SLASHES.sub("/", f"/{prefix}/{pattern}")
        if len(joined) > 1:
            joined = joined.rstrip("/")
    return joined
