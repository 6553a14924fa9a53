#!/usr/bin/env python3
"""
BTCONFIG ERRORS
---------------
Typed failures raised by the config pipeline. Every error aborts the
current load; nothing is retried or recovered inside the library.
"""

from typing import Any, List, Optional


class ConfigError(Exception):
    """Base class for every failure raised while loading a config."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        super().__init__(self._render())

    def _render(self) -> str:
        if self.path:
            return f"{self.message} (at '{self.path}')"
        return self.message


class ConfigSyntaxError(ConfigError):
    """Malformed text: bad token count, missing depth marker, unterminated quote or comment."""

    def __init__(self, message: str, tokens: Optional[List[str]] = None):
        self.tokens = tokens
        super().__init__(message)


class MalformedNodeError(ConfigError):
    """A node carries neither a value nor children, or the wrong one for its destination."""

    def __init__(self, message: str, key: Optional[str] = None, path: Optional[str] = None):
        self.key = key
        super().__init__(message, path)


class SchemaError(ConfigError):
    """The config does not fit the destination type (e.g. an unknown key)."""

    def __init__(self, message: str, key: Optional[str] = None, path: Optional[str] = None):
        self.key = key
        super().__init__(message, path)


class ConversionError(ConfigError):
    """A leaf string cannot be converted to the destination scalar or enum type."""

    def __init__(self, value: str, target: Any, path: Optional[str] = None, reason: str = ""):
        self.value = value
        self.target = target
        name = getattr(target, "__name__", repr(target))
        message = f"cannot convert {value!r} to {name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, path)
