"""Coercion of raw config/env/flag values into typed settings."""

from __future__ import annotations

from typing import Any

_TRUE = {"1", "t", "true", "y", "yes", "on"}
_FALSE = {"0", "f", "false", "n", "no", "off"}


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def parse_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"invalid integer value: {value!r}")
        return int(value)
    try:
        return int(str(value).strip(), 10)
    except ValueError:
        raise ValueError(f"invalid integer value: {value!r}") from None


def parse_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"invalid string value: {value!r}")


_PARSERS = {bool: parse_bool, int: parse_int, str: parse_str}


def coerce(value: Any, kind: type) -> Any:
    """Convert ``value`` to ``kind`` (bool, int or str)."""

    try:
        parser = _PARSERS[kind]
    except KeyError:
        raise TypeError(f"unsupported setting type: {kind!r}") from None
    return parser(value)
