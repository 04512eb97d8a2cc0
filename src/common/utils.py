"""Common utility functions."""

from typing import Any


def get_value(obj: Any, key: str) -> Any:
    """Get value from dict or object attribute."""
    if isinstance(obj, dict):
        return obj.get(key)
    getter = getattr(obj, "get", None)
    if callable(getter):
        return getter(key)
    return getattr(obj, key, None)


def first_value(obj: Any, keys: tuple[str, ...]) -> Any:
    """Return the first non-empty value among `keys`, in order."""
    for key in keys:
        value = get_value(obj, key)
        if value:
            return value
    return None
