from collections.abc import Mapping
from typing import Any


def read_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping by key or from any other object by attribute."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)
