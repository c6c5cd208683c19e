"""Delta values: what a provider is told on one dispatch.

A delta maps provider ids to either ``Update(value)`` or the ``CLEAR``
directive. ``Clear`` is matched by type, never by equality with a token, and
is not meant to be serialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Union


@dataclass(frozen=True)
class Update:
    """Deliver ``value`` to the provider's on_update."""

    value: Any


class Clear:
    """Run the provider's on_clear instead of on_update."""

    _instance: "Clear | None" = None

    def __new__(cls) -> "Clear":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CLEAR"

    def __copy__(self) -> "Clear":
        return self

    def __deepcopy__(self, memo: dict) -> "Clear":
        return self


CLEAR = Clear()

DeltaValue = Union[Update, Clear]
Delta = Dict[str, DeltaValue]


def as_delta_value(value: Any) -> DeltaValue:
    """Wrap a raw value as ``Update`` unless it already is a delta value."""
    if isinstance(value, (Update, Clear)):
        return value
    return Update(value)


def normalize_delta(raw: Mapping[str, Any] | None) -> Delta:
    """Turn a mapping of raw values into a typed delta."""
    if not raw:
        return {}
    return {str(key): as_delta_value(value) for key, value in raw.items()}


def is_clear(value: Any) -> bool:
    return isinstance(value, Clear)


__all__ = ["Update", "Clear", "CLEAR", "DeltaValue", "Delta", "as_delta_value", "normalize_delta", "is_clear"]
