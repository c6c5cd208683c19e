"""Storybranch exception hierarchy.

All storybranch-specific exceptions inherit from StoryBranchError, so a host
can catch visit failures at the directive boundary with one clause.
"""

from __future__ import annotations

from typing import Any, Optional


class StoryBranchError(Exception):
    """Base exception for all storybranch errors."""


class ValidationError(StoryBranchError):
    """Raised for bad registration input or a malformed branch directive.

    Shares its name with pydantic.ValidationError; modules that need both
    import pydantic's under an alias.
    """


class NotFoundError(StoryBranchError, KeyError):
    """Raised when a tree, branch or provider lookup fails."""

    def __init__(self, kind: str, key: str, available: Optional[list[str]] = None) -> None:
        self.kind = kind
        self.key = key
        self.available = list(available or [])
        message = f"Unknown {kind}: {key!r}"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return self.message


class MalformedArgumentError(StoryBranchError):
    """Raised when a leaf's argument expression cannot be evaluated."""

    def __init__(self, leaf_index: int, raw: str, cause: Any = None) -> None:
        self.leaf_index = leaf_index
        self.raw = raw
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Leaf #{leaf_index}: malformed argument object:\n{raw}{detail}")


__all__ = [
    "StoryBranchError",
    "ValidationError",
    "NotFoundError",
    "MalformedArgumentError",
]
