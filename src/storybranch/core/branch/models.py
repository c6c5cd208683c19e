from __future__ import annotations

"""Branch directive models: what the directive front-end hands to the engine."""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, field_validator


class EndPolicy(str, Enum):
    """What a visit does once the last leaf has been revealed."""

    NO_REPEAT = "no-repeat"  # stop silently
    REPEAT_LAST = "repeat-last"  # re-reveal the last leaf
    REPEAT = "repeat"  # restart at leaf 1

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            compact = value.strip().lower().replace("-", "").replace("_", "")
            for member in cls:
                if member.value.replace("-", "") == compact:
                    return member
        return None


DEFAULT_END_POLICY = EndPolicy.REPEAT_LAST


class Leaf(BaseModel):
    """One chunk of authored content plus its raw argument expression.

    Leaf 0 of a branch is its preamble: it is never revealed by a visit.
    """

    content: str = ""
    args: str = "{}"

    @field_validator("args", mode="before")
    @classmethod
    def _default_args(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "{}"
        return v


class BranchDirective(BaseModel):
    """A branch of a tree: its id, end policy and ordered leaves."""

    tree: str
    id: str
    policy: EndPolicy = DEFAULT_END_POLICY
    leaves: List[Leaf] = Field(default_factory=list)

    @field_validator("tree", "id")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("tree/branch id must be non-empty")
        return v

    @field_validator("leaves")
    @classmethod
    def _has_revealable_leaf(cls, v: List[Leaf]) -> List[Leaf]:
        if len(v) < 2:
            raise ValueError("a branch needs a preamble leaf and at least one leaf to reveal")
        return v

    @property
    def key(self) -> tuple[str, str]:
        return (self.tree, self.id)

    @property
    def last_index(self) -> int:
        return len(self.leaves) - 1
