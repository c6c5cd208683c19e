from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from storybranch.core.branch.models import EndPolicy, Leaf


class VisitContext(BaseModel):
    """Handed to every provider callable during one branch visit."""

    tree_id: str
    branch_id: str
    leaves: List[Leaf]
    current: int
    policy: EndPolicy
    renderer: Any = None
    engine: Any = None

    model_config = {"arbitrary_types_allowed": True}

    @property
    def leaf(self) -> Leaf:
        return self.leaves[self.current]


class VisitStatus(str, Enum):
    DISPATCHED = "dispatched"
    STOPPED = "stopped"  # no-repeat end reached; nothing happened


class VisitOutcome(BaseModel):
    """Result of one visit, for callers that want to inspect it."""

    tree_id: str
    branch_id: str
    status: VisitStatus
    previous: int
    current: int
    restarted: bool = False
    delta: Dict[str, Any] = Field(default_factory=dict)

    @property
    def dispatched(self) -> bool:
        return self.status is VisitStatus.DISPATCHED

    @classmethod
    def stopped(cls, tree_id: str, branch_id: str, cursor: int) -> "VisitOutcome":
        return cls(tree_id=tree_id, branch_id=branch_id, status=VisitStatus.STOPPED, previous=cursor, current=cursor)


__all__ = ["VisitContext", "VisitStatus", "VisitOutcome"]
