"""
Persisted per-tree state.

TreeState is the only thing that crosses the save/restore boundary:
- log: branch id -> cursor (index of the last revealed leaf, 0 = nothing yet)
- pending: branch id -> provider id -> value still in effect for the next visit

Values in ``pending`` are plain update values; clear directives are never
stored.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from storybranch.errors import NotFoundError, ValidationError


class TreeState(BaseModel):
    id: str
    log: Dict[str, int] = Field(default_factory=dict)
    pending: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @field_validator("log")
    @classmethod
    def _cursors_non_negative(cls, v: Dict[str, int]) -> Dict[str, int]:
        for branch_id, cursor in v.items():
            if cursor < 0:
                raise ValueError(f"cursor for branch '{branch_id}' must be >= 0")
        return v

    def cursor(self, branch_id: str) -> int:
        return self.log.get(branch_id, 0)

    def pending_for(self, branch_id: str) -> Dict[str, Any]:
        return dict(self.pending.get(branch_id, {}))

    def reset_branch(self, branch_id: str) -> None:
        self.log.pop(branch_id, None)
        self.pending.pop(branch_id, None)


class StateStore:
    """Tree id -> TreeState. Snapshot-able between visits, never mid-dispatch."""

    def __init__(self) -> None:
        self._states: Dict[str, TreeState] = {}

    def ensure(self, tree_id: str) -> TreeState:
        """Return the state for ``tree_id``, creating an empty one if missing."""
        state = self._states.get(tree_id)
        if state is None:
            state = TreeState(id=tree_id)
            self._states[tree_id] = state
        return state

    def get(self, tree_id: str) -> TreeState:
        if tree_id not in self._states:
            raise NotFoundError("tree state", tree_id, sorted(self._states))
        return self._states[tree_id]

    def find(self, tree_id: str) -> Optional[TreeState]:
        return self._states.get(tree_id)

    def discard(self, tree_id: str) -> bool:
        return self._states.pop(tree_id, None) is not None

    def ids(self) -> Iterable[str]:
        return sorted(self._states)

    def __contains__(self, tree_id: object) -> bool:
        return tree_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Deep, plain-data copy of every tree state."""
        return {tree_id: copy.deepcopy(state.model_dump()) for tree_id, state in sorted(self._states.items())}

    def restore(self, data: Mapping[str, Mapping[str, Any]], *, replace: bool = True) -> None:
        """Load states from a snapshot. Validates everything before applying."""
        restored: Dict[str, TreeState] = {}
        for tree_id, raw in (data or {}).items():
            if not isinstance(raw, Mapping):
                raise ValidationError(f"tree state {tree_id!r} must be a mapping, got {type(raw).__name__}")
            restored[str(tree_id)] = TreeState.model_validate({**raw, "id": str(tree_id)})
        if replace:
            self._states = restored
        else:
            self._states.update(restored)


__all__ = ["TreeState", "StateStore"]
