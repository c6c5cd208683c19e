from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from pydantic import BaseModel, Field

from storybranch.core.branch.models import BranchDirective
from storybranch.core.tree import Tree
from storybranch.errors import NotFoundError

from .registry_base import NameRegistry


class TreeRegistry(NameRegistry[Tree]):
    kind: str = "tree"


class BranchRegistry(BaseModel):
    """(tree id, branch id) -> directive. Re-registering a branch replaces it."""

    items: Dict[Tuple[str, str], BranchDirective] = Field(default_factory=dict)

    def register(self, directive: BranchDirective) -> None:
        self.items[directive.key] = directive

    def get(self, tree_id: str, branch_id: str) -> BranchDirective:
        key = (tree_id, branch_id)
        if key not in self.items:
            available = [b for (t, b) in sorted(self.items) if t == tree_id]
            raise NotFoundError("branch", f"{tree_id}/{branch_id}", available)
        return self.items[key]

    def for_tree(self, tree_id: str) -> List[BranchDirective]:
        return [d for (t, _b), d in sorted(self.items.items()) if t == tree_id]

    def remove_tree(self, tree_id: str) -> int:
        keys = [k for k in self.items if k[0] == tree_id]
        for key in keys:
            del self.items[key]
        return len(keys)

    def all(self) -> Iterable[BranchDirective]:
        return self.items.values()

    def __len__(self) -> int:
        return len(self.items)


class RegistryManager(BaseModel):
    """Central manager for the trees and branches known to an engine."""

    trees: TreeRegistry = Field(default_factory=TreeRegistry)
    branches: BranchRegistry = Field(default_factory=BranchRegistry)

    model_config = {"arbitrary_types_allowed": True}

    def validate_references(self) -> List[str]:
        """Return one message per branch whose tree is not registered."""
        errors: List[str] = []
        for directive in self.branches.all():
            if directive.tree not in self.trees:
                errors.append(f"Branch {directive.tree}/{directive.id} references unknown tree: {directive.tree}")
        return errors
