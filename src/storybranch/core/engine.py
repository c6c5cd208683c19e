"""
Engine: the explicit context that owns trees, branches and persisted state.

Example:
    from storybranch.core.engine import Engine
    from storybranch.core.branch import BranchDirective, Leaf
    from storybranch.host import BufferRenderer

    engine = Engine(renderer=BufferRenderer())
    engine.create_tree("vn").register_provider(["spriteL", "spriteR"], {"on_update": show_sprite})
    engine.register_branch(
        BranchDirective(tree="vn", id="intro", leaves=[Leaf(), Leaf(content="Hello. ", args="{spriteL: happy}")])
    )
    engine.visit("vn", "intro")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from storybranch.core.branch.context import VisitOutcome
from storybranch.core.branch.models import BranchDirective
from storybranch.core.registries import RegistryManager
from storybranch.core.state import StateStore, TreeState
from storybranch.core.traversal import BranchTraversal
from storybranch.core.tree import Tree
from storybranch.errors import StoryBranchError
from storybranch.host.evaluator import ExpressionEvaluator
from storybranch.host.renderer import Renderer
from storybranch.utils.error_formatting import format_diagnostic
from storybranch.utils.logging import log_calls

logger = logging.getLogger(__name__)


class Engine:
    """
    Tree registry, branch registry and state store for one session.

    Args:
        renderer: Default rendering collaborator handed to providers
        evaluator: Evaluator for leaf argument expressions (YAML by default)
    """

    def __init__(self, renderer: Optional[Renderer] = None, evaluator: Optional[ExpressionEvaluator] = None):
        self.registries = RegistryManager()
        self.state = StateStore()
        self.renderer = renderer
        self.traversal = BranchTraversal(evaluator)

    # -- tree lifecycle -------------------------------------------------

    @log_calls()
    def create_tree(self, tree_id: str, *, persist_delta: bool = False) -> Tree:
        """Register a new tree and make sure it has a state entry.

        A state entry restored before the tree was created is kept.
        """
        tree = Tree(tree_id, persist_delta=persist_delta)
        self.registries.trees.register(tree_id, tree)
        self.state.ensure(tree_id)
        return tree

    def get_tree(self, tree_id: str) -> Tree:
        return self.registries.trees.get(tree_id)

    def find_tree(self, tree_id: str) -> Optional[Tree]:
        return self.registries.trees.find(tree_id)

    def tree_ids(self) -> Iterable[str]:
        return self.registries.trees.names()

    def get_state(self, tree_id: str) -> TreeState:
        return self.state.get(tree_id)

    @log_calls()
    def delete_tree(self, tree_id: str) -> bool:
        """Remove a tree together with its state and branches.

        Returns True only when both the tree and its state existed; otherwise
        nothing is removed.
        """
        if tree_id not in self.registries.trees or tree_id not in self.state:
            return False
        self.registries.trees.remove(tree_id)
        self.state.discard(tree_id)
        self.registries.branches.remove_tree(tree_id)
        return True

    # -- branches -------------------------------------------------------

    def register_branch(self, directive: BranchDirective | Mapping[str, Any]) -> BranchDirective:
        if not isinstance(directive, BranchDirective):
            directive = BranchDirective.model_validate(directive)
        self.registries.branches.register(directive)
        return directive

    def get_branch(self, tree_id: str, branch_id: str) -> BranchDirective:
        return self.registries.branches.get(tree_id, branch_id)

    def branches(self, tree_id: str) -> List[BranchDirective]:
        return self.registries.branches.for_tree(tree_id)

    def cursor(self, tree_id: str, branch_id: str) -> int:
        return self.state.get(tree_id).cursor(branch_id)

    def reset_branch(self, tree_id: str, branch_id: str) -> None:
        self.state.get(tree_id).reset_branch(branch_id)

    # -- visiting -------------------------------------------------------

    def visit_branch(self, directive: BranchDirective, renderer: Optional[Renderer] = None) -> VisitOutcome:
        """Reveal the next leaf of ``directive``.

        Raises:
            NotFoundError: The directive's tree is not registered
            MalformedArgumentError: The leaf's argument text does not evaluate
        """
        tree = self.registries.trees.get(directive.tree)
        state = self.state.ensure(tree.id)
        return self.traversal.visit(tree, state, directive, renderer or self.renderer, engine=self)

    def visit(self, tree_id: str, branch_id: str, renderer: Optional[Renderer] = None) -> VisitOutcome:
        """Visit a registered branch by id."""
        self.registries.trees.get(tree_id)
        directive = self.registries.branches.get(tree_id, branch_id)
        return self.visit_branch(directive, renderer)

    # -- persistence ----------------------------------------------------

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return self.state.snapshot()

    def restore(self, data: Mapping[str, Mapping[str, Any]]) -> None:
        """Replace persisted state; trees without a restored entry get an empty one."""
        self.state.restore(data)
        for tree_id in self.registries.trees.names():
            self.state.ensure(tree_id)

    def validate(self) -> List[str]:
        return self.registries.validate_references()


def run_directive(engine: Engine, directive: BranchDirective, renderer: Optional[Renderer] = None) -> Optional[VisitOutcome]:
    """Directive boundary: visit and report storybranch errors as a diagnostic.

    Provider exceptions are not storybranch errors and propagate.
    """
    target = renderer or engine.renderer
    try:
        return engine.visit_branch(directive, target)
    except StoryBranchError as exc:
        logger.info("Directive %s/%s failed: %s", directive.tree, directive.id, exc)
        message = format_diagnostic(str(exc), f"@{directive.tree}/{directive.id}")
        if target is None:
            raise
        target.error(message)
        return None


__all__ = ["Engine", "run_directive"]
