"""
Branch traversal state machine.

One call to ``BranchTraversal.visit`` is one transition for a (tree, branch)
pair:

    idle (cursor 0) -> advancing (1..last-1) -> at end (last)

At the end, the branch's policy decides the next move:
- no-repeat: stop silently, nothing dispatched, nothing written
- repeat-last: reveal the last leaf again
- repeat: restart at leaf 1 (leaf 0 is the preamble)

The cursor is written only after dispatch returns. A provider that visits the
same branch from inside its own dispatch sees the old cursor.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from storybranch.core.branch.context import VisitContext, VisitOutcome, VisitStatus
from storybranch.core.branch.models import BranchDirective, EndPolicy
from storybranch.core.delta import Delta, is_clear
from storybranch.core.providers import DEFAULT_PROVIDER_ID
from storybranch.core.state import TreeState
from storybranch.core.tree import Tree
from storybranch.errors import MalformedArgumentError
from storybranch.host.evaluator import ExpressionEvaluator, YamlExpressionEvaluator

logger = logging.getLogger(__name__)


def next_leaf_index(latest: int, length: int, policy: EndPolicy) -> Optional[int]:
    """Return the leaf to reveal after ``latest``, or None to stop.

    Args:
        latest: Current cursor (0 before the first visit)
        length: Number of leaves including the preamble
        policy: End policy applied once the last leaf has been revealed
    """
    candidate = latest + 1
    if candidate < length:
        return candidate
    if policy is EndPolicy.NO_REPEAT:
        return None
    if policy is EndPolicy.REPEAT:
        return 1
    # a cursor past the end means the branch was shortened since it was saved
    return min(latest, length - 1)


class BranchTraversal:
    def __init__(self, evaluator: Optional[ExpressionEvaluator] = None) -> None:
        self.evaluator = evaluator or YamlExpressionEvaluator()

    def parse_leaf_args(self, index: int, raw: str) -> Dict[str, Any]:
        try:
            parsed = self.evaluator.evaluate(raw)
        except Exception as exc:
            raise MalformedArgumentError(index, raw, exc) from exc
        if not isinstance(parsed, Mapping):
            raise MalformedArgumentError(index, raw, f"expected a mapping, got {type(parsed).__name__}")
        return dict(parsed)

    def visit(
        self,
        tree: Tree,
        state: TreeState,
        directive: BranchDirective,
        renderer: Any = None,
        engine: Any = None,
    ) -> VisitOutcome:
        branch_id = directive.id
        latest = state.cursor(branch_id)
        current = next_leaf_index(latest, len(directive.leaves), directive.policy)
        if current is None:
            logger.debug("Branch %s/%s finished (no-repeat); skipping", tree.id, branch_id)
            return VisitOutcome.stopped(tree.id, branch_id, latest)
        restarted = current <= latest and directive.policy is EndPolicy.REPEAT

        leaf = directive.leaves[current]
        parsed = self.parse_leaf_args(current, leaf.args)

        delta: Dict[str, Any] = {}
        if tree.persist_delta and not restarted:
            delta.update(state.pending_for(branch_id))
        delta.update(parsed)
        delta[DEFAULT_PROVIDER_ID] = leaf.content

        context = VisitContext(
            tree_id=tree.id,
            branch_id=branch_id,
            leaves=directive.leaves,
            current=current,
            policy=directive.policy,
            renderer=renderer,
            engine=engine,
        )
        logger.debug("Visiting %s/%s: leaf %d -> %d", tree.id, branch_id, latest, current)
        sent = tree.update(delta, context)

        state.log[branch_id] = current
        if tree.persist_delta:
            state.pending[branch_id] = _carry_over(sent)

        return VisitOutcome(
            tree_id=tree.id,
            branch_id=branch_id,
            status=VisitStatus.DISPATCHED,
            previous=latest,
            current=current,
            restarted=restarted,
            delta=dict(sent),
        )


def _carry_over(sent: Delta) -> Dict[str, Any]:
    """Values that stay in effect for the next leaf: no default key, no clears."""
    return {
        key: value.value
        for key, value in sent.items()
        if key != DEFAULT_PROVIDER_ID and not is_clear(value)
    }


__all__ = ["BranchTraversal", "next_leaf_index"]
