from storybranch.core.branch.context import VisitContext, VisitOutcome, VisitStatus
from storybranch.core.branch.models import DEFAULT_END_POLICY, BranchDirective, EndPolicy, Leaf

__all__ = [
    "BranchDirective",
    "DEFAULT_END_POLICY",
    "EndPolicy",
    "Leaf",
    "VisitContext",
    "VisitOutcome",
    "VisitStatus",
]
