"""
Shared fixtures for storybranch tests.
"""

from typing import Any, List, Tuple

import pytest

from storybranch.core.branch import BranchDirective, Leaf
from storybranch.core.engine import Engine
from storybranch.host import BufferRenderer


class Recorder:
    """Collects on_update / on_clear calls for assertions."""

    def __init__(self) -> None:
        self.updates: List[Tuple[Any, ...]] = []
        self.clears: List[Any] = []

    def on_update(self, *args: Any) -> None:
        self.updates.append(args)

    def on_clear(self, context: Any = None) -> None:
        self.clears.append(context)


def make_branch(tree: str = "vn", branch: str = "intro", policy: str = "repeat-last", leaves=None) -> BranchDirective:
    if leaves is None:
        leaves = [
            Leaf(content="pre "),
            Leaf(content="one ", args="{spriteL: happy}"),
            Leaf(content="two ", args="{spriteL: sad, music: [theme, 0.5]}"),
        ]
    return BranchDirective(tree=tree, id=branch, policy=policy, leaves=leaves)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def renderer() -> BufferRenderer:
    return BufferRenderer()


@pytest.fixture
def engine(renderer: BufferRenderer) -> Engine:
    return Engine(renderer=renderer)


@pytest.fixture
def make_recorder():
    return Recorder


@pytest.fixture
def branch_factory():
    return make_branch
