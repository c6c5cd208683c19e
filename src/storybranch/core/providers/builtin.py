"""Built-in providers: the cumulative text reveal and a plain echo."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from storybranch.core.providers.definition import ArgumentMode, ProviderDefinition

if TYPE_CHECKING:  # pragma: no cover - import for type hints only
    from storybranch.core.branch.context import VisitContext


def revealed_text(context: "VisitContext") -> str:
    """Concatenate leaf contents from leaf 1 through the current leaf."""
    return "".join(leaf.content for leaf in context.leaves[1 : context.current + 1])


def render_reveal(_content: Any, context: Optional["VisitContext"] = None) -> None:
    """Default on_update: render everything revealed so far in this branch.

    The direct argument (the current leaf's own content) is ignored; leaf 0 is
    the branch preamble and never part of the reveal.
    """
    if context is None or context.renderer is None:
        return
    context.renderer.render(revealed_text(context))


def default_render_definition() -> ProviderDefinition:
    return ProviderDefinition(on_update=render_reveal)


def echo_definition(provider_id: str, *, clear_on_every_leaf: bool = False) -> ProviderDefinition:
    """A provider that reports its updates and clears through the renderer's notice channel."""

    def _on_update(value: Any, context: Optional["VisitContext"] = None) -> None:
        if context is not None and context.renderer is not None:
            context.renderer.notice(f"{provider_id}: {value}")

    def _on_clear(context: Optional["VisitContext"] = None) -> None:
        if context is not None and context.renderer is not None:
            context.renderer.notice(f"{provider_id}: clear")

    return ProviderDefinition(
        on_update=_on_update,
        on_clear=_on_clear,
        argument_mode=ArgumentMode.SINGLE,
        clear_on_every_leaf=clear_on_every_leaf,
    )


__all__ = ["render_reveal", "revealed_text", "default_render_definition", "echo_definition"]
