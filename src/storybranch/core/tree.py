"""Tree: a named provider table sharing one update channel."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

from storybranch.core.delta import Delta
from storybranch.core.providers import (
    DEFAULT_PROVIDER_ID,
    DispatchEngine,
    Provider,
    ProviderTable,
    default_render_definition,
)
from storybranch.core.providers.table import DefinitionInput
from storybranch.errors import ValidationError


class Tree:
    """
    Named collection of providers.

    The default render provider is installed under ``__default`` at
    construction; ``register_default`` replaces it. Trees are created through
    ``Engine.create_tree`` so that a matching state entry exists.

    Args:
        tree_id: Non-empty identifier, unique within an engine
        persist_delta: Keep leaf-applied values in effect across visits of a branch
    """

    def __init__(self, tree_id: str, *, persist_delta: bool = False, dispatcher: Optional[DispatchEngine] = None):
        if not isinstance(tree_id, str) or not tree_id.strip():
            raise ValidationError("Tree ID not specified")
        self.id = tree_id
        self.persist_delta = persist_delta
        self.providers = ProviderTable(tree_id)
        self._dispatcher = dispatcher or DispatchEngine()
        self.register_default(default_render_definition())

    def __repr__(self) -> str:
        return f"Tree(id={self.id!r}, providers={self.providers.ids()!r})"

    def register_provider(self, ids: Union[str, Iterable[str]], definition: DefinitionInput) -> "Tree":
        """Register ``definition`` under one or more ids; returns the tree for chaining."""
        self.providers.register(ids, definition)
        return self

    def register_default(self, definition: DefinitionInput) -> "Tree":
        return self.register_provider(DEFAULT_PROVIDER_ID, definition)

    def unregister_provider(self, provider_id: str) -> bool:
        """Remove a provider. Removing the default provider reinstalls the built-in one."""
        removed = self.providers.unregister(provider_id)
        if provider_id == DEFAULT_PROVIDER_ID:
            self.register_default(default_render_definition())
        return removed

    def get_provider(self, provider_id: str) -> Provider:
        return self.providers.get(provider_id)

    def provider_ids(self) -> List[str]:
        return self.providers.ids()

    def update(self, delta: Mapping[str, Any] | None, context: Any = None) -> Delta:
        """Dispatch ``delta`` to every provider. Returns the typed delta that was sent."""
        return self._dispatcher.dispatch(self.providers, delta, context)


__all__ = ["Tree"]
