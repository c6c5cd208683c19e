"""Dispatch engine: fan a delta out to every provider of a tree."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from storybranch.core.delta import Delta, is_clear, normalize_delta
from storybranch.core.providers.definition import ArgumentMode, Provider

logger = logging.getLogger(__name__)


class DispatchEngine:
    """Stateless visitor applying one delta to a set of providers.

    Rules per provider ``p`` with id ``k``:
    - ``k`` in delta with ``CLEAR``: run ``p.on_clear(context)`` if defined.
    - ``k`` in delta with a value: run ``p.on_update`` shaped by its argument mode.
    - ``k`` missing and ``p.clear_on_every_leaf``: run ``p.on_clear(context)``.

    Provider exceptions propagate to the caller.
    """

    def dispatch(
        self,
        providers: Iterable[Provider],
        delta: Mapping[str, Any] | None,
        context: Optional[Any] = None,
    ) -> Delta:
        typed = normalize_delta(delta)
        for provider in providers:
            provider.delta = typed
            if provider.id in typed:
                value = typed[provider.id]
                if is_clear(value):
                    logger.debug("Clearing provider %s", provider.id)
                    provider.clear(context)
                    continue
                self._call_update(provider, value.value, context)
            elif provider.clear_on_every_leaf:
                logger.debug("Clearing provider %s (not in delta)", provider.id)
                provider.clear(context)
        return typed

    @staticmethod
    def _call_update(provider: Provider, value: Any, context: Optional[Any]) -> None:
        logger.debug("Updating provider %s with %r", provider.id, value)
        if provider.argument_mode is ArgumentMode.SINGLE:
            provider.on_update(value, context)
            return
        args = list(value) if isinstance(value, (list, tuple)) else [value]
        args.append(context)
        provider.on_update(*args)


__all__ = ["DispatchEngine"]
