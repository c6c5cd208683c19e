"""Provider table: per-tree registry of update/clear handlers addressed by id."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Union

from pydantic import ValidationError as SchemaError

from storybranch.core.providers.definition import Provider, ProviderDefinition
from storybranch.errors import NotFoundError, ValidationError
from storybranch.utils.error_formatting import error_source, format_validation_errors

logger = logging.getLogger(__name__)

DefinitionInput = Union[ProviderDefinition, Mapping[str, Any], Callable[..., Any]]


def coerce_definition(definition: DefinitionInput, source: str) -> ProviderDefinition:
    """Validate a definition given as a model, a mapping, or a bare on_update callable."""
    if isinstance(definition, ProviderDefinition):
        data: Dict[str, Any] = {
            "on_update": definition.on_update,
            "on_clear": definition.on_clear,
            "argument_mode": definition.argument_mode,
            "clear_on_every_leaf": definition.clear_on_every_leaf,
            "store": definition.store,
        }
    elif isinstance(definition, Mapping):
        data = dict(definition)
    elif callable(definition):
        data = {"on_update": definition}
    else:
        raise ValidationError(f"{source}: definition must be a mapping or callable, got {type(definition).__name__}")

    if data.get("on_update") is None:
        raise ValidationError(f"{source}: no definition for on_update() found")
    if not callable(data["on_update"]):
        raise ValidationError(f"{source}: specified on_update() is not a function")
    if data.get("on_clear") is not None and not callable(data["on_clear"]):
        raise ValidationError(f"{source}: specified on_clear() is not a function")

    try:
        return ProviderDefinition.model_validate(data)
    except SchemaError as exc:
        raise ValidationError(f"{source}: {format_validation_errors(exc.errors())}") from exc


class ProviderTable:
    """Ordered mapping of provider id to Provider. Owned by a Tree."""

    def __init__(self, tree_id: str) -> None:
        self.tree_id = tree_id
        self._providers: Dict[str, Provider] = {}

    def register(self, ids: Union[str, Iterable[str]], definition: DefinitionInput) -> List[Provider]:
        """Register one copy of ``definition`` per id.

        Every id and the definition are validated before anything is stored, so
        a failing call leaves the table as it was. Existing ids are replaced.
        """
        id_list = [ids] if isinstance(ids, str) else list(ids)
        if not id_list:
            raise ValidationError(f"{error_source(self.tree_id)}: provider ID not specified")
        for provider_id in id_list:
            if not isinstance(provider_id, str) or not provider_id.strip():
                raise ValidationError(f"{error_source(self.tree_id)}: provider ID not specified")

        source = error_source(self.tree_id, "providers", ",".join(id_list))
        parsed = coerce_definition(definition, source)

        built: List[Provider] = []
        for provider_id in id_list:
            built.append(
                Provider(
                    id=provider_id,
                    on_update=parsed.on_update,
                    on_clear=parsed.on_clear,
                    argument_mode=parsed.argument_mode,
                    clear_on_every_leaf=parsed.clear_on_every_leaf,
                    store=copy.deepcopy(parsed.store),
                )
            )

        for provider in built:
            # delete first so a replaced id moves to the end of dispatch order
            self._providers.pop(provider.id, None)
            self._providers[provider.id] = provider
            logger.debug("Registered provider %s on tree %s", provider.id, self.tree_id)
        return built

    def unregister(self, provider_id: str) -> bool:
        return self._providers.pop(provider_id, None) is not None

    def get(self, provider_id: str) -> Provider:
        if provider_id not in self._providers:
            raise NotFoundError("provider", provider_id, sorted(self._providers))
        return self._providers[provider_id]

    def ids(self) -> List[str]:
        return list(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __iter__(self) -> Iterator[Provider]:
        # snapshot so providers registering others mid-dispatch don't break iteration
        return iter(list(self._providers.values()))

    def __len__(self) -> int:
        return len(self._providers)


__all__ = ["ProviderTable", "DefinitionInput", "coerce_definition"]
