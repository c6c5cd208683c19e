"""Provider definitions and the registered provider record."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field, model_validator

DEFAULT_PROVIDER_ID = "__default"


class ArgumentMode(str, Enum):
    """How an update value is handed to on_update."""

    LIST = "list"  # spread the value as positional args, then the context
    SINGLE = "single"  # pass the value as one argument, then the context


class ProviderDefinition(BaseModel):
    """What a caller supplies when registering a provider.

    ``skip_args=True`` on input is the same as ``argument_mode="single"``.
    """

    on_update: Callable[..., Any]
    on_clear: Optional[Callable[..., Any]] = None
    argument_mode: ArgumentMode = ArgumentMode.LIST
    clear_on_every_leaf: bool = False
    store: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"arbitrary_types_allowed": True, "extra": "forbid"}

    @model_validator(mode="before")
    @classmethod
    def _translate_skip_args(cls, data: Any) -> Any:
        if isinstance(data, dict) and "skip_args" in data:
            data = dict(data)
            skip = data.pop("skip_args")
            if "argument_mode" not in data:
                data["argument_mode"] = ArgumentMode.SINGLE if skip else ArgumentMode.LIST
        return data

    @property
    def skip_args(self) -> bool:
        return self.argument_mode is ArgumentMode.SINGLE


class Provider(ProviderDefinition):
    """A provider registered under one id in a tree's provider table."""

    id: str
    delta: Optional[Dict[str, Any]] = None

    def clear(self, context: Any = None) -> None:
        if self.on_clear is not None:
            self.on_clear(context)


__all__ = ["DEFAULT_PROVIDER_ID", "ArgumentMode", "ProviderDefinition", "Provider"]
