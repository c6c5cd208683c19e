"""
Provider layer.

Components:
- ProviderDefinition / Provider: what a caller registers and what is stored
- ProviderTable: per-tree id -> Provider table with atomic registration
- DispatchEngine: applies a delta to every provider of a table
- builtin: the default cumulative-reveal provider and an echo provider
"""

from storybranch.core.providers.builtin import default_render_definition, echo_definition, render_reveal
from storybranch.core.providers.definition import (
    DEFAULT_PROVIDER_ID,
    ArgumentMode,
    Provider,
    ProviderDefinition,
)
from storybranch.core.providers.dispatch import DispatchEngine
from storybranch.core.providers.table import ProviderTable

__all__ = [
    "DEFAULT_PROVIDER_ID",
    "ArgumentMode",
    "Provider",
    "ProviderDefinition",
    "ProviderTable",
    "DispatchEngine",
    "default_render_definition",
    "echo_definition",
    "render_reveal",
]
