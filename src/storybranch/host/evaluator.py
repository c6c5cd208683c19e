"""Expression evaluators: turn a leaf's raw argument text into a mapping.

The reference evaluator reads YAML, so flow mappings (``{spriteL: happy}``)
and JSON objects both work. ``!clear`` yields the CLEAR directive:

    {spriteL: !clear, music: [theme, 0.5]}

YAML wants a space after a tag, so a bare ``!clear`` right before ``,``, ``}``
or ``]`` is given an empty scalar before parsing.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Mapping, Protocol, runtime_checkable

import yaml

from storybranch.core.delta import CLEAR

CLEAR_TAG = "!clear"

_BARE_CLEAR = re.compile(r"!clear(?=\s*(?:[,}\]]|$))", re.MULTILINE)


@runtime_checkable
class ExpressionEvaluator(Protocol):
    def evaluate(self, text: str) -> Mapping[str, Any]:
        """Return the mapping described by ``text`` or raise."""


class _ArgumentLoader(yaml.SafeLoader):
    """SafeLoader that also understands the ``!clear`` tag."""


def _construct_clear(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    return CLEAR


_ArgumentLoader.add_constructor(CLEAR_TAG, _construct_clear)


class YamlExpressionEvaluator:
    def evaluate(self, text: str) -> Dict[str, Any]:
        source = _BARE_CLEAR.sub(f"{CLEAR_TAG} ''", text or "")
        data = yaml.load(source, Loader=_ArgumentLoader)  # noqa: S506 - SafeLoader subclass
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"argument expression must be a mapping, got {type(data).__name__}")
        return {str(key): value for key, value in data.items()}


__all__ = ["CLEAR_TAG", "ExpressionEvaluator", "YamlExpressionEvaluator"]
