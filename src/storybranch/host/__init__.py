"""Host collaborators: rendering and argument evaluation."""

from __future__ import annotations

from .evaluator import ExpressionEvaluator, YamlExpressionEvaluator
from .renderer import BufferRenderer, ConsoleRenderer, Renderer

__all__ = [
    "ExpressionEvaluator",
    "YamlExpressionEvaluator",
    "Renderer",
    "ConsoleRenderer",
    "BufferRenderer",
]
