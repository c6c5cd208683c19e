"""Rendering collaborators: where revealed text and diagnostics go."""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape


@runtime_checkable
class Renderer(Protocol):
    def render(self, markup: str) -> None:
        """Show revealed branch content."""

    def notice(self, message: str) -> None:
        """Show a side-channel message from a provider."""

    def error(self, message: str) -> None:
        """Show a user-visible diagnostic for a failed directive."""


class ConsoleRenderer:
    """Render to a rich console. Leaf content is treated as rich markup."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def render(self, markup: str) -> None:
        self.console.print(markup)

    def notice(self, message: str) -> None:
        self.console.print(f"[dim]{escape(message)}[/dim]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{escape(message)}[/red]")


class BufferRenderer:
    """Collect output in memory."""

    def __init__(self) -> None:
        self.rendered: List[str] = []
        self.notices: List[str] = []
        self.errors: List[str] = []

    def render(self, markup: str) -> None:
        self.rendered.append(markup)

    def notice(self, message: str) -> None:
        self.notices.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    @property
    def last(self) -> Optional[str]:
        return self.rendered[-1] if self.rendered else None

    def clear(self) -> None:
        self.rendered.clear()
        self.notices.clear()
        self.errors.clear()


__all__ = ["Renderer", "ConsoleRenderer", "BufferRenderer"]
