from __future__ import annotations

"""Shared helpers for loading stories and state with CLI-friendly errors."""

from pathlib import Path
from typing import Any, Callable

import typer
from rich.console import Console
from rich.markup import escape

from storybranch.io.loaders import LoaderError


def load_or_exit(
    loader_fn: Callable[..., Any],
    *args: Any,
    console: Console,
    verbose_errors: bool = False,
    must_exist: bool = True,
    **kwargs: Any,
) -> Any:
    if args and must_exist:
        first = args[0]
        if isinstance(first, str) and not Path(first).exists():
            console.print(f"[red]Path not found:[/red] {escape(first)}")
            raise typer.Exit(code=1)
    try:
        return loader_fn(*args, **kwargs)
    except LoaderError as err:
        if verbose_errors and err.cause:
            console.print(f"[red]Failed to load data:[/red] {escape(err.message)}\n{escape(str(err.cause))}")
        else:
            console.print(f"[red]Failed to load data:[/red] {escape(str(err))}")
        raise typer.Exit(code=1)


__all__ = ["load_or_exit"]
