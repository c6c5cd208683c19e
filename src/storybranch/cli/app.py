"""
Storybranch CLI: validate story files, inspect trees, and visit branches.

State (branch cursors and pending provider values) lives in a YAML file,
outputs/state.yaml by default, so repeated `visit` calls keep revealing.
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from storybranch.cli.formatters import build_branches_table, build_providers_table, format_outcome
from storybranch.cli.load_helpers import load_or_exit
from storybranch.cli.paths import state_path, stories_path
from storybranch.core.engine import Engine, run_directive
from storybranch.errors import NotFoundError
from storybranch.host.renderer import ConsoleRenderer
from storybranch.io.loaders import load_state, load_stories, save_state
from storybranch.utils.logging import configure_logging

app = typer.Typer(help="Storybranch CLI: validate stories, inspect trees, and visit branches.")
console = Console()


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    configure_logging(log_level)


def _load_engine(
    stories: str | None,
    state: str | None = None,
    *,
    verbose_load: bool = False,
) -> Engine:
    engine = Engine(renderer=ConsoleRenderer(console))
    load_or_exit(load_stories, stories_path(stories), engine, console=console, verbose_errors=verbose_load)
    if state is not None:
        load_or_exit(load_state, state, engine, console=console, verbose_errors=verbose_load, must_exist=False)
    return engine


def _require_tree(engine: Engine, tree_id: str) -> None:
    if engine.find_tree(tree_id) is None:
        console.print(f"[red]Tree not found[/red]: {escape(tree_id)}")
        raise typer.Exit(code=2)


@app.command()
def validate(
    stories: str | None = typer.Argument(None, help="Story file or folder (default: ./stories)"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Validate story files."""
    engine = _load_engine(stories, verbose_load=verbose)

    branch_count = sum(len(engine.branches(tree_id)) for tree_id in engine.tree_ids())
    console.print(f"[green]OK[/green] Loaded {len(list(engine.tree_ids()))} tree(s)")
    console.print(f"[green]OK[/green] Loaded {branch_count} branch(es)")

    errors = engine.validate()
    if errors:
        console.print("[red]Validation errors detected:[/red]")
        for error in errors:
            console.print(f" - {escape(error)}")
        raise typer.Exit(code=1)

    console.print("[green]All validations passed[/green]")


@app.command()
def show(
    tree_id: str = typer.Argument(..., help="Tree id"),
    stories: str | None = typer.Option(None, "--stories", help="Story file or folder"),
    state: str | None = typer.Option(None, "--state", help="State file (default: outputs/state.yaml)"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Show a tree's providers and branch cursors."""
    engine = _load_engine(stories, state_path(state), verbose_load=verbose)
    _require_tree(engine, tree_id)
    console.print(build_providers_table(engine, tree_id))
    console.print(build_branches_table(engine, tree_id))


@app.command()
def visit(
    tree_id: str = typer.Argument(..., help="Tree id"),
    branch_id: str = typer.Argument(..., help="Branch id"),
    times: int = typer.Option(1, "--times", "-n", min=1, help="Number of visits"),
    stories: str | None = typer.Option(None, "--stories", help="Story file or folder"),
    state: str | None = typer.Option(None, "--state", help="State file (default: outputs/state.yaml)"),
    save: bool = typer.Option(True, "--save/--no-save", help="Write cursors back to the state file"),
    verbose: bool = typer.Option(False, "--verbose-load", help="Display full validation trace on loader errors"),
) -> None:
    """Visit a branch, revealing its next leaf."""
    resolved_state = state_path(state)
    engine = _load_engine(stories, resolved_state, verbose_load=verbose)
    _require_tree(engine, tree_id)
    try:
        directive = engine.get_branch(tree_id, branch_id)
    except NotFoundError as err:
        console.print(f"[red]Branch not found[/red]: {escape(str(err))}")
        raise typer.Exit(code=2)

    failed = False
    for _ in range(times):
        outcome = run_directive(engine, directive)
        if outcome is None:
            failed = True
            break
        console.print(format_outcome(outcome))
        if not outcome.dispatched:
            break

    if save:
        save_state(engine, resolved_state)
    if failed:
        raise typer.Exit(code=1)


@app.command()
def reset(
    tree_id: str = typer.Argument(..., help="Tree id"),
    branch_id: Optional[str] = typer.Argument(None, help="Branch id (default: every branch of the tree)"),
    stories: str | None = typer.Option(None, "--stories", help="Story file or folder"),
    state: str | None = typer.Option(None, "--state", help="State file (default: outputs/state.yaml)"),
) -> None:
    """Reset branch cursors back to the preamble."""
    resolved_state = state_path(state)
    engine = _load_engine(stories, resolved_state)
    _require_tree(engine, tree_id)

    targets = [branch_id] if branch_id else [d.id for d in engine.branches(tree_id)]
    for target in targets:
        engine.reset_branch(tree_id, target)
        console.print(f"[green]Reset[/green] {escape(tree_id)}/{escape(target)}")
    save_state(engine, resolved_state)


if __name__ == "__main__":  # pragma: no cover
    app()
