"""Formatting helpers for CLI presentation."""

from __future__ import annotations

from rich.table import Table

from storybranch.core.branch.context import VisitOutcome
from storybranch.core.engine import Engine
from storybranch.core.providers import DEFAULT_PROVIDER_ID


def build_branches_table(engine: Engine, tree_id: str) -> Table:
    table = Table(title=f"Branches of {tree_id}")
    table.add_column("Branch")
    table.add_column("Policy")
    table.add_column("Leaves", justify="right")
    table.add_column("Cursor", justify="right")

    state = engine.state.find(tree_id)
    for directive in engine.branches(tree_id):
        cursor = state.cursor(directive.id) if state else 0
        table.add_row(directive.id, directive.policy.value, str(directive.last_index), f"{cursor}/{directive.last_index}")
    return table


def build_providers_table(engine: Engine, tree_id: str) -> Table:
    table = Table(title=f"Providers of {tree_id}")
    table.add_column("Provider")
    table.add_column("Arguments")
    table.add_column("Clear every leaf")

    tree = engine.get_tree(tree_id)
    for provider_id in tree.provider_ids():
        provider = tree.get_provider(provider_id)
        label = f"{provider_id} (default)" if provider_id == DEFAULT_PROVIDER_ID else provider_id
        table.add_row(label, provider.argument_mode.value, "yes" if provider.clear_on_every_leaf else "no")
    return table


def format_outcome(outcome: VisitOutcome) -> str:
    if not outcome.dispatched:
        return f"[yellow]{outcome.tree_id}/{outcome.branch_id}[/yellow]: finished (cursor {outcome.current})"
    note = " [dim](restarted)[/dim]" if outcome.restarted else ""
    return f"[green]{outcome.tree_id}/{outcome.branch_id}[/green]: leaf {outcome.previous} -> {outcome.current}{note}"
