"""Shared error message formatting utilities."""

from typing import Iterable


def format_validation_errors(errors: Iterable[dict], limit: int = 3) -> str:
    """
    Condense pydantic error dicts into one line.

    Args:
        errors: Output of ``pydantic.ValidationError.errors()``
        limit: Maximum number of errors spelled out

    Returns:
        Message like "on_update: Field required; ... (2 more)"
    """
    error_list = list(errors)
    snippets = []
    for err in error_list:
        loc = ".".join(str(entry) for entry in err.get("loc", [])) or "<root>"
        msg = err.get("msg") or err.get("type") or "validation error"
        snippets.append(f"{loc}: {msg}")
        if len(snippets) >= limit:
            break
    remaining = len(error_list) - len(snippets)
    if remaining > 0:
        snippets.append(f"... ({remaining} more)")
    return "; ".join(snippets)


def error_source(tree_id: str, *parts: str) -> str:
    """Build the ``@tree/part/...`` prefix used in diagnostics."""
    return "/".join([f"@{tree_id}", *parts])


def format_diagnostic(message: str, source: str | None = None) -> str:
    """Format a user-visible diagnostic for a failed directive."""
    if source:
        return f"{source}: bad evaluation: {message}"
    return f"bad evaluation: {message}"
