from __future__ import annotations

"""Utilities for resolving story and state paths."""

from pathlib import Path


def stories_path(path: str | None) -> str:
    return path or str(Path.cwd() / "stories")


def outputs_dir() -> Path:
    return Path.cwd() / "outputs"


def state_path(path: str | None) -> str:
    """Resolve the state file; defaults to outputs/state.yaml.

    A name without a .yaml extension gets one.
    """
    if not path:
        return str(outputs_dir() / "state.yaml")
    p = Path(path)
    if p.suffix not in (".yaml", ".yml"):
        p = p.with_name(f"{p.name}.yaml")
    return str(p)
