from __future__ import annotations

"""Save and restore engine state as YAML."""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError as SchemaError

from storybranch.core.engine import Engine
from storybranch.errors import ValidationError
from storybranch.io.loaders.errors import LoaderError


def save_state(engine: Engine, path: str) -> None:
    """Write every tree's cursors and pending values to ``path``."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"trees": engine.snapshot()}, f, default_flow_style=False, sort_keys=True)


def load_state(path: str, engine: Engine) -> bool:
    """Restore state saved by ``save_state``. Returns False when there is no file."""
    if not os.path.exists(path):
        return False
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise LoaderError(path, "Invalid YAML", cause=exc) from exc
    trees = data.get("trees") if isinstance(data, dict) else None
    if not isinstance(trees, dict):
        raise LoaderError(path, "State file must contain a 'trees' mapping")
    try:
        engine.restore(trees)
    except (SchemaError, ValidationError) as exc:
        raise LoaderError(path, "Invalid saved state", cause=exc) from exc
    return True
