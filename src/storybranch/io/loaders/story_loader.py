from __future__ import annotations

import glob
import logging
import os
from typing import Any, Dict, List, Tuple

import yaml
from pydantic import ValidationError

from storybranch.core.branch.models import BranchDirective
from storybranch.core.engine import Engine
from storybranch.errors import StoryBranchError
from storybranch.io.loaders.errors import LoaderError
from storybranch.io.loaders.file_spec import StoryFileSpec

logger = logging.getLogger(__name__)


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise LoaderError(path, "Invalid YAML", cause=exc) from exc


def story_files(path: str) -> List[str]:
    """A single .yaml file, or every .yaml file under a directory tree."""
    if os.path.isfile(path):
        return [path]
    return sorted(glob.glob(os.path.join(path, "**", "*.yaml"), recursive=True))


def load_stories(path: str, engine: Engine) -> None:
    """Load trees, echo providers and branches from story YAML files.

    Expected format:
    defaults:
      policy: repeat-last
    trees:
      - id: vn
        providers:
          - ids: [spriteL, spriteR]
            clear_on_every_leaf: true
    branches:
      - tree: vn
        id: intro
        policy: repeat
        leaves:
          - "You wake up. "
          - content: "A figure appears. "
            args: "{spriteL: stranger}"
    """
    if not os.path.exists(path):
        return
    pending: List[Tuple[str, BranchDirective]] = []
    for fp in story_files(path):
        data = _read_yaml(fp)
        try:
            spec = StoryFileSpec.model_validate(data)
        except ValidationError as exc:
            raise LoaderError(fp, "Invalid story definition", cause=exc) from exc

        for entry in spec.trees:
            try:
                tree = engine.find_tree(entry.id) or engine.create_tree(entry.id, persist_delta=entry.persist_delta)
                for provider in entry.providers:
                    for provider_id in provider.ids:
                        tree.register_provider(provider_id, provider.build(provider_id))
            except StoryBranchError as exc:
                raise LoaderError(fp, f"Failed to register tree '{entry.id}'", cause=exc) from exc

        for entry in spec.branches:
            try:
                pending.append((fp, entry.build(spec.defaults)))
            except ValidationError as exc:
                raise LoaderError(fp, f"Invalid branch '{entry.tree}/{entry.id}'", cause=exc) from exc

    for fp, directive in pending:
        if engine.find_tree(directive.tree) is None:
            raise LoaderError(fp, f"Branch '{directive.id}' references unknown tree '{directive.tree}'")
        engine.register_branch(directive)
        logger.debug("Loaded branch %s/%s from %s", directive.tree, directive.id, fp)
