import textwrap

import pytest

from storybranch.core.branch import EndPolicy
from storybranch.core.engine import Engine
from storybranch.host import BufferRenderer
from storybranch.io.loaders import LoaderError, load_stories


def _write(path, content: str) -> None:
    path.write_text(textwrap.dedent(content), encoding="utf-8")


def _story_dir(tmp_path):
    stories = tmp_path / "stories"
    stories.mkdir()
    _write(
        stories / "vn.yaml",
        """
        defaults:
          policy: no-repeat
        trees:
          - id: vn
            providers:
              - ids: [spriteL, spriteR]
                clear_on_every_leaf: true
              - ids: music
        branches:
          - tree: vn
            id: intro
            leaves:
              - "pre "
              - content: "one "
                args: "{spriteL: happy}"
              - content: "two "
                args:
                  music: rain
          - tree: vn
            id: loop
            policy: repeat
            leaves: ["", "tick "]
        """,
    )
    return stories


def test_load_trees_providers_and_branches(tmp_path):
    engine = Engine()
    load_stories(str(_story_dir(tmp_path)), engine)

    tree = engine.get_tree("vn")
    assert tree.provider_ids() == ["__default", "spriteL", "spriteR", "music"]
    assert tree.get_provider("spriteL").clear_on_every_leaf is True

    intro = engine.get_branch("vn", "intro")
    assert intro.policy is EndPolicy.NO_REPEAT
    assert [leaf.content for leaf in intro.leaves] == ["pre ", "one ", "two "]
    assert intro.leaves[2].args == "{music: rain}"
    assert engine.get_branch("vn", "loop").policy is EndPolicy.REPEAT


def test_loaded_story_plays(tmp_path):
    renderer = BufferRenderer()
    engine = Engine(renderer=renderer)
    load_stories(str(_story_dir(tmp_path)), engine)

    engine.visit("vn", "intro")
    engine.visit("vn", "intro")

    assert renderer.rendered == ["one ", "one two "]
    assert renderer.notices == [
        "spriteL: happy",
        "spriteR: clear",
        "spriteL: clear",
        "spriteR: clear",
        "music: rain",
    ]


def test_single_file_path(tmp_path):
    stories = _story_dir(tmp_path)
    engine = Engine()
    load_stories(str(stories / "vn.yaml"), engine)

    assert len(engine.branches("vn")) == 2


def test_missing_path_is_ignored(tmp_path):
    engine = Engine()
    load_stories(str(tmp_path / "nowhere"), engine)
    assert list(engine.tree_ids()) == []


def test_branch_with_unknown_tree(tmp_path):
    _write(
        tmp_path / "bad.yaml",
        """
        branches:
          - tree: ghost
            id: intro
            leaves: ["", "a"]
        """,
    )
    with pytest.raises(LoaderError) as excinfo:
        load_stories(str(tmp_path), Engine())
    assert "unknown tree 'ghost'" in str(excinfo.value)
    assert "bad.yaml" in str(excinfo.value)


def test_branch_without_revealable_leaf(tmp_path):
    _write(
        tmp_path / "short.yaml",
        """
        trees:
          - id: vn
        branches:
          - tree: vn
            id: intro
            leaves: ["only preamble"]
        """,
    )
    with pytest.raises(LoaderError) as excinfo:
        load_stories(str(tmp_path), Engine())
    assert "Invalid branch 'vn/intro'" in str(excinfo.value)


def test_invalid_policy(tmp_path):
    _write(
        tmp_path / "policy.yaml",
        """
        trees:
          - id: vn
        branches:
          - tree: vn
            id: intro
            policy: sometimes
            leaves: ["", "a"]
        """,
    )
    with pytest.raises(LoaderError) as excinfo:
        load_stories(str(tmp_path), Engine())
    assert "Invalid story definition" in str(excinfo.value)


def test_invalid_yaml(tmp_path):
    (tmp_path / "broken.yaml").write_text("trees: [\n", encoding="utf-8")
    with pytest.raises(LoaderError):
        load_stories(str(tmp_path), Engine())


def test_trees_shared_across_files(tmp_path):
    _write(tmp_path / "a_trees.yaml", "trees:\n  - id: vn\n")
    _write(tmp_path / "b_branches.yaml", "branches:\n  - tree: vn\n    id: intro\n    leaves: ['', 'a']\n")

    engine = Engine()
    load_stories(str(tmp_path), engine)
    assert engine.get_branch("vn", "intro").id == "intro"
