"""
Tests for provider registration on a tree.

Tests cover:
- single and multi-id registration
- replacement of an existing id
- validation failures and atomicity
- the default provider slot
"""

import pytest

from storybranch.core.providers import DEFAULT_PROVIDER_ID, ArgumentMode, ProviderDefinition
from storybranch.core.providers.builtin import render_reveal
from storybranch.core.tree import Tree
from storybranch.errors import NotFoundError, ValidationError


def _noop(*args):
    return None


class TestRegisterProvider:
    """Tests for Tree.register_provider."""

    def test_returns_tree_for_chaining(self):
        tree = Tree("vn")
        result = tree.register_provider("spriteL", {"on_update": _noop}).register_provider("music", _noop)

        assert result is tree
        assert tree.provider_ids() == [DEFAULT_PROVIDER_ID, "spriteL", "music"]

    def test_multi_id_registers_separate_copies(self):
        tree = Tree("vn")
        tree.register_provider(["spriteL", "spriteR"], {"on_update": _noop, "store": {"shown": []}})

        left = tree.get_provider("spriteL")
        right = tree.get_provider("spriteR")
        assert left is not right
        assert left.id == "spriteL"
        assert right.id == "spriteR"
        left.store["shown"].append("happy")
        assert right.store["shown"] == []

    def test_registering_twice_keeps_second_definition(self):
        tree = Tree("vn")
        first = lambda *a: "first"  # noqa: E731
        second = lambda *a: "second"  # noqa: E731

        tree.register_provider("spriteL", first)
        tree.register_provider("spriteL", second)

        assert tree.provider_ids().count("spriteL") == 1
        assert tree.get_provider("spriteL").on_update is second

    def test_skip_args_maps_to_single_mode(self):
        tree = Tree("vn")
        tree.register_provider("music", {"on_update": _noop, "skip_args": True})

        provider = tree.get_provider("music")
        assert provider.argument_mode is ArgumentMode.SINGLE
        assert provider.skip_args

    def test_definition_model_is_accepted(self):
        tree = Tree("vn")
        definition = ProviderDefinition(on_update=_noop, clear_on_every_leaf=True)
        tree.register_provider("spriteL", definition)

        assert tree.get_provider("spriteL").clear_on_every_leaf is True


class TestRegistrationValidation:
    """Registration errors raise ValidationError and commit nothing."""

    @pytest.mark.parametrize("bad_id", ["", "   "])
    def test_blank_id_rejected(self, bad_id):
        tree = Tree("vn")
        with pytest.raises(ValidationError):
            tree.register_provider(bad_id, _noop)

    def test_missing_on_update_rejected(self):
        tree = Tree("vn")
        with pytest.raises(ValidationError, match="on_update"):
            tree.register_provider("spriteL", {"on_clear": _noop})

    def test_non_callable_on_update_rejected(self):
        tree = Tree("vn")
        with pytest.raises(ValidationError, match="not a function"):
            tree.register_provider("spriteL", {"on_update": "show"})

    def test_non_callable_on_clear_rejected(self):
        tree = Tree("vn")
        with pytest.raises(ValidationError, match="on_clear"):
            tree.register_provider("spriteL", {"on_update": _noop, "on_clear": 42})

    def test_unknown_field_rejected(self):
        tree = Tree("vn")
        with pytest.raises(ValidationError):
            tree.register_provider("spriteL", {"on_update": _noop, "on_updaet": _noop})

    def test_multi_id_failure_is_atomic(self):
        tree = Tree("vn")
        with pytest.raises(ValidationError):
            tree.register_provider(["spriteL", " "], _noop)

        assert tree.provider_ids() == [DEFAULT_PROVIDER_ID]


class TestDefaultProvider:
    """The reserved default provider slot."""

    def test_default_installed_at_construction(self):
        tree = Tree("vn")
        assert tree.get_provider(DEFAULT_PROVIDER_ID).on_update is render_reveal

    def test_register_default_replaces(self):
        tree = Tree("vn")
        tree.register_default(_noop)

        assert tree.provider_ids() == [DEFAULT_PROVIDER_ID]
        assert tree.get_provider(DEFAULT_PROVIDER_ID).on_update is _noop

    def test_unregistering_default_reinstalls_builtin(self):
        tree = Tree("vn")
        tree.register_default(_noop)

        assert tree.unregister_provider(DEFAULT_PROVIDER_ID) is True
        assert tree.get_provider(DEFAULT_PROVIDER_ID).on_update is render_reveal

    def test_unknown_provider_lookup(self):
        tree = Tree("vn")
        assert tree.unregister_provider("ghost") is False
        with pytest.raises(NotFoundError):
            tree.get_provider("ghost")


def test_tree_requires_id():
    with pytest.raises(ValidationError):
        Tree("  ")
