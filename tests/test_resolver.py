"""
Tests for dotted-path lookup.

Tests cover:
- Direct and nested lookup
- Misses on missing, non-tree and hidden ancestors
- Autocreation from "_template_" (once, strict mode, multi-level)
- Alias indirection
"""

import pytest

from optiontree import (
    AliasTargetError,
    LookupMode,
    Option,
    OptionFlag,
    OptionType,
    TemplateMissingError,
    get_opt_rec,
    get_opt_rec_real,
    indirect_option,
    insert_option,
)


def make_terminal_tree(template_flags=OptionFlag.NONE):
    """root -> terminal (AUTOCREATE) -> _template_ -> colors."""
    root = Option("", OptionType.TREE, flags=OptionFlag.SORT)
    terminal = Option("terminal", OptionType.TREE, flags=OptionFlag.AUTOCREATE | OptionFlag.SORT)
    insert_option(root, terminal)
    template = Option("_template_", OptionType.TREE, flags=template_flags,
                      description="Options of one terminal type")
    insert_option(terminal, template)
    insert_option(template, Option("colors", OptionType.INT, value=1, max=3))
    return root, terminal, template


class TestLookup:
    """Plain lookups never change the tree."""

    def test_direct_child(self):
        root, terminal, _ = make_terminal_tree()
        assert get_opt_rec(root, "terminal") is terminal

    def test_nested_path(self):
        root, _, template = make_terminal_tree()
        colors = get_opt_rec(root, "terminal._template_.colors")
        assert colors is template.child("colors")
        assert colors.path == "terminal._template_.colors"

    def test_missing_leaf_returns_none(self):
        root = Option("", OptionType.TREE)
        insert_option(root, Option("document", OptionType.TREE))
        assert get_opt_rec(root, "document.title") is None
        assert get_opt_rec(root, "nothing") is None

    def test_missing_ancestor_returns_none(self):
        root = Option("", OptionType.TREE)
        assert get_opt_rec(root, "a.b.c") is None

    def test_non_tree_ancestor_returns_none(self):
        root, _, _ = make_terminal_tree()
        assert get_opt_rec(root, "terminal._template_.colors.depth") is None

    def test_hidden_ancestor_returns_none(self):
        root = Option("", OptionType.TREE)
        secret = Option("secret", OptionType.TREE, flags=OptionFlag.HIDDEN)
        insert_option(root, secret)
        insert_option(secret, Option("key", OptionType.STRING, value="x"))

        assert get_opt_rec(root, "secret") is secret
        assert get_opt_rec(root, "secret.key") is None

    def test_identity_is_stable(self):
        root, _, _ = make_terminal_tree()
        first = get_opt_rec(root, "terminal._template_.colors")
        second = get_opt_rec(root, "terminal._template_.colors")
        assert first is second


class TestAutocreate:
    """Lookups below AUTOCREATE trees clone the template."""

    def test_autocreates_from_template(self):
        root, terminal, template = make_terminal_tree()

        xterm = get_opt_rec(root, "terminal.xterm")

        assert xterm is not None
        assert xterm.name == "xterm"
        assert xterm.parent is terminal
        assert xterm.flags & OptionFlag.ALLOC
        assert xterm.child("colors").value == 1
        assert xterm.child("colors") is not template.child("colors")

    def test_autocreates_only_once(self):
        root, terminal, _ = make_terminal_tree()

        first = get_opt_rec(root, "terminal.xterm.colors")
        second = get_opt_rec(root, "terminal.xterm.colors")

        assert first is second
        assert [o.name for o in terminal.children] == ["_template_", "xterm"]

    def test_autocreated_copies_are_independent(self):
        root, _, template = make_terminal_tree()

        get_opt_rec(root, "terminal.xterm.colors").value = 3

        assert template.child("colors").value == 1
        assert get_opt_rec(root, "terminal.vt100.colors").value == 1

    def test_autocreated_siblings_are_sorted(self):
        root, terminal, _ = make_terminal_tree()

        get_opt_rec(root, "terminal.xterm")
        get_opt_rec(root, "terminal.linux")
        get_opt_rec(root, "terminal.aterm")

        assert [o.name for o in terminal.children] == ["_template_", "aterm", "linux", "xterm"]

    def test_strict_lookup_never_creates(self):
        root, terminal, _ = make_terminal_tree()

        assert get_opt_rec(root, "terminal.xterm", LookupMode.STRICT) is None
        assert get_opt_rec_real(root, "terminal.xterm.colors") is None
        assert len(terminal.children) == 1

    def test_empty_segments_are_misses(self):
        root, terminal, _ = make_terminal_tree()

        assert get_opt_rec(root, "terminal.") is None
        assert get_opt_rec(root, "terminal..colors") is None
        assert get_opt_rec(root, "") is None
        assert [o.name for o in terminal.children] == ["_template_"]

    def test_missing_template_raises(self):
        root = Option("", OptionType.TREE)
        insert_option(root, Option("mime", OptionType.TREE, flags=OptionFlag.AUTOCREATE))

        with pytest.raises(TemplateMissingError):
            get_opt_rec(root, "mime.text")

    def test_multi_level_autocreate(self):
        """A template that autocreates itself gives nested autocreation."""
        root, _, template = make_terminal_tree(template_flags=OptionFlag.AUTOCREATE)
        insert_option(template, Option("_template_", OptionType.STRING, value="default"))

        option = get_opt_rec(root, "terminal.xterm.profile")

        assert option is not None
        assert option.value == "default"
        assert option.path == "terminal.xterm.profile"


class TestIndirectOption:
    """Aliases resolve to their target."""

    def test_alias_resolves(self):
        root, _, template = make_terminal_tree()
        alias = Option("colours", OptionType.ALIAS, value="terminal._template_.colors")
        insert_option(root, alias)

        assert indirect_option(root, alias) is template.child("colors")

    def test_non_alias_returned_as_is(self):
        root, terminal, _ = make_terminal_tree()
        assert indirect_option(root, terminal) is terminal

    def test_dangling_alias_raises(self):
        root = Option("", OptionType.TREE)
        alias = Option("old", OptionType.ALIAS, value="no.such.option")
        insert_option(root, alias)

        with pytest.raises(AliasTargetError):
            indirect_option(root, alias)
