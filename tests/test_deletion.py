"""Tests for hard and soft deletion."""

import logging

import pytest

from optiontree import (
    Option,
    OptionBrowser,
    OptionFlag,
    OptionIntegrityError,
    OptionType,
    delete_option,
    delete_option_do,
    insert_option,
    mark_option_as_deleted,
    prepare_mustsave_flags,
)
from optiontree.option import init_option_listbox_item


def browsable(name, option_type, **kwargs):
    option = Option(name, option_type, **kwargs)
    option.box_item = init_option_listbox_item(option)
    return option


@pytest.fixture
def subtree():
    """config -> document -> (colors -> (text, background), title)."""
    browser = OptionBrowser()
    config = Option("config", OptionType.TREE, flags=OptionFlag.LISTBOX)
    config.box_item = browser.root
    document = browsable("document", OptionType.TREE)
    colors = browsable("colors", OptionType.TREE)
    insert_option(config, document)
    insert_option(document, colors)
    insert_option(colors, browsable("text", OptionType.STRING, value="white"))
    insert_option(colors, browsable("background", OptionType.STRING, value="black"))
    insert_option(document, browsable("title", OptionType.STRING, value="untitled"))
    return config, browser


def descendants(option):
    found = [option]
    for child in option.children:
        found.extend(descendants(child))
    return found


class TestHardDelete:
    """Hard delete releases the whole subtree exactly once."""

    def test_releases_every_descendant(self, subtree):
        config, _ = subtree
        document = config.child("document")
        doomed = descendants(document)

        released = delete_option(document)

        assert released == len(doomed) == 5
        assert all(o.is_freed for o in doomed)
        assert config.children == []

    def test_unlinks_from_parent(self, subtree):
        config, _ = subtree
        colors = config.child("document").child("colors")

        delete_option(colors)

        assert config.child("document").child("colors") is None
        assert colors.parent is None

    def test_removes_mirror_item(self, subtree):
        config, browser = subtree
        removed = []
        browser.add_remove_callback(lambda parent, item: removed.append(item.option.name))

        delete_option(config.child("document"))

        assert removed == ["document"]
        assert browser.root.children == []

    def test_releases_values(self, subtree):
        config, _ = subtree
        title = config.child("document").child("title")

        delete_option(title)

        assert title.value is None
        assert title.box_item is None

    def test_double_delete_raises(self, subtree):
        config, _ = subtree
        title = config.child("document").child("title")
        delete_option(title)

        with pytest.raises(OptionIntegrityError):
            delete_option(title)


class TestUnregisterLevel:
    """Recursion level 0 expects an empty subtree."""

    def test_non_empty_subtree_is_reported_and_freed(self, subtree, caplog):
        config, _ = subtree
        document = config.child("document")
        doomed = descendants(document)

        with caplog.at_level(logging.ERROR, logger="optiontree.deletion"):
            released = delete_option_do(document, 0)

        assert released == 5
        assert all(o.is_freed for o in doomed)
        assert "Orphaned unregistered option in subtree config.document!" in caplog.text
        assert "Orphaned option document.title" in caplog.text

    def test_autocreate_subtree_is_freed_silently(self, caplog):
        tree = Option("terminal", OptionType.TREE, flags=OptionFlag.AUTOCREATE)
        insert_option(tree, Option("_template_", OptionType.TREE))
        insert_option(tree, Option("xterm", OptionType.TREE))

        with caplog.at_level(logging.ERROR, logger="optiontree.deletion"):
            released = delete_option_do(tree, 0)

        assert released == 3
        assert "Orphaned" not in caplog.text

    def test_empty_tree_is_fine(self, caplog):
        tree = Option("empty", OptionType.TREE)

        with caplog.at_level(logging.ERROR, logger="optiontree.deletion"):
            assert delete_option_do(tree, 0) == 1

        assert caplog.text == ""


class TestSoftDelete:
    """Soft delete flags and hides but keeps the subtree linked."""

    def test_flags_whole_subtree(self, subtree):
        config, _ = subtree
        colors = config.child("document").child("colors")

        mark_option_as_deleted(colors)

        for option in descendants(colors):
            assert option.flags & OptionFlag.DELETED
            assert option.flags & OptionFlag.TOUCHED
            assert not option.is_freed
        assert config.child("document").child("colors") is colors

    def test_hides_mirror_items(self, subtree):
        config, browser = subtree
        hidden = []
        browser.add_visibility_callback(lambda item: hidden.append(item.option.name))
        colors = config.child("document").child("colors")

        mark_option_as_deleted(colors)

        assert hidden == ["colors", "text", "background"]
        assert all(not o.box_item.visible for o in descendants(colors))

    def test_deleted_options_get_saved(self, subtree):
        config, _ = subtree
        title = config.child("document").child("title")

        mark_option_as_deleted(title)
        prepare_mustsave_flags(config.children, False)

        assert title.flags & OptionFlag.MUST_SAVE

    def test_hard_delete_after_soft_delete(self, subtree):
        config, browser = subtree
        colors = config.child("document").child("colors")
        mark_option_as_deleted(colors)

        assert delete_option(colors) == 3
        assert colors.is_freed
