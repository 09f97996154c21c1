"""Tests for option nodes, copying and per-type value handling."""

import pytest

from optiontree import (
    Color,
    Option,
    OptionFlag,
    OptionType,
    OptionValueError,
    check_option_value,
    copy_option,
    insert_option,
    update_option_tree_config,
)
from optiontree.option import (
    CODEPAGES,
    LANGUAGES,
    color_to_string,
    decode_color,
    get_cp_index,
    get_language_index,
)


class TestOptionNode:

    def test_tree_starts_empty(self):
        assert Option("t", OptionType.TREE).value == []

    def test_leaf_has_no_children(self):
        assert Option("n", OptionType.INT, value=1).children == []

    def test_path_skips_unnamed_root(self):
        root = Option("", OptionType.TREE)
        document = Option("document", OptionType.TREE)
        title = Option("title", OptionType.STRING, value="")
        insert_option(root, document)
        insert_option(document, title)

        assert title.path == "document.title"
        assert repr(title) == "<Option document.title (STRING)>"

    def test_options_compare_by_identity(self):
        a = Option("x", OptionType.INT, value=1)
        b = Option("x", OptionType.INT, value=1)
        assert a != b
        assert len({a, b}) == 2


class TestCopyOption:
    """Copies are deep, independent and flagged ALLOC."""

    def test_deep_copy_of_tree(self):
        template = Option("_template_", OptionType.TREE, description="Per-type options")
        insert_option(template, Option("colors", OptionType.INT, value=2, max=3))
        insert_option(template, Option("fg", OptionType.COLOR, value=Color(1, 2, 3)))

        copy = copy_option(template)

        assert copy.flags & OptionFlag.ALLOC
        assert copy.description == "Per-type options"
        assert [o.name for o in copy.children] == ["colors", "fg"]
        assert all(child.parent is copy for child in copy.children)
        assert copy.child("colors") is not template.child("colors")
        assert copy.child("fg").value == Color(1, 2, 3)
        assert [item.option.name for item in copy.box_item.children] == ["colors", "fg"]

    def test_shallow_copy_has_no_children(self):
        template = Option("t", OptionType.TREE)
        insert_option(template, Option("n", OptionType.INT, value=0))

        copy = copy_option(template, shallow=True, listbox=False)

        assert copy.children == []
        assert copy.box_item is None

    def test_copy_shares_change_hook(self):
        def hook(context, current, changed):
            return 0

        option = Option("n", OptionType.INT, value=0, change_hook=hook)
        assert copy_option(option).change_hook is hook


class TestCheckOptionValue:
    """Writes are validated per type."""

    def test_int_bounds(self):
        option = Option("n", OptionType.INT, value=0, min=1, max=5)
        assert check_option_value(option, 5) == 5
        with pytest.raises(OptionValueError):
            check_option_value(option, 0)
        with pytest.raises(OptionValueError):
            check_option_value(option, "3")

    def test_bool_accepts_python_bools(self):
        option = Option("b", OptionType.BOOL, value=0, max=1)
        assert check_option_value(option, True) == 1

    def test_string_truncated(self):
        update_option_tree_config(max_string_length=3)
        option = Option("s", OptionType.STRING, value="")
        assert check_option_value(option, "abcdef") == "abc"

    def test_color(self):
        option = Option("c", OptionType.COLOR, value=Color(0, 0, 0))
        assert check_option_value(option, "#ff0000") == Color(255, 0, 0)
        assert check_option_value(option, Color(1, 1, 1)) == Color(1, 1, 1)
        with pytest.raises(OptionValueError):
            check_option_value(option, "not-a-color")

    def test_codepage_by_name_or_index(self):
        option = Option("cp", OptionType.CODEPAGE, value=0)
        assert check_option_value(option, "ISO-8859-2") == CODEPAGES.index("iso-8859-2")
        assert check_option_value(option, 0) == 0
        with pytest.raises(OptionValueError):
            check_option_value(option, "klingon")
        with pytest.raises(OptionValueError):
            check_option_value(option, len(CODEPAGES))

    def test_language(self):
        option = Option("lang", OptionType.LANGUAGE, value=0)
        assert check_option_value(option, "czech") == LANGUAGES.index("Czech")

    def test_command_needs_callable(self):
        option = Option("cmd", OptionType.COMMAND)
        with pytest.raises(OptionValueError):
            check_option_value(option, "print")

    def test_tree_and_alias_reject_writes(self):
        with pytest.raises(OptionValueError):
            check_option_value(Option("t", OptionType.TREE), [])
        with pytest.raises(OptionValueError):
            check_option_value(Option("a", OptionType.ALIAS, value="t"), "x")


class TestValueTables:

    def test_decode_short_hex(self):
        assert decode_color("#0f0") == Color(0, 255, 0)

    def test_color_names_round_trip(self):
        assert color_to_string(decode_color("Navy")) == "navy"
        assert color_to_string(Color(1, 2, 3)) == "#010203"

    def test_codepage_aliases(self):
        assert get_cp_index("latin2") == CODEPAGES.index("iso-8859-2")
        assert get_cp_index("cp1251") == CODEPAGES.index("windows-1251")
        assert get_cp_index("no-such-codec") == -1

    def test_language_lookup(self):
        assert get_language_index("System") == 0
        assert get_language_index("Elvish") == -1
