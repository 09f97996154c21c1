"""
Save bookkeeping for an external configuration writer.

The writer owns the file syntax; this module only decides *what* is worth
writing. Before saving, prepare_mustsave_flags() computes MUST_SAVE from the
TOUCHED/DELETED flags. walk_config() then yields the options in save order,
skipping hidden entries, aliases, templates and subtrees with nothing to
save. After a successful save, untouch_options() clears TOUCHED.

Comment policy passed down the walk:
    2   comments are printed normally
    1   only for templates and non-autocreating trees (first autocreated level)
    <=0 never
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from optiontree.option import Option, OptionFlag, OptionType, TEMPLATE_NAME, format_option_value


def prepare_mustsave_flags(tree: List[Option], set_all: bool) -> None:
    """Set or clear MUST_SAVE in all descendants of tree.

    Args:
        tree: Children list of the tree to process
        set_all: If True, set MUST_SAVE everywhere. If False, set it only on
                 touched or deleted options (and LANGUAGE ones), clear elsewhere.
    """
    for option in tree:
        # LANGUAGE options are always saved
        if (set_all
                or option.flags & (OptionFlag.TOUCHED | OptionFlag.DELETED)
                or option.type is OptionType.LANGUAGE):
            option.flags |= OptionFlag.MUST_SAVE
        else:
            option.flags &= ~OptionFlag.MUST_SAVE

        if option.type is OptionType.TREE:
            prepare_mustsave_flags(option.children, set_all)


def untouch_options(tree: List[Option]) -> None:
    """Clear TOUCHED in all descendants of tree."""
    for option in tree:
        option.flags &= ~OptionFlag.TOUCHED

        if option.type is OptionType.TREE:
            untouch_options(option.children)


def check_nonempty_tree(tree: List[Option]) -> bool:
    """True if any leaf below tree is marked MUST_SAVE."""
    for option in tree:
        if option.type is OptionType.TREE:
            if check_nonempty_tree(option.children):
                return True
        elif option.flags & OptionFlag.MUST_SAVE:
            return True
    return False


class WalkAction(Enum):
    """What a ConfigEntry asks the writer to emit."""
    VALUE = "value"
    TREE_BEGIN = "tree_begin"
    TREE_END = "tree_end"


@dataclass(frozen=True)
class ConfigEntry:
    """One step of the save traversal.

    Attributes:
        option: The option concerned
        action: VALUE for a leaf, TREE_BEGIN/TREE_END around a subtree
        path: Dotted path of the containing tree (None at top level)
        depth: Nesting level, 0 at top level
        comment: Whether caption/description comments should accompany it
        value: Formatted value for VALUE entries, else None
    """
    option: Option
    action: WalkAction
    path: Optional[str]
    depth: int
    comment: bool
    value: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.path}.{self.option.name}" if self.path else self.option.name


def walk_config(tree: List[Option], print_comment: int = 2, path: Optional[str] = None,
                depth: int = 0) -> Iterator[ConfigEntry]:
    """Yield the save-worthy options below tree, depth first.

    Run prepare_mustsave_flags() first; only MUST_SAVE leaves and subtrees
    containing them are yielded. Options whose type has no textual form
    (COMMAND) are skipped.
    """
    for option in tree:
        if (option.flags & OptionFlag.HIDDEN
                or option.type is OptionType.ALIAS
                or option.name == TEMPLATE_NAME):
            continue

        if option.type is OptionType.TREE:
            if not check_nonempty_tree(option.children):
                continue
        elif not option.flags & OptionFlag.MUST_SAVE:
            continue

        # Entries of an autocreated tree carry no comments of their own
        do_print_comment = not (
            print_comment <= 0
            or (print_comment == 1
                and option.name != TEMPLATE_NAME
                and option.flags & OptionFlag.AUTOCREATE
                and option.type is OptionType.TREE)
        )

        if option.type is OptionType.TREE:
            child_comment = print_comment
            if child_comment == 2 and option.flags & OptionFlag.AUTOCREATE:
                child_comment = 1
            elif child_comment == 1 and option.name != TEMPLATE_NAME:
                child_comment = 0

            child_path = f"{path}.{option.name}" if path else option.name

            yield ConfigEntry(option, WalkAction.TREE_BEGIN, path, depth, do_print_comment)
            yield from walk_config(option.children, child_comment, child_path, depth + 1)
            yield ConfigEntry(option, WalkAction.TREE_END, path, depth, do_print_comment)
            continue

        value = format_option_value(option)
        if value is None:
            continue
        yield ConfigEntry(option, WalkAction.VALUE, path, depth, do_print_comment, value)
