"""
Structural insertion into the option tree.

Unsorted trees append. SORT trees keep their children ordered by
(class, template, name): subtrees before leaves, "_template_" before its
same-class siblings, then plain string order. The UI mirror entry of an
inserted option is placed at the matching position in the parent's mirror.
"""
import logging
from typing import List

from optiontree.browser import insert_item, set_item_visible
from optiontree.config import get_option_tree_config
from optiontree.errors import OptionIntegrityError
from optiontree.option import Option, OptionFlag, OptionType, TEMPLATE_NAME

logger = logging.getLogger(__name__)


def sort_key(option: Option) -> tuple:
    """Ordering key used among the children of a SORT tree."""
    class_rank = 0 if option.type is OptionType.TREE else 1
    template_rank = 0 if option.name == TEMPLATE_NAME else 1
    return (class_rank, template_rank, option.name)


def _sorted_position(children: list, option: Option) -> int:
    if not children:
        return 0

    key = sort_key(option)
    # Fast path: not smaller than the last child
    if key >= sort_key(children[-1]):
        return len(children)

    for index, sibling in enumerate(children):
        if sort_key(sibling) > key:
            return index
    return len(children)


def _mirror_position(tree: Option, index: int):
    """Mirror index matching children[index], or None to append.

    Anchors on the next sibling that is present in the parent's mirror;
    siblings without an entry and soft-deleted siblings are skipped.
    """
    for sibling in tree.value[index + 1:]:
        if sibling.flags & OptionFlag.DELETED:
            continue
        item = sibling.box_item
        if item is not None and item.parent is tree.box_item:
            return tree.box_item.children.index(item)
    return None


def insert_option(tree: Option, option: Option) -> None:
    """Link option under tree, honouring SORT and mirroring the change.

    If the mirror insertion fails the option is unlinked again before the
    error propagates, leaving the tree as it was.
    """
    if tree.type is not OptionType.TREE or tree.value is None:
        raise OptionIntegrityError(f"Cannot insert {option.name} under non-tree {tree.path}")

    if option.box_item is not None and option.name == TEMPLATE_NAME:
        option.box_item.visible = get_option_tree_config().show_templates

    if tree.flags & OptionFlag.AUTOCREATE and not option.description and option.name != TEMPLATE_NAME:
        template = tree.child(TEMPLATE_NAME)
        if template is not None:
            option.description = template.description

    children = tree.value
    if tree.flags & OptionFlag.SORT:
        index = _sorted_position(children, option)
    else:
        index = len(children)

    children.insert(index, option)
    option.parent = tree

    if tree.box_item is not None and option.box_item is not None:
        try:
            insert_item(tree.box_item, option.box_item, _mirror_position(tree, index))
        except Exception:
            logger.error(f"Mirroring {option.name} under {tree.path or '<root>'} failed, unlinking it")
            del children[index]
            option.parent = None
            raise


def add_opt_rec(tree: Option, path: str, option: Option) -> None:
    """Insert option under the tree found at path (tree itself if path is empty).

    Raises:
        OptionIntegrityError: If path does not name a tree
    """
    parent = tree
    if path:
        from optiontree.resolver import get_opt_rec
        parent = get_opt_rec(tree, path)
        if parent is None:
            raise OptionIntegrityError(f"Missing option tree for '{path}'")

    insert_option(parent, option)


def update_visibility(tree: List[Option], show: bool, below_template: bool = False) -> None:
    """Show or hide "_template_" mirror items and everything beneath them.

    Soft-deleted options keep their hidden state.
    """
    for option in tree:
        if option.flags & OptionFlag.DELETED:
            continue

        if option.name == TEMPLATE_NAME:
            if option.box_item is not None:
                set_item_visible(option.box_item, show)
            update_visibility(option.children, show, True)
        else:
            if option.box_item is not None and below_template:
                set_item_visible(option.box_item, show)
            update_visibility(option.children, show, below_template)
