"""
Removing options from the tree.

Hard delete unlinks an option and releases it together with its whole
subtree, children before parent. Soft delete (mark_option_as_deleted) only
flags the subtree DELETED+TOUCHED and hides it in the UI mirror; the options
stay linked because something may still hold on to them, and a later hard
delete finishes the job.

Recursion levels used during teardown:
    1   release everything below (explicit delete, autocreated subtrees)
    0   only the option itself is expected (unregistering static tables);
        a non-empty, non-autocreating subtree is an integrity error
   -1   descendants of such a subtree, each reported as orphaned
"""
import logging

from optiontree.browser import remove_item, set_item_visible
from optiontree.errors import OptionIntegrityError
from optiontree.option import Option, OptionFlag, OptionType, release_option_value

logger = logging.getLogger(__name__)


def _done_option(option: Option) -> None:
    release_option_value(option)
    option.box_item = None
    option.change_hook = None
    option._freed = True


def free_options_tree(tree: Option, recursive: int) -> int:
    """Release every child of tree; returns the number of options released."""
    released = 0
    for child in list(tree.value):
        released += delete_option_do(child, recursive)
    tree.value.clear()
    return released


def delete_option_do(option: Option, recursive: int) -> int:
    """Unlink and release option and its descendants.

    Args:
        option: Option to delete
        recursive: Teardown level (see module docstring)

    Returns:
        Number of options released, option included

    Raises:
        OptionIntegrityError: If option was already released
    """
    if option.is_freed:
        raise OptionIntegrityError(f"Option {option.name} was already released")

    path = option.path
    parent = option.parent
    if parent is not None:
        if parent.value is not None and option in parent.value:
            parent.value.remove(option)
        option.parent = None

    if option.box_item is not None:
        remove_item(option.box_item)

    if recursive == -1:
        logger.error(f"Orphaned option {path}")

    released = 0
    if option.type is OptionType.TREE and option.value:
        if not recursive:
            if option.flags & OptionFlag.AUTOCREATE:
                recursive = 1
            else:
                logger.error(f"Orphaned unregistered option in subtree {path}!")
                recursive = -1
        released = free_options_tree(option, recursive)

    _done_option(option)
    return released + 1


def delete_option(option: Option) -> int:
    """Hard-delete option with its whole subtree.

    Returns:
        Number of options released
    """
    released = delete_option_do(option, 1)
    logger.debug(f"Deleted {option.name} ({released} options released)")
    return released


def mark_option_as_deleted(option: Option) -> None:
    """Flag option and its subtree DELETED+TOUCHED and hide them from the browser."""
    option.flags |= OptionFlag.TOUCHED | OptionFlag.DELETED
    if option.box_item is not None:
        set_item_visible(option.box_item, False)

    for child in option.children:
        mark_option_as_deleted(child)
