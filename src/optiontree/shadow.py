"""
Per-context overlay ("shadow") trees.

A shadow tree starts empty and only grows along the paths that are actually
overridden: asking for the shadow of an option materializes copies of the
option and of every ancestor between it and the canonical root. Copies are
shallow (no children, no UI mirror entry) and marked TOUCHED so that a
writer persisting the overlay sees them. Once created, a shadow is
independent of its canonical option.
"""
import logging
from typing import Optional

from optiontree.option import Option, OptionFlag, copy_option

logger = logging.getLogger(__name__)


def get_option_shadow(option: Option, tree: Option, shadow_tree: Option) -> Optional[Option]:
    """Return the shadow of option in shadow_tree, creating it if needed.

    Args:
        option: Option living somewhere under tree
        tree: Canonical root that corresponds to shadow_tree
        shadow_tree: Root of the overlay

    Returns:
        The shadow option, or None if option is not linked under tree
    """
    if option is tree:
        return shadow_tree

    if option.parent is None or not option.name:
        return None

    shadow_root = get_option_shadow(option.parent, tree, shadow_tree)
    if shadow_root is None:
        return None

    shadow_option = shadow_root.child(option.name)
    if shadow_option is None:
        shadow_option = copy_option(option, shallow=True, listbox=False)
        shadow_option.parent = shadow_root
        # Overlays are unsorted and unmirrored
        shadow_root.value.append(shadow_option)
        shadow_option.flags |= OptionFlag.TOUCHED
        logger.debug(f"Shadowed option {option.path}")

    return shadow_option
