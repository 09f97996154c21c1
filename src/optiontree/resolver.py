"""
Dotted-path lookup over the option tree.

A path such as "terminal.xterm.colors" is split on its last dot; the prefix is
resolved recursively to find the immediate parent tree and the last segment
is matched among that tree's direct children. Missing, non-tree and hidden
ancestors all make the lookup return None.

Autocreation: if the parent tree is AUTOCREATE and the child is missing, a
NORMAL lookup clones the parent's "_template_" child under the requested
name. This is the only way a read mutates the tree. STRICT lookups never
create anything; the mode is passed per call so nested lookups started from
change hooks cannot inherit a stale setting.
"""
import logging
from typing import Optional

from optiontree.errors import AliasTargetError, TemplateMissingError
from optiontree.mutator import insert_option
from optiontree.option import (
    LookupMode,
    Option,
    OptionFlag,
    OptionType,
    TEMPLATE_NAME,
    copy_option,
)

logger = logging.getLogger(__name__)


def get_opt_rec(tree: Option, name: str, mode: LookupMode = LookupMode.NORMAL) -> Optional[Option]:
    """Get the option at dotted path name under tree.

    Aliases are returned as-is; use indirect_option() to reach their target.

    Args:
        tree: Tree to search from
        name: Dotted path relative to tree
        mode: LookupMode.STRICT disables autocreation for this call

    Returns:
        The option, or None if the path does not resolve

    Raises:
        TemplateMissingError: If an autocreating tree lacks its template
    """
    prefix, sep, leaf = name.rpartition('.')
    if sep:
        tree = get_opt_rec(tree, prefix, mode)
        if tree is None or tree.type is not OptionType.TREE or tree.flags & OptionFlag.HIDDEN:
            return None

    if not leaf:
        return None

    option = tree.child(leaf)
    if option is not None:
        return option

    if tree.flags & OptionFlag.AUTOCREATE and mode is LookupMode.NORMAL:
        return _autocreate(tree, leaf, name)

    return None


def get_opt_rec_real(tree: Option, name: str) -> Optional[Option]:
    """Look up name without autocreating anything."""
    return get_opt_rec(tree, name, LookupMode.STRICT)


def _autocreate(tree: Option, leaf: str, requested: str) -> Option:
    """Clone tree's template as leaf and insert it.

    A template that is itself AUTOCREATE with its own _template_ inside gives
    multi-level autocreation.
    """
    template = tree.child(TEMPLATE_NAME)
    if template is None:
        raise TemplateMissingError(
            f"Requested {requested} should be autocreated but {tree.path}.{TEMPLATE_NAME} is missing"
        )

    option = copy_option(template)
    option.name = leaf
    insert_option(tree, option)
    logger.debug(f"Autocreated option {option.path} from template")
    return option


def indirect_option(root: Option, alias: Option) -> Option:
    """Return the option an alias refers to; non-aliases are returned unchanged.

    The target of an ALIAS_NEGATE alias holds the inverse of what the alias
    reports, so callers must not read the target's value as the alias' value.
    Flags such as MUST_SAVE and DELETED are safe to read.

    Raises:
        AliasTargetError: If the alias points nowhere
    """
    if alias.type is not OptionType.ALIAS:
        return alias

    real = get_opt_rec(root, alias.value)
    if real is None:
        raise AliasTargetError(f"{alias.path} aliased to unknown option {alias.value}")
    return real
