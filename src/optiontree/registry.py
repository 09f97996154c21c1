"""
Table-driven option registration.

Subsystems describe their options as a list of OptionInfo entries and hand
it to register_options() at startup. Each entry keeps a reference to the
option created for it, so unregister_options() can later walk the very same
list backwards and tear everything down in reverse order.

Registration never stops half-way: an entry whose default value is rejected
is logged and left without an option, and the remaining entries are still
processed.
"""
from dataclasses import dataclass, field
import logging
import string
from typing import Any, Callable, Optional, Sequence

from optiontree.config import get_option_tree_config
from optiontree.deletion import delete_option_do
from optiontree.errors import OptionValueError
from optiontree.mutator import add_opt_rec
from optiontree.option import (
    Option,
    OptionFlag,
    OptionType,
    init_option_listbox_item,
    set_option_value,
)

logger = logging.getLogger(__name__)


@dataclass
class OptionInfo:
    """Static description of one option.

    Attributes:
        path: Dotted path of the parent tree, relative to the registration tree
        name: Option name
        type: Option type
        flags: Initial flags
        min, max: Bounds for BOOL/INT/LONG
        default: Initial value (color/codepage given as strings, alias as target path)
        caption, description: Display strings
        option: The option created by register_options(), None before or on failure
    """
    path: str
    name: str
    type: OptionType
    flags: OptionFlag = OptionFlag.NONE
    min: int = 0
    max: int = 0
    default: Any = None
    caption: Optional[str] = None
    description: Optional[str] = None
    option: Optional[Option] = field(default=None, init=False, repr=False)


# =============================================================================
# DEFINITION HELPERS
# =============================================================================

def opt_tree(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
             description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.TREE, flags, caption=caption, description=description)


def opt_bool(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
             default: int = 0, description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.BOOL, flags, 0, 1, int(default), caption, description)


def opt_int(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
            min: int = 0, max: int = 0, default: int = 0, description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.INT, flags, min, max, default, caption, description)


def opt_long(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
             min: int = 0, max: int = 0, default: int = 0, description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.LONG, flags, min, max, default, caption, description)


def opt_string(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
               default: str = "", description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.STRING, flags, default=default, caption=caption,
                      description=description)


def opt_color(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
              default: str = "black", description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.COLOR, flags, default=default, caption=caption,
                      description=description)


def opt_codepage(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
                 default: str = "us-ascii", description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.CODEPAGE, flags, default=default, caption=caption,
                      description=description)


def opt_language(path: str, caption: Optional[str], name: str, flags: OptionFlag = OptionFlag.NONE,
                 description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.LANGUAGE, flags, caption=caption, description=description)


def opt_command(path: str, caption: Optional[str], name: str, command: Callable,
                flags: OptionFlag = OptionFlag.NONE, description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.COMMAND, flags, default=command, caption=caption,
                      description=description)


def opt_alias(path: str, name: str, target: str, flags: OptionFlag = OptionFlag.NONE,
              description: Optional[str] = None) -> OptionInfo:
    return OptionInfo(path, name, OptionType.ALIAS, flags, default=target, description=description)


# =============================================================================
# SYNTAX DIAGNOSTICS
# =============================================================================

_QUOTES = "'\"`"


def _bad_punct(c: str) -> bool:
    return c not in ')>' and c not in _QUOTES and c in string.punctuation


def check_option_syntax(option: Option) -> None:
    """Log captions ending in whitespace/punctuation and descriptions ending in whitespace."""
    if option.caption:
        c = option.caption[-1]
        if c.isspace() or _bad_punct(c):
            logger.debug(f"bad char at end of caption [{option.caption}]")

    if option.description:
        if option.description[-1].isspace():
            logger.debug(f"bad char at end of description [{option.description}]")


# =============================================================================
# REGISTRATION
# =============================================================================

def _wants_listbox(tree: Option, option_type: OptionType, flags: OptionFlag) -> bool:
    return option_type is not OptionType.ALIAS and bool((tree.flags | flags) & OptionFlag.LISTBOX)


def _bounds(option_type: OptionType, min: int, max: int) -> tuple:
    # BOOL tables may leave the bounds out
    if option_type is OptionType.BOOL and not min and not max:
        return 0, 1
    return min, max


def _init_value(option: Option, value: Any) -> None:
    match option.type:
        case OptionType.TREE:
            option.value = []
        case OptionType.ALIAS:
            if not isinstance(value, str) or not value:
                raise OptionValueError(f"Alias {option.name} needs a target path")
            option.value = value
        case OptionType.LANGUAGE:
            set_option_value(option, 0 if value is None else value)
        case OptionType.STRING:
            set_option_value(option, "" if value is None else value)
        case _:
            set_option_value(option, value)


def _option_from_info(info: OptionInfo, tree: Option) -> Option:
    min, max = _bounds(info.type, info.min, info.max)
    option = Option(
        name=info.name,
        type=info.type,
        flags=info.flags,
        min=min,
        max=max,
        caption=info.caption,
        description=info.description,
    )

    if get_option_tree_config().check_syntax:
        check_option_syntax(option)

    if _wants_listbox(tree, info.type, info.flags):
        option.box_item = init_option_listbox_item(option)

    _init_value(option, info.default)
    return option


def register_options(infos: Sequence[OptionInfo], tree: Option) -> int:
    """Create and insert an option for every entry of infos.

    Every entry is processed even if an earlier one fails, so that
    unregister_options() can walk the same list.

    Returns:
        Number of options registered
    """
    registered = 0
    for info in infos:
        info.option = None
        try:
            option = _option_from_info(info, tree)
        except (OptionValueError, MemoryError) as e:
            logger.error(f"Cannot register option {info.path or '<root>'}/{info.name}: {e}")
            continue

        add_opt_rec(tree, info.path, option)
        info.option = option
        registered += 1

    logger.debug(f"Registered {registered}/{len(infos)} options under {tree.path or '<root>'}")
    return registered


def unregister_options(infos: Sequence[OptionInfo], tree: Option) -> None:
    """Delete the options created by register_options(), in reverse order."""
    for info in reversed(infos):
        option = info.option
        info.option = None
        if option is None or option.is_freed:
            continue
        delete_option_do(option, 0)


def add_opt(tree: Option, path: str, caption: Optional[str], name: str, flags: OptionFlag,
            option_type: OptionType, min: int, max: int, value: Any,
            description: Optional[str]) -> Option:
    """Create one option at runtime and insert it under tree at path.

    Runtime options are flagged ALLOC.

    Raises:
        OptionValueError: If value is rejected
        OptionIntegrityError: If path does not name a tree
    """
    min, max = _bounds(option_type, min, max)
    option = Option(
        name=name,
        type=option_type,
        flags=flags | OptionFlag.ALLOC,
        min=min,
        max=max,
        caption=caption,
        description=description,
    )

    if get_option_tree_config().check_syntax:
        check_option_syntax(option)

    _init_value(option, value)

    if _wants_listbox(tree, option_type, flags):
        option.box_item = init_option_listbox_item(option)

    add_opt_rec(tree, path, option)
    return option

