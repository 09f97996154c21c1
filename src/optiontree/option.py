"""
Option: the single node type of the configuration tree.

An Option is either a TREE (its value is the ordered list of children it
owns) or a leaf holding one typed value. The set of types is closed; every
per-type behaviour (duplicate, validate, format, release) is an exhaustive
match over OptionType rather than a method override.

Flags track the option's role in the tree (AUTOCREATE, SORT, LISTBOX,
HIDDEN), its persistence bookkeeping (TOUCHED, MUST_SAVE, DELETED) and
whether it was allocated at runtime (ALLOC).
"""
import codecs
from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from optiontree.browser import BoxItemType, ListboxItem, insert_item
from optiontree.config import get_option_tree_config
from optiontree.errors import OptionValueError

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "_template_"


class OptionType(Enum):
    """Closed set of option kinds."""
    TREE = "tree"
    BOOL = "bool"
    INT = "int"
    LONG = "long"
    STRING = "string"
    COLOR = "color"
    COMMAND = "command"
    ALIAS = "alias"
    CODEPAGE = "codepage"
    LANGUAGE = "language"


class OptionFlag(IntFlag):
    """Option flags; several may be combined."""
    NONE = 0
    AUTOCREATE = 1 << 0
    SORT = 1 << 1
    LISTBOX = 1 << 2
    HIDDEN = 1 << 3
    DELETED = 1 << 4
    TOUCHED = 1 << 5
    MUST_SAVE = 1 << 6
    ALLOC = 1 << 7
    ALIAS_NEGATE = 1 << 8


class LookupMode(Enum):
    """Whether a lookup may autocreate missing options."""
    NORMAL = "normal"
    STRICT = "strict"


class HookResult(IntEnum):
    """Return value of a change hook; HANDLED stops the bubbling."""
    CONTINUE = 0
    HANDLED = 1


ChangeHook = Callable[[Any, 'Option', Optional['Option']], Any]


# =============================================================================
# VALUE TABLES
# =============================================================================

class Color(NamedTuple):
    """Decoded RGB color."""
    r: int
    g: int
    b: int

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


COLOR_NAMES: Dict[str, Color] = {
    'black': Color(0x00, 0x00, 0x00),
    'silver': Color(0xc0, 0xc0, 0xc0),
    'gray': Color(0x80, 0x80, 0x80),
    'white': Color(0xff, 0xff, 0xff),
    'maroon': Color(0x80, 0x00, 0x00),
    'red': Color(0xff, 0x00, 0x00),
    'purple': Color(0x80, 0x00, 0x80),
    'fuchsia': Color(0xff, 0x00, 0xff),
    'magenta': Color(0xff, 0x00, 0xff),
    'green': Color(0x00, 0x80, 0x00),
    'lime': Color(0x00, 0xff, 0x00),
    'olive': Color(0x80, 0x80, 0x00),
    'yellow': Color(0xff, 0xff, 0x00),
    'navy': Color(0x00, 0x00, 0x80),
    'blue': Color(0x00, 0x00, 0xff),
    'teal': Color(0x00, 0x80, 0x80),
    'aqua': Color(0x00, 0xff, 0xff),
    'cyan': Color(0x00, 0xff, 0xff),
}

# First name wins when two names share a color (aqua/cyan, fuchsia/magenta)
_COLOR_STRINGS: Dict[Color, str] = {}
for _name, _color in COLOR_NAMES.items():
    _COLOR_STRINGS.setdefault(_color, _name)

CODEPAGES = (
    "us-ascii",
    "iso-8859-1",
    "iso-8859-2",
    "iso-8859-15",
    "windows-1250",
    "windows-1251",
    "windows-1252",
    "koi8-r",
    "cp437",
    "cp850",
    "cp852",
    "utf-8",
)

_CODEPAGE_CODECS = tuple(codecs.lookup(cp).name for cp in CODEPAGES)

# Index 0 follows the system locale
LANGUAGES = (
    "System",
    "English",
    "Czech",
    "Danish",
    "Dutch",
    "French",
    "German",
    "Italian",
    "Polish",
    "Portuguese",
    "Russian",
    "Spanish",
    "Swedish",
)


def decode_color(text: str) -> Color:
    """Decode "#rgb", "#rrggbb" or a known color name.

    Raises:
        OptionValueError: If the text is not a color
    """
    name = text.strip().lower()
    if name.startswith('#'):
        digits = name[1:]
        if len(digits) == 3:
            digits = ''.join(c * 2 for c in digits)
        if len(digits) == 6:
            try:
                return Color(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))
            except ValueError:
                pass
    elif name in COLOR_NAMES:
        return COLOR_NAMES[name]
    raise OptionValueError(f"Invalid color: {text!r}")


def color_to_string(color: Color) -> str:
    """Name of the color if it has one, else its hex form."""
    return _COLOR_STRINGS.get(color, color.to_hex())


def get_cp_index(name: str) -> int:
    """Index of a codepage in CODEPAGES, matched through codec aliases; -1 if unknown."""
    try:
        codec_name = codecs.lookup(name).name
    except LookupError:
        return -1
    try:
        return _CODEPAGE_CODECS.index(codec_name)
    except ValueError:
        return -1


def get_language_index(name: str) -> int:
    """Index of a language in LANGUAGES (case-insensitive); -1 if unknown."""
    lowered = name.strip().lower()
    for index, language in enumerate(LANGUAGES):
        if language.lower() == lowered:
            return index
    return -1


# =============================================================================
# OPTION
# =============================================================================

@dataclass(eq=False, repr=False)
class Option:
    """A named, typed configuration entry.

    Identity matters: two options are equal only if they are the same
    object, so options can be used as dict keys and compared with ``is``.

    Attributes:
        name: Unique among siblings
        type: One of OptionType
        value: Child list for TREE, typed value otherwise
        flags: OptionFlag bitset
        min, max: Bounds for BOOL/INT/LONG
        caption, description: Display strings, not interpreted by the tree
        change_hook: Called when this option or a descendant changes
        parent: Owning tree (None for a root)
        box_item: Entry in the UI mirror, if the option is browsable
    """
    name: str
    type: OptionType
    value: Any = None
    flags: OptionFlag = OptionFlag.NONE
    min: int = 0
    max: int = 0
    caption: Optional[str] = None
    description: Optional[str] = None
    change_hook: Optional[ChangeHook] = None
    parent: Optional['Option'] = None
    box_item: Optional[ListboxItem] = None
    _freed: bool = field(default=False, init=False)

    def __post_init__(self):
        if self.type is OptionType.TREE and self.value is None:
            self.value = []

    def __repr__(self) -> str:
        return f"<Option {self.path or '<root>'} ({self.type.name})>"

    @property
    def is_tree(self) -> bool:
        return self.type is OptionType.TREE

    @property
    def is_template(self) -> bool:
        return self.name == TEMPLATE_NAME

    @property
    def is_freed(self) -> bool:
        return self._freed

    @property
    def children(self) -> List['Option']:
        """Owned children; empty for leaves."""
        if self.type is OptionType.TREE and self.value is not None:
            return self.value
        return []

    @property
    def path(self) -> str:
        """Dotted path from the outermost tree, skipping unnamed roots."""
        parts = []
        option: Optional[Option] = self
        while option is not None:
            if option.name:
                parts.append(option.name)
            option = option.parent
        return '.'.join(reversed(parts))

    def has_flag(self, flag: OptionFlag) -> bool:
        return bool(self.flags & flag)

    def child(self, name: str) -> Optional['Option']:
        """Direct child lookup by exact name; never autocreates."""
        for option in self.children:
            if option.name == name:
                return option
        return None


def init_option_listbox_item(option: Option) -> ListboxItem:
    """Create the UI mirror entry for option."""
    item_type = BoxItemType.FOLDER if option.type is OptionType.TREE else BoxItemType.LEAF
    return ListboxItem(option, item_type)


def copy_option(template: Option, shallow: bool = False, listbox: bool = True) -> Option:
    """Duplicate an option.

    Args:
        template: Option to copy
        shallow: If True, a TREE copy starts with no children
        listbox: If False, the copy gets no UI mirror entry

    Returns:
        An unlinked copy flagged ALLOC; its parent is not set
    """
    option = Option(
        name=template.name,
        type=template.type,
        flags=template.flags | OptionFlag.ALLOC,
        min=template.min,
        max=template.max,
        caption=template.caption,
        description=template.description,
        change_hook=template.change_hook,
    )

    if listbox:
        option.box_item = init_option_listbox_item(option)
        if template.box_item is not None:
            option.box_item.type = template.box_item.type
            option.box_item.depth = template.box_item.depth

    match template.type:
        case OptionType.TREE:
            option.value = []
            if not shallow:
                for child in template.children:
                    child_copy = copy_option(child, shallow=False, listbox=listbox)
                    child_copy.parent = option
                    option.value.append(child_copy)
                    if option.box_item is not None and child_copy.box_item is not None:
                        insert_item(option.box_item, child_copy.box_item)
        case OptionType.STRING | OptionType.ALIAS:
            option.value = template.value
        case OptionType.COLOR:
            option.value = Color(*template.value) if template.value is not None else None
        case OptionType.BOOL | OptionType.INT | OptionType.LONG | OptionType.CODEPAGE | OptionType.LANGUAGE:
            option.value = template.value
        case OptionType.COMMAND:
            option.value = template.value

    return option


# =============================================================================
# PER-TYPE VALUE HANDLING
# =============================================================================

def _check_index(option: Option, value: Any, table: tuple, lookup: Callable[[str], int]) -> int:
    if isinstance(value, str):
        index = lookup(value)
        if index < 0:
            raise OptionValueError(f"Option {option.path}: unknown {option.type.value} {value!r}")
        return index
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value < len(table):
        return value
    raise OptionValueError(f"Option {option.path}: invalid {option.type.value} {value!r}")


def check_option_value(option: Option, value: Any) -> Any:
    """Validate value for option and return it in stored form.

    Raises:
        OptionValueError: If the type or bounds reject the value
    """
    match option.type:
        case OptionType.BOOL | OptionType.INT | OptionType.LONG:
            if isinstance(value, bool):
                value = int(value)
            if not isinstance(value, int):
                raise OptionValueError(f"Option {option.path} expects an integer, got {value!r}")
            if value < option.min or value > option.max:
                raise OptionValueError(
                    f"Option {option.path}: {value} outside [{option.min}, {option.max}]"
                )
            return value
        case OptionType.STRING:
            if not isinstance(value, str):
                raise OptionValueError(f"Option {option.path} expects a string, got {value!r}")
            return value[:get_option_tree_config().max_string_length]
        case OptionType.COLOR:
            if isinstance(value, Color):
                return value
            if isinstance(value, str):
                return decode_color(value)
            raise OptionValueError(f"Option {option.path} expects a color, got {value!r}")
        case OptionType.CODEPAGE:
            return _check_index(option, value, CODEPAGES, get_cp_index)
        case OptionType.LANGUAGE:
            return _check_index(option, value, LANGUAGES, get_language_index)
        case OptionType.COMMAND:
            if not callable(value):
                raise OptionValueError(f"Option {option.path} expects a callable, got {value!r}")
            return value
        case OptionType.TREE:
            raise OptionValueError(f"Option {option.path} is a tree and holds no value")
        case OptionType.ALIAS:
            raise OptionValueError(f"Option {option.path} is an alias; write through its target")


def set_option_value(option: Option, value: Any) -> None:
    """Validate and store value. Does not touch flags or fire hooks."""
    option.value = check_option_value(option, value)


def _quote(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'


def format_option_value(option: Option) -> Optional[str]:
    """Persisted textual form of the value, or None if the type has none."""
    match option.type:
        case OptionType.BOOL | OptionType.INT | OptionType.LONG:
            return str(option.value)
        case OptionType.STRING:
            return _quote(option.value or '')
        case OptionType.COLOR:
            return _quote(color_to_string(option.value))
        case OptionType.CODEPAGE:
            return _quote(CODEPAGES[option.value])
        case OptionType.LANGUAGE:
            return _quote(LANGUAGES[option.value])
        case OptionType.TREE | OptionType.COMMAND | OptionType.ALIAS:
            return None


def release_option_value(option: Option) -> None:
    """Drop owned value storage; children must already be released."""
    match option.type:
        case OptionType.TREE:
            if option.value:
                logger.error(f"Releasing tree {option.path} with {len(option.value)} live children")
            option.value = None
        case OptionType.STRING | OptionType.ALIAS | OptionType.COMMAND:
            option.value = None
        case _:
            pass
