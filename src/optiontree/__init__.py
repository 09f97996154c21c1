"""
Hierarchical option tree for application configuration.

Options form a single-ownership tree addressed by dotted paths. Trees can
autocreate children from a "_template_" entry, keep their children sorted,
and mirror their structure into a UI browser. Contexts overlay private
values through shadow trees, writes bubble change hooks towards the root,
and the tree tracks which options must be written out on save.

Quick Start:
    >>> from optiontree import OptionManager, OptionFlag, opt_tree, opt_int
    >>> manager = OptionManager()
    >>> manager.register_all([
    ...     opt_tree("", "Terminals", "terminal", OptionFlag.AUTOCREATE),
    ...     opt_tree("terminal", None, "_template_"),
    ...     opt_int("terminal._template_", "Colors", "colors", max=3),
    ... ])
    3
    >>> option = manager.set_value("terminal.xterm.colors", 2)
    >>> manager.get_value("terminal.xterm.colors")
    2

Modules:
    - option: Option node, types, flags and per-type value handling
    - resolver: Dotted-path lookup and autocreation
    - mutator: Sorted insertion and template visibility
    - shadow: Per-context overlay trees
    - hooks: Change hooks and value commit/checkout
    - persistence: Save bookkeeping and save-order traversal
    - deletion: Hard and soft delete
    - registry: Table-driven registration
    - browser: UI mirror of the tree
    - manager: OptionManager facade and OptionContext
    - config: Thread-local ambient settings
"""

# Errors
from optiontree.errors import (
    OptionError,
    OptionNotFoundError,
    OptionValueError,
    OptionIntegrityError,
    TemplateMissingError,
    AliasTargetError,
)

# Ambient settings
from optiontree.config import (
    OptionTreeConfig,
    get_option_tree_config,
    set_option_tree_config,
    update_option_tree_config,
    reset_option_tree_config,
)

# Nodes
from optiontree.option import (
    Option,
    OptionType,
    OptionFlag,
    LookupMode,
    HookResult,
    Color,
    TEMPLATE_NAME,
    copy_option,
    check_option_value,
    set_option_value,
    format_option_value,
)

# Tree operations
from optiontree.resolver import get_opt_rec, get_opt_rec_real, indirect_option
from optiontree.mutator import insert_option, add_opt_rec, update_visibility
from optiontree.shadow import get_option_shadow
from optiontree.hooks import (
    call_change_hooks,
    option_changed,
    register_change_hooks,
    toggle_option,
    OptionResolver,
    checkout_option_values,
    commit_option_values,
)
from optiontree.persistence import (
    prepare_mustsave_flags,
    untouch_options,
    check_nonempty_tree,
    walk_config,
    WalkAction,
    ConfigEntry,
)
from optiontree.deletion import delete_option, delete_option_do, mark_option_as_deleted

# Registration
from optiontree.registry import (
    OptionInfo,
    register_options,
    unregister_options,
    add_opt,
    opt_tree,
    opt_bool,
    opt_int,
    opt_long,
    opt_string,
    opt_color,
    opt_codepage,
    opt_language,
    opt_command,
    opt_alias,
)

# UI mirror
from optiontree.browser import OptionBrowser, ListboxItem, BoxItemType

# Facade
from optiontree.manager import OptionManager, OptionContext

__all__ = [
    # Errors
    'OptionError',
    'OptionNotFoundError',
    'OptionValueError',
    'OptionIntegrityError',
    'TemplateMissingError',
    'AliasTargetError',
    # Ambient settings
    'OptionTreeConfig',
    'get_option_tree_config',
    'set_option_tree_config',
    'update_option_tree_config',
    'reset_option_tree_config',
    # Nodes
    'Option',
    'OptionType',
    'OptionFlag',
    'LookupMode',
    'HookResult',
    'Color',
    'TEMPLATE_NAME',
    'copy_option',
    'check_option_value',
    'set_option_value',
    'format_option_value',
    # Tree operations
    'get_opt_rec',
    'get_opt_rec_real',
    'indirect_option',
    'insert_option',
    'add_opt_rec',
    'update_visibility',
    'get_option_shadow',
    'call_change_hooks',
    'option_changed',
    'register_change_hooks',
    'toggle_option',
    'OptionResolver',
    'checkout_option_values',
    'commit_option_values',
    'prepare_mustsave_flags',
    'untouch_options',
    'check_nonempty_tree',
    'walk_config',
    'WalkAction',
    'ConfigEntry',
    'delete_option',
    'delete_option_do',
    'mark_option_as_deleted',
    # Registration
    'OptionInfo',
    'register_options',
    'unregister_options',
    'add_opt',
    'opt_tree',
    'opt_bool',
    'opt_int',
    'opt_long',
    'opt_string',
    'opt_color',
    'opt_codepage',
    'opt_language',
    'opt_command',
    'opt_alias',
    # UI mirror
    'OptionBrowser',
    'ListboxItem',
    'BoxItemType',
    # Facade
    'OptionManager',
    'OptionContext',
]

__version__ = '1.0.0'
__description__ = 'Hierarchical option tree with templates, overlays and change hooks'
