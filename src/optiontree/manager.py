"""
OptionManager: the facade consumers talk to.

The manager owns the option root with its two top-level trees:

    ""          root (not browsable)
    ├── config  sorted, browsable, holds everything registered at runtime
    └── cmdline unsorted, command-line switches

Dotted paths given to the manager are relative to the config tree; the
get_cmd_* accessors take names relative to the cmdline tree instead.
Per-context overrides live in OptionContext shadow trees; reads check the
context first, writes with a context land on the context's copy.
"""
import logging
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from optiontree.browser import OptionBrowser
from optiontree.config import get_option_tree_config
from optiontree.deletion import delete_option, free_options_tree, mark_option_as_deleted
from optiontree.errors import OptionNotFoundError
from optiontree.hooks import option_changed, register_change_hooks, toggle_option
from optiontree.mutator import insert_option, update_visibility
from optiontree.option import (
    ChangeHook,
    LookupMode,
    Option,
    OptionFlag,
    OptionType,
    set_option_value,
)
from optiontree.persistence import (
    ConfigEntry,
    prepare_mustsave_flags,
    untouch_options,
    walk_config,
)
from optiontree.registry import OptionInfo, add_opt, register_options, unregister_options
from optiontree.resolver import get_opt_rec, get_opt_rec_real, indirect_option
from optiontree.shadow import get_option_shadow

logger = logging.getLogger(__name__)


class OptionContext:
    """A named set of per-context overrides (a session, a site, ...).

    The shadow tree mirrors the structure of the config tree but only holds
    the options that were overridden in this context.
    """

    def __init__(self, manager: 'OptionManager', name: str = ""):
        self.manager = manager
        self.name = name
        self.root = Option("", OptionType.TREE)

    def __repr__(self) -> str:
        return f"<OptionContext {self.name!r}>"

    def lookup(self, path: str) -> Optional[Option]:
        """Overridden option at path, or None. Never creates anything."""
        return get_opt_rec_real(self.root, path)

    def shadow(self, option: Option) -> Option:
        """Shadow copy of a config option, created on first use."""
        shadow_option = get_option_shadow(option, self.manager.config, self.root)
        if shadow_option is None:
            raise OptionNotFoundError(option.path)
        return shadow_option

    def done(self) -> int:
        """Drop all overrides; returns the number of options released."""
        return free_options_tree(self.root, 1)


class OptionManager:
    """Owns the option trees and exposes path-based access to them."""

    def __init__(self, browser: Optional[OptionBrowser] = None):
        self.browser = browser if browser is not None else OptionBrowser()

        self.root = Option("", OptionType.TREE)
        self.config = Option("config", OptionType.TREE, flags=OptionFlag.SORT | OptionFlag.LISTBOX)
        self.cmdline = Option("cmdline", OptionType.TREE)
        insert_option(self.root, self.config)
        insert_option(self.root, self.cmdline)
        self.config.box_item = self.browser.root

        self._tables: List[Tuple[Sequence[OptionInfo], Option]] = []
        self._contexts: List[OptionContext] = []

    # ========== REGISTRATION ==========

    def register_all(self, infos: Sequence[OptionInfo], tree: Optional[Option] = None) -> int:
        """Register a table of options under tree (config by default)."""
        tree = tree if tree is not None else self.config
        registered = register_options(infos, tree)
        self._tables.append((infos, tree))
        return registered

    def unregister_all(self, infos: Sequence[OptionInfo], tree: Optional[Option] = None) -> None:
        tree = tree if tree is not None else self.config
        unregister_options(infos, tree)
        self._tables = [(i, t) for i, t in self._tables if i is not infos]

    def register_autocreated(self, defaults: Mapping[str, Any]) -> None:
        """Preset values of options that live under autocreating trees.

        The options are autocreated as needed. They are not marked TOUCHED and
        no hooks fire, so they are saved only once the user changes them.
        """
        for path, value in defaults.items():
            set_option_value(self.get_option(path), value)

    def register_change_hooks(self, hooks: Mapping[str, ChangeHook]) -> None:
        register_change_hooks(self.config, hooks)

    def add_option(self, path: str, name: str, option_type: OptionType, value: Any = None,
                   flags: OptionFlag = OptionFlag.NONE, min: int = 0, max: int = 0,
                   caption: Optional[str] = None, description: Optional[str] = None) -> Option:
        """Create a runtime option under the config tree at path."""
        return add_opt(self.config, path, caption, name, flags, option_type, min, max, value, description)

    # ========== CONTEXTS ==========

    def create_context(self, name: str = "") -> OptionContext:
        context = OptionContext(self, name)
        self._contexts.append(context)
        return context

    def release_context(self, context: OptionContext) -> None:
        if context in self._contexts:
            self._contexts.remove(context)
        released = context.done()
        logger.debug(f"Released context {context.name!r} ({released} overrides)")

    # ========== LOOKUP ==========

    def get_option(self, path: str, context: Optional[OptionContext] = None,
                   mode: LookupMode = LookupMode.NORMAL) -> Option:
        """Option at path, from the context's overrides first if one is given.

        Aliases are returned as-is.

        Raises:
            OptionNotFoundError: If path does not resolve
        """
        if context is not None:
            option = context.lookup(path)
            if option is not None:
                return option

        option = get_opt_rec(self.config, path, mode)
        if option is None:
            raise OptionNotFoundError(path)
        return option

    def _target(self, path: str, context: Optional[OptionContext]) -> Tuple[Option, bool]:
        return self._indirect(self.get_option(path, context), context)

    def _indirect(self, option: Option, context: Optional[OptionContext]) -> Tuple[Option, bool]:
        """Follow an alias into the config tree; also tells whether reads must be negated."""
        if option.type is not OptionType.ALIAS:
            return option, False

        negate = bool(option.flags & OptionFlag.ALIAS_NEGATE)
        target = indirect_option(self.config, option)
        if context is not None:
            target = context.lookup(option.value) or target
        return target, negate and target.type is OptionType.BOOL

    def get_value(self, path: str, context: Optional[OptionContext] = None) -> Any:
        """Current value at path, as seen from context."""
        option, negate = self._target(path, context)
        if negate:
            return 0 if option.value else 1
        return option.value

    def set_value(self, path: str, value: Any, context: Optional[OptionContext] = None) -> Option:
        """Validate and assign value, then notify the hooks.

        With a context, the value is written to the context's shadow copy and
        the config tree is left alone.

        Returns:
            The option that was written
        """
        option, negate = self._target(path, None)
        return self._write(option, negate, value, context)

    def _write(self, option: Option, negate: bool, value: Any,
               context: Optional[OptionContext]) -> Option:
        if negate:
            value = 0 if value else 1
        if context is not None:
            option = context.shadow(option)

        set_option_value(option, value)
        option_changed(context, option)
        return option

    def toggle(self, path: str, context: Optional[OptionContext] = None) -> Option:
        option, _ = self._target(path, None)
        if context is not None:
            option = context.shadow(option)
        toggle_option(context, option)
        return option

    # ========== COMMAND LINE ==========

    def get_cmd_option(self, name: str) -> Option:
        """Command-line option called name; aliases are returned as-is.

        Raises:
            OptionNotFoundError: If name does not resolve
        """
        option = get_opt_rec(self.cmdline, name)
        if option is None:
            raise OptionNotFoundError(name)
        return option

    def get_cmd_value(self, name: str) -> Any:
        """Value of a command-line option; aliases read their config target."""
        option, negate = self._indirect(self.get_cmd_option(name), None)
        if negate:
            return 0 if option.value else 1
        return option.value

    def set_cmd_value(self, name: str, value: Any) -> Option:
        option, negate = self._indirect(self.get_cmd_option(name), None)
        return self._write(option, negate, value, None)

    # ========== DELETION ==========

    def delete(self, path: str) -> int:
        """Hard-delete the option at path; returns the number released."""
        return delete_option(self.get_option(path, mode=LookupMode.STRICT))

    def mark_deleted(self, path: str) -> Option:
        """Soft-delete the option at path so the next save drops it."""
        option = self.get_option(path, mode=LookupMode.STRICT)
        mark_option_as_deleted(option)
        return option

    # ========== BROWSER ==========

    def update_options_visibility(self, show: Optional[bool] = None) -> None:
        """Show or hide templates in the browser (ambient setting by default)."""
        if show is None:
            show = get_option_tree_config().show_templates
        update_visibility(self.config.children, show)

    # ========== PERSISTENCE ==========

    def prepare_save(self, force_all: bool = False) -> None:
        prepare_mustsave_flags(self.config.children, force_all)

    def mark_saved(self) -> None:
        untouch_options(self.config.children)

    def walk(self, print_comment: int = 2) -> Iterator[ConfigEntry]:
        return walk_config(self.config.children, print_comment)

    def snapshot(self) -> Dict[str, Any]:
        """Flat path -> value map of what the next save would write."""
        return {entry.full_name: entry.option.value for entry in self.walk(0)
                if entry.value is not None}

    # ========== TEARDOWN ==========

    def done(self) -> None:
        """Tear everything down: contexts, registered tables, then the root."""
        for context in list(self._contexts):
            self.release_context(context)

        for infos, tree in reversed(self._tables):
            unregister_options(infos, tree)
        self._tables.clear()

        self.config.box_item = None
        released = free_options_tree(self.root, 0)
        logger.debug(f"Option manager done ({released} options released)")
