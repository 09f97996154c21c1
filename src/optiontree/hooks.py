"""
Change notification for option writes.

Every write marks the option TOUCHED and then bubbles towards the root: each
option on the way that has a change hook gets called with
(context, current, changed). A hook returning a truthy value (HookResult.HANDLED)
stops the bubbling; options without a hook are passed through.

The ancestor chain is captured before the first hook runs. Hooks are free to
read or write other parts of the tree (including options that would trigger
their own bubbling) without affecting the walk already in progress.
"""
from dataclasses import dataclass
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from optiontree.errors import OptionIntegrityError, OptionNotFoundError, OptionValueError
from optiontree.option import ChangeHook, Option, OptionFlag, OptionType, check_option_value
from optiontree.resolver import get_opt_rec

logger = logging.getLogger(__name__)


def _ancestor_chain(option: Option) -> List[Option]:
    chain = []
    current: Optional[Option] = option
    while current is not None:
        chain.append(current)
        current = current.parent
    return chain


def call_change_hooks(context: Any, current: Option, changed: Optional[Option]) -> None:
    """Bubble a change from current towards the root.

    Args:
        context: Opaque caller context handed to every hook (may be None)
        current: First option whose hook is considered
        changed: The option whose value changed (None for bulk commits)
    """
    for option in _ancestor_chain(current):
        hook = option.change_hook
        if hook is None:
            continue

        try:
            result = hook(context, option, changed)
        except Exception as e:
            logger.warning(f"Change hook of {option.path} failed: {e}")
            continue

        if result:
            break


def option_changed(context: Any, option: Option) -> None:
    """Mark option as touched and notify everyone out there."""
    option.flags |= OptionFlag.TOUCHED
    call_change_hooks(context, option, option)


def register_change_hooks(tree: Option, hooks: Mapping[str, ChangeHook]) -> None:
    """Attach hooks to the options at the given paths under tree.

    One hook per option; registering again replaces the previous hook.

    Raises:
        OptionNotFoundError: If a path does not resolve
    """
    for path, hook in hooks.items():
        option = get_opt_rec(tree, path)
        if option is None:
            raise OptionNotFoundError(path)
        if option.change_hook is not None and option.change_hook is not hook:
            logger.debug(f"Replacing change hook of {option.path}")
        option.change_hook = hook


def toggle_option(context: Any, option: Option) -> None:
    """Step a BOOL/INT option to its next value, wrapping past max to min."""
    if option.type not in (OptionType.BOOL, OptionType.INT):
        raise OptionValueError(f"Option {option.path} cannot be toggled")
    if not option.max:
        raise OptionValueError(f"Option {option.path} has no upper bound to toggle within")

    number = option.value + 1
    option.value = number if number <= option.max else option.min
    option_changed(context, option)


# ========== OPTION RESOLVERS ==========

@dataclass(frozen=True)
class OptionResolver:
    """Maps an option path to a slot in a caller-owned value table."""
    name: str
    id: int


def _resolve_for_resolver(root: Option, resolver: OptionResolver) -> Option:
    option = get_opt_rec(root, resolver.name)
    if option is None:
        raise OptionIntegrityError(f"Bad option '{resolver.name}' in options resolver")
    return option


def checkout_option_values(resolvers: Sequence[OptionResolver], root: Option, values: Dict[int, Any]) -> None:
    """Copy the current values of the resolved options into values by id."""
    for resolver in resolvers:
        values[resolver.id] = _resolve_for_resolver(root, resolver).value


def commit_option_values(resolvers: Sequence[OptionResolver], root: Option, values: Dict[int, Any]) -> int:
    """Write back changed values from values and notify once.

    Each changed option gets TOUCHED and has its own hook called directly;
    the ancestors are notified by a single bubbling pass from root, instead
    of once per option.

    Every changed value is validated before any is written, so a rejected
    value leaves the whole table uncommitted.

    Returns:
        Number of options whose value changed
    """
    pending = []
    for resolver in resolvers:
        option = _resolve_for_resolver(root, resolver)
        new_value = values[resolver.id]
        if option.value == new_value:
            continue
        pending.append((option, check_option_value(option, new_value)))

    for option, value in pending:
        option.value = value
        option.flags |= OptionFlag.TOUCHED
        if option.change_hook is not None:
            try:
                option.change_hook(None, option, None)
            except Exception as e:
                logger.warning(f"Change hook of {option.path} failed: {e}")

    call_change_hooks(None, root, None)
    return len(pending)

