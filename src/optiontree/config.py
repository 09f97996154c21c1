"""
Framework configuration for the option tree.

Provides thread-local storage for the settings that tune tree behaviour
without being options themselves:

- show_templates: whether "_template_" entries are visible in the UI mirror
- max_string_length: longest value a STRING option keeps
- check_syntax: emit debug diagnostics for sloppy captions/descriptions

Default behavior: every thread starts with OptionTreeConfig().
"""

import threading
from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class OptionTreeConfig:
    """Settings consulted by the tree while it mutates itself."""
    show_templates: bool = False
    max_string_length: int = 1024
    check_syntax: bool = False


_option_tree_config = threading.local()


def get_option_tree_config() -> OptionTreeConfig:
    """Get the framework config for the current thread.

    Returns:
        The active OptionTreeConfig (defaults if none was set)
    """
    config = getattr(_option_tree_config, 'value', None)
    if config is None:
        config = OptionTreeConfig()
        _option_tree_config.value = config
    return config


def set_option_tree_config(config: OptionTreeConfig) -> None:
    """Set the framework config for the current thread.

    Args:
        config: The config instance to install
    """
    _option_tree_config.value = config


def update_option_tree_config(**changes: Any) -> OptionTreeConfig:
    """Replace individual settings, keeping the rest.

    Args:
        **changes: Field overrides passed to dataclasses.replace()

    Returns:
        The newly installed config
    """
    config = replace(get_option_tree_config(), **changes)
    set_option_tree_config(config)
    return config


def reset_option_tree_config() -> None:
    """Restore the defaults for the current thread."""
    _option_tree_config.value = OptionTreeConfig()
