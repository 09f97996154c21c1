"""Pytest configuration and shared fixtures."""
import pytest

from optiontree import (
    HookResult,
    Option,
    OptionFlag,
    OptionManager,
    OptionType,
    opt_bool,
    opt_color,
    opt_int,
    opt_string,
    opt_tree,
    reset_option_tree_config,
)


def build_terminal_options():
    """Option table shaped like a terminal settings section.

    "terminal" autocreates one subtree per terminal name from its template.
    """
    return [
        opt_tree("", "Terminals", "terminal", OptionFlag.AUTOCREATE,
                 "Terminal options."),
        opt_tree("terminal", None, "_template_", OptionFlag.NONE,
                 "Options specific to this terminal type."),
        opt_int("terminal._template_", "Type", "type", max=4, default=0,
                description="Terminal type."),
        opt_int("terminal._template_", "Color mode", "colors", max=3, default=0),
        opt_bool("terminal._template_", "Underline", "underline", default=0),
    ]


def build_document_options():
    """Plain (non-autocreating) option table."""
    return [
        opt_tree("", "Document", "document"),
        opt_tree("document", "Colors", "colors"),
        opt_color("document.colors", "Text color", "text", default="white"),
        opt_color("document.colors", "Background color", "background", default="black"),
        opt_string("document", "Default title", "title", default="untitled"),
        opt_bool("document", "Show images", "images", default=1),
    ]


@pytest.fixture(autouse=True)
def reset_ambient_config():
    """Reset ambient option tree settings around each test."""
    reset_option_tree_config()
    yield
    reset_option_tree_config()


@pytest.fixture
def manager():
    """Fresh manager with no options registered."""
    manager = OptionManager()
    yield manager


@pytest.fixture
def terminal_options():
    return build_terminal_options()


@pytest.fixture
def document_options():
    return build_document_options()


@pytest.fixture
def populated_manager(manager, terminal_options, document_options):
    """Manager with the terminal and document tables registered."""
    manager.register_all(terminal_options)
    manager.register_all(document_options)
    return manager


@pytest.fixture
def sorted_tree():
    """Standalone SORT tree with no UI mirror."""
    return Option("", OptionType.TREE, flags=OptionFlag.SORT)


@pytest.fixture
def hook_recorder():
    """Change hook factory recording (hook name, current path, changed path) calls."""
    calls = []

    def make(name, result=HookResult.CONTINUE):
        def hook(context, current, changed):
            calls.append((name, current.name, changed.name if changed is not None else None))
            return result
        return hook

    make.calls = calls
    return make
