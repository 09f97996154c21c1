"""
Option definitions for a text-mode web browser.

This module shows how an application declares its options as tables, presets
values for well-known terminals, wires change hooks and writes the touched
options back out in a simple "set name = value" syntax.
"""

import logging
from enum import IntEnum
from typing import List

from optiontree import (
    ConfigEntry,
    HookResult,
    OptionFlag,
    OptionManager,
    WalkAction,
    opt_alias,
    opt_bool,
    opt_codepage,
    opt_color,
    opt_int,
    opt_language,
    opt_string,
    opt_tree,
    update_option_tree_config,
)

logger = logging.getLogger(__name__)


class TerminalType(IntEnum):
    """How the terminal draws frames."""
    DUMB = 0
    VT100 = 1
    LINUX = 2
    KOI8 = 3
    FBTERM = 4


class ColorMode(IntEnum):
    """Number of colors the terminal can show."""
    MONO = 0
    COLORS_16 = 1
    COLORS_88 = 2
    COLORS_256 = 3


CONFIG_OPTIONS = [
    opt_bool("", "Show templates", "show_template", OptionFlag.NONE, 0,
             "Show templates in the option manager."),

    opt_tree("", "Document", "document", OptionFlag.NONE,
             "Document options."),
    opt_tree("document", "Default colors", "colors", OptionFlag.NONE,
             "Default document color settings."),
    opt_color("document.colors", "Text color", "text", OptionFlag.NONE, "gray",
              "Default text color."),
    opt_color("document.colors", "Background color", "background", OptionFlag.NONE, "black",
              "Default background color."),
    opt_color("document.colors", "Link color", "link", OptionFlag.NONE, "blue",
              "Default link color."),
    opt_codepage("document", "Default codepage", "codepage", OptionFlag.NONE, "iso-8859-1",
                 "Default document codepage."),
    opt_bool("document", "Display images", "images", OptionFlag.NONE, 1,
             "Display links to images without an alt attribute."),

    opt_tree("", "Terminals", "terminal", OptionFlag.AUTOCREATE,
             "Terminal options."),
    opt_tree("terminal", None, "_template_", OptionFlag.NONE,
             "Options specific to this terminal type (according to $TERM value)."),
    opt_int("terminal._template_", "Type", "type", OptionFlag.NONE,
            TerminalType.DUMB, TerminalType.FBTERM, TerminalType.DUMB,
            "Terminal type; matters mostly only when drawing frames and dialog box borders."),
    opt_int("terminal._template_", "Color mode", "colors", OptionFlag.NONE,
            ColorMode.MONO, ColorMode.COLORS_256, ColorMode.MONO,
            "The color mode controls what colors are used and how they are output."),
    opt_bool("terminal._template_", "Underline", "underline", OptionFlag.NONE, 0,
             "If we should use underline or enhance the color instead."),
    opt_bool("terminal._template_", "Italic", "italic", OptionFlag.NONE, 0,
             "If we should use italic."),

    opt_tree("", "User interface", "ui", OptionFlag.NONE,
             "User interface options."),
    opt_language("ui", "Language", "language", OptionFlag.NONE,
                 "Language of user interface. 'System' means that the language will be extracted from the environment dynamically."),
    opt_string("ui", "Date format", "date_format", OptionFlag.NONE, "%b %e %H:%M",
               "Date format to use in dialogs."),
]

CMDLINE_OPTIONS = [
    opt_bool("", "Anonymous mode", "anonymous", OptionFlag.NONE, 0,
             "Restrict the browser so that it can be used for an anonymous account."),
    opt_alias("", "no-images", "document.images", OptionFlag.ALIAS_NEGATE,
              "Do not display links to images."),
    opt_string("", "Name of directory with configuration file", "config-dir", OptionFlag.NONE, "",
               "Path of the directory the browser will read and write its config and runtime state files to."),
]

AUTOCREATED_DEFAULTS = {
    "terminal.linux.type": TerminalType.LINUX,
    "terminal.linux.colors": ColorMode.COLORS_16,
    "terminal.vt100.type": TerminalType.VT100,
    "terminal.xterm.type": TerminalType.VT100,
    "terminal.xterm.underline": 1,
    "terminal.xterm-color.type": TerminalType.VT100,
    "terminal.xterm-color.colors": ColorMode.COLORS_16,
    "terminal.xterm-color.underline": 1,
    "terminal.rxvt-unicode.type": TerminalType.VT100,
    "terminal.rxvt-unicode.colors": ColorMode.COLORS_88,
    "terminal.rxvt-unicode.italic": 1,
    "terminal.rxvt-unicode.underline": 1,
}


def setup_options() -> OptionManager:
    """Register every option table and the hooks that depend on them."""
    manager = OptionManager()
    manager.register_all(CONFIG_OPTIONS)
    manager.register_all(CMDLINE_OPTIONS, manager.cmdline)
    manager.register_autocreated(AUTOCREATED_DEFAULTS)

    def change_hook_stemplate(context, current, changed):
        update_option_tree_config(show_templates=bool(changed.value))
        manager.update_options_visibility()
        return HookResult.CONTINUE

    def change_hook_language(context, current, changed):
        logger.info(f"Interface language switched to index {changed.value}")
        return HookResult.CONTINUE

    manager.register_change_hooks({
        "show_template": change_hook_stemplate,
        "ui.language": change_hook_language,
    })
    return manager


def format_entry(entry: ConfigEntry) -> List[str]:
    """Lines a config writer emits for one walk entry."""
    indent = "  " * entry.depth
    option = entry.option
    lines = []

    if entry.action is WalkAction.TREE_END:
        return lines

    if entry.comment:
        if option.caption:
            lines.append(f"{indent}## {entry.full_name}")
        if option.description:
            lines.append(f"{indent}#  {option.description}")

    if entry.action is WalkAction.VALUE:
        lines.append(f"{indent}set {entry.full_name} = {entry.value}")
        lines.append("")
    return lines


def write_config(manager: OptionManager, save_all: bool = False) -> str:
    """Render the options worth saving and mark them saved."""
    manager.prepare_save(save_all)
    lines: List[str] = []
    for entry in manager.walk():
        lines.extend(format_entry(entry))
    manager.mark_saved()
    return "\n".join(lines)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    options = setup_options()
    options.set_value("terminal.xterm.colors", ColorMode.COLORS_256)
    options.set_value("document.colors.link", "#0000ff")
    options.set_value("show_template", 1)
    options.set_cmd_value("no-images", 1)
    print(write_config(options))
    options.done()
