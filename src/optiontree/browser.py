"""
UI mirror of the option tree.

Options that live under a LISTBOX tree carry a ListboxItem. The items form a
parallel tree that the core keeps in lock-step with the option tree: inserted
at the same sorted position, removed on hard delete, hidden on soft delete.

OptionBrowser owns the root item and forwards structural changes to any
subscribed listeners. It is UI-agnostic: nothing here draws anything, and the
option tree stays correct whether or not a browser is attached.
"""
from enum import Enum
import logging
from typing import Callable, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from optiontree.option import Option

logger = logging.getLogger(__name__)


class BoxItemType(Enum):
    """Kind of entry shown in the browser."""
    FOLDER = "folder"
    LEAF = "leaf"


class ListboxItem:
    """One entry of the UI mirror.

    The root item of a browser has no option; it is only a placeholder for
    the top-level entries and never counts towards their depth.
    """

    def __init__(self, option: Optional['Option'] = None, item_type: BoxItemType = BoxItemType.LEAF):
        self.option = option
        self.type = item_type
        self.children: List['ListboxItem'] = []
        self.parent: Optional['ListboxItem'] = None
        self.browser: Optional['OptionBrowser'] = None
        self.visible = True
        self.depth = 0

    @property
    def is_root(self) -> bool:
        return self.parent is None and self.browser is not None and self.browser.root is self

    def __repr__(self) -> str:
        name = self.option.name if self.option is not None else '<root>'
        return f"<ListboxItem {name!r} depth={self.depth} visible={self.visible}>"


InsertCallback = Callable[[ListboxItem, ListboxItem, int], None]
RemoveCallback = Callable[[ListboxItem, ListboxItem], None]
VisibilityCallback = Callable[[ListboxItem], None]


class OptionBrowser:
    """Holds the mirror root and notifies listeners of structural changes.

    Callbacks:
    - insert: (parent_item, item, index) after an item is placed
    - remove: (parent_item, item) after an item is detached
    - visibility: (item) after an item is shown or hidden
    """

    def __init__(self):
        self.root = ListboxItem()
        self.root.browser = self
        self._on_insert_callbacks: List[InsertCallback] = []
        self._on_remove_callbacks: List[RemoveCallback] = []
        self._on_visibility_callbacks: List[VisibilityCallback] = []

    # ========== SUBSCRIPTION ==========

    def add_insert_callback(self, callback: InsertCallback) -> None:
        if callback not in self._on_insert_callbacks:
            self._on_insert_callbacks.append(callback)

    def remove_insert_callback(self, callback: InsertCallback) -> None:
        if callback in self._on_insert_callbacks:
            self._on_insert_callbacks.remove(callback)

    def add_remove_callback(self, callback: RemoveCallback) -> None:
        if callback not in self._on_remove_callbacks:
            self._on_remove_callbacks.append(callback)

    def remove_remove_callback(self, callback: RemoveCallback) -> None:
        if callback in self._on_remove_callbacks:
            self._on_remove_callbacks.remove(callback)

    def add_visibility_callback(self, callback: VisibilityCallback) -> None:
        if callback not in self._on_visibility_callbacks:
            self._on_visibility_callbacks.append(callback)

    def remove_visibility_callback(self, callback: VisibilityCallback) -> None:
        if callback in self._on_visibility_callbacks:
            self._on_visibility_callbacks.remove(callback)

    # ========== NOTIFICATION ==========

    def _fire_insert_callbacks(self, parent_item: ListboxItem, item: ListboxItem, index: int) -> None:
        for callback in list(self._on_insert_callbacks):
            try:
                callback(parent_item, item, index)
            except Exception as e:
                logger.warning(f"Error in browser insert callback: {e}")

    def _fire_remove_callbacks(self, parent_item: ListboxItem, item: ListboxItem) -> None:
        for callback in list(self._on_remove_callbacks):
            try:
                callback(parent_item, item)
            except Exception as e:
                logger.warning(f"Error in browser remove callback: {e}")

    def _fire_visibility_callbacks(self, item: ListboxItem) -> None:
        for callback in list(self._on_visibility_callbacks):
            try:
                callback(item)
            except Exception as e:
                logger.warning(f"Error in browser visibility callback: {e}")


# ========== MIRROR OPERATIONS ==========

def _adopt(item: ListboxItem, browser: Optional[OptionBrowser], depth: int) -> None:
    item.browser = browser
    item.depth = depth
    for child in item.children:
        _adopt(child, browser, depth + 1)


def insert_item(parent_item: ListboxItem, item: ListboxItem, index: Optional[int] = None) -> None:
    """Place item under parent_item at index (appended when index is None)."""
    if index is None:
        index = len(parent_item.children)
    parent_item.children.insert(index, item)
    item.parent = parent_item
    _adopt(item, parent_item.browser, 0 if parent_item.is_root else parent_item.depth + 1)

    if item.browser is not None:
        item.browser._fire_insert_callbacks(parent_item, item, index)


def remove_item(item: ListboxItem) -> None:
    """Detach item from its parent; a detached item is left as is."""
    parent_item = item.parent
    if parent_item is None:
        return

    parent_item.children.remove(item)
    item.parent = None
    browser = item.browser
    _adopt(item, None, item.depth)

    if browser is not None:
        browser._fire_remove_callbacks(parent_item, item)


def set_item_visible(item: ListboxItem, visible: bool) -> None:
    """Show or hide item, notifying listeners only on an actual change."""
    visible = bool(visible)
    if item.visible == visible:
        return

    item.visible = visible
    if item.browser is not None:
        item.browser._fire_visibility_callbacks(item)
