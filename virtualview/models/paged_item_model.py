"""
Paged item model feeding a virtualized list or grid.

Pages are requested one at a time, typically from a scroll tracker's
`end_reached` signal, and appended to one live backing list. Because the list
grows in place, windows bound to `items()` keep their measured row heights
across page loads.
"""

from typing import Any, Callable, List, Optional, Sequence

from PySide6.QtCore import QAbstractListModel, QModelIndex, Qt, Signal

from virtualview.utils.flow_log import FlowLogger


class PagedItemModel(QAbstractListModel):
    """
    A list model that accumulates pages returned by a fetcher.

    Page mode calls `fetcher(page)` with consecutive page numbers starting at
    `initial_page`. Cursor mode (when `get_next_cursor` is given) calls
    `fetcher(cursor)`, starting from None, and stops when the next cursor is
    None. In both modes an empty page ends pagination. While the model is
    disabled `load_more` is a no-op.
    """

    # Signals
    page_loaded = Signal(int)  # Emitted after a page was appended (rows added)
    rows_loaded = Signal(list, list)  # (new rows, all rows) after a page was appended
    load_failed = Signal(str)  # Emitted when the fetcher raised
    has_more_changed = Signal(bool)

    def __init__(self, fetcher: Callable[[Any], Sequence], *,
                 initial_page: int = 1,
                 get_next_cursor: Optional[Callable[[Sequence], Any]] = None,
                 enabled: bool = True,
                 parent=None):
        super().__init__(parent)
        self._fetcher = fetcher
        self._get_next_cursor = get_next_cursor
        self.initial_page = initial_page
        self._enabled = enabled

        self._items: List[Any] = []
        self._page = initial_page
        self._cursor = None
        self._has_more = True
        self._loading = False
        self.error: Optional[Exception] = None
        self._log_flow = FlowLogger('virtualview.models.PagedItemModel')

    # ========== Qt Model Interface ==========

    def rowCount(self, parent=QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._items)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        row = index.row()
        if row < 0 or row >= len(self._items):
            return None
        item = self._items[row]
        if role == Qt.ItemDataRole.DisplayRole:
            return str(item)
        if role == Qt.ItemDataRole.UserRole:
            return item
        return None

    # ========== Pagination ==========

    def items(self) -> List[Any]:
        """Return the live backing list. Callers must not mutate it."""
        return self._items

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool):
        """Pause or resume pagination. Loaded rows are kept."""
        self._enabled = bool(enabled)

    @property
    def has_more(self) -> bool:
        return self._has_more

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def page(self) -> int:
        return self._page

    @property
    def cursor_mode(self) -> bool:
        return self._get_next_cursor is not None

    def _set_has_more(self, has_more: bool):
        if has_more != self._has_more:
            self._has_more = has_more
            self.has_more_changed.emit(has_more)

    def load_more(self) -> int:
        """Fetch and append the next page. Returns the number of rows added."""
        if not self._enabled or self._loading or not self._has_more:
            return 0

        self._loading = True
        self.error = None
        request = self._cursor if self.cursor_mode else self._page
        try:
            try:
                new_items = list(self._fetcher(request))
            except Exception as e:
                self.error = e
                self._log_flow("PAGINATION", f"Fetch failed for {request!r}: {e}", level="ERROR")
                self.load_failed.emit(str(e))
                return 0

            if not new_items:
                self._set_has_more(False)
                self._log_flow("PAGINATION", f"No more items after {len(self._items)} rows")
                return 0

            start = len(self._items)
            self.beginInsertRows(QModelIndex(), start, start + len(new_items) - 1)
            self._items.extend(new_items)
            self.endInsertRows()

            if self.cursor_mode:
                self._cursor = self._get_next_cursor(new_items)
                if self._cursor is None:
                    self._set_has_more(False)
            else:
                self._page += 1
        finally:
            self._loading = False

        self._log_flow("PAGINATION", f"Appended {len(new_items)} rows ({len(self._items)} total)")
        self.page_loaded.emit(len(new_items))
        self.rows_loaded.emit(new_items, self._items)
        return len(new_items)

    def reset(self):
        """Drop all rows and start pagination over."""
        self.beginResetModel()
        self._items = []
        self._page = self.initial_page
        self._cursor = None
        self._loading = False
        self.error = None
        self.endResetModel()
        self._set_has_more(True)
