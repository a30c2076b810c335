import math
from typing import Callable, Optional, Sequence

from virtualview.utils.settings import DEFAULT_SETTINGS
from virtualview.windowing.window_shared import (ItemStyle, VisibleRange, WindowBase,
                                                 WindowConfigError, clamp_range,
                                                 require_non_negative, require_positive)


class GridWindow(WindowBase):
    """Windowing for fixed-size cells that wrap into rows.

    The column count is derived from the container width on every query
    unless one was forced at construction, so it can never disagree with
    the width that produced it.
    """

    component = 'GRID'
    default_overscan = DEFAULT_SETTINGS['grid_overscan']

    def __init__(self, items: Sequence, height: float, item_height: float, item_width: float, *,
                 column_count: Optional[int] = None,
                 gap: float = 0,
                 container_width: float = 0,
                 overscan: Optional[int] = None,
                 render_item: Optional[Callable] = None):
        self.item_height = require_positive('item_height', item_height)
        self.item_width = require_positive('item_width', item_width)
        self.gap = require_non_negative('gap', gap)
        # 0 and None both mean "derive from the container width"
        if column_count is not None and (isinstance(column_count, bool)
                                         or not isinstance(column_count, int)
                                         or column_count < 0):
            raise WindowConfigError(f'column_count must be a positive integer, got {column_count!r}')
        self.forced_column_count = column_count or None
        self._container_width = 0.0
        super().__init__(items, height, overscan=overscan, render_item=render_item)
        self.set_container_width(container_width)

    @property
    def container_width(self) -> float:
        return self._container_width

    def set_container_width(self, width: float) -> bool:
        """Apply a new container width. Returns True when the grid reflowed."""
        try:
            value = float(width)
        except (TypeError, ValueError):
            value = math.nan
        if not math.isfinite(value) or value < 0:
            self._log_flow(self.component, f"Container width {width!r} clamped to 0",
                           level="WARNING", throttle_key="bad_width", every_s=1.0)
            value = 0.0
        previous_columns = self.column_count
        self._container_width = value
        columns = self.column_count
        if columns != previous_columns:
            self._log_flow(self.component, f"Reflow {previous_columns} -> {columns} columns",
                           throttle_key="reflow", every_s=0.25)
            return True
        return False

    @property
    def column_width(self) -> float:
        return self.item_width + self.gap

    @property
    def row_height(self) -> float:
        return self.item_height + self.gap

    @property
    def column_count(self) -> int:
        if self.forced_column_count:
            return self.forced_column_count
        return max(1, math.floor(self._container_width / self.column_width))

    @property
    def row_count(self) -> int:
        count = len(self._items)
        return math.ceil(count / self.column_count) if count else 0

    @property
    def total_height(self) -> float:
        return self.row_count * self.row_height

    @property
    def total_width(self) -> float:
        return self.column_count * self.column_width - self.gap

    def visible_rows(self) -> VisibleRange:
        rows = self.row_count
        if rows == 0:
            return VisibleRange.empty()
        start_row = max(0, math.floor(self._scroll_top / self.row_height) - self.overscan)
        end_row = math.floor((self._scroll_top + self._viewport_height) / self.row_height) + self.overscan
        return clamp_range(start_row, end_row, rows)

    def visible_range(self) -> VisibleRange:
        rows = self.visible_rows()
        if rows.is_empty:
            return rows
        columns = self.column_count
        start = rows.start_index * columns
        # The last row may be partial
        end = min(len(self._items) - 1, (rows.end_index + 1) * columns - 1)
        return VisibleRange(start, end)

    def cell_for(self, index: int) -> tuple[int, int]:
        """Return (row, column) of an item index."""
        return divmod(index, self.column_count)

    def style_for(self, index: int) -> ItemStyle:
        row, col = self.cell_for(index)
        return ItemStyle(top=row * self.row_height, height=self.item_height,
                         left=col * self.column_width, width=self.item_width)
