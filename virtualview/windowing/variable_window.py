"""Windowing for lists whose row heights are only known after first paint.

Rows start out at `estimated_item_height`. Once the caller has laid a row out
it reports the real height through `measure()` (or the callback returned by
`measure_ref()`), and the position table is rebuilt on the next query.
"""

import math
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from itertools import accumulate
from typing import Callable, Optional, Sequence

from virtualview.windowing.window_shared import (ItemStyle, VisibleRange, WindowBase,
                                                 WindowedItem, clamp_range,
                                                 require_positive)


@dataclass(frozen=True, slots=True)
class ItemPosition:
    top: float
    height: float


class VariableWindow(WindowBase):
    """Windowing over a position table built from measured and estimated heights."""

    component = 'VARIABLE'

    def __init__(self, items: Sequence, height: float, estimated_item_height: float, *,
                 overscan: Optional[int] = None,
                 render_item: Optional[Callable] = None):
        self.estimated_item_height = require_positive(
            'estimated_item_height', estimated_item_height)
        self._measured_heights: dict[int, float] = {}
        self._measure_version = 0

        # Derived position table, rebuilt when its key changes
        self._positions_key = None
        self._heights: list[float] = []
        self._tops: list[float] = []
        self._bottoms: list[float] = []
        self.rebuild_count = 0

        super().__init__(items, height, overscan=overscan, render_item=render_item)

    # ========== Measurement ==========

    @property
    def measured_heights(self) -> dict[int, float]:
        return dict(self._measured_heights)

    @property
    def measurement_version(self) -> int:
        return self._measure_version

    def height_for(self, index: int) -> float:
        return self._measured_heights.get(index, self.estimated_item_height)

    def measure(self, index: int, height) -> bool:
        """Record the rendered height of one row.

        Returns True when the measurement table changed. Repeating a known
        height is a no-op. Negative, NaN and infinite heights are rejected and
        the previous value is kept.
        """
        if not 0 <= index < len(self._items):
            self._log_flow(self.component, f"Ignoring measurement for index {index}",
                           throttle_key="measure_range", every_s=1.0)
            return False
        try:
            value = float(height)
        except (TypeError, ValueError):
            value = math.nan
        if math.isnan(value) or math.isinf(value) or value < 0:
            self._log_flow(self.component,
                           f"Rejected height {height!r} for index {index}",
                           level="WARNING", throttle_key="measure_invalid", every_s=1.0)
            return False

        if self._measured_heights.get(index) == value:
            return False
        previous = self.height_for(index)
        self._measured_heights[index] = value
        if value != previous:
            self._measure_version += 1
        return True

    def measure_ref(self, index: int) -> Callable:
        """Return a callback the renderer attaches to the row it created.

        The callback accepts a number, anything with a `height()` method (such
        as a QWidget) or None when the row is torn down.
        """
        def _measure(target):
            if target is None:
                return
            height_getter = getattr(target, 'height', None)
            height = height_getter() if callable(height_getter) else target
            self.measure(index, height)
        return _measure

    def _on_dataset_replaced(self):
        if self._measured_heights:
            self._log_flow(self.component,
                           f"Dropping {len(self._measured_heights)} measured heights")
        self._measured_heights.clear()
        self._measure_version += 1

    # ========== Position table ==========

    def _ensure_positions(self):
        count = len(self._items)
        key = (count, self.estimated_item_height, self._measure_version)
        if key == self._positions_key:
            return
        measured = self._measured_heights
        estimate = self.estimated_item_height
        heights = [measured.get(i, estimate) for i in range(count)]
        bottoms = list(accumulate(heights))
        self._heights = heights
        self._bottoms = bottoms
        self._tops = [0.0] + bottoms[:-1] if bottoms else []
        self._positions_key = key
        self.rebuild_count += 1

    @property
    def positions(self) -> list[ItemPosition]:
        self._ensure_positions()
        return [ItemPosition(top, height) for top, height in zip(self._tops, self._heights)]

    @property
    def total_height(self) -> float:
        self._ensure_positions()
        return self._bottoms[-1] if self._bottoms else 0.0

    def visible_range(self) -> VisibleRange:
        self._ensure_positions()
        count = len(self._heights)
        if count == 0:
            return VisibleRange.empty()

        # First row whose bottom edge reaches the top of the viewport
        first = min(bisect_left(self._bottoms, self._scroll_top), count - 1)
        start = max(0, first - self.overscan)

        # Last row whose top edge is still above the bottom of the viewport
        limit = self._scroll_top + self._viewport_height
        last = max(start, bisect_right(self._tops, limit, lo=start) - 1)
        end = last + self.overscan
        return clamp_range(start, end, count)

    def style_for(self, index: int) -> ItemStyle:
        self._ensure_positions()
        return ItemStyle(top=self._tops[index], height=self._heights[index])

    def _render_node(self, entry: WindowedItem):
        return self._render_item(entry.item, entry.index, self.measure_ref(entry.index))
