import math
from typing import Callable, Optional, Sequence

from virtualview.windowing.window_shared import (ItemStyle, VisibleRange, WindowBase,
                                                 clamp_range, require_positive)


class FixedWindow(WindowBase):
    """Windowing for lists whose rows all share one height."""

    component = 'FIXED'

    def __init__(self, items: Sequence, height: float, item_height: float, *,
                 overscan: Optional[int] = None,
                 render_item: Optional[Callable] = None):
        self.item_height = require_positive('item_height', item_height)
        super().__init__(items, height, overscan=overscan, render_item=render_item)

    @property
    def total_height(self) -> float:
        return len(self._items) * self.item_height

    def visible_range(self) -> VisibleRange:
        count = len(self._items)
        if count == 0:
            return VisibleRange.empty()
        start = max(0, math.floor(self._scroll_top / self.item_height) - self.overscan)
        end = math.floor((self._scroll_top + self._viewport_height) / self.item_height) + self.overscan
        return clamp_range(start, end, count)

    def style_for(self, index: int) -> ItemStyle:
        return ItemStyle(top=index * self.item_height, height=self.item_height)
