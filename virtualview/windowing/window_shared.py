"""Shared types and base class for the list and grid windowing engines."""

import math
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Sequence

from PySide6.QtCore import QRect

from virtualview.utils.flow_log import FlowLogger
from virtualview.utils.settings import DEFAULT_SETTINGS

# Viewport heights below this are treated as a collapsed widget.
MIN_VIEWPORT_HEIGHT = 1.0


class WindowConfigError(ValueError):
    """Raised for geometry that cannot produce a usable layout."""


@dataclass(frozen=True, slots=True)
class ItemStyle:
    """Absolute placement of one rendered item inside the scroll content."""
    top: float
    height: float
    left: float = 0.0
    width: Optional[float] = None  # None stretches to the viewport width

    def to_rect(self, viewport_width: int = 0) -> QRect:
        width = self.width if self.width is not None else viewport_width
        return QRect(int(self.left), int(self.top), int(width), int(round(self.height)))


@dataclass(frozen=True, slots=True)
class VisibleRange:
    """Inclusive index range. Empty when end_index < start_index."""
    start_index: int
    end_index: int

    @classmethod
    def empty(cls) -> 'VisibleRange':
        return cls(0, -1)

    @property
    def is_empty(self) -> bool:
        return self.end_index < self.start_index

    def __len__(self) -> int:
        return max(0, self.end_index - self.start_index + 1)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start_index, self.end_index + 1))

    def __contains__(self, index) -> bool:
        return self.start_index <= index <= self.end_index


@dataclass(frozen=True, slots=True)
class WindowedItem:
    item: Any
    index: int
    style: ItemStyle


@dataclass(frozen=True, slots=True)
class RenderedItem:
    index: int
    style: ItemStyle
    node: Any


def clamp_range(start: int, end: int, count: int) -> VisibleRange:
    """Clamp a raw range so that 0 <= start <= end <= count - 1."""
    if count <= 0:
        return VisibleRange.empty()
    end = max(0, min(end, count - 1))
    start = max(0, min(start, end))
    return VisibleRange(start, end)


def require_positive(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise WindowConfigError(f'{name} must be a number, got {value!r}') from None
    if math.isnan(number) or math.isinf(number) or number <= 0:
        raise WindowConfigError(f'{name} must be a positive finite number, got {value!r}')
    return number


def require_non_negative(name: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise WindowConfigError(f'{name} must be a number, got {value!r}') from None
    if math.isnan(number) or math.isinf(number) or number < 0:
        raise WindowConfigError(f'{name} must be zero or positive, got {value!r}')
    return number


def require_overscan(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise WindowConfigError(f'overscan must be a non-negative integer, got {value!r}')
    return value


class WindowBase:
    """State and render plumbing shared by every windowing engine.

    Subclasses provide `total_height`, `visible_range()` and `style_for()`.
    All mutation happens through the `set_*` methods, which are meant to be
    called from scroll and resize handlers and therefore never raise.
    """

    component = 'WINDOW'
    default_overscan = DEFAULT_SETTINGS['list_overscan']

    def __init__(self, items: Sequence, height: float, *,
                 overscan: Optional[int] = None,
                 render_item: Optional[Callable] = None):
        self._items = items
        self._scroll_top = 0.0
        self._viewport_height = MIN_VIEWPORT_HEIGHT
        self.overscan = require_overscan(
            self.default_overscan if overscan is None else overscan)
        self._render_item = render_item
        self._log_flow = FlowLogger(f'virtualview.windowing.{type(self).__name__}')
        self.set_viewport_height(height)

    @property
    def items(self) -> Sequence:
        return self._items

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def scroll_top(self) -> float:
        return self._scroll_top

    @property
    def viewport_height(self) -> float:
        return self._viewport_height

    @property
    def total_height(self) -> float:
        raise NotImplementedError

    @property
    def max_scroll_top(self) -> float:
        return max(0.0, self.total_height - self._viewport_height)

    def set_items(self, items: Sequence, *, appended: bool = False) -> bool:
        """Point the window at a new collection.

        Returns True when the collection was treated as a different dataset,
        i.e. it is a new object and the caller did not mark it as an append.
        """
        replaced = items is not self._items and not appended
        self._items = items
        if replaced:
            self._on_dataset_replaced()
            self._log_flow(self.component, f"Dataset replaced, {len(items)} items")
        return replaced

    def _on_dataset_replaced(self):
        pass

    def set_scroll_top(self, scroll_top: float):
        try:
            value = float(scroll_top)
        except (TypeError, ValueError):
            value = math.nan
        if not math.isfinite(value):
            self._log_flow(self.component, f"Ignoring scroll position {scroll_top!r}",
                           level="WARNING", throttle_key="bad_scroll", every_s=1.0)
            return
        self._scroll_top = value

    def set_viewport_height(self, height: float):
        try:
            value = float(height)
        except (TypeError, ValueError):
            value = math.nan
        if not math.isfinite(value) or value < MIN_VIEWPORT_HEIGHT:
            self._log_flow(self.component,
                           f"Viewport height {height!r} clamped to {MIN_VIEWPORT_HEIGHT}",
                           level="WARNING", throttle_key="bad_viewport", every_s=1.0)
            value = MIN_VIEWPORT_HEIGHT
        self._viewport_height = value

    def visible_range(self) -> VisibleRange:
        raise NotImplementedError

    def style_for(self, index: int) -> ItemStyle:
        raise NotImplementedError

    def visible_items(self) -> list[WindowedItem]:
        items = self._items
        return [WindowedItem(items[index], index, self.style_for(index))
                for index in self.visible_range()]

    def _render_node(self, entry: WindowedItem):
        return self._render_item(entry.item, entry.index)

    def render(self) -> list[RenderedItem]:
        """Run the caller's render function over the visible slice."""
        if self._render_item is None:
            raise WindowConfigError(f'{type(self).__name__} has no render_item function')
        return [RenderedItem(entry.index, entry.style, self._render_node(entry))
                for entry in self.visible_items()]
