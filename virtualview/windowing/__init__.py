"""Windowing engines for virtualized lists and grids.

Provides:
- Fixed-height and measured-height list windows
- A reflowing grid window
- End-of-content detection with hysteresis
- A shared scroll tracker with idle debounce
"""

from .window_shared import (ItemStyle, RenderedItem, VisibleRange, WindowConfigError,
                            WindowedItem)
from .fixed_window import FixedWindow
from .variable_window import ItemPosition, VariableWindow
from .grid_window import GridWindow
from .end_reached import EndReachedDetector, EndReachedState
from .scroll_tracker import ScrollTracker

__all__ = [
    'EndReachedDetector',
    'EndReachedState',
    'FixedWindow',
    'GridWindow',
    'ItemPosition',
    'ItemStyle',
    'RenderedItem',
    'ScrollTracker',
    'VariableWindow',
    'VisibleRange',
    'WindowConfigError',
    'WindowedItem',
]
