import math
from enum import Enum
from typing import Callable, Optional

from virtualview.utils.flow_log import FlowLogger
from virtualview.utils.settings import DEFAULT_SETTINGS

_log_flow = FlowLogger('virtualview.windowing.EndReachedDetector')


class EndReachedState(str, Enum):
    ARMED = 'armed'
    FIRED = 'fired'


class EndReachedDetector:
    """Fires a callback once per excursion past the end-of-content threshold.

    The detector is armed until the scrolled fraction reaches `threshold`,
    fires once, and stays fired until the fraction drops back below the
    threshold.
    """

    def __init__(self, on_end_reached: Optional[Callable[[], None]] = None,
                 threshold: float = DEFAULT_SETTINGS['end_reached_threshold']):
        self._on_end_reached = on_end_reached
        self.threshold = self._sanitize_threshold(threshold)
        self.state = EndReachedState.ARMED
        self.fire_count = 0

    @staticmethod
    def _sanitize_threshold(threshold) -> float:
        default = DEFAULT_SETTINGS['end_reached_threshold']
        try:
            value = float(threshold)
        except (TypeError, ValueError):
            value = math.nan
        if math.isnan(value) or value <= 0:
            _log_flow("END", f"Threshold {threshold!r} replaced by {default}", level="WARNING")
            return default
        if value > 1:
            _log_flow("END", f"Threshold {threshold!r} clamped to 1.0", level="WARNING")
            return 1.0
        return value

    @property
    def is_armed(self) -> bool:
        return self.state is EndReachedState.ARMED

    @staticmethod
    def scroll_percent(scroll_top: float, viewport_height: float,
                       total_height: float) -> Optional[float]:
        # A scroll container is never shorter than its viewport.
        scroll_height = max(total_height, viewport_height)
        if scroll_height <= 0:
            return None
        return (scroll_top + viewport_height) / scroll_height

    def update(self, scroll_top: float, viewport_height: float, total_height: float) -> bool:
        """Feed one scroll observation. Returns True if the callback fired."""
        percent = self.scroll_percent(scroll_top, viewport_height, total_height)
        if percent is None:
            return False
        if percent < self.threshold:
            self.state = EndReachedState.ARMED
            return False
        if not self.is_armed:
            return False
        # Latch before calling out so a re-entrant scroll cannot fire twice.
        self.state = EndReachedState.FIRED
        self.fire_count += 1
        if self._on_end_reached is not None:
            self._on_end_reached()
        return True

    def reset(self):
        self.state = EndReachedState.ARMED
