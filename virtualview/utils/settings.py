import math
from dataclasses import dataclass

from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    'list_overscan': 3,  # Extra rows rendered above and below the viewport
    'grid_overscan': 2,  # Extra grid rows rendered above and below the viewport
    'end_reached_threshold': 0.8,  # Fraction of content scrolled before requesting more data
    'scroll_idle_delay_ms': 150,  # Quiet period after the last scroll event
    'estimated_item_height': 48,  # Placeholder height for rows not yet measured
}

MAX_OVERSCAN = 50
MAX_SCROLL_IDLE_DELAY_MS = 5000


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self):
        super().__init__('virtualview', 'virtualview')

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


@dataclass(frozen=True)
class WindowConfig:
    """Windowing defaults resolved from the settings store."""
    list_overscan: int = DEFAULT_SETTINGS['list_overscan']
    grid_overscan: int = DEFAULT_SETTINGS['grid_overscan']
    end_reached_threshold: float = DEFAULT_SETTINGS['end_reached_threshold']
    scroll_idle_delay_ms: int = DEFAULT_SETTINGS['scroll_idle_delay_ms']
    estimated_item_height: float = DEFAULT_SETTINGS['estimated_item_height']


def _int_setting(key: str, low: int, high: int) -> int:
    default = DEFAULT_SETTINGS[key]
    try:
        value = int(settings.value(key, default, type=int))
    except Exception:
        value = default
    return max(low, min(value, high))


def _float_setting(key: str) -> float | None:
    try:
        value = float(settings.value(key, DEFAULT_SETTINGS[key], type=float))
    except Exception:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def get_end_reached_threshold() -> float:
    threshold = _float_setting('end_reached_threshold')
    if threshold is None or threshold <= 0 or threshold > 1:
        return DEFAULT_SETTINGS['end_reached_threshold']
    return threshold


def get_estimated_item_height() -> float:
    height = _float_setting('estimated_item_height')
    if height is None or height <= 0:
        return float(DEFAULT_SETTINGS['estimated_item_height'])
    return height


def get_window_config() -> WindowConfig:
    return WindowConfig(
        list_overscan=_int_setting('list_overscan', 0, MAX_OVERSCAN),
        grid_overscan=_int_setting('grid_overscan', 0, MAX_OVERSCAN),
        end_reached_threshold=get_end_reached_threshold(),
        scroll_idle_delay_ms=_int_setting(
            'scroll_idle_delay_ms', 0, MAX_SCROLL_IDLE_DELAY_MS),
        estimated_item_height=get_estimated_item_height(),
    )
