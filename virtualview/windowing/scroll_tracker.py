from typing import Callable, Optional, Sequence

from PySide6.QtCore import QObject, QTimer, Signal

from virtualview.utils.flow_log import FlowLogger
from virtualview.utils.settings import DEFAULT_SETTINGS
from virtualview.windowing.end_reached import EndReachedDetector


class ScrollTracker(QObject):
    """Shared scroll handler for any windowing engine.

    Keeps the engine's scroll position current, tracks whether the user is
    still scrolling (debounced by one restartable single-shot timer) and
    drives the end-reached detector.
    """

    scrolled = Signal(float)
    scrolling_changed = Signal(bool)
    end_reached = Signal()

    def __init__(self, window, *,
                 on_end_reached: Optional[Callable[[], None]] = None,
                 end_reached_threshold: float = DEFAULT_SETTINGS['end_reached_threshold'],
                 idle_delay_ms: int = DEFAULT_SETTINGS['scroll_idle_delay_ms'],
                 timer=None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._window = window
        self._is_scrolling = False
        self._disposed = False
        self._idle_delay_ms = max(0, int(idle_delay_ms))
        self._log_flow = FlowLogger('virtualview.windowing.ScrollTracker')

        self._detector = EndReachedDetector(self.end_reached.emit, end_reached_threshold)
        if on_end_reached is not None:
            self.end_reached.connect(on_end_reached)

        if timer is None:
            timer = QTimer(self)
            timer.setSingleShot(True)
        self._idle_timer = timer
        self._idle_timer.timeout.connect(self._on_scroll_stopped)

    @property
    def window(self):
        return self._window

    @property
    def detector(self) -> EndReachedDetector:
        return self._detector

    @property
    def is_scrolling(self) -> bool:
        return self._is_scrolling

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def on_scroll(self, scroll_top: float):
        """Handle one scroll event. Events are applied in dispatch order."""
        if self._disposed:
            return
        self._window.set_scroll_top(scroll_top)
        if not self._is_scrolling:
            self._is_scrolling = True
            self.scrolling_changed.emit(True)

        # Restart the quiet-period timer
        self._idle_timer.stop()
        self._idle_timer.start(self._idle_delay_ms)

        self.scrolled.emit(self._window.scroll_top)
        self._check_end_reached()

    def on_resize(self, width: float, height: float):
        if self._disposed:
            return
        self._window.set_viewport_height(height)
        if hasattr(self._window, 'set_container_width'):
            self._window.set_container_width(width)

    def set_items(self, items: Sequence, *, appended: bool = False) -> bool:
        """Swap the engine's collection and re-evaluate the end-reached latch."""
        if self._disposed:
            return False
        replaced = self._window.set_items(items, appended=appended)
        if replaced:
            self._detector.reset()
        self.content_changed()
        return replaced

    def content_changed(self):
        """Re-check the end-reached latch after the content height changed.

        Can fire when the content no longer fills past the threshold, which
        lets a short first page pull in the next one without a scroll event.
        """
        if self._disposed:
            return
        self._check_end_reached()

    def _check_end_reached(self):
        window = self._window
        if self._detector.update(window.scroll_top, window.viewport_height, window.total_height):
            self._log_flow("END_REACHED",
                           f"Fired at scroll={window.scroll_top:.0f} total={window.total_height:.0f}")

    def _on_scroll_stopped(self):
        if self._disposed:
            return
        if self._is_scrolling:
            self._is_scrolling = False
            self.scrolling_changed.emit(False)

    def dispose(self):
        """Stop the idle timer. Later events and timeouts are ignored."""
        if self._disposed:
            return
        self._idle_timer.stop()
        self._disposed = True
        self._is_scrolling = False
