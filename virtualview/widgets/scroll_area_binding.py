from virtualview.widgets.resize_watcher import ResizeWatcher


class ScrollAreaBinding:
    """Connects a Qt scroll area to a ScrollTracker.

    Scroll bar moves become scroll events, viewport resizes become resize
    events, and the scroll bar range follows the window's content height.
    Works with any object exposing `verticalScrollBar()` and `viewport()`.
    """

    def __init__(self, scroll_area, tracker):
        self._scroll_area = scroll_area
        self._tracker = tracker
        self._attached = True

        self._scroll_bar = scroll_area.verticalScrollBar()
        self._scroll_bar.valueChanged.connect(self._on_value_changed)

        viewport = scroll_area.viewport()
        self._resize_watcher = ResizeWatcher(viewport, self._on_resized)
        tracker.on_resize(viewport.width(), viewport.height())
        self.sync_range()

    @property
    def tracker(self):
        return self._tracker

    @property
    def resize_watcher(self) -> ResizeWatcher:
        return self._resize_watcher

    def _on_value_changed(self, value):
        if not self._attached:
            return
        self._tracker.on_scroll(value)

    def _on_resized(self, width, height):
        if not self._attached:
            return
        self._tracker.on_resize(width, height)
        self.sync_range()

    def sync_range(self):
        """Match the scroll bar range to the window's content height.

        Call after the collection changed so the scroll bar can reach the
        new end of the content.
        """
        window = self._tracker.window
        viewport_height = int(window.viewport_height)
        self._scroll_bar.setRange(0, int(window.max_scroll_top))
        self._scroll_bar.setPageStep(viewport_height)

    def detach(self):
        """Disconnect from the scroll area and dispose the tracker."""
        if not self._attached:
            return
        self._attached = False
        self._scroll_bar.valueChanged.disconnect(self._on_value_changed)
        self._resize_watcher.detach()
        self._tracker.dispose()
