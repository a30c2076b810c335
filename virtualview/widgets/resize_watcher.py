from typing import Callable, Optional

from PySide6.QtCore import QEvent, QObject, Signal


class ResizeWatcher(QObject):
    """Reports the size of a watched widget whenever it is resized."""

    resized = Signal(int, int)

    def __init__(self, widget, on_resize: Optional[Callable[[int, int], None]] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._widget = widget
        self.last_size: Optional[tuple[int, int]] = None
        if on_resize is not None:
            self.resized.connect(on_resize)
        widget.installEventFilter(self)

    @property
    def widget(self):
        return self._widget

    def eventFilter(self, watched, event):
        if watched is self._widget and event.type() == QEvent.Type.Resize:
            size = event.size()
            new_size = (size.width(), size.height())
            if new_size != self.last_size:
                self.last_size = new_size
                self.resized.emit(*new_size)
        # Never consume the event, the widget still needs it.
        return False

    def detach(self):
        if self._widget is not None:
            self._widget.removeEventFilter(self)
            self._widget = None
