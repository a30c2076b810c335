import logging
import time

LOGGER_NAME = 'virtualview'

_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
}


class FlowLogger:
    """Timestamped, optionally throttled flow logging for windowing diagnostics."""

    def __init__(self, name: str = LOGGER_NAME):
        self._logger = logging.getLogger(name)
        self._flow_log_last: dict[str, float] = {}

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def __call__(self, component: str, message: str, *, level: str = "DEBUG",
                 throttle_key: str | None = None, every_s: float | None = None) -> bool:
        """Log one flow message. Returns False when it was throttled or filtered."""
        levelno = _LEVELS.get(level, logging.DEBUG)
        if not self._logger.isEnabledFor(levelno):
            return False

        now = time.time()
        if throttle_key and every_s is not None:
            last = self._flow_log_last.get(throttle_key, 0.0)
            if (now - last) < every_s:
                return False
            self._flow_log_last[throttle_key] = now
        ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
        self._logger.log(levelno, f"[{ts}][TRACE][{component}][{level}] {message}")
        return True
