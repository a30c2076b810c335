import pytest

from virtualview.windowing.end_reached import EndReachedDetector, EndReachedState

VIEWPORT = 100
TOTAL = 1000


def scroll_for_percent(percent):
    return percent * TOTAL - VIEWPORT


class Counter:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1


def test_fires_once_per_excursion_past_threshold():
    counter = Counter()
    detector = EndReachedDetector(counter, threshold=0.8)

    assert detector.update(scroll_for_percent(0.85), VIEWPORT, TOTAL) is True
    assert detector.update(scroll_for_percent(0.9), VIEWPORT, TOTAL) is False
    assert detector.update(scroll_for_percent(0.85), VIEWPORT, TOTAL) is False
    assert counter.calls == 1
    assert detector.state is EndReachedState.FIRED

    detector.update(scroll_for_percent(0.5), VIEWPORT, TOTAL)
    assert detector.is_armed

    assert detector.update(scroll_for_percent(0.85), VIEWPORT, TOTAL) is True
    assert counter.calls == 2


def test_exact_threshold_fires():
    counter = Counter()
    detector = EndReachedDetector(counter, threshold=0.8)

    detector.update(scroll_for_percent(0.8), VIEWPORT, TOTAL)

    assert counter.calls == 1


def test_below_threshold_never_fires():
    counter = Counter()
    detector = EndReachedDetector(counter, threshold=0.8)

    for scroll_top in range(0, 690, 10):
        detector.update(scroll_top, VIEWPORT, TOTAL)

    assert counter.calls == 0


def test_reentrant_callback_does_not_fire_twice():
    detector = None
    calls = []

    def on_end_reached():
        calls.append(1)
        detector.update(scroll_for_percent(0.95), VIEWPORT, TOTAL)

    detector = EndReachedDetector(on_end_reached, threshold=0.8)
    detector.update(scroll_for_percent(0.9), VIEWPORT, TOTAL)

    assert calls == [1]


def test_reset_rearms():
    counter = Counter()
    detector = EndReachedDetector(counter)
    detector.update(scroll_for_percent(0.9), VIEWPORT, TOTAL)

    detector.reset()
    detector.update(scroll_for_percent(0.9), VIEWPORT, TOTAL)

    assert counter.calls == 2


def test_short_content_counts_as_fully_scrolled():
    assert EndReachedDetector.scroll_percent(0, 400, 120) == 1.0
    assert EndReachedDetector.scroll_percent(0, 0, 0) is None


def test_works_without_callback():
    detector = EndReachedDetector()

    assert detector.update(scroll_for_percent(0.9), VIEWPORT, TOTAL) is True
    assert detector.fire_count == 1


@pytest.mark.parametrize("threshold, expected", [
    (0, 0.8),
    (-1, 0.8),
    (float("nan"), 0.8),
    (1.5, 1.0),
    (0.5, 0.5),
])
def test_threshold_is_sanitized(threshold, expected):
    assert EndReachedDetector(threshold=threshold).threshold == expected


def test_bad_threshold_is_logged_as_flow_warning(caplog):
    EndReachedDetector(threshold=1.5)

    record = caplog.records[-1]
    assert record.name == 'virtualview.windowing.EndReachedDetector'
    assert record.levelname == 'WARNING'
    assert "[END][WARNING] Threshold 1.5 clamped to 1.0" in record.getMessage()
