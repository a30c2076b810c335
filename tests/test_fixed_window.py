import pytest

from virtualview.windowing.fixed_window import FixedWindow
from virtualview.windowing.window_shared import (MIN_VIEWPORT_HEIGHT, ItemStyle,
                                                 WindowConfigError)


def make_window(count=1000, scroll_top=0, **kwargs):
    kwargs.setdefault("overscan", 3)
    window = FixedWindow(list(range(count)), 400, 50, **kwargs)
    window.set_scroll_top(scroll_top)
    return window


def test_range_at_top_of_list():
    window = make_window()

    visible = window.visible_range()

    assert (visible.start_index, visible.end_index) == (0, 11)
    assert window.total_height == 50000


def test_range_mid_scroll_subtracts_and_adds_overscan():
    window = make_window(scroll_top=2500)

    visible = window.visible_range()

    assert (visible.start_index, visible.end_index) == (47, 61)


def test_empty_collection_has_no_range_and_no_height():
    window = make_window(count=0, scroll_top=300)

    assert window.visible_range().is_empty
    assert window.visible_items() == []
    assert window.total_height == 0


def test_negative_scroll_clamps_to_first_index():
    window = make_window(scroll_top=-10000)

    visible = window.visible_range()

    assert visible.start_index == 0
    assert 0 <= visible.end_index <= 999


def test_scroll_past_end_stays_within_valid_indices():
    window = make_window(count=20, scroll_top=99999)

    visible = window.visible_range()

    assert 0 <= visible.start_index <= visible.end_index == 19


def test_range_is_valid_and_covers_every_intersecting_row():
    window = make_window(count=37, overscan=0)
    item_height = window.item_height
    for scroll_top in range(0, int(window.max_scroll_top) + 1, 7):
        window.set_scroll_top(scroll_top)
        visible = window.visible_range()
        assert 0 <= visible.start_index <= visible.end_index <= 36
        for index in range(37):
            top = index * item_height
            if top < scroll_top + window.viewport_height and top + item_height > scroll_top:
                assert index in visible


def test_visible_items_carry_absolute_styles():
    window = make_window(count=10, scroll_top=100, overscan=0)

    entries = window.visible_items()

    assert [entry.index for entry in entries] == list(range(2, 10))
    assert entries[0].item == 2
    assert entries[0].style == ItemStyle(top=100, height=50)
    assert entries[0].style.to_rect(320).width() == 320


def test_render_calls_renderer_for_each_visible_item():
    calls = []

    def render_item(item, index):
        calls.append(index)
        return f"row-{item}"

    window = make_window(count=5, render_item=render_item)

    rendered = window.render()

    assert calls == [0, 1, 2, 3, 4]
    assert [r.node for r in rendered] == ["row-0", "row-1", "row-2", "row-3", "row-4"]
    assert rendered[3].style.top == 150


def test_render_without_renderer_is_a_config_error():
    with pytest.raises(WindowConfigError):
        make_window(count=5).render()


@pytest.mark.parametrize("item_height", [0, -5, float("nan"), "tall"])
def test_invalid_item_height_fails_fast(item_height):
    with pytest.raises(WindowConfigError):
        FixedWindow([1, 2, 3], 400, item_height)


def test_negative_overscan_is_rejected():
    with pytest.raises(WindowConfigError):
        FixedWindow([1, 2, 3], 400, 50, overscan=-1)


def test_default_overscan_for_lists_is_three():
    assert FixedWindow([], 400, 50).overscan == 3


def test_invalid_viewport_height_is_clamped_not_raised(caplog):
    window = FixedWindow(list(range(10)), 0, 50, overscan=0)
    window.set_viewport_height(float("nan"))

    assert window.viewport_height == MIN_VIEWPORT_HEIGHT
    assert window.visible_range().start_index == 0
    assert "clamped" in caplog.text


def test_nan_scroll_position_is_ignored():
    window = make_window(scroll_top=500)
    window.set_scroll_top(float("nan"))

    assert window.scroll_top == 500


@pytest.mark.parametrize("scroll_top", [float("inf"), float("-inf")])
def test_infinite_scroll_position_is_ignored(scroll_top):
    window = make_window(scroll_top=500)
    window.set_scroll_top(scroll_top)

    assert window.scroll_top == 500
    assert window.visible_range().start_index == 7


def test_infinite_viewport_height_is_clamped():
    window = make_window(count=10)
    window.set_viewport_height(float("inf"))

    assert window.viewport_height == MIN_VIEWPORT_HEIGHT
    assert window.visible_range().end_index == 3
