from datetime import date, datetime

import pytest

from homecare.domain.scheduling.layout import TimedItem, layout_columns, position_column
from homecare.domain.scheduling.time_window import day_window

WINDOW = day_window(date(2024, 6, 10), 6, 22)  # 960 minutes


def item(item_id, start, end, resource_id="cg-1"):
    return TimedItem(
        item_id,
        resource_id,
        datetime.fromisoformat(f"2024-06-10T{start}"),
        datetime.fromisoformat(f"2024-06-10T{end}"),
    )


def test_position_column_percentages_and_lanes():
    positioned = position_column(
        [item("a", "06:00", "07:00"), item("b", "06:30", "07:30"), item("c", "07:40", "08:00")],
        *WINDOW,
    )

    assert [p.id for p in positioned] == ["a", "b", "c"]
    assert [p.lane for p in positioned] == [0, 1, 0]
    assert {p.lane_count for p in positioned} == {2}
    assert positioned[0].top == 0
    assert positioned[0].height == pytest.approx(60 / 960 * 100)
    assert positioned[1].top == pytest.approx(30 / 960 * 100)


def test_items_outside_window_are_dropped():
    positioned = position_column(
        [item("early", "04:00", "05:30"), item("late", "22:00", "23:00"), item("in", "09:00", "10:00")],
        *WINDOW,
    )
    assert [p.id for p in positioned] == ["in"]


def test_short_item_height_uses_display_floor_but_lanes_use_true_end():
    positioned = position_column(
        [item("short", "09:00", "09:02"), item("next", "09:05", "10:00")], *WINDOW
    )

    short, following = positioned
    assert short.duration_minutes == 2
    assert short.end_offset == 182
    assert short.height == pytest.approx(10 / 960 * 100)
    # the floor does not push the following event into a second lane
    assert following.lane == 0
    assert short.lane_count == 1


def test_layout_columns_groups_by_resource_and_keeps_empty_columns():
    columns = layout_columns(
        [item("a", "09:00", "10:00", "cg-1"), item("b", "09:30", "10:30", "cg-2")],
        *WINDOW,
        resource_ids=["cg-1", "cg-2", "cg-3"],
    )

    assert set(columns) == {"cg-1", "cg-2", "cg-3"}
    assert columns["cg-3"] == []
    # columns are packed independently
    assert columns["cg-1"][0].lane_count == 1
    assert columns["cg-2"][0].lane_count == 1


def test_layout_columns_without_items():
    assert layout_columns([], *WINDOW) == {}
