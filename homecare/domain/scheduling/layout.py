"""
Day view layout: position events of each caregiver column in a fixed window.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, NamedTuple, Optional

from .lane_packer import LaneInterval, pack_lanes
from .time_window import DEFAULT_MIN_DISPLAY_MINUTES, clamp_interval, minutes_from_window_start


class TimedItem(NamedTuple):
    id: str
    resource_id: str
    start: datetime
    end: datetime


@dataclass(frozen=True)
class PositionedItem:
    id: str
    top: float  # percent of the window height
    height: float  # percent, from the floored display duration
    lane: int
    lane_count: int
    start_offset: int
    end_offset: int
    duration_minutes: int  # true clamped length, not the display floor


def position_column(
    items: Iterable[TimedItem],
    window_start: datetime,
    window_end: datetime,
    min_display_minutes: int = DEFAULT_MIN_DISPLAY_MINUTES,
) -> list[PositionedItem]:
    """Clamp one column's items into the window and pack them into lanes.

    Items outside the window are dropped. Lanes are packed on the true
    clamped offsets; only the rendered height uses the display floor.
    """
    total_minutes = minutes_from_window_start(window_end, window_start)
    ordered = sorted(items, key=lambda item: item.start)

    clamped = []
    for item in ordered:
        interval = clamp_interval(
            item.start, item.end, window_start, window_end, min_display_minutes
        )
        if interval is not None:
            clamped.append((item, interval))

    assignments = pack_lanes(
        [
            LaneInterval(id=item.id, start_offset=interval.start_offset, end_offset=interval.end_offset)
            for item, interval in clamped
        ]
    )

    return [
        PositionedItem(
            id=item.id,
            top=interval.start_offset / total_minutes * 100,
            height=interval.display_duration / total_minutes * 100,
            lane=assignment.lane,
            lane_count=assignment.lane_count,
            start_offset=interval.start_offset,
            end_offset=interval.end_offset,
            duration_minutes=interval.duration,
        )
        for (item, interval), assignment in zip(clamped, assignments)
    ]


def layout_columns(
    items: Iterable[TimedItem],
    window_start: datetime,
    window_end: datetime,
    resource_ids: Optional[Iterable[str]] = None,
    min_display_minutes: int = DEFAULT_MIN_DISPLAY_MINUTES,
) -> dict[str, list[PositionedItem]]:
    """
    Lay out every resource column independently.

    Each column is packed over its complete set of items. Resources listed in
    resource_ids get a column even with no items (an empty list).
    """
    grouped: dict[str, list[TimedItem]] = {}
    for resource_id in resource_ids or ():
        grouped.setdefault(resource_id, [])
    for item in items:
        grouped.setdefault(item.resource_id, []).append(item)

    return {
        resource_id: position_column(column, window_start, window_end, min_display_minutes)
        for resource_id, column in grouped.items()
    }
