"""
Interval lane packing for the day view.

Events that overlap in time are drawn side by side. Each event of a column
(one caregiver on one day) is given a lane so that no two events sharing a
lane overlap, using as few lanes as possible. Every event in the column gets
the same lane_count so the renderer can split the column width evenly.

Greedy interval partitioning: walk the intervals by start time and put each
one in the lowest lane that is already free. A new lane is only opened when
every existing lane is busy at that instant, so the lane count equals the
peak number of intervals in progress and is minimal.
"""

from typing import NamedTuple, Sequence


class LaneInterval(NamedTuple):
    id: str
    start_offset: int
    end_offset: int


class LaneAssignment(NamedTuple):
    id: str
    lane: int
    lane_count: int


def pack_lanes(intervals: Sequence[LaneInterval]) -> list[LaneAssignment]:
    """
    Assign a display lane to every interval.

    Intervals are processed by start offset ascending; ties keep their input
    order so the result is deterministic. A lane is free for an interval when
    the lane's last interval ended at or before the new interval starts.

    Returns:
        One LaneAssignment per interval, in input order.
    """
    if not intervals:
        return []

    for interval in intervals:
        if interval.end_offset < interval.start_offset:
            raise ValueError(f"Interval {interval.id} ends before it starts")

    # sorted() is stable, so equal starts stay in input order
    order = sorted(range(len(intervals)), key=lambda i: intervals[i].start_offset)

    lane_end: list[int] = []
    lanes = [0] * len(intervals)

    for index in order:
        interval = intervals[index]
        lane = _first_free_lane(lane_end, interval.start_offset)
        if lane == len(lane_end):
            lane_end.append(interval.end_offset)
        else:
            lane_end[lane] = interval.end_offset
        lanes[index] = lane

    lane_count = len(lane_end)
    return [
        LaneAssignment(id=interval.id, lane=lane, lane_count=lane_count)
        for interval, lane in zip(intervals, lanes)
    ]


def _first_free_lane(lane_end: list[int], start_offset: int) -> int:
    for lane, end in enumerate(lane_end):
        if end <= start_offset:
            return lane
    return len(lane_end)


def max_concurrency(intervals: Sequence[LaneInterval]) -> int:
    """
    Peak number of intervals in progress at the start of any interval.

    An interval counts as in progress at its own start even when it has zero
    length, matching how pack_lanes treats it. This is the lane count
    pack_lanes produces.
    """
    peak = 0
    for current in intervals:
        active = sum(
            1
            for other in intervals
            if other is current
            or (other.start_offset <= current.start_offset < other.end_offset)
        )
        peak = max(peak, active)
    return peak
