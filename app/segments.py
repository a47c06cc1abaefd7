"""Time-of-day segments and hourly record filtering."""
from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from app.domain import HourlyRecord, Segment, SegmentWindow
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="segments")

SEGMENT_WINDOWS = {
    Segment.MORNING: SegmentWindow(start_hour=8, end_hour_exclusive=12),
    Segment.AFTERNOON: SegmentWindow(start_hour=12, end_hour_exclusive=17),
    Segment.EVENING: SegmentWindow(start_hour=17, end_hour_exclusive=21),
    Segment.ALL: SegmentWindow(start_hour=0, end_hour_exclusive=24),
}


def window_for(segment: Segment | str | None) -> SegmentWindow:
    """Window for a segment; unknown names get the full day."""
    if not isinstance(segment, Segment):
        segment = Segment.parse(segment)
    return SEGMENT_WINDOWS[segment]


def local_datetime(epoch_seconds: Optional[int], tz: Optional[ZoneInfo] = None) -> Optional[dt.datetime]:
    """Epoch timestamp as a datetime in `tz` (process local time when None), or None if unrepresentable."""
    if epoch_seconds is None:
        return None
    try:
        return dt.datetime.fromtimestamp(epoch_seconds, tz=tz)
    except (OverflowError, OSError, ValueError):
        logger.debug("Timestamp out of range; treating as absent", extra={"epoch": epoch_seconds})
        return None


def local_hour(epoch_seconds: Optional[int], tz: Optional[ZoneInfo] = None) -> int:
    """
    Hour of day for an epoch timestamp in `tz` (process local time when None).

    A missing, zero or out-of-range timestamp is reported as hour 0.
    """
    if not epoch_seconds:
        return 0
    when = local_datetime(epoch_seconds, tz)
    return when.hour if when is not None else 0


def filter_hours(
    segment: Segment | str | None,
    hours: Iterable[HourlyRecord],
    tz: Optional[ZoneInfo] = None,
) -> List[HourlyRecord]:
    """Keep the records whose local hour falls in the segment window, preserving order."""
    window = window_for(segment)
    hours = list(hours)
    kept = [h for h in hours if window.contains(local_hour(h.timestamp_epoch_seconds, tz))]
    logger.debug(
        "Filtered hours by segment",
        extra={"segment": str(segment), "input_count": len(hours), "kept_count": len(kept)},
    )
    return kept
