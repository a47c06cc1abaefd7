"""Select a forecast day from the provider and narrow it to a time-of-day segment."""
from __future__ import annotations

from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app import config
from app.data_sources import CallableForecastDataSource, ForecastDataSource, fetch_timeline
from app.domain import ForecastResult, Segment
from app.errors import InvalidTimezoneError, NoDayDataError
from app.segments import filter_hours
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="app/forecast_service")


def resolve_timezone(tz_name: Optional[str]) -> Optional[ZoneInfo]:
    """ZoneInfo for an IANA name; None keeps the server's local time."""
    if not tz_name:
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # OSError covers names that resolve to tzdata directories, e.g. "America"
        raise InvalidTimezoneError(tz_name)


def get_forecast(
    location: Optional[str] = None,
    date: Optional[str] = None,
    segment: Optional[str] = None,
    *,
    timezone: Optional[str] = None,
    data_source: ForecastDataSource | None = None,
    settings: config.Settings | None = None,
) -> ForecastResult:
    """
    Fetch the provider timeline and reshape one day of it into a ForecastResult.

    The day whose date equals `date` is used when present; otherwise the first
    day in the response. Hours are filtered to `segment` in `timezone`
    (falling back to the configured display timezone, then server local time).

    Raises UpstreamError for non-success provider answers and NoDayDataError
    when the provider returns no days at all.
    """
    settings = settings or config.settings
    config.warn_if_unconfigured(settings)

    location = location or settings.default_location
    seg = Segment.parse(segment or settings.default_segment)
    tz = resolve_timezone(timezone or settings.display_timezone)

    ds = data_source or CallableForecastDataSource(timeline=fetch_timeline)
    timeline = ds.fetch_timeline(
        location,
        date,
        api_key=settings.weather_api_key,
        base_url=settings.provider_base_url,
        timeout=settings.request_timeout_seconds,
    )

    day = timeline.select_day(date)
    if day is None:
        logger.warning("Provider returned no days", extra={"location": location, "date": date})
        raise NoDayDataError()
    if date and day.date != date:
        logger.warning(
            "Requested date not in provider response; using first day",
            extra={"requested": date, "used": day.date},
        )

    hours = filter_hours(seg, day.hours, tz)
    logger.info(
        "Computed forecast for segment",
        extra={"location": location, "date": day.date, "segment": seg.value, "hours_count": len(hours)},
    )

    return ForecastResult(
        resolved_address=timeline.resolved_address or location,
        query_location=location,
        date=day.date,
        segment=seg,
        summary=day.summary,
        hours=tuple(hours),
        raw_day=day,
    )
