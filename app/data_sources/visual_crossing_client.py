"""Client for the Visual Crossing timeline API."""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import requests

from app.config import VISUAL_CROSSING_TIMELINE_URL
from app.domain import ProviderTimeline
from app.errors import UpstreamError
from utils.logging_utils import get_tagged_logger, mask_url
logger = get_tagged_logger(__name__, tag="visual_crossing_client")

session = requests.Session()

DEFAULT_RANGE = "next7"
UNIT_GROUP = "metric"


def build_timeline_url(location: str, date: Optional[str] = None, *, base_url: str = VISUAL_CROSSING_TIMELINE_URL) -> str:
    """Path-style timeline URL: one day when `date` is given, otherwise the default 7-day range."""
    return f"{base_url.rstrip('/')}/{quote(location, safe='')}/{date or DEFAULT_RANGE}"


def fetch_timeline(
    location: str,
    date: Optional[str] = None,
    *,
    api_key: Optional[str] = None,
    base_url: str = VISUAL_CROSSING_TIMELINE_URL,
    timeout: float = 10,
) -> ProviderTimeline:
    """
    Fetch hourly forecast data for `location` and validate it into a ProviderTimeline.

    Raises UpstreamError with the provider's status and raw body on any
    non-2xx answer. There is no retry.
    """
    url = build_timeline_url(location, date, base_url=base_url)
    params = {"unitGroup": UNIT_GROUP, "key": api_key, "include": "hours"}
    logger.info("Requesting provider timeline", extra={"url": mask_url(url), "location": location, "date": date})

    resp = session.get(url, params=params, timeout=timeout)
    if not 200 <= resp.status_code < 300:
        logger.warning(
            "Provider returned non-success status",
            extra={"status_code": resp.status_code, "location": location, "date": date},
        )
        raise UpstreamError(resp.status_code, resp.text)

    timeline = ProviderTimeline.from_provider(resp.json())
    logger.debug("Parsed provider timeline", extra={"day_count": len(timeline.days)})
    return timeline
