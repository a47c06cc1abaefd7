"""Client-side forecast view: controls state, gateway calls and the owned chart."""
from __future__ import annotations

import datetime as dt
from typing import Any, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

import requests

from app.chart import ForecastChart
from app.config import settings
from app.date_resolver import resolve_date
from app.domain import HourlyRecord, Segment
from app.segments import local_datetime
from app.summary import WeatherSummary, celsius_to_fahrenheit, derive_summary
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="view")

SWIPE_THRESHOLD_PX = 40
FETCH_FAILED = "Failed to fetch"


class GatewayError(Exception):
    """Any failed gateway call, reduced to the message shown to the user."""

    def __init__(self, message: str = FETCH_FAILED):
        super().__init__(message)
        self.message = message


class GatewayClient:
    """Thin HTTP client for the forecast gateway route."""

    def __init__(self, base_url: str | None = None, *, timeout: float | None = None, session=None):
        self.base_url = (base_url or settings.gateway_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.session = session or requests.Session()

    def fetch_forecast(
        self,
        location: str,
        date: str,
        segment: str,
        timezone: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {"location": location, "date": date, "segment": segment}
        if timezone:
            params["timezone"] = timezone
        try:
            resp = self.session.get(f"{self.base_url}/api/forecast", params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Gateway request failed", extra={"error": str(exc)})
            raise GatewayError() from exc

        if not 200 <= resp.status_code < 300:
            raise GatewayError(self._error_message(resp))
        try:
            payload = resp.json()
        except ValueError as exc:
            raise GatewayError() from exc
        if not isinstance(payload, dict):
            raise GatewayError()
        if payload.get("error"):
            raise GatewayError(str(payload["error"]))
        return payload

    @staticmethod
    def _error_message(resp) -> str:
        try:
            body = resp.json()
        except ValueError:
            return FETCH_FAILED
        if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
            return body["error"]
        return FETCH_FAILED


class ForecastView:
    """
    Holds the controls (location, weekday, segment, week offset) and redraws on change.

    Every change recomputes the target date, fetches the gateway and replaces
    the chart. The view owns at most one chart at a time; the previous one is
    destroyed before a new one is created, and close() destroys the last one.

    Nothing is fetched at construction unless `auto_refresh` is set; call
    refresh() once the view is mounted.
    """

    def __init__(
        self,
        client: GatewayClient | None = None,
        *,
        location: str | None = None,
        day_of_week: str = "Monday",
        segment: str = Segment.ALL.value,
        timezone: str | None = None,
        chart_factory: Callable[..., ForecastChart] = ForecastChart,
        today: Callable[[], dt.date] = dt.date.today,
        auto_refresh: bool = False,
    ):
        self.client = client or GatewayClient()
        self.location = location or settings.default_location
        self.day_of_week = day_of_week
        self.segment = segment
        self.timezone = timezone
        self.week_offset = 0
        self.chart_factory = chart_factory
        self._today = today

        self.loading = False
        self.data: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        self.hours: List[HourlyRecord] = []
        self.summary: Optional[WeatherSummary] = None
        self.chart: Optional[ForecastChart] = None
        self._touch_start_x: Optional[float] = None

        if auto_refresh:
            self.refresh()

    def __enter__(self) -> "ForecastView":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def target_date(self) -> str:
        return resolve_date(self.day_of_week, self.week_offset, today=self._today())

    @property
    def tzinfo(self) -> Optional[ZoneInfo]:
        return ZoneInfo(self.timezone) if self.timezone else None

    def refresh(self) -> None:
        """Fetch the forecast for the current controls and redraw."""
        self.loading = True
        date = self.target_date
        logger.info(
            "Refreshing forecast view",
            extra={"location": self.location, "date": date, "segment": self.segment, "week_offset": self.week_offset},
        )
        try:
            payload = self.client.fetch_forecast(self.location, date, self.segment, self.timezone)
        except GatewayError as exc:
            self.data = None
            self.error = exc.message
            self.hours = []
            self.summary = None
            self._destroy_chart()
        else:
            self.data = payload
            self.error = None
            raw_hours = payload.get("hours") or []
            self.hours = [HourlyRecord.from_provider(h) for h in raw_hours]
            self.summary = derive_summary(self.hours)
            self._redraw()
        finally:
            self.loading = False

    def _redraw(self) -> None:
        self._destroy_chart()
        self.chart = self.chart_factory(self.hours, self.summary, title=self.status_text(), tz=self.tzinfo)

    def _destroy_chart(self) -> None:
        if self.chart is not None:
            self.chart.destroy()
            self.chart = None

    def close(self) -> None:
        self._destroy_chart()

    def set_location(self, location: str) -> None:
        if location != self.location:
            self.location = location
            self.refresh()

    def set_day_of_week(self, day_of_week: str) -> None:
        if day_of_week != self.day_of_week:
            self.day_of_week = day_of_week
            self.refresh()

    def set_segment(self, segment: str) -> None:
        if segment != self.segment:
            self.segment = segment
            self.refresh()

    def set_week_offset(self, week_offset: int) -> None:
        if week_offset != self.week_offset:
            self.week_offset = week_offset
            self.refresh()

    def previous_week(self) -> None:
        self.set_week_offset(self.week_offset - 1)

    def next_week(self) -> None:
        self.set_week_offset(self.week_offset + 1)

    def touch_start(self, x: float) -> None:
        self._touch_start_x = x

    def touch_end(self, x: float) -> None:
        """Finish a swipe; left-to-right goes back a week, right-to-left forward."""
        if self._touch_start_x is None:
            return
        delta = x - self._touch_start_x
        self._touch_start_x = None
        if delta > SWIPE_THRESHOLD_PX:
            self.previous_week()
        elif delta < -SWIPE_THRESHOLD_PX:
            self.next_week()

    def status_text(self) -> str:
        if self.loading and self.data is None:
            return "Loading..."
        if self.error:
            return self.error
        if self.data is None:
            return "No data"
        return f"{self.data.get('resolvedAddress')} - {self.data.get('date')} - {self.segment}"

    def hour_cards(self) -> List[Dict[str, str]]:
        """Per-hour display values: local time, rounded °F temperature, conditions or icon."""
        tz = self.tzinfo
        cards = []
        for h in self.hours:
            when = local_datetime(h.timestamp_epoch_seconds or 0, tz)
            temp = h.temperature_celsius
            cards.append({
                "time": when.strftime("%H:%M") if when is not None else "--:--",
                "temperature": f"{round(celsius_to_fahrenheit(temp))}°" if temp is not None else "--",
                "conditions": h.conditions_text or h.icon_id or "",
            })
        return cards
