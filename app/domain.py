"""Domain vocabulary and typed schemas for forecast payloads.

The provider's JSON is untyped and its humidity/wind field names vary, so every
raw mapping is validated here into immutable records before anything else
touches it. Malformed or missing values become ``None``; nothing in this module
raises on bad provider data.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

TEMPERATURE_KEYS: Tuple[str, ...] = ("temp",)
HUMIDITY_KEYS: Tuple[str, ...] = ("humidity", "hum", "rh")
WIND_SPEED_KEYS: Tuple[str, ...] = ("wspd", "windspeed", "windSpeed", "wind_kph", "wind_kmh")
# 9999-12-31T23:59:59Z, the last second datetime can represent
MAX_EPOCH_SECONDS = 253402300799


class _FrozenModel(BaseModel):
    """Immutable model that accepts either field names or wire aliases."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Segment(str, Enum):
    """Named time-of-day bucket."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ALL = "all"

    @classmethod
    def parse(cls, name: Optional[str]) -> "Segment":
        """Map a free-form segment name to a Segment; unknown names mean the whole day."""
        if not name:
            return cls.ALL
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            return cls.ALL


class SegmentWindow(_FrozenModel):
    """Half-open hour range [start_hour, end_hour_exclusive)."""
    start_hour: int = Field(ge=0, le=23)
    end_hour_exclusive: int = Field(ge=1, le=24)

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour_exclusive


def as_float(value: Any) -> Optional[float]:
    """Parse a provider value as a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> Optional[int]:
    number = as_float(value)
    return int(number) if number is not None else None


def as_epoch(value: Any) -> Optional[int]:
    """Parse epoch seconds; values outside 1970..9999 are treated as absent."""
    number = as_int(value)
    if number is None or not 0 <= number <= MAX_EPOCH_SECONDS:
        return None
    return number


def as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def first_numeric(raw: Mapping[str, Any], keys: Sequence[str]) -> Optional[float]:
    """Return the first numeric-parseable value among `keys`, consulted in order."""
    for key in keys:
        value = as_float(raw.get(key))
        if value is not None:
            return value
    return None


class HourlyRecord(_FrozenModel):
    """One hourly provider reading, with normalized field names."""
    timestamp_epoch_seconds: Optional[int] = Field(default=None, alias="datetimeEpoch")
    time_label: Optional[str] = Field(default=None, alias="datetime")
    temperature_celsius: Optional[float] = Field(default=None, alias="temp")
    conditions_text: Optional[str] = Field(default=None, alias="conditions")
    icon_id: Optional[str] = Field(default=None, alias="icon")
    humidity_percent: Optional[float] = Field(default=None, alias="humidity")
    wind_speed: Optional[float] = Field(default=None, alias="windspeed")

    @classmethod
    def from_provider(cls, raw: Any) -> "HourlyRecord":
        """Build a record from a raw hour mapping, tolerating missing or malformed fields."""
        if isinstance(raw, HourlyRecord):
            return raw
        if not isinstance(raw, Mapping):
            return cls()
        return cls(
            timestamp_epoch_seconds=as_epoch(raw.get("datetimeEpoch")),
            time_label=as_str(raw.get("datetime")),
            temperature_celsius=first_numeric(raw, TEMPERATURE_KEYS),
            conditions_text=as_str(raw.get("conditions")),
            icon_id=as_str(raw.get("icon")),
            humidity_percent=first_numeric(raw, HUMIDITY_KEYS),
            wind_speed=first_numeric(raw, WIND_SPEED_KEYS),
        )


class DayRecord(_FrozenModel):
    """One calendar day from the provider with its ordered hours."""
    date: Optional[str] = Field(default=None, alias="datetime")
    description: Optional[str] = None
    conditions: Optional[str] = None
    hours: Tuple[HourlyRecord, ...] = ()

    @classmethod
    def from_provider(cls, raw: Any) -> "DayRecord":
        if not isinstance(raw, Mapping):
            return cls()
        raw_hours = raw.get("hours")
        hours = tuple(HourlyRecord.from_provider(h) for h in raw_hours) if isinstance(raw_hours, list) else ()
        return cls(
            date=as_str(raw.get("datetime")),
            description=as_str(raw.get("description")),
            conditions=as_str(raw.get("conditions")),
            hours=hours,
        )

    @property
    def summary(self) -> Optional[str]:
        """Day description, falling back to conditions text."""
        return self.description or self.conditions or None


class ProviderTimeline(_FrozenModel):
    """Validated provider timeline response."""
    resolved_address: Optional[str] = Field(default=None, alias="resolvedAddress")
    days: Tuple[DayRecord, ...] = ()

    @classmethod
    def from_provider(cls, raw: Any) -> "ProviderTimeline":
        if not isinstance(raw, Mapping):
            return cls()
        raw_days = raw.get("days")
        days = tuple(DayRecord.from_provider(d) for d in raw_days) if isinstance(raw_days, list) else ()
        return cls(resolved_address=as_str(raw.get("resolvedAddress")), days=days)

    def select_day(self, date: Optional[str]) -> Optional[DayRecord]:
        """Day matching `date` exactly, else the first day, else None."""
        if date:
            for day in self.days:
                if day.date == date:
                    return day
        return self.days[0] if self.days else None


class ForecastResult(_FrozenModel):
    """Normalized gateway response for one day and segment."""
    resolved_address: str = Field(alias="resolvedAddress")
    query_location: str = Field(alias="queryLocation")
    date: Optional[str] = None
    segment: Segment = Segment.ALL
    summary: Optional[str] = None
    hours: Tuple[HourlyRecord, ...] = ()
    raw_day: Optional[DayRecord] = Field(default=None, alias="rawDay")


class ErrorPayload(BaseModel):
    """Error body returned by the gateway."""
    error: str
