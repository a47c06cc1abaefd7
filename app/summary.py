"""Average hourly readings and turn them into short qualitative labels."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from app.domain import HourlyRecord
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="summary")

NICE_MIN_F = 60.0
NICE_MAX_F = 75.0
COOL_BELOW_F = 50.0
HOT_ABOVE_F = 85.0
DRY_BELOW_PCT = 25.0
HUMID_ABOVE_PCT = 75.0
WINDY_ABOVE = 8.0


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9 / 5 + 32


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


@dataclass
class WeatherSummary:
    """Averages over a set of hours plus the labels derived from them."""
    avg_temperature_f: Optional[float] = None
    avg_humidity: Optional[float] = None
    avg_wind_speed: Optional[float] = None
    labels: List[str] = field(default_factory=list)

    @staticmethod
    def _fmt(val, unit: str, fmt: str) -> str:
        if val is None:
            return ""
        return f"{fmt.format(val)} {unit}".rstrip()

    def describe(self) -> str:
        """Labels joined for display, e.g. "Nice day, Humid"."""
        return ", ".join(self.labels)

    def display_lines(self) -> List[str]:
        """Formatted averages; null averages are left out."""
        lines = []
        if self.avg_temperature_f is not None:
            lines.append(f"Avg temp: {self._fmt(self.avg_temperature_f, '°F', '{:.1f}')}")
        if self.avg_humidity is not None:
            lines.append(f"Avg humidity: {self._fmt(self.avg_humidity, '%', '{:.0f}')}")
        if self.avg_wind_speed is not None:
            lines.append(f"Avg wind: {self._fmt(self.avg_wind_speed, '', '{:.1f}')}")
        return lines


def temperature_label(avg_f: Optional[float]) -> Optional[str]:
    if avg_f is None:
        return None
    if NICE_MIN_F <= avg_f <= NICE_MAX_F:
        return "Nice day"
    if avg_f < COOL_BELOW_F:
        return "Cool"
    if avg_f > HOT_ABOVE_F:
        return "Hot"
    return None


def humidity_label(avg_pct: Optional[float]) -> Optional[str]:
    if avg_pct is None:
        return None
    if DRY_BELOW_PCT <= avg_pct <= HUMID_ABOVE_PCT:
        return "Chance of rain"
    if avg_pct < DRY_BELOW_PCT:
        return "Dry"
    return "Humid"


def wind_label(avg_speed: Optional[float]) -> Optional[str]:
    if avg_speed is not None and avg_speed > WINDY_ABOVE:
        return "Windy"
    return None


def derive_summary(hours: Iterable[HourlyRecord | Mapping[str, Any]]) -> WeatherSummary:
    """
    Compute average temperature (°F), humidity and wind speed and their labels.

    Accepts validated records or raw hour mappings; raw mappings are resolved
    through the same humidity/wind alias lists the gateway uses. Each average
    only counts records where that value is present.
    """
    records = [HourlyRecord.from_provider(h) for h in hours]

    temps = [r.temperature_celsius for r in records if r.temperature_celsius is not None]
    humidity = [r.humidity_percent for r in records if r.humidity_percent is not None]
    wind = [r.wind_speed for r in records if r.wind_speed is not None]

    avg_c = _mean(temps)
    summary = WeatherSummary(
        avg_temperature_f=celsius_to_fahrenheit(avg_c) if avg_c is not None else None,
        avg_humidity=_mean(humidity),
        avg_wind_speed=_mean(wind),
    )
    for label in (
        temperature_label(summary.avg_temperature_f),
        humidity_label(summary.avg_humidity),
        wind_label(summary.avg_wind_speed),
    ):
        if label:
            summary.labels.append(label)

    logger.debug(
        "Derived weather summary",
        extra={"record_count": len(records), "labels": summary.labels},
    )
    return summary
