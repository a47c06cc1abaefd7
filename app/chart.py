"""Line chart of temperature, humidity and wind speed for a forecast segment."""
from __future__ import annotations

import io
import math
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

import matplotlib.dates as mdates
from matplotlib.figure import Figure

from app.domain import HourlyRecord
from app.segments import local_datetime
from app.summary import WeatherSummary, celsius_to_fahrenheit
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="chart")

TEMP_COLOR = "#ff7f0e"
HUMIDITY_COLOR = "#1f77b4"
WIND_COLOR = "#2ca02c"


def _value(v: Optional[float]) -> float:
    return v if v is not None else math.nan


class ForecastChart:
    """
    One matplotlib figure owned by whoever created it.

    The figure is built without pyplot, so it never enters pyplot's global
    figure registry and concurrent charts share no state. destroy() drops it;
    a destroyed chart cannot render again.
    """

    def __init__(
        self,
        hours: Sequence[HourlyRecord],
        summary: WeatherSummary,
        *,
        title: str = "",
        tz: Optional[ZoneInfo] = None,
    ):
        self.summary = summary
        self.title = title
        self.tz = tz
        self.points = []
        for h in hours:
            when = local_datetime(h.timestamp_epoch_seconds, tz) if h.timestamp_epoch_seconds else None
            if when is not None:
                self.points.append((when, h))
        self.figure: Optional[Figure] = None
        self._draw()

    @property
    def closed(self) -> bool:
        return self.figure is None

    def _draw(self) -> None:
        fig = Figure(figsize=(8, 4.5))
        ax_temp = fig.subplots()
        fig.subplots_adjust(right=0.78, bottom=0.22)
        ax_humidity = ax_temp.twinx()
        ax_wind = ax_temp.twinx()
        # third y-axis sits outside the humidity axis
        ax_wind.spines["right"].set_position(("axes", 1.14))

        times = [when for when, _ in self.points]
        temps = [
            celsius_to_fahrenheit(h.temperature_celsius) if h.temperature_celsius is not None else math.nan
            for _, h in self.points
        ]
        humidity = [_value(h.humidity_percent) for _, h in self.points]
        wind = [_value(h.wind_speed) for _, h in self.points]

        if times:
            ax_temp.plot(times, temps, color=TEMP_COLOR, linewidth=2, marker="o", label="Temp (°F)")
            ax_humidity.plot(times, humidity, color=HUMIDITY_COLOR, linewidth=1.5, label="Humidity (%)")
            ax_wind.plot(times, wind, color=WIND_COLOR, linewidth=1.5, linestyle="--", label="Wind speed")
            ax_temp.xaxis.set_major_formatter(mdates.DateFormatter("%H:%M", tz=self.tz))
            ax_temp.tick_params(axis="x", labelrotation=45)
        else:
            ax_temp.text(0.5, 0.5, "No hours in this segment.", ha="center", va="center", transform=ax_temp.transAxes)

        ax_temp.set_ylabel("Temp (°F)", color=TEMP_COLOR)
        ax_humidity.set_ylabel("Humidity (%)", color=HUMIDITY_COLOR)
        ax_wind.set_ylabel("Wind speed", color=WIND_COLOR)
        ax_temp.grid(linestyle="--", alpha=0.3)
        if self.title:
            ax_temp.set_title(self.title)

        caption = " | ".join(part for part in (self.summary.describe(), " · ".join(self.summary.display_lines())) if part)
        if caption:
            fig.text(0.01, 0.02, caption, ha="left", va="bottom", fontsize=10)

        self.figure = fig
        logger.debug("Created chart", extra={"points": len(times)})

    def render_png(self, dpi: int = 100) -> bytes:
        if self.figure is None:
            raise RuntimeError("Chart has been destroyed")
        buf = io.BytesIO()
        self.figure.savefig(buf, format="png", dpi=dpi)
        return buf.getvalue()

    def destroy(self) -> None:
        if self.figure is not None:
            self.figure.clear()
            self.figure = None
            logger.debug("Destroyed chart")
