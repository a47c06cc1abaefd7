"""Data sources for plugging different forecast backends."""

from .base import CallableForecastDataSource, ForecastDataSource
from .factory import build_data_source
from .visual_crossing_client import build_timeline_url, fetch_timeline

__all__ = [
    "build_data_source",
    "build_timeline_url",
    "fetch_timeline",
    "ForecastDataSource",
    "CallableForecastDataSource",
]
