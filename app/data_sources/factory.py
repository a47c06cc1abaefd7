"""Factory helpers for choosing a forecast data source at startup."""

from __future__ import annotations

from app import config
from app.data_sources.base import CallableForecastDataSource, ForecastDataSource
from app.data_sources.visual_crossing_client import fetch_timeline
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "visual_crossing"


def build_data_source(settings: config.Settings | None = None) -> ForecastDataSource:
    """Instantiate the configured forecast data source."""
    settings = settings or config.settings
    source = (settings.forecast_source or DEFAULT_SOURCE_NAME).lower()

    if source == "visual_crossing":
        logger.info("Using Visual Crossing data source", extra={"base_url": mask_url(settings.provider_base_url)})
        return CallableForecastDataSource(timeline=fetch_timeline)

    raise ValueError(f"Unknown forecast source '{source}'")
