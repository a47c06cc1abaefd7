"""Interfaces for forecast data sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from app.domain import ProviderTimeline


class ForecastDataSource(Protocol):
    """Anything that can return a validated provider timeline for a location."""

    def fetch_timeline(
        self,
        location: str,
        date: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
        base_url: str = ...,
        timeout: float = 10,
    ) -> ProviderTimeline:
        """Return days with hourly records for `location`."""
        ...


@dataclass
class CallableForecastDataSource(ForecastDataSource):
    """Wrap a timeline callable so stubs and alternate providers can be swapped in."""

    timeline: Callable[..., ProviderTimeline]

    def fetch_timeline(self, *args, **kwargs) -> ProviderTimeline:
        return self.timeline(*args, **kwargs)
