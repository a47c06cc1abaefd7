"""HTTP API for the segmented weather forecast."""

from typing import Optional

from fastapi import APIRouter, Query, Response
from fastapi.responses import JSONResponse

from .chart import ForecastChart
from .config import settings
from .data_sources import build_data_source
from .domain import ErrorPayload, ForecastResult
from .errors import ForecastError
from .forecast_service import get_forecast, resolve_timezone
from .summary import derive_summary
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

router = APIRouter()
DATA_SOURCE = build_data_source(settings)

_ERROR_RESPONSES = {
    400: {"model": ErrorPayload},
    500: {"model": ErrorPayload},
    502: {"model": ErrorPayload},
}


def _error_response(exc: Exception) -> JSONResponse:
    """Translate gateway exceptions into `{error: ...}` bodies."""
    if isinstance(exc, ForecastError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
    logger.exception("Unexpected error while building forecast")
    return JSONResponse({"error": str(exc)}, status_code=500)


def _load_forecast(location, date, segment, timezone) -> ForecastResult:
    return get_forecast(
        location=location,
        date=date,
        segment=segment,
        timezone=timezone,
        data_source=DATA_SOURCE,
    )


@router.get("/forecast", response_model=ForecastResult, responses=_ERROR_RESPONSES)
def forecast(
    location: Optional[str] = Query(default=None),
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD"),
    segment: Optional[str] = Query(default=None, description="morning, afternoon, evening or all"),
    timezone: Optional[str] = Query(default=None, description="IANA timezone for hour-of-day"),
):
    """Forecast for one day narrowed to a time-of-day segment."""
    try:
        return _load_forecast(location, date, segment, timezone)
    except Exception as exc:
        return _error_response(exc)


@router.get("/forecast/chart", responses={200: {"content": {"image/png": {}}}, **_ERROR_RESPONSES})
def forecast_chart(
    location: Optional[str] = Query(default=None),
    date: Optional[str] = Query(default=None),
    segment: Optional[str] = Query(default=None),
    timezone: Optional[str] = Query(default=None),
):
    """Server-rendered PNG of the same forecast with its summary labels."""
    try:
        result = _load_forecast(location, date, segment, timezone)
        tz = resolve_timezone(timezone or settings.display_timezone)
        chart = ForecastChart(
            result.hours,
            derive_summary(result.hours),
            title=f"{result.resolved_address} - {result.date} - {result.segment.value}",
            tz=tz,
        )
        try:
            png = chart.render_png()
        finally:
            chart.destroy()
    except Exception as exc:
        return _error_response(exc)
    return Response(content=png, media_type="image/png")
