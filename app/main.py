"""FastAPI application setup for the segmented weather forecast."""

from fastapi import FastAPI

from .api import router as api_router
from .config import settings
from utils.logging_utils import setup_logging

setup_logging(level=settings.log_level, job_name="forecast_gateway")

app = FastAPI(title="Weekday Forecast")


@app.get("/health")
def health():
    """Liveness check."""
    return {"status": "ok"}


app.include_router(api_router, prefix="/api")
