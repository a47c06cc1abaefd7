"""Application configuration pulled from environment variables via pydantic."""
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")

VISUAL_CROSSING_TIMELINE_URL = (
    "https://weather.visualcrossing.com/VisualCrossingWebServices/rest/services/timeline"
)


class Settings(BaseSettings):
    """Environment-driven configuration for the forecast gateway and view."""
    model_config = SettingsConfigDict(env_prefix="FORECAST_", extra="ignore", populate_by_name=True)

    weather_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("WEATHER_API_KEY", "FORECAST_WEATHER_API_KEY"),
    )
    forecast_source: str = "visual_crossing"
    provider_base_url: str = VISUAL_CROSSING_TIMELINE_URL
    default_location: str = "New York,NY"
    default_segment: str = "all"
    request_timeout_seconds: float = 10.0
    display_timezone: str | None = None  # IANA name; None means server local time
    gateway_url: str = "http://localhost:8000"
    log_level: str = "INFO"

    @field_validator("provider_base_url", "gateway_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")


def warn_if_unconfigured(cfg: Settings) -> bool:
    """Log a warning when the provider credential is missing. Returns True if it is set."""
    if cfg.weather_api_key:
        return True
    logger.warning("WEATHER_API_KEY is not set in environment; provider calls will be rejected upstream")
    return False


settings = Settings()
warn_if_unconfigured(settings)


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'weather_api_key'})}")
