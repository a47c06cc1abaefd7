"""Exceptions raised by the forecast gateway and translated at the HTTP boundary."""


class ForecastError(Exception):
    """Base class for gateway errors that map onto an HTTP status."""
    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class UpstreamError(ForecastError):
    """Provider answered with a non-success status; its body is passed through verbatim."""

    def __init__(self, status_code: int, body: str):
        super().__init__(body, status_code=status_code)
        self.body = body


class NoDayDataError(ForecastError):
    """Provider response contained no days."""
    status_code = 502

    def __init__(self, message: str = "No day data returned from provider"):
        super().__init__(message)


class InvalidTimezoneError(ForecastError):
    status_code = 400

    def __init__(self, tz_name: str):
        super().__init__(f"Invalid timezone: {tz_name}")
        self.tz_name = tz_name
