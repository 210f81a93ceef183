"""Weather Underground error taxonomy."""

from __future__ import annotations


class WeatherDataInvalidError(Exception):
    """The service did not return usable weather data."""

    def __init__(self, message: str, description: str | None = None) -> None:
        super().__init__(message)
        self.description = description


class ApiKeyInvalidError(WeatherDataInvalidError):
    def __init__(self) -> None:
        super().__init__("Invalid API Key", "KEYNOTFOUND")


class StationIdInvalidError(WeatherDataInvalidError):
    def __init__(self) -> None:
        super().__init__("Invalid Station Id", "STATION:OFFLINE")
