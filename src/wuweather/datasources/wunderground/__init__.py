"""Weather Underground data source.

Fetches the personal-weather-station XML document (conditions, forecast,
yesterday's summary and alerts) and classifies server-reported errors.

Public API:
  - station: fetch_station_document, parse_document, check_response
  - errors: WeatherDataInvalidError, ApiKeyInvalidError, StationIdInvalidError
  - client: API URL template, feature tags
"""

from wuweather.datasources.wunderground.client import API_URL_TEMPLATE, FEATURE_TAGS, station_url
from wuweather.datasources.wunderground.errors import (
    ApiKeyInvalidError,
    StationIdInvalidError,
    WeatherDataInvalidError,
)
from wuweather.datasources.wunderground.station import (
    check_response,
    fetch_station_document,
    parse_document,
)

__all__ = [
    "API_URL_TEMPLATE",
    "FEATURE_TAGS",
    "ApiKeyInvalidError",
    "StationIdInvalidError",
    "WeatherDataInvalidError",
    "check_response",
    "fetch_station_document",
    "parse_document",
    "station_url",
]
