"""Fetching and validating the station XML document."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from xml.etree import ElementTree

from wuweather.datasources.wunderground.client import (
    ERROR_TYPE_PATH,
    FEATURE_TAGS,
    KEY_NOT_FOUND,
    STATION_OFFLINE,
    station_url,
)
from wuweather.datasources.wunderground.errors import (
    ApiKeyInvalidError,
    StationIdInvalidError,
    WeatherDataInvalidError,
)
from wuweather.services.http import session

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

logger = logging.getLogger(__name__)


def fetch_station_document(api_key: str, station: str) -> Element:
    """
    Fetch yesterday/forecast/conditions/alerts for a personal weather station.

    Args:
        api_key: Weather Underground API key.
        station: PWS id (without the ``pws:`` prefix).

    Returns:
        The parsed ``<response>`` element.

    Raises:
        ApiKeyInvalidError: The service does not know the key.
        StationIdInvalidError: The station is offline or unknown.
        WeatherDataInvalidError: Non-success status, malformed XML, or any
            other server-reported error.
        requests.RequestException: Network failure after retries.
    """
    url = station_url(api_key, station)
    logger.debug("Making call to get XML data for station %s", station)
    resp = session.get(url)
    if not resp.ok:
        msg = f"Couldn't retrieve data: status {resp.status_code}"
        raise WeatherDataInvalidError(msg)

    document = parse_document(resp.content)
    check_response(document)
    logger.debug("Got valid XML data for station %s", station)
    return document


def parse_document(content: bytes | str) -> Element:
    try:
        return ElementTree.fromstring(content)
    except ElementTree.ParseError as e:
        msg = f"Malformed XML in response: {e}"
        raise WeatherDataInvalidError(msg) from e


def check_response(document: Element) -> None:
    """Raise a classified error unless the document carries weather data."""
    if document.tag == "response" and any(
        document.find(tag) is not None for tag in FEATURE_TAGS
    ):
        return

    error_node = document.find(ERROR_TYPE_PATH) if document.tag == "response" else None
    description = "Unknown"
    if error_node is not None and error_node.text is not None:
        description = error_node.text.strip()

    error_type = description.upper()
    if error_type == KEY_NOT_FOUND:
        raise ApiKeyInvalidError
    if error_type == STATION_OFFLINE:
        raise StationIdInvalidError
    raise WeatherDataInvalidError(f"Server Returned:{description}", description)
