"""Weather Underground API client constants.

One request per cycle fetches every feature the device tree reads:
``yesterday``, ``forecast``, ``conditions`` and ``alerts`` for a personal
weather station, as XML.
"""

API_URL_TEMPLATE = (
    "http://api.wunderground.com/api/{api_key}"
    "/yesterday/forecast/conditions/alerts/q/pws:{station}.xml"
)

# Top-level <response> children; a valid document has at least one
FEATURE_TAGS = ("current_observation", "forecast", "history", "alerts")

ERROR_TYPE_PATH = "error/type"

KEY_NOT_FOUND = "KEYNOTFOUND"
STATION_OFFLINE = "STATION:OFFLINE"


def station_url(api_key: str, station: str) -> str:
    return API_URL_TEMPLATE.format(api_key=api_key, station=station)
