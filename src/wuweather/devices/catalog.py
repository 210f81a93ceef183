"""The Weather Underground device tree.

Roots select a subtree of the ``<response>`` document; child paths are
relative to that subtree. Reference for the element names:
https://www.wunderground.com/weather/api/d/docs (conditions, forecast,
yesterday and alerts features).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wuweather.devices.definitions import (
    CompositeField,
    DefinitionTree,
    NumericField,
    ResourceDefinition,
    RootDefinition,
    TextField,
)
from wuweather.devices.extract import INVALID, Text
from wuweather.devices.paths import FieldPath

if TYPE_CHECKING:
    from collections.abc import Mapping

    from wuweather.devices.extract import ExtractedValue

same = FieldPath.same
units = FieldPath.units

DEGREES = units(" °F", " °C")
PERCENT = same(" %")


def _numeric(name: str, path: FieldPath, suffix: FieldPath | None = None) -> ResourceDefinition:
    return ResourceDefinition(name=name, field=NumericField(path, suffix))


def _text(name: str, path: str) -> ResourceDefinition:
    return ResourceDefinition(name=name, field=TextField(same(path)))


# =============================================================================
# Composite renderers
# =============================================================================


def render_conditions(parts: Mapping[str, str | None]) -> ExtractedValue:
    """``"Clear, 72.5 F (22.5 C)"`` from the weather and temperature strings."""
    pieces = [p for p in (parts.get("weather"), parts.get("temperature")) if p]
    return Text(", ".join(pieces)) if pieces else INVALID


def render_forecast(parts: Mapping[str, str | None]) -> ExtractedValue:
    """``"Partly Cloudy, High 80 Low 61"``."""
    conditions = parts.get("conditions")
    high, low = parts.get("high"), parts.get("low")
    pieces = [conditions] if conditions else []
    if high and low:
        pieces.append(f"High {high} Low {low}")
    return Text(", ".join(pieces)) if pieces else INVALID


def render_yesterday(parts: Mapping[str, str | None]) -> ExtractedValue:
    high, low = parts.get("high"), parts.get("low")
    if not (high and low):
        return INVALID
    return Text(f"High {high} Low {low}")


def render_alerts(parts: Mapping[str, str | None]) -> ExtractedValue:
    description = parts.get("description")
    return Text(description) if description else Text("No Alerts")


# =============================================================================
# Roots
# =============================================================================

CURRENT = RootDefinition(
    name="Current",
    field=CompositeField(
        same("current_observation"),
        parts={"weather": same("weather"), "temperature": same("temperature_string")},
        render=render_conditions,
    ),
    last_update=same("observation_epoch"),
    children=(
        _numeric("Temperature", units("temp_f", "temp_c"), DEGREES),
        _numeric("Feels Like", units("feelslike_f", "feelslike_c"), DEGREES),
        _numeric("Dew Point", units("dewpoint_f", "dewpoint_c"), DEGREES),
        _numeric("Heat Index", units("heat_index_f", "heat_index_c"), DEGREES),
        _numeric("Wind Chill", units("windchill_f", "windchill_c"), DEGREES),
        _numeric("Relative Humidity", same("relative_humidity"), PERCENT),
        _numeric("Pressure", units("pressure_in", "pressure_mb"), units(" inHg", " mb")),
        _text("Pressure Trend", "pressure_trend"),
        _numeric("Wind Speed", units("wind_mph", "wind_kph"), units(" mph", " km/h")),
        _numeric("Wind Gust", units("wind_gust_mph", "wind_gust_kph"), units(" mph", " km/h")),
        _numeric("Wind Direction", same("wind_degrees"), same("°")),
        _text("Wind", "wind_string"),
        _numeric("Visibility", units("visibility_mi", "visibility_km"), units(" mi", " km")),
        _numeric(
            "Precipitation Today",
            units("precip_today_in", "precip_today_metric"),
            units(" in", " mm"),
        ),
        _numeric(
            "Precipitation Last Hour",
            units("precip_1hr_in", "precip_1hr_metric"),
            units(" in", " mm"),
        ),
        _numeric("UV Index", same("UV")),
        _numeric("Solar Radiation", same("solarradiation"), same(" W/m²")),
        _text("Condition", "weather"),
        _text("Icon", "icon"),
    ),
)


def _forecast_day(name: str, position: int) -> RootDefinition:
    day = f"forecast/simpleforecast/forecastdays/forecastday[{position}]"
    return RootDefinition(
        name=name,
        field=CompositeField(
            same(day),
            parts={
                "conditions": same("conditions"),
                "high": units("high/fahrenheit", "high/celsius"),
                "low": units("low/fahrenheit", "low/celsius"),
            },
            render=render_forecast,
        ),
        last_update=same("date/epoch"),
        children=(
            _numeric("High", units("high/fahrenheit", "high/celsius"), DEGREES),
            _numeric("Low", units("low/fahrenheit", "low/celsius"), DEGREES),
            _text("Condition", "conditions"),
            _numeric("Chance Of Precipitation", same("pop"), PERCENT),
            _numeric("Precipitation", units("qpf_allday/in", "qpf_allday/mm"), units(" in", " mm")),
            _numeric("Snow", units("snow_allday/in", "snow_allday/cm"), units(" in", " cm")),
            _numeric("Max Wind", units("maxwind/mph", "maxwind/kph"), units(" mph", " km/h")),
            _numeric("Average Humidity", same("avehumidity"), PERCENT),
            _text("Icon", "icon"),
        ),
    )


TODAY = _forecast_day("Today", 1)
TOMORROW = _forecast_day("Tomorrow", 2)

YESTERDAY = RootDefinition(
    name="Yesterday",
    field=CompositeField(
        same("history/dailysummary/summary[1]"),
        parts={
            "high": units("maxtempi", "maxtempm"),
            "low": units("mintempi", "mintempm"),
        },
        render=render_yesterday,
    ),
    children=(
        _numeric("Max Temperature", units("maxtempi", "maxtempm"), DEGREES),
        _numeric("Min Temperature", units("mintempi", "mintempm"), DEGREES),
        _numeric("Mean Temperature", units("meantempi", "meantempm"), DEGREES),
        _numeric("Precipitation", units("precipi", "precipm"), units(" in", " mm")),
        _numeric("Max Humidity", same("maxhumidity"), PERCENT),
        _numeric("Min Humidity", same("minhumidity"), PERCENT),
        _numeric("Mean Wind Speed", units("meanwindspdi", "meanwindspdm"), units(" mph", " km/h")),
    ),
)

ALERTS = RootDefinition(
    name="Alerts",
    field=CompositeField(
        same("alerts"),
        parts={"description": same("alert[1]/description")},
        render=render_alerts,
    ),
    last_update=same("alert[1]/date_epoch"),
    children=(
        _text("Description", "alert[1]/description"),
        _text("Expires", "alert[1]/expires"),
        _text("Significance", "alert[1]/significance"),
        _text("Message", "alert[1]/message"),
    ),
)

DEVICE_DEFINITIONS = DefinitionTree(roots=(CURRENT, TODAY, TOMORROW, YESTERDAY, ALERTS))
