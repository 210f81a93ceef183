"""Shared fixtures: a station document and settings factories."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any
from xml.etree import ElementTree

import pytest

from wuweather.config import Settings

STATION_XML = """<?xml version="1.0" encoding="UTF-8"?>
<response>
  <version>0.1</version>
  <current_observation>
    <weather>Clear</weather>
    <temperature_string>72.5 F (22.5 C)</temperature_string>
    <temp_f>72.5</temp_f>
    <temp_c>22.5</temp_c>
    <relative_humidity>45%</relative_humidity>
    <pressure_in>30.01</pressure_in>
    <pressure_mb>1016</pressure_mb>
    <pressure_trend>+</pressure_trend>
    <heat_index_f>NA</heat_index_f>
    <heat_index_c>NA</heat_index_c>
    <wind_string>From the NW at 5.0 MPH</wind_string>
    <wind_mph>5.0</wind_mph>
    <wind_kph>8.0</wind_kph>
    <observation_epoch>1700000000</observation_epoch>
    <icon>clear</icon>
  </current_observation>
  <forecast>
    <simpleforecast>
      <forecastdays>
        <forecastday>
          <date><epoch>1700010000</epoch></date>
          <high><fahrenheit>80</fahrenheit><celsius>27</celsius></high>
          <low><fahrenheit>61</fahrenheit><celsius>16</celsius></low>
          <conditions>Partly Cloudy</conditions>
          <pop>20</pop>
        </forecastday>
        <forecastday>
          <date><epoch>1700096400</epoch></date>
          <high><fahrenheit>75</fahrenheit><celsius>24</celsius></high>
          <low><fahrenheit>58</fahrenheit><celsius>14</celsius></low>
          <conditions>Rain</conditions>
          <pop>70</pop>
        </forecastday>
      </forecastdays>
    </simpleforecast>
  </forecast>
  <alerts></alerts>
</response>
"""


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop WUWEATHER_* variables so settings only see what a test sets."""
    for name in list(os.environ):
        if name.startswith("WUWEATHER_"):
            monkeypatch.delenv(name)


def _settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"api_key": "key", "station_id": "KORPORTL1"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Factory for settings isolated from the environment and any .env file."""
    return _settings


@pytest.fixture
def station_document() -> ElementTree.Element:
    return ElementTree.fromstring(STATION_XML)


@pytest.fixture
def settings() -> Settings:
    return _settings()
