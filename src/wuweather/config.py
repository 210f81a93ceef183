"""
Application settings and configuration-change notification.

Settings are read from the environment (prefix ``WUWEATHER_``) and an
optional ``.env`` file. A ``Settings`` instance is frozen: every cycle works
on one snapshot, and changes go through ``ConfigSource.update`` which builds a
new snapshot and notifies subscribers.

Example::

    source = ConfigSource(get_settings())
    source.subscribe(lambda settings: print(settings.refresh_interval))
    source.update(refresh_interval_minutes=5)
"""

from __future__ import annotations

import logging
import threading
from datetime import timedelta
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class UnitSystem(StrEnum):
    """Measurement convention selecting which extraction path to use."""

    IMPERIAL = "imperial"
    METRIC = "metric"


class Settings(BaseSettings):
    """Runtime configuration for the weather device sync."""

    model_config = SettingsConfigDict(
        env_prefix="WUWEATHER_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    app_name: str = "wuweather-sync"
    app_env: str = "development"
    debug: bool = False

    api_key: str = Field(default="", description="Weather Underground API key")
    station_id: str = Field(default="", description="Personal weather station id")
    refresh_interval_minutes: int = Field(default=15, ge=1)
    unit: UnitSystem = UnitSystem.IMPERIAL
    enabled_devices: dict[str, bool] = Field(
        default_factory=dict,
        description="Per-device switches keyed by 'root.child'; absent means enabled",
    )

    data_dir: Path = Path("data")
    api_port: int = 8000

    @property
    def refresh_interval(self) -> timedelta:
        return timedelta(minutes=self.refresh_interval_minutes)

    @property
    def has_credentials(self) -> bool:
        """True when both the API key and the station id are set."""
        return bool(self.api_key.strip()) and bool(self.station_id.strip())

    def is_enabled(self, root_name: str, child_name: str) -> bool:
        return self.enabled_devices.get(f"{root_name}.{child_name}", True)


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()


def configure_logging(debug: bool = False) -> None:
    """Configure root logging; DEBUG when ``debug`` is set, INFO otherwise."""
    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    root.setLevel(level)


class ConfigSource:
    """Holds the current settings snapshot and notifies on change.

    Subscribers are called synchronously, in registration order, on the
    thread that called ``update``. They receive the new snapshot.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._lock = threading.Lock()
        self._subscribers: list[Callable[[Settings], None]] = []

    @property
    def current(self) -> Settings:
        with self._lock:
            return self._settings

    def refresh_interval(self) -> timedelta:
        """Interval provider for the scheduler; re-read on every wait."""
        return self.current.refresh_interval

    def subscribe(self, callback: Callable[[Settings], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[Settings], None]) -> None:
        self._subscribers.remove(callback)

    def update(self, **changes: Any) -> Settings:
        """Validate ``changes`` into a new snapshot and notify subscribers.

        Raises:
            pydantic.ValidationError: If a changed value is invalid. The
                current snapshot is left untouched.
        """
        with self._lock:
            merged = self._settings.model_dump() | changes
            new = Settings.model_validate(merged)
            self._settings = new

        logger.debug("Configuration changed: %s", sorted(changes))
        for callback in list(self._subscribers):
            callback(new)
        return new
