"""
Plugin wiring: host, definition tree, configuration, cycle and scheduler.

``WeatherPlugin`` is the long-running service. It validates the definition
tree at construction (a malformed tree aborts start-up), starts the periodic
loop, and restarts it whenever the configuration changes. When a store is
attached the host's devices are written back after every cycle.

Example::

    plugin = WeatherPlugin(ConfigSource(get_settings()), store=DataStore(Path("data")))
    plugin.start()
    ...
    plugin.config.update(refresh_interval_minutes=5)  # restarts the loop
    ...
    plugin.shutdown()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from wuweather.config import configure_logging
from wuweather.devices.catalog import DEVICE_DEFINITIONS
from wuweather.devices.cycle import FetchAndApplyCycle
from wuweather.devices.definitions import INTERFACE_NAME
from wuweather.devices.host import InMemoryHost
from wuweather.scheduler import PeriodicScheduler
from wuweather.store import HOST_SNAPSHOT_PATH

if TYPE_CHECKING:
    from collections.abc import Callable
    from xml.etree.ElementTree import Element

    from wuweather.config import ConfigSource, Settings
    from wuweather.devices.definitions import DefinitionTree
    from wuweather.scheduler import CancellationToken
    from wuweather.store import DataStore

logger = logging.getLogger(__name__)


def load_host(store: DataStore) -> InMemoryHost:
    """Restore the host from the store, or start empty."""
    data = store.read(HOST_SNAPSHOT_PATH)
    if data is None:
        return InMemoryHost()
    return InMemoryHost.from_snapshot(data)


def save_host(store: DataStore, host: InMemoryHost, settings: Settings) -> None:
    store.write(
        HOST_SNAPSHOT_PATH,
        host.snapshot().model_dump(mode="json"),
        source="wunderground.com",
        station=settings.station_id,
        unit=str(settings.unit),
    )


class WeatherPlugin:
    def __init__(
        self,
        config: ConfigSource,
        *,
        host: InMemoryHost | None = None,
        tree: DefinitionTree = DEVICE_DEFINITIONS,
        store: DataStore | None = None,
        fetch: Callable[[str, str], Element] | None = None,
    ) -> None:
        tree.validate()

        self.config = config
        self.store = store
        if host is None:
            host = load_host(store) if store is not None else InMemoryHost()
        self.host = host
        self.tree = tree

        kwargs = {"fetch": fetch} if fetch is not None else {}
        self.cycle = FetchAndApplyCycle(host, tree, config, interface=INTERFACE_NAME, **kwargs)
        self.scheduler = PeriodicScheduler(self._run_cycle)
        self._subscribed = False

    def start(self) -> None:
        settings = self.config.current
        configure_logging(settings.debug)
        logger.info("Starting plugin")
        logger.debug(
            "Station:%s Refresh Interval:%d Minutes",
            settings.station_id,
            settings.refresh_interval_minutes,
        )
        if not self._subscribed:
            self.config.subscribe(self._config_changed)
            self._subscribed = True
        self.scheduler.start(self.config.refresh_interval)

    def shutdown(self) -> None:
        """Stop the loop, release the fetch worker, stop listening for changes."""
        if self._subscribed:
            self.config.unsubscribe(self._config_changed)
            self._subscribed = False
        self.scheduler.stop()
        self.cycle.close()
        logger.info("Plugin stopped")

    def _config_changed(self, settings: Settings) -> None:
        configure_logging(settings.debug)
        self.scheduler.start(self.config.refresh_interval)

    def _run_cycle(self, token: CancellationToken) -> int:
        try:
            return self.cycle.run_once(token)
        finally:
            if self.store is not None:
                save_host(self.store, self.host, self.config.current)
