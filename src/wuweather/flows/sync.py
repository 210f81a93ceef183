"""
Prefect flow for a one-shot device sync.

Runs the same reconcile -> fetch -> apply pass as the periodic loop, once,
against the host snapshot kept under the settings' ``data_dir``.

Run locally:
    python -m wuweather.flows.sync

Run with Prefect dashboard:
    prefect server start &
    python -m wuweather.flows.sync
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from prefect import flow, get_run_logger, task
from prefect.cache_policies import NONE

from wuweather.config import get_settings
from wuweather.datasources.wunderground import fetch_station_document
from wuweather.devices.catalog import DEVICE_DEFINITIONS
from wuweather.devices.cycle import apply_document
from wuweather.devices.reconcile import reconcile
from wuweather.plugin import load_host, save_host
from wuweather.store import DataStore

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from wuweather.config import Settings
    from wuweather.devices.host import InMemoryHost


@task(name="reconcile-devices", cache_policy=NONE)
def reconcile_devices(host: InMemoryHost, settings: Settings) -> int:
    """Create missing devices; returns the number of managed devices."""
    return len(reconcile(host, DEVICE_DEFINITIONS, settings))


@task(name="fetch-station", cache_policy=NONE)
def fetch_station(api_key: str, station_id: str) -> Element:
    """Fetch the station XML document from Weather Underground."""
    return fetch_station_document(api_key, station_id)


@task(name="apply-document", cache_policy=NONE)
def apply_station_document(host: InMemoryHost, document: Element, settings: Settings) -> int:
    """Push fetched values into the devices; returns the number updated."""
    return apply_document(host, DEVICE_DEFINITIONS, document, settings)


@task(name="save-devices", cache_policy=NONE)
def save_devices(store: DataStore, host: InMemoryHost, settings: Settings) -> None:
    """Persist the host snapshot."""
    save_host(store, host, settings)


@flow(name="sync-weather-devices", log_prints=True, validate_parameters=False)
def sync_devices(settings: Settings | None = None) -> dict[str, Any]:
    """
    Reconcile, fetch and apply once.

    Skips the fetch (but still creates devices) when the API key or station
    id is missing.
    """
    logger = get_run_logger()
    settings = settings or get_settings()
    DEVICE_DEFINITIONS.validate()

    store = DataStore(settings.data_dir)
    host = load_host(store)
    results: dict[str, Any] = {"station": settings.station_id, "updated": 0}

    results["devices"] = reconcile_devices(host, settings)

    if not settings.has_credentials:
        logger.info("API key or station id not configured; skipping weather fetch")
    else:
        print(f"Fetching weather for station {settings.station_id}...")
        document = fetch_station(settings.api_key, settings.station_id)
        results["updated"] = apply_station_document(host, document, settings)
        print(f"Updated {results['updated']} devices")

    save_devices(store, host, settings)
    return results


if __name__ == "__main__":
    result = sync_devices()
    print(f"Flow complete: {result}")
