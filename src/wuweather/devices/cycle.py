"""One reconcile -> fetch -> apply pass.

``apply_document`` routes a fetched document into the live devices:

1. Re-read the live devices (reconciliation may have just created some).
2. For each root with a live device, select its subtree. No match: skip
   the root and its children, leaving their values unchanged.
3. Apply the root's field to the root device, then each child's field,
   resolved relative to the first subtree node, to its child device.

Per-child failures are logged with the child's address and never stop the
siblings. The token is checked before every apply, so a cancelled cycle
writes nothing further.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from wuweather.datasources.wunderground import fetch_station_document
from wuweather.devices.definitions import (
    INTERFACE_NAME,
    PLACEHOLDER,
    NumericField,
    display_suffix,
    extract_field,
)
from wuweather.devices.extract import Numeric, Text, coerce_numeric, find_nodes
from wuweather.devices.paths import resolve
from wuweather.devices.reconcile import child_address, current_resources, reconcile
from wuweather.scheduler import CycleCancelled

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from xml.etree.ElementTree import Element

    from wuweather.config import ConfigSource, Settings, UnitSystem
    from wuweather.devices.definitions import DefinitionTree, ResourceDefinition, RootDefinition
    from wuweather.devices.extract import ExtractedValue
    from wuweather.devices.host import ResourceHost
    from wuweather.scheduler import CancellationToken
    from wuweather.schemas import LiveResource

logger = logging.getLogger(__name__)


def apply_value(
    host: ResourceHost,
    resource: LiveResource,
    definition: ResourceDefinition,
    value: ExtractedValue,
    unit: UnitSystem,
) -> None:
    """Write one extracted value to ``resource``.

    Numeric fields keep their previous value and string when INVALID and only
    raise the invalid flag. Textual fields always write, using the
    placeholder when INVALID. Every write stamps the last change with the
    current time.
    """
    ref = resource.ref
    match value:
        case Numeric(value=number):
            logger.debug("Updating %s [%s] to [%s]", definition.name, resource.address, number)
            host.set_invalid(ref, False)
            host.set_value(ref, number)
            host.set_string(ref, f"{number:g}{display_suffix(definition.field, unit)}")
            host.set_last_change(ref, datetime.now(UTC))
        case Text(value=text):
            logger.debug("Updating %s [%s] to [%s]", definition.name, resource.address, text)
            host.set_invalid(ref, False)
            host.set_string(ref, text)
            host.set_last_change(ref, datetime.now(UTC))
        case _ if isinstance(definition.field, NumericField):
            logger.debug("Updating %s [%s] to invalid value", definition.name, resource.address)
            host.set_invalid(ref, True)
        case _:
            logger.debug("Updating %s [%s] to [%s]", definition.name, resource.address, PLACEHOLDER)
            host.set_invalid(ref, False)
            host.set_string(ref, PLACEHOLDER)
            host.set_last_change(ref, datetime.now(UTC))


def last_update_time(
    root: RootDefinition, subtree: Sequence[Element], unit: UnitSystem
) -> datetime | None:
    """The source-reported update time of ``root``'s data, if present."""
    if root.last_update is None:
        return None
    epoch = coerce_numeric(find_nodes(subtree[0], resolve(root.last_update, unit)))
    if not isinstance(epoch, Numeric):
        return None
    try:
        return datetime.fromtimestamp(epoch.value, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def apply_document(
    host: ResourceHost,
    tree: DefinitionTree,
    document: Element,
    settings: Settings,
    token: CancellationToken | None = None,
    *,
    interface: str = INTERFACE_NAME,
) -> int:
    """Push values from ``document`` into the live devices.

    Returns:
        Number of devices updated.

    Raises:
        CycleCancelled: If ``token`` is cancelled; values already applied
            in this pass are kept.
    """
    unit = settings.unit
    existing = current_resources(host, interface, token)
    updated = 0

    for root in tree:
        _check(token)
        root_resource = existing.get(root.name)
        if root_resource is None:
            continue

        subtree = find_nodes(document, resolve(root.field.path, unit))
        if not subtree:
            logger.debug("No data for %s this cycle", root.name)
            continue

        when = None
        try:
            apply_value(host, root_resource, root, extract_field(root.field, subtree, unit), unit)
            when = last_update_time(root, subtree, unit)
            if when is not None:
                host.set_last_change(root_resource.ref, when)
            updated += 1
        except Exception as e:
            logger.error("Failed to update %s with %s", root.name, e)

        for child in root.children:
            address = child_address(root.name, child.name)
            child_resource = existing.get(address)
            if child_resource is None:
                continue

            _check(token)
            try:
                nodes = find_nodes(subtree[0], resolve(child.field.path, unit))
                value = extract_field(child.field, nodes, unit)
                apply_value(host, child_resource, child, value, unit)
                if when is not None:
                    host.set_last_change(child_resource.ref, when)
                updated += 1
            except CycleCancelled:
                raise
            except Exception as e:
                logger.error("Failed to update %s with %s", address, e)

    return updated


class FetchAndApplyCycle:
    """The body of the periodic loop.

    The fetch runs on a worker thread while the loop thread waits on the
    token, so cancellation abandons a slow request immediately instead of
    waiting for the socket timeout.
    """

    def __init__(
        self,
        host: ResourceHost,
        tree: DefinitionTree,
        config: ConfigSource,
        *,
        fetch: Callable[[str, str], Element] = fetch_station_document,
        interface: str = INTERFACE_NAME,
    ) -> None:
        self.host = host
        self.tree = tree
        self.config = config
        self.interface = interface
        self._fetch = fetch
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="wuweather-fetch")

    def run_once(self, token: CancellationToken) -> int:
        """Reconcile, fetch and apply once.

        Fetch failures (network errors, ``WeatherDataInvalidError`` and its
        classified subclasses) are logged and end the pass without touching
        any device.

        Returns:
            Number of devices updated (0 when the fetch was skipped or failed).

        Raises:
            CycleCancelled: If ``token`` is cancelled during the cycle.
        """
        settings = self.config.current

        try:
            reconcile(self.host, self.tree, settings, token, interface=self.interface)
        except CycleCancelled:
            raise
        except Exception as e:
            logger.error("Failed to create devices with %s", e)

        if not settings.has_credentials:
            logger.info("API key or station id not configured; skipping weather fetch")
            return 0

        future = self._executor.submit(self._fetch, settings.api_key, settings.station_id)
        try:
            document = token.wait_for(future)
        except CycleCancelled:
            raise
        except Exception as e:
            logger.warning("Failed to fetch data with %s", e)
            return 0

        updated = apply_document(
            self.host, self.tree, document, settings, token, interface=self.interface
        )
        logger.info("Updated %d devices from station %s", updated, settings.station_id)
        return updated

    def close(self) -> None:
        """Release the fetch worker; an abandoned request is not waited for."""
        self._executor.shutdown(wait=False, cancel_futures=True)


def _check(token: CancellationToken | None) -> None:
    if token is not None:
        token.raise_if_cancelled()
