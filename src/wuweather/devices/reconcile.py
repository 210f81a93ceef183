"""Reconciling the static definition tree against the host's live devices.

Missing roots and enabled children are created; nothing is ever deleted.
Running ``reconcile`` again with no external deletions creates nothing, so an
interrupted pass is completed by the next one.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from wuweather.devices.definitions import INTERFACE_NAME
from wuweather.devices.host import HostError

if TYPE_CHECKING:
    from wuweather.config import Settings
    from wuweather.devices.definitions import DefinitionTree, ResourceDefinition
    from wuweather.devices.host import ResourceHost
    from wuweather.scheduler import CancellationToken
    from wuweather.schemas import LiveResource

logger = logging.getLogger(__name__)


def child_address(root_name: str, child_name: str) -> str:
    return f"{root_name}.{child_name}"


def current_resources(
    host: ResourceHost,
    interface: str = INTERFACE_NAME,
    token: CancellationToken | None = None,
) -> dict[str, LiveResource]:
    """Map address -> resource for everything owned by ``interface``."""
    current: dict[str, LiveResource] = {}
    for resource in host.resources(interface):
        _check(token)
        if resource.address in current:
            logger.warning("Duplicate device address %r (ref %d)", resource.address, resource.ref)
            continue
        current[resource.address] = resource
    return current


def create_resource(
    host: ResourceHost,
    definition: ResourceDefinition,
    parent: LiveResource | None = None,
    *,
    root_name: str | None = None,
    interface: str = INTERFACE_NAME,
) -> LiveResource:
    """Create one device on the host with its initial state.

    A child is created when ``parent`` is given; ``root_name`` is then the
    name used to build its address.

    Raises:
        HostError: If the host refuses to create the device.
    """
    if parent is not None:
        root_name = root_name or parent.name
        address = child_address(root_name, definition.name)
        logger.debug("Creating %s under %s", definition.name, root_name)
    else:
        address = definition.name
        logger.debug("Creating root %s", definition.name)

    ref = host.create_resource(definition.name)
    if ref <= 0:
        msg = f"Host failed to create device {address!r}"
        raise HostError(msg)

    host.set_metadata(
        ref,
        address=address,
        type_string=definition.type_string,
        interface=interface,
        location=interface,
        group=root_name if parent is not None else definition.name,
    )
    if parent is not None:
        host.associate(parent.ref, ref)
    host.set_value(ref, definition.initial_value)
    host.set_string(ref, definition.initial_string)
    host.set_last_change(ref, datetime.now(UTC))

    created = host.get(ref)
    logger.info("Created device %r (ref %d)", address, ref)
    return created


def reconcile(
    host: ResourceHost,
    tree: DefinitionTree,
    settings: Settings,
    token: CancellationToken | None = None,
    *,
    interface: str = INTERFACE_NAME,
) -> dict[str, LiveResource]:
    """Create every missing root and enabled child, in definition order.

    Returns:
        The address -> resource mapping after creation.

    Raises:
        CycleCancelled: If ``token`` is cancelled between definitions.
            Devices created so far are kept.
        HostError: If the host refuses to create a device.
    """
    current = current_resources(host, interface, token)

    for root in tree:
        _check(token)
        root_resource = current.get(root.name)
        if root_resource is None:
            root_resource = create_resource(host, root, interface=interface)
            current[root.name] = root_resource

        for child in tree.enabled_children(root, settings.is_enabled):
            _check(token)
            address = child_address(root.name, child.name)
            if address not in current:
                current[address] = create_resource(
                    host, child, root_resource, root_name=root.name, interface=interface
                )

    return current


def _check(token: CancellationToken | None) -> None:
    if token is not None:
        token.raise_if_cancelled()
