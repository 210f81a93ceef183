"""Device status table: host snapshot -> HTML."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from wuweather.renderers import render_template

if TYPE_CHECKING:
    from datetime import datetime

    from wuweather.schemas import HostSnapshot, LiveResource


@dataclass
class DeviceRow:
    address: str
    name: str
    display: str
    invalid: bool
    last_change: str
    children: list[DeviceRow] = field(default_factory=list)


def _format_time(when: datetime | None) -> str:
    return when.strftime("%Y-%m-%d %H:%M UTC") if when else "never"


def _row(resource: LiveResource) -> DeviceRow:
    return DeviceRow(
        address=resource.address,
        name=resource.name,
        display=resource.display,
        invalid=resource.invalid,
        last_change=_format_time(resource.last_change),
    )


def device_rows(snapshot: HostSnapshot, interface: str | None = None) -> list[DeviceRow]:
    """Group resources into root rows with their children, in ref order.

    Children whose parent is not in the snapshot are listed as roots.
    """
    resources = sorted(snapshot.resources, key=lambda r: r.ref)
    if interface is not None:
        resources = [r for r in resources if r.interface == interface]
    by_ref = {r.ref: r for r in resources}

    child_refs = {
        child
        for parent, kids in snapshot.children.items()
        if parent in by_ref
        for child in kids
    }
    rows: list[DeviceRow] = []
    for resource in resources:
        if resource.ref in child_refs:
            continue
        row = _row(resource)
        for child_ref in snapshot.children.get(resource.ref, []):
            if child_ref in by_ref:
                row.children.append(_row(by_ref[child_ref]))
        rows.append(row)
    return rows


def build_device_table_html(snapshot: HostSnapshot, interface: str | None = None) -> str:
    """Build the device table HTML fragment."""
    rows = device_rows(snapshot, interface)
    return render_template("devices.html.j2", rows=rows)


def build_status_page(
    snapshot: HostSnapshot,
    *,
    title: str,
    station: str,
    interface: str | None = None,
) -> str:
    """Full status page wrapping the device table."""
    return render_template(
        "base.html.j2",
        title=title,
        station=station,
        devices=build_device_table_html(snapshot, interface),
    )
