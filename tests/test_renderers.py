"""Tests for the device status renderers."""

from __future__ import annotations

from wuweather.devices.catalog import CURRENT
from wuweather.devices.definitions import INTERFACE_NAME
from wuweather.devices.host import InMemoryHost
from wuweather.devices.reconcile import create_resource
from wuweather.renderers.devices import build_device_table_html, build_status_page, device_rows


def _host() -> InMemoryHost:
    host = InMemoryHost()
    root = create_resource(host, CURRENT)
    temperature = create_resource(host, CURRENT.children[0], root)
    humidity = create_resource(host, CURRENT.children[5], root)
    host.set_string(temperature.ref, "72.5 °F")
    host.set_invalid(humidity.ref, True)

    other = host.create_resource("Lamp")
    host.set_metadata(
        other, address="Lamp", type_string="x", interface="Z-Wave", location="", group=""
    )
    return host


class TestDeviceRows:
    """Test grouping resources under their roots."""

    def test_children_grouped_under_root(self) -> None:
        rows = device_rows(_host().snapshot(), INTERFACE_NAME)
        assert [r.address for r in rows] == ["Current"]
        assert [c.address for c in rows[0].children] == [
            "Current.Temperature",
            "Current.Relative Humidity",
        ]

    def test_invalid_shown(self) -> None:
        humidity = device_rows(_host().snapshot(), INTERFACE_NAME)[0].children[1]
        assert humidity.invalid is True
        assert humidity.display == "-- (invalid)"
        assert humidity.last_change.endswith(" UTC")

    def test_never_changed_device(self) -> None:
        lamp = device_rows(_host().snapshot())[1]
        assert lamp.last_change == "never"

    def test_without_interface_filter(self) -> None:
        rows = device_rows(_host().snapshot())
        assert [r.address for r in rows] == ["Current", "Lamp"]


class TestHtml:
    """Test the rendered HTML."""

    def test_table_contains_values(self) -> None:
        html = build_device_table_html(_host().snapshot(), INTERFACE_NAME)
        assert "Current.Temperature" in html
        assert "72.5 °F" in html
        assert 'class="child invalid"' in html
        assert "Lamp" not in html

    def test_empty_table(self) -> None:
        html = build_device_table_html(InMemoryHost().snapshot())
        assert "No devices yet" in html

    def test_page_wraps_table(self) -> None:
        html = build_status_page(
            _host().snapshot(), title="Weather devices", station="KORPORTL1"
        )
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Weather devices</title>" in html
        assert "KORPORTL1" in html
        assert "<table" in html

    def test_values_escaped(self) -> None:
        host = InMemoryHost()
        root = create_resource(host, CURRENT)
        host.set_string(root.ref, "<script>")
        html = build_device_table_html(host.snapshot())
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
