"""Tests for the device definition tree and the shipped catalog."""

from __future__ import annotations

from xml.etree import ElementTree

import pytest

from wuweather.config import UnitSystem
from wuweather.devices.catalog import (
    ALERTS,
    CURRENT,
    DEVICE_DEFINITIONS,
    TOMORROW,
    render_alerts,
    render_forecast,
)
from wuweather.devices.definitions import (
    CompositeField,
    DefinitionTree,
    NumericField,
    ResourceDefinition,
    RootDefinition,
    TextField,
    display_suffix,
    extract_field,
)
from wuweather.devices.extract import INVALID, Numeric, Text, find_nodes
from wuweather.devices.paths import DefinitionError, FieldPath, resolve


def _root(name: str, *children: ResourceDefinition, **kwargs: object) -> RootDefinition:
    return RootDefinition(
        name=name,
        field=TextField(FieldPath.same("current_observation")),
        children=children,
        **kwargs,  # type: ignore[arg-type]
    )


def _child(name: str, path: str = "temp_f") -> ResourceDefinition:
    return ResourceDefinition(name=name, field=NumericField(FieldPath.same(path)))


class TestValidate:
    """Test boot-time validation of the tree."""

    def test_shipped_tree_is_valid(self) -> None:
        DEVICE_DEFINITIONS.validate()

    def test_duplicate_root_names(self) -> None:
        tree = DefinitionTree(roots=(_root("Current"), _root("Current")))
        with pytest.raises(DefinitionError, match="Duplicate"):
            tree.validate()

    def test_duplicate_child_names(self) -> None:
        tree = DefinitionTree(roots=(_root("Current", _child("Temp"), _child("Temp")),))
        with pytest.raises(DefinitionError, match="Duplicate"):
            tree.validate()

    def test_same_child_name_under_different_roots(self) -> None:
        tree = DefinitionTree(roots=(_root("A", _child("Icon")), _root("B", _child("Icon"))))
        tree.validate()

    @pytest.mark.parametrize("name", ["", "Wind.Speed"])
    def test_invalid_names(self, name: str) -> None:
        tree = DefinitionTree(roots=(_root("Current", _child(name)),))
        with pytest.raises(DefinitionError, match="Invalid"):
            tree.validate()

    def test_missing_unit_entry(self) -> None:
        partial = ResourceDefinition(
            name="Temp",
            field=NumericField(FieldPath({UnitSystem.IMPERIAL: "temp_f"})),
        )
        tree = DefinitionTree(roots=(_root("Current", partial),))
        with pytest.raises(DefinitionError, match="No path"):
            tree.validate()

    def test_missing_suffix_unit_entry(self) -> None:
        child = ResourceDefinition(
            name="Temp",
            field=NumericField(FieldPath.same("temp_f"), FieldPath({UnitSystem.IMPERIAL: " F"})),
        )
        with pytest.raises(DefinitionError):
            DefinitionTree(roots=(_root("Current", child),)).validate()

    def test_uncompilable_path(self) -> None:
        tree = DefinitionTree(roots=(_root("Current", _child("Temp", "/temp_f")),))
        with pytest.raises(DefinitionError, match="Invalid path"):
            tree.validate()

    def test_last_update_path_checked(self) -> None:
        root = _root("Current", last_update=FieldPath({UnitSystem.METRIC: "epoch"}))
        with pytest.raises(DefinitionError):
            DefinitionTree(roots=(root,)).validate()


class TestEnabledChildren:
    """Test the enable predicate filter."""

    def test_filters_and_keeps_order(self) -> None:
        root = _root("Current", _child("A"), _child("B"), _child("C"))
        tree = DefinitionTree(roots=(root,))
        enabled = tree.enabled_children(root, lambda r, c: c != "B")
        assert [c.name for c in enabled] == ["A", "C"]

    def test_predicate_receives_root_and_child(self) -> None:
        root = _root("Current", _child("A"))
        seen: list[tuple[str, str]] = []
        DefinitionTree(roots=(root,)).enabled_children(root, lambda r, c: seen.append((r, c)) or True)
        assert seen == [("Current", "A")]


class TestShippedCatalog:
    """Spot checks of the Weather Underground tree against a real document shape."""

    def test_root_order(self) -> None:
        assert [r.name for r in DEVICE_DEFINITIONS] == [
            "Current",
            "Today",
            "Tomorrow",
            "Yesterday",
            "Alerts",
        ]

    def test_addresses_unique(self) -> None:
        addresses = [
            f"{root.name}.{child.name}" for root in DEVICE_DEFINITIONS for child in root.children
        ]
        addresses += [root.name for root in DEVICE_DEFINITIONS]
        assert len(addresses) == len(set(addresses))

    def test_current_conditions_composite(self, station_document: ElementTree.Element) -> None:
        nodes = find_nodes(station_document, resolve(CURRENT.field.path, UnitSystem.IMPERIAL))
        value = extract_field(CURRENT.field, nodes, UnitSystem.IMPERIAL)
        assert value == Text("Clear, 72.5 F (22.5 C)")

    def test_tomorrow_reads_second_day(self, station_document: ElementTree.Element) -> None:
        subtree = find_nodes(station_document, resolve(TOMORROW.field.path, UnitSystem.METRIC))
        high = next(c for c in TOMORROW.children if c.name == "High")
        nodes = find_nodes(subtree[0], resolve(high.field.path, UnitSystem.METRIC))
        assert extract_field(high.field, nodes, UnitSystem.METRIC) == Numeric(24.0)
        assert display_suffix(high.field, UnitSystem.METRIC) == " °C"

    def test_empty_alerts_render_placeholder_text(
        self, station_document: ElementTree.Element
    ) -> None:
        nodes = find_nodes(station_document, resolve(ALERTS.field.path, UnitSystem.IMPERIAL))
        assert extract_field(ALERTS.field, nodes, UnitSystem.IMPERIAL) == Text("No Alerts")
        assert render_alerts({"description": "Heat Advisory"}) == Text("Heat Advisory")

    def test_forecast_render_needs_some_data(self) -> None:
        assert render_forecast({"conditions": None, "high": None, "low": None}) is INVALID
        assert render_forecast({"conditions": None, "high": "80", "low": "61"}) == Text(
            "High 80 Low 61"
        )


class TestCompositeField:
    """Test composite extraction."""

    def test_parts_relative_to_first_match(self, station_document: ElementTree.Element) -> None:
        fld = CompositeField(
            FieldPath.same("current_observation"),
            parts={"f": FieldPath.same("temp_f"), "c": FieldPath.same("temp_c")},
            render=lambda p: Text(f"{p['f']}/{p['c']}"),
        )
        nodes = find_nodes(station_document, "current_observation")
        assert extract_field(fld, nodes, UnitSystem.IMPERIAL) == Text("72.5/22.5")

    def test_no_match_passes_none(self) -> None:
        fld = CompositeField(
            FieldPath.same("missing"),
            parts={"x": FieldPath.same("x")},
            render=lambda p: INVALID if p["x"] is None else Text(p["x"]),
        )
        assert extract_field(fld, [], UnitSystem.IMPERIAL) is INVALID
