"""Static device definitions.

A ``DefinitionTree`` is an ordered forest of ``RootDefinition`` objects, each
with an ordered tuple of child ``ResourceDefinition`` objects (depth is
exactly two). Each definition carries a field variant describing how its value
is extracted from the fetched document:

    NumericField    first match parsed as a float
    TextField       first match's text
    CompositeField  a pure ``render`` over several named sub-paths

Definition order is iteration order. It fixes creation order on the host, so
the tree is immutable once built and validated.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING
from xml.etree import ElementTree

from wuweather.config import UnitSystem
from wuweather.devices.extract import (
    ExtractedValue,
    coerce_numeric,
    coerce_text,
    find_nodes,
    node_text,
)
from wuweather.devices.paths import DefinitionError, FieldPath, resolve

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from xml.etree.ElementTree import Element

#: Owning interface name stamped on every resource this process creates.
INTERFACE_NAME = "WU Weather"

#: Display string for a textual field with no data, and for new resources.
PLACEHOLDER = "--"

DEFAULT_TYPE_STRING = f"{INTERFACE_NAME} Information Device"
ROOT_TYPE_STRING = f"{INTERFACE_NAME} Root Device"

# =============================================================================
# Field variants
# =============================================================================


@dataclass(frozen=True)
class NumericField:
    path: FieldPath
    suffix: FieldPath | None = None


@dataclass(frozen=True)
class TextField:
    path: FieldPath


@dataclass(frozen=True, eq=False)
class CompositeField:
    """Combines several sub-paths of the matched node into one value.

    ``parts`` maps a name to a path relative to the node selected by
    ``path``; ``render`` receives the stripped text of each part (None when
    absent) and returns the extracted value.
    """

    path: FieldPath
    parts: Mapping[str, FieldPath]
    render: Callable[[Mapping[str, str | None]], ExtractedValue]

    def __post_init__(self) -> None:
        object.__setattr__(self, "parts", MappingProxyType(dict(self.parts)))


Field = NumericField | TextField | CompositeField


def extract_field(fld: Field, nodes: Sequence[Element], unit: UnitSystem) -> ExtractedValue:
    """Extract a typed value from the nodes matched by ``fld.path``."""
    match fld:
        case NumericField():
            return coerce_numeric(nodes)
        case TextField():
            return coerce_text(nodes)
        case CompositeField(parts=parts, render=render):
            texts: dict[str, str | None] = {}
            for name, part in parts.items():
                matched = find_nodes(nodes[0], resolve(part, unit)) if nodes else []
                texts[name] = node_text(matched)
            return render(texts)
    msg = f"Unknown field variant: {fld!r}"
    raise TypeError(msg)


def display_suffix(fld: Field, unit: UnitSystem) -> str:
    if isinstance(fld, NumericField) and fld.suffix is not None:
        return resolve(fld.suffix, unit)
    return ""


# =============================================================================
# Definitions
# =============================================================================


@dataclass(frozen=True)
class ResourceDefinition:
    """A device the plugin manages, and how to fill it from the document."""

    name: str
    field: Field
    type_string: str = DEFAULT_TYPE_STRING
    initial_value: float = 0.0
    initial_string: str = PLACEHOLDER


@dataclass(frozen=True)
class RootDefinition(ResourceDefinition):
    """A top-level device owning an ordered list of children.

    ``last_update`` is an optional epoch-seconds path, relative to the root's
    subtree, giving the time the source reported for this data.
    """

    children: tuple[ResourceDefinition, ...] = ()
    last_update: FieldPath | None = None
    type_string: str = ROOT_TYPE_STRING


@dataclass(frozen=True)
class DefinitionTree:
    roots: tuple[RootDefinition, ...] = ()

    def __iter__(self) -> Iterator[RootDefinition]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)

    def enabled_children(
        self,
        root: RootDefinition,
        is_enabled: Callable[[str, str], bool],
    ) -> list[ResourceDefinition]:
        """Children of ``root`` for which ``is_enabled(root, child)`` holds."""
        return [child for child in root.children if is_enabled(root.name, child.name)]

    def validate(self) -> None:
        """Check names and resolve every path under every unit system.

        Raises:
            DefinitionError: On duplicate or dotted names, a missing unit
                entry, or a path ElementTree cannot compile.
        """
        _check_names([root.name for root in self.roots], "root")
        for root in self.roots:
            _check_names([child.name for child in root.children], f"child of {root.name!r}")
            paths = _field_paths(root.field)
            if root.last_update is not None:
                paths.append(root.last_update)
            for child in root.children:
                paths.extend(_field_paths(child.field))
            for unit in UnitSystem:
                for path in paths:
                    _check_path(resolve(path, unit), root.name)
                for definition in (root, *root.children):
                    display_suffix(definition.field, unit)


def _field_paths(fld: Field) -> list[FieldPath]:
    paths = [fld.path]
    if isinstance(fld, CompositeField):
        paths.extend(fld.parts.values())
    return paths


def _check_names(names: list[str], level: str) -> None:
    seen: set[str] = set()
    for name in names:
        if not name or "." in name:
            msg = f"Invalid {level} name {name!r}: must be non-empty and contain no '.'"
            raise DefinitionError(msg)
        if name in seen:
            msg = f"Duplicate {level} name {name!r}"
            raise DefinitionError(msg)
        seen.add(name)


_EMPTY_NODE = ElementTree.Element("response")


def _check_path(path: str, root_name: str) -> None:
    try:
        find_nodes(_EMPTY_NODE, path)
    except (SyntaxError, KeyError, TypeError) as e:
        msg = f"Invalid path {path!r} under {root_name!r}: {e}"
        raise DefinitionError(msg) from e
