"""Unit-aware extraction paths."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from wuweather.config import UnitSystem


class DefinitionError(Exception):
    """The static device definition tree is malformed."""


@dataclass(frozen=True)
class FieldPath:
    """Immutable mapping from unit system to an ElementTree path string."""

    paths: Mapping[UnitSystem, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "paths", MappingProxyType(dict(self.paths)))

    @classmethod
    def same(cls, path: str) -> FieldPath:
        """A path that does not vary by unit system."""
        return cls({unit: path for unit in UnitSystem})

    @classmethod
    def units(cls, imperial: str, metric: str) -> FieldPath:
        return cls({UnitSystem.IMPERIAL: imperial, UnitSystem.METRIC: metric})

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.paths.items())))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldPath):
            return NotImplemented
        return dict(self.paths) == dict(other.paths)


def resolve(field_path: FieldPath, unit: UnitSystem) -> str:
    """Return the concrete path for ``unit``.

    Raises:
        DefinitionError: If the path has no entry for ``unit``.
    """
    try:
        return field_path.paths[unit]
    except KeyError:
        msg = f"No path for unit system {unit!s} in {dict(field_path.paths)}"
        raise DefinitionError(msg) from None
