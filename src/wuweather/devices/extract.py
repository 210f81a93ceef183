"""Applying extraction paths to a fetched document and coercing the result.

Paths use the ElementTree path subset (``current_observation/temp_f``,
``forecastday[2]/high/celsius``). A path that matches nothing yields
``INVALID``; extraction never raises for missing data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Sequence
    from xml.etree.ElementTree import Element


@dataclass(frozen=True)
class Numeric:
    value: float


@dataclass(frozen=True)
class Text:
    value: str


class _Invalid(Enum):
    INVALID = "invalid"

    def __repr__(self) -> str:
        return "INVALID"


#: No matching data was present in this cycle.
INVALID: Final = _Invalid.INVALID

ExtractedValue = Numeric | Text | _Invalid


def find_nodes(node: Element, path: str) -> list[Element]:
    """Return every element under ``node`` matching ``path``.

    An empty path or ``"."`` selects ``node`` itself.
    """
    if path in ("", "."):
        return [node]
    return node.findall(path)


def node_text(nodes: Sequence[Element]) -> str | None:
    """Stripped text of the first node, or None when absent or empty."""
    if not nodes:
        return None
    text = nodes[0].text
    if text is None:
        return None
    text = text.strip()
    return text or None


def coerce_numeric(nodes: Sequence[Element]) -> Numeric | _Invalid:
    """Parse the first node's text as a float.

    A trailing ``%`` is accepted (``relative_humidity`` reports ``"45%"``).
    Placeholders such as ``NA`` or ``--`` and non-finite values are INVALID.
    """
    text = node_text(nodes)
    if text is None:
        return INVALID
    try:
        value = float(text.removesuffix("%"))
    except ValueError:
        return INVALID
    if not math.isfinite(value):
        return INVALID
    return Numeric(value)


def coerce_text(nodes: Sequence[Element]) -> Text | _Invalid:
    text = node_text(nodes)
    if text is None:
        return INVALID
    return Text(text)
