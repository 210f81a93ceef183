"""
Domain models for the weather device sync.

Pydantic models for records that cross the host boundary or are persisted.
Static device definitions are plain dataclasses (see ``devices/definitions.py``).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from wuweather.devices.definitions import PLACEHOLDER


class LiveResource(BaseModel):
    """A device as stored by the host, addressed by ``root`` or ``root.child``."""

    ref: int = Field(..., gt=0, description="Host-assigned handle")
    name: str
    address: str = ""
    type_string: str = ""
    interface: str = Field(default="", description="Owning interface marker")
    location: str = ""
    group: str = ""
    value: float = 0.0
    string: str = PLACEHOLDER
    invalid: bool = False
    last_change: datetime | None = None

    @property
    def display(self) -> str:
        """Display text as the host would show it."""
        if self.invalid:
            return f"{self.string} (invalid)"
        return self.string


class HostSnapshot(BaseModel):
    """Serializable state of an in-process host."""

    next_ref: int = 1
    resources: list[LiveResource] = Field(default_factory=list)
    children: dict[int, list[int]] = Field(default_factory=dict)
