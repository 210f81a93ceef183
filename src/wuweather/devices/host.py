"""Host device-management API.

``ResourceHost`` is the surface the reconciler and the update cycle need from
a home-automation host. ``InMemoryHost`` implements it in-process: resources
are keyed by a numeric ref, and parent/child association is kept in two maps
(parent -> children, child -> parent) rather than object back-references.

All calls are synchronous and immediately visible to the next enumeration.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Protocol

from wuweather.schemas import HostSnapshot, LiveResource

if TYPE_CHECKING:
    from datetime import datetime

logger = logging.getLogger(__name__)


class HostError(Exception):
    """The host rejected an operation."""


class ResourceHost(Protocol):
    def resources(self, interface: str) -> list[LiveResource]:
        """Snapshot of every resource owned by ``interface``."""
        ...

    def get(self, ref: int) -> LiveResource: ...

    def create_resource(self, name: str) -> int:
        """Create a bare resource; returns its ref, or <= 0 on failure."""
        ...

    def set_metadata(
        self,
        ref: int,
        *,
        address: str,
        type_string: str,
        interface: str,
        location: str,
        group: str,
    ) -> None: ...

    def associate(self, parent_ref: int, child_ref: int) -> None: ...

    def set_value(self, ref: int, value: float) -> None: ...

    def set_invalid(self, ref: int, invalid: bool) -> None: ...

    def set_string(self, ref: int, text: str) -> None: ...

    def set_last_change(self, ref: int, when: datetime) -> None: ...


class InMemoryHost:
    """Thread-safe in-process ``ResourceHost``."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._resources: dict[int, LiveResource] = {}
        self._children: dict[int, list[int]] = {}
        self._parent: dict[int, int] = {}
        self._next_ref = 1

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def resources(self, interface: str) -> list[LiveResource]:
        with self._lock:
            return [
                r.model_copy()
                for r in self._resources.values()
                if r.interface.strip() == interface
            ]

    def all_resources(self) -> list[LiveResource]:
        with self._lock:
            return [r.model_copy() for r in self._resources.values()]

    def get(self, ref: int) -> LiveResource:
        with self._lock:
            return self._resource(ref).model_copy()

    def parent_of(self, ref: int) -> int | None:
        with self._lock:
            return self._parent.get(ref)

    def children_of(self, ref: int) -> list[int]:
        with self._lock:
            return list(self._children.get(ref, []))

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def create_resource(self, name: str) -> int:
        with self._lock:
            ref = self._next_ref
            self._next_ref += 1
            self._resources[ref] = LiveResource(ref=ref, name=name)
            return ref

    def set_metadata(
        self,
        ref: int,
        *,
        address: str,
        type_string: str,
        interface: str,
        location: str,
        group: str,
    ) -> None:
        self._update(
            ref,
            address=address,
            type_string=type_string,
            interface=interface,
            location=location,
            group=group,
        )

    def associate(self, parent_ref: int, child_ref: int) -> None:
        with self._lock:
            self._resource(parent_ref)
            self._resource(child_ref)
            current = self._parent.get(child_ref)
            if current is not None and current != parent_ref:
                msg = f"Resource {child_ref} already has parent {current}"
                raise HostError(msg)
            siblings = self._children.setdefault(parent_ref, [])
            if child_ref not in siblings:
                siblings.append(child_ref)
            self._parent[child_ref] = parent_ref

    def set_value(self, ref: int, value: float) -> None:
        self._update(ref, value=value)

    def set_invalid(self, ref: int, invalid: bool) -> None:
        self._update(ref, invalid=invalid)

    def set_string(self, ref: int, text: str) -> None:
        self._update(ref, string=text)

    def set_last_change(self, ref: int, when: datetime) -> None:
        self._update(ref, last_change=when)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def snapshot(self) -> HostSnapshot:
        with self._lock:
            return HostSnapshot(
                next_ref=self._next_ref,
                resources=[r.model_copy() for r in self._resources.values()],
                children={ref: list(kids) for ref, kids in self._children.items()},
            )

    @classmethod
    def from_snapshot(cls, snapshot: HostSnapshot | dict[str, Any]) -> InMemoryHost:
        if isinstance(snapshot, dict):
            snapshot = HostSnapshot.model_validate(snapshot)
        host = cls()
        for resource in snapshot.resources:
            host._resources[resource.ref] = resource.model_copy()
        for parent_ref, kids in snapshot.children.items():
            for child_ref in kids:
                host.associate(parent_ref, child_ref)
        known = max(host._resources, default=0)
        host._next_ref = max(snapshot.next_ref, known + 1)
        logger.debug("Restored host with %d resources", len(host._resources))
        return host

    def _resource(self, ref: int) -> LiveResource:
        try:
            return self._resources[ref]
        except KeyError:
            msg = f"No resource with ref {ref}"
            raise HostError(msg) from None

    def _update(self, ref: int, **changes: Any) -> None:
        with self._lock:
            current = self._resource(ref)
            self._resources[ref] = current.model_copy(update=changes)
