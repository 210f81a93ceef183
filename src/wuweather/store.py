"""On-disk JSON store for the device snapshot.

Files are enveloped with provenance metadata::

    {"meta": {"source": "wunderground.com", "fetched_at": "...", "station": "..."},
     "data": {...}}

The plugin and the sync flow keep the in-process host's devices at
``devices/host.json`` so refs, parent links and last values survive restarts.
Writes go to a sibling ``.tmp`` file first and are renamed into place; a
crash mid-write leaves the previous snapshot intact.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

#: Relative path of the persisted host snapshot.
HOST_SNAPSHOT_PATH = Path("devices/host.json")


class DataStore:
    """Enveloped JSON files under one base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir

    def read(self, path: Path) -> Any | None:
        """The ``data`` payload, or None when the file does not exist."""
        envelope = self._load(path)
        return None if envelope is None else envelope.get("data")

    def read_meta(self, path: Path) -> dict[str, Any]:
        """The ``meta`` block, or an empty dict when the file does not exist."""
        envelope = self._load(path)
        return {} if envelope is None else envelope.get("meta", {})

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Atomically replace ``path`` with ``data`` and its metadata.

        Args:
            path: Relative path under the base directory.
            data: Payload; values JSON cannot encode are stored as ``str``.
            source: Where the data came from (e.g. ``"wunderground.com"``).
            valid_until: Optional expiry recorded in the metadata.
            **params: Extra metadata (station id, unit system, ...).

        Returns:
            Path of the written file.
        """
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)

        meta: dict[str, Any] = {"source": source, "fetched_at": datetime.now(UTC).isoformat()}
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        meta.update(params)

        staging = target.with_name(target.name + ".tmp")
        staging.write_text(json.dumps({"meta": meta, "data": data}, indent=2, default=str))
        staging.replace(target)
        return target

    def _load(self, path: Path) -> dict[str, Any] | None:
        target = self._resolve(path)
        if not target.exists():
            return None
        envelope: dict[str, Any] = json.loads(target.read_text())
        return envelope

    def _resolve(self, path: Path) -> Path:
        target = path if path.is_absolute() else self.base / path
        if not target.resolve().is_relative_to(self.base.resolve()):
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg)
        return target
