"""wuweather-sync - Weather Underground data as home-automation devices.

Architecture::

    datasources/   Weather Underground client (XML fetch, error classification)
    devices/       Definition tree, extraction, reconciliation, fetch/apply cycle
    scheduler.py   Cancellable, restartable periodic loop
    plugin.py      Wires config, host, cycle and scheduler; restarts on config change
    store.py       JSON snapshot of the host's devices
    renderers/     Pure data -> HTML (device status page)
    flows/         Prefect orchestration (one-shot sync)
    services/      Shared utilities (HTTP client with retry)

Data flow: config -> reconcile (create devices) -> fetch XML -> apply values -> store

Extension points, see each package's docstring:
  - New device:        devices/__init__.py
  - New data source:   datasources/__init__.py
"""

__version__ = "0.1.0"

from wuweather.config import Settings

__all__ = ["Settings", "__version__"]
