"""
Prefect flows.

Flows:
- sync: one reconcile -> fetch -> apply pass against the stored devices

Usage (local):
    python -m wuweather.flows.sync

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'sync-weather-devices/default'

The long-running service (``wuweather run``) does not go through Prefect; it
runs the same pass from its own cancellable loop (see ``scheduler.py``).
"""
