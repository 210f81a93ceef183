"""
Cancellable, restartable periodic job.

``PeriodicScheduler`` runs one background thread that calls the cycle, waits
for the current interval, and repeats. ``start`` is a restart: it stops any
running loop (cancel, then join) before starting a new one, so concurrent
configuration changes can never produce two overlapping loops.

Each loop gets its own ``CancellationToken``. The token is passed explicitly
into the cycle, which checks it between definitions and while waiting for a
fetch; the inter-cycle wait is ``token.wait(interval)``.

States::

    idle --start--> running --stop--> stopping --(loop exits)--> idle
"""

from __future__ import annotations

import logging
import threading
from concurrent import futures
from enum import StrEnum
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import timedelta

logger = logging.getLogger(__name__)

T = TypeVar("T")

#: How often a blocked fetch re-checks its token (seconds).
POLL_INTERVAL = 0.1


class CycleCancelled(Exception):
    """The current loop iteration observed a cancellation request."""


class CancellationToken:
    """One-shot cancellation signal shared by a loop and its cycles."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CycleCancelled

    def wait(self, timeout: float | None = None) -> bool:
        """Sleep up to ``timeout`` seconds; True if cancelled meanwhile."""
        return self._event.wait(timeout)

    def wait_for(self, future: futures.Future[T]) -> T:
        """Block until ``future`` completes, abandoning it on cancellation.

        Raises:
            CycleCancelled: If the token is cancelled first. The future keeps
                running on its worker but its result is never used.
        """
        while True:
            self.raise_if_cancelled()
            done, _ = futures.wait([future], timeout=POLL_INTERVAL)
            if done:
                self.raise_if_cancelled()
                return future.result()


class SchedulerState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"


class PeriodicScheduler:
    """Owns the background loop that runs ``cycle`` every interval."""

    def __init__(
        self,
        cycle: Callable[[CancellationToken], object],
        *,
        name: str = "wuweather-sync",
    ) -> None:
        self._cycle = cycle
        self._name = name
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._token: CancellationToken | None = None
        self._draining: threading.Thread | None = None
        self._state = SchedulerState.IDLE
        self.iterations = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is SchedulerState.RUNNING

    def start(self, interval_provider: Callable[[], timedelta]) -> None:
        """(Re)start the loop; ``interval_provider`` is read before every wait."""
        with self._lock:
            self._stop_locked()
            token = CancellationToken()
            thread = threading.Thread(
                target=self._run,
                args=(token, interval_provider),
                name=self._name,
                daemon=True,
            )
            self._token = token
            self._thread = thread
            self._state = SchedulerState.RUNNING
            thread.start()
        logger.debug("Periodic task started")

    def stop(self) -> None:
        """Cancel the loop and wait for it to exit. No-op when idle."""
        with self._lock:
            self._stop_locked()

    def _stop_locked(self) -> None:
        self._join_draining()
        thread, token = self._thread, self._token
        if thread is None or token is None:
            return

        self._state = SchedulerState.STOPPING
        token.cancel()
        if thread is threading.current_thread():
            # the loop stopped itself; whoever starts the next one joins it
            self._draining = thread
        else:
            thread.join()
        self._thread = None
        self._token = None
        self._state = SchedulerState.IDLE
        logger.debug("Periodic task stopped")

    def _join_draining(self) -> None:
        draining = self._draining
        if draining is None or draining is threading.current_thread():
            return
        draining.join()
        self._draining = None

    def _run(self, token: CancellationToken, interval_provider: Callable[[], timedelta]) -> None:
        while not token.cancelled:
            try:
                self._cycle(token)
            except CycleCancelled:
                logger.debug("Cycle cancelled")
                break
            except Exception as e:
                logger.warning("Periodic task failed with %s", e)
            finally:
                self.iterations += 1

            if token.wait(interval_provider().total_seconds()):
                break
