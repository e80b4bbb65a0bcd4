"""Polling refresh of the adoption record set.

`RecordStore` owns the current records and swaps them in one assignment per
successful load, so readers see either the old set or the new one. Refreshes
are serialized: a request that arrives while another load is running is
dropped. `PeriodicRefresher` runs `RecordStore.refresh` on a background
thread until it is stopped.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable

from adoption_dashboard.config import Settings
from adoption_dashboard.ingest.source import (
    Fetched,
    FellBackToFile,
    SourceResult,
    Unavailable,
    load_records,
)
from adoption_dashboard.models import AdoptionRecord

log = logging.getLogger(__name__)

Loader = Callable[[], SourceResult]


class RecordStore:
    """Holds the latest adoption records and the outcome of the last load."""

    def __init__(self, loader: Loader) -> None:
        self._loader = loader
        self._refresh_lock = threading.Lock()
        self._records: tuple[AdoptionRecord, ...] = ()
        self._last_result: SourceResult | None = None
        self._last_success: datetime | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecordStore":
        """Build a store that loads through the sheets proxy / CSV fallback."""
        return cls(lambda: load_records(settings))

    @property
    def records(self) -> tuple[AdoptionRecord, ...]:
        return self._records

    @property
    def last_result(self) -> SourceResult | None:
        return self._last_result

    @property
    def last_success(self) -> datetime | None:
        """UTC time of the last load that produced records."""
        return self._last_success

    @property
    def is_stale(self) -> bool:
        """True unless the last load came straight from the sheets proxy."""
        return not isinstance(self._last_result, Fetched)

    @property
    def refreshing(self) -> bool:
        return self._refresh_lock.locked()

    def refresh(self) -> SourceResult | None:
        """Load records once, replacing the current set on success.

        Returns:
            The load result, or None when another refresh was already running.
            On `Unavailable` the previous records are kept.
        """
        if not self._refresh_lock.acquire(blocking=False):
            log.info("Refresh already in progress; skipping")
            return None

        try:
            result = self._loader()
            if isinstance(result, (Fetched, FellBackToFile)):
                self._records = result.records
                self._last_success = datetime.now(timezone.utc)
            elif isinstance(result, Unavailable):
                log.error(
                    "Record source unavailable; keeping %d previous records: %s",
                    len(self._records),
                    result.error,
                )
            self._last_result = result
            return result
        finally:
            self._refresh_lock.release()


class PeriodicRefresher:
    """Run `store.refresh()` every `interval_seconds` on a daemon thread.

    The first refresh runs immediately on `start()` unless the caller has
    already loaded the store and passes `refresh_now=False`. `stop()` wakes
    the pending wait, so shutdown does not block for a full interval.
    """

    def __init__(self, store: RecordStore, interval_seconds: float = 300.0) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.store = store
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, refresh_now: bool = True) -> None:
        """Start the loop; a loop that is still shutting down is an error."""
        if self._thread is not None and self._thread.is_alive():
            if self._stop.is_set():
                raise RuntimeError("previous refresh loop has not exited yet")
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, args=(refresh_now,), name="adoption-refresh", daemon=True
        )
        self._thread.start()
        log.info("Started periodic refresh every %ss", self.interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Cancel the pending refresh and wait for the worker to exit.

        If the worker is still inside a refresh when `timeout` expires, the
        handle is kept so `start()` cannot run a second loop beside it.
        """
        self._stop.set()
        if self._thread is None:
            return
        self._thread.join(timeout)
        if self._thread.is_alive():
            log.warning("Refresh loop still running after %ss; it exits after the current load", timeout)
            return
        self._thread = None
        log.info("Stopped periodic refresh")

    def _run(self, refresh_now: bool) -> None:
        if not refresh_now:
            self._stop.wait(self.interval_seconds)
        while not self._stop.is_set():
            try:
                self.store.refresh()
            except Exception:
                log.exception("Periodic refresh failed")
            self._stop.wait(self.interval_seconds)

    def __enter__(self) -> "PeriodicRefresher":
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
