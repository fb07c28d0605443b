"""Sync store reconciling the remote sheet with the local cache.

Writes go to the remote first and fall back to the local cache. Reads
merge remote entries over local ones, deduplicated by date.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ..entry import HealthEntry
from ..storage import StorageError
from .local_cache import LocalCache
from .remote_client import RemoteClient, RemoteUnavailableError

logger = logging.getLogger(__name__)


class SubmitStatus(Enum):
    """Outcome of a submission."""

    SAVED_REMOTE = "saved_remote"
    SAVED_LOCAL = "saved_local"  # Remote unavailable, kept on device
    FAILED = "failed"  # Entry dropped
    INVALID = "invalid"  # Rejected by validation, nothing attempted


@dataclass
class SubmitResult:
    """Result of a submission."""

    status: SubmitStatus
    entry: HealthEntry | None = None
    row: int | None = None
    error: str | None = None

    @property
    def saved(self) -> bool:
        return self.status in (SubmitStatus.SAVED_REMOTE, SubmitStatus.SAVED_LOCAL)


def merge_entries(
    remote: list[HealthEntry], local: list[HealthEntry]
) -> list[HealthEntry]:
    """Merge remote and local entries, keeping the first entry per date.

    Remote entries come first, so the remote wins for a date both sides
    hold.
    """
    seen: set[str] = set()
    merged = []
    for entry in [*remote, *local]:
        if entry.date in seen:
            continue
        seen.add(entry.date)
        merged.append(entry)
    return merged


def sort_for_display(entries: list[HealthEntry]) -> list[HealthEntry]:
    """Most recent date first; ties keep their relative order."""
    return sorted(entries, key=lambda e: e.date, reverse=True)


class SyncStore:
    """Durable entry storage over an unreliable remote.

    The remote sheet is authoritative. The local cache takes writes the
    remote cannot accept and mirrors the merged view after each
    successful remote read.
    """

    def __init__(
        self,
        remote: RemoteClient,
        cache: LocalCache,
        local_fallback: bool = True,
    ):
        """Initialize the sync store.

        Args:
            remote: Client for the remote sheet.
            cache: Local entry cache.
            local_fallback: Save to the local cache when the remote write
                fails. When False, a remote failure fails the submission.
        """
        self.remote = remote
        self.cache = cache
        self.local_fallback = local_fallback
        self._last_sync: datetime | None = None

    async def submit(self, entry: HealthEntry) -> SubmitResult:
        """Persist a validated entry.

        Args:
            entry: Entry that already passed validation.

        Returns:
            SubmitResult: SAVED_REMOTE, SAVED_LOCAL with the remote error,
            or FAILED if neither store accepted the entry.
        """
        try:
            row = await self.remote.append_entry(entry)
            logger.info(f"Entry for {entry.date} stored remotely")
            return SubmitResult(status=SubmitStatus.SAVED_REMOTE, entry=entry, row=row)
        except RemoteUnavailableError as e:
            remote_error = str(e)
            logger.warning(f"Remote write failed for {entry.date}: {remote_error}")
        except Exception as e:
            remote_error = str(e) or type(e).__name__
            logger.exception(f"Unexpected error writing {entry.date} remotely")

        if not self.local_fallback:
            return SubmitResult(
                status=SubmitStatus.FAILED, entry=entry, error=remote_error
            )

        try:
            self.cache.append(entry)
        except StorageError as e:
            logger.error(f"Local fallback failed for {entry.date}, entry dropped: {e}")
            return SubmitResult(
                status=SubmitStatus.FAILED,
                entry=entry,
                error=f"{remote_error}; local cache: {e}",
            )

        logger.info(f"Entry for {entry.date} saved to local cache")
        return SubmitResult(
            status=SubmitStatus.SAVED_LOCAL, entry=entry, error=remote_error
        )

    def load_local(self) -> list[HealthEntry]:
        """Cached entries in display order, without touching the remote."""
        return sort_for_display(self.cache.read())

    async def load_all(self) -> list[HealthEntry]:
        """Load every known entry in display order.

        Reconciles with the remote when it is reachable and writes the
        merged view back to the cache. Remote failures are logged and the
        cached entries are returned as they are.
        """
        local = self.cache.read()

        if not self.remote.is_configured:
            return sort_for_display(local)

        try:
            remote = await self.remote.fetch_entries()
        except RemoteUnavailableError as e:
            logger.info(f"Background sync failed, using local data: {e}")
            return sort_for_display(local)
        except Exception:
            logger.exception("Unexpected error during background sync")
            return sort_for_display(local)

        merged = merge_entries(remote, local)
        try:
            self.cache.write(merged)
        except StorageError as e:
            logger.warning(f"Could not persist merged entries to cache: {e}")

        self._last_sync = datetime.now()
        logger.debug(
            f"Merged {len(remote)} remote and {len(local)} local entries "
            f"into {len(merged)}"
        )
        return sort_for_display(merged)

    @property
    def last_sync(self) -> datetime | None:
        """Get timestamp of last successful remote reconciliation."""
        return self._last_sync

    async def close(self) -> None:
        """Close the remote client and the cache storage."""
        await self.remote.close()
        self.cache.store.close()
