"""Remote/local synchronization for health entries."""

from .connection import ConnectionMonitor, ConnectionStatus
from .local_cache import LocalCache
from .remote_client import RemoteClient, RemoteUnavailableError
from .sync_store import SubmitResult, SubmitStatus, SyncStore, merge_entries, sort_for_display

__all__ = [
    "ConnectionMonitor",
    "ConnectionStatus",
    "LocalCache",
    "RemoteClient",
    "RemoteUnavailableError",
    "SubmitResult",
    "SubmitStatus",
    "SyncStore",
    "merge_entries",
    "sort_for_display",
]
