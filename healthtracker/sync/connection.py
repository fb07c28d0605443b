"""Connectivity status of the remote endpoint."""

import logging
import time
from enum import Enum
from typing import Callable

from .remote_client import RemoteClient

logger = logging.getLogger(__name__)


class ConnectionStatus(Enum):
    UNKNOWN = "unknown"
    CHECKING = "checking"
    ONLINE = "online"
    OFFLINE = "offline"


STATUS_MESSAGES = {
    "unconfigured": "Remote sheet not configured - using local storage",
    "checking": "Checking connection...",
    "online": "Connected to remote sheet",
    "unavailable": "Remote sheet unavailable - using local storage",
}

StatusListener = Callable[[ConnectionStatus, str], None]


class ConnectionMonitor:
    """Tracks reachability of the remote endpoint.

    Moves from UNKNOWN to CHECKING on each check, then to ONLINE or
    OFFLINE. ONLINE is only shown for a short period after it is reached.
    """

    def __init__(
        self,
        remote: RemoteClient,
        listener: StatusListener | None = None,
        online_display_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the monitor.

        Args:
            remote: Client used for the reachability check.
            listener: Called with (status, message) on every transition.
            online_display_seconds: How long ONLINE stays visible.
            clock: Monotonic time source.
        """
        self.remote = remote
        self.listener = listener
        self.online_display_seconds = online_display_seconds
        self._clock = clock
        self._status = ConnectionStatus.UNKNOWN
        self._message = ""
        self._changed_at = clock()

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def message(self) -> str:
        return self._message

    def _transition(self, status: ConnectionStatus, message: str) -> None:
        self._status = status
        self._message = message
        self._changed_at = self._clock()
        logger.debug(f"Connection status: {status.value} ({message})")
        if self.listener:
            self.listener(status, message)

    async def check(self) -> ConnectionStatus:
        """Check the remote endpoint and update the status.

        Returns:
            The resulting status, ONLINE or OFFLINE.
        """
        if not self.remote.is_configured:
            self._transition(ConnectionStatus.OFFLINE, STATUS_MESSAGES["unconfigured"])
            return self._status

        self._transition(ConnectionStatus.CHECKING, STATUS_MESSAGES["checking"])

        if await self.remote.health_check():
            self._transition(ConnectionStatus.ONLINE, STATUS_MESSAGES["online"])
        else:
            self._transition(ConnectionStatus.OFFLINE, STATUS_MESSAGES["unavailable"])
        return self._status

    @property
    def visible(self) -> bool:
        """Whether the status should currently be shown."""
        if self._status == ConnectionStatus.UNKNOWN:
            return False
        if self._status == ConnectionStatus.ONLINE:
            return self._clock() - self._changed_at < self.online_display_seconds
        return True
