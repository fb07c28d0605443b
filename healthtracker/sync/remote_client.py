"""Client for the spreadsheet-backed remote entry endpoint.

The endpoint is a single URL: POST appends an entry, GET returns all
entries. Every failure mode is reported as RemoteUnavailableError so the
caller can fall back to the local cache.
"""

import json
import logging
from typing import Any

import httpx

from ..config import RemoteConfig
from ..entry import HealthEntry
from .local_cache import records_to_entries

logger = logging.getLogger(__name__)

# A "simple" content type keeps browsers from sending a CORS preflight; the
# endpoint parses the JSON from the raw body text either way.
WRITE_CONTENT_TYPE = "text/plain;charset=utf-8"


class RemoteUnavailableError(Exception):
    """Raised when the remote endpoint cannot accept or return entries."""


class RemoteClient:
    """Async client for the remote entry endpoint."""

    def __init__(self, config: RemoteConfig):
        """Initialize the remote client.

        Args:
            config: Remote endpoint configuration. An empty or placeholder
                URL makes every call fail with RemoteUnavailableError.

        Raises:
            ConfigError: If the configured sheet timezone is unknown.
        """
        self.config = config
        self.url = (config.url or "").strip()
        self.zone = config.zone
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            # Apps Script web apps answer through a redirect
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_configured(self) -> None:
        if not self.is_configured:
            raise RemoteUnavailableError("Remote endpoint not configured")

    def _parse_response(self, response: httpx.Response) -> dict[str, Any]:
        """Check status and application flag, returning the JSON body."""
        if not 200 <= response.status_code < 300:
            raise RemoteUnavailableError(f"HTTP error! status: {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteUnavailableError(f"Malformed response body: {e}") from e

        if not isinstance(body, dict):
            raise RemoteUnavailableError("Malformed response body: expected an object")

        if not body.get("success"):
            raise RemoteUnavailableError(body.get("error") or "Server returned error")

        return body

    async def health_check(self) -> bool:
        """Check the endpoint for reachability.

        Returns:
            True if the endpoint answered a GET with a success status.
        """
        if not self.is_configured:
            return False
        try:
            client = await self._get_client()
            response = await client.get(self.url)
            return 200 <= response.status_code < 300
        except Exception as e:
            logger.debug(f"Health check failed: {e}")
            return False

    async def append_entry(self, entry: HealthEntry) -> int | None:
        """Append an entry to the remote sheet.

        Args:
            entry: Validated entry to send.

        Returns:
            Row number reported by the endpoint, if any.

        Raises:
            RemoteUnavailableError: On network error, bad status, malformed
                body, or an application failure flag.
        """
        self._ensure_configured()

        try:
            client = await self._get_client()
            response = await client.post(
                self.url,
                content=json.dumps(entry.to_dict()),
                headers={"Content-Type": WRITE_CONTENT_TYPE},
            )
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(str(e) or type(e).__name__) from e

        body = self._parse_response(response)
        row = body.get("row")
        logger.debug(f"Remote stored entry for {entry.date} at row {row}")
        return row

    async def fetch_entries(self) -> list[HealthEntry]:
        """Fetch every entry held by the remote sheet.

        Returns:
            Valid entries in the order the endpoint returned them.

        Raises:
            RemoteUnavailableError: On network error, bad status, malformed
                body, or an application failure flag.
        """
        self._ensure_configured()

        try:
            client = await self._get_client()
            response = await client.get(self.url)
        except httpx.HTTPError as e:
            raise RemoteUnavailableError(str(e) or type(e).__name__) from e

        body = self._parse_response(response)
        data = body.get("data") or []
        if not isinstance(data, list):
            raise RemoteUnavailableError("Malformed response body: data is not a list")

        return records_to_entries(data, source="remote", tz=self.zone)
