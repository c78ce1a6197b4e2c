"""
openHAB REST inventory source.

Reads `/rest/items` and `/rest/systeminfo`, posts commands to `/rest/items/{id}`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List
from urllib.parse import quote

import httpx

from openhab_bridge.errors import RemoteCommandError, RemoteFetchError
from openhab_bridge.plugins.inventory.models import RawItem
from openhab_bridge.plugins.inventory.sources.base import InventorySource

logger = logging.getLogger(__name__)

ValueGetter = Callable[[], str]


def _describe(exc: Exception) -> tuple[str, int | None]:
    """Human-readable message (and status code when there is one) for an httpx failure."""
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return f"Request failed with status code {status}", status
    return str(exc) or type(exc).__name__, None


class OpenHABRestSource(InventorySource):
    """
    openHAB REST API source.

    Base URL and API token are read through accessors on every request so the
    host can change them at runtime.
    """

    def __init__(
        self,
        name: str,
        *,
        base_url: ValueGetter,
        api_token: ValueGetter,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = 10.0,
    ):
        super().__init__(name)
        self._base_url = base_url
        self._api_token = api_token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    def _url(self, path: str) -> str:
        return f"{self._base_url().rstrip('/')}{path}"

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_token()}"}

    async def _get_json(self, path: str) -> Any:
        url = self._url(path)
        try:
            r = await self._client.get(url, headers=self._headers())
            r.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            message, status = _describe(exc)
            raise RemoteFetchError(message, status_code=status) from exc
        except ValueError as exc:
            # Raised while building the request, e.g. a non-ASCII token in the header.
            raise RemoteFetchError(f"Could not build request for {path}: {exc}") from exc

        try:
            return r.json()
        except ValueError as exc:
            raise RemoteFetchError(f"Invalid JSON from {path}: {exc}") from exc

    async def fetch_items(self) -> List[RawItem]:
        payload = await self._get_json("/rest/items")
        if not isinstance(payload, list):
            raise RemoteFetchError(f"Unexpected /rest/items payload: {type(payload).__name__}")

        items = [RawItem.from_payload(entry) for entry in payload if isinstance(entry, dict)]
        skipped = len(payload) - len(items)
        if skipped:
            logger.debug(f"Skipped {skipped} non-object entries from /rest/items")
        return items

    async def fetch_system_info(self) -> Dict[str, Any]:
        payload = await self._get_json("/rest/systeminfo")
        if not isinstance(payload, dict):
            raise RemoteFetchError(f"Unexpected /rest/systeminfo payload: {type(payload).__name__}")
        info = payload.get("systemInfo")
        return info if isinstance(info, dict) else {}

    async def send_command(self, item_id: str, command: str) -> None:
        url = self._url(f"/rest/items/{quote(item_id, safe='')}")
        headers = self._headers()
        headers["Content-Type"] = "text/plain"
        try:
            r = await self._client.post(url, content=command.encode("utf-8"), headers=headers)
            r.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            message, status = _describe(exc)
            raise RemoteCommandError(message, item_id=item_id, status_code=status) from exc
        except ValueError as exc:
            raise RemoteCommandError(f"Could not build request for {item_id}: {exc}", item_id=item_id) from exc

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
