"""
HTTP client for the organizer API.

Every failure surfaces as ApiError; the caller decides between ignoring a
stale reference (404) and a full resync.
"""
import logging
from typing import Any, Optional
from uuid import UUID

import httpx

from organizer.core.config import settings
from organizer.schemas.data import DataOut
from organizer.schemas.folder import FolderCreate, FolderOut, FolderUpdate
from organizer.schemas.item import ItemCreate, ItemOut, ItemUpdate
from organizer.schemas.reorder import ReorderRequest, ReorderResult

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Request failed at the transport or server level."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_stale(self) -> bool:
        """The target record no longer exists on the server."""
        return self.status_code == 404


class OrganizerApiClient:
    """Async client for the request/response side of the organizer."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.CLIENT_API_URL
        self.timeout = timeout or settings.CLIENT_REQUEST_TIMEOUT
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "OrganizerApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"API Error: {method} {path} -> {status_code} {e.response.text}")
            raise ApiError(f"Server error: {status_code} - {e}", status_code) from e
        except httpx.TimeoutException as e:
            logger.error(f"API Error: {method} {path} timed out after {self.timeout}s")
            raise ApiError("Request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"API Error: {method} {path} failed: {e}")
            raise ApiError(
                "No response received from server. Please check the connection"
            ) from e

    async def fetch_data(self) -> DataOut:
        resp = await self._request("GET", "/data")
        return DataOut.model_validate(resp.json())

    async def create_item(self, data: ItemCreate) -> ItemOut:
        resp = await self._request(
            "POST", "/items", json=data.model_dump(mode="json", exclude_none=True)
        )
        return ItemOut.model_validate(resp.json())

    async def update_item(self, item_id: UUID, data: ItemUpdate) -> ItemOut:
        resp = await self._request(
            "PUT",
            f"/items/{item_id}",
            json=data.model_dump(mode="json", exclude_unset=True, exclude_none=True),
        )
        return ItemOut.model_validate(resp.json())

    async def delete_item(self, item_id: UUID) -> UUID:
        await self._request("DELETE", f"/items/{item_id}")
        return item_id

    async def create_folder(self, data: FolderCreate) -> FolderOut:
        resp = await self._request(
            "POST", "/folders", json=data.model_dump(mode="json", exclude_none=True)
        )
        return FolderOut.model_validate(resp.json())

    async def update_folder(self, folder_id: UUID, data: FolderUpdate) -> FolderOut:
        resp = await self._request(
            "PUT",
            f"/folders/{folder_id}",
            json=data.model_dump(mode="json", exclude_unset=True, exclude_none=True),
        )
        return FolderOut.model_validate(resp.json())

    async def delete_folder(self, folder_id: UUID) -> UUID:
        await self._request("DELETE", f"/folders/{folder_id}")
        return folder_id

    async def reorder(self, batch: ReorderRequest) -> ReorderResult:
        resp = await self._request("PUT", "/reorder", json=batch.model_dump(mode="json"))
        return ReorderResult.model_validate(resp.json())
