"""
Local reconciliation engine.

User actions mutate the working copy first and then send the request.
Broadcasts, including the echo of this client's own requests, are merged
through the same working-copy methods, so both paths converge on the same
values. On any failed request the engine shows an error and reloads the
full state instead of undoing the optimistic change.
"""
import logging
from typing import Any, Awaitable, Optional, TypeVar
from uuid import UUID, uuid4

from organizer.client.api_client import ApiError, OrganizerApiClient
from organizer.client.drag import DragResult, FolderMove, Move, translate
from organizer.client.state import WorkingCopy
from organizer.schemas.events import EventKind
from organizer.schemas.folder import FolderCreate, FolderOut, FolderUpdate
from organizer.schemas.item import ItemCreate, ItemOut, ItemUpdate

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOAD_FAILED = "Failed to load data. Please try again."


class InvalidInputError(ValueError):
    """User input rejected before any state change."""


def _required(value: Optional[str], name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidInputError(f"{name} is required")
    return value


class ReconciliationEngine:
    """
    Owns one client's working copy.

    Attributes:
        state: The working copy
        error: User-visible failure message, None when all is well
        loading: True while a full fetch is in flight
    """

    def __init__(self, api: OrganizerApiClient, state: Optional[WorkingCopy] = None):
        self.api = api
        self.state = state or WorkingCopy()
        self.error: Optional[str] = None
        self.loading = False

    # ------------------------------------------------------------------
    # Full resync
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """
        Replace the working copy with the server's full state.

        Returns:
            True if the fetch succeeded
        """
        self.loading = True
        self.error = None
        try:
            data = await self.api.fetch_data()
        except ApiError as e:
            logger.error(f"Error loading data: {e}")
            self.error = LOAD_FAILED
            return False
        finally:
            self.loading = False

        self.state.replace(data.items, data.folders)
        logger.debug(f"Loaded {len(data.items)} items and {len(data.folders)} folders")
        return True

    async def clear_error(self) -> bool:
        """Dismiss the error and retry the full load."""
        self.error = None
        return await self.load()

    async def _send(self, request: Awaitable[T], failure: str) -> Optional[T]:
        try:
            return await request
        except ApiError as e:
            if e.is_stale:
                logger.debug(f"Request hit a record that no longer exists: {e}")
                return None
            logger.error(f"{failure} ({e})")
            await self.load()
            if self.error is None:
                self.error = failure
            return None

    # ------------------------------------------------------------------
    # Broadcast handling
    # ------------------------------------------------------------------

    def handle_event(self, kind: EventKind, payload: Any) -> None:
        self.state.apply_event(kind, payload)

    def bind(self, channel, resync_on_connect: bool = True) -> list:
        """
        Subscribe to every event kind on a broadcast channel.

        Works with BroadcastSubscriber and with the server-side Broadcaster.

        Returns:
            Unsubscribe callables, one per event kind
        """
        unsubscribers = []
        for kind in EventKind:
            unsubscribers.append(
                channel.subscribe(kind, lambda payload, kind=kind: self.handle_event(kind, payload))
            )
        if resync_on_connect and hasattr(channel, "on_connect"):
            channel.on_connect(self.load)
        return unsubscribers

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def add_item(self, title: str, icon: str, folder_id: Optional[UUID] = None) -> ItemOut:
        title = _required(title, "Title")
        icon = _required(icon, "Icon")
        if folder_id is not None and folder_id not in self.state.folders:
            raise InvalidInputError("Folder does not exist")

        item = ItemOut(
            id=uuid4(),
            title=title,
            icon=icon,
            folder_id=folder_id,
            order=len(self.state.items_in(folder_id)),
        )
        self.state.upsert_item(item)

        await self._send(
            self.api.create_item(
                ItemCreate(id=item.id, title=title, icon=icon, folder_id=folder_id)
            ),
            "Failed to add item. Please try again.",
        )
        return item

    async def update_item(self, item_id: UUID, title: Optional[str] = None, icon: Optional[str] = None) -> None:
        fields = {}
        if title is not None:
            fields["title"] = _required(title, "Title")
        if icon is not None:
            fields["icon"] = _required(icon, "Icon")
        if not fields or self.state.edit_item(item_id, fields) is None:
            return

        await self._send(
            self.api.update_item(item_id, ItemUpdate(**fields)),
            "Failed to update item. Please try again.",
        )

    async def delete_item(self, item_id: UUID) -> None:
        if not self.state.remove_item(item_id):
            return

        await self._send(
            self.api.delete_item(item_id),
            "Failed to delete item. Please try again.",
        )

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    async def add_folder(self, name: str) -> FolderOut:
        name = _required(name, "Name")

        folder = FolderOut(id=uuid4(), name=name, is_open=True, order=len(self.state.folders))
        self.state.upsert_folder(folder)

        await self._send(
            self.api.create_folder(FolderCreate(id=folder.id, name=name)),
            "Failed to add folder. Please try again.",
        )
        return folder

    async def update_folder(self, folder_id: UUID, name: Optional[str] = None, is_open: Optional[bool] = None) -> None:
        fields = {}
        if name is not None:
            fields["name"] = _required(name, "Name")
        if is_open is not None:
            fields["is_open"] = is_open
        if not fields or self.state.edit_folder(folder_id, fields) is None:
            return

        await self._send(
            self.api.update_folder(folder_id, FolderUpdate(**fields)),
            "Failed to update folder. Please try again.",
        )

    async def toggle_folder(self, folder_id: UUID) -> None:
        folder = self.state.folders.get(folder_id)
        if folder is None:
            return
        await self.update_folder(folder_id, is_open=not folder.is_open)

    async def delete_folder(self, folder_id: UUID) -> None:
        if not self.state.remove_folder(folder_id):
            return

        await self._send(
            self.api.delete_folder(folder_id),
            "Failed to delete folder. Please try again.",
        )

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------

    async def drag_end(self, drag: DragResult) -> Optional[Move]:
        """
        Apply a finished drag locally and send the reorder request.

        Returns:
            The move that was applied, or None for a no-op
        """
        move = translate(drag, self.state.items.values(), self.state.folders.values())
        if move is None:
            return None

        batch = move.to_request()
        self.state.apply_reorder(batch)

        if isinstance(move, FolderMove):
            failure = "Failed to save folder reordering. Refreshing data..."
        elif move.crosses_containers:
            failure = "Failed to move item. Refreshing data..."
        else:
            failure = "Failed to save item reordering. Refreshing data..."

        await self._send(self.api.reorder(batch), failure)
        return move
