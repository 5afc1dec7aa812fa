"""
Working copy of items and folders held by one client.

Optimistic mutations and broadcast events go through the same methods, so
a client applying its own echoed broadcast lands on the values it already
predicted. Unknown ids are ignored everywhere: a record deleted locally
while its event was in flight is an expected race.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from organizer.client import ordering
from organizer.schemas.events import EventKind
from organizer.schemas.folder import FolderOut
from organizer.schemas.item import ItemOut
from organizer.schemas.reorder import ReorderRequest

logger = logging.getLogger(__name__)


class WorkingCopy:
    """Items and folders keyed by id, kept in order-sorted insertion order."""

    def __init__(
        self,
        items: Iterable[ItemOut] = (),
        folders: Iterable[FolderOut] = (),
    ):
        self.items: Dict[UUID, ItemOut] = {}
        self.folders: Dict[UUID, FolderOut] = {}
        self.replace(items, folders)

    def replace(self, items: Iterable[ItemOut], folders: Iterable[FolderOut]) -> None:
        """Discard everything and take the given records (full resync)."""
        self.items = {i.id: i for i in ordering.sort_by_order(items)}
        self.folders = {f.id: f for f in ordering.sort_by_order(folders)}

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def folder_list(self) -> List[FolderOut]:
        return ordering.sort_by_order(self.folders.values())

    def items_in(self, folder_id: Optional[UUID]) -> List[ItemOut]:
        return ordering.container_members(self.items.values(), folder_id)

    def root_items(self) -> List[ItemOut]:
        return self.items_in(None)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def upsert_item(self, item: ItemOut) -> bool:
        """
        Add an item, or replace it in place if the id is already present.

        Returns:
            True if the item was appended
        """
        appended = item.id not in self.items
        self.items[item.id] = item
        return appended

    def update_item(self, item: ItemOut) -> bool:
        if item.id not in self.items:
            logger.debug(f"Ignoring update for unknown item {item.id}")
            return False
        self.items[item.id] = item
        return True

    def edit_item(self, item_id: UUID, fields: Dict[str, Any]) -> Optional[ItemOut]:
        """Apply a field edit locally. Returns None for unknown ids."""
        current = self.items.get(item_id)
        if current is None:
            return None
        self.items[item_id] = current.model_copy(update=fields)
        return self.items[item_id]

    def remove_item(self, item_id: UUID) -> bool:
        return self.items.pop(item_id, None) is not None

    # ------------------------------------------------------------------
    # Folders
    # ------------------------------------------------------------------

    def upsert_folder(self, folder: FolderOut) -> bool:
        appended = folder.id not in self.folders
        self.folders[folder.id] = folder
        return appended

    def update_folder(self, folder: FolderOut) -> bool:
        if folder.id not in self.folders:
            logger.debug(f"Ignoring update for unknown folder {folder.id}")
            return False
        self.folders[folder.id] = folder
        return True

    def edit_folder(self, folder_id: UUID, fields: Dict[str, Any]) -> Optional[FolderOut]:
        current = self.folders.get(folder_id)
        if current is None:
            return None
        self.folders[folder_id] = current.model_copy(update=fields)
        return self.folders[folder_id]

    def remove_folder(self, folder_id: UUID) -> bool:
        """Remove a folder and every item inside it."""
        removed = self.folders.pop(folder_id, None) is not None
        self.items = {
            item_id: item
            for item_id, item in self.items.items()
            if item.folder_id != folder_id
        }
        return removed

    # ------------------------------------------------------------------
    # Reorder
    # ------------------------------------------------------------------

    def apply_reorder(self, batch: ReorderRequest) -> None:
        """
        Overwrite order (and container, for items) of every listed record.

        Applying the same batch twice gives the same result as applying it
        once.
        """
        for entry in batch.items:
            item = self.items.get(entry.id)
            if item is None:
                logger.debug(f"Reorder names unknown item {entry.id}")
                continue
            self.items[entry.id] = item.model_copy(
                update={"order": entry.order, "folder_id": entry.folder_id}
            )

        for entry in batch.folders:
            folder = self.folders.get(entry.id)
            if folder is None:
                logger.debug(f"Reorder names unknown folder {entry.id}")
                continue
            self.folders[entry.id] = folder.model_copy(update={"order": entry.order})

        if batch.items:
            self.items = {i.id: i for i in ordering.sort_by_order(self.items.values())}
        if batch.folders:
            self.folders = {f.id: f for f in ordering.sort_by_order(self.folders.values())}

    # ------------------------------------------------------------------
    # Broadcast events
    # ------------------------------------------------------------------

    def apply_event(self, kind: EventKind, payload: Any) -> None:
        """Apply one broadcast event given its wire payload."""
        kind = EventKind(kind)

        if kind == EventKind.ITEM_CREATE:
            self.upsert_item(ItemOut.model_validate(payload))
        elif kind == EventKind.ITEM_UPDATE:
            self.update_item(ItemOut.model_validate(payload))
        elif kind == EventKind.ITEM_DELETE:
            self.remove_item(UUID(str(payload)))
        elif kind == EventKind.FOLDER_CREATE:
            self.upsert_folder(FolderOut.model_validate(payload))
        elif kind == EventKind.FOLDER_UPDATE:
            self.update_folder(FolderOut.model_validate(payload))
        elif kind == EventKind.FOLDER_DELETE:
            self.remove_folder(UUID(str(payload)))
        elif kind == EventKind.REORDER:
            self.apply_reorder(ReorderRequest.model_validate(payload))
