"""
Entity store - record access for items and folders.

Every write commits on its own. Callers that need several writes (reorder,
cascading delete) issue them one by one; there is no enclosing transaction.
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from organizer.models.folder import Folder
from organizer.models.item import Item

logger = logging.getLogger(__name__)


class EntityStore:
    """Single-record operations shared by every record type."""

    model = None

    def __init__(self, db: Session):
        self.db = db

    def find_all(self) -> List[Any]:
        """All records sorted by order."""
        return self.db.query(self.model).order_by(self.model.order).all()

    def get(self, record_id: UUID) -> Optional[Any]:
        return self.db.query(self.model).filter(self.model.id == record_id).first()

    def exists(self, record_id: UUID) -> bool:
        return self.get(record_id) is not None

    def create(self, record: Any) -> Any:
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def update_fields(self, record_id: UUID, partial: Dict[str, Any]) -> Optional[Any]:
        """
        Apply a partial update to one record.

        Returns:
            The updated record, or None if the id is unknown
        """
        record = self.get(record_id)
        if record is None:
            return None

        for field, value in partial.items():
            setattr(record, field, value)

        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record_id: UUID) -> bool:
        """Delete one record. Returns False if the id is unknown."""
        record = self.get(record_id)
        if record is None:
            return False

        self.db.delete(record)
        self.db.commit()
        return True


class ItemStore(EntityStore):
    model = Item

    def _container_filter(self, folder_id: Optional[UUID]):
        if folder_id is None:
            return Item.folder_id.is_(None)
        return Item.folder_id == folder_id

    def find_by_container(self, folder_id: Optional[UUID]) -> List[Item]:
        """Items of one container (None for root) sorted by order."""
        return (
            self.db.query(Item)
            .filter(self._container_filter(folder_id))
            .order_by(Item.order)
            .all()
        )

    def count_by_container(self, folder_id: Optional[UUID]) -> int:
        return self.db.query(Item).filter(self._container_filter(folder_id)).count()

    def delete_by_container(self, folder_id: UUID) -> int:
        """Delete every item of a folder. Returns the number removed."""
        deleted = (
            self.db.query(Item)
            .filter(Item.folder_id == folder_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.debug(f"Deleted {deleted} items of folder {folder_id}")
        return deleted


class FolderStore(EntityStore):
    model = Folder

    def count(self) -> int:
        return self.db.query(Folder).count()
