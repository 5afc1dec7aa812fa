"""Item API endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from organizer.core.deps import get_db, parse_uuid
from organizer.core.exceptions import ConflictError, NotFoundError
from organizer.models.item import Item
from organizer.schemas.events import EventKind
from organizer.schemas.item import ItemCreate, ItemOut, ItemUpdate
from organizer.services.broadcast import Broadcaster, get_broadcaster
from organizer.services.entity_store import FolderStore, ItemStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"])


@router.post("", response_model=ItemOut, status_code=status.HTTP_201_CREATED)
async def create_item(
    data: ItemCreate,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Create an item at the end of its container.
    """
    items = ItemStore(db)

    if data.folder_id is not None and not FolderStore(db).exists(data.folder_id):
        raise NotFoundError("Folder not found")

    fields = {
        "title": data.title,
        "icon": data.icon,
        "folder_id": data.folder_id,
        "order": items.count_by_container(data.folder_id),
    }
    if data.id is not None:
        if items.exists(data.id):
            raise ConflictError("Item already exists")
        fields["id"] = data.id

    item = ItemOut.model_validate(items.create(Item(**fields)))
    await broadcaster.publish(EventKind.ITEM_CREATE, item)

    logger.info(f"Item created: {item.title} ({item.id}) at order {item.order}")
    return item


@router.put("/{item_id}", response_model=ItemOut)
async def update_item(
    item_id: str,
    data: ItemUpdate,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Edit an item's title or icon. Order and container are left untouched.
    """
    i_uuid = parse_uuid(item_id, "Item ID")
    record = ItemStore(db).update_fields(
        i_uuid, data.model_dump(exclude_unset=True, exclude_none=True)
    )
    if record is None:
        raise NotFoundError("Item not found")

    item = ItemOut.model_validate(record)
    await broadcaster.publish(EventKind.ITEM_UPDATE, item)
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Delete an item.
    """
    i_uuid = parse_uuid(item_id, "Item ID")
    if not ItemStore(db).delete(i_uuid):
        raise NotFoundError("Item not found")

    await broadcaster.publish(EventKind.ITEM_DELETE, str(i_uuid))

    logger.info(f"Item deleted: {i_uuid}")
    return None
