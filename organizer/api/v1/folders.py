"""Folder API endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from organizer.core.deps import get_db, parse_uuid
from organizer.core.exceptions import ConflictError, NotFoundError
from organizer.models.folder import Folder
from organizer.schemas.events import EventKind
from organizer.schemas.folder import FolderCreate, FolderOut, FolderUpdate
from organizer.services.broadcast import Broadcaster, get_broadcaster
from organizer.services.entity_store import FolderStore, ItemStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders"])


@router.post("", response_model=FolderOut, status_code=status.HTTP_201_CREATED)
async def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Create a folder at the end of the folder list.
    """
    folders = FolderStore(db)

    fields = {
        "name": data.name,
        "is_open": data.is_open,
        "order": folders.count(),
    }
    if data.id is not None:
        if folders.exists(data.id):
            raise ConflictError("Folder already exists")
        fields["id"] = data.id

    folder = FolderOut.model_validate(folders.create(Folder(**fields)))
    await broadcaster.publish(EventKind.FOLDER_CREATE, folder)

    logger.info(f"Folder created: {folder.name} ({folder.id}) at order {folder.order}")
    return folder


@router.put("/{folder_id}", response_model=FolderOut)
async def update_folder(
    folder_id: str,
    data: FolderUpdate,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Rename a folder or change its open state.
    """
    f_uuid = parse_uuid(folder_id, "Folder ID")
    record = FolderStore(db).update_fields(
        f_uuid, data.model_dump(exclude_unset=True, exclude_none=True)
    )
    if record is None:
        raise NotFoundError("Folder not found")

    folder = FolderOut.model_validate(record)
    await broadcaster.publish(EventKind.FOLDER_UPDATE, folder)
    return folder


@router.delete("/{folder_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_folder(
    folder_id: str,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Delete a folder and all items inside it.
    """
    f_uuid = parse_uuid(folder_id, "Folder ID")
    folders = FolderStore(db)
    if not folders.exists(f_uuid):
        raise NotFoundError("Folder not found")

    item_count = ItemStore(db).delete_by_container(f_uuid)
    folders.delete(f_uuid)

    await broadcaster.publish(EventKind.FOLDER_DELETE, str(f_uuid))

    logger.info(f"Folder deleted: {f_uuid} ({item_count} items)")
    return None
