"""
Builders for client-side records.
"""
import uuid
from typing import Optional

from organizer.schemas.folder import FolderOut
from organizer.schemas.item import ItemOut


def build_item(title: str, order: int, folder: Optional[FolderOut] = None) -> ItemOut:
    return ItemOut(
        id=uuid.uuid4(),
        title=title,
        icon="star",
        folder_id=folder.id if folder is not None else None,
        order=order,
    )


def build_folder(name: str, order: int, is_open: bool = True) -> FolderOut:
    return FolderOut(id=uuid.uuid4(), name=name, is_open=is_open, order=order)
