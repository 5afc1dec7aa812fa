"""
Order recomputation for sibling lists.

Pure functions: nothing here touches the network or the working copy. A
move is always sort, remove, reinsert, renumber, so the same inputs give
the same assignments on every client.
"""
from typing import Iterable, List, Optional, Sequence, TypeVar
from uuid import UUID

from organizer.schemas.folder import FolderOut
from organizer.schemas.item import ItemOut
from organizer.schemas.reorder import ReorderFolder, ReorderItem

ROOT_DROPPABLE = "root"
FOLDERS_DROPPABLE = "folders"
FOLDER_PREFIX = "folder-"

R = TypeVar("R", ItemOut, FolderOut)


def folder_droppable_id(folder_id: UUID) -> str:
    """Droppable id of a folder's item list (also its draggable id)."""
    return f"{FOLDER_PREFIX}{folder_id}"


def resolve_container(droppable_id: str) -> Optional[UUID]:
    """
    Map a droppable id to a container key.

    Returns:
        None for root, the folder UUID for a folder's item list

    Raises:
        ValueError: If the id names neither root nor a folder
    """
    if droppable_id == ROOT_DROPPABLE:
        return None
    if droppable_id.startswith(FOLDER_PREFIX):
        return UUID(droppable_id[len(FOLDER_PREFIX):])
    raise ValueError(f"Not an item container: {droppable_id}")


def parse_draggable_folder(draggable_id: str) -> UUID:
    if draggable_id.startswith(FOLDER_PREFIX):
        draggable_id = draggable_id[len(FOLDER_PREFIX):]
    return UUID(draggable_id)


def sort_by_order(records: Iterable[R]) -> List[R]:
    """Stable sort by order; ties keep their current relative position."""
    return sorted(records, key=lambda r: r.order)


def container_members(items: Iterable[ItemOut], folder_id: Optional[UUID]) -> List[ItemOut]:
    """Items of one container sorted by order."""
    return sort_by_order(i for i in items if i.folder_id == folder_id)


def remove(seq: Sequence[R], record_id: UUID) -> List[R]:
    return [r for r in seq if r.id != record_id]


def reinsert(seq: Sequence[R], record: R, index: int) -> List[R]:
    """
    Move (or add) a record to index.

    Any existing entry with the same id is removed first. An index past the
    end appends.
    """
    result = remove(seq, record.id)
    result.insert(index, record)
    return result


def renumber_items(seq: Sequence[ItemOut], folder_id: Optional[UUID]) -> List[ReorderItem]:
    """Assign order 0..n-1 in sequence order, all in one container."""
    return [
        ReorderItem(id=item.id, order=position, folder_id=folder_id)
        for position, item in enumerate(seq)
    ]


def renumber_folders(seq: Sequence[FolderOut]) -> List[ReorderFolder]:
    return [
        ReorderFolder(id=folder.id, order=position)
        for position, folder in enumerate(seq)
    ]
