"""
Drag interaction translator.

Turns a finished drag gesture into a move instruction. The gesture kind is
resolved here once; everything downstream works on ItemMove / FolderMove.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union
from uuid import UUID

from organizer.client import ordering
from organizer.schemas.folder import FolderOut
from organizer.schemas.item import ItemOut
from organizer.schemas.reorder import ReorderFolder, ReorderItem, ReorderRequest

logger = logging.getLogger(__name__)


class DragKind(str, Enum):
    ITEM = "item"
    FOLDER = "folder"


@dataclass(frozen=True)
class DragLocation:
    droppable_id: str
    index: int


@dataclass(frozen=True)
class DragResult:
    """Drag-end event as reported by the UI."""

    source: DragLocation
    destination: Optional[DragLocation]
    draggable_id: str
    kind: DragKind


@dataclass(frozen=True)
class ItemMove:
    """Item reassignment for one container, or two on a cross-container move."""

    item_id: UUID
    source: Optional[UUID]
    destination: Optional[UUID]
    assignments: Tuple[ReorderItem, ...]

    @property
    def crosses_containers(self) -> bool:
        return self.source != self.destination

    def to_request(self) -> ReorderRequest:
        return ReorderRequest(items=list(self.assignments))


@dataclass(frozen=True)
class FolderMove:
    folder_id: UUID
    assignments: Tuple[ReorderFolder, ...]

    def to_request(self) -> ReorderRequest:
        return ReorderRequest(folders=list(self.assignments))


Move = Union[ItemMove, FolderMove]


def translate(
    drag: DragResult,
    items: Iterable[ItemOut],
    folders: Iterable[FolderOut],
) -> Optional[Move]:
    """
    Compute the move for a drag, or None when nothing changes.

    Args:
        drag: The finished drag
        items: Current items of the working copy
        folders: Current folders of the working copy

    Returns:
        FolderMove renumbering every folder, ItemMove renumbering every
        affected container, or None for a no-op
    """
    source, destination = drag.source, drag.destination
    if destination is None or destination == source:
        return None

    try:
        if DragKind(drag.kind) == DragKind.FOLDER:
            return _translate_folder(drag, list(folders))
        return _translate_item(drag, list(items), {f.id for f in folders})
    except ValueError as e:
        logger.warning(f"Ignoring invalid drag: {e}")
        return None


def _translate_folder(drag: DragResult, folders: list) -> Optional[FolderMove]:
    if drag.destination.droppable_id != ordering.FOLDERS_DROPPABLE:
        raise ValueError(
            f"Folders can only be dropped on the folder list, not {drag.destination.droppable_id!r}"
        )
    folder_id = ordering.parse_draggable_folder(drag.draggable_id)
    moved = next((f for f in folders if f.id == folder_id), None)
    if moved is None:
        logger.debug(f"Stale folder drag: {folder_id}")
        return None

    reordered = ordering.reinsert(
        ordering.sort_by_order(folders), moved, drag.destination.index
    )
    return FolderMove(
        folder_id=folder_id,
        assignments=tuple(ordering.renumber_folders(reordered)),
    )


def _translate_item(drag: DragResult, items: list, folder_ids: set) -> Optional[ItemMove]:
    item_id = UUID(drag.draggable_id)
    source = ordering.resolve_container(drag.source.droppable_id)
    destination = ordering.resolve_container(drag.destination.droppable_id)

    moved = next((i for i in items if i.id == item_id), None)
    if moved is None or moved.folder_id != source:
        logger.debug(f"Stale item drag: {item_id}")
        return None

    if destination is not None and destination not in folder_ids:
        # Folder deleted while the drag was in progress
        logger.debug(f"Stale drop target: folder {destination}")
        return None

    if source == destination:
        reordered = ordering.reinsert(
            ordering.container_members(items, source), moved, drag.destination.index
        )
        assignments = ordering.renumber_items(reordered, source)
    else:
        remaining = ordering.remove(ordering.container_members(items, source), item_id)
        arrived = ordering.reinsert(
            ordering.container_members(items, destination),
            moved.model_copy(update={"folder_id": destination}),
            drag.destination.index,
        )
        assignments = ordering.renumber_items(
            remaining, source
        ) + ordering.renumber_items(arrived, destination)

    return ItemMove(
        item_id=item_id,
        source=source,
        destination=destination,
        assignments=tuple(assignments),
    )
