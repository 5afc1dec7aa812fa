"""
Reorder engine - the only writer of order and container fields.

A batch is applied as independent single-record writes. Each write commits
on its own, so a failure part way leaves the earlier writes in place. Two
overlapping batches for the same container may interleave and leave
duplicate or missing order values until that container is reordered again.
Clients recover from any failed batch with a full reload.
"""
import logging
from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from organizer.core.exceptions import ReorderFailedError
from organizer.schemas.events import EventKind
from organizer.schemas.reorder import ReorderRequest
from organizer.services.broadcast import Broadcaster
from organizer.services.entity_store import EntityStore, FolderStore, ItemStore

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    """Result of writing one reorder batch."""

    written: int = 0
    skipped: List[UUID] = field(default_factory=list)
    failed: List[UUID] = field(default_factory=list)


def _write(store: EntityStore, record_id: UUID, partial: dict, outcome: BatchOutcome) -> None:
    try:
        record = store.update_fields(record_id, partial)
    except SQLAlchemyError as e:
        store.db.rollback()
        logger.error(f"Reorder write failed for {record_id}: {e}")
        outcome.failed.append(record_id)
        return

    if record is None:
        # Deleted in the meantime
        outcome.skipped.append(record_id)
    else:
        outcome.written += 1


def apply_batch(db: Session, batch: ReorderRequest) -> BatchOutcome:
    """
    Write every reassignment of the batch.

    Every write is attempted even after an earlier one failed; nothing is
    rolled back. An item moved into a folder that does not exist counts as
    a failed write.
    """
    outcome = BatchOutcome()
    items = ItemStore(db)
    folders = FolderStore(db)

    for entry in batch.items:
        if entry.folder_id is not None and not folders.exists(entry.folder_id):
            logger.error(f"Reorder moves item {entry.id} into missing folder {entry.folder_id}")
            outcome.failed.append(entry.id)
            continue
        _write(
            items,
            entry.id,
            {"order": entry.order, "folder_id": entry.folder_id},
            outcome,
        )

    for entry in batch.folders:
        _write(folders, entry.id, {"order": entry.order}, outcome)

    return outcome


async def reorder(db: Session, batch: ReorderRequest, broadcaster: Broadcaster) -> BatchOutcome:
    """
    Apply a reorder batch and broadcast it.

    Raises:
        ReorderFailedError: If any write failed. Nothing is broadcast then.
    """
    outcome = apply_batch(db, batch)

    if outcome.failed:
        logger.warning(
            f"Reorder batch failed: {len(outcome.failed)} of "
            f"{len(batch.items) + len(batch.folders)} writes failed, "
            f"{outcome.written} applied"
        )
        raise ReorderFailedError(failed=len(outcome.failed))

    if outcome.skipped:
        logger.debug(f"Reorder skipped {len(outcome.skipped)} unknown ids")

    await broadcaster.publish(EventKind.REORDER, batch)

    logger.info(
        f"Reordered {len(batch.items)} items and {len(batch.folders)} folders"
    )
    return outcome
