"""Reorder endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from organizer.core.deps import get_db
from organizer.schemas.reorder import ReorderRequest, ReorderResult
from organizer.services import reorder as reorder_engine
from organizer.services.broadcast import Broadcaster, get_broadcaster

router = APIRouter(prefix="/reorder", tags=["reorder"])


@router.put("", response_model=ReorderResult)
async def reorder(
    data: ReorderRequest,
    db: Session = Depends(get_db),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """
    Apply a batch of order/container reassignments and broadcast it.

    Returns 503 without broadcasting when any write fails; clients then
    reload the full state.
    """
    await reorder_engine.reorder(db, data, broadcaster)
    return ReorderResult()
