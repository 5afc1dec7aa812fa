"""Full-state snapshot endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from organizer.core.deps import get_db
from organizer.schemas.data import DataOut
from organizer.schemas.folder import FolderOut
from organizer.schemas.item import ItemOut
from organizer.services.entity_store import FolderStore, ItemStore

router = APIRouter(prefix="/data", tags=["data"])


@router.get("", response_model=DataOut)
def get_data(db: Session = Depends(get_db)):
    """
    Return every item and folder, sorted by order.

    Clients use this for the initial load and for every resync.
    """
    return DataOut(
        items=[ItemOut.model_validate(i) for i in ItemStore(db).find_all()],
        folders=[FolderOut.model_validate(f) for f in FolderStore(db).find_all()],
    )
