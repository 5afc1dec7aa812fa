"""Full-state snapshot schema."""
from typing import List

from pydantic import BaseModel, Field

from organizer.schemas.folder import FolderOut
from organizer.schemas.item import ItemOut


class DataOut(BaseModel):
    """Every item and folder, each list sorted by order."""

    items: List[ItemOut] = Field(default_factory=list)
    folders: List[FolderOut] = Field(default_factory=list)
