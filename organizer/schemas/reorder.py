"""Schemas for reorder batches."""
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field


class ReorderItem(BaseModel):
    """New position of one item."""
    id: UUID
    order: int
    folder_id: Optional[UUID] = Field(None, description="Container after the move (null for root)")


class ReorderFolder(BaseModel):
    """New position of one folder."""
    id: UUID
    order: int


class ReorderRequest(BaseModel):
    """
    Batch of reassignments.

    Order values are trusted as sent; the caller computes them.
    """
    items: List[ReorderItem] = Field(default_factory=list)
    folders: List[ReorderFolder] = Field(default_factory=list)


class ReorderResult(BaseModel):
    message: str = "Reorder successful"
