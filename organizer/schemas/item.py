"""Schemas for items."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field
from datetime import datetime


class ItemCreate(BaseModel):
    """Item creation request."""
    title: str = Field(..., min_length=1, max_length=255)
    icon: str = Field(..., min_length=1, max_length=255)
    folder_id: Optional[UUID] = Field(None, description="Target folder (null for root)")
    id: Optional[UUID] = Field(None, description="Client-generated identifier")


class ItemUpdate(BaseModel):
    """Item field edit. Order and container are owned by reorder."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    icon: Optional[str] = Field(None, min_length=1, max_length=255)


class ItemOut(BaseModel):
    """Item response."""
    id: UUID
    title: str
    icon: str
    folder_id: Optional[UUID] = None
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
