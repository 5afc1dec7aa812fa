"""Schemas for folders."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field
from datetime import datetime


class FolderCreate(BaseModel):
    """Folder creation request."""
    name: str = Field(..., min_length=1, max_length=255)
    is_open: bool = True
    id: Optional[UUID] = Field(None, description="Client-generated identifier")


class FolderUpdate(BaseModel):
    """Folder field edit."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_open: Optional[bool] = None


class FolderOut(BaseModel):
    """Folder response."""
    id: UUID
    name: str
    is_open: bool = True
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
