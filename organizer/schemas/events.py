"""Broadcast event kinds and envelope."""
from enum import Enum
from typing import Any

from pydantic import BaseModel


class EventKind(str, Enum):
    ITEM_CREATE = "item:create"
    ITEM_UPDATE = "item:update"
    ITEM_DELETE = "item:delete"
    FOLDER_CREATE = "folder:create"
    FOLDER_UPDATE = "folder:update"
    FOLDER_DELETE = "folder:delete"
    REORDER = "reorder"


class BroadcastMessage(BaseModel):
    """Wire envelope sent to every connection."""

    event: EventKind
    data: Any = None
