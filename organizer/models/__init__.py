from organizer.db.base import Base  # noqa: F401

from .folder import Folder  # noqa: F401
from .item import Item  # noqa: F401
