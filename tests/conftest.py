"""
Pytest configuration and fixtures for the test suite.
"""
import os
import pytest
from typing import Callable, Generator, List, Optional, Tuple
from fastapi.encoders import jsonable_encoder
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

# Use SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = os.getenv(
    "TEST_DATABASE_URL",
    "sqlite:///./test.db"
)

# Set test environment before importing app
os.environ["ENV"] = "development"
os.environ["DATABASE_URL"] = SQLALCHEMY_TEST_DATABASE_URL

from organizer.main import app
from organizer.core.deps import get_db
from organizer.models import Base, Folder, Item
from organizer.schemas.events import EventKind
from organizer.services.broadcast import Broadcaster, get_broadcaster


engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in SQLALCHEMY_TEST_DATABASE_URL else {},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class RecordingBroadcaster(Broadcaster):
    """Broadcaster that remembers every published event."""

    def __init__(self):
        super().__init__()
        self.events: List[Tuple[EventKind, object]] = []

    async def publish(self, kind, payload) -> None:
        await super().publish(kind, payload)
        self.events.append((EventKind(kind), jsonable_encoder(payload)))

    def kinds(self) -> List[EventKind]:
        return [kind for kind, _ in self.events]


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture(scope="function")
def client(db: Session, broadcaster: RecordingBroadcaster) -> Generator[TestClient, None, None]:
    """Create a test client with database and broadcaster overrides."""

    def override_get_db_with_session():
        """Return the test database session."""
        yield db

    app.dependency_overrides[get_db] = override_get_db_with_session
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_folder(db: Session) -> Callable[..., Folder]:
    """Factory for folders stored directly in the test database."""

    def _make(name: str = "Folder", order: int = 0, is_open: bool = True) -> Folder:
        folder = Folder(name=name, order=order, is_open=is_open)
        db.add(folder)
        db.commit()
        db.refresh(folder)
        return folder

    return _make


@pytest.fixture
def make_item(db: Session) -> Callable[..., Item]:
    """Factory for items stored directly in the test database."""

    def _make(
        title: str,
        order: int = 0,
        folder: Optional[Folder] = None,
        icon: str = "star",
    ) -> Item:
        item = Item(
            title=title,
            icon=icon,
            order=order,
            folder_id=folder.id if folder is not None else None,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    return _make
