"""
Tests for folder endpoints.
"""
import uuid

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from organizer.models.folder import Folder
from organizer.models.item import Item
from organizer.schemas.events import EventKind


class TestCreateFolder:
    """Tests for creating folders."""

    def test_create_folder_appends(self, client: TestClient, broadcaster, make_folder):
        """Test that a new folder gets order = current folder count."""
        make_folder("First", order=0)

        response = client.post("/api/v1/folders", json={"name": "Second"})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Second"
        assert data["order"] == 1
        assert data["is_open"] is True

        assert broadcaster.kinds() == [EventKind.FOLDER_CREATE]

    def test_create_folder_empty_name(self, client: TestClient, broadcaster):
        """Test that an empty name is rejected."""
        response = client.post("/api/v1/folders", json={"name": ""})
        assert response.status_code == 422
        assert broadcaster.events == []


class TestUpdateFolder:
    """Tests for editing folders."""

    def test_toggle_folder(self, client: TestClient, broadcaster, make_folder):
        """Test closing a folder leaves its order alone."""
        folder = make_folder("Docs", order=2)
        response = client.put(f"/api/v1/folders/{folder.id}", json={"is_open": False})
        assert response.status_code == 200
        data = response.json()
        assert data["is_open"] is False
        assert data["order"] == 2

        kind, payload = broadcaster.events[0]
        assert kind == EventKind.FOLDER_UPDATE
        assert payload["is_open"] is False

    def test_rename_folder(self, client: TestClient, make_folder):
        """Test renaming a folder."""
        folder = make_folder("Docs")
        response = client.put(f"/api/v1/folders/{folder.id}", json={"name": "Papers"})
        assert response.status_code == 200
        assert response.json()["name"] == "Papers"

    def test_update_folder_not_found(self, client: TestClient, broadcaster):
        """Test editing a folder that does not exist."""
        response = client.put(f"/api/v1/folders/{uuid.uuid4()}", json={"name": "X"})
        assert response.status_code == 404
        assert broadcaster.events == []


class TestDeleteFolder:
    """Tests for deleting folders."""

    def test_delete_folder_cascades(
        self, client: TestClient, broadcaster, make_folder, make_item, db: Session
    ):
        """Test that deleting a folder deletes exactly its items."""
        doomed = make_folder("Doomed", order=0)
        kept = make_folder("Kept", order=1)
        make_item("X", order=0, folder=doomed)
        make_item("Y", order=1, folder=doomed)
        make_item("Z", order=0, folder=kept)
        make_item("A", order=0)
        doomed_id = doomed.id

        response = client.delete(f"/api/v1/folders/{doomed_id}")
        assert response.status_code == 204

        db.expire_all()
        assert db.query(Folder).filter(Folder.id == doomed_id).first() is None
        titles = sorted(i.title for i in db.query(Item).all())
        assert titles == ["A", "Z"]

        folder_ids = {f.id for f in db.query(Folder).all()}
        assert all(
            i.folder_id is None or i.folder_id in folder_ids for i in db.query(Item).all()
        )
        assert broadcaster.events == [(EventKind.FOLDER_DELETE, str(doomed_id))]

    def test_delete_folder_not_found(self, client: TestClient, broadcaster):
        """Test deleting a folder that does not exist."""
        response = client.delete(f"/api/v1/folders/{uuid.uuid4()}")
        assert response.status_code == 404
        assert broadcaster.events == []
