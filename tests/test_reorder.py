"""
Tests for the reorder endpoint and engine.
"""
import uuid
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from organizer.models.folder import Folder
from organizer.models.item import Item
from organizer.schemas.events import EventKind
from organizer.services.entity_store import ItemStore


def _orders(db: Session, folder_id=None):
    db.expire_all()
    return [
        (i.title, i.order)
        for i in ItemStore(db).find_by_container(folder_id)
    ]


class TestReorderItems:
    """Tests for item reassignment batches."""

    def test_reorder_within_root(self, client: TestClient, broadcaster, make_item, db: Session):
        """Test dragging B to the top of [A, B, C]."""
        a = make_item("A", order=0)
        b = make_item("B", order=1)
        c = make_item("C", order=2)
        batch = {
            "items": [
                {"id": str(b.id), "order": 0, "folder_id": None},
                {"id": str(a.id), "order": 1, "folder_id": None},
                {"id": str(c.id), "order": 2, "folder_id": None},
            ]
        }

        response = client.put("/api/v1/reorder", json=batch)
        assert response.status_code == 200
        assert response.json() == {"message": "Reorder successful"}

        assert _orders(db) == [("B", 0), ("A", 1), ("C", 2)]

        kind, payload = broadcaster.events[0]
        assert kind == EventKind.REORDER
        assert payload["items"] == batch["items"]
        assert payload["folders"] == []

    def test_reorder_across_containers(
        self, client: TestClient, broadcaster, make_folder, make_item, db: Session
    ):
        """Test dragging A from root into folder F at index 0."""
        folder = make_folder("F")
        x = make_item("X", order=0, folder=folder)
        a = make_item("A", order=0)
        b = make_item("B", order=1)
        batch = {
            "items": [
                {"id": str(b.id), "order": 0, "folder_id": None},
                {"id": str(a.id), "order": 0, "folder_id": str(folder.id)},
                {"id": str(x.id), "order": 1, "folder_id": str(folder.id)},
            ]
        }

        response = client.put("/api/v1/reorder", json=batch)
        assert response.status_code == 200

        assert _orders(db) == [("B", 0)]
        assert _orders(db, folder.id) == [("A", 0), ("X", 1)]
        assert len(broadcaster.events) == 1

    def test_reorder_orders_are_dense(self, client: TestClient, make_item, db: Session):
        """Test that every member ends up with a distinct order in 0..n-1."""
        items = [make_item(f"I{n}", order=n * 10) for n in range(5)]
        shuffled = [items[3], items[0], items[4], items[1], items[2]]
        batch = {
            "items": [
                {"id": str(item.id), "order": position, "folder_id": None}
                for position, item in enumerate(shuffled)
            ]
        }

        response = client.put("/api/v1/reorder", json=batch)
        assert response.status_code == 200

        orders = [order for _, order in _orders(db)]
        assert sorted(orders) == list(range(5))

    def test_reorder_skips_unknown_ids(self, client: TestClient, broadcaster, make_item, db: Session):
        """Test that records deleted in the meantime do not fail the batch."""
        a = make_item("A", order=1)
        batch = {
            "items": [
                {"id": str(uuid.uuid4()), "order": 0, "folder_id": None},
                {"id": str(a.id), "order": 0, "folder_id": None},
            ]
        }

        response = client.put("/api/v1/reorder", json=batch)
        assert response.status_code == 200
        assert _orders(db) == [("A", 0)]
        assert broadcaster.kinds() == [EventKind.REORDER]

    def test_reorder_empty_batch(self, client: TestClient, broadcaster):
        """Test that an empty batch is accepted and broadcast as is."""
        response = client.put("/api/v1/reorder", json={})
        assert response.status_code == 200
        assert broadcaster.events == [(EventKind.REORDER, {"items": [], "folders": []})]

    def test_reorder_invalid_payload(self, client: TestClient, broadcaster):
        """Test that malformed assignments are rejected."""
        response = client.put(
            "/api/v1/reorder", json={"items": [{"id": "nope", "order": 0}]}
        )
        assert response.status_code == 422
        assert broadcaster.events == []


class TestReorderFolders:
    """Tests for folder reassignment batches."""

    def test_reorder_folders(self, client: TestClient, broadcaster, make_folder, db: Session):
        """Test moving the last folder to the top."""
        first = make_folder("First", order=0)
        second = make_folder("Second", order=1)
        third = make_folder("Third", order=2)
        batch = {
            "folders": [
                {"id": str(third.id), "order": 0},
                {"id": str(first.id), "order": 1},
                {"id": str(second.id), "order": 2},
            ]
        }

        response = client.put("/api/v1/reorder", json=batch)
        assert response.status_code == 200

        db.expire_all()
        names = [f.name for f in db.query(Folder).order_by(Folder.order).all()]
        assert names == ["Third", "First", "Second"]
        assert broadcaster.events[0][1]["folders"] == batch["folders"]


class TestReorderFailure:
    """Tests for failed batches."""

    def test_store_unavailable_no_broadcast(self, client: TestClient, broadcaster, make_item):
        """Test that an unreachable store fails the batch without broadcasting."""
        a = make_item("A", order=0)
        batch = {"items": [{"id": str(a.id), "order": 1, "folder_id": None}]}

        with patch.object(
            ItemStore,
            "update_fields",
            side_effect=OperationalError("UPDATE", {}, Exception("store down")),
        ):
            response = client.put("/api/v1/reorder", json=batch)

        assert response.status_code == 503
        assert broadcaster.events == []

    def test_missing_destination_folder_fails_batch(
        self, client: TestClient, broadcaster, make_item, db: Session
    ):
        """Test that moving an item into a deleted folder is rejected without orphaning it."""
        a = make_item("A", order=0)
        b = make_item("B", order=1)
        a_id, b_id = a.id, b.id
        batch = {
            "items": [
                {"id": str(b_id), "order": 0, "folder_id": None},
                {"id": str(a_id), "order": 0, "folder_id": str(uuid.uuid4())},
            ]
        }

        response = client.put("/api/v1/reorder", json=batch)

        assert response.status_code == 503
        assert broadcaster.events == []

        db.expire_all()
        assert db.query(Item).filter(Item.id == a_id).one().folder_id is None
        # Other writes of the batch are still applied
        assert db.query(Item).filter(Item.id == b_id).one().order == 0

    def test_partial_batch_is_not_rolled_back(
        self, client: TestClient, broadcaster, make_item, db: Session
    ):
        """Test that writes before a failure stay applied and nothing is broadcast."""
        a = make_item("A", order=0)
        b = make_item("B", order=1)
        a_id, b_id = a.id, b.id
        original = ItemStore.update_fields

        def flaky(store, record_id, partial):
            if record_id == b_id:
                raise OperationalError("UPDATE", {}, Exception("lost connection"))
            return original(store, record_id, partial)

        batch = {
            "items": [
                {"id": str(a_id), "order": 5, "folder_id": None},
                {"id": str(b_id), "order": 0, "folder_id": None},
            ]
        }
        with patch.object(ItemStore, "update_fields", flaky):
            response = client.put("/api/v1/reorder", json=batch)

        assert response.status_code == 503
        assert broadcaster.events == []

        db.expire_all()
        assert db.query(Item).filter(Item.id == a_id).one().order == 5
        assert db.query(Item).filter(Item.id == b_id).one().order == 1
