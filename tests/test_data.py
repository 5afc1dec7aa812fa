"""
Tests for the full-state snapshot endpoint.
"""

from fastapi.testclient import TestClient


class TestGetData:
    """Tests for GET /data."""

    def test_get_data_empty(self, client: TestClient):
        """Test snapshot of an empty store."""
        response = client.get("/api/v1/data")
        assert response.status_code == 200
        assert response.json() == {"items": [], "folders": []}

    def test_get_data_sorted_by_order(self, client: TestClient, make_folder, make_item):
        """Test that items and folders come back sorted by order."""
        second = make_folder("Second", order=1)
        first = make_folder("First", order=0)
        make_item("C", order=2)
        make_item("A", order=0)
        make_item("X", order=0, folder=first)
        make_item("B", order=1)

        response = client.get("/api/v1/data")
        assert response.status_code == 200
        data = response.json()

        assert [f["name"] for f in data["folders"]] == ["First", "Second"]
        root = [i["title"] for i in data["items"] if i["folder_id"] is None]
        assert root == ["A", "B", "C"]
        in_first = [i for i in data["items"] if i["folder_id"] == str(first.id)]
        assert [i["title"] for i in in_first] == ["X"]
        assert all(i["folder_id"] != str(second.id) for i in data["items"])
