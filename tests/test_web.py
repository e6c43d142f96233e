"""Tests for the HTTP API."""
import pytest
from fastapi.testclient import TestClient

from bookshelf.core.models import BookRecord
from bookshelf.web.app import app, get_enricher, get_store


@pytest.fixture
def client(store, enricher):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_enricher] = lambda: enricher
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.headers["X-Frame-Options"] == "DENY"


class TestSectionRoutes:
    def test_invalid_section(self, client):
        assert client.get("/api/wishlist").status_code == 400
        assert client.post("/api/wishlist", json={"title": "X"}).json() == {
            "message": "Invalid section"
        }

    def test_create_normalizes_and_enriches(self, client, store, open_library):
        open_library.results[("Ruin", "J. Doe")] = "http://covers.openlibrary.org/b/id/5-L.jpg"

        resp = client.post(
            "/api/library",
            json={
                "title": "Ruin",
                "author": "J. Doe",
                "genre": "Dark Romance, Suspense",
                "spice_level": "Medium",
                "cover_image_url": "https://placehold.co/150",
            },
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["coverUrl"] == "https://covers.openlibrary.org/b/id/5-L.jpg"
        assert body["genres"] == ["Dark Romance", "Suspense"]
        assert body["spice"] == 3
        assert body["section"] == "library"
        assert store.get(body["id"]).cover_url == body["coverUrl"]

    def test_create_without_cover_found(self, client):
        resp = client.post("/api/upcoming", json={"title": "Unknown"})
        assert resp.status_code == 201
        assert resp.json()["coverUrl"] is None

    def test_list(self, client, store):
        store.add(BookRecord(id="1", title="A", section="recommended", created_at=1.0))
        store.add(BookRecord(id="2", title="B", section="recommended", created_at=2.0))

        resp = client.get("/api/recommended")

        assert [b["id"] for b in resp.json()] == ["2", "1"]

    def test_update_merges(self, client, store):
        store.add(
            BookRecord(id="1", title="A", spice=1, genres=["Old"], cover_url="https://x/a.jpg")
        )

        resp = client.put("/api/library/1", json={"spice_level": "High", "isRead": True})

        assert resp.status_code == 200
        body = resp.json()
        assert body["spice"] == 5
        assert body["isRead"] is True
        assert body["genres"] == ["Old"]
        assert body["coverUrl"] == "https://x/a.jpg"
        assert store.get("1").spice == 5

    def test_update_missing(self, client):
        assert client.put("/api/library/nope", json={"title": "X"}).status_code == 404

    def test_update_wrong_section(self, client, store):
        store.add(BookRecord(id="1", title="A", section="upcoming"))
        assert client.put("/api/library/1", json={"title": "X"}).status_code == 404

    def test_delete(self, client, store):
        store.add(BookRecord(id="1", title="A"))
        assert client.delete("/api/library/1").status_code == 204
        assert store.get("1") is None
        assert client.delete("/api/library/1").status_code == 404


class TestMoveBook:
    def test_move(self, client, store):
        store.add(BookRecord(id="1", title="A", section="upcoming"))

        resp = client.post(
            "/api/move-book",
            json={"bookId": "1", "sourceSection": "upcoming", "destinationSection": "library"},
        )

        assert resp.status_code == 200
        assert resp.json() == {"message": "Book moved successfully"}
        assert store.get("1").section == "library"

    def test_invalid_payload(self, client):
        resp = client.post("/api/move-book", json={"bookId": "1", "sourceSection": "upcoming"})
        assert resp.status_code == 400

    def test_not_in_source(self, client, store):
        store.add(BookRecord(id="1", title="A", section="library"))
        resp = client.post(
            "/api/move-book",
            json={"bookId": "1", "sourceSection": "upcoming", "destinationSection": "library"},
        )
        assert resp.status_code == 404


class TestMalformedBodies:
    @pytest.mark.parametrize(
        "method, path",
        [("post", "/api/library"), ("put", "/api/library/1"), ("post", "/api/move-book")],
    )
    def test_bad_json_is_rejected(self, client, store, method, path):
        store.add(BookRecord(id="1", title="A"))

        resp = client.request(
            method.upper(), path, content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid payload"}

    def test_huge_title_does_not_fail_create(self, client, open_library):
        resp = client.post("/api/library", json={"title": "x" * 70000})
        assert resp.status_code == 201
        assert resp.json()["coverUrl"] is None
