"""Tests for the index router."""

from __future__ import annotations


def _publish(client, title, post_type="example"):
    resp = client.post("/api/v1/posts", json={"post_type": post_type, "title": title, "status": "publish"})
    return resp.json()["data"]


class TestIndexCategories:
    def test_list(self, client):
        _publish(client, "Apple")
        data = client.get("/api/v1/index-categories").json()["data"]
        by_slug = {c["slug"]: c for c in data}
        assert by_slug["example_connect"]["entry_count"] == 1
        assert by_slug["example_connect"]["post_type"] == "example"

    def test_entries(self, client):
        apple = _publish(client, "Apple")
        body = client.get("/api/v1/index-categories/example_connect/entries").json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["name"] == "Apple"
        assert body["data"][0]["post_id"] == apple["id"]

    def test_entries_unknown_category(self, client):
        resp = client.get("/api/v1/index-categories/nope/entries")
        assert resp.status_code == 404


class TestIndexEntries:
    def test_entry_post(self, client):
        apple = _publish(client, "Apple")
        data = client.get(f"/api/v1/index-entries/{apple['shadow_term_id']}/post").json()["data"]
        assert data["id"] == apple["id"]
        assert data["title"] == "Apple"

    def test_related_missing(self, client):
        assert client.get("/api/v1/index-entries/999/related").status_code == 404
