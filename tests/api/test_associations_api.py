"""Tests for ``POST /api/v1/associations``."""

from __future__ import annotations

URL = "/api/v1/associations"


def _post(client, post_type, title, status="publish"):
    resp = client.post("/api/v1/posts", json={"post_type": post_type, "title": title, "status": status})
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestEditCapability:
    def test_missing_token_forbidden(self, guarded_client):
        resp = guarded_client.post(URL, json={"sourceId": 1, "targetId": 2})
        assert resp.status_code == 403
        body = resp.json()
        assert body["status"] == 403
        assert body["title"] == "Forbidden"

    def test_wrong_token_forbidden(self, guarded_client):
        resp = guarded_client.post(URL, json={"sourceId": 1, "targetId": 2}, headers={"X-Edit-Token": "nope"})
        assert resp.status_code == 403

    def test_valid_token(self, guarded_client, edit_token):
        resp = guarded_client.post(URL, json={"sourceId": 1, "targetId": 2}, headers={"X-Edit-Token": edit_token})
        assert resp.status_code == 200


class TestAssociate:
    def test_not_participating(self, client):
        resp = client.post(URL, json={"sourceId": 999, "targetId": 2})
        assert resp.status_code == 200
        assert resp.json() == {
            "success": False,
            "message": "Source post does not have an index category",
            "posts": [],
        }

    def test_malformed_ids_are_zero(self, client):
        resp = client.post(URL, json={"sourceId": "abc", "targetId": None})
        assert resp.status_code == 200
        assert resp.json()["success"] is False

    def test_pending(self, client):
        source = _post(client, "example", "Apple", status="draft")
        target = _post(client, "another-example", "Yellow")

        for _ in range(2):
            resp = client.post(URL, json={"sourceId": source["id"], "targetId": target["id"]})
            assert resp.status_code == 200
            assert resp.json() == {
                "success": True,
                "message": "Association saved as pending",
                "posts": [target["id"]],
            }

        post = client.get(f"/api/v1/posts/{source['id']}").json()["data"]
        assert post["associated_posts"] == [target["id"]]

    def test_live(self, client):
        source = _post(client, "example", "Apple")
        target = _post(client, "another-example", "Yellow")

        resp = client.post(URL, json={"sourceId": str(source["id"]), "targetId": target["id"]})

        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Association created"
        assert body["posts"] == [target["id"]]

        related = client.get(f"/api/v1/index-entries/{source['shadow_term_id']}/related").json()
        assert related["data"]["posts"] == [target["id"]]

    def test_snake_case_body(self, client):
        source = _post(client, "example", "Apple", status="draft")
        resp = client.post(URL, json={"source_id": source["id"], "target_id": 5})
        assert resp.json()["posts"] == [5]
