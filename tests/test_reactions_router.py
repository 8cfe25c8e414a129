"""Tests for reaction endpoints (app/routers/reactions.py)"""
from unittest.mock import patch

from app.models.reaction import Reaction


class TestSaveReaction:
    def test_add_then_remove(self, sqlite_client):
        client, db = sqlite_client

        resp = client.post("/api/save-reaction", json={
            "user_id": "u1", "post_id": "p1", "reaction_type": "LOVE", "action_type": "added",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Reaction data saved successfully. Action: ADDED"
        assert body["data"]["reaction_type"] == "LOVE"

        resp = client.post("/api/save-reaction", json={
            "user_id": "u1", "post_id": "p1", "reaction_type": "LOVE", "action_type": "removed",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["verb"] == "REMOVED"
        assert body["deleted_count"] == 1
        assert body["removed_data"] == {"user_id": "u1", "post_id": "p1", "reaction_type": "LOVE"}
        assert db.query(Reaction).count() == 0

    def test_numeric_ids_accepted(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.post("/api/save-reaction", json={"user_id": 123, "post_id": 9, "reaction_type": "like"})
        assert resp.status_code == 201
        assert resp.json()["data"]["user_id"] == "123"

    def test_missing_fields_named(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.post("/api/save-reaction", json={"post_id": "p1"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["missing_fields"] == ["user_id", "reaction_type"]

    def test_numeric_reaction_type_is_a_validation_error(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.post("/api/save-reaction", json={"user_id": "u1", "reaction_type": 5})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid reaction_type: 5"
        assert "LIKE" in resp.json()["allowed"]

    def test_numeric_name_accepted(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.post("/api/save-reaction", json={"user_id": "u1", "reaction_type": "LIKE", "name": 12})
        assert resp.status_code == 201
        assert resp.json()["data"]["name"] == "12"

    def test_invalid_reaction_type(self, sqlite_client):
        client, _ = sqlite_client
        resp = client.post("/api/save-reaction", json={"user_id": "u1", "reaction_type": "MEH"})
        assert resp.status_code == 400
        assert "allowed" in resp.json()

    def test_publishes_removal_event(self, sqlite_client):
        client, _ = sqlite_client
        with patch("app.routers.reactions.publish_event") as mock_publish:
            client.post("/api/save-reaction", json={
                "user_id": "u1", "post_id": "p1", "reaction_type": "LIKE", "action_type": "delete",
            })

        args = mock_publish.call_args[0]
        assert args[1].value == "REACTION"
        assert args[2]["action"] == "DELETED_FROM_DATABASE"
        assert args[2]["webhook_type"] == "REACTION_REMOVED"
        assert args[3] == "reaction_removed"

    def test_ingress_is_public(self, unauthenticated_client, mock_db):
        client, _ = unauthenticated_client
        with patch("app.routers.reactions.rec.save_reaction") as mock_save, \
                patch("app.routers.reactions.publish_event"):
            mock_save.return_value.removed = False
            mock_save.return_value.action.action_type = "ADDED"
            mock_save.return_value.data = {"user_id": "u1"}
            resp = client.post("/api/save-reaction", json={"user_id": "u1", "reaction_type": "LIKE"})
        assert resp.status_code == 201


class TestReactionQueries:
    def _seed(self, client):
        for user, kind in (("u1", "LIKE"), ("u1", "WOW"), ("u2", "LIKE")):
            client.post("/api/save-reaction", json={"user_id": user, "post_id": "p1", "reaction_type": kind})

    def test_all_reactions_paginated(self, sqlite_client):
        client, _ = sqlite_client
        self._seed(client)

        resp = client.get("/api/all-reactions?page=1&limit=2")

        body = resp.json()
        assert resp.status_code == 200
        assert body["count"] == 3
        assert len(body["data"]) == 2
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

    def test_current_reaction(self, sqlite_client):
        client, _ = sqlite_client
        self._seed(client)
        body = client.get("/api/current-reaction/u1/p1").json()
        assert body["has_reaction"] is True
        assert body["current_reaction"] == "WOW"

    def test_find_and_user_reactions(self, sqlite_client):
        client, _ = sqlite_client
        self._seed(client)
        assert client.get("/api/find-reactions?reaction_type=like").json()["count"] == 2
        assert client.get("/api/user-reactions/u2").json()["count"] == 1

    def test_stats(self, sqlite_client):
        client, _ = sqlite_client
        self._seed(client)
        stats = client.get("/api/reaction-stats").json()["stats"]
        assert stats["totalReactions"] == 3

    def test_queries_require_auth(self, unauthenticated_client):
        client, _ = unauthenticated_client
        assert client.get("/api/all-reactions").status_code == 401
