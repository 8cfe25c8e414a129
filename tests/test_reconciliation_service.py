"""Tests for reaction/comment reconciliation (app/services/reconciliation.py)"""
import pytest

from app.exceptions import MissingFieldsError, NotFoundError, ValidationFailed
from app.models.comment import Comment
from app.models.reaction import Reaction, ReactionType
from app.services import reconciliation as rec


def _reactions(db, **criteria):
    query = db.query(Reaction)
    for key, value in criteria.items():
        query = query.filter(getattr(Reaction, key) == value)
    return query.all()


class TestSaveReaction:
    def test_add_stores_normalized_record(self, db_session):
        result = rec.save_reaction(db_session, {
            "user_id": "u1", "reaction_type": "love", "post_id": "p1", "action_type": "added",
        })

        assert result.removed is False
        assert result.record.reaction_type == ReactionType.LOVE
        assert result.record.action_type == "ADDED"
        assert result.data["reaction_type"] == "LOVE"
        assert len(_reactions(db_session, user_id="u1", post_id="p1")) == 1

    def test_missing_action_type_defaults_to_added(self, db_session):
        result = rec.save_reaction(db_session, {"user_id": "u1", "reaction_type": "LIKE"})
        assert result.record.action_type == "ADDED"

    def test_duplicate_adds_produce_two_rows(self, db_session):
        payload = {"user_id": "u1", "reaction_type": "LIKE", "post_id": "p1"}
        rec.save_reaction(db_session, payload)
        rec.save_reaction(db_session, payload)
        assert len(_reactions(db_session, user_id="u1")) == 2

    def test_remove_erases_every_matching_row(self, db_session):
        add = {"user_id": "u1", "reaction_type": "LOVE", "post_id": "p1"}
        rec.save_reaction(db_session, add)
        rec.save_reaction(db_session, add)
        rec.save_reaction(db_session, {**add, "reaction_type": "LIKE"})

        result = rec.save_reaction(db_session, {**add, "action_type": "removed"})

        assert result.removed is True
        assert result.deleted_count == 2
        assert result.action.verb == "REMOVED"
        assert result.key == {"user_id": "u1", "post_id": "p1", "reaction_type": "LOVE"}
        remaining = _reactions(db_session, user_id="u1")
        assert [r.reaction_type for r in remaining] == [ReactionType.LIKE]

    def test_remove_without_prior_add_is_zero(self, db_session):
        result = rec.save_reaction(db_session, {
            "user_id": "u9", "reaction_type": "WOW", "post_id": "p1", "action_type": "DELETE",
        })
        assert result.deleted_count == 0
        assert result.action.verb == "DELETED"
        summary = rec.removal_summary(result, "Reaction")
        assert summary["success"] is True
        assert summary["note"] == "No existing reaction found to remove"
        assert summary["message"] == "Reaction deleted from database - no history kept"

    def test_missing_mandatory_fields(self, db_session):
        with pytest.raises(MissingFieldsError) as exc:
            rec.save_reaction(db_session, {"post_id": "p1"})
        assert exc.value.fields == ["user_id", "reaction_type"]

    def test_unknown_reaction_type(self, db_session):
        with pytest.raises(ValidationFailed) as exc:
            rec.save_reaction(db_session, {"user_id": "u1", "reaction_type": "meh"})
        assert "LIKE" in exc.value.context["allowed"]

    def test_unknown_fields_kept_in_extra(self, db_session):
        result = rec.save_reaction(db_session, {
            "user_id": "u1", "reaction_type": "HAHA", "platform": "facebook", "page_id": "pg1",
        })
        assert result.record.extra == {"platform": "facebook", "page_id": "pg1"}
        assert result.data["platform"] == "facebook"

    def test_previous_reaction_and_custom_action_normalized(self, db_session):
        result = rec.save_reaction(db_session, {
            "user_id": "u1", "reaction_type": "SAD", "previous_reaction": "like",
            "custom_action": "  switched  ", "action_type": "changed",
        })
        assert result.record.previous_reaction == "LIKE"
        assert result.record.custom_action == "switched"
        assert result.record.action_type == "CHANGED"

    def test_added_payload(self, db_session):
        result = rec.save_reaction(db_session, {"user_id": "u1", "reaction_type": "LIKE", "post_id": "p1"})
        payload = rec.reaction_added_payload(result)
        assert payload["webhook_type"] == "REACTION_ADDED"
        assert payload["action"] == "ADDED"
        assert payload["user_id"] == "u1"
        assert "timestamp" in payload

    def test_removal_payload(self, db_session):
        result = rec.save_reaction(db_session, {
            "user_id": "u1", "reaction_type": "LIKE", "post_id": "p1", "action_type": "remove",
        })
        payload = rec.removal_payload(result, "REACTION_REMOVED")
        assert payload["verb"] == "REMOVED"
        assert payload["action"] == "REMOVED_FROM_DATABASE"
        assert payload["webhook_type"] == "REACTION_REMOVED"
        assert payload["deleted_count"] == 0
        assert payload["reaction_type"] == "LIKE"


class TestCurrentReaction:
    def test_no_reaction(self, db_session):
        state = rec.current_reaction(db_session, "u1", "p1")
        assert state["has_reaction"] is False

    def test_latest_surviving_row(self, db_session):
        rec.save_reaction(db_session, {"user_id": "u1", "reaction_type": "LIKE", "post_id": "p1"})
        rec.save_reaction(db_session, {"user_id": "u1", "reaction_type": "WOW", "post_id": "p1"})

        state = rec.current_reaction(db_session, "u1", "p1")

        assert state["has_reaction"] is True
        assert state["current_reaction"] == "WOW"
        assert state["last_action"] == "ADDED"


class TestFindReactions:
    def test_filters(self, db_session):
        rec.save_reaction(db_session, {"user_id": "u1", "reaction_type": "LIKE", "post_id": "p1"})
        rec.save_reaction(db_session, {"user_id": "u2", "reaction_type": "LOVE", "post_id": "p1", "custom_action": "promo"})

        assert len(rec.find_reactions(db_session, post_id="p1")) == 2
        assert [r.user_id for r in rec.find_reactions(db_session, reaction_type="love")] == ["u2"]
        assert [r.user_id for r in rec.find_reactions(db_session, custom_action="PRO")] == ["u2"]
        assert rec.find_reactions(db_session, reaction_type="bogus") == []

    def test_stats(self, db_session):
        for user in ("u1", "u1", "u2"):
            rec.save_reaction(db_session, {"user_id": user, "reaction_type": "LIKE", "post_id": "p1"})

        stats = rec.reaction_stats(db_session)

        assert stats["totalReactions"] == 3
        assert stats["reactionsByType"] == [{"reaction_type": "LIKE", "count": 3}]
        assert stats["topUsers"][0]["user_id"] == "u1"
        assert stats["topUsers"][0]["count"] == 2


COMMENT = {"user_id": "u1", "comment": "nice", "comment_id": "c1", "post_id": "p1"}


class TestSaveComment:
    def test_add(self, db_session):
        result = rec.save_comment(db_session, {**COMMENT, "user_name": "Ana"})
        assert result.record.name == "Ana"
        assert result.record.action_type == "ADDED"
        assert result.data["comment_id"] == "c1"

    def test_name_takes_precedence_over_user_name(self, db_session):
        result = rec.save_comment(db_session, {**COMMENT, "name": "Ana B.", "user_name": "Ana"})
        assert result.record.name == "Ana B."

    def test_missing_fields(self, db_session):
        with pytest.raises(MissingFieldsError) as exc:
            rec.save_comment(db_session, {"user_id": "u1"})
        assert exc.value.fields == ["comment", "comment_id", "post_id"]

    def test_remove_by_key(self, db_session):
        rec.save_comment(db_session, COMMENT)
        rec.save_comment(db_session, {**COMMENT, "comment_id": "c2"})

        result = rec.save_comment(db_session, {**COMMENT, "action_type": "comment_deleted"})

        assert result.deleted_count == 1
        assert result.action.verb == "DELETED"
        assert [c.comment_id for c in db_session.query(Comment).all()] == ["c2"]
        summary = rec.removal_summary(result, "Comment")
        assert summary["note"] == "Comment successfully removed"
        assert summary["removed_data"] == {"user_id": "u1", "comment_id": "c1", "post_id": "p1"}


class TestReplies:
    def test_create_reply(self, db_session):
        rec.save_comment(db_session, COMMENT)

        result = rec.create_reply(db_session, {
            "parent_comment_id": "c1", "reply_text": "thanks!", "user_id": "page", "post_id": "p1",
        })

        assert result.reply.action_type == "REPLY"
        assert result.reply.parent_comment_id == "c1"
        assert result.reply.comment_id.startswith("reply_")
        assert result.parent_deleted is False
        assert db_session.query(Comment).count() == 2

    def test_delete_after_reply_removes_parent(self, db_session):
        rec.save_comment(db_session, COMMENT)

        result = rec.create_reply(db_session, {
            "parent_comment_id": "c1", "reply_text": "removed", "user_id": "page",
            "post_id": "p1", "delete_after_reply": True,
        })

        assert result.parent_deleted is True
        assert result.deleted_parent["comment"] == "nice"
        assert db_session.query(Comment).filter(Comment.comment_id == "c1").first() is None
        payload = rec.reply_parent_deleted_payload(result, "moderator")
        assert payload["action"] == "DELETE_AFTER_REPLY"
        assert payload["reply_id"] == result.reply.comment_id

    def test_reply_missing_fields(self, db_session):
        with pytest.raises(MissingFieldsError):
            rec.create_reply(db_session, {"parent_comment_id": "c1"})

    def test_reply_ids_are_unique(self):
        assert rec.generate_reply_id() != rec.generate_reply_id()


class TestDeleteComment:
    def test_platform_only_keeps_row(self, db_session):
        rec.save_comment(db_session, COMMENT)
        payload = rec.delete_comment(db_session, "c1", "platform", "moderator")
        assert payload["delete_option"] == "platform"
        assert payload["comment_data"]["comment"] == "nice"
        assert db_session.query(Comment).count() == 1

    @pytest.mark.parametrize("option", ["database", "both"])
    def test_database_options_remove_row(self, db_session, option):
        rec.save_comment(db_session, COMMENT)
        rec.delete_comment(db_session, "c1", option, "moderator")
        assert db_session.query(Comment).count() == 0

    def test_unknown_comment(self, db_session):
        with pytest.raises(NotFoundError):
            rec.delete_comment(db_session, "nope", "both", "moderator")

    def test_comment_stats_counts_replies(self, db_session):
        rec.save_comment(db_session, COMMENT)
        rec.create_reply(db_session, {
            "parent_comment_id": "c1", "reply_text": "hi", "user_id": "page", "post_id": "p1",
        })
        stats = rec.comment_stats(db_session)
        assert stats["totalComments"] == 2
        assert stats["totalReplies"] == 1
