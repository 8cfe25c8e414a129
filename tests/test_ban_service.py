"""Tests for bans, user data removal and cleanup (app/services/bans.py)"""
from datetime import datetime, timedelta, timezone

import pytest

from app.exceptions import BanConflictError, MissingFieldsError, NotFoundError, ValidationFailed
from app.models.comment import Comment
from app.models.order import Order, OrderStatus
from app.models.reaction import Reaction, ReactionType
from app.models.user_ban import BanType, UserBan
from app.services import bans


BAN = {"user_id": "u1", "ban_type": "reaction", "banned_by": "moderator", "reason": "spam"}


def _order(order_id, sender, recipient):
    return Order(
        order_id=order_id, name="Ana", number="555", address="Street 1",
        product_name="Mug", total_product=1, total_price=10.0,
        sender_id=sender, recipient_id=recipient, status=OrderStatus.PENDING, extra={},
    )


class TestCreateBan:
    def test_creates_active_ban(self, db_session):
        ban = bans.create_ban(db_session, BAN)
        assert ban.is_active is True
        assert ban.ban_type == BanType.REACTION
        assert bans.active_ban(db_session, "u1").id == ban.id

    def test_second_ban_conflicts_and_keeps_original(self, db_session):
        original = bans.create_ban(db_session, BAN)

        with pytest.raises(BanConflictError) as exc:
            bans.create_ban(db_session, {**BAN, "ban_type": "ALL", "reason": "again"})

        assert exc.value.status_code == 409
        existing = exc.value.context["existing_ban"]
        assert existing["ban_id"] == original.id
        assert existing["ban_type"] == "REACTION"
        assert existing["reason"] == "spam"
        assert exc.value.context["can_remove_data"] is True
        assert db_session.query(UserBan).count() == 1

    def test_requires_banned_by(self, db_session):
        with pytest.raises(MissingFieldsError) as exc:
            bans.create_ban(db_session, {"user_id": "u1", "ban_type": "ALL"})
        assert exc.value.fields == ["banned_by"]

    def test_invalid_ban_type(self, db_session):
        with pytest.raises(ValidationFailed) as exc:
            bans.create_ban(db_session, {**BAN, "ban_type": "forever"})
        assert exc.value.context["allowed"] == ["REACTION", "COMMENT", "ALL"]


class TestUnban:
    def test_unban_keeps_record(self, db_session):
        bans.create_ban(db_session, BAN)

        ban = bans.unban(db_session, "u1")

        assert ban.is_active is False
        assert db_session.query(UserBan).count() == 1
        assert bans.active_ban(db_session, "u1") is None

    def test_rebanning_after_unban_is_allowed(self, db_session):
        bans.create_ban(db_session, BAN)
        bans.unban(db_session, "u1")
        bans.create_ban(db_session, BAN)
        assert db_session.query(UserBan).count() == 2

    def test_unban_unknown_user(self, db_session):
        with pytest.raises(NotFoundError):
            bans.unban(db_session, "ghost")


class TestListBans:
    def test_filter_and_pagination(self, db_session):
        bans.create_ban(db_session, BAN)
        bans.create_ban(db_session, {**BAN, "user_id": "u2", "ban_type": "COMMENT"})
        bans.create_ban(db_session, {**BAN, "user_id": "u3", "ban_type": "COMMENT"})
        bans.unban(db_session, "u3")

        _, total = bans.list_bans(db_session)
        assert total == 2

        rows, total = bans.list_bans(db_session, "comment")
        assert total == 1
        assert rows[0].user_id == "u2"

        rows, total = bans.list_bans(db_session, "ALL", page=2, limit=1)
        assert total == 2
        assert len(rows) == 1

    def test_stats(self, db_session):
        bans.create_ban(db_session, BAN)
        bans.create_ban(db_session, {**BAN, "user_id": "u2", "ban_type": "ALL"})

        stats = bans.ban_stats(db_session)

        assert stats == {
            "totalBanned": 2, "reactionBans": 1, "commentBans": 0, "allBans": 1, "recentBans": 2,
        }


class TestRemoveUserData:
    def test_removes_everything_for_user(self, db_session):
        for _ in range(3):
            db_session.add(Reaction(user_id="u1", reaction_type=ReactionType.LIKE, post_id="p1", extra={}))
        db_session.add(Reaction(user_id="u2", reaction_type=ReactionType.LIKE, post_id="p1", extra={}))
        for cid in ("c1", "c2"):
            db_session.add(Comment(user_id="u1", comment="hi", comment_id=cid, post_id="p1", extra={}))
        db_session.add(_order("ORD1", "u1", "page"))
        db_session.add(_order("ORD2", "page", "u2"))
        db_session.commit()

        counts = bans.remove_user_data(db_session, "u1")

        assert counts.as_dict() == {"reactions": 3, "comments": 2, "orders": 1}
        assert counts.total == 6
        assert db_session.query(Reaction).filter(Reaction.user_id == "u1").count() == 0
        assert db_session.query(Comment).filter(Comment.user_id == "u1").count() == 0
        assert db_session.query(Reaction).count() == 1
        assert [o.order_id for o in db_session.query(Order).all()] == ["ORD2"]

    def test_recipient_orders_removed(self, db_session):
        db_session.add(_order("ORD1", "page", "u1"))
        db_session.commit()
        assert bans.remove_user_data(db_session, "u1").orders == 1

    def test_nothing_to_remove(self, db_session):
        assert bans.remove_user_data(db_session, "nobody").total == 0


class TestCleanup:
    def test_deletes_only_old_rows(self, db_session):
        old = datetime.now(timezone.utc) - timedelta(days=45)
        db_session.add(Reaction(user_id="u1", reaction_type=ReactionType.LIKE, extra={}, created_at=old))
        db_session.add(Reaction(user_id="u1", reaction_type=ReactionType.LOVE, extra={}))
        db_session.add(Comment(user_id="u1", comment="old", comment_id="c1", post_id="p1", extra={}, created_at=old))
        db_session.commit()

        result = bans.cleanup_old_data(db_session, retention_days=30)

        assert result.deleted_reactions == 1
        assert result.deleted_comments == 1
        assert result.total == 2
        assert db_session.query(Reaction).count() == 1
        assert db_session.query(Comment).count() == 0

    def test_default_retention_from_settings(self, db_session):
        result = bans.cleanup_old_data(db_session)
        assert result.total == 0
