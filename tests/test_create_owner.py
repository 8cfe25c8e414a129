"""Tests for the owner bootstrap script (scripts/create_owner.py)"""
from unittest.mock import patch

from app.models.admin import Admin, AdminRole
from scripts.create_owner import upsert_owner


@patch("scripts.create_owner.hash_password", return_value="hashed")
def test_creates_owner(mock_hash, db_session):
    upsert_owner(db_session, "boss", "secret1")
    db_session.commit()

    owner = db_session.query(Admin).one()
    assert owner.role == AdminRole.OWNER
    assert owner.password_hash == "hashed"


@patch("scripts.create_owner.hash_password", return_value="rehashed")
def test_promotes_existing_admin(mock_hash, db_session):
    db_session.add(Admin(username="mod", password_hash="old", role=AdminRole.ADMIN, is_active=False))
    db_session.commit()

    upsert_owner(db_session, "mod", "secret1")
    db_session.commit()

    admin = db_session.query(Admin).one()
    assert admin.role == AdminRole.OWNER
    assert admin.is_active is True
    assert admin.password_hash == "rehashed"
