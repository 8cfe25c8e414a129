"""
Bootstrap the owner account without going through /api/auth/setup-owner.

Idempotent: if the username already exists it is promoted to OWNER and its
password is reset; nothing else is touched.

Usage: python scripts/create_owner.py <username>
       (the password is prompted for)
"""

import getpass
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal
from app.models.admin import Admin, AdminRole
from app.auth.security import hash_password


def upsert_owner(db, username: str, password: str) -> Admin:
    admin = db.query(Admin).filter(Admin.username == username).first()
    if admin:
        admin.role = AdminRole.OWNER
        admin.is_active = True
        admin.password_hash = hash_password(password)
        print(f"  [UPDATE] {username} promoted to OWNER")
        return admin

    admin = Admin(
        username=username,
        password_hash=hash_password(password),
        role=AdminRole.OWNER,
        is_active=True,
    )
    db.add(admin)
    print(f"  [CREATE] {username} (OWNER)")
    return admin


def main():
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)

    username = sys.argv[1]
    password = getpass.getpass("Password: ")
    if len(password) < 6:
        print("[ERROR] Password must be at least 6 characters long")
        sys.exit(1)

    db = SessionLocal()
    try:
        admin = upsert_owner(db, username, password)
        db.commit()
        print(f"\n[OK] Owner ready: id={admin.id}")
    except Exception as e:
        db.rollback()
        print(f"\n[ERROR] Rollback. {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
