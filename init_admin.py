#!/usr/bin/env python3
"""
Script to create the initial admin account
Usage: python init_admin.py <email> <password> [name]
       (falls back to ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME)
"""

import logging
import sys

from ptrecord.config import ADMIN_EMAIL, ADMIN_NAME, ADMIN_PASSWORD
from ptrecord.database import Base, SessionLocal, engine
from ptrecord.domain.accounts.service import AccountService
from ptrecord.shared.exceptions import ConflictError

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def init_admin(email: str, password: str, name: str) -> int:
    Base.metadata.create_all(bind=engine, checkfirst=True)

    db = SessionLocal()
    try:
        admin = AccountService(db).ensure_admin(email, password, name)
        logger.info(f"✅ Admin ready: {admin.email} (id={admin.id})")
        return 0
    except ConflictError as e:
        logger.error(f"❌ {e.detail}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    args = sys.argv[1:]
    email = args[0] if len(args) > 0 else ADMIN_EMAIL
    password = args[1] if len(args) > 1 else ADMIN_PASSWORD
    name = args[2] if len(args) > 2 else ADMIN_NAME

    if not email or not password:
        print("Usage: python init_admin.py <email> <password> [name]")
        sys.exit(1)

    sys.exit(init_admin(email, password, name))
