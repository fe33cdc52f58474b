# scripts/setup/seed_admin.py
"""
Create (or reset) the administrator account.
A random password is generated unless --password is given; it is printed
once and not stored anywhere else.
Usage: python scripts/setup/seed_admin.py [--email admin@example.com] [--password ...]
"""

import argparse
import secrets
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.config import settings
from app.database import SessionLocal, create_tables
from app.services.guard_service import MIN_PASSWORD_LENGTH, ensure_admin


def main():
    parser = argparse.ArgumentParser(description="Create or reset the admin account")
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--name", default=settings.ADMIN_NAME)
    parser.add_argument("--password", default=None)
    args = parser.parse_args()

    password = args.password or secrets.token_urlsafe(14)
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters")
        sys.exit(1)

    create_tables()
    db = SessionLocal()
    try:
        admin = ensure_admin(db, args.email, args.name, password)
    finally:
        db.close()

    print(f"✅ Admin created or updated: {admin.email}")
    print("---")
    print(f"🔑 Password (store it safely, change it later): {password}")
    print("---")


if __name__ == "__main__":
    main()
