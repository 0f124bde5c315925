"""
Script to bootstrap an administrator account.

Only administrators can create accounts with roles, so the first one has to be
created from the command line. If the email already has an identity and a
profile, the profile is promoted to admin instead.

Run this script from the project root:
    python create_admin.py admin@example.com
"""

import argparse
import getpass
import os
import sys

# Add app to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.exceptions import AppError
from app.core.policies import Principal
from app.crud import user as user_crud
from app.models.user import UserRole
from app.services.identity_provider import IdentityAdmin


def create_admin(email: str, password: str) -> int:
    """Create or promote an admin. Returns a process exit code."""
    db = SessionLocal()
    try:
        identity_admin = IdentityAdmin(db, settings.SERVICE_ROLE_KEY)
        service = Principal.service()

        identity = identity_admin.get_identity_by_email(email)
        if identity is None:
            identity = identity_admin.create_user(email, password, email_confirm=True)
            print(f"Created identity {identity.id} for {identity.email}")

        profile = user_crud.get_profile(db, service, identity.id)
        if profile is None:
            user_crud.create_profile(db, service, identity.id, identity.email, UserRole.ADMIN)
            print(f"Created admin profile for {identity.email}")
        elif profile.role != UserRole.ADMIN:
            user_crud.update_role(db, service, identity.id, UserRole.ADMIN)
            print(f"Promoted {identity.email} to admin")
        else:
            print(f"{identity.email} is already an admin")

        return 0

    except AppError as e:
        print(f"\nFailed to create admin: {e.message}")
        return 1
    finally:
        db.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or promote an administrator account.")
    parser.add_argument("email")
    parser.add_argument("--password", help="Password for a new identity (prompted if omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("A password is required.")
        return 1

    return create_admin(args.email, password)


if __name__ == "__main__":
    sys.exit(main())
