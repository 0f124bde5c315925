"""
CRUD operations for User profiles.

Every function takes the acting Principal; reads are scoped by the row-level
policy and writes are checked against it.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.database import commit_or_raise
from app.core.exceptions import Forbidden, NotFoundOrDenied
from app.core.policies import Principal, can_insert_profile, can_modify_profile, scope_profiles
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def get_profile(db: Session, principal: Principal, user_id: UUID) -> Optional[User]:
    """Retrieve a profile visible to the principal."""
    query = db.query(User).filter(User.user_id == user_id)
    return scope_profiles(query, principal).first()


def list_profiles(db: Session, principal: Principal) -> List[User]:
    """List visible profiles, newest first."""
    query = scope_profiles(db.query(User), principal)
    return query.order_by(User.created_at.desc()).all()


def create_profile(db: Session, principal: Principal, user_id: UUID, email: str, role: UserRole) -> User:
    """
    Insert the profile for an existing identity.

    Only the elevated principal may insert profiles: callers never hold a
    policy that lets them write a row for an identity other than their own.

    Raises:
        Forbidden: If the principal is not elevated
        StoreError: If the insert failed (the session is rolled back)
    """
    if not can_insert_profile(principal):
        raise Forbidden("Profiles can only be created with service privileges")

    profile = User(user_id=user_id, email=email, role=role)
    db.add(profile)
    commit_or_raise(db, f"create profile for {email}")
    db.refresh(profile)

    return profile


def update_role(db: Session, principal: Principal, user_id: UUID, role: UserRole) -> User:
    """
    Set a profile's role in place.

    Raises:
        NotFoundOrDenied: If the profile is missing or not visible
        Forbidden: If the principal may see but not modify the profile
    """
    profile = get_profile(db, principal, user_id)
    if not profile:
        raise NotFoundOrDenied("User not found")
    if not can_modify_profile(principal):
        raise Forbidden("Only administrators can change roles")

    profile.role = role
    commit_or_raise(db, f"update role for {user_id}")
    db.refresh(profile)

    return profile


def delete_profile(db: Session, principal: Principal, user_id: UUID) -> bool:
    """
    Delete a profile together with its jobs and their candidates.

    Returns:
        True if deleted, False if not found or not visible
    """
    profile = get_profile(db, principal, user_id)
    if not profile:
        return False
    if not can_modify_profile(principal):
        raise Forbidden("Only administrators can delete users")

    job_count = len(profile.jobs)
    db.delete(profile)
    commit_or_raise(db, f"delete profile {user_id}")

    logger.info(f"Deleted profile {user_id} and {job_count} jobs")
    return True
