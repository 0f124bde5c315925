"""
Role lookup for authenticated identities.

Fails closed: a missing profile or a failed read resolves to no role, which
every admin gate treats as "not admin".
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def resolve_role(db: Session, user_id: UUID) -> Optional[UserRole]:
    """Return the stored role for an identity, or None if it cannot be determined."""
    try:
        role = db.query(User.role).filter(User.user_id == user_id).scalar()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Role lookup failed for {user_id}: {e}")
        return None

    if role is None:
        logger.warning(f"No profile found for identity {user_id}")
    return role


def is_admin(db: Session, user_id: UUID) -> bool:
    return resolve_role(db, user_id) == UserRole.ADMIN
