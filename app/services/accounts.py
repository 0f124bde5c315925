"""
Account lifecycle operations.

Creating and deleting an account spans two stores: the identity provider and
the profile table. Neither step can be rolled back by the other's transaction,
so each operation orders its steps so that a failure leaves the smallest
possible mess, and reports what is left when cleanup is impossible.

All operations re-check the caller's role against the store; a role claimed
by the client is never trusted.
"""

import logging
from typing import Optional, Tuple
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from app.core.database import commit_or_raise
from app.core.exceptions import (
    AppError,
    Forbidden,
    NotFoundOrDenied,
    PartialFailure,
    SelfDeletionError,
    StoreError,
    ValidationError,
)
from app.core.policies import Principal
from app.crud import user as user_crud
from app.models.identity import AccountIdentity
from app.models.user import User, UserRole
from app.services.identity_provider import IdentityAdmin, IdentityProvider
from app.services.role_resolver import is_admin

logger = logging.getLogger(__name__)


def _require_admin(db: Session, caller_id: UUID) -> Principal:
    if not is_admin(db, caller_id):
        logger.warning(f"Privileged operation refused for non-admin {caller_id}")
        raise Forbidden("Forbidden - Admin only")
    return Principal(user_id=caller_id, role=UserRole.ADMIN)


def parse_role(value: Optional[str]) -> UserRole:
    """
    Raises:
        ValidationError: If the value is not a known role
    """
    try:
        return UserRole(value)
    except ValueError:
        allowed = ", ".join(r.value for r in UserRole)
        raise ValidationError(f"Invalid role '{value}'. Must be one of: {allowed}")


def parse_user_id(value) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid userId '{value}'")


def parse_email(value: Optional[str]) -> str:
    """
    Raises:
        ValidationError: If the value is not a well-formed email address
    """
    try:
        return validate_email(value, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValidationError(f"Invalid email '{value}': {e}")


def register(db: Session, identity: IdentityProvider, email: str, password: str) -> AccountIdentity:
    """
    Self-service signup: identity and customer profile in one transaction.

    Raises:
        ValidationError: If the email is already registered
        StoreError: If the transaction failed
    """
    new_identity = identity.build_identity(email, password, confirmed=True)
    db.add(User(user_id=new_identity.id, email=new_identity.email, role=UserRole.CUSTOMER))
    commit_or_raise(db, f"register {email}")
    db.refresh(new_identity)

    logger.info(f"New account registered: {new_identity.email}")
    return new_identity


def create_account(
    db: Session,
    identity_admin: IdentityAdmin,
    caller_id: UUID,
    email: Optional[str],
    password: Optional[str],
    role: Optional[str]
) -> Tuple[AccountIdentity, str]:
    """
    Create an auto-confirmed identity and its profile with the requested role.

    If the profile insert fails the identity is deleted again so no
    role-less account is left behind.

    Returns:
        The new identity and a confirmation message

    Raises:
        Forbidden: Caller is not an admin
        ValidationError: Missing field, malformed email, unknown role or duplicate email
        StoreError: Identity creation failed, or profile insert failed and was rolled back
        PartialFailure: Profile insert failed and the identity could not be removed
    """
    _require_admin(db, caller_id)

    email = email.strip() if email else email
    if not email or not password or not role:
        raise ValidationError("Missing required fields")
    email = parse_email(email)
    new_role = parse_role(role)

    new_identity = identity_admin.create_user(email, password, email_confirm=True)
    identity_id = new_identity.id

    try:
        user_crud.create_profile(db, Principal.service(), identity_id, new_identity.email, new_role)
    except AppError as profile_error:
        logger.error(f"Profile insert failed for new identity {identity_id}: {profile_error.message}")
        try:
            identity_admin.delete_user(identity_id)
        except AppError as rollback_error:
            logger.critical(f"Rollback of identity {identity_id} failed: {rollback_error.message}")
            raise PartialFailure(
                f"User created but profile creation failed: {profile_error.message}",
                identity_id=identity_id,
                remediation=f"Delete identity {identity_id} manually; it has no profile and no role",
            )
        logger.info(f"Rolled back identity {identity_id} after failed profile insert")
        raise StoreError(f"Profile creation failed, user was not created: {profile_error.message}")

    message = f"User {new_identity.email} created with role {new_role.value}"
    logger.info(f"Admin {caller_id}: {message}")
    return new_identity, message


def delete_account(
    db: Session,
    identity_admin: IdentityAdmin,
    caller_id: UUID,
    target_user_id
) -> str:
    """
    Delete a profile (with its jobs and candidates) and then its identity.

    Raises:
        Forbidden: Caller is not an admin
        ValidationError: Missing or malformed target id
        SelfDeletionError: Caller targeted their own account; nothing is changed
        NotFoundOrDenied: Neither a profile nor an identity exists for the target
        StoreError: Profile delete failed
        PartialFailure: Profile deleted but the identity delete failed
    """
    principal = _require_admin(db, caller_id)

    if not target_user_id:
        raise ValidationError("Missing userId")
    target_id = parse_user_id(target_user_id)

    if target_id == caller_id:
        raise SelfDeletionError("Cannot delete yourself")

    has_identity = identity_admin.get_identity(target_id) is not None
    profile_deleted = user_crud.delete_profile(db, principal, target_id)
    if not profile_deleted and not has_identity:
        raise NotFoundOrDenied("User not found")

    if not has_identity:
        logger.warning(f"Deleted profile {target_id} which had no identity")
        return "User completely deleted"

    try:
        identity_admin.delete_user(target_id)
    except AppError as e:
        logger.critical(f"Profile {target_id} deleted but identity delete failed: {e.message}")
        raise PartialFailure(
            f"Failed to delete from auth: {e.message}",
            identity_id=target_id,
            remediation=f"Identity {target_id} has no profile; delete it manually",
        )

    logger.info(f"Admin {caller_id} deleted user {target_id}")
    return "User completely deleted"


def change_role(db: Session, caller_id: UUID, target_user_id, new_role) -> User:
    """
    Change a user's role.

    An admin may demote themselves; this is logged but not prevented.

    Raises:
        Forbidden: Caller is not an admin
        ValidationError: Malformed id or unknown role
        NotFoundOrDenied: No such profile
    """
    principal = _require_admin(db, caller_id)
    target_id = parse_user_id(target_user_id)
    role = new_role if isinstance(new_role, UserRole) else parse_role(new_role)

    if target_id == caller_id and role != UserRole.ADMIN:
        logger.warning(f"Admin {caller_id} is removing their own admin role")

    profile = user_crud.update_role(db, principal, target_id, role)
    logger.info(f"Admin {caller_id} set role of {target_id} to {role.value}")
    return profile
