"""
Identity provider.

Owns account identities and the session tokens issued for them. Two clients
are exposed, mirroring how the rest of the application may use them:

- IdentityProvider: sign-in, session lookup and refresh. Safe for any request.
- IdentityAdmin: creates and deletes identities. Requires the server-only
  SERVICE_ROLE_KEY and is only constructed by the privileged account endpoints
  and operator scripts.

Both take the request's database session explicitly; neither keeps global state.
"""

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple
from uuid import UUID

from jose import JWTError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import Forbidden, NotFoundOrDenied, StoreError, Unauthorized, ValidationError
from app.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_password,
)
from app.models.identity import AccountIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionTokens:
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class SessionState:
    """Outcome of resolving a request's session cookies."""
    identity_id: Optional[UUID] = None
    refreshed: Optional[SessionTokens] = None

    @property
    def authenticated(self) -> bool:
        return self.identity_id is not None


def issue_session(identity: AccountIdentity) -> SessionTokens:
    subject = str(identity.id)
    return SessionTokens(
        access_token=create_access_token(subject),
        refresh_token=create_refresh_token(subject),
    )


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityProvider:
    """Sign-in and session handling for account identities."""

    def __init__(self, db: Session):
        self.db = db

    def get_identity(self, identity_id: UUID) -> Optional[AccountIdentity]:
        return self.db.query(AccountIdentity).filter(AccountIdentity.id == identity_id).first()

    def get_identity_by_email(self, email: str) -> Optional[AccountIdentity]:
        return self.db.query(AccountIdentity).filter(AccountIdentity.email == _normalize_email(email)).first()

    def build_identity(self, email: str, password: str, confirmed: bool = True) -> AccountIdentity:
        """
        Add a new identity to the session without committing.

        Callers commit once the rest of their unit of work is in place.

        Raises:
            ValidationError: If the email is already registered
        """
        if self.get_identity_by_email(email):
            raise ValidationError("A user with this email address has already been registered")

        identity = AccountIdentity(
            email=_normalize_email(email),
            hashed_password=get_password_hash(password),
            email_confirmed_at=datetime.now(timezone.utc) if confirmed else None,
        )
        self.db.add(identity)
        self.db.flush()
        return identity

    def sign_in_with_password(self, email: str, password: str) -> Tuple[AccountIdentity, SessionTokens]:
        """
        Authenticate with email and password and start a session.

        Raises:
            Unauthorized: On unknown email, wrong password or unconfirmed email
        """
        identity = self.get_identity_by_email(email)
        if not identity or not verify_password(password, identity.hashed_password):
            raise Unauthorized("Invalid login credentials")

        if identity.email_confirmed_at is None:
            raise Unauthorized("Email not confirmed")

        identity.last_sign_in_at = datetime.now(timezone.utc)
        self.db.commit()

        logger.info(f"Identity signed in: {identity.email}")
        return identity, issue_session(identity)

    def get_user(self, access_token: str) -> AccountIdentity:
        """
        Return the identity an access token belongs to.

        Raises:
            Unauthorized: If the token is invalid/expired or the identity is gone
        """
        try:
            payload = decode_token(access_token)
            identity_id = UUID(payload["sub"])
        except (JWTError, ValueError) as e:
            raise Unauthorized(f"Invalid session: {e}")

        identity = self.get_identity(identity_id)
        if identity is None:
            raise Unauthorized("Session identity no longer exists")
        return identity

    def refresh_session(self, refresh_token: str) -> Tuple[AccountIdentity, SessionTokens]:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            Unauthorized: If the refresh token is invalid or the identity is gone
        """
        try:
            payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
            identity_id = UUID(payload["sub"])
        except (JWTError, ValueError) as e:
            raise Unauthorized(f"Invalid refresh token: {e}")

        identity = self.get_identity(identity_id)
        if identity is None:
            raise Unauthorized("Session identity no longer exists")
        return identity, issue_session(identity)

    def resolve_session(self, access_token: Optional[str], refresh_token: Optional[str]) -> SessionState:
        """
        Resolve session cookies, refreshing the pair when only the refresh token is usable.

        Never raises for an invalid session; returns an unauthenticated state instead.
        """
        if access_token:
            try:
                identity = self.get_user(access_token)
                return SessionState(identity_id=identity.id)
            except Unauthorized as e:
                logger.debug(f"Access token rejected: {e.message}")

        if refresh_token:
            try:
                identity, tokens = self.refresh_session(refresh_token)
                logger.info(f"Session refreshed for identity {identity.id}")
                return SessionState(identity_id=identity.id, refreshed=tokens)
            except Unauthorized as e:
                logger.debug(f"Refresh token rejected: {e.message}")

        return SessionState()


class IdentityAdmin(IdentityProvider):
    """
    Privileged identity operations.

    Constructed with the service role key; refuses to operate with a missing
    or wrong key.
    """

    def __init__(self, db: Session, service_key: str):
        super().__init__(db)
        if not settings.SERVICE_ROLE_KEY:
            raise StoreError("SERVICE_ROLE_KEY is not configured")
        if not hmac.compare_digest(service_key or "", settings.SERVICE_ROLE_KEY):
            raise Forbidden("Invalid service role key")

    def create_user(self, email: str, password: str, email_confirm: bool = True) -> AccountIdentity:
        """
        Create and commit a new identity.

        Raises:
            ValidationError: If the email is already registered
            StoreError: If the identity could not be stored
        """
        try:
            identity = self.build_identity(email, password, confirmed=email_confirm)
            self.db.commit()
        except ValidationError:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("A user with this email address has already been registered")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create identity for {email}: {e}")
            raise StoreError(f"Failed to create identity: {e}")

        self.db.refresh(identity)
        logger.info(f"Identity created: {identity.email} ({identity.id})")
        return identity

    def delete_user(self, identity_id: UUID) -> None:
        """
        Delete an identity and commit.

        Raises:
            NotFoundOrDenied: If no such identity exists
            StoreError: If the delete failed
        """
        identity = self.get_identity(identity_id)
        if identity is None:
            raise NotFoundOrDenied("User not found")

        try:
            self.db.delete(identity)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete identity {identity_id}: {e}")
            raise StoreError(f"Failed to delete identity: {e}")

        logger.info(f"Identity deleted: {identity_id}")
