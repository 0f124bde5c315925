"""
Account identity model.

Identities belong to the identity provider: credentials, confirmation and
sign-in bookkeeping. Application data (role, jobs, candidates) hangs off the
User profile instead, so an identity can exist briefly without a profile while
an account is being created or removed.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.dialects.postgresql import UUID
from app.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccountIdentity(Base):
    """An authentication record (email + credential)."""
    __tablename__ = "auth_identities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    # Set at creation for admin-created (auto-confirmed) accounts and signups
    email_confirmed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    last_sign_in_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<AccountIdentity(id={self.id}, email='{self.email}')>"
