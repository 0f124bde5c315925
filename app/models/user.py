"""
User profile model.

One profile per account identity. The profile carries the application role
and owns the user's jobs; deleting it removes the jobs and, through them,
their candidates.
"""

import enum
from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.identity import utcnow


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class User(Base):
    """Application profile for an account identity."""
    __tablename__ = "users"

    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("auth_identities.id", ondelete="CASCADE"),
        primary_key=True,
        index=True
    )

    # Denormalized copy of the identity email for display
    email = Column(String, nullable=False, index=True)

    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        default=UserRole.CUSTOMER,
        nullable=False
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    # Relationships
    jobs = relationship("Job", back_populates="owner", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User(user_id={self.user_id}, email='{self.email}', role={self.role.value})>"
