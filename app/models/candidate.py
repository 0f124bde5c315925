"""
Candidate database model.

A person applying to a specific job, tracked on the applied/interview/hired board.
"""

import enum
import uuid
from sqlalchemy import Column, String, ForeignKey, Enum, DateTime, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.models.identity import utcnow


class CandidateStatus(str, enum.Enum):
    """
    Pipeline stage. Any stage may follow any other:

    applied <-> interview <-> hired
    """
    APPLIED = "applied"
    INTERVIEW = "interview"
    HIRED = "hired"


class Candidate(Base):
    """A candidate who applied for a job posting."""
    __tablename__ = "candidates"

    candidate_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    job_id = Column(
        UUID(as_uuid=True),
        ForeignKey("jobs.job_id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String, nullable=False)
    linkedin = Column(String, nullable=True)  # NULL when not provided, never ""

    status = Column(
        Enum(CandidateStatus, name="candidate_status", values_callable=lambda e: [m.value for m in e]),
        default=CandidateStatus.APPLIED,
        nullable=False,
        index=True
    )

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    # Relationships
    job = relationship("Job", back_populates="candidates")

    def __repr__(self):
        return f"<Candidate(candidate_id={self.candidate_id}, name='{self.name}', status={self.status.value})>"
