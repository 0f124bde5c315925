"""
CRUD operations for Candidate model.

Candidates are reachable only through jobs the principal may see; the
row-level policy scopes every query accordingly.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.database import commit_or_raise
from app.core.exceptions import NotFoundOrDenied
from app.core.policies import Principal, scope_candidates
from app.crud import job as job_crud
from app.models.candidate import Candidate, CandidateStatus
from app.models.job import Job
from app.models.user import User

logger = logging.getLogger(__name__)

UNKNOWN_JOB = "Unknown job"
UNKNOWN_OWNER = "Unknown"


@dataclass
class CandidateRow:
    """A candidate joined with the display fields of its job."""
    candidate: Candidate
    job_title: str
    owner_email: str


def _clean_linkedin(linkedin: Optional[str]) -> Optional[str]:
    if linkedin is None:
        return None
    linkedin = linkedin.strip()
    return linkedin or None


def _escape_like(value: str) -> str:
    # Search text is matched literally
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_by_id(db: Session, principal: Principal, candidate_id: UUID) -> Optional[Candidate]:
    """Retrieve a candidate visible to the principal."""
    query = db.query(Candidate).filter(Candidate.candidate_id == candidate_id)
    return scope_candidates(query, principal).first()


def get_multi(
    db: Session,
    principal: Principal,
    job_id: Optional[UUID] = None,
    name: Optional[str] = None
) -> List[CandidateRow]:
    """
    List visible candidates, newest first.

    Args:
        db: Database session
        principal: Acting principal
        job_id: Optional filter by job
        name: Optional case-insensitive substring match on the candidate name
    """
    query = (
        db.query(Candidate, Job.title, User.email)
        .outerjoin(Job, Candidate.job_id == Job.job_id)
        .outerjoin(User, Job.user_id == User.user_id)
    )
    query = scope_candidates(query, principal)

    if job_id:
        query = query.filter(Candidate.job_id == job_id)
    if name:
        query = query.filter(Candidate.name.ilike(f"%{_escape_like(name.strip())}%", escape="\\"))

    rows = query.order_by(Candidate.created_at.desc()).all()
    return [
        CandidateRow(candidate=c, job_title=title or UNKNOWN_JOB, owner_email=email or UNKNOWN_OWNER)
        for c, title, email in rows
    ]


def create(
    db: Session,
    principal: Principal,
    job_id: UUID,
    name: str,
    linkedin: Optional[str] = None,
    status: CandidateStatus = CandidateStatus.APPLIED
) -> Candidate:
    """
    Add a candidate to a job the principal may write to.

    A blank LinkedIn URL is stored as NULL.

    Raises:
        NotFoundOrDenied: If the job is missing or not visible
    """
    if job_crud.get_by_id(db, principal, job_id) is None:
        raise NotFoundOrDenied(f"Job {job_id} not found")

    candidate = Candidate(
        job_id=job_id,
        name=name,
        linkedin=_clean_linkedin(linkedin),
        status=status
    )

    db.add(candidate)
    commit_or_raise(db, "create candidate")
    db.refresh(candidate)

    logger.info(f"Created candidate {candidate.candidate_id} for job {job_id}")
    return candidate


def update(
    db: Session,
    principal: Principal,
    candidate_id: UUID,
    name: Optional[str] = None,
    linkedin: Optional[str] = None,
    clear_linkedin: bool = False
) -> Candidate:
    """
    Update a candidate's name and/or LinkedIn URL.

    Raises:
        NotFoundOrDenied: If the candidate is missing or not visible
    """
    candidate = get_by_id(db, principal, candidate_id)
    if not candidate:
        raise NotFoundOrDenied("Candidate not found")

    if name is not None:
        candidate.name = name
    if linkedin is not None or clear_linkedin:
        candidate.linkedin = _clean_linkedin(linkedin)

    commit_or_raise(db, f"update candidate {candidate_id}")
    db.refresh(candidate)

    return candidate


def update_status(
    db: Session,
    principal: Principal,
    candidate_id: UUID,
    status: CandidateStatus
) -> Candidate:
    """
    Move a candidate to any pipeline stage.

    Raises:
        NotFoundOrDenied: If the candidate is missing or not visible
    """
    candidate = get_by_id(db, principal, candidate_id)
    if not candidate:
        raise NotFoundOrDenied("Candidate not found")

    previous = candidate.status
    candidate.status = status
    commit_or_raise(db, f"update status of candidate {candidate_id}")
    db.refresh(candidate)

    logger.info(f"Candidate {candidate_id}: {previous.value} -> {status.value}")
    return candidate


def delete(db: Session, principal: Principal, candidate_id: UUID) -> bool:
    """
    Delete a candidate.

    Returns:
        True if deleted, False if not found or not visible
    """
    candidate = get_by_id(db, principal, candidate_id)
    if not candidate:
        return False

    db.delete(candidate)
    commit_or_raise(db, f"delete candidate {candidate_id}")

    logger.info(f"Deleted candidate {candidate_id}")
    return True
