"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs. Ownership is enforced by the row-level policy of the Principal
passed to every function.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.database import commit_or_raise
from app.core.exceptions import Forbidden, NotFoundOrDenied, ValidationError
from app.core.policies import Principal, can_write_job, scope_jobs
from app.models.job import Job
from app.models.user import User

logger = logging.getLogger(__name__)

UNKNOWN_OWNER = "Unknown"


def get_by_id(db: Session, principal: Principal, job_id: UUID) -> Optional[Job]:
    """
    Retrieve a job visible to the principal.

    Returns:
        Job instance if found and visible, None otherwise
    """
    query = db.query(Job).filter(Job.job_id == job_id)
    return scope_jobs(query, principal).first()


def get_multi(db: Session, principal: Principal) -> List[Tuple[Job, str]]:
    """
    List every visible job, newest first, with its owner's email.

    A job whose owner profile cannot be joined is still listed, labelled
    with a placeholder instead of an email.
    """
    query = db.query(Job, User.email).outerjoin(User, Job.user_id == User.user_id)
    rows = scope_jobs(query, principal).order_by(Job.created_at.desc()).all()
    return [(job, email or UNKNOWN_OWNER) for job, email in rows]


def list_options(db: Session, principal: Principal) -> List[Job]:
    """Visible jobs for selection lists, newest first."""
    return scope_jobs(db.query(Job), principal).order_by(Job.created_at.desc()).all()


def create(
    db: Session,
    principal: Principal,
    title: str,
    description: Optional[str] = None,
    user_id: Optional[UUID] = None
) -> Job:
    """
    Create a job owned by the acting user or, for admins, by a selected user.

    Raises:
        Forbidden: If a non-admin tries to create a job for someone else
        ValidationError: If no owner can be determined or the owner does not exist
    """
    owner_id = user_id or principal.user_id
    if owner_id is None:
        raise ValidationError("user_id is required")

    if not can_write_job(principal, owner_id):
        raise Forbidden("Cannot create jobs for another user")

    if db.query(User.user_id).filter(User.user_id == owner_id).first() is None:
        raise ValidationError(f"User {owner_id} does not exist")

    db_job = Job(
        user_id=owner_id,
        title=title,
        description=description or None
    )

    db.add(db_job)
    commit_or_raise(db, "create job")
    db.refresh(db_job)

    logger.info(f"Created job {db_job.job_id}: {db_job.title} (owner {owner_id})")
    return db_job


def update(
    db: Session,
    principal: Principal,
    job_id: UUID,
    title: Optional[str] = None,
    description: Optional[str] = None
) -> Job:
    """
    Update a job's title and/or description.

    Raises:
        NotFoundOrDenied: If the job is missing or not visible
    """
    job = get_by_id(db, principal, job_id)
    if not job:
        raise NotFoundOrDenied("Job not found")

    if title is not None:
        job.title = title
    if description is not None:
        job.description = description or None

    commit_or_raise(db, f"update job {job_id}")
    db.refresh(job)

    return job


def delete(db: Session, principal: Principal, job_id: UUID) -> bool:
    """
    Delete a job and its candidates.

    Returns:
        True if deleted, False if not found or not visible
    """
    job = get_by_id(db, principal, job_id)
    if not job:
        return False

    candidate_count = len(job.candidates)
    db.delete(job)
    commit_or_raise(db, f"delete job {job_id}")

    logger.info(f"Deleted job {job_id} and {candidate_count} candidates")
    return True
