import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_principal
from app.core.exceptions import NotFoundOrDenied
from app.core.policies import Principal
from app.crud import job as job_crud
from app.schemas.job import JobCreateRequest, JobListItem, JobResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


def job_list_items(db: Session, principal: Principal) -> List[JobListItem]:
    return [
        JobListItem(**JobResponse.model_validate(job).model_dump(), user_email=email)
        for job, email in job_crud.get_multi(db, principal)
    ]


@router.get("", response_model=List[JobListItem])
def list_jobs(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    List every job visible to the caller, newest first.

    Customers see their own jobs; admins see all jobs with the owner's email.
    """
    return job_list_items(db, principal)


@router.post("", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    Create a job.

    Without user_id the job belongs to the caller. Admins may pass the
    user_id of any existing user.
    """
    return job_crud.create(
        db,
        principal,
        title=request.title,
        description=request.description,
        user_id=request.user_id
    )


@router.get("/{job_id}", response_model=JobResponse)
def get_job(
    job_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    job = job_crud.get_by_id(db, principal, job_id)
    if not job:
        raise NotFoundOrDenied("Job not found")
    return job


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: UUID,
    request: JobUpdateRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    return job_crud.update(db, principal, job_id, title=request.title, description=request.description)


@router.delete("/{job_id}", status_code=204)
def delete_job(
    job_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    Delete a job and all of its candidates.
    """
    if not job_crud.delete(db, principal, job_id):
        raise NotFoundOrDenied("Job not found")
    return None
