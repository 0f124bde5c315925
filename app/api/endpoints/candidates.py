"""
API endpoints for candidate management.

Candidates are created against a job and moved between the applied,
interview and hired stages. Any stage may follow any other.
"""

import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_principal
from app.core.exceptions import NotFoundOrDenied
from app.core.policies import Principal
from app.crud import candidate as candidate_crud
from app.schemas.candidate import (
    CandidateCreateRequest,
    CandidateListItem,
    CandidateResponse,
    CandidateStatusUpdate,
    CandidateUpdateRequest,
)

router = APIRouter(prefix="/candidates", tags=["Candidates"])
logger = logging.getLogger(__name__)


def to_list_item(row: candidate_crud.CandidateRow) -> CandidateListItem:
    return CandidateListItem(
        **CandidateResponse.model_validate(row.candidate).model_dump(),
        job_title=row.job_title,
        user_email=row.owner_email
    )


@router.get("", response_model=List[CandidateListItem])
def list_candidates(
    job_id: Optional[UUID] = None,
    name: Optional[str] = None,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    List candidates visible to the caller, newest first.

    Args:
        job_id: Only candidates of this job
        name: Case-insensitive search on the candidate name
    """
    rows = candidate_crud.get_multi(db, principal, job_id=job_id, name=name)
    return [to_list_item(row) for row in rows]


@router.post("", status_code=201, response_model=CandidateResponse)
def create_candidate(
    request: CandidateCreateRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    Add a candidate to a job.

    New candidates start in the applied stage unless a status is given.
    """
    return candidate_crud.create(
        db,
        principal,
        job_id=request.job_id,
        name=request.name,
        linkedin=request.linkedin,
        status=request.status
    )


@router.get("/{candidate_id}", response_model=CandidateResponse)
def get_candidate(
    candidate_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    candidate = candidate_crud.get_by_id(db, principal, candidate_id)
    if not candidate:
        raise NotFoundOrDenied("Candidate not found")
    return candidate


@router.patch("/{candidate_id}", response_model=CandidateResponse)
def update_candidate(
    candidate_id: UUID,
    request: CandidateUpdateRequest,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """Edit name and/or LinkedIn URL; an explicit blank LinkedIn clears it."""
    return candidate_crud.update(
        db,
        principal,
        candidate_id,
        name=request.name,
        linkedin=request.linkedin,
        clear_linkedin="linkedin" in request.model_fields_set
    )


@router.patch("/{candidate_id}/status", response_model=CandidateResponse)
def update_candidate_status(
    candidate_id: UUID,
    request: CandidateStatusUpdate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """Move a candidate to another stage."""
    return candidate_crud.update_status(db, principal, candidate_id, request.status)


@router.delete("/{candidate_id}", status_code=204)
def delete_candidate(
    candidate_id: UUID,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    if not candidate_crud.delete(db, principal, candidate_id):
        raise NotFoundOrDenied("Candidate not found")
    return None
