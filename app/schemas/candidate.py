"""
Pydantic schemas for Candidate API requests/responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, UUID4
from app.models.candidate import CandidateStatus


class CandidateCreateRequest(BaseModel):
    job_id: UUID4
    name: str = Field(..., min_length=1, max_length=200)
    linkedin: Optional[str] = Field(None, description="LinkedIn profile URL; blank is stored as null")
    status: CandidateStatus = CandidateStatus.APPLIED


class CandidateUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    linkedin: Optional[str] = None


class CandidateStatusUpdate(BaseModel):
    status: CandidateStatus


class CandidateResponse(BaseModel):
    candidate_id: UUID4
    job_id: UUID4
    name: str
    linkedin: Optional[str] = None
    status: CandidateStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CandidateListItem(CandidateResponse):
    """Candidate joined with its job's display fields."""
    job_title: str
    user_email: str
