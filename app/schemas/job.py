from pydantic import BaseModel, ConfigDict, Field, UUID4
from typing import Optional
from datetime import datetime


class JobCreateRequest(BaseModel):
    """
    Schema for creating a new job.

    user_id selects the owner; only admins may set it to someone else.
    """
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    user_id: Optional[UUID4] = None


class JobUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class JobResponse(BaseModel):
    """Schema for job response"""
    job_id: UUID4
    user_id: UUID4
    title: str
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class JobListItem(JobResponse):
    """Job joined with its owner's email for list views"""
    user_email: str


class JobOption(BaseModel):
    job_id: UUID4
    title: str

    model_config = ConfigDict(from_attributes=True)
