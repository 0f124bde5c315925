"""
Pydantic schemas for authentication, profiles and account administration.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, UUID4
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


class SignupRequest(BaseModel):
    """Request schema for self-service signup."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)  # bcrypt limit


class LoginRequest(BaseModel):
    """Request schema for password sign-in."""
    email: EmailStr
    password: str


class IdentityResponse(BaseModel):
    """Account identity (no credentials)."""
    id: UUID4
    email: str
    email_confirmed_at: Optional[datetime] = None
    created_at: datetime
    last_sign_in_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SessionResponse(BaseModel):
    """Returned by login and signup; the tokens themselves travel in cookies."""
    user: IdentityResponse
    role: Optional[UserRole] = None


class MeResponse(BaseModel):
    user: IdentityResponse
    role: Optional[UserRole] = None


class UserProfileResponse(BaseModel):
    """User profile row."""
    user_id: UUID4
    email: str
    role: UserRole
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CreateUserRequest(BaseModel):
    """
    Admin account creation.

    Fields are optional here so a missing one is reported as a 400
    "Missing required fields" by the account service rather than a 422.
    """
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class CreateUserResponse(BaseModel):
    success: bool = True
    user: IdentityResponse
    message: str


class DeleteUserRequest(BaseModel):
    user_id: Optional[str] = Field(None, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class DeleteUserResponse(BaseModel):
    success: bool = True
    message: str


class ChangeRoleRequest(BaseModel):
    role: Optional[str] = None
