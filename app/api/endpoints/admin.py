"""
Privileged account endpoints.

These run with the service role key and re-check the caller's admin role
against the store on every request; the browser's own role check is only a
convenience for hiding buttons.
"""

import logging
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_identity, get_identity_admin
from app.models.identity import AccountIdentity
from app.schemas.user import (
    ChangeRoleRequest,
    CreateUserRequest,
    CreateUserResponse,
    DeleteUserRequest,
    DeleteUserResponse,
    IdentityResponse,
    UserProfileResponse,
)
from app.services import accounts
from app.services.identity_provider import IdentityAdmin

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


@router.post("/create-user", status_code=status.HTTP_201_CREATED, response_model=CreateUserResponse)
def create_user(
    request: CreateUserRequest,
    caller: AccountIdentity = Depends(get_current_identity),
    identity_admin: IdentityAdmin = Depends(get_identity_admin),
    db: Session = Depends(get_db)
):
    """
    Create an account with a role.

    The identity is auto-confirmed (no verification email). If the profile
    cannot be written the identity is removed again; a failed removal is
    reported as a partial failure naming the orphaned identity.
    """
    new_identity, message = accounts.create_account(
        db,
        identity_admin,
        caller.id,
        request.email,
        request.password,
        request.role
    )
    return CreateUserResponse(
        success=True,
        user=IdentityResponse.model_validate(new_identity),
        message=message
    )


@router.delete("/delete-user", response_model=DeleteUserResponse)
def delete_user(
    request: DeleteUserRequest,
    caller: AccountIdentity = Depends(get_current_identity),
    identity_admin: IdentityAdmin = Depends(get_identity_admin),
    db: Session = Depends(get_db)
):
    """
    Delete an account completely: profile, jobs, candidates, then identity.

    Admins cannot delete themselves.
    """
    message = accounts.delete_account(db, identity_admin, caller.id, request.user_id)
    return DeleteUserResponse(success=True, message=message)


@router.patch("/users/{user_id}/role", response_model=UserProfileResponse)
def change_role(
    user_id: UUID,
    request: ChangeRoleRequest,
    caller: AccountIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Change a user's role (admin or customer)."""
    return accounts.change_role(db, caller.id, user_id, request.role)
