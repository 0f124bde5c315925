"""
Page routes.

Each route returns the data its page renders. The Session Guard has already
redirected anonymous requests away from the protected pages before these run.
After any mutation the client calls the page route again to re-fetch the full
lists; there is no incremental state.
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_identity, get_principal
from app.core.exceptions import ValidationError
from app.core.policies import Principal
from app.crud import candidate as candidate_crud
from app.crud import job as job_crud
from app.crud import user as user_crud
from app.api.endpoints.candidates import to_list_item
from app.api.endpoints.jobs import job_list_items
from app.models.identity import AccountIdentity
from app.schemas.job import JobOption
from app.schemas.user import UserProfileResponse
from app.services.board import build_board, column_counts, navigation_links

router = APIRouter(tags=["Pages"])
logger = logging.getLogger(__name__)

ALL_JOBS = "all"


def parse_job_filter(value: Optional[str]) -> Optional[UUID]:
    """
    The board's job filter: "all" (or nothing) means no filter.

    Raises:
        ValidationError: If the value is neither "all" nor a job id
    """
    if not value or value == ALL_JOBS:
        return None
    try:
        return UUID(value)
    except ValueError:
        raise ValidationError(f"Invalid job filter '{value}'")


@router.get("/")
def landing():
    """Landing page."""
    return {
        "page": "home",
        "title": settings.PROJECT_NAME,
        "links": [
            {"label": "Log in", "href": settings.LOGIN_PATH},
            {"label": "Dashboard", "href": settings.DASHBOARD_PATH},
        ]
    }


@router.get("/login")
def login_page():
    """Login/signup form targets."""
    return {
        "page": "login",
        "actions": {
            "login": f"{settings.API_PREFIX}/auth/login",
            "signup": f"{settings.API_PREFIX}/auth/signup",
        },
        "redirect_to": settings.DASHBOARD_PATH,
    }


@router.get("/dashboard")
def dashboard(
    account: AccountIdentity = Depends(get_current_identity),
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """Welcome panel with the caller's role and navigation."""
    profile = user_crud.get_profile(db, principal, account.id)

    return {
        "page": "dashboard",
        "email": account.email,
        "user_id": str(account.id),
        "role": profile.role.value if profile else None,
        "profile_error": None if profile else "No user profile found for this account",
        "links": navigation_links(principal.is_admin),
    }


@router.get("/jobs")
def jobs_page(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    return {"page": "jobs", "jobs": job_list_items(db, principal)}


@router.get("/candidates")
def candidates_page(
    job_id: Optional[str] = None,
    name: Optional[str] = None,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    Candidate board: one column per stage, filtered by job and name.

    Also returns the visible jobs for the filter and the add-candidate form.
    """
    job_filter = parse_job_filter(job_id)
    rows = candidate_crud.get_multi(db, principal, job_id=job_filter, name=name)
    columns = build_board(rows)

    return {
        "page": "candidates",
        "filters": {"job_id": str(job_filter) if job_filter else ALL_JOBS, "name": name or ""},
        "jobs": [JobOption.model_validate(job) for job in job_crud.list_options(db, principal)],
        "columns": {status: [to_list_item(row) for row in items] for status, items in columns.items()},
        "counts": column_counts(columns),
    }


@router.get("/admin")
def admin_page(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    Administration: all users, jobs and candidates.

    The role is checked here against the store; non-admins are sent back to
    the dashboard.
    """
    if not principal.is_admin:
        logger.info(f"Non-admin {principal.user_id} sent from /admin to dashboard")
        return RedirectResponse(settings.DASHBOARD_PATH, status_code=303)

    return {
        "page": "admin",
        "current_user_id": str(principal.user_id),
        "users": [UserProfileResponse.model_validate(u) for u in user_crud.list_profiles(db, principal)],
        "jobs": job_list_items(db, principal),
        "candidates": [to_list_item(row) for row in candidate_crud.get_multi(db, principal)],
    }
