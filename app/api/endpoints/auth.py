"""
Authentication endpoints.

Sessions are cookie based:
- POST /signup: Create an account (identity + customer profile) and sign in
- POST /login: Authenticate and receive session cookies
- POST /logout: Clear session cookies
- GET /me: Current identity and role
"""

import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_current_identity, get_identity_provider
from app.core.session_guard import clear_session_cookies, set_session_cookies
from app.models.identity import AccountIdentity
from app.schemas.user import LoginRequest, MeResponse, SessionResponse, SignupRequest, IdentityResponse
from app.services import accounts
from app.services.identity_provider import IdentityProvider, issue_session
from app.services.role_resolver import resolve_role

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=SessionResponse)
def signup(
    request: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """
    Register a new customer account and start a session.

    The identity and its profile are written in a single transaction.
    """
    new_identity = accounts.register(db, identity, request.email, request.password)
    set_session_cookies(response, issue_session(new_identity))

    return SessionResponse(
        user=IdentityResponse.model_validate(new_identity),
        role=resolve_role(db, new_identity.id)
    )


@router.post("/login", response_model=SessionResponse)
def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider)
):
    """
    Authenticate with email and password.

    Session tokens are returned as HTTP-only cookies.
    """
    account, tokens = identity.sign_in_with_password(request.email, request.password)
    set_session_cookies(response, tokens)

    return SessionResponse(
        user=IdentityResponse.model_validate(account),
        role=resolve_role(db, account.id)
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    """End the session by clearing its cookies."""
    clear_session_cookies(response)
    return None


@router.get("/me", response_model=MeResponse)
def me(
    account: AccountIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Current identity and its role (null if the profile is missing)."""
    return MeResponse(
        user=IdentityResponse.model_validate(account),
        role=resolve_role(db, account.id)
    )
