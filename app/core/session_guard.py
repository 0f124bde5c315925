"""
Session Guard middleware.

Runs before every request:

1. Resolves the session cookies into an identity (refreshing the token pair
   when only the refresh token is still valid). Any failure means "no session".
2. Redirects anonymous requests for protected pages to the login page, and
   signed-in requests for the login page to the dashboard.
3. Writes refreshed session cookies onto whatever response goes back.
"""

import logging
from typing import Callable, Iterable, Optional

from fastapi import Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.database import SessionLocal
from app.services.identity_provider import IdentityProvider, SessionState, SessionTokens

logger = logging.getLogger(__name__)


def set_session_cookies(response: Response, tokens: SessionTokens) -> None:
    response.set_cookie(
        settings.ACCESS_COOKIE_NAME,
        tokens.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )
    response.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(settings.ACCESS_COOKIE_NAME)
    response.delete_cookie(settings.REFRESH_COOKIE_NAME)


class SessionGuardMiddleware(BaseHTTPMiddleware):
    """
    Gate page routes on the presence of a session.

    The database session factory is looked up on app.state.session_factory
    (falling back to SessionLocal) so it can be substituted in tests.
    """

    def __init__(
        self,
        app,
        protected_paths: Optional[Iterable[str]] = None,
        login_path: Optional[str] = None,
        dashboard_path: Optional[str] = None,
    ):
        super().__init__(app)
        self.protected_paths = tuple(protected_paths if protected_paths is not None else settings.PROTECTED_PATHS)
        self.login_path = login_path or settings.LOGIN_PATH
        self.dashboard_path = dashboard_path or settings.DASHBOARD_PATH

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_paths)

    def _resolve_session(self, request: Request) -> SessionState:
        factory: Callable[[], Session] = getattr(request.app.state, "session_factory", SessionLocal)
        access_token = request.cookies.get(settings.ACCESS_COOKIE_NAME)
        refresh_token = request.cookies.get(settings.REFRESH_COOKIE_NAME)
        if not access_token and not refresh_token:
            return SessionState()

        db = None
        try:
            db = factory()
            return IdentityProvider(db).resolve_session(access_token, refresh_token)
        except Exception as e:
            # Fail closed: an unreadable session is no session
            logger.error(f"Session lookup failed, treating request as anonymous: {e}")
            return SessionState()
        finally:
            if db is not None:
                db.close()

    async def dispatch(self, request: Request, call_next):
        session = await run_in_threadpool(self._resolve_session, request)
        request.state.identity_id = session.identity_id

        path = request.url.path

        if self.is_protected(path) and not session.authenticated:
            logger.info(f"Access denied to {path} - redirecting to {self.login_path}")
            response = RedirectResponse(self.login_path, status_code=303)
        elif path == self.login_path and session.authenticated:
            logger.info(f"Already signed in - redirecting {path} to {self.dashboard_path}")
            response = RedirectResponse(self.dashboard_path, status_code=303)
        else:
            response = await call_next(request)

        if session.refreshed is not None:
            set_session_cookies(response, session.refreshed)

        return response
