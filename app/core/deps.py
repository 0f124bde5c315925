"""
FastAPI dependencies for authentication and authorization.

The Session Guard middleware resolves the session cookies once per request
and leaves the identity id on request.state; these dependencies turn it into
the objects endpoints work with. Store clients are built per request from the
request's database session and passed explicitly into service functions.
"""

import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import Forbidden, Unauthorized
from app.core.policies import Principal
from app.models.identity import AccountIdentity
from app.services.identity_provider import IdentityAdmin, IdentityProvider
from app.services.role_resolver import is_admin, resolve_role

logger = logging.getLogger(__name__)


def get_identity_provider(db: Session = Depends(get_db)) -> IdentityProvider:
    return IdentityProvider(db)


def get_current_identity(
    request: Request,
    identity: IdentityProvider = Depends(get_identity_provider)
) -> AccountIdentity:
    """
    Return the identity of the current session.

    Raises:
        Unauthorized: If the request carries no valid session
    """
    identity_id = getattr(request.state, "identity_id", None)
    if identity_id is None:
        raise Unauthorized("Unauthorized")

    account = identity.get_identity(identity_id)
    if account is None:
        raise Unauthorized("Unauthorized")
    return account


def get_principal(
    account: AccountIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> Principal:
    """The caller's principal, with the role read from the store on every request."""
    return Principal(user_id=account.id, role=resolve_role(db, account.id))


def get_identity_admin(
    caller: AccountIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> IdentityAdmin:
    """
    Privileged identity client, built with the server-only service role key.

    The caller's admin role is checked against the store before the client
    is constructed, so non-admins never reach the service credential.

    Raises:
        Forbidden: If the caller is not an admin
        StoreError: If the service role key is not configured
    """
    if not is_admin(db, caller.id):
        logger.warning(f"Privileged identity client refused for non-admin {caller.id}")
        raise Forbidden("Forbidden - Admin only")
    return IdentityAdmin(db, settings.SERVICE_ROLE_KEY)
