import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_principal
from app.core.policies import Principal
from app.crud import user as user_crud
from app.schemas.user import UserProfileResponse

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[UserProfileResponse])
def list_users(
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db)
):
    """
    List user profiles, newest first.

    Admins see every user; everyone else sees only their own profile.
    """
    return user_crud.list_profiles(db, principal)
