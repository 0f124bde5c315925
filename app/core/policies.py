"""
Row-level authorization policies.

Every CRUD query goes through these functions with the acting Principal:

- users:      read own row (admin: all); update/delete admin only; insert elevated only
- jobs:       read/write own jobs (admin: all)
- candidates: read/write candidates of own jobs (admin: all)

The elevated (service) principal bypasses every policy. It is only created
server-side by the account lifecycle operations.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Query

from app.models.user import User, UserRole
from app.models.job import Job
from app.models.candidate import Candidate


@dataclass(frozen=True)
class Principal:
    """The identity a store call is evaluated for."""
    user_id: Optional[UUID]
    role: Optional[UserRole] = None
    elevated: bool = False

    @classmethod
    def service(cls) -> "Principal":
        return cls(user_id=None, role=None, elevated=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def sees_all(self) -> bool:
        return self.elevated or self.is_admin


def scope_profiles(query: Query, principal: Principal) -> Query:
    if principal.sees_all:
        return query
    return query.filter(User.user_id == principal.user_id)


def scope_jobs(query: Query, principal: Principal) -> Query:
    if principal.sees_all:
        return query
    return query.filter(Job.user_id == principal.user_id)


def scope_candidates(query: Query, principal: Principal) -> Query:
    if principal.sees_all:
        return query
    owned_jobs = select(Job.job_id).where(Job.user_id == principal.user_id)
    return query.filter(Candidate.job_id.in_(owned_jobs))


def can_insert_profile(principal: Principal) -> bool:
    return principal.elevated


def can_modify_profile(principal: Principal) -> bool:
    return principal.sees_all


def can_write_job(principal: Principal, owner_id: UUID) -> bool:
    return principal.sees_all or (principal.user_id is not None and owner_id == principal.user_id)
