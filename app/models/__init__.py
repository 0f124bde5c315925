"""
Database models package.
"""

from app.models.identity import AccountIdentity
from app.models.user import User, UserRole
from app.models.job import Job
from app.models.candidate import Candidate, CandidateStatus

__all__ = ["AccountIdentity", "User", "UserRole", "Job", "Candidate", "CandidateStatus"]
