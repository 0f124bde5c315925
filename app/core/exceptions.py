"""
Application error taxonomy.

Services raise these; the handler registered in main.py turns them into
JSON responses with the matching HTTP status code.
"""

from typing import Any, Dict, Optional
from uuid import UUID


class AppError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message}


class Unauthorized(AppError):
    """No valid session."""
    status_code = 401


class Forbidden(AppError):
    """Session present but the caller's role or ownership is insufficient."""
    status_code = 403


class ValidationError(AppError):
    """Missing or malformed required field."""
    status_code = 400


class SelfDeletionError(ValidationError):
    """An administrator tried to delete their own account."""


class NotFoundOrDenied(AppError):
    """
    Row does not exist or is hidden by a row-level policy.

    The two cases are deliberately indistinguishable to the caller.
    """
    status_code = 404


class StoreError(AppError):
    """Generic backing-store failure."""
    status_code = 500


class PartialFailure(AppError):
    """
    A multi-step privileged operation failed partway through.

    Carries the identity left behind and what an operator must do about it.
    """
    status_code = 500

    def __init__(self, message: str, identity_id: Optional[UUID] = None, remediation: Optional[str] = None):
        super().__init__(message)
        self.identity_id = identity_id
        self.remediation = remediation

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.identity_id is not None:
            data["identity_id"] = str(self.identity_id)
        if self.remediation:
            data["remediation"] = self.remediation
        return data
