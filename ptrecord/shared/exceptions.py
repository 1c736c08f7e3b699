"""Domain error taxonomy

Services raise these instead of bare HTTPExceptions so that every failure
carries a stable ``category`` next to the human readable detail. They are
still HTTPExceptions, so FastAPI renders them even without the handler
registered in main.py.
"""

from typing import Any, Optional

from fastapi import HTTPException


class DomainError(HTTPException):
    status_code = 400
    category = "error"
    default_detail = "Request failed"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict[str, str]] = None, **extra: Any):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail, headers=headers)
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        body = {"detail": self.detail, "category": self.category}
        body.update(self.extra)
        return body


class ValidationError(DomainError):
    status_code = 422
    category = "validation_error"
    default_detail = "Invalid input"


class ConflictError(DomainError):
    status_code = 409
    category = "conflict"
    default_detail = "Resource already exists"


class SlotConflictError(ConflictError):
    """A trainer already has a session in the requested slot"""

    def __init__(self, date: str, start_time: str, existing_member: Optional[str] = None):
        detail = f"A session is already booked on {date} at {start_time}"
        if existing_member:
            detail += f" with {existing_member}"
        super().__init__(
            detail,
            conflictInfo={"date": date, "startTime": start_time, "existingMember": existing_member},
        )
        self.date = date
        self.start_time = start_time
        self.existing_member = existing_member


class NotFoundError(DomainError):
    status_code = 404
    category = "not_found"
    default_detail = "Not found"


class ForbiddenError(DomainError):
    status_code = 403
    category = "forbidden"
    default_detail = "You do not have permission to perform this action"


class ExpiredError(DomainError):
    status_code = 400
    category = "invite_expired"
    default_detail = "Invite code has expired"


class AlreadyUsedError(DomainError):
    status_code = 400
    category = "invite_already_used"
    default_detail = "Invite code has already been used"


class AuthenticationError(DomainError):
    status_code = 401
    category = "unauthenticated"
    default_detail = "Not authenticated"
