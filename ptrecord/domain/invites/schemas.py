"""Invite domain schemas - Pydantic models for validation"""

from datetime import datetime

from pydantic import BaseModel


class InviteCodeResponse(BaseModel):
    """Schema for invite code response"""

    id: int
    code: str
    trainerId: int
    expiresAt: datetime
    used: bool
    isValid: bool
    createdAt: datetime

    class Config:
        from_attributes = True
