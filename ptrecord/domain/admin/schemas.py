"""Admin domain schemas - Pydantic models for audit views"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AdminCommentResponse(BaseModel):
    """Comment as seen by an administrator, with its context"""

    id: int
    sessionId: int
    trainerId: int
    trainerName: Optional[str] = None
    sessionDate: Optional[date_type] = None
    content: str
    isPublic: bool
    createdAt: datetime
    updatedAt: Optional[datetime] = None


class StatsResponse(BaseModel):
    """Schema for platform-wide usage statistics"""

    totalUsers: int
    totalTrainers: int
    totalMembers: int
    totalSessions: int
    confirmedSessions: int
    pendingSessions: int
    totalComments: int
    totalInviteCodes: int
    activeInviteCodes: int


class TrainerOverview(BaseModel):
    id: int
    name: str
    email: str
    memberCount: int
    sessionCount: int
    createdAt: Optional[datetime] = None


class MemberOverview(BaseModel):
    id: int
    name: str
    email: str
    trainerId: Optional[int] = None
    trainerName: Optional[str] = None
    sessionCount: int
    createdAt: Optional[datetime] = None
