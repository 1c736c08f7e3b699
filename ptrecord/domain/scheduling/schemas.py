"""Scheduling domain schemas - Pydantic models for validation"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...config import DEFAULT_REPEAT_WEEKS, DEFAULT_START_TIME
from ...shared.validators import validate_start_time


class SessionCreate(BaseModel):
    """Schema for proposing a single session"""

    memberId: int
    date: date_type
    startTime: str = DEFAULT_START_TIME

    @field_validator("startTime")
    @classmethod
    def check_start_time(cls, v):
        return validate_start_time(v)


class RepeatSessionCreate(BaseModel):
    """Schema for proposing the same weekly slot over several weeks"""

    memberId: int
    startDate: date_type
    startTime: str = DEFAULT_START_TIME
    weeks: int = DEFAULT_REPEAT_WEEKS

    @field_validator("startTime")
    @classmethod
    def check_start_time(cls, v):
        return validate_start_time(v)


class SessionUpdate(BaseModel):
    """Schema for rescheduling a session"""

    startTime: str
    date: Optional[date_type] = None

    @field_validator("startTime")
    @classmethod
    def check_start_time(cls, v):
        return validate_start_time(v)


class SessionResponse(BaseModel):
    """Schema for session response"""

    id: int
    trainerId: int
    memberId: int
    trainerName: Optional[str] = None
    memberName: Optional[str] = None
    date: date_type
    startTime: str
    trainerConfirmed: bool
    memberConfirmed: bool
    confirmedAt: Optional[datetime] = None
    status: str
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class RepeatSessionResponse(BaseModel):
    """Schema for a weekly batch: what was booked and which dates were taken"""

    success: bool = True
    created: list[SessionResponse]
    failed: list[str]
    message: str
