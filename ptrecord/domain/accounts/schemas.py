"""Account domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_non_empty

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    """Schema for account registration"""

    name: str
    email: str
    password: str
    role: Literal["trainer", "member"]
    inviteCode: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_non_empty(v, "Name")

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return v


class LoginRequest(BaseModel):
    """Schema for login"""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserResponse(BaseModel):
    """Schema for account response (never includes the credential)"""

    id: int
    name: str
    email: str
    role: str
    trainerId: Optional[int] = None
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """Schema for login response"""

    accessToken: str
    tokenType: str = "bearer"
    user: UserResponse


class TrainerResponse(BaseModel):
    """Schema for a member's owning trainer"""

    id: int
    name: str
    email: str
    role: str
