"""Comment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CommentCreate(BaseModel):
    """Schema for creating a comment on a session"""

    sessionId: int
    content: str
    isPublic: bool = True


class CommentUpdate(BaseModel):
    """Schema for editing a comment"""

    content: str
    isPublic: Optional[bool] = None


class CommentResponse(BaseModel):
    """Schema for comment response"""

    id: int
    sessionId: int
    trainerId: int
    content: str
    isPublic: bool
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True
