"""Comment router - FastAPI endpoints for session comments"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_trainer, get_current_user
from ...database import get_db
from ...models import Comment, User
from .schemas import CommentCreate, CommentResponse, CommentUpdate
from .service import CommentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Comments"])


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    """Dependency injection for CommentService"""
    return CommentService(db)


def comment_response(c: Comment) -> CommentResponse:
    return CommentResponse(
        id=c.id,
        sessionId=c.session_id,
        trainerId=c.trainer_id,
        content=c.content,
        isPublic=c.is_public,
        createdAt=c.created_at,
        updatedAt=c.updated_at,
    )


@router.get("/sessions/{session_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: CommentService = Depends(get_comment_service),
):
    """List a session's comments (members only see public ones)"""
    return [comment_response(c) for c in service.list_comments(session_id, current_user)]


@router.post("/comments", response_model=CommentResponse)
async def create_comment(
    data: CommentCreate,
    current_user: User = Depends(get_current_trainer),
    service: CommentService = Depends(get_comment_service),
):
    """Comment on one of the trainer's sessions"""
    comment = service.create_comment(data.sessionId, current_user.id, data.content, data.isPublic)
    return comment_response(comment)


@router.put("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    data: CommentUpdate,
    current_user: User = Depends(get_current_trainer),
    service: CommentService = Depends(get_comment_service),
):
    """Edit a comment the trainer wrote"""
    comment = service.update_comment(comment_id, current_user.id, data.content, data.isPublic)
    return comment_response(comment)


@router.delete("/comments/{comment_id}")
async def delete_comment(
    comment_id: int,
    current_user: User = Depends(get_current_trainer),
    service: CommentService = Depends(get_comment_service),
):
    """Delete a comment the trainer wrote"""
    service.delete_comment(comment_id, current_user.id)
    return {"success": True}
