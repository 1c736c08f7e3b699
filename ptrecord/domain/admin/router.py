"""Admin router - FastAPI endpoints for administrators"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from ..accounts.router import user_response
from ..accounts.schemas import UserResponse
from ..scheduling.router import session_response
from ..scheduling.schemas import SessionResponse
from .schemas import AdminCommentResponse, MemberOverview, StatsResponse, TrainerOverview
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Platform-wide usage statistics"""
    return StatsResponse(**service.get_stats())


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return [user_response(u) for u in service.list_users()]


@router.get("/trainers", response_model=list[TrainerOverview])
async def list_trainers(
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return [TrainerOverview(**t) for t in service.get_trainer_overview()]


@router.get("/members", response_model=list[MemberOverview])
async def list_members(
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return [MemberOverview(**m) for m in service.get_member_overview()]


@router.get("/sessions", response_model=list[SessionResponse])
async def list_sessions(
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return [session_response(s) for s in service.list_sessions()]


@router.get("/comments", response_model=list[AdminCommentResponse])
async def list_comments(
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    return [
        AdminCommentResponse(
            id=c.id,
            sessionId=c.session_id,
            trainerId=c.trainer_id,
            trainerName=c.trainer.name if c.trainer else None,
            sessionDate=c.session.date if c.session else None,
            content=c.content,
            isPublic=c.is_public,
            createdAt=c.created_at,
            updatedAt=c.updated_at,
        )
        for c in service.list_comments()
    ]


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Delete an account and everything it owns"""
    service.delete_user(user_id, current_user)
    return {"success": True}


@router.delete("/sessions/{session_id}")
async def delete_session(
    session_id: int,
    current_user: User = Depends(get_current_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Delete any session and its comments"""
    service.delete_session(session_id, current_user)
    return {"success": True}
