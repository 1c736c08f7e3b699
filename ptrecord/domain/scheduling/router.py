"""Scheduling router - FastAPI endpoints for PT sessions"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_trainer, get_current_user
from ...database import get_db
from ...models import PTSession, User
from .schemas import (
    RepeatSessionCreate,
    RepeatSessionResponse,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
)
from .service import SchedulingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


def session_response(s: PTSession) -> SessionResponse:
    return SessionResponse(
        id=s.id,
        trainerId=s.trainer_id,
        memberId=s.member_id,
        trainerName=s.trainer.name if s.trainer else None,
        memberName=s.member.name if s.member else None,
        date=s.date,
        startTime=s.start_time,
        trainerConfirmed=s.trainer_confirmed,
        memberConfirmed=s.member_confirmed,
        confirmedAt=s.confirmed_at,
        status=s.status.value,
        createdAt=s.created_at,
    )


@router.get("", response_model=list[SessionResponse])
async def list_sessions(
    current_user: User = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """List the caller's sessions (trainer: proposed, member: booked, admin: all)"""
    return [session_response(s) for s in service.list_sessions(current_user)]


@router.post("", response_model=SessionResponse)
async def create_session(
    data: SessionCreate,
    current_user: User = Depends(get_current_trainer),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Propose a session with one of the trainer's members"""
    session = service.create_session(current_user.id, data.memberId, data.date, data.startTime)
    return session_response(session)


@router.post("/repeat", response_model=RepeatSessionResponse)
async def create_repeat_sessions(
    data: RepeatSessionCreate,
    current_user: User = Depends(get_current_trainer),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Propose the same weekly slot for several weeks, skipping taken dates"""
    created, failed = service.create_repeat_sessions(
        current_user.id, data.memberId, data.startDate, data.startTime, data.weeks
    )
    message = f"{len(created)} session(s) created"
    if failed:
        message += f", {len(failed)} skipped because the slot was already booked"
    return RepeatSessionResponse(
        created=[session_response(s) for s in created],
        failed=failed,
        message=message,
    )


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Get a session the caller takes part in"""
    return session_response(service.get_session_for_user(session_id, current_user))


@router.post("/{session_id}/confirm", response_model=SessionResponse)
async def confirm_session(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Confirm a session as its trainer or member"""
    session = service.confirm_session(session_id, current_user.id, current_user.role)
    return session_response(session)


@router.put("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: int,
    data: SessionUpdate,
    current_user: User = Depends(get_current_trainer),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Reschedule a session"""
    session = service.update_session(session_id, current_user.id, data.startTime, data.date)
    return session_response(session)


@router.delete("/{session_id}")
async def delete_session(
    session_id: int,
    current_user: User = Depends(get_current_trainer),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Cancel a session and delete its comments"""
    service.delete_session(session_id, current_user.id)
    return {"success": True, "message": "Session cancelled"}
