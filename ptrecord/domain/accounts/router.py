"""Account router - FastAPI endpoints for authentication and member rosters"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_member, get_current_trainer, get_current_user
from ...database import get_db
from ...models import User
from ..scheduling.service import SchedulingService
from .schemas import LoginRequest, RegisterRequest, TokenResponse, TrainerResponse, UserResponse
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])
members_router = APIRouter(prefix="/members", tags=["Members"])


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    return SchedulingService(db)


def user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        trainerId=user.trainer_id,
        createdAt=user.created_at,
    )


# ============================================================================
# AUTHENTICATION
# ============================================================================


@router.post("/register", response_model=UserResponse)
async def register(
    data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
):
    """Register a trainer, or a member redeeming a trainer's invite code"""
    return user_response(service.register(data))


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    service: AccountService = Depends(get_account_service),
):
    """Exchange email and password for a bearer access token"""
    token, user = service.login(data)
    return TokenResponse(accessToken=token, user=user_response(user))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated account"""
    return user_response(current_user)


# ============================================================================
# MEMBER ROSTER
# ============================================================================


@members_router.get("", response_model=list[UserResponse])
async def list_members(
    current_user: User = Depends(get_current_trainer),
    service: AccountService = Depends(get_account_service),
):
    """List the current trainer's members"""
    return [user_response(m) for m in service.list_members(current_user)]


@members_router.get("/me/trainer", response_model=TrainerResponse)
async def get_my_trainer(
    current_user: User = Depends(get_current_member),
    service: AccountService = Depends(get_account_service),
):
    """Get the current member's trainer"""
    trainer = service.get_trainer_for_member(current_user)
    return TrainerResponse(id=trainer.id, name=trainer.name, email=trainer.email, role=trainer.role)


@members_router.delete("/{member_id}")
async def delete_member(
    member_id: int,
    current_user: User = Depends(get_current_trainer),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Delete one of the trainer's members along with their sessions and comments"""
    service.delete_member(member_id, current_user.id)
    return {"success": True, "message": "Member deleted"}
