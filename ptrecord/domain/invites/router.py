"""Invite router - FastAPI endpoints for trainer invite codes"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_trainer
from ...database import get_db
from ...models import InviteCode, User
from .schemas import InviteCodeResponse
from .service import InviteCodeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invites", tags=["Invites"])


def get_invite_service(db: Session = Depends(get_db)) -> InviteCodeService:
    """Dependency injection for InviteCodeService"""
    return InviteCodeService(db)


def _invite_response(invite: InviteCode) -> InviteCodeResponse:
    return InviteCodeResponse(
        id=invite.id,
        code=invite.code,
        trainerId=invite.trainer_id,
        expiresAt=invite.expires_at,
        used=invite.used,
        isValid=invite.is_valid(),
        createdAt=invite.created_at,
    )


@router.post("", response_model=InviteCodeResponse)
async def create_invite_code(
    current_user: User = Depends(get_current_trainer),
    service: InviteCodeService = Depends(get_invite_service),
):
    """Issue a new single-use invite code for onboarding a member"""
    return _invite_response(service.create_invite_code(current_user))


@router.get("", response_model=list[InviteCodeResponse])
async def list_invite_codes(
    current_user: User = Depends(get_current_trainer),
    service: InviteCodeService = Depends(get_invite_service),
):
    """List invite codes issued by the current trainer"""
    return [_invite_response(i) for i in service.list_invite_codes(current_user)]
