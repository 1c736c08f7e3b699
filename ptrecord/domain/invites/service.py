"""Invite code service - Issuing and redeeming trainer invite codes"""

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from ...config import INVITE_CODE_LENGTH, INVITE_CODE_TTL_DAYS
from ...models import InviteCode, User
from ...security_utils import generate_invite_code
from ...shared.exceptions import AlreadyUsedError, ExpiredError, NotFoundError
from ...shared.timeutils import utcnow
from .repository import InviteCodeRepository

logger = logging.getLogger(__name__)

MAX_GENERATION_ATTEMPTS = 5


class InviteCodeService:
    """Service layer for invite code business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InviteCodeRepository()

    def create_invite_code(self, trainer: User) -> InviteCode:
        """Issue a fresh invite code valid for INVITE_CODE_TTL_DAYS"""
        code = generate_invite_code(INVITE_CODE_LENGTH)
        attempts = 1
        while self.repo.code_exists(self.db, code):
            if attempts >= MAX_GENERATION_ATTEMPTS:
                raise RuntimeError("Unable to generate a unique invite code")
            code = generate_invite_code(INVITE_CODE_LENGTH)
            attempts += 1

        expires_at = utcnow() + timedelta(days=INVITE_CODE_TTL_DAYS)
        invite = self.repo.create_invite_code(self.db, trainer.id, code, expires_at)
        logger.info(f"🎟️ Trainer {trainer.id} issued invite code {invite.id} (expires {expires_at:%Y-%m-%d})")
        return invite

    def list_invite_codes(self, trainer: User) -> list[InviteCode]:
        return self.repo.list_by_trainer(self.db, trainer.id)

    def get_valid_invite(self, code: str) -> InviteCode:
        """
        Resolve a code that can still be redeemed.

        Raises NotFoundError, AlreadyUsedError or ExpiredError otherwise.
        """
        invite = self.repo.find_by_code(self.db, code.strip())
        if not invite:
            logger.warning("⚠️ Registration attempted with unknown invite code")
            raise NotFoundError("Invalid invite code")
        if invite.used:
            logger.warning(f"⚠️ Registration attempted with used invite code {invite.id}")
            raise AlreadyUsedError()
        if invite.is_expired():
            logger.warning(f"⚠️ Registration attempted with expired invite code {invite.id}")
            raise ExpiredError()
        return invite

    def consume(self, invite: InviteCode) -> None:
        """Mark a code used inside the caller's transaction"""
        if not self.repo.mark_used(self.db, invite.id):
            raise AlreadyUsedError()
