"""Invite code repository - Database operations for invite codes"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import InviteCode


class InviteCodeRepository:
    """Repository for invite code database operations"""

    @staticmethod
    def find_by_code(db: Session, code: str) -> Optional[InviteCode]:
        """Get an invite code by its code string"""
        return db.query(InviteCode).filter(InviteCode.code == code).first()

    @staticmethod
    def code_exists(db: Session, code: str) -> bool:
        return db.query(InviteCode.id).filter(InviteCode.code == code).first() is not None

    @staticmethod
    def list_by_trainer(db: Session, trainer_id: int) -> list[InviteCode]:
        """Get all invite codes issued by a trainer"""
        return (
            db.query(InviteCode)
            .filter(InviteCode.trainer_id == trainer_id)
            .order_by(InviteCode.created_at.desc(), InviteCode.id.desc())
            .all()
        )

    @staticmethod
    def create_invite_code(db: Session, trainer_id: int, code: str, expires_at: datetime) -> InviteCode:
        """Create a new invite code"""
        invite = InviteCode(code=code, trainer_id=trainer_id, expires_at=expires_at, used=False)
        db.add(invite)
        db.commit()
        db.refresh(invite)
        return invite

    @staticmethod
    def mark_used(db: Session, invite_id: int) -> bool:
        """
        Flip used from false to true without committing.

        Returns False when the code was already consumed, so two concurrent
        registrations can never both redeem it.
        """
        updated = (
            db.query(InviteCode)
            .filter(InviteCode.id == invite_id, InviteCode.used.is_(False))
            .update({InviteCode.used: True}, synchronize_session="fetch")
        )
        return updated == 1

    @staticmethod
    def delete_by_trainer(db: Session, trainer_id: int) -> int:
        """Delete all invite codes issued by a trainer without committing"""
        return (
            db.query(InviteCode)
            .filter(InviteCode.trainer_id == trainer_id)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def count_all(db: Session) -> int:
        return db.query(InviteCode).count()

    @staticmethod
    def count_active(db: Session, now: datetime) -> int:
        return (
            db.query(InviteCode)
            .filter(InviteCode.used.is_(False), InviteCode.expires_at >= now)
            .count()
        )
