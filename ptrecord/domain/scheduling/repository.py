"""Scheduling repository - Database operations for PT sessions"""

from datetime import date
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...models import PTSession


class SessionRepository:
    """Repository for PT session database operations"""

    @staticmethod
    def find_session(db: Session, trainer_id: int, session_date: date, start_time: str) -> Optional[PTSession]:
        """Get the session occupying a trainer's slot, if any"""
        return (
            db.query(PTSession)
            .options(joinedload(PTSession.member))
            .filter(
                PTSession.trainer_id == trainer_id,
                PTSession.date == session_date,
                PTSession.start_time == start_time,
            )
            .first()
        )

    @staticmethod
    def find_session_by_id(db: Session, session_id: int) -> Optional[PTSession]:
        return db.query(PTSession).filter(PTSession.id == session_id).first()

    @staticmethod
    def create_session(db: Session, **session_data) -> PTSession:
        """Create a new session"""
        session = PTSession(**session_data)
        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def update_session(db: Session, session: PTSession, **updates) -> PTSession:
        """Update a session with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(session, key):
                setattr(session, key, value)

        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def delete_session(db: Session, session: PTSession) -> None:
        """Delete a session without committing"""
        db.delete(session)

    @staticmethod
    def list_sessions_by_trainer(db: Session, trainer_id: int) -> list[PTSession]:
        """Get a trainer's sessions, latest day first and earliest slot first within a day"""
        return (
            db.query(PTSession)
            .options(joinedload(PTSession.member))
            .filter(PTSession.trainer_id == trainer_id)
            .order_by(PTSession.date.desc(), PTSession.start_time.asc())
            .all()
        )

    @staticmethod
    def list_sessions_by_member(db: Session, member_id: int) -> list[PTSession]:
        """Get a member's sessions, latest day first and earliest slot first within a day"""
        return (
            db.query(PTSession)
            .options(joinedload(PTSession.trainer))
            .filter(PTSession.member_id == member_id)
            .order_by(PTSession.date.desc(), PTSession.start_time.asc())
            .all()
        )

    @staticmethod
    def list_all(db: Session) -> list[PTSession]:
        return (
            db.query(PTSession)
            .options(joinedload(PTSession.trainer), joinedload(PTSession.member))
            .order_by(PTSession.date.desc(), PTSession.start_time.asc())
            .all()
        )

    @staticmethod
    def list_session_ids_for_user(db: Session, user_id: int) -> list[int]:
        """Ids of every session where the user is the trainer or the member"""
        rows = (
            db.query(PTSession.id)
            .filter(or_(PTSession.trainer_id == user_id, PTSession.member_id == user_id))
            .all()
        )
        return [row.id for row in rows]

    @staticmethod
    def list_session_ids_for_member(db: Session, member_id: int) -> list[int]:
        rows = db.query(PTSession.id).filter(PTSession.member_id == member_id).all()
        return [row.id for row in rows]

    @staticmethod
    def delete_sessions_by_ids(db: Session, session_ids: list[int]) -> int:
        """Bulk delete sessions without committing"""
        if not session_ids:
            return 0
        return (
            db.query(PTSession)
            .filter(PTSession.id.in_(session_ids))
            .delete(synchronize_session=False)
        )

    @staticmethod
    def count_all(db: Session) -> int:
        return db.query(PTSession).count()

    @staticmethod
    def count_confirmed(db: Session) -> int:
        return (
            db.query(PTSession)
            .filter(PTSession.trainer_confirmed.is_(True), PTSession.member_confirmed.is_(True))
            .count()
        )

    @staticmethod
    def count_by_trainer(db: Session, trainer_id: int) -> int:
        return db.query(PTSession).filter(PTSession.trainer_id == trainer_id).count()

    @staticmethod
    def count_by_member(db: Session, member_id: int) -> int:
        return db.query(PTSession).filter(PTSession.member_id == member_id).count()
