"""Scheduling service - Session proposals, rescheduling and dual confirmation

A session occupies a (trainer, date, start time) slot and a trainer can hold
at most one session per slot. The engine checks the slot before writing so it
can name the member already booked there; the unique constraint on the table
catches whatever slips between that check and the insert.
"""

import logging
from datetime import date, timedelta
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import MAX_REPEAT_WEEKS
from ...models import PTSession, Role, User
from ...shared.exceptions import ConflictError, ForbiddenError, NotFoundError, SlotConflictError, ValidationError
from ...shared.timeutils import utcnow
from ..accounts.repository import AccountRepository
from ..comments.repository import CommentRepository
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SchedulingService:
    """Service layer for PT session business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SessionRepository()
        self.accounts = AccountRepository()
        self.comments = CommentRepository()

    # ========================================================================
    # LOOKUPS
    # ========================================================================

    def get_session(self, session_id: int) -> PTSession:
        session = self.repo.find_session_by_id(self.db, session_id)
        if not session:
            raise NotFoundError("Session not found")
        return session

    def get_session_for_user(self, session_id: int, user: User) -> PTSession:
        """Get a session the caller is a party to (admins see everything)"""
        session = self.get_session(session_id)
        if user.is_admin or user.id in (session.trainer_id, session.member_id):
            return session
        raise ForbiddenError("You do not have access to this session")

    def list_sessions(self, user: User) -> list[PTSession]:
        """List the caller's sessions"""
        if user.is_trainer:
            return self.repo.list_sessions_by_trainer(self.db, user.id)
        if user.is_member:
            return self.repo.list_sessions_by_member(self.db, user.id)
        return self.repo.list_all(self.db)

    # ========================================================================
    # CREATION
    # ========================================================================

    def _get_owned_member(self, member_id: int, trainer_id: int) -> User:
        member = self.accounts.find_by_id(self.db, member_id)
        if not member or not member.is_member:
            raise NotFoundError("Member not found")
        if member.trainer_id != trainer_id:
            logger.warning(f"⚠️ Trainer {trainer_id} tried to act on member {member_id} of another trainer")
            raise ForbiddenError("This member is not assigned to you")
        return member

    def _check_slot(
        self, trainer_id: int, session_date: date, start_time: str, exclude_id: Optional[int] = None
    ) -> None:
        """Raise SlotConflictError if the trainer's slot is taken by another session"""
        existing = self.repo.find_session(self.db, trainer_id, session_date, start_time)
        if existing and existing.id != exclude_id:
            member_name = existing.member.name if existing.member else None
            logger.warning(
                f"⚠️ Slot conflict for trainer {trainer_id} on {session_date} {start_time} "
                f"(session {existing.id})"
            )
            raise SlotConflictError(session_date.isoformat(), start_time, member_name)

    def _insert_session(self, trainer_id: int, member_id: int, session_date: date, start_time: str) -> PTSession:
        self._check_slot(trainer_id, session_date, start_time)
        try:
            # The trainer proposes the slot, so the trainer side starts confirmed
            return self.repo.create_session(
                self.db,
                trainer_id=trainer_id,
                member_id=member_id,
                date=session_date,
                start_time=start_time,
                trainer_confirmed=True,
                member_confirmed=False,
                confirmed_at=None,
            )
        except IntegrityError as e:
            # Another request took the slot between the check and the insert
            self.db.rollback()
            self._check_slot(trainer_id, session_date, start_time)
            # Slot is free, so the member or trainer row went away underneath us
            logger.warning(f"⚠️ Session insert for member {member_id} rejected by storage: {e.orig}")
            raise NotFoundError("Member not found") from e

    def create_session(self, trainer_id: int, member_id: int, session_date: date, start_time: str) -> PTSession:
        """Propose a single session in a free slot"""
        logger.info(f"📥 Creating session for trainer {trainer_id}, member {member_id} on {session_date} {start_time}")
        self._get_owned_member(member_id, trainer_id)

        session = self._insert_session(trainer_id, member_id, session_date, start_time)
        logger.info(f"✅ Session {session.id} created")
        return session

    def create_repeat_sessions(
        self, trainer_id: int, member_id: int, start_date: date, start_time: str, week_count: int
    ) -> tuple[list[PTSession], list[str]]:
        """
        Propose the same slot on ``week_count`` consecutive weeks.

        Dates whose slot is already taken are skipped and reported; every
        other week is booked and committed on its own.

        Returns:
            (created sessions, ISO dates that were skipped)
        """
        if week_count < 1:
            raise ValidationError("Week count must be at least 1")
        if week_count > MAX_REPEAT_WEEKS:
            raise ValidationError(f"Week count must not exceed {MAX_REPEAT_WEEKS}")

        self._get_owned_member(member_id, trainer_id)

        created: list[PTSession] = []
        failed: list[str] = []
        for week in range(week_count):
            session_date = start_date + timedelta(weeks=week)
            try:
                created.append(self._insert_session(trainer_id, member_id, session_date, start_time))
            except SlotConflictError:
                failed.append(session_date.isoformat())

        logger.info(
            f"✅ Repeat booking for trainer {trainer_id}, member {member_id}: "
            f"{len(created)} created, {len(failed)} skipped"
        )
        return created, failed

    # ========================================================================
    # CONFIRMATION
    # ========================================================================

    def confirm_session(self, session_id: int, requester_id: int, role: Union[Role, str]) -> PTSession:
        """
        Confirm a session on behalf of one party.

        Confirming an already confirmed side is a no-op. ``confirmed_at`` is
        stamped the first time both sides are confirmed and never touched again.
        """
        session = self.get_session(session_id)

        try:
            role = Role(role)
        except ValueError:
            raise ForbiddenError("Only the session's trainer or member can confirm it")

        updates = {}
        if role == Role.TRAINER:
            if session.trainer_id != requester_id:
                logger.warning(f"⚠️ Trainer {requester_id} tried to confirm session {session_id}")
                raise ForbiddenError("Only the session's trainer can confirm as trainer")
            if not session.trainer_confirmed:
                updates["trainer_confirmed"] = True
        elif role == Role.MEMBER:
            if session.member_id != requester_id:
                logger.warning(f"⚠️ Member {requester_id} tried to confirm session {session_id}")
                raise ForbiddenError("Only the session's member can confirm as member")
            if not session.member_confirmed:
                updates["member_confirmed"] = True
        else:
            raise ForbiddenError("Only the session's trainer or member can confirm it")

        if not updates:
            return session

        trainer_confirmed = updates.get("trainer_confirmed", session.trainer_confirmed)
        member_confirmed = updates.get("member_confirmed", session.member_confirmed)
        if trainer_confirmed and member_confirmed and session.confirmed_at is None:
            updates["confirmed_at"] = utcnow()

        session = self.repo.update_session(self.db, session, **updates)
        logger.info(f"✅ Session {session.id} confirmed by {role.value} {requester_id} (status: {session.status.value})")
        return session

    # ========================================================================
    # RESCHEDULING
    # ========================================================================

    def update_session(
        self, session_id: int, trainer_id: int, new_start_time: str, new_date: Optional[date] = None
    ) -> PTSession:
        """
        Move a session to a new start time and optionally a new date.

        Any change to the (date, start time) pair is checked against the
        trainer's other sessions. Confirmation flags are left as they are.
        """
        session = self.get_session(session_id)
        if session.trainer_id != trainer_id:
            logger.warning(f"⚠️ Trainer {trainer_id} tried to edit session {session_id}")
            raise ForbiddenError("Only the session's trainer can edit it")

        target_date = new_date or session.date
        if (target_date, new_start_time) != (session.date, session.start_time):
            self._check_slot(trainer_id, target_date, new_start_time, exclude_id=session.id)

        try:
            session = self.repo.update_session(
                self.db, session, date=target_date, start_time=new_start_time
            )
        except IntegrityError as e:
            self.db.rollback()
            self._check_slot(trainer_id, target_date, new_start_time, exclude_id=session_id)
            logger.warning(f"⚠️ Reschedule of session {session_id} rejected by storage: {e.orig}")
            raise ConflictError("Session could not be rescheduled") from e

        logger.info(f"✅ Session {session.id} moved to {session.date} {session.start_time}")
        return session

    # ========================================================================
    # DELETION
    # ========================================================================

    def delete_session(self, session_id: int, trainer_id: int) -> None:
        """Cancel a session together with its comments"""
        session = self.get_session(session_id)
        if session.trainer_id != trainer_id:
            logger.warning(f"⚠️ Trainer {trainer_id} tried to delete session {session_id}")
            raise ForbiddenError("Only the session's trainer can cancel it")

        self.purge_sessions([session.id])
        self.db.commit()
        logger.info(f"🗑️ Session {session_id} deleted by trainer {trainer_id}")

    def delete_member(self, member_id: int, trainer_id: int) -> None:
        """Delete a member account with all of their sessions and those sessions' comments"""
        member = self._get_owned_member(member_id, trainer_id)

        session_ids = self.repo.list_session_ids_for_member(self.db, member.id)
        self.purge_sessions(session_ids)
        self.accounts.delete_user(self.db, member)
        self.db.commit()
        logger.info(f"🗑️ Member {member_id} deleted by trainer {trainer_id} ({len(session_ids)} sessions removed)")

    def purge_sessions(self, session_ids: list[int]) -> int:
        """Delete sessions and their comments without committing"""
        self.comments.delete_by_session_ids(self.db, session_ids)
        deleted = self.repo.delete_sessions_by_ids(self.db, session_ids)

        # Bulk deletes skip the identity map; detach loaded copies so they stay readable
        for session_id in session_ids:
            loaded = self.db.identity_map.get(self.db.identity_key(PTSession, session_id))
            if loaded is not None:
                self.db.expunge(loaded)
        return deleted
