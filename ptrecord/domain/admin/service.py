"""Admin service - Account audit, pruning and statistics"""

import logging

from sqlalchemy.orm import Session

from ...models import Comment, PTSession, Role, User
from ...shared.exceptions import NotFoundError, ValidationError
from ...shared.timeutils import utcnow
from ..accounts.repository import AccountRepository
from ..comments.repository import CommentRepository
from ..invites.repository import InviteCodeRepository
from ..scheduling.repository import SessionRepository
from ..scheduling.service import SchedulingService

logger = logging.getLogger(__name__)


class AdminService:
    """Service layer for administrator operations"""

    def __init__(self, db: Session):
        self.db = db
        self.accounts = AccountRepository()
        self.sessions = SessionRepository()
        self.comments = CommentRepository()
        self.invites = InviteCodeRepository()
        self.scheduling = SchedulingService(db)

    def list_users(self) -> list[User]:
        return self.accounts.list_all(self.db)

    def list_sessions(self) -> list[PTSession]:
        return self.sessions.list_all(self.db)

    def list_comments(self) -> list[Comment]:
        return self.comments.list_all(self.db)

    def delete_user(self, user_id: int, admin: User) -> None:
        """
        Delete any account with everything hanging off it.

        Removes the sessions the user trains or attends (with their comments),
        the comments they wrote and the invite codes they issued. Members of a
        deleted trainer stay, with no trainer assigned.
        """
        if user_id == admin.id:
            raise ValidationError("Administrators cannot delete their own account")

        user = self.accounts.find_by_id(self.db, user_id)
        if not user:
            raise NotFoundError("User not found")

        role = user.role
        session_ids = self.sessions.list_session_ids_for_user(self.db, user.id)
        self.scheduling.purge_sessions(session_ids)
        self.comments.delete_by_trainer(self.db, user.id)
        self.invites.delete_by_trainer(self.db, user.id)
        orphaned = self.accounts.clear_trainer_reference(self.db, user.id)
        self.accounts.delete_user(self.db, user)
        self.db.commit()

        logger.info(
            f"🗑️ Admin {admin.id} deleted user {user_id} ({role}): "
            f"{len(session_ids)} sessions removed, {orphaned} members detached"
        )

    def delete_session(self, session_id: int, admin: User) -> None:
        """Delete any session together with its comments"""
        self.scheduling.get_session(session_id)
        self.scheduling.purge_sessions([session_id])
        self.db.commit()
        logger.info(f"🗑️ Admin {admin.id} deleted session {session_id}")

    def get_stats(self) -> dict:
        total_sessions = self.sessions.count_all(self.db)
        confirmed_sessions = self.sessions.count_confirmed(self.db)

        return {
            "totalUsers": self.accounts.count_by_role(self.db),
            "totalTrainers": self.accounts.count_by_role(self.db, Role.TRAINER),
            "totalMembers": self.accounts.count_by_role(self.db, Role.MEMBER),
            "totalSessions": total_sessions,
            "confirmedSessions": confirmed_sessions,
            "pendingSessions": total_sessions - confirmed_sessions,
            "totalComments": self.comments.count_all(self.db),
            "totalInviteCodes": self.invites.count_all(self.db),
            "activeInviteCodes": self.invites.count_active(self.db, utcnow()),
        }

    def get_trainer_overview(self) -> list[dict]:
        """Every trainer with the size of their roster and schedule"""
        return [
            {
                "id": t.id,
                "name": t.name,
                "email": t.email,
                "memberCount": len(self.accounts.list_members_by_trainer(self.db, t.id)),
                "sessionCount": self.sessions.count_by_trainer(self.db, t.id),
                "createdAt": t.created_at,
            }
            for t in self.accounts.list_by_role(self.db, Role.TRAINER)
        ]

    def get_member_overview(self) -> list[dict]:
        """Every member with their trainer and number of sessions"""
        return [
            {
                "id": m.id,
                "name": m.name,
                "email": m.email,
                "trainerId": m.trainer_id,
                "trainerName": m.trainer.name if m.trainer else None,
                "sessionCount": self.sessions.count_by_member(self.db, m.id),
                "createdAt": m.created_at,
            }
            for m in self.accounts.list_by_role(self.db, Role.MEMBER)
        ]
