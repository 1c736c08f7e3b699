"""Comment service - Business logic for session comments"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Comment, PTSession, User
from ...shared.exceptions import ForbiddenError, NotFoundError, ValidationError
from ...shared.timeutils import utcnow
from ..scheduling.repository import SessionRepository
from .repository import CommentRepository

logger = logging.getLogger(__name__)


def _clean_content(content: Optional[str]) -> str:
    if content is None or not content.strip():
        raise ValidationError("Comment content must not be empty")
    return content.strip()


class CommentService:
    """Service layer for comment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CommentRepository()
        self.sessions = SessionRepository()

    def _get_session(self, session_id: int) -> PTSession:
        session = self.sessions.find_session_by_id(self.db, session_id)
        if not session:
            raise NotFoundError("Session not found")
        return session

    def _get_own_comment(self, comment_id: int, trainer_id: int) -> Comment:
        comment = self.repo.find_by_id(self.db, comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        if comment.trainer_id != trainer_id:
            logger.warning(f"⚠️ Trainer {trainer_id} tried to modify comment {comment_id}")
            raise ForbiddenError("Only the comment's author can modify it")
        return comment

    def list_comments(self, session_id: int, user: User) -> list[Comment]:
        """
        List a session's comments for the caller.

        The session's trainer sees everything, the session's member only
        sees public comments.
        """
        session = self._get_session(session_id)

        if user.id == session.trainer_id or user.is_admin:
            return self.repo.list_by_session(self.db, session_id)
        if user.id == session.member_id:
            return self.repo.list_by_session(self.db, session_id, public_only=True)

        raise ForbiddenError("You do not have access to this session's comments")

    def create_comment(self, session_id: int, trainer_id: int, content: str, is_public: bool = True) -> Comment:
        """Add a comment to one of the trainer's sessions"""
        content = _clean_content(content)
        session = self._get_session(session_id)
        if session.trainer_id != trainer_id:
            logger.warning(f"⚠️ Trainer {trainer_id} tried to comment on session {session_id}")
            raise ForbiddenError("Only the session's trainer can comment on it")

        comment = self.repo.create_comment(
            self.db,
            session_id=session_id,
            trainer_id=trainer_id,
            content=content,
            is_public=is_public,
        )
        logger.info(f"💬 Comment {comment.id} added to session {session_id} (public={is_public})")
        return comment

    def update_comment(
        self, comment_id: int, trainer_id: int, content: str, is_public: Optional[bool] = None
    ) -> Comment:
        content = _clean_content(content)
        comment = self._get_own_comment(comment_id, trainer_id)

        return self.repo.update_comment(
            self.db, comment, content=content, is_public=is_public, updated_at=utcnow()
        )

    def delete_comment(self, comment_id: int, trainer_id: int) -> None:
        comment = self._get_own_comment(comment_id, trainer_id)
        self.repo.delete_comment(self.db, comment)
        logger.info(f"🗑️ Comment {comment_id} deleted by trainer {trainer_id}")
