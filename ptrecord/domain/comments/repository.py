"""Comment repository - Database operations for session comments"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Comment


class CommentRepository:
    """Repository for comment database operations"""

    @staticmethod
    def find_by_id(db: Session, comment_id: int) -> Optional[Comment]:
        return db.query(Comment).filter(Comment.id == comment_id).first()

    @staticmethod
    def list_by_session(db: Session, session_id: int, public_only: bool = False) -> list[Comment]:
        """Get a session's comments, newest first"""
        query = db.query(Comment).filter(Comment.session_id == session_id)

        if public_only:
            query = query.filter(Comment.is_public.is_(True))

        return query.order_by(Comment.created_at.desc(), Comment.id.desc()).all()

    @staticmethod
    def list_all(db: Session) -> list[Comment]:
        return (
            db.query(Comment)
            .options(joinedload(Comment.trainer), joinedload(Comment.session))
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )

    @staticmethod
    def create_comment(db: Session, **comment_data) -> Comment:
        """Create a new comment"""
        comment = Comment(**comment_data)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        return comment

    @staticmethod
    def update_comment(db: Session, comment: Comment, **updates) -> Comment:
        """Update a comment with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(comment, key):
                setattr(comment, key, value)

        db.commit()
        db.refresh(comment)
        return comment

    @staticmethod
    def delete_comment(db: Session, comment: Comment) -> None:
        """Delete a comment"""
        db.delete(comment)
        db.commit()

    @staticmethod
    def delete_by_session_ids(db: Session, session_ids: list[int]) -> int:
        """Bulk delete every comment attached to the given sessions without committing"""
        if not session_ids:
            return 0
        return (
            db.query(Comment)
            .filter(Comment.session_id.in_(session_ids))
            .delete(synchronize_session=False)
        )

    @staticmethod
    def delete_by_trainer(db: Session, trainer_id: int) -> int:
        """Bulk delete every comment a trainer authored without committing"""
        return (
            db.query(Comment)
            .filter(Comment.trainer_id == trainer_id)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def count_all(db: Session) -> int:
        return db.query(Comment).count()
