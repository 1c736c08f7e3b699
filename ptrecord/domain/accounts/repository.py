"""Account repository - Database operations for users"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Role, User


class AccountRepository:
    """Repository for account database operations"""

    @staticmethod
    def find_by_id(db: Session, user_id: int) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def build_user(db: Session, **user_data) -> User:
        """Stage a new user in the session without committing"""
        user = User(**user_data)
        db.add(user)
        return user

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        """Create a new user"""
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def list_members_by_trainer(db: Session, trainer_id: int) -> list[User]:
        """Get all members owned by a trainer, newest first"""
        return (
            db.query(User)
            .filter(User.role == Role.MEMBER.value, User.trainer_id == trainer_id)
            .order_by(User.created_at.desc(), User.id.desc())
            .all()
        )

    @staticmethod
    def list_all(db: Session) -> list[User]:
        return db.query(User).order_by(User.id.asc()).all()

    @staticmethod
    def list_by_role(db: Session, role: Role) -> list[User]:
        return db.query(User).filter(User.role == role.value).order_by(User.id.asc()).all()

    @staticmethod
    def count_by_role(db: Session, role: Optional[Role] = None) -> int:
        query = db.query(User)
        if role:
            query = query.filter(User.role == role.value)
        return query.count()

    @staticmethod
    def clear_trainer_reference(db: Session, trainer_id: int) -> int:
        """Detach members from a trainer that is being deleted, without committing"""
        return (
            db.query(User)
            .filter(User.trainer_id == trainer_id)
            .update({User.trainer_id: None}, synchronize_session=False)
        )

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        """Delete a user without committing"""
        db.delete(user)
