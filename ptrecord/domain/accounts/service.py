"""Account service - Registration, login and member roster logic"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Role, User
from ...security_utils import create_access_token, hash_password, verify_password
from ...shared.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..invites.service import InviteCodeService
from .repository import AccountRepository
from .schemas import LoginRequest, RegisterRequest

logger = logging.getLogger(__name__)


class AccountService:
    """Service layer for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository()
        self.invites = InviteCodeService(db)

    def register(self, data: RegisterRequest) -> User:
        """
        Register a trainer or member account.

        Members must redeem a valid invite code; the code is consumed and the
        account created in a single transaction, and the code's issuer becomes
        the member's owning trainer.
        """
        logger.info(f"📥 Registering {data.role} account: {data.email}")

        if self.repo.find_by_email(self.db, data.email):
            logger.warning(f"⚠️ Registration rejected, email already in use: {data.email}")
            raise ConflictError("Email is already in use")

        trainer_id = None
        if data.role == Role.MEMBER.value:
            if not data.inviteCode or not data.inviteCode.strip():
                raise ValidationError("An invite code is required to register as a member")

            invite = self.invites.get_valid_invite(data.inviteCode)
            trainer_id = invite.trainer_id
            self.invites.consume(invite)

        user = self.repo.build_user(
            self.db,
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
            trainer_id=trainer_id,
        )
        try:
            self.db.commit()
        except IntegrityError as e:
            # Email taken between the lookup and the insert
            self.db.rollback()
            logger.warning(f"⚠️ Registration race on email {data.email}")
            raise ConflictError("Email is already in use") from e

        self.db.refresh(user)
        logger.info(f"✅ Registered user {user.id} ({user.role})")
        return user

    def login(self, data: LoginRequest) -> tuple[str, User]:
        """Check credentials and issue an access token"""
        user = self.repo.find_by_email(self.db, data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning(f"⚠️ Failed login for {data.email}")
            raise AuthenticationError("Incorrect email or password")

        token = create_access_token(user.id, user.role)
        logger.info(f"🔑 User {user.id} logged in")
        return token, user

    def list_members(self, trainer: User) -> list[User]:
        return self.repo.list_members_by_trainer(self.db, trainer.id)

    def get_trainer_for_member(self, member: User) -> User:
        """Get the member's owning trainer"""
        if not member.trainer_id:
            raise NotFoundError("No trainer is assigned to this member")

        trainer = self.repo.find_by_id(self.db, member.trainer_id)
        if not trainer:
            raise NotFoundError("Trainer not found")
        return trainer

    def ensure_admin(self, email: str, password: str, name: str) -> User:
        """Create the admin account if it does not exist yet"""
        email = email.strip().lower()
        existing = self.repo.find_by_email(self.db, email)
        if existing:
            if not existing.is_admin:
                raise ConflictError(f"{email} is already registered as a {existing.role}")
            logger.info(f"Admin account already exists: {email}")
            return existing

        admin = self.repo.create_user(
            self.db,
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=Role.ADMIN.value,
        )
        logger.info(f"✅ Admin account created: {email}")
        return admin
