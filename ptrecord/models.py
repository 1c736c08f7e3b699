import enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base
from .shared.timeutils import utcnow


class Role(str, enum.Enum):
    ADMIN = "admin"
    TRAINER = "trainer"
    MEMBER = "member"


class SessionStatus(str, enum.Enum):
    UNCONFIRMED = "unconfirmed"
    TRAINER_CONFIRMED = "trainer_confirmed"
    MEMBER_CONFIRMED = "member_confirmed"
    CONFIRMED = "confirmed"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # admin, trainer, member
    # Set once at registration from the consumed invite code (members only)
    trainer_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    trainer = relationship("User", remote_side=[id], foreign_keys=[trainer_id])

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_trainer(self) -> bool:
        return self.role == Role.TRAINER.value

    @property
    def is_member(self) -> bool:
        return self.role == Role.MEMBER.value


class InviteCode(Base):
    __tablename__ = "invite_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), unique=True, index=True, nullable=False)
    trainer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def is_expired(self, now=None) -> bool:
        return self.expires_at < (now or utcnow())

    def is_valid(self, now=None) -> bool:
        """A code is valid iff it is unused and not expired"""
        return not self.used and not self.is_expired(now)


class PTSession(Base):
    __tablename__ = "pt_sessions"
    # A trainer cannot be double-booked
    __table_args__ = (
        UniqueConstraint("trainer_id", "date", "start_time", name="uq_pt_sessions_trainer_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    trainer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM format
    trainer_confirmed = Column(Boolean, default=False, nullable=False)
    member_confirmed = Column(Boolean, default=False, nullable=False)
    confirmed_at = Column(DateTime, nullable=True)  # latched the first time both flags are true
    created_at = Column(DateTime, default=utcnow, nullable=False)

    trainer = relationship("User", foreign_keys=[trainer_id])
    member = relationship("User", foreign_keys=[member_id])

    @property
    def status(self) -> SessionStatus:
        if self.trainer_confirmed and self.member_confirmed:
            return SessionStatus.CONFIRMED
        if self.trainer_confirmed:
            return SessionStatus.TRAINER_CONFIRMED
        if self.member_confirmed:
            return SessionStatus.MEMBER_CONFIRMED
        return SessionStatus.UNCONFIRMED


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(
        Integer, ForeignKey("pt_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    trainer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_public = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    session = relationship("PTSession")
    trainer = relationship("User")
