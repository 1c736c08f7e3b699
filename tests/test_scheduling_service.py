"""Tests for the scheduling engine: slots, weekly batches and dual confirmation."""
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from ptrecord.config import MAX_REPEAT_WEEKS
from ptrecord.domain.comments.service import CommentService
from ptrecord.domain.scheduling.repository import SessionRepository
from ptrecord.domain.scheduling.service import SchedulingService
from ptrecord.models import Comment, PTSession, Role, SessionStatus, User
from ptrecord.shared.exceptions import (
    ForbiddenError,
    NotFoundError,
    SlotConflictError,
    ValidationError,
)

JAN_1 = date(2024, 1, 1)
JAN_8 = date(2024, 1, 8)


@pytest.fixture
def service(db_session):
    return SchedulingService(db_session)


# =============================================================================
# CreateSession
# =============================================================================


def test_create_session_trainer_side_starts_confirmed(service, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")

    assert session.id is not None
    assert session.trainer_confirmed is True
    assert session.member_confirmed is False
    assert session.confirmed_at is None
    assert session.status == SessionStatus.TRAINER_CONFIRMED


def test_create_session_conflict_names_booked_member(service, make_user, trainer, member):
    other = make_user(Role.MEMBER, name="Olly Other", trainer=trainer)
    service.create_session(trainer.id, member.id, JAN_1, "09:00")

    with pytest.raises(SlotConflictError) as exc_info:
        service.create_session(trainer.id, other.id, JAN_1, "09:00")

    assert exc_info.value.existing_member == "Mia Member"
    assert exc_info.value.status_code == 409
    assert exc_info.value.extra["conflictInfo"] == {
        "date": "2024-01-01",
        "startTime": "09:00",
        "existingMember": "Mia Member",
    }


def test_create_session_same_slot_for_different_trainers(service, make_user, trainer, member):
    trainer_b = make_user(Role.TRAINER)
    member_b = make_user(Role.MEMBER, trainer=trainer_b)

    service.create_session(trainer.id, member.id, JAN_1, "09:00")
    service.create_session(trainer_b.id, member_b.id, JAN_1, "09:00")

    assert service.repo.count_all(service.db) == 2


def test_create_session_rejects_member_of_other_trainer(service, make_user, trainer):
    trainer_b = make_user(Role.TRAINER)
    stranger = make_user(Role.MEMBER, trainer=trainer_b)

    with pytest.raises(ForbiddenError):
        service.create_session(trainer.id, stranger.id, JAN_1, "09:00")


def test_create_session_unknown_member(service, trainer):
    with pytest.raises(NotFoundError):
        service.create_session(trainer.id, 9999, JAN_1, "09:00")


def test_slot_unique_constraint_enforced_by_storage(db_session, trainer, member):
    db_session.add(PTSession(trainer_id=trainer.id, member_id=member.id, date=JAN_1, start_time="09:00"))
    db_session.commit()
    db_session.add(PTSession(trainer_id=trainer.id, member_id=member.id, date=JAN_1, start_time="09:00"))

    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def _stale_first_lookup(monkeypatch, service):
    """Make the first slot lookup miss, as if a concurrent insert landed right after it"""
    real_find = SessionRepository.find_session
    calls = []

    def find_session(db, *args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return None
        return real_find(db, *args, **kwargs)

    monkeypatch.setattr(service.repo, "find_session", find_session)
    return calls


def test_create_session_maps_storage_conflict(monkeypatch, service, make_user, trainer, member):
    service.create_session(trainer.id, member.id, JAN_1, "09:00")
    other = make_user(Role.MEMBER, trainer=trainer)
    calls = _stale_first_lookup(monkeypatch, service)

    with pytest.raises(SlotConflictError) as exc:
        service.create_session(trainer.id, other.id, JAN_1, "09:00")

    assert len(calls) == 2
    assert exc.value.status_code == 409
    assert exc.value.to_dict()["conflictInfo"]["existingMember"] == "Mia Member"


def test_create_session_storage_failure_without_conflict(monkeypatch, service, trainer, member):
    def create_session(db, **fields):
        raise IntegrityError("INSERT INTO pt_sessions", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(service.repo, "create_session", create_session)

    with pytest.raises(NotFoundError):
        service.create_session(trainer.id, member.id, JAN_1, "09:00")


# =============================================================================
# CreateRepeatSessions
# =============================================================================


def test_repeat_sessions_books_every_week(service, trainer, member):
    created, failed = service.create_repeat_sessions(trainer.id, member.id, JAN_1, "09:00", 4)

    assert [s.date.isoformat() for s in created] == [
        "2024-01-01",
        "2024-01-08",
        "2024-01-15",
        "2024-01-22",
    ]
    assert failed == []
    assert all(s.start_time == "09:00" for s in created)


def test_repeat_sessions_skips_taken_week(service, make_user, trainer, member):
    other = make_user(Role.MEMBER, trainer=trainer)
    service.create_session(trainer.id, other.id, JAN_8, "09:00")

    created, failed = service.create_repeat_sessions(trainer.id, member.id, JAN_1, "09:00", 4)

    assert [s.date.isoformat() for s in created] == ["2024-01-01", "2024-01-15", "2024-01-22"]
    assert failed == ["2024-01-08"]


def test_repeat_sessions_rejects_too_many_weeks(service, trainer, member):
    with pytest.raises(ValidationError):
        service.create_repeat_sessions(trainer.id, member.id, JAN_1, "09:00", MAX_REPEAT_WEEKS + 1)


def test_repeat_sessions_rejects_zero_weeks(service, trainer, member):
    with pytest.raises(ValidationError):
        service.create_repeat_sessions(trainer.id, member.id, JAN_1, "09:00", 0)

    assert service.repo.count_all(service.db) == 0


def test_repeat_sessions_crosses_month_boundary(service, trainer, member):
    created, _ = service.create_repeat_sessions(trainer.id, member.id, date(2024, 2, 22), "18:30", 2)

    assert [s.date for s in created] == [date(2024, 2, 22), date(2024, 2, 29)]


# =============================================================================
# ConfirmSession
# =============================================================================


def test_member_confirmation_latches_confirmed_at(service, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")

    confirmed = service.confirm_session(session.id, member.id, "member")

    assert confirmed.member_confirmed is True
    assert confirmed.confirmed_at is not None
    assert confirmed.status == SessionStatus.CONFIRMED


def test_confirmation_is_idempotent_and_monotonic(service, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")
    first = service.confirm_session(session.id, member.id, Role.MEMBER)
    stamped_at = first.confirmed_at

    again = service.confirm_session(session.id, member.id, Role.MEMBER)
    trainer_again = service.confirm_session(session.id, trainer.id, Role.TRAINER)

    assert again.confirmed_at == stamped_at
    assert trainer_again.confirmed_at == stamped_at
    assert (trainer_again.trainer_confirmed, trainer_again.member_confirmed) == (True, True)


def test_trainer_confirmation_from_unconfirmed_state(db_session, service, trainer, member):
    session = PTSession(trainer_id=trainer.id, member_id=member.id, date=JAN_1, start_time="10:00")
    db_session.add(session)
    db_session.commit()
    assert session.status == SessionStatus.UNCONFIRMED

    updated = service.confirm_session(session.id, trainer.id, "trainer")

    assert updated.status == SessionStatus.TRAINER_CONFIRMED
    assert updated.confirmed_at is None


def test_confirm_by_foreign_trainer_is_forbidden(db_session, service, make_user, trainer, member):
    session = PTSession(trainer_id=trainer.id, member_id=member.id, date=JAN_1, start_time="10:00")
    db_session.add(session)
    db_session.commit()
    intruder = make_user(Role.TRAINER)

    with pytest.raises(ForbiddenError):
        service.confirm_session(session.id, intruder.id, "trainer")

    db_session.refresh(session)
    assert session.trainer_confirmed is False


def test_confirm_by_other_member_is_forbidden(service, make_user, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")
    other = make_user(Role.MEMBER, trainer=trainer)

    with pytest.raises(ForbiddenError):
        service.confirm_session(session.id, other.id, "member")


def test_confirm_missing_session(service, member):
    with pytest.raises(NotFoundError):
        service.confirm_session(12345, member.id, "member")


def test_admin_cannot_confirm(service, trainer, member, admin):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")

    with pytest.raises(ForbiddenError):
        service.confirm_session(session.id, admin.id, "admin")


# =============================================================================
# UpdateSession
# =============================================================================


def test_update_session_to_taken_date_conflicts(service, trainer, member):
    service.create_session(trainer.id, member.id, JAN_8, "09:00")
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")

    with pytest.raises(SlotConflictError):
        service.update_session(session.id, trainer.id, "09:00", JAN_8)


def test_update_session_time_only_is_checked(service, trainer, member):
    service.create_session(trainer.id, member.id, JAN_1, "10:00")
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")

    with pytest.raises(SlotConflictError):
        service.update_session(session.id, trainer.id, "10:00")

    assert service.get_session(session.id).start_time == "09:00"


def test_update_session_keeps_own_slot(service, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")

    updated = service.update_session(session.id, trainer.id, "09:00", JAN_1)

    assert (updated.date, updated.start_time) == (JAN_1, "09:00")


def test_update_session_keeps_confirmation(service, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")
    confirmed = service.confirm_session(session.id, member.id, "member")
    stamped_at = confirmed.confirmed_at

    moved = service.update_session(session.id, trainer.id, "11:30", JAN_8)

    assert (moved.date, moved.start_time) == (JAN_8, "11:30")
    assert moved.member_confirmed is True
    assert moved.confirmed_at == stamped_at


def test_update_session_maps_storage_conflict(monkeypatch, service, make_user, trainer, member):
    service.create_session(trainer.id, member.id, JAN_1, "09:00")
    other = make_user(Role.MEMBER, trainer=trainer)
    moving = service.create_session(trainer.id, other.id, JAN_1, "10:00")
    moving_id = moving.id
    _stale_first_lookup(monkeypatch, service)

    with pytest.raises(SlotConflictError) as exc:
        service.update_session(moving_id, trainer.id, "09:00")

    assert exc.value.to_dict()["conflictInfo"]["existingMember"] == "Mia Member"
    assert service.get_session(moving_id).start_time == "10:00"


def test_update_session_by_other_trainer_is_forbidden(service, make_user, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")
    intruder = make_user(Role.TRAINER)

    with pytest.raises(ForbiddenError):
        service.update_session(session.id, intruder.id, "10:00")


# =============================================================================
# Deletion cascades
# =============================================================================


def test_delete_session_removes_its_comments(db_session, service, trainer, member):
    keep = service.create_session(trainer.id, member.id, JAN_8, "09:00")
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")
    comments = CommentService(db_session)
    comments.create_comment(session.id, trainer.id, "Leg day", True)
    comments.create_comment(session.id, trainer.id, "Knee issue", False)
    comments.create_comment(keep.id, trainer.id, "Upper body", True)

    session_id = session.id

    service.delete_session(session_id, trainer.id)

    assert db_session.query(PTSession).filter(PTSession.id == session_id).count() == 0
    remaining = db_session.query(Comment).all()
    assert [c.session_id for c in remaining] == [keep.id]


def test_deleted_session_stays_readable_by_holder(db_session, service, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")

    service.delete_session(session.id, trainer.id)

    assert session not in db_session
    assert (session.date, session.start_time) == (JAN_1, "09:00")


def test_delete_session_by_other_trainer_is_forbidden(service, make_user, trainer, member):
    session = service.create_session(trainer.id, member.id, JAN_1, "09:00")
    intruder = make_user(Role.TRAINER)

    with pytest.raises(ForbiddenError):
        service.delete_session(session.id, intruder.id)

    assert service.get_session(session.id) is not None


def test_delete_member_cascades(db_session, service, make_user, trainer, member):
    other = make_user(Role.MEMBER, trainer=trainer)
    created, _ = service.create_repeat_sessions(trainer.id, member.id, JAN_1, "09:00", 3)
    kept = service.create_session(trainer.id, other.id, JAN_1, "10:00")
    comments = CommentService(db_session)
    for s in created:
        comments.create_comment(s.id, trainer.id, "note", False)
    comments.create_comment(kept.id, trainer.id, "other note", True)
    member_id = member.id

    service.delete_member(member_id, trainer.id)

    db_session.expire_all()
    assert db_session.query(User).filter(User.id == member_id).count() == 0
    assert db_session.query(PTSession).filter(PTSession.member_id == member_id).count() == 0
    assert [c.session_id for c in db_session.query(Comment).all()] == [kept.id]


def test_delete_member_of_other_trainer_is_forbidden(service, make_user, member):
    intruder = make_user(Role.TRAINER)

    with pytest.raises(ForbiddenError):
        service.delete_member(member.id, intruder.id)
