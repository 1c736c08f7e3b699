"""HTTP tests for the admin endpoints."""
from datetime import date, timedelta

from ptrecord.domain.admin.service import AdminService
from ptrecord.domain.comments.service import CommentService
from ptrecord.domain.scheduling.service import SchedulingService
from ptrecord.models import Comment, InviteCode, PTSession, Role, User
from ptrecord.shared.timeutils import utcnow
from tests.conftest import auth_headers


def _seed(db_session, trainer, member):
    scheduling = SchedulingService(db_session)
    created, _ = scheduling.create_repeat_sessions(trainer.id, member.id, date(2024, 1, 1), "09:00", 3)
    scheduling.confirm_session(created[0].id, member.id, "member")
    CommentService(db_session).create_comment(created[0].id, trainer.id, "note", False)
    db_session.add(InviteCode(code="ACTIVE01", trainer_id=trainer.id, expires_at=utcnow() + timedelta(days=1)))
    db_session.add(InviteCode(code="EXPIRED1", trainer_id=trainer.id, expires_at=utcnow() - timedelta(days=1)))
    db_session.commit()
    return created


def test_admin_endpoints_require_admin(client, trainer, member):
    for user in (trainer, member):
        response = client.get("/admin/stats", headers=auth_headers(user))
        assert response.status_code == 403
        assert response.json()["category"] == "forbidden"


def test_stats(client, db_session, admin, trainer, member):
    _seed(db_session, trainer, member)

    response = client.get("/admin/stats", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json() == {
        "totalUsers": 3,
        "totalTrainers": 1,
        "totalMembers": 1,
        "totalSessions": 3,
        "confirmedSessions": 1,
        "pendingSessions": 2,
        "totalComments": 1,
        "totalInviteCodes": 2,
        "activeInviteCodes": 1,
    }


def test_trainer_and_member_overview(client, db_session, admin, trainer, member):
    _seed(db_session, trainer, member)

    trainers = client.get("/admin/trainers", headers=auth_headers(admin)).json()
    members = client.get("/admin/members", headers=auth_headers(admin)).json()

    assert trainers[0]["memberCount"] == 1
    assert trainers[0]["sessionCount"] == 3
    assert members[0]["trainerName"] == "Tom Trainer"
    assert members[0]["sessionCount"] == 3


def test_admin_lists_everything(client, db_session, admin, trainer, member):
    _seed(db_session, trainer, member)

    users = client.get("/admin/users", headers=auth_headers(admin)).json()
    sessions = client.get("/admin/sessions", headers=auth_headers(admin)).json()
    comments = client.get("/admin/comments", headers=auth_headers(admin)).json()

    assert len(users) == 3
    assert len(sessions) == 3
    assert comments[0]["trainerName"] == "Tom Trainer"
    assert comments[0]["sessionDate"] == "2024-01-01"


def test_admin_deletes_trainer(client, db_session, admin, trainer, member):
    _seed(db_session, trainer, member)
    trainer_id, member_id = trainer.id, member.id

    response = client.delete(f"/admin/users/{trainer_id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.query(User).filter(User.id == trainer_id).count() == 0
    assert db_session.query(PTSession).count() == 0
    assert db_session.query(Comment).count() == 0
    assert db_session.query(InviteCode).count() == 0
    orphan = db_session.query(User).filter(User.id == member_id).one()
    assert orphan.trainer_id is None


def test_admin_deletes_member(client, db_session, admin, trainer, member):
    _seed(db_session, trainer, member)

    response = client.delete(f"/admin/users/{member.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.query(PTSession).count() == 0
    assert db_session.query(Comment).count() == 0
    assert db_session.query(User).filter(User.role == Role.TRAINER.value).count() == 1


def test_admin_cannot_delete_self(client, admin):
    response = client.delete(f"/admin/users/{admin.id}", headers=auth_headers(admin))

    assert response.status_code == 422
    assert response.json()["category"] == "validation_error"


def test_admin_delete_missing_user(client, admin):
    response = client.delete("/admin/users/9999", headers=auth_headers(admin))

    assert response.status_code == 404


def test_admin_deletes_session(client, db_session, admin, trainer, member):
    created = _seed(db_session, trainer, member)
    session_id = created[0].id

    response = client.delete(f"/admin/sessions/{session_id}", headers=auth_headers(admin))

    assert response.status_code == 200
    db_session.expire_all()
    assert db_session.query(PTSession).count() == 2
    assert db_session.query(Comment).count() == 0


def test_admin_session_delete_detaches_loaded_session(db_session, admin, trainer, member):
    created = _seed(db_session, trainer, member)
    session = created[1]

    AdminService(db_session).delete_session(session.id, admin)

    assert session not in db_session
    assert session.date == date(2024, 1, 8)
    assert db_session.query(PTSession).count() == 2
