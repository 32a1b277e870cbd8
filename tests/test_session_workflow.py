import pytest
from datetime import date

from gym_api.core.exceptions import ConflictError, InvalidStateError, ValidationError
from gym_api.models.plan import MemberPlan
from gym_api.models.training_session import SessionStatus, TrainingSession
from gym_api.services.training_session_service import TrainingSessionService

SESSION_DAY = date(2030, 4, 24)  # a Wednesday


def _book(client, auth_headers, desk_user, trainer, member, **overrides):
    payload = {
        "trainer_id": trainer.id,
        "member_id": member.id,
        "date": SESSION_DAY.isoformat(),
        "time": "9:00 AM",
        "session_type": "Strength",
        "location": "Studio 2",
    }
    payload.update(overrides)
    return client.post("/api/sessions", headers=auth_headers(desk_user), json=payload)

def test_booking_creates_booked_session(client, auth_headers, admin_user, trainer_user, member_user, member_plan):
    response = _book(client, auth_headers, admin_user, trainer_user, member_user)
    assert response.status_code == 201
    session = response.json()
    assert session["status"] == "Booked"
    assert session["time"] == "09:00"
    assert session["trainer_name"] == "Tariq Khan"
    assert session["branch_id"] == trainer_user.branch_id

def test_booking_consumes_a_plan_session(client, auth_headers, admin_user, trainer_user, member_user, member_plan, db_session):
    _book(client, auth_headers, admin_user, trainer_user, member_user)
    db_session.refresh(member_plan)
    assert member_plan.remaining_sessions == 2

def test_booking_without_sessions_left(db_session, trainer_user, member_user, member_plan):
    member_plan.remaining_sessions = 0
    db_session.commit()
    with pytest.raises(InvalidStateError, match="No remaining sessions"):
        TrainingSessionService(db_session).create({
            "trainer_id": trainer_user.id, "member_id": member_user.id,
            "date": SESSION_DAY, "time": "07:00",
        })
    assert db_session.query(TrainingSession).count() == 0

def test_booking_can_skip_plan_deduction(db_session, trainer_user, member_user):
    session = TrainingSessionService(db_session).create({
        "trainer_id": trainer_user.id, "member_id": member_user.id,
        "date": SESSION_DAY, "time": "07:00", "consume_plan_session": False,
    })
    assert session.status == SessionStatus.BOOKED.value

def test_trainer_cannot_be_double_booked(client, auth_headers, admin_user, trainer_user, member_user, member_plan):
    _book(client, auth_headers, admin_user, trainer_user, member_user, time="10:00 AM")
    clash = _book(client, auth_headers, admin_user, trainer_user, member_user, time="10:00")
    assert clash.status_code == 409
    assert clash.json()["errors"][0]["msg"] == "Trainer already booked at same time"

def test_cancelled_session_frees_the_slot(db_session, trainer_user, member_user):
    service = TrainingSessionService(db_session)
    data = {"trainer_id": trainer_user.id, "member_id": member_user.id,
            "date": SESSION_DAY, "time": "18:00", "consume_plan_session": False}
    first = service.create(dict(data))
    service.cancel(first.id)
    second = service.create(dict(data))
    assert second.id != first.id

def test_only_trainers_take_sessions(db_session, admin_user, member_user):
    with pytest.raises(ValidationError):
        TrainingSessionService(db_session).create({
            "trainer_id": admin_user.id, "member_id": member_user.id,
            "date": SESSION_DAY, "time": "07:00", "consume_plan_session": False,
        })

def test_missing_fields_are_rejected(db_session, trainer_user):
    with pytest.raises(ValidationError):
        TrainingSessionService(db_session).create({"trainer_id": trainer_user.id, "date": SESSION_DAY})

def test_reschedule_keeps_status(db_session, trainer_user, member_user):
    service = TrainingSessionService(db_session)
    session = service.create({
        "trainer_id": trainer_user.id, "member_id": member_user.id,
        "date": SESSION_DAY, "time": "08:00", "consume_plan_session": False,
    })
    service.accept(session.id)

    moved = service.reschedule(session.id, date(2024, 5, 1), "10:00 AM")
    assert moved.date == date(2024, 5, 1)
    assert moved.time == "10:00"
    assert moved.status == SessionStatus.UPCOMING.value

def test_reschedule_requires_date_and_time(client, auth_headers, admin_user, trainer_user, member_user, member_plan):
    session = _book(client, auth_headers, admin_user, trainer_user, member_user).json()
    response = client.put(
        f"/api/sessions/{session['id']}/reschedule",
        headers=auth_headers(admin_user),
        json={"date": "2030-05-01", "time": ""}
    )
    assert response.status_code == 422
    unchanged = client.get(f"/api/sessions/{session['id']}", headers=auth_headers(admin_user)).json()
    assert unchanged["date"] == SESSION_DAY.isoformat()
    assert unchanged["time"] == "09:00"

def test_reschedule_into_busy_slot(db_session, trainer_user, member_user):
    service = TrainingSessionService(db_session)
    base = {"trainer_id": trainer_user.id, "member_id": member_user.id,
            "date": SESSION_DAY, "consume_plan_session": False}
    service.create({**base, "time": "08:00"})
    later = service.create({**base, "time": "09:00"})
    with pytest.raises(ConflictError):
        service.reschedule(later.id, SESSION_DAY, "8:00 AM")

def test_reschedule_to_own_slot_is_allowed(db_session, trainer_user, member_user):
    service = TrainingSessionService(db_session)
    session = service.create({"trainer_id": trainer_user.id, "member_id": member_user.id,
                              "date": SESSION_DAY, "time": "08:00", "consume_plan_session": False})
    assert service.reschedule(session.id, SESSION_DAY, "08:00 AM").time == "08:00"

def test_accept_and_reject_via_api(client, auth_headers, trainer_user, member_user, member_plan):
    first = _book(client, auth_headers, trainer_user, trainer_user, member_user, time="06:00").json()
    second = _book(client, auth_headers, trainer_user, trainer_user, member_user, time="07:00").json()

    accepted = client.patch(f"/api/sessions/{first['id']}/accept", headers=auth_headers(trainer_user))
    assert accepted.json()["status"] == "Upcoming"

    rejected = client.patch(f"/api/sessions/{second['id']}/reject", headers=auth_headers(trainer_user))
    assert rejected.json()["status"] == "Cancelled"

    again = client.patch(f"/api/sessions/{second['id']}/accept", headers=auth_headers(trainer_user))
    assert again.status_code == 409

def test_completed_session_cannot_be_rescheduled(db_session, trainer_user, member_user):
    service = TrainingSessionService(db_session)
    session = service.create({"trainer_id": trainer_user.id, "member_id": member_user.id,
                              "date": SESSION_DAY, "time": "08:00", "consume_plan_session": False})
    service.accept(session.id)
    service.transition(session.id, "complete")
    with pytest.raises(InvalidStateError):
        service.reschedule(session.id, SESSION_DAY, "11:00")

def test_member_cannot_book(client, auth_headers, trainer_user, member_user, member_plan):
    response = _book(client, auth_headers, member_user, trainer_user, member_user)
    assert response.status_code == 403

def test_week_calendar_places_sessions_by_hour(client, auth_headers, admin_user, trainer_user, member_user, member_plan):
    _book(client, auth_headers, admin_user, trainer_user, member_user, time="10:30")

    response = client.get(
        "/api/sessions/calendar",
        params={"anchor": SESSION_DAY.isoformat(), "trainer_id": trainer_user.id},
        headers=auth_headers(admin_user)
    )
    assert response.status_code == 200
    calendar = response.json()
    assert calendar["week_start"] == "2030-04-22"
    assert calendar["week_end"] == "2030-04-28"
    assert len(calendar["days"]) == 7

    wednesday = calendar["days"][2]
    assert wednesday["date"] == SESSION_DAY.isoformat()
    slot = wednesday["slots"][10]
    assert slot["label"] == "10:00 AM"
    assert [s["time"] for s in slot["sessions"]] == ["10:30"]
    assert sum(len(s["sessions"]) for day in calendar["days"] for s in day["slots"]) == 1

def test_trainer_cannot_act_on_another_trainers_session(client, auth_headers, make_user, admin_user, trainer_user, member_user, member_plan):
    from gym_api.models.user import UserRole
    other_trainer = make_user(UserRole.PERSONAL_TRAINER, first_name="Ola")
    session = _book(client, auth_headers, admin_user, trainer_user, member_user).json()

    accept = client.patch(f"/api/sessions/{session['id']}/accept", headers=auth_headers(other_trainer))
    assert accept.status_code == 403

    reschedule = client.put(
        f"/api/sessions/{session['id']}/reschedule",
        headers=auth_headers(other_trainer),
        json={"date": "2030-04-25", "time": "11:00"}
    )
    assert reschedule.status_code == 403

    delete = client.delete(f"/api/sessions/{session['id']}", headers=auth_headers(other_trainer))
    assert delete.status_code == 403

    unchanged = client.get(f"/api/sessions/{session['id']}", headers=auth_headers(admin_user)).json()
    assert unchanged["date"] == SESSION_DAY.isoformat()
    assert unchanged["status"] == "Booked"

    own = client.put(
        f"/api/sessions/{session['id']}/reschedule",
        headers=auth_headers(trainer_user),
        json={"date": "2030-04-25", "time": "11:00"}
    )
    assert own.status_code == 200

@pytest.mark.parametrize("duration", [0, -30])
def test_non_positive_duration_is_rejected(db_session, trainer_user, member_user, duration):
    with pytest.raises(ValidationError):
        TrainingSessionService(db_session).create({
            "trainer_id": trainer_user.id, "member_id": member_user.id,
            "date": SESSION_DAY, "time": "07:00", "duration": duration, "consume_plan_session": False,
        })
    assert db_session.query(TrainingSession).count() == 0

def test_duration_defaults_to_an_hour(db_session, trainer_user, member_user):
    session = TrainingSessionService(db_session).create({
        "trainer_id": trainer_user.id, "member_id": member_user.id,
        "date": SESSION_DAY, "time": "07:00", "consume_plan_session": False,
    })
    assert session.duration == 60
