import pytest
from datetime import date

from gym_api.core.exceptions import AccessDeniedError, ConflictError, InvalidStateError, ValidationError
from gym_api.models.branch import Branch
from gym_api.models.class_schedule import ClassSchedule, GroupClassBooking
from gym_api.models.user import UserRole
from gym_api.services.class_schedule_service import ClassScheduleService

CLASS_DAY = date(2030, 5, 6)


def _schedule(db_session, trainer, **overrides):
    data = {
        "class_name": "Spin",
        "trainer_id": trainer.id,
        "date": CLASS_DAY,
        "time": "6:30 PM",
        "total_seats": 2,
    }
    data.update(overrides)
    return ClassScheduleService(db_session).create(data)

def test_create_class_normalizes_time(client, auth_headers, admin_user, trainer_user):
    response = client.post("/api/classes", headers=auth_headers(admin_user), json={
        "class_name": "Yoga Flow",
        "trainer_id": trainer_user.id,
        "date": CLASS_DAY.isoformat(),
        "time": "7:05 am",
        "schedule_days": ["Mon", "Thu"],
    })
    assert response.status_code == 201
    body = response.json()
    assert body["time"] == "07:05"
    assert body["total_seats"] == 20
    assert body["available_seats"] == 20
    assert body["status"] == "Scheduled"
    assert body["trainer_name"] == "Tariq Khan"
    assert body["branch_id"] == trainer_user.branch_id

def test_only_admins_schedule_classes(client, auth_headers, manager_user, trainer_user):
    response = client.post("/api/classes", headers=auth_headers(manager_user), json={
        "class_name": "HIIT", "trainer_id": trainer_user.id, "date": CLASS_DAY.isoformat(), "time": "08:00",
    })
    assert response.status_code == 403

def test_class_needs_a_trainer(db_session, member_user):
    with pytest.raises(ValidationError):
        _schedule(db_session, member_user)

def test_seats_must_be_positive(db_session, trainer_user):
    with pytest.raises(ValidationError):
        _schedule(db_session, trainer_user, total_seats=0)

def test_trainer_double_booked_at_same_time(db_session, trainer_user):
    _schedule(db_session, trainer_user)
    with pytest.raises(ConflictError) as exc:
        _schedule(db_session, trainer_user, class_name="Boxing", time="18:30")
    assert exc.value.message == "Trainer is already scheduled at this time"

def test_canceled_class_frees_the_slot(db_session, trainer_user):
    service = ClassScheduleService(db_session)
    first = _schedule(db_session, trainer_user)
    service.update(first.id, {"status": "Canceled"})
    second = _schedule(db_session, trainer_user, class_name="Boxing")
    assert second.time == "18:30"

def test_update_ignores_its_own_slot(db_session, trainer_user):
    service = ClassScheduleService(db_session)
    spin = _schedule(db_session, trainer_user)
    updated = service.update(spin.id, {"class_name": "Spin Advanced", "time": "18:30"})
    assert updated.class_name == "Spin Advanced"

    other = _schedule(db_session, trainer_user, time="07:00")
    with pytest.raises(ConflictError):
        service.update(other.id, {"time": "6:30 pm"})

def test_unknown_status_is_rejected(db_session, trainer_user):
    spin = _schedule(db_session, trainer_user)
    with pytest.raises(ValidationError):
        ClassScheduleService(db_session).update(spin.id, {"status": "Postponed"})

def test_member_books_a_seat(client, auth_headers, trainer_user, member_user, db_session):
    spin = _schedule(db_session, trainer_user)
    response = client.post(f"/api/classes/{spin.id}/book", headers=auth_headers(member_user), json={})
    assert response.status_code == 201
    assert response.json()["member_name"] == "Maya Rao"

    db_session.refresh(spin)
    assert spin.booked_seats == 1
    members = client.get(f"/api/classes/{spin.id}/members", headers=auth_headers(member_user)).json()
    assert [m["member_id"] for m in members] == [member_user.id]

def test_member_cannot_book_twice(db_session, trainer_user, member_user):
    spin = _schedule(db_session, trainer_user)
    service = ClassScheduleService(db_session)
    service.book(spin.id, member_user.id)
    with pytest.raises(ConflictError):
        service.book(spin.id, member_user.id)
    assert spin.booked_seats == 1

def test_full_class_refuses_bookings(db_session, trainer_user, make_user):
    spin = _schedule(db_session, trainer_user, total_seats=1)
    service = ClassScheduleService(db_session)
    service.book(spin.id, make_user(UserRole.MEMBER).id)
    with pytest.raises(InvalidStateError) as exc:
        service.book(spin.id, make_user(UserRole.MEMBER).id)
    assert exc.value.message == "Class is full"

def test_canceled_class_refuses_bookings(db_session, trainer_user, member_user):
    spin = _schedule(db_session, trainer_user)
    service = ClassScheduleService(db_session)
    service.update(spin.id, {"status": "Canceled"})
    with pytest.raises(InvalidStateError):
        service.book(spin.id, member_user.id)
    assert db_session.query(GroupClassBooking).count() == 0

def test_member_from_another_branch_cannot_book(db_session, trainer_user, member_user):
    uptown = Branch(name="Uptown", address="9 Hill Rd")
    db_session.add(uptown)
    db_session.commit()
    member_user.branch_id = uptown.id
    db_session.commit()

    spin = _schedule(db_session, trainer_user)
    with pytest.raises(AccessDeniedError):
        ClassScheduleService(db_session).book(spin.id, member_user.id)

def test_seats_cannot_drop_below_bookings(db_session, trainer_user, make_user):
    spin = _schedule(db_session, trainer_user)
    service = ClassScheduleService(db_session)
    service.book(spin.id, make_user(UserRole.MEMBER).id)
    service.book(spin.id, make_user(UserRole.MEMBER).id)
    with pytest.raises(ValidationError):
        service.update(spin.id, {"total_seats": 1})

def test_delete_class_removes_its_bookings(client, auth_headers, admin_user, trainer_user, member_user, db_session):
    spin = _schedule(db_session, trainer_user)
    ClassScheduleService(db_session).book(spin.id, member_user.id)

    response = client.delete(f"/api/classes/{spin.id}", headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert db_session.query(ClassSchedule).count() == 0
    assert db_session.query(GroupClassBooking).count() == 0
    assert client.get(f"/api/classes/{spin.id}", headers=auth_headers(admin_user)).status_code == 404

def test_list_classes_filters_by_search(client, auth_headers, admin_user, trainer_user, db_session):
    _schedule(db_session, trainer_user)
    _schedule(db_session, trainer_user, class_name="Pilates", time="09:00")
    listed = client.get("/api/classes?search=pil", headers=auth_headers(admin_user)).json()
    assert [c["class_name"] for c in listed] == ["Pilates"]
    by_trainer = client.get("/api/classes?search=khan", headers=auth_headers(admin_user)).json()
    assert len(by_trainer) == 2
