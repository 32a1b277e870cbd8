import pytest
from datetime import date

from gym_api.core.exceptions import InvalidStateError, RecordLockedError, ValidationError
from gym_api.models.duty_roster import DutyShift, ShiftStatus
from gym_api.services.duty_roster_service import DutyRosterService, normalize_shift

SHIFT_DAY = "2030-04-24"


def _schedule(client, auth_headers, admin, staff, **overrides):
    payload = {
        "staff_id": staff.id,
        "shift_type": "Straight Shift",
        "date": SHIFT_DAY,
        "start_time": "06:00",
        "end_time": "14:00",
    }
    payload.update(overrides)
    return client.post("/api/duty-rosters", headers=auth_headers(admin), json=payload)

def test_schedule_shift(client, auth_headers, admin_user, staff_member):
    response = _schedule(client, auth_headers, admin_user, staff_member, start_time="6:00 AM", end_time="2:00 PM")
    assert response.status_code == 201
    shift = response.json()
    assert shift["status"] == "Scheduled"
    assert shift["start_time"] == "06:00"
    assert shift["end_time"] == "14:00"
    assert shift["staff_name"] == "Tariq Khan"
    assert shift["staff_role"] == "Personal Trainer"

def test_straight_shift_drops_breaks():
    shape = normalize_shift("Straight Shift", "06:00", "14:00", [{"start": "10:00", "end": "10:30"}])
    assert shape["breaks"] == []

def test_break_shift_keeps_sorted_breaks():
    shape = normalize_shift("Break Shift", "06:00", "20:00", [
        {"start": "3:00 PM", "end": "3:15 PM"},
        {"start": "", "end": ""},
        {"start": "10:00", "end": "11:00"},
    ])
    assert shape["breaks"] == [{"start": "10:00", "end": "11:00"}, {"start": "15:00", "end": "15:15"}]

@pytest.mark.parametrize("breaks", [
    [{"start": "10:00", "end": ""}],
    [{"start": "11:00", "end": "10:00"}],
    [{"start": "05:00", "end": "06:30"}],
    [{"start": "10:00", "end": "11:00"}, {"start": "10:30", "end": "11:30"}],
])
def test_bad_breaks_are_rejected(breaks):
    with pytest.raises(ValidationError):
        normalize_shift("Break Shift", "06:00", "14:00", breaks)

def test_shift_must_end_after_it_starts():
    with pytest.raises(ValidationError):
        normalize_shift("Straight Shift", "14:00", "06:00", [])

def test_unknown_shift_type():
    with pytest.raises(ValidationError):
        normalize_shift("Night Shift", "06:00", "14:00", [])

def test_manager_approves_shift(client, auth_headers, admin_user, manager_user, staff_member):
    shift = _schedule(client, auth_headers, admin_user, staff_member).json()
    response = client.patch(f"/api/duty-rosters/{shift['id']}/approve", headers=auth_headers(manager_user))
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Approved"
    assert body["approved_by"] == manager_user.id
    assert body["approved_by_name"] == manager_user.full_name
    assert body["approved_at"] is not None

def test_trainer_cannot_approve(client, auth_headers, admin_user, trainer_user, staff_member):
    shift = _schedule(client, auth_headers, admin_user, staff_member).json()
    response = client.patch(f"/api/duty-rosters/{shift['id']}/approve", headers=auth_headers(trainer_user))
    assert response.status_code == 403

def test_approved_shift_cannot_be_deleted(client, auth_headers, admin_user, staff_member):
    shift = _schedule(client, auth_headers, admin_user, staff_member).json()
    client.patch(f"/api/duty-rosters/{shift['id']}/approve", headers=auth_headers(admin_user))

    response = client.delete(f"/api/duty-rosters/{shift['id']}", headers=auth_headers(admin_user))
    assert response.status_code == 409
    assert response.json()["errors"][0]["code"] == "RECORD_LOCKED"

    roster = client.get("/api/duty-rosters", headers=auth_headers(admin_user)).json()
    assert [s["id"] for s in roster] == [shift["id"]]

def test_approved_shift_cannot_be_edited(db_session, admin_user, staff_member):
    service = DutyRosterService(db_session)
    shift = service.create({"staff_id": staff_member.id, "date": date(2030, 4, 24),
                            "start_time": "06:00", "end_time": "14:00"})
    service.approve(shift.id, admin_user)
    with pytest.raises(RecordLockedError):
        service.update(shift.id, {"end_time": "15:00"})
    assert db_session.get(DutyShift, shift.id).end_time == "14:00"

def test_scheduled_shift_can_be_edited_and_deleted(db_session, staff_member):
    service = DutyRosterService(db_session)
    shift = service.create({"staff_id": staff_member.id, "date": date(2030, 4, 24),
                            "start_time": "06:00", "end_time": "14:00"})
    updated = service.update(shift.id, {"shift_type": "Break Shift",
                                        "breaks": [{"start": "10:00", "end": "10:30"}]})
    assert updated.breaks == [{"start": "10:00", "end": "10:30"}]
    assert updated.start_time == "06:00"

    service.remove(shift.id)
    assert db_session.get(DutyShift, shift.id) is None

def test_complete_requires_approval(db_session, admin_user, staff_member):
    service = DutyRosterService(db_session)
    shift = service.create({"staff_id": staff_member.id, "date": date(2030, 4, 24),
                            "start_time": "06:00", "end_time": "14:00"})
    with pytest.raises(InvalidStateError):
        service.transition(shift.id, "complete", admin_user)

    service.approve(shift.id, admin_user)
    assert service.transition(shift.id, "complete", admin_user).status == ShiftStatus.COMPLETED.value

def test_roster_is_ordered_by_date_then_start(db_session, staff_member):
    service = DutyRosterService(db_session)
    base = {"staff_id": staff_member.id}
    service.create({**base, "date": date(2030, 4, 25), "start_time": "06:00", "end_time": "10:00"})
    service.create({**base, "date": date(2030, 4, 24), "start_time": "14:00", "end_time": "18:00"})
    service.create({**base, "date": date(2030, 4, 24), "start_time": "06:00", "end_time": "10:00"})

    shifts = service.list()
    assert [(str(s.date), s.start_time) for s in shifts] == [
        ("2030-04-24", "06:00"), ("2030-04-24", "14:00"), ("2030-04-25", "06:00"),
    ]

def test_missing_fields(client, auth_headers, admin_user, staff_member):
    response = _schedule(client, auth_headers, admin_user, staff_member, start_time=None)
    assert response.status_code == 422
    assert response.json()["success"] is False
