import pytest
from decimal import Decimal

from gym_api.core.exceptions import ConflictError, InvalidStateError
from gym_api.models.user import UserRole
from gym_api.services.booking_service import PlanBookingService
from gym_api.services.plan_service import PlanService
from gym_api.services.staff_service import StaffService

# ============================================================================
# Branches and users
# ============================================================================
def test_only_superadmin_creates_branches(client, auth_headers, make_user, admin_user):
    superadmin = make_user(UserRole.SUPERADMIN, first_name="Sam")
    denied = client.post("/api/branches", headers=auth_headers(admin_user), json={"name": "Uptown"})
    assert denied.status_code == 403

    created = client.post("/api/branches", headers=auth_headers(superadmin), json={"name": "Uptown"})
    assert created.status_code == 201
    assert created.json()["status"] == "Active"

    duplicate = client.post("/api/branches", headers=auth_headers(superadmin), json={"name": "Uptown"})
    assert duplicate.status_code == 409

def test_register_member(client, auth_headers, make_user, branch):
    receptionist = make_user(UserRole.RECEPTIONIST, first_name="Rita")
    response = client.post(
        "/api/users",
        headers=auth_headers(receptionist),
        json={"first_name": "Walk", "last_name": "In", "email": "Walk.In@GymMail.com", "branch_id": branch.id}
    )
    assert response.status_code == 201
    user = response.json()
    assert user["role"] == "member"
    assert user["email"] == "walk.in@gymmail.com"
    assert user["full_name"] == "Walk In"

    again = client.post(
        "/api/users",
        headers=auth_headers(receptionist),
        json={"first_name": "Walk", "email": "walk.in@gymmail.com"}
    )
    assert again.status_code == 409

def test_filter_users_by_role(client, auth_headers, admin_user, trainer_user, member_user):
    response = client.get("/api/users", params={"role": "personaltrainer"}, headers=auth_headers(admin_user))
    assert [u["id"] for u in response.json()] == [trainer_user.id]

def test_inactive_user_is_refused(client, auth_headers, admin_user, db_session):
    admin_user.is_active = False
    db_session.commit()
    response = client.get("/api/plans", headers=auth_headers(admin_user))
    assert response.status_code == 403

# ============================================================================
# Staff
# ============================================================================
def test_create_staff_profile(client, auth_headers, admin_user, make_user, branch):
    cleaner = make_user(UserRole.HOUSEKEEPING, first_name="Hana")
    response = client.post(
        "/api/staff",
        headers=auth_headers(admin_user),
        json={"user_id": cleaner.id, "role": "Housekeeping", "salary_type": "Fixed", "fixed_salary": "18000"}
    )
    assert response.status_code == 201
    staff = response.json()
    assert staff["branch_id"] == branch.id
    assert Decimal(staff["fixed_salary"]) == Decimal("18000")
    assert staff["status"] == "Active"

def test_user_has_one_staff_record(db_session, staff_member, trainer_user):
    with pytest.raises(ConflictError):
        StaffService(db_session).create({"user_id": trainer_user.id, "role": "Trainer"})

def test_staff_rates_are_validated(client, auth_headers, admin_user, make_user):
    cleaner = make_user(UserRole.HOUSEKEEPING)
    response = client.post(
        "/api/staff",
        headers=auth_headers(admin_user),
        json={"user_id": cleaner.id, "role": "Housekeeping", "salary_type": "Piecework"}
    )
    assert response.status_code == 422

def test_update_staff_rate(client, auth_headers, admin_user, staff_member):
    response = client.put(
        f"/api/staff/{staff_member.id}",
        headers=auth_headers(admin_user),
        json={"hourly_rate": "25.50"}
    )
    assert response.status_code == 200
    assert Decimal(response.json()["hourly_rate"]) == Decimal("25.50")
    assert response.json()["role"] == "Personal Trainer"

# ============================================================================
# Plans
# ============================================================================
def test_create_and_toggle_plan(client, auth_headers, admin_user, branch):
    created = client.post(
        "/api/plans",
        headers=auth_headers(admin_user),
        json={"name": "Group Monthly", "branch_id": branch.id, "sessions": 12, "validity_days": 30, "price": "1499.99"}
    )
    assert created.status_code == 201
    plan = created.json()
    assert Decimal(plan["price"]) == Decimal("1499.99")

    toggled = client.patch(f"/api/plans/{plan['id']}/toggle-status", headers=auth_headers(admin_user))
    assert toggled.json()["status"] == "Inactive"

    active = client.get("/api/plans", params={"status": "Active"}, headers=auth_headers(admin_user)).json()
    assert plan["id"] not in [p["id"] for p in active]

def test_members_cannot_create_plans(client, auth_headers, member_user):
    response = client.post("/api/plans", headers=auth_headers(member_user), json={"name": "Free"})
    assert response.status_code == 403

def test_negative_plan_values_are_rejected(client, auth_headers, admin_user):
    response = client.post("/api/plans", headers=auth_headers(admin_user), json={"name": "Odd", "sessions": -1})
    assert response.status_code == 422

def test_plan_with_approved_booking_cannot_be_deleted(db_session, admin_user, member_user, plan):
    bookings = PlanBookingService(db_session)
    booking = bookings.create(member_user.id, plan.id)
    bookings.approve(booking.id, admin_user)

    with pytest.raises(InvalidStateError, match="active subscriptions"):
        PlanService(db_session).remove(plan.id)

def test_unused_plan_can_be_deleted(client, auth_headers, admin_user, plan):
    response = client.delete(f"/api/plans/{plan.id}", headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert client.get(f"/api/plans/{plan.id}", headers=auth_headers(admin_user)).status_code == 404
