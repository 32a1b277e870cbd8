import pytest
import os
import uuid
from datetime import date, timedelta
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BOOTSTRAP_ENABLED"] = "false"

from gym_api.database import Base, get_db
from gym_api.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """Get a clean database session for each test function with rollback safety."""
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def branch(db_session):
    from gym_api.models.branch import Branch
    branch = Branch(name=f"Downtown {uuid.uuid4().hex[:8]}", address="1 Main St")
    db_session.add(branch)
    db_session.commit()
    return branch

@pytest.fixture(scope="function")
def make_user(db_session, branch):
    """Factory for users of any role in the default branch."""
    from gym_api.models.user import User

    def _make_user(role, first_name="Test", last_name=None):
        user = User(
            first_name=first_name,
            last_name=last_name or role.value.title(),
            email=f"{role.value}-{uuid.uuid4().hex[:8]}@gym.test",
            role=role,
            branch_id=branch.id,
            is_active=True,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user

@pytest.fixture(scope="function")
def admin_user(make_user):
    from gym_api.models.user import UserRole
    return make_user(UserRole.ADMIN, first_name="Alice")

@pytest.fixture(scope="function")
def manager_user(make_user):
    from gym_api.models.user import UserRole
    return make_user(UserRole.MANAGER, first_name="Mona")

@pytest.fixture(scope="function")
def trainer_user(make_user):
    from gym_api.models.user import UserRole
    return make_user(UserRole.PERSONAL_TRAINER, first_name="Tariq", last_name="Khan")

@pytest.fixture(scope="function")
def member_user(make_user):
    from gym_api.models.user import UserRole
    return make_user(UserRole.MEMBER, first_name="Maya", last_name="Rao")

@pytest.fixture(scope="function")
def staff_member(db_session, trainer_user, branch):
    """Trainer on an hourly rate of 20.00 with no commission."""
    from gym_api.models.staff import Staff
    staff = Staff(
        user_id=trainer_user.id,
        branch_id=branch.id,
        role="Personal Trainer",
        salary_type="Hourly",
        hourly_rate=Decimal("20.00"),
        commission_rate_percent=Decimal("0"),
        join_date=date(2024, 1, 15),
    )
    db_session.add(staff)
    db_session.commit()
    return staff

@pytest.fixture(scope="function")
def plan(db_session, branch):
    from gym_api.models.plan import Plan
    plan = Plan(
        branch_id=branch.id,
        name="PT 10 Pack",
        plan_type="personal",
        sessions=10,
        validity_days=90,
        price=Decimal("4999.00"),
    )
    db_session.add(plan)
    db_session.commit()
    return plan

@pytest.fixture(scope="function")
def member_plan(db_session, member_user, plan):
    """An open subscription with sessions left, valid well past any test date."""
    from gym_api.models.plan import MemberPlan
    member_plan = MemberPlan(
        member_id=member_user.id,
        plan_id=plan.id,
        start_date=date(2024, 1, 1),
        expiry_date=date.today() + timedelta(days=365 * 5),
        remaining_sessions=3,
    )
    db_session.add(member_plan)
    db_session.commit()
    return member_plan

@pytest.fixture(scope="function")
def auth_headers():
    """Helper fixture building the acting-user header for a user."""
    def _auth_headers(user):
        return {"X-Acting-User-Id": str(user.id)}
    return _auth_headers

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
