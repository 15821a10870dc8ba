import os

# must be set before custody.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from custody.core.roles import ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_TEAM_LEAD
from custody.core.security import create_access_token
from custody.db.base import Base
from custody.db.session import SessionLocal, engine, get_db, init_db
from custody.main import app
from custody.schemas.auth import AuthUser
from custody.services import user_service


@pytest.fixture(autouse=True)
def database():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_user(db, name, email, role, password="secret123"):
    user = user_service.create_user(db, name=name, email=email, password=password, role=role)
    return AuthUser.model_validate(user)


def auth_header(user):
    token = create_access_token({"id": user.id, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "Admin", "admin@example.com", ROLE_ADMIN)


@pytest.fixture
def team_lead(db):
    return make_user(db, "Lead", "lead@example.com", ROLE_TEAM_LEAD)


@pytest.fixture
def employee(db):
    return make_user(db, "Faisal", "faisal@example.com", ROLE_EMPLOYEE)


@pytest.fixture
def other_employee(db):
    return make_user(db, "Sara", "sara@example.com", ROLE_EMPLOYEE)


def sheet_payload(sheet_id, employee_id, amount=1000, lines=None, **fields):
    payload = {
        "id": sheet_id,
        "custody_number": fields.pop("custody_number", f"C-{sheet_id}"),
        "custody_amount": amount,
        "employee_id": employee_id,
        "status": "OPEN",
        "notes": None,
        "created_at": "2024-05-01T08:00:00Z",
        "last_modified": "2024-05-01T08:00:00Z",
        "lines": lines or [],
    }
    payload.update(fields)
    return payload


def line_payload(line_id, amount, bank_fees=None, reason="PROJECTS", **fields):
    payload = {
        "id": line_id,
        "date": "2024-05-02",
        "company": "ACME",
        "description": "Cement",
        "reason": reason,
        "amount": amount,
        "bank_fees": bank_fees,
        "created_at": "2024-05-02T09:00:00Z",
    }
    payload.update(fields)
    return payload


class BrokenSession:
    """Stands in for a session whose database connection is gone."""

    def execute(self, *args, **kwargs):
        raise SQLAlchemyError("database unreachable")

    def query(self, *args, **kwargs):
        raise SQLAlchemyError("database unreachable")

    def get(self, *args, **kwargs):
        raise SQLAlchemyError("database unreachable")

    def rollback(self):
        pass

    def close(self):
        pass


@pytest.fixture
def broken_db():
    def override():
        yield BrokenSession()

    app.dependency_overrides[get_db] = override
    yield BrokenSession()
    app.dependency_overrides.pop(get_db, None)
