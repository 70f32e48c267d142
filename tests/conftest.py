"""
Shared test fixtures

Settings are read from the environment at import time, so the test
database, upload directory and log file are configured before the
application is imported.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="purchase_portal_tests_")

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-purchase-portal")
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["UPLOAD_DIRECTORY"] = os.path.join(_TMP_DIR, "uploads")
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "logs", "app.log")
os.environ["SMTP_USERNAME"] = ""
os.environ["SMTP_PASSWORD"] = ""

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from purchase_portal.main import app  # noqa: E402
from purchase_portal.config.database import Base, get_db  # noqa: E402
from purchase_portal.models.user import User, UserRole  # noqa: E402
from purchase_portal.services.auth_service import auth_service  # noqa: E402
from purchase_portal.utils.security import get_password_hash  # noqa: E402

# Test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpass123"


def override_get_db():
    """Override database dependency for testing"""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def test_db():
    """Create a fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """Fresh client per test so auth cookies never leak between tests"""
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Factory creating users directly in the database"""
    counter = {"n": 0}

    def _make_user(role=UserRole.REQUESTER, is_active=True, department="Operations", location="Bangalore", **fields):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            employee_number=fields.pop("employee_number", f"EMP{n:03d}"),
            full_name=fields.pop("full_name", f"Test User {n}"),
            email=fields.pop("email", f"user{n}@example.com"),
            department=department,
            location=location,
            hashed_password=get_password_hash(fields.pop("password", TEST_PASSWORD)),
            role=role.value,
            is_active=is_active,
            **fields
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def requester(make_user):
    return make_user(UserRole.REQUESTER, full_name="Riya Requester")


@pytest.fixture
def other_requester(make_user):
    return make_user(UserRole.REQUESTER, full_name="Omar Other")


@pytest.fixture
def approver(make_user):
    return make_user(UserRole.APPROVER, full_name="Asha Approver")


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, full_name="Adam Admin")


def auth_headers(user):
    """Bearer header for a user without going through the login endpoint"""
    return {"Authorization": f"Bearer {auth_service.create_token(user)}"}


def request_payload(**overrides):
    payload = {
        "title": "Laptops for new joiners",
        "request_date": "2026-01-15T00:00:00",
        "department": "Operations",
        "location": "Bangalore",
        "business_justification_code": "NEW_HIRE",
        "business_justification_details": "Three engineers join next month and need laptops.",
    }
    payload.update(overrides)
    return payload


def line_item_payload(quantity=1, unit_cost=100.0, **overrides):
    payload = {
        "item_name": "Laptop",
        "required_quantity": quantity,
        "unit_of_measure": "Nos",
        "required_by_date": "2026-02-15T00:00:00",
        "delivery_location": "Bangalore Office",
        "unit_cost": unit_cost,
    }
    payload.update(overrides)
    return payload


def create_request(client, user, **overrides):
    """Submit a purchase request through the API and return its JSON"""
    response = client.post("/api/purchase-requests", json=request_payload(**overrides), headers=auth_headers(user))
    assert response.status_code == 201, response.text
    return response.json()


def current_prefix(department="Operations"):
    return f"PR-{department[:4].upper()}-{datetime.now().strftime('%Y%m')}"
