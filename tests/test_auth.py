"""
Authentication Tests
Tests for forwarded identity resolution and access guards
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.main import app
from src.config.database import Base, get_db
from src.database.setup_database import seed_defaults
from src.models.user import User
from src.schemas.user import UserRole

# Test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing"""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db
client = TestClient(app)

EMPLOYEE = "u1"
MANAGER = "u2"
FINANCE = "u3"
ADMIN = "u4"


def as_user(user_id: str) -> dict:
    """Headers the upstream gateway would forward for this user"""
    return {"X-User-Id": user_id}


@pytest.fixture(scope="function")
def test_db():
    """Create test database seeded with default users, categories and matrix"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        seed_defaults(db)
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def inactive_user(test_db):
    """Create a deactivated employee"""
    db = TestingSessionLocal()
    user = User(
        id="u9",
        name="Former Employee",
        email="former@finance.com",
        role=UserRole.EMPLOYEE,
        accessible_modules=["dashboard", "new-claim"],
        is_active=False,
    )
    db.add(user)
    db.commit()
    db.close()
    return "u9"


class TestAuthentication:
    """Test identity resolution"""

    def test_missing_identity(self, test_db):
        """Test accessing protected endpoint without forwarded identity"""
        response = client.get("/api/auth/me")
        assert response.status_code == 401

    def test_unknown_identity(self, test_db):
        """Test forwarded id that is not in the directory"""
        response = client.get("/api/auth/me", headers=as_user("nobody"))
        assert response.status_code == 401

    def test_inactive_user(self, inactive_user):
        """Test inactive users are refused"""
        response = client.get("/api/auth/me", headers=as_user(inactive_user))
        assert response.status_code == 403

    def test_get_current_user(self, test_db):
        """Test getting current user info"""
        response = client.get("/api/auth/me", headers=as_user(MANAGER))
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == MANAGER
        assert data["role"] == "manager"
        assert "approvals" in data["accessible_modules"]

    def test_health_is_public(self):
        """Test health endpoint needs no identity"""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAccessGuards:
    """Test module-based route guards"""

    def test_module_denied(self, test_db):
        """Employees without the settings module cannot edit the matrix"""
        response = client.put(
            "/api/settings/matrix",
            json={"tiers": []},
            headers=as_user(EMPLOYEE)
        )
        assert response.status_code == 403

    def test_admin_reaches_every_module(self, test_db):
        """Admins pass every module guard"""
        response = client.get("/api/approvals/signature-log", headers=as_user(ADMIN))
        assert response.status_code == 200
        assert response.json() == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
