"""
Pytest fixtures for program delivery API tests.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Generator, List

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from api.deps import (
    get_enrollment_repo,
    get_message_store,
    get_resource_store,
    get_settings,
    get_task_store,
    get_template_repo,
)
from backend.auth import get_current_user, require_coach
from backend.main import create_app
from backend.settings import Settings, get_settings as get_session_settings
from models.enrollment import ActingUser
from tests.fakes import (
    FakeEnrollmentRepository,
    FakeMessageStore,
    FakeResourceStore,
    FakeTaskStore,
    FakeTemplateRepository,
)


# ---------------------------------------------------------------------------
# Auth Mock
# ---------------------------------------------------------------------------

TEST_COACH_ID = "coach-123"
OTHER_COACH_ID = "coach-456"
TEST_CLIENT_ID = "client-789"
TEST_TEMPLATE_ID = "tpl-001"
CRON_SECRET = "test-cron-secret"

TEST_COACH = ActingUser(user_id=TEST_COACH_ID, role="coach")
OTHER_COACH = ActingUser(user_id=OTHER_COACH_ID, role="coach")
ADMIN = ActingUser(user_id="admin-1", role="admin")


async def mock_require_coach() -> ActingUser:
    """Mock auth dependency that returns the test coach."""
    return TEST_COACH


# ---------------------------------------------------------------------------
# Test App and Client
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings with minimal configuration."""
    return Settings(
        environment="test",
        supabase_url="https://test.supabase.co",
        supabase_service_role_key="test-key",
        cron_secret=CRON_SECRET,
    )


@pytest.fixture(scope="session")
def app(test_settings):
    """Create test application instance."""
    return create_app(settings=test_settings)


@pytest.fixture
def client(
    app,
    test_settings,
    fake_enrollment_repo,
    fake_template_repo,
    fake_message_store,
    fake_task_store,
    fake_resource_store,
) -> Generator[TestClient, None, None]:
    """
    Per-test FastAPI TestClient wired to in-memory fakes.
    Properly cleans up dependency overrides after each test.
    """
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[require_coach] = mock_require_coach
    app.dependency_overrides[get_enrollment_repo] = lambda: fake_enrollment_repo
    app.dependency_overrides[get_template_repo] = lambda: fake_template_repo
    app.dependency_overrides[get_message_store] = lambda: fake_message_store
    app.dependency_overrides[get_task_store] = lambda: fake_task_store
    app.dependency_overrides[get_resource_store] = lambda: fake_resource_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def unauthenticated_client(
    app,
    test_settings,
    fake_enrollment_repo,
    fake_template_repo,
) -> Generator[TestClient, None, None]:
    """TestClient wired to fakes but using the real session auth dependencies."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_session_settings] = lambda: test_settings
    app.dependency_overrides[get_enrollment_repo] = lambda: fake_enrollment_repo
    app.dependency_overrides[get_template_repo] = lambda: fake_template_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Mock Environment Variables
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set mock environment variables for tests."""
    monkeypatch.setenv("SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "test-supabase-key")
    monkeypatch.setenv("ENVIRONMENT", "test")


# ---------------------------------------------------------------------------
# Domain Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_template_data() -> Dict[str, Any]:
    """A two-week template as returned from the database."""
    return {
        "id": TEST_TEMPLATE_ID,
        "coach_id": TEST_COACH_ID,
        "name": "Two Week Reset",
        "description": "Gentle habit reset",
        "duration_weeks": 2,
        "created_at": "2024-01-01T10:00:00Z",
        "updated_at": "2024-01-01T10:00:00Z",
    }


@pytest.fixture
def sample_elements() -> List[Dict[str, Any]]:
    """Elements on week 1 day 1 (three kinds) and week 2 day 1."""
    return [
        {
            "id": "el-msg",
            "kind": "message",
            "title": "Welcome",
            "week": 1,
            "day": 1,
            "scheduled_time": "08:00:00",
            "payload": {"message": "Welcome to the program!"},
        },
        {
            "id": "el-task",
            "kind": "task",
            "title": "Log breakfast",
            "week": 1,
            "day": 1,
            "scheduled_time": "09:00:00",
            "payload": {"description": "Photo and short note"},
        },
        {
            "id": "el-doc",
            "kind": "document",
            "title": "Guide",
            "week": 1,
            "day": 1,
            "scheduled_time": "10:00:00",
            "payload": {"title": "Starter Guide", "url": "https://files.example.com/guide.pdf"},
        },
        {
            "id": "el-week2",
            "kind": "task",
            "title": "Weekly review",
            "week": 2,
            "day": 1,
            "scheduled_time": "09:00:00",
            "payload": {"description": "Review week one"},
        },
    ]


@pytest.fixture
def active_enrollment_data() -> Dict[str, Any]:
    """An active enrollment started on 2024-01-01 with nothing delivered."""
    return {
        "id": "enr-001",
        "program_template_id": TEST_TEMPLATE_ID,
        "client_id": TEST_CLIENT_ID,
        "coach_id": TEST_COACH_ID,
        "status": "active",
        "start_date": "2024-01-01T15:30:00+00:00",
        "last_delivered_day": 0,
        "completed_elements": [],
        "created_at": "2024-01-01T10:00:00Z",
        "updated_at": "2024-01-01T10:00:00Z",
    }


# ---------------------------------------------------------------------------
# Fake Repository Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_enrollment_repo() -> FakeEnrollmentRepository:
    return FakeEnrollmentRepository()


@pytest.fixture
def fake_template_repo() -> FakeTemplateRepository:
    return FakeTemplateRepository()


@pytest.fixture
def fake_message_store() -> FakeMessageStore:
    return FakeMessageStore()


@pytest.fixture
def fake_task_store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture
def fake_resource_store() -> FakeResourceStore:
    return FakeResourceStore()


@pytest.fixture
def seeded_template_repo(fake_template_repo, sample_template_data, sample_elements):
    """Fake template repository pre-seeded with the two-week template."""
    fake_template_repo.seed(sample_template_data, sample_elements)
    return fake_template_repo


@pytest.fixture
def seeded_enrollment_repo(fake_enrollment_repo, active_enrollment_data):
    """Fake enrollment repository pre-seeded with one active enrollment."""
    fake_enrollment_repo.seed([active_enrollment_data])
    return fake_enrollment_repo
