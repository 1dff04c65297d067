"""
Integration tests for the templates router.

Uses the in-memory fakes wired through dependency_overrides.
"""

import pytest

from backend.auth import require_coach
from tests.conftest import OTHER_COACH, TEST_COACH_ID


@pytest.fixture
def create_payload():
    return {
        "name": "Mindful Eating",
        "description": "Four weeks of small habits",
        "duration_weeks": 4,
        "elements": [
            {
                "kind": "task",
                "title": "Log dinner",
                "week": 1,
                "day": 2,
                "payload": {"description": "Photo and note"},
            },
            {
                "kind": "message",
                "title": "Welcome",
                "week": 1,
                "day": 1,
                "payload": {"message": "Glad you're here"},
            },
        ],
    }


@pytest.mark.integration
class TestCreateTemplate:
    def test_create_returns_template_with_ordered_elements(self, client, create_payload):
        response = client.post("/templates", json=create_payload)

        assert response.status_code == 201
        data = response.json()
        assert data["coach_id"] == TEST_COACH_ID
        assert data["duration_weeks"] == 4
        assert [e["title"] for e in data["elements"]] == ["Welcome", "Log dinner"]
        assert data["elements"][0]["payload"]["message"] == "Glad you're here"

    def test_element_past_duration_rejected(self, client, create_payload):
        create_payload["elements"][0]["week"] = 5

        response = client.post("/templates", json=create_payload)

        assert response.status_code == 422

    def test_unknown_kind_rejected(self, client, create_payload):
        create_payload["elements"][0]["kind"] = "video"

        response = client.post("/templates", json=create_payload)

        assert response.status_code == 422


@pytest.mark.integration
class TestReadTemplates:
    def test_list_only_own_templates(self, client, seeded_template_repo):
        seeded_template_repo.seed(
            {"id": "tpl-other", "coach_id": OTHER_COACH.user_id, "name": "Other", "duration_weeks": 1}
        )

        response = client.get("/templates")

        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data["templates"]] == ["tpl-001"]
        assert data["limit"] == 50
        assert data["offset"] == 0

    def test_get_template(self, client, seeded_template_repo):
        response = client.get("/templates/tpl-001")

        assert response.status_code == 200
        elements = response.json()["elements"]
        assert [e["id"] for e in elements][-1] == "el-week2"
        assert len(elements) == 4

    def test_get_missing_template(self, client):
        response = client.get("/templates/nope")

        assert response.status_code == 404

    def test_get_other_coaches_template(self, app, client, seeded_template_repo):
        app.dependency_overrides[require_coach] = lambda: OTHER_COACH

        response = client.get("/templates/tpl-001")

        assert response.status_code == 403


@pytest.mark.integration
class TestDuplicateTemplate:
    def test_duplicate_copies_elements(self, client, seeded_template_repo):
        response = client.post("/templates/tpl-001/duplicate", json={"name": "Reset v2"})

        assert response.status_code == 201
        data = response.json()
        assert data["id"] != "tpl-001"
        assert data["name"] == "Reset v2"
        assert data["duration_weeks"] == 2
        assert len(data["elements"]) == 4
        assert {e["program_template_id"] for e in data["elements"]} == {data["id"]}
        assert seeded_template_repo.count() == 2


@pytest.mark.integration
class TestTemplateEnrollments:
    def test_lists_enrolled_clients_with_progress(
        self, client, seeded_template_repo, seeded_enrollment_repo
    ):
        seeded_enrollment_repo.update("enr-001", {"completed_elements": ["el-msg"]})

        response = client.get("/templates/tpl-001/enrollments")

        assert response.status_code == 200
        data = response.json()
        assert data["template_id"] == "tpl-001"
        assert len(data["clients"]) == 1
        row = data["clients"][0]
        assert row["enrollment_id"] == "enr-001"
        assert row["status"] == "active"
        assert row["progress"]["completed_elements"] == 1
        assert row["progress"]["total_elements"] == 4
        assert row["progress"]["completion_rate"] == 25

    def test_other_coach_forbidden(self, app, client, seeded_template_repo):
        app.dependency_overrides[require_coach] = lambda: OTHER_COACH

        response = client.get("/templates/tpl-001/enrollments")

        assert response.status_code == 403
