"""
Tests for program and enrollment models.
"""

import pytest
from pydantic import ValidationError

from models.enrollment import (
    ActingUser,
    Enrollment,
    EnrollmentStatus,
    EnrollRequest,
    ProgressAction,
    ProgressUpdateRequest,
)
from models.program import (
    DocumentPayload,
    ElementKind,
    MessagePayload,
    ProgramTemplate,
    ProgramTemplateCreate,
    TaskPayload,
    TemplateElement,
)


def _element(**overrides):
    data = {
        "id": "el-1",
        "program_template_id": "tpl-1",
        "week": 1,
        "day": 1,
        "kind": "message",
        "title": "Hello",
        "payload": {"message": "Hi there"},
    }
    data.update(overrides)
    return data


@pytest.mark.unit
class TestTemplateElement:
    def test_message_payload_is_selected_by_kind(self):
        element = TemplateElement(**_element())
        assert element.kind == ElementKind.MESSAGE
        assert isinstance(element.payload, MessagePayload)
        assert element.payload.message == "Hi there"

    def test_task_payload(self):
        element = TemplateElement(
            **_element(kind="task", payload={"description": "Walk 20 minutes"})
        )
        assert isinstance(element.payload, TaskPayload)
        assert element.payload.description == "Walk 20 minutes"

    def test_document_payload_accepts_file_url(self):
        element = TemplateElement(
            **_element(kind="document", payload={"file_url": "https://x.test/a.pdf"})
        )
        assert isinstance(element.payload, DocumentPayload)
        assert element.payload.url == "https://x.test/a.pdf"

    def test_payload_stored_as_json_string(self):
        element = TemplateElement(**_element(payload='{"message": "From JSON"}'))
        assert element.payload.message == "From JSON"

    def test_unparsable_payload_falls_back_to_empty(self):
        element = TemplateElement(**_element(payload="{not json"))
        assert isinstance(element.payload, MessagePayload)
        assert element.payload.message is None

    def test_missing_payload(self):
        element = TemplateElement(**_element(kind="task", payload=None))
        assert element.payload.description == ""

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            TemplateElement(**_element(kind="video"))

    @pytest.mark.parametrize("day", [0, 8])
    def test_day_out_of_range_rejected(self, day):
        with pytest.raises(ValidationError):
            TemplateElement(**_element(day=day))

    def test_display_title_prefers_document_title(self):
        element = TemplateElement(
            **_element(kind="document", title="Doc", payload={"title": "Meal Plan", "url": "u"})
        )
        assert element.display_title == "Meal Plan"

    def test_display_title_falls_back_to_element_title(self):
        assert TemplateElement(**_element(title="Check-in")).display_title == "Check-in"


@pytest.mark.unit
class TestProgramTemplate:
    @pytest.mark.parametrize("weeks", [0, 53])
    def test_duration_bounds(self, weeks):
        with pytest.raises(ValidationError):
            ProgramTemplate(id="t", coach_id="c", name="T", duration_weeks=weeks)

    def test_create_rejects_element_past_duration(self):
        with pytest.raises(ValidationError, match="week 3"):
            ProgramTemplateCreate(
                name="Short",
                duration_weeks=2,
                elements=[{"kind": "task", "title": "Late", "week": 3, "day": 1}],
            )

    def test_create_defaults(self):
        request = ProgramTemplateCreate(
            name="Basics",
            duration_weeks=1,
            elements=[{"kind": "message"}],
        )
        element = request.elements[0]
        assert element.title == "Untitled Element"
        assert element.week == 1
        assert element.day == 1
        assert element.scheduled_time == "09:00:00"


@pytest.mark.unit
class TestEnrollment:
    def _data(self, **overrides):
        data = {
            "id": "enr-1",
            "program_template_id": "tpl-1",
            "client_id": "client-1",
            "coach_id": "coach-1",
        }
        data.update(overrides)
        return data

    def test_defaults(self):
        enrollment = Enrollment(**self._data())
        assert enrollment.status == EnrollmentStatus.ENROLLED
        assert enrollment.start_date is None
        assert enrollment.last_delivered_day == 0
        assert enrollment.completed_elements == []

    def test_completed_elements_deduplicated(self):
        enrollment = Enrollment(**self._data(completed_elements=["a", "b", "a"]))
        assert enrollment.completed_elements == ["a", "b"]

    def test_null_columns_normalized(self):
        enrollment = Enrollment(**self._data(completed_elements=None, last_delivered_day=None))
        assert enrollment.completed_elements == []
        assert enrollment.last_delivered_day == 0

    def test_negative_cursor_rejected(self):
        with pytest.raises(ValidationError):
            Enrollment(**self._data(last_delivered_day=-1))

    def test_ownership(self):
        enrollment = Enrollment(**self._data())
        assert enrollment.is_owned_by(ActingUser("coach-1", "coach"))
        assert not enrollment.is_owned_by(ActingUser("coach-2", "coach"))
        assert enrollment.is_owned_by(ActingUser("someone", "admin"))


@pytest.mark.unit
class TestRequestModels:
    def test_enroll_request_accepts_camel_case(self):
        request = EnrollRequest(**{"templateId": "tpl-1", "clientId": "client-1"})
        assert request.template_id == "tpl-1"
        assert request.client_id == "client-1"

    def test_progress_request(self):
        request = ProgressUpdateRequest(**{"action": "markElementComplete", "elementId": "el-1"})
        assert request.action == ProgressAction.MARK_ELEMENT_COMPLETE
        assert request.element_id == "el-1"

    def test_progress_request_unknown_action(self):
        with pytest.raises(ValidationError):
            ProgressUpdateRequest(action="deleteEverything")
