"""
Tests for element materializers.
"""

import pytest

from application.exceptions import ElementMaterializationError
from models.enrollment import Enrollment
from models.program import ElementKind, TemplateElement
from services.materializers import (
    DocumentMaterializer,
    MessageMaterializer,
    TaskMaterializer,
    build_materializers,
)
from tests.fakes import (
    EmptyResourceStore,
    FakeMessageStore,
    FakeResourceStore,
    FakeTaskStore,
)


@pytest.fixture
def enrollment(active_enrollment_data):
    return Enrollment(**active_enrollment_data)


def _element(kind, payload, **overrides):
    data = {
        "id": f"el-{kind}",
        "program_template_id": "tpl-001",
        "week": 1,
        "day": 3,
        "kind": kind,
        "title": "Element title",
        "payload": payload,
    }
    data.update(overrides)
    return TemplateElement(**data)


@pytest.mark.unit
class TestMessageMaterializer:
    def test_sends_payload_message_in_coach_conversation(self, enrollment):
        store = FakeMessageStore()
        element = _element("message", {"message": "Drink water today"})

        ref = MessageMaterializer(store).materialize(enrollment, element, 3)

        assert ref.kind == ElementKind.MESSAGE
        assert ref.element_id == "el-message"
        assert ref.artifact_id == store.messages[0]["id"]
        message = store.messages[0]
        assert message["content"] == "Drink water today"
        assert message["sender_id"] == "coach-123"
        assert message["type"] == "text"
        assert message["conversation_id"] == store.conversations[("coach-123", "client-789")]

    def test_falls_back_to_title_without_message(self, enrollment):
        store = FakeMessageStore()

        MessageMaterializer(store).materialize(enrollment, _element("message", {}), 3)

        assert store.messages[0]["content"] == "Element title"

    def test_reuses_conversation(self, enrollment):
        store = FakeMessageStore()
        materializer = MessageMaterializer(store)

        materializer.materialize(enrollment, _element("message", {"message": "a"}), 3)
        materializer.materialize(enrollment, _element("message", {"message": "b"}), 3)

        assert len(store.conversations) == 1
        assert {m["conversation_id"] for m in store.messages} == set(store.conversations.values())


@pytest.mark.unit
class TestTaskMaterializer:
    def test_creates_pending_client_task(self, enrollment):
        store = FakeTaskStore()
        element = _element("task", {"description": "Stretch for 10 minutes"})

        ref = TaskMaterializer(store).materialize(enrollment, element, 3)

        task = store.tasks[0]
        assert ref.artifact_id == task["id"]
        assert task["title"] == "Element title"
        assert task["description"] == "Stretch for 10 minutes"
        assert task["task_type"] == "client"
        assert task["status"] == "pending"
        assert task["coach_id"] == "coach-123"
        assert task["client_id"] == "client-789"
        assert task["program_enrollment_id"] == "enr-001"
        assert task["program_day"] == 3
        assert task["is_repetitive"] is False


@pytest.mark.unit
class TestDocumentMaterializer:
    def test_shares_resource_link(self, enrollment):
        store = FakeResourceStore()
        element = _element("document", {"title": "Meal Plan", "url": "https://x.test/m.pdf"})

        ref = DocumentMaterializer(store).materialize(enrollment, element, 3)

        share = store.shares[0]
        assert ref.kind == ElementKind.DOCUMENT
        assert share["title"] == "Meal Plan"
        assert share["url"] == "https://x.test/m.pdf"
        assert share["program_element_id"] == "el-document"
        assert share["program_enrollment_id"] == "enr-001"

    def test_missing_url_raises(self, enrollment):
        with pytest.raises(ElementMaterializationError) as exc_info:
            DocumentMaterializer(FakeResourceStore()).materialize(
                enrollment, _element("document", {"title": "No link"}), 3
            )
        assert exc_info.value.element_id == "el-document"

    def test_store_returning_no_record_raises(self, enrollment):
        element = _element("document", {"url": "https://x.test/m.pdf"})

        with pytest.raises(ElementMaterializationError):
            DocumentMaterializer(EmptyResourceStore()).materialize(enrollment, element, 3)


@pytest.mark.unit
def test_build_materializers_covers_every_kind():
    registry = build_materializers(FakeMessageStore(), FakeTaskStore(), FakeResourceStore())
    assert set(registry) == set(ElementKind)
