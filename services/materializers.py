"""
Element materializers.

Each template element kind has one materializer that turns the element
into a concrete artifact for the client in a collaborator store:

- message  -> chat message from the coach in their personal conversation
- task     -> pending task assigned to the client
- document -> shared resource link

Adding a new element kind means adding a payload model and a materializer
here, then registering it in build_materializers().
"""

import logging
from dataclasses import dataclass
from typing import Dict, Protocol

from application.exceptions import ElementMaterializationError
from application.ports import MessageStore, ResourceStore, TaskStore
from models.enrollment import Enrollment
from models.program import (
    DocumentPayload,
    ElementKind,
    MessagePayload,
    TaskPayload,
    TemplateElement,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactRef:
    """Reference to an artifact created for a delivered element."""

    kind: ElementKind
    artifact_id: str
    element_id: str


class ElementMaterializer(Protocol):
    """Creates the client-facing artifact for one template element."""

    def materialize(
        self,
        enrollment: Enrollment,
        element: TemplateElement,
        program_day: int,
    ) -> ArtifactRef:
        ...


def _created_id(record: Dict, element: TemplateElement, store: str) -> str:
    if not record or not record.get("id"):
        raise ElementMaterializationError(
            f"{store} returned no record for element {element.id}",
            element_id=element.id,
        )
    return str(record["id"])


class MessageMaterializer:
    """Posts message elements into the coach/client conversation."""

    def __init__(self, message_store: MessageStore) -> None:
        self._message_store = message_store

    def materialize(
        self,
        enrollment: Enrollment,
        element: TemplateElement,
        program_day: int,
    ) -> ArtifactRef:
        payload = element.payload
        content = payload.message if isinstance(payload, MessagePayload) else None
        content = content or element.title

        conversation_id = self._message_store.get_or_create_conversation(
            enrollment.coach_id,
            enrollment.client_id,
        )
        message = self._message_store.send_message(
            conversation_id,
            enrollment.coach_id,
            content,
            "text",
        )
        return ArtifactRef(
            kind=ElementKind.MESSAGE,
            artifact_id=_created_id(message, element, "Message store"),
            element_id=element.id,
        )


class TaskMaterializer:
    """Creates a client task for task elements."""

    def __init__(self, task_store: TaskStore) -> None:
        self._task_store = task_store

    def materialize(
        self,
        enrollment: Enrollment,
        element: TemplateElement,
        program_day: int,
    ) -> ArtifactRef:
        payload = element.payload
        description = payload.description if isinstance(payload, TaskPayload) else ""

        task = self._task_store.create_task(
            {
                "title": element.title,
                "description": description,
                "task_type": "client",
                "coach_id": enrollment.coach_id,
                "client_id": enrollment.client_id,
                "group_id": None,
                "is_repetitive": False,
                "status": "pending",
                "program_enrollment_id": enrollment.id,
                "program_day": program_day,
            }
        )
        return ArtifactRef(
            kind=ElementKind.TASK,
            artifact_id=_created_id(task, element, "Task store"),
            element_id=element.id,
        )


class DocumentMaterializer:
    """Shares document elements with the client as resource links."""

    def __init__(self, resource_store: ResourceStore) -> None:
        self._resource_store = resource_store

    def materialize(
        self,
        enrollment: Enrollment,
        element: TemplateElement,
        program_day: int,
    ) -> ArtifactRef:
        payload = element.payload
        url = payload.url if isinstance(payload, DocumentPayload) else None
        if not url:
            raise ElementMaterializationError(
                f"Document element {element.id} has no url",
                element_id=element.id,
            )

        share = self._resource_store.share_resource(
            {
                "title": element.display_title,
                "url": url,
                "coach_id": enrollment.coach_id,
                "client_id": enrollment.client_id,
                "program_enrollment_id": enrollment.id,
                "program_element_id": element.id,
            }
        )
        return ArtifactRef(
            kind=ElementKind.DOCUMENT,
            artifact_id=_created_id(share, element, "Resource store"),
            element_id=element.id,
        )


def build_materializers(
    message_store: MessageStore,
    task_store: TaskStore,
    resource_store: ResourceStore,
) -> Dict[ElementKind, ElementMaterializer]:
    """Build the kind -> materializer registry used by the DeliveryExecutor."""
    return {
        ElementKind.MESSAGE: MessageMaterializer(message_store),
        ElementKind.TASK: TaskMaterializer(task_store),
        ElementKind.DOCUMENT: DocumentMaterializer(resource_store),
    }
