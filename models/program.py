"""
Domain models for program templates.

A program template is a coach-authored, multi-week content plan. Each
template owns an ordered list of elements scheduled at a (week, day)
offset. Element payloads are a tagged union keyed by the element kind.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from core.constants import DAYS_PER_WEEK, MAX_DURATION_WEEKS, MIN_DURATION_WEEKS

logger = logging.getLogger(__name__)


class ElementKind(str, Enum):
    """Kinds of content a template element can deliver."""

    MESSAGE = "message"
    TASK = "task"
    DOCUMENT = "document"


# =============================================================================
# Element Payloads
# =============================================================================


class MessagePayload(BaseModel):
    """Chat message sent from the coach to the client."""

    kind: Literal["message"] = "message"
    message: Optional[str] = None


class TaskPayload(BaseModel):
    """Task assigned to the client."""

    kind: Literal["task"] = "task"
    description: str = ""


class DocumentPayload(BaseModel):
    """Shareable resource link."""

    kind: Literal["document"] = "document"
    title: Optional[str] = None
    url: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_file_url(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("url") and data.get("file_url"):
            return {**data, "url": data["file_url"]}
        return data


ElementPayload = Annotated[
    Union[MessagePayload, TaskPayload, DocumentPayload],
    Field(discriminator="kind"),
]


def _coerce_payload(raw: Any, element_id: Optional[str]) -> dict:
    """Normalize a stored payload (dict, JSON string or junk) into a dict."""
    if raw is None:
        return {}
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning(f"Unparsable payload for element {element_id}, using empty payload")
            return {}
    if not isinstance(raw, dict):
        logger.warning(f"Non-object payload for element {element_id}, using empty payload")
        return {}
    return dict(raw)


# =============================================================================
# Template Elements
# =============================================================================


class TemplateElement(BaseModel):
    """A single piece of content scheduled within a program template."""

    id: str
    program_template_id: str
    week: int = Field(ge=1)
    day: int = Field(ge=1, le=DAYS_PER_WEEK)
    kind: ElementKind
    title: str = "Untitled Element"
    scheduled_time: Optional[str] = None
    payload: ElementPayload

    @model_validator(mode="before")
    @classmethod
    def _tag_payload(cls, data: Any) -> Any:
        """Stamp the element kind onto its payload so the union can discriminate."""
        if not isinstance(data, dict):
            return data
        kind = data.get("kind")
        if isinstance(kind, ElementKind):
            kind = kind.value
        payload = data.get("payload")
        if isinstance(payload, BaseModel):
            return data
        payload = _coerce_payload(payload, data.get("id"))
        payload["kind"] = kind
        return {**data, "payload": payload}

    @property
    def display_title(self) -> str:
        """Title to show the client, preferring the payload's own title."""
        if isinstance(self.payload, DocumentPayload) and self.payload.title:
            return self.payload.title
        return self.title


class ProgramTemplate(BaseModel):
    """A coach-owned multi-week curriculum."""

    id: str
    coach_id: str
    name: str
    description: Optional[str] = None
    duration_weeks: int = Field(ge=MIN_DURATION_WEEKS, le=MAX_DURATION_WEEKS)
    elements: List[TemplateElement] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# Request / Response Models
# =============================================================================


class TemplateElementCreate(BaseModel):
    """Element definition supplied when creating a template."""

    kind: ElementKind
    title: str = Field("Untitled Element", min_length=1, max_length=200)
    week: int = Field(1, ge=1, le=MAX_DURATION_WEEKS)
    day: int = Field(1, ge=1, le=DAYS_PER_WEEK)
    scheduled_time: Optional[str] = Field("09:00:00", description="HH:MM:SS, ordering only")
    payload: dict = Field(default_factory=dict)


class ProgramTemplateCreate(BaseModel):
    """Request model for creating a program template."""

    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    duration_weeks: int = Field(ge=MIN_DURATION_WEEKS, le=MAX_DURATION_WEEKS)
    elements: List[TemplateElementCreate] = []

    @model_validator(mode="after")
    def _elements_within_duration(self) -> "ProgramTemplateCreate":
        for element in self.elements:
            if element.week > self.duration_weeks:
                raise ValueError(
                    f"Element '{element.title}' is scheduled in week {element.week} "
                    f"but the program lasts {self.duration_weeks} weeks"
                )
        return self


class DuplicateTemplateRequest(BaseModel):
    """Request model for duplicating a template."""

    name: str = Field(min_length=1, max_length=200)


class ProgramTemplateListResponse(BaseModel):
    """Paginated template listing."""

    templates: List[ProgramTemplate]
    limit: int
    offset: int
