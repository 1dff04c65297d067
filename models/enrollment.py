"""
Domain models for program enrollments.

An enrollment is one client's stateful progress through one program
template. It carries the delivery cursor (last_delivered_day) advanced
by the daily delivery job and the set of elements marked complete.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.constants import ADMIN_ROLE


class EnrollmentStatus(str, Enum):
    """Enrollment lifecycle states."""

    ENROLLED = "enrolled"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ActingUser:
    """The authenticated caller an operation is performed on behalf of."""

    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class Enrollment(BaseModel):
    """A client's enrollment in a program template."""

    id: str
    program_template_id: str
    client_id: str
    coach_id: str
    status: EnrollmentStatus = EnrollmentStatus.ENROLLED
    start_date: Optional[datetime] = None
    last_delivered_day: int = Field(0, ge=0)
    completed_elements: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("completed_elements", mode="before")
    @classmethod
    def _dedupe_completed(cls, value):
        # Stored as an array column; membership is all that matters
        if value is None:
            return []
        return list(dict.fromkeys(value))

    @field_validator("last_delivered_day", mode="before")
    @classmethod
    def _default_cursor(cls, value):
        return 0 if value is None else value

    def is_owned_by(self, user: ActingUser) -> bool:
        """Whether the user may manage this enrollment (owning coach or admin)."""
        return user.is_admin or user.user_id == self.coach_id


class EnrollmentProgress(BaseModel):
    """Progress summary shown on coach dashboards."""

    completed_elements: int
    total_elements: int
    current_day: int
    status: EnrollmentStatus
    completion_rate: int = Field(description="Completed elements as a rounded percentage")


# =============================================================================
# Request / Response Models
# =============================================================================


class EnrollRequest(BaseModel):
    """Request model for enrolling a client in a template."""

    model_config = ConfigDict(populate_by_name=True)

    template_id: str = Field(alias="templateId", min_length=1)
    client_id: str = Field(alias="clientId", min_length=1)


class ProgressAction(str, Enum):
    """Actions accepted by the progress endpoint."""

    MARK_ELEMENT_COMPLETE = "markElementComplete"
    UPDATE_STATUS = "updateStatus"


class ProgressUpdateRequest(BaseModel):
    """Request model for PUT /enrollments/{id}/progress."""

    model_config = ConfigDict(populate_by_name=True)

    action: ProgressAction
    element_id: Optional[str] = Field(None, alias="elementId")
    status: Optional[str] = None


class EnrollmentResponse(BaseModel):
    """An enrollment together with its progress summary."""

    enrollment: Enrollment
    progress: Optional[EnrollmentProgress] = None


class EnrolledClient(BaseModel):
    """One row of the enrolled-clients listing for a template."""

    enrollment_id: str
    client_id: str
    status: EnrollmentStatus
    start_date: Optional[datetime] = None
    enrolled_at: Optional[datetime] = None
    progress: EnrollmentProgress


class EnrolledClientsResponse(BaseModel):
    template_id: str
    clients: List[EnrolledClient]
