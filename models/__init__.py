"""Models package for the program delivery API."""

from models.enrollment import (
    ActingUser,
    Enrollment,
    EnrollmentProgress,
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
    TemplateElementCreate,
)

__all__ = [
    "ActingUser",
    "Enrollment",
    "EnrollmentProgress",
    "EnrollmentStatus",
    "EnrollRequest",
    "ProgressAction",
    "ProgressUpdateRequest",
    "DocumentPayload",
    "ElementKind",
    "MessagePayload",
    "ProgramTemplate",
    "ProgramTemplateCreate",
    "TaskPayload",
    "TemplateElement",
    "TemplateElementCreate",
]
