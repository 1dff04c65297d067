"""
Port interfaces (Protocols) for the program delivery API.

This package defines the interface contracts that the infrastructure
layer must implement. Using Protocols enables:
- Clean separation of concerns
- Easy testing with in-memory fakes
- Dependency inversion (depend on abstractions, not concretions)
"""

from application.ports.enrollment_repository import EnrollmentRepository
from application.ports.message_store import MessageStore
from application.ports.resource_store import ResourceStore
from application.ports.task_store import TaskStore
from application.ports.template_repository import TemplateRepository

__all__ = [
    "EnrollmentRepository",
    "MessageStore",
    "ResourceStore",
    "TaskStore",
    "TemplateRepository",
]
