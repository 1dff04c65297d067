"""
Fake Implementations for Testing.

This package provides in-memory fake implementations of the repository and
collaborator store interfaces for fast, isolated testing. No database or
external dependencies required.

Usage:
    from tests.fakes import FakeEnrollmentRepository, FakeTemplateRepository

    repo = FakeEnrollmentRepository()
    repo.seed([{"id": "enr-1", "status": "active", ...}])
"""

from tests.fakes.collaborator_stores import (
    EmptyResourceStore,
    FailingMessageStore,
    FailingTaskStore,
    FakeMessageStore,
    FakeResourceStore,
    FakeTaskStore,
)
from tests.fakes.enrollment_repository import FakeEnrollmentRepository
from tests.fakes.template_repository import FakeTemplateRepository

__all__ = [
    "FakeEnrollmentRepository",
    "FakeTemplateRepository",
    "FakeMessageStore",
    "FakeTaskStore",
    "FakeResourceStore",
    "FailingMessageStore",
    "FailingTaskStore",
    "EmptyResourceStore",
]
