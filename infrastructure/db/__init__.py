"""
Database infrastructure package.

Supabase implementations of the repository and collaborator ports.
"""

from infrastructure.db.enrollment_repository import SupabaseEnrollmentRepository
from infrastructure.db.message_store import SupabaseMessageStore
from infrastructure.db.resource_store import SupabaseResourceStore
from infrastructure.db.task_store import SupabaseTaskStore
from infrastructure.db.template_repository import SupabaseTemplateRepository

__all__ = [
    "SupabaseEnrollmentRepository",
    "SupabaseMessageStore",
    "SupabaseResourceStore",
    "SupabaseTaskStore",
    "SupabaseTemplateRepository",
]
