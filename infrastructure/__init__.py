"""
Infrastructure layer package for the program delivery API.

This package contains concrete implementations of the port interfaces.
"""

from infrastructure.db import (
    SupabaseEnrollmentRepository,
    SupabaseMessageStore,
    SupabaseResourceStore,
    SupabaseTaskStore,
    SupabaseTemplateRepository,
)

__all__ = [
    "SupabaseEnrollmentRepository",
    "SupabaseMessageStore",
    "SupabaseResourceStore",
    "SupabaseTaskStore",
    "SupabaseTemplateRepository",
]
