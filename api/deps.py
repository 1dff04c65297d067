"""
FastAPI Dependency Providers for the program delivery API.

This module provides FastAPI dependency injection functions that return
interface types (Protocols) rather than concrete implementations.

Architecture:
- Settings and Supabase client are cached per-process (lru_cache)
- Repository and service providers create new instances per-request
- Auth providers come from backend.auth

Usage in routers:
    from api.deps import get_progress_tracker
    from backend.auth import require_coach

    @router.put("/enrollments/{enrollment_id}/start")
    def start(
        enrollment_id: str,
        user: ActingUser = Depends(require_coach),
        tracker: ProgressTracker = Depends(get_progress_tracker),
    ):
        return tracker.start_enrollment(enrollment_id, user)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_enrollment_repo] = lambda: FakeEnrollmentRepository()
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException
from supabase import Client, create_client

from application.ports import (
    EnrollmentRepository,
    MessageStore,
    ResourceStore,
    TaskStore,
    TemplateRepository,
)
from backend.auth import get_current_user, require_coach
from backend.settings import Settings, get_settings as _get_settings
from infrastructure.db import (
    SupabaseEnrollmentRepository,
    SupabaseMessageStore,
    SupabaseResourceStore,
    SupabaseTaskStore,
    SupabaseTemplateRepository,
)
from services import (
    DailyDeliveryJob,
    DeliveryExecutor,
    DeliverySelector,
    ProgressTracker,
    build_materializers,
)


# =============================================================================
# Settings Provider
# =============================================================================


def get_settings() -> Settings:
    """
    Get application settings.

    Returns cached Settings instance from backend.settings.
    Use this as a FastAPI dependency for settings access.

    Returns:
        Settings: Application settings instance
    """
    return _get_settings()


# =============================================================================
# Supabase Client Provider
# =============================================================================


@lru_cache
def get_supabase_client() -> Optional[Client]:
    """
    Get Supabase client instance (cached).

    Creates a Supabase client using credentials from settings.
    Returns None if credentials are not configured.

    Returns:
        Client: Supabase client instance, or None if not configured
    """
    settings = _get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        return None

    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase_client_required() -> Client:
    """
    Get Supabase client instance, raising if not configured.

    Use this dependency when the endpoint requires database access.
    Raises HTTPException 503 if database is not available.

    Returns:
        Client: Supabase client instance

    Raises:
        HTTPException: 503 if Supabase is not configured
    """
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Database not available. Supabase credentials not configured.",
        )
    return client


# =============================================================================
# Repository Providers
# =============================================================================


def get_enrollment_repo(
    client: Client = Depends(get_supabase_client_required),
) -> EnrollmentRepository:
    """
    Get EnrollmentRepository implementation.

    The return type is the Protocol to enable easy mocking.
    """
    return SupabaseEnrollmentRepository(client)


def get_template_repo(
    client: Client = Depends(get_supabase_client_required),
) -> TemplateRepository:
    """
    Get TemplateRepository implementation.

    The return type is the Protocol to enable easy mocking.
    """
    return SupabaseTemplateRepository(client)


# =============================================================================
# Collaborator Store Providers
# =============================================================================


def get_message_store(
    client: Client = Depends(get_supabase_client_required),
) -> MessageStore:
    """Get the chat message store."""
    return SupabaseMessageStore(client)


def get_task_store(
    client: Client = Depends(get_supabase_client_required),
) -> TaskStore:
    """Get the task store."""
    return SupabaseTaskStore(client)


def get_resource_store(
    client: Client = Depends(get_supabase_client_required),
) -> ResourceStore:
    """Get the resource sharing store."""
    return SupabaseResourceStore(client)


# =============================================================================
# Service Providers
# =============================================================================


def get_progress_tracker(
    enrollment_repo: EnrollmentRepository = Depends(get_enrollment_repo),
    template_repo: TemplateRepository = Depends(get_template_repo),
) -> ProgressTracker:
    """Get a ProgressTracker wired to the request's repositories."""
    return ProgressTracker(enrollment_repo, template_repo)


def get_delivery_executor(
    enrollment_repo: EnrollmentRepository = Depends(get_enrollment_repo),
    template_repo: TemplateRepository = Depends(get_template_repo),
    message_store: MessageStore = Depends(get_message_store),
    task_store: TaskStore = Depends(get_task_store),
    resource_store: ResourceStore = Depends(get_resource_store),
) -> DeliveryExecutor:
    """Get a DeliveryExecutor with the default materializers."""
    return DeliveryExecutor(
        enrollment_repo=enrollment_repo,
        template_repo=template_repo,
        materializers=build_materializers(message_store, task_store, resource_store),
    )


def get_daily_delivery_job(
    enrollment_repo: EnrollmentRepository = Depends(get_enrollment_repo),
    executor: DeliveryExecutor = Depends(get_delivery_executor),
) -> DailyDeliveryJob:
    """Get the daily delivery job."""
    return DailyDeliveryJob(DeliverySelector(enrollment_repo), executor)


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_enrollment_repo",
    "get_template_repo",
    # Collaborators
    "get_message_store",
    "get_resource_store",
    "get_task_store",
    # Services
    "get_daily_delivery_job",
    "get_delivery_executor",
    "get_progress_tracker",
    # Authentication
    "get_current_user",
    "require_coach",
]
