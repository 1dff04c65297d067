"""
API package for the program delivery API.

This package contains:
- deps.py: FastAPI dependency providers for DI
- errors.py: Application error to HTTP error mapping
- routers/: API route handlers
"""

# Re-export dependency providers for convenient access
from api.deps import (
    get_current_user,
    get_daily_delivery_job,
    get_delivery_executor,
    get_enrollment_repo,
    get_progress_tracker,
    get_settings,
    get_supabase_client,
    get_supabase_client_required,
    get_template_repo,
    require_coach,
)

__all__ = [
    # Settings
    "get_settings",
    # Database
    "get_supabase_client",
    "get_supabase_client_required",
    # Repositories
    "get_enrollment_repo",
    "get_template_repo",
    # Services
    "get_daily_delivery_job",
    "get_delivery_executor",
    "get_progress_tracker",
    # Authentication
    "get_current_user",
    "require_coach",
]
