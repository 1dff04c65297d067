"""
Router package for the program delivery API.

This package contains all API routers organized by domain:
- health: Health check endpoints
- templates: Program template management
- enrollments: Client enrollment lifecycle and progress
- cron: Scheduler-triggered jobs (daily program delivery)
"""

from api.routers.cron import router as cron_router
from api.routers.enrollments import router as enrollments_router
from api.routers.health import router as health_router
from api.routers.templates import router as templates_router

__all__ = [
    "cron_router",
    "enrollments_router",
    "health_router",
    "templates_router",
]
