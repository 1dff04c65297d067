"""
Shared constants.

This module has no dependencies on models or services to avoid circular imports.
"""

# A program week is always seven program days
DAYS_PER_WEEK = 7

# Template duration bounds (weeks)
MIN_DURATION_WEEKS = 1
MAX_DURATION_WEEKS = 52

# Roles allowed to manage templates and enrollments
COACH_ROLE = "coach"
ADMIN_ROLE = "admin"
CLIENT_ROLE = "client"
MANAGING_ROLES = frozenset({COACH_ROLE, ADMIN_ROLE})
