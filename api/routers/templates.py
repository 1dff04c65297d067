"""
Program templates router.

This router provides endpoints for managing coach-authored program templates:
- Create a template with its elements
- List the coach's templates
- Get a template with its ordered elements
- Duplicate a template under a new name
- List the clients enrolled in a template with their progress

Templates are never edited in place once clients are enrolled; coaches
duplicate them to make variations.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_progress_tracker, get_template_repo
from api.errors import to_http_exception
from application.exceptions import EnrollmentError
from application.ports import TemplateRepository
from backend.auth import require_coach
from models.enrollment import ActingUser, EnrolledClient, EnrolledClientsResponse
from models.program import (
    DuplicateTemplateRequest,
    ProgramTemplate,
    ProgramTemplateCreate,
    ProgramTemplateListResponse,
    TemplateElement,
)
from services.progress_tracker import ProgressTracker

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/templates",
    tags=["Templates"],
)


# =============================================================================
# Helper Functions
# =============================================================================


def _get_owned_template(
    template_id: str,
    user: ActingUser,
    template_repo: TemplateRepository,
) -> dict:
    """
    Get a template, raising 404 if missing and 403 if owned by another coach.
    """
    template = template_repo.get_by_id(template_id)
    if not template:
        raise HTTPException(status_code=404, detail=f"Program template {template_id} not found")
    if not user.is_admin and template.get("coach_id") != user.user_id:
        raise HTTPException(status_code=403, detail="Access denied to this program template")
    return template


def _build_template(template_data: dict, element_rows: List[dict]) -> ProgramTemplate:
    """Build a ProgramTemplate model from database dictionaries."""
    return ProgramTemplate(
        **{
            **template_data,
            "elements": [TemplateElement(**row) for row in element_rows],
        }
    )


# =============================================================================
# Create / List / Get
# =============================================================================


@router.post("", response_model=ProgramTemplate, status_code=201)
async def create_template(
    template: ProgramTemplateCreate,
    user: ActingUser = Depends(require_coach),
    template_repo: TemplateRepository = Depends(get_template_repo),
) -> ProgramTemplate:
    """
    Create a program template with its elements.

    Returns:
        The created template including its elements
    """
    logger.info(f"Creating template '{template.name}' for coach {user.user_id}")

    created = template_repo.create(
        {
            "coach_id": user.user_id,
            "name": template.name,
            "description": template.description,
            "duration_weeks": template.duration_weeks,
        },
        [
            {**element.model_dump(), "kind": element.kind.value}
            for element in template.elements
        ],
    )
    logger.info(f"Created template {created['id']} with {len(template.elements)} elements")

    return _build_template(created, template_repo.get_elements(created["id"]))


@router.get("", response_model=ProgramTemplateListResponse)
async def list_templates(
    user: ActingUser = Depends(require_coach),
    template_repo: TemplateRepository = Depends(get_template_repo),
    limit: int = Query(50, ge=1, le=100, description="Maximum templates to return"),
    offset: int = Query(0, ge=0, description="Number of templates to skip"),
) -> ProgramTemplateListResponse:
    """
    List the acting coach's templates, newest first (without elements).
    """
    rows = template_repo.list_by_coach(user.user_id, limit=limit, offset=offset)
    return ProgramTemplateListResponse(
        templates=[_build_template(row, []) for row in rows],
        limit=limit,
        offset=offset,
    )


@router.get("/{template_id}", response_model=ProgramTemplate)
async def get_template(
    template_id: str,
    user: ActingUser = Depends(require_coach),
    template_repo: TemplateRepository = Depends(get_template_repo),
) -> ProgramTemplate:
    """
    Get a template with its elements ordered by week and day.

    Raises:
        404: Template not found
        403: Template belongs to another coach
    """
    template = _get_owned_template(template_id, user, template_repo)
    return _build_template(template, template_repo.get_elements(template_id))


# =============================================================================
# Duplicate
# =============================================================================


@router.post("/{template_id}/duplicate", response_model=ProgramTemplate, status_code=201)
async def duplicate_template(
    template_id: str,
    request: DuplicateTemplateRequest,
    user: ActingUser = Depends(require_coach),
    template_repo: TemplateRepository = Depends(get_template_repo),
) -> ProgramTemplate:
    """
    Copy a template and all of its elements under a new name.

    The copy is owned by the acting coach.
    """
    original = _get_owned_template(template_id, user, template_repo)
    elements = template_repo.get_elements(template_id)

    created = template_repo.create(
        {
            "coach_id": user.user_id,
            "name": request.name,
            "description": original.get("description"),
            "duration_weeks": original["duration_weeks"],
        },
        [
            {
                "kind": element["kind"],
                "title": element.get("title"),
                "week": element["week"],
                "day": element["day"],
                "scheduled_time": element.get("scheduled_time"),
                "payload": element.get("payload") or {},
            }
            for element in elements
        ],
    )
    logger.info(f"Duplicated template {template_id} as {created['id']}")

    return _build_template(created, template_repo.get_elements(created["id"]))


# =============================================================================
# Enrolled Clients
# =============================================================================


@router.get("/{template_id}/enrollments", response_model=EnrolledClientsResponse)
async def list_template_enrollments(
    template_id: str,
    user: ActingUser = Depends(require_coach),
    template_repo: TemplateRepository = Depends(get_template_repo),
    tracker: ProgressTracker = Depends(get_progress_tracker),
) -> EnrolledClientsResponse:
    """
    List the clients enrolled in a template with their progress.
    """
    try:
        enrollments = tracker.list_template_enrollments(template_id, user)
    except EnrollmentError as e:
        raise to_http_exception(e)

    total_elements = template_repo.count_elements(template_id)
    clients = [
        EnrolledClient(
            enrollment_id=enrollment.id,
            client_id=enrollment.client_id,
            status=enrollment.status,
            start_date=enrollment.start_date,
            enrolled_at=enrollment.created_at,
            progress=tracker.summarize(enrollment, total_elements),
        )
        for enrollment in enrollments
    ]
    return EnrolledClientsResponse(template_id=template_id, clients=clients)
