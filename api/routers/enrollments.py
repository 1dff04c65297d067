"""
Enrollments router.

This router provides the coach-facing enrollment lifecycle endpoints:
- Enroll a client in a template
- Get one enrollment / list a client's enrollments
- Start an enrollment (Day 1 is delivered right away in the background)
- Restart an enrollment
- Update progress (mark an element complete, change status)

All endpoints require a coach or admin session; the owning coach check
happens in the ProgressTracker.
"""

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from api.deps import get_delivery_executor, get_progress_tracker, get_template_repo
from api.errors import to_http_exception
from application.exceptions import EnrollmentError
from application.ports import TemplateRepository
from backend.auth import require_coach
from models.enrollment import (
    ActingUser,
    Enrollment,
    EnrollmentResponse,
    EnrollRequest,
    ProgressAction,
    ProgressUpdateRequest,
)
from services.delivery_executor import DeliveryExecutor
from services.progress_tracker import ProgressTracker

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/enrollments",
    tags=["Enrollments"],
)


def _with_progress(
    enrollment: Enrollment,
    tracker: ProgressTracker,
    template_repo: TemplateRepository,
) -> EnrollmentResponse:
    total = template_repo.count_elements(enrollment.program_template_id)
    return EnrollmentResponse(
        enrollment=enrollment,
        progress=tracker.summarize(enrollment, total),
    )


def deliver_first_day(executor: DeliveryExecutor, enrollment_id: str, start_date: datetime) -> None:
    """
    Deliver Day 1 content right after a program is started.

    Runs as a background task; failures are logged and the daily job picks
    the day up on its next run since the cursor did not move.
    """
    try:
        result = executor.deliver_program_elements(enrollment_id, 1, start_date)
    except Exception:
        logger.exception(f"Error sending Day 1 elements to enrollment {enrollment_id}")
        return

    if result.delivered:
        logger.info(f"Day 1 elements delivered to enrollment {enrollment_id}")
    else:
        logger.info(f"Day 1 elements skipped for enrollment {enrollment_id}: {result.reason}")


# =============================================================================
# Enroll
# =============================================================================


@router.post("", response_model=Enrollment, status_code=201)
async def enroll_client(
    request: EnrollRequest,
    user: ActingUser = Depends(require_coach),
    tracker: ProgressTracker = Depends(get_progress_tracker),
) -> Enrollment:
    """
    Enroll a client in a program template.

    The enrollment starts in 'enrolled' status; nothing is delivered until
    the coach starts it.

    Raises:
        404: Template not found
        403: Template belongs to another coach
        409: Client already enrolled in this template
    """
    logger.info(f"Enrolling client {request.client_id} in template {request.template_id}")
    try:
        return tracker.enroll_client(request.template_id, request.client_id, user)
    except EnrollmentError as e:
        raise to_http_exception(e)


# =============================================================================
# Reads
# =============================================================================


@router.get("/client/{client_id}", response_model=List[EnrollmentResponse])
async def list_client_enrollments(
    client_id: str,
    user: ActingUser = Depends(require_coach),
    tracker: ProgressTracker = Depends(get_progress_tracker),
    template_repo: TemplateRepository = Depends(get_template_repo),
) -> List[EnrollmentResponse]:
    """
    List a client's enrollments (the acting coach's only, unless admin).
    """
    enrollments = tracker.list_client_enrollments(client_id, user)
    return [_with_progress(e, tracker, template_repo) for e in enrollments]


@router.get("/{enrollment_id}", response_model=EnrollmentResponse)
async def get_enrollment(
    enrollment_id: str,
    user: ActingUser = Depends(require_coach),
    tracker: ProgressTracker = Depends(get_progress_tracker),
    template_repo: TemplateRepository = Depends(get_template_repo),
) -> EnrollmentResponse:
    """
    Get an enrollment with its progress summary.
    """
    try:
        enrollment = tracker.get_enrollment(enrollment_id, user)
    except EnrollmentError as e:
        raise to_http_exception(e)
    return _with_progress(enrollment, tracker, template_repo)


# =============================================================================
# Start / Restart
# =============================================================================


@router.put("/{enrollment_id}/start", response_model=Enrollment)
async def start_enrollment(
    enrollment_id: str,
    background_tasks: BackgroundTasks,
    user: ActingUser = Depends(require_coach),
    tracker: ProgressTracker = Depends(get_progress_tracker),
    executor: DeliveryExecutor = Depends(get_delivery_executor),
) -> Enrollment:
    """
    Start an enrolled program today.

    Day 1 content is delivered in the background once the response is sent.

    Raises:
        404: Enrollment not found
        403: Not the owning coach
        409: Enrollment already started
    """
    logger.info(f"Starting enrollment {enrollment_id} for coach {user.user_id}")
    try:
        enrollment = tracker.start_enrollment(enrollment_id, user)
    except EnrollmentError as e:
        raise to_http_exception(e)

    background_tasks.add_task(deliver_first_day, executor, enrollment.id, enrollment.start_date)
    return enrollment


@router.put("/{enrollment_id}/restart", response_model=Enrollment)
async def restart_enrollment(
    enrollment_id: str,
    user: ActingUser = Depends(require_coach),
    tracker: ProgressTracker = Depends(get_progress_tracker),
) -> Enrollment:
    """
    Restart a program from day 1, clearing completed elements.

    Raises:
        404: Enrollment not found
        403: Not the owning coach
        409: Enrollment was never started
    """
    logger.info(f"Restarting enrollment {enrollment_id} for coach {user.user_id}")
    try:
        return tracker.restart_enrollment(enrollment_id, user)
    except EnrollmentError as e:
        raise to_http_exception(e)


# =============================================================================
# Progress
# =============================================================================


@router.put("/{enrollment_id}/progress", response_model=Enrollment)
async def update_progress(
    enrollment_id: str,
    request: ProgressUpdateRequest,
    user: ActingUser = Depends(require_coach),
    tracker: ProgressTracker = Depends(get_progress_tracker),
) -> Enrollment:
    """
    Update program progress.

    Actions:
        markElementComplete: requires elementId
        updateStatus: requires status (active, paused, completed)

    Raises:
        400: Required field for the action missing
        404: Enrollment or element not found
        403: Not the owning coach
        409: Status transition not allowed
        422: Unknown status
    """
    try:
        if request.action == ProgressAction.MARK_ELEMENT_COMPLETE:
            if not request.element_id:
                raise HTTPException(status_code=400, detail="Element ID is required")
            return tracker.mark_element_complete(enrollment_id, request.element_id, user)

        if not request.status:
            raise HTTPException(status_code=400, detail="Status is required")
        return tracker.update_enrollment_status(enrollment_id, request.status, user)
    except EnrollmentError as e:
        raise to_http_exception(e)
