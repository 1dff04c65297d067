"""
Enrollment progress tracker.

Owns every coach-driven change to an enrollment: enrolling a client,
starting, pausing/resuming/completing, restarting and marking elements
complete. Every operation takes the acting user explicitly; only the
owning coach or an admin may change an enrollment.

Lifecycle:
    enrolled --start--> active --(duration exceeded | complete)--> completed
    active --pause--> paused --resume--> active
    {active, paused, completed} --restart--> active
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, List, Optional, Union

from application.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStatusError,
    NotFoundError,
)
from application.ports import EnrollmentRepository, TemplateRepository
from models.enrollment import (
    ActingUser,
    Enrollment,
    EnrollmentProgress,
    EnrollmentStatus,
)
from services.program_calendar import DateLike, calculate_program_day

logger = logging.getLogger(__name__)

# Transitions allowed through update_enrollment_status. Starting and
# restarting have their own operations.
ALLOWED_TRANSITIONS: Dict[EnrollmentStatus, FrozenSet[EnrollmentStatus]] = {
    EnrollmentStatus.ENROLLED: frozenset(),
    EnrollmentStatus.ACTIVE: frozenset({EnrollmentStatus.PAUSED, EnrollmentStatus.COMPLETED}),
    EnrollmentStatus.PAUSED: frozenset({EnrollmentStatus.ACTIVE, EnrollmentStatus.COMPLETED}),
    EnrollmentStatus.COMPLETED: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProgressTracker:
    """
    Read/write operations on enrollment lifecycle and progress.

    Args:
        enrollment_repo: Enrollment persistence
        template_repo: Template catalog (read only)
        clock: Returns the current time; injectable for tests
    """

    def __init__(
        self,
        enrollment_repo: EnrollmentRepository,
        template_repo: TemplateRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._enrollment_repo = enrollment_repo
        self._template_repo = template_repo
        self._clock = clock

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_enrollment(self, enrollment_id: str, acting: ActingUser) -> Enrollment:
        """Get an enrollment the acting user may manage."""
        return self._load_owned(enrollment_id, acting)

    def list_client_enrollments(self, client_id: str, acting: ActingUser) -> List[Enrollment]:
        """List a client's enrollments; coaches only see their own."""
        coach_id = None if acting.is_admin else acting.user_id
        rows = self._enrollment_repo.list_for_client(client_id, coach_id)
        return [Enrollment(**row) for row in rows]

    def list_template_enrollments(self, template_id: str, acting: ActingUser) -> List[Enrollment]:
        """
        List the enrollments of a template the acting user owns.

        Raises:
            NotFoundError: Template does not exist
            ForbiddenError: Template belongs to another coach
        """
        self._load_owned_template(template_id, acting)
        rows = self._enrollment_repo.list_for_template(template_id)
        return [Enrollment(**row) for row in rows]

    def summarize(
        self,
        enrollment: Enrollment,
        total_elements: int,
        today: Optional[DateLike] = None,
    ) -> EnrollmentProgress:
        """
        Summarize progress for dashboards.

        Args:
            enrollment: The enrollment
            total_elements: Number of elements in its template
            today: Reference date (defaults to now)

        Returns:
            EnrollmentProgress with counts, current day and completion rate
        """
        completed = len(enrollment.completed_elements)
        current_day = 0
        if enrollment.start_date is not None:
            current_day = max(
                0, calculate_program_day(enrollment.start_date, today or self._clock())
            )
        rate = round(completed * 100 / total_elements) if total_elements > 0 else 0
        return EnrollmentProgress(
            completed_elements=completed,
            total_elements=total_elements,
            current_day=current_day,
            status=enrollment.status,
            completion_rate=rate,
        )

    # -------------------------------------------------------------------------
    # Enroll
    # -------------------------------------------------------------------------

    def enroll_client(self, template_id: str, client_id: str, acting: ActingUser) -> Enrollment:
        """
        Enroll a client in a template.

        The enrollment starts in the 'enrolled' state; content is only
        delivered once the coach starts it.

        Raises:
            NotFoundError: Template does not exist
            ForbiddenError: Template belongs to another coach
            ConflictError: Client is already enrolled in this template
        """
        template = self._load_owned_template(template_id, acting)

        if self._enrollment_repo.find(template_id, client_id):
            raise ConflictError("Client is already enrolled in this program")

        coach_id = template["coach_id"] if acting.is_admin else acting.user_id
        created = self._enrollment_repo.create(
            {
                "program_template_id": template_id,
                "client_id": client_id,
                "coach_id": coach_id,
                "status": EnrollmentStatus.ENROLLED.value,
                "start_date": None,
                "last_delivered_day": 0,
                "completed_elements": [],
            }
        )
        logger.info(f"Enrolled client {client_id} in template {template_id}")
        return Enrollment(**created)

    # -------------------------------------------------------------------------
    # Progress
    # -------------------------------------------------------------------------

    def mark_element_complete(
        self,
        enrollment_id: str,
        element_id: str,
        acting: ActingUser,
    ) -> Enrollment:
        """
        Add an element to the enrollment's completed set.

        Repeated calls are no-ops. Completing the last element of an active
        enrollment completes the enrollment.

        Raises:
            NotFoundError: Enrollment missing, or element not in its template
            ForbiddenError: Acting user is not the owning coach or an admin
        """
        enrollment = self._load_owned(enrollment_id, acting)

        element = self._template_repo.get_element(enrollment.program_template_id, element_id)
        if not element:
            raise NotFoundError(
                f"Element {element_id} not found in program template "
                f"{enrollment.program_template_id}"
            )

        if element_id in enrollment.completed_elements:
            return enrollment

        row = self._enrollment_repo.append_completed_element(enrollment_id, element_id)
        if not row:
            raise NotFoundError(f"Enrollment {enrollment_id} not found")
        updated = Enrollment(**row)

        # Count on the stored array so concurrent marks are all included
        total = self._template_repo.count_elements(enrollment.program_template_id)
        if updated.status == EnrollmentStatus.ACTIVE and len(updated.completed_elements) >= total:
            logger.info(f"All elements complete, completing enrollment {enrollment_id}")
            row = self._enrollment_repo.update(
                enrollment_id, {"status": EnrollmentStatus.COMPLETED.value}
            )
            updated = Enrollment(**row)

        return updated

    def update_enrollment_status(
        self,
        enrollment_id: str,
        new_status: Union[str, EnrollmentStatus],
        acting: ActingUser,
    ) -> Enrollment:
        """
        Change an enrollment's status (pause, resume or complete).

        Raises:
            InvalidStatusError: new_status is not a known state
            NotFoundError: Enrollment missing
            ForbiddenError: Acting user is not the owning coach or an admin
            ConflictError: Transition not allowed (use start/restart instead)
        """
        try:
            target = EnrollmentStatus(new_status)
        except ValueError:
            raise InvalidStatusError(
                f"Invalid status '{new_status}'. Must be one of: "
                f"{[s.value for s in EnrollmentStatus]}"
            ) from None

        enrollment = self._load_owned(enrollment_id, acting)
        if enrollment.status == target:
            return enrollment

        if target not in ALLOWED_TRANSITIONS[enrollment.status]:
            if enrollment.status == EnrollmentStatus.COMPLETED:
                raise ConflictError("Completed enrollments can only be restarted")
            if enrollment.status == EnrollmentStatus.ENROLLED:
                raise ConflictError("Enrollment has not been started")
            raise ConflictError(
                f"Cannot change status from {enrollment.status.value} to {target.value}"
            )

        updated = self._enrollment_repo.update(enrollment_id, {"status": target.value})
        logger.info(
            f"Enrollment {enrollment_id} status {enrollment.status.value} -> {target.value}"
        )
        return Enrollment(**updated)

    # -------------------------------------------------------------------------
    # Start / Restart
    # -------------------------------------------------------------------------

    def start_enrollment(self, enrollment_id: str, acting: ActingUser) -> Enrollment:
        """
        Start an enrolled program today.

        Raises:
            NotFoundError: Enrollment missing
            ForbiddenError: Acting user is not the owning coach or an admin
            ConflictError: Enrollment was already started
        """
        enrollment = self._load_owned(enrollment_id, acting)
        if enrollment.status != EnrollmentStatus.ENROLLED or enrollment.start_date is not None:
            raise ConflictError("Enrollment has already been started")

        updated = self._enrollment_repo.update(
            enrollment_id,
            {
                "status": EnrollmentStatus.ACTIVE.value,
                "start_date": self._clock().isoformat(),
                "last_delivered_day": 0,
            },
        )
        logger.info(f"Started enrollment {enrollment_id}")
        return Enrollment(**updated)

    def restart_enrollment(self, enrollment_id: str, acting: ActingUser) -> Enrollment:
        """
        Restart a program from day 1.

        Clears completed elements and the delivery cursor and starts over
        today.

        Raises:
            NotFoundError: Enrollment missing
            ForbiddenError: Acting user is not the owning coach or an admin
            ConflictError: Enrollment was never started
        """
        enrollment = self._load_owned(enrollment_id, acting)
        if enrollment.status == EnrollmentStatus.ENROLLED:
            raise ConflictError("Enrollment has not been started; start it instead")

        updated = self._enrollment_repo.update(
            enrollment_id,
            {
                "status": EnrollmentStatus.ACTIVE.value,
                "start_date": self._clock().isoformat(),
                "last_delivered_day": 0,
                "completed_elements": [],
            },
        )
        logger.info(f"Restarted enrollment {enrollment_id} (was {enrollment.status.value})")
        return Enrollment(**updated)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _load_owned(self, enrollment_id: str, acting: ActingUser) -> Enrollment:
        row = self._enrollment_repo.get_by_id(enrollment_id)
        if not row:
            raise NotFoundError(f"Enrollment {enrollment_id} not found")
        enrollment = Enrollment(**row)
        if not enrollment.is_owned_by(acting):
            raise ForbiddenError(f"Not allowed to manage enrollment {enrollment_id}")
        return enrollment

    def _load_owned_template(self, template_id: str, acting: ActingUser) -> Dict:
        template = self._template_repo.get_by_id(template_id)
        if not template:
            raise NotFoundError(f"Program template {template_id} not found")
        if not acting.is_admin and template.get("coach_id") != acting.user_id:
            raise ForbiddenError(f"Not allowed to manage template {template_id}")
        return template
