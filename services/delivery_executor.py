"""
Delivery executor.

Turns the template elements scheduled on one program day into concrete
artifacts for one enrollment and advances the enrollment's delivery cursor.

Workflow for deliver_program_elements(enrollment_id, program_day, today):
1. Re-read the enrollment and check it is still active
2. Skip when the cursor already covers program_day (idempotence guard)
3. Complete the enrollment when program_day is past the template duration
4. Claim the day with a compare-and-swap on last_delivered_day
5. Materialize each element of the day in isolation

Only the current program day is delivered; days the job did not run on
are not backfilled.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from pydantic import ValidationError

from application.exceptions import NotFoundError
from application.ports import EnrollmentRepository, TemplateRepository
from models.enrollment import Enrollment, EnrollmentStatus
from models.program import ElementKind, ProgramTemplate, TemplateElement
from services.materializers import ArtifactRef, ElementMaterializer
from services.program_calendar import (
    DateLike,
    program_day_to_week_day,
    total_program_days,
    truncate_to_day,
)

logger = logging.getLogger(__name__)

REASON_NOT_FOUND = "enrollment not found"
REASON_NOT_ACTIVE = "enrollment not active"
REASON_ALREADY_DELIVERED = "already delivered"
REASON_DURATION_EXCEEDED = "program duration exceeded"
REASON_NO_ELEMENTS = "no elements for this day"


@dataclass
class ElementFailure:
    """A single element that could not be materialized."""

    element_id: str
    kind: str
    error: str


@dataclass
class DeliveryResult:
    """Outcome of one enrollment's delivery pass. Not persisted."""

    enrollment_id: str
    program_day: int
    delivered: bool
    reason: Optional[str] = None
    error: Optional[str] = None
    artifacts: List[ArtifactRef] = field(default_factory=list)
    element_errors: List[ElementFailure] = field(default_factory=list)


class DeliveryExecutor:
    """
    Materializes a program day's elements for one enrollment.

    Dependencies are injected via constructor for testability.

    Usage:
        >>> executor = DeliveryExecutor(
        ...     enrollment_repo=enrollment_repo,
        ...     template_repo=template_repo,
        ...     materializers=build_materializers(messages, tasks, resources),
        ... )
        >>> result = executor.deliver_program_elements("enr-1", 5, date(2024, 1, 5))
        >>> result.delivered
        True
    """

    def __init__(
        self,
        enrollment_repo: EnrollmentRepository,
        template_repo: TemplateRepository,
        materializers: Dict[ElementKind, ElementMaterializer],
    ) -> None:
        self._enrollment_repo = enrollment_repo
        self._template_repo = template_repo
        self._materializers = materializers

    def deliver_program_elements(
        self,
        enrollment_id: str,
        program_day: int,
        today: DateLike,
    ) -> DeliveryResult:
        """
        Deliver the elements scheduled on program_day to an enrollment.

        Args:
            enrollment_id: The enrollment to deliver to
            program_day: 1-based program day being delivered
            today: Delivery date (used for logging only)

        Returns:
            DeliveryResult describing what happened

        Raises:
            NotFoundError: If the enrollment's template no longer exists
            Exception: Store errors before the day is claimed propagate unchanged
        """
        delivery_date = truncate_to_day(today)

        # Fresh read: the selection may be stale by now
        row = self._enrollment_repo.get_by_id(enrollment_id)
        if not row:
            return self._skip(enrollment_id, program_day, REASON_NOT_FOUND)

        enrollment = Enrollment(**row)
        if enrollment.status != EnrollmentStatus.ACTIVE:
            return self._skip(enrollment_id, program_day, REASON_NOT_ACTIVE)

        if enrollment.last_delivered_day >= program_day:
            return self._skip(enrollment_id, program_day, REASON_ALREADY_DELIVERED)

        template = self._load_template(enrollment.program_template_id)

        if program_day > total_program_days(template.duration_weeks):
            self._enrollment_repo.update(
                enrollment_id,
                {"status": EnrollmentStatus.COMPLETED.value},
            )
            logger.info(
                f"Enrollment {enrollment_id} completed: day {program_day} is past "
                f"the {template.duration_weeks}-week program"
            )
            return self._skip(enrollment_id, program_day, REASON_DURATION_EXCEEDED)

        rows = self._rows_for_day(template.id, program_day)

        # Claim the day before creating anything so a concurrent pass that
        # read the same cursor cannot deliver it a second time
        claimed = self._enrollment_repo.advance_cursor(
            enrollment_id,
            expected_day=enrollment.last_delivered_day,
            new_day=program_day,
        )
        if claimed is None:
            logger.info(
                f"Enrollment {enrollment_id} day {program_day} was claimed by another pass"
            )
            return self._skip(enrollment_id, program_day, REASON_ALREADY_DELIVERED)

        if not rows:
            return self._skip(enrollment_id, program_day, REASON_NO_ELEMENTS)

        result = DeliveryResult(
            enrollment_id=enrollment_id,
            program_day=program_day,
            delivered=True,
        )
        for row in rows:
            self._materialize_one(enrollment, row, program_day, result)
        if result.element_errors:
            result.error = f"{len(result.element_errors)} of {len(rows)} elements failed"

        logger.info(
            f"Delivered day {program_day} ({delivery_date.isoformat()}) to enrollment "
            f"{enrollment_id}: {len(result.artifacts)} created, "
            f"{len(result.element_errors)} failed"
        )
        return result

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _load_template(self, template_id: str) -> ProgramTemplate:
        row = self._template_repo.get_by_id(template_id)
        if not row:
            raise NotFoundError(f"Program template {template_id} not found")
        return ProgramTemplate(**{**row, "elements": []})

    def _rows_for_day(self, template_id: str, program_day: int) -> List[Dict]:
        week, day = program_day_to_week_day(program_day)
        return self._template_repo.get_elements_for_day(template_id, week, day)

    def _materialize_one(
        self,
        enrollment: Enrollment,
        row: Dict,
        program_day: int,
        result: DeliveryResult,
    ) -> None:
        element_id = str(row.get("id"))
        try:
            element = TemplateElement(**row)
        except ValidationError as e:
            # Legacy kinds and malformed payloads fail alone
            logger.warning(
                f"Skipping unreadable element {element_id} (kind {row.get('kind')!r}) "
                f"for enrollment {enrollment.id}: {e.error_count()} validation errors"
            )
            result.element_errors.append(
                ElementFailure(
                    element_id=element_id,
                    kind=str(row.get("kind")),
                    error=f"Invalid element: {e}",
                )
            )
            return

        materializer = self._materializers.get(element.kind)
        if materializer is None:
            logger.warning(f"No materializer for element kind {element.kind.value}")
            result.element_errors.append(
                ElementFailure(
                    element_id=element.id,
                    kind=element.kind.value,
                    error=f"Unsupported element kind: {element.kind.value}",
                )
            )
            return

        try:
            artifact = materializer.materialize(enrollment, element, program_day)
        except Exception as e:
            # One failing element must not block its siblings
            logger.error(
                f"Failed to materialize {element.kind.value} element {element.id} "
                f"for enrollment {enrollment.id}: {e}"
            )
            result.element_errors.append(
                ElementFailure(
                    element_id=element.id,
                    kind=element.kind.value,
                    error=str(e),
                )
            )
            return

        result.artifacts.append(artifact)

    @staticmethod
    def _skip(enrollment_id: str, program_day: int, reason: str) -> DeliveryResult:
        return DeliveryResult(
            enrollment_id=enrollment_id,
            program_day=program_day,
            delivered=False,
            reason=reason,
        )
