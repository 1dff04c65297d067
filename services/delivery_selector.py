"""
Delivery selector.

Decides which enrollments are due for content delivery on a given day.
This is a pure read: it never writes to the enrollment store. Working out
which template elements apply is left to the DeliveryExecutor.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List

from application.ports import EnrollmentRepository
from models.enrollment import Enrollment, EnrollmentStatus
from services.program_calendar import DateLike, calculate_program_day, truncate_to_day

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryCandidate:
    """One enrollment due for delivery, with the program day it is on."""

    enrollment_id: str
    program_day: int
    program_template_id: str
    client_id: str
    coach_id: str


class DeliverySelector:
    """
    Selects active enrollments whose delivery cursor is behind today.

    An enrollment is selected when it is active, has been started on or
    before today and its last delivered program day is lower than today's
    program day. Enrollments that have run past their template duration are
    still selected so the executor can complete them.
    """

    def __init__(self, enrollment_repo: EnrollmentRepository) -> None:
        self._enrollment_repo = enrollment_repo

    def select(self, today: DateLike) -> List[DeliveryCandidate]:
        """
        Select enrollments needing delivery on today.

        Args:
            today: Reference date (truncated to the UTC day)

        Returns:
            One DeliveryCandidate per due enrollment
        """
        reference: date = truncate_to_day(today)
        rows = self._enrollment_repo.list_by_status(EnrollmentStatus.ACTIVE.value)

        candidates: List[DeliveryCandidate] = []
        for row in rows:
            enrollment = Enrollment(**row)
            if enrollment.status != EnrollmentStatus.ACTIVE or enrollment.start_date is None:
                continue

            program_day = calculate_program_day(enrollment.start_date, reference)
            if program_day < 1:
                # Starts in the future
                continue
            if enrollment.last_delivered_day >= program_day:
                continue

            candidates.append(
                DeliveryCandidate(
                    enrollment_id=enrollment.id,
                    program_day=program_day,
                    program_template_id=enrollment.program_template_id,
                    client_id=enrollment.client_id,
                    coach_id=enrollment.coach_id,
                )
            )

        logger.info(
            f"Selected {len(candidates)} of {len(rows)} active enrollments for {reference.isoformat()}"
        )
        return candidates
