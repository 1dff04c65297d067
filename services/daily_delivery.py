"""
Daily program delivery job.

Invoked once a day by an external scheduler (see the /cron router). Runs
the DeliverySelector, then the DeliveryExecutor for every due enrollment,
one after another, and aggregates the outcome.

The job is the only retry boundary: an enrollment whose pass fails keeps
its cursor, so it is selected again on the next run.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from services.delivery_executor import DeliveryExecutor
from services.delivery_selector import DeliverySelector
from services.program_calendar import DateLike, truncate_to_day

logger = logging.getLogger(__name__)


@dataclass
class DeliveryError:
    """An enrollment-level or element-level failure reported by a run."""

    enrollment_id: str
    program_day: int
    error: str
    element_id: Optional[str] = None


@dataclass
class DeliveryRunSummary:
    """Aggregate result of one daily delivery run."""

    date: date
    processed: int = 0
    delivered: int = 0
    skipped: int = 0
    errors: List[DeliveryError] = field(default_factory=list)


class DailyDeliveryJob:
    """
    Orchestrates one day's program delivery.

    Usage:
        >>> job = DailyDeliveryJob(selector, executor)
        >>> summary = job.run(date(2024, 1, 5))
        >>> summary.delivered
        3
    """

    def __init__(self, selector: DeliverySelector, executor: DeliveryExecutor) -> None:
        self._selector = selector
        self._executor = executor

    def run(self, today: DateLike) -> DeliveryRunSummary:
        """
        Deliver today's content to every due enrollment.

        Args:
            today: Run date (truncated to the UTC day)

        Returns:
            DeliveryRunSummary with counts and errors
        """
        run_date = truncate_to_day(today)
        logger.info(f"[Program Delivery] Starting daily delivery for {run_date.isoformat()}")

        candidates = self._selector.select(run_date)
        logger.info(f"[Program Delivery] Found {len(candidates)} enrollments to check")

        summary = DeliveryRunSummary(date=run_date)
        for candidate in candidates:
            summary.processed += 1
            try:
                result = self._executor.deliver_program_elements(
                    candidate.enrollment_id,
                    candidate.program_day,
                    run_date,
                )
            except Exception as e:
                logger.exception(
                    f"[Program Delivery] Error delivering to enrollment {candidate.enrollment_id}"
                )
                summary.errors.append(
                    DeliveryError(
                        enrollment_id=candidate.enrollment_id,
                        program_day=candidate.program_day,
                        error=str(e),
                    )
                )
                continue

            if result.delivered:
                summary.delivered += 1
                logger.info(
                    f"[Program Delivery] Delivered day {candidate.program_day} "
                    f"to enrollment {candidate.enrollment_id}"
                )
                if result.error:
                    logger.warning(
                        f"[Program Delivery] Enrollment {candidate.enrollment_id}: {result.error}"
                    )
            else:
                summary.skipped += 1
                logger.info(
                    f"[Program Delivery] Skipped enrollment {candidate.enrollment_id}: {result.reason}"
                )

            for failure in result.element_errors:
                summary.errors.append(
                    DeliveryError(
                        enrollment_id=candidate.enrollment_id,
                        program_day=candidate.program_day,
                        error=failure.error,
                        element_id=failure.element_id,
                    )
                )

        logger.info(
            f"[Program Delivery] Completed: {summary.delivered} delivered, "
            f"{summary.skipped} skipped, {len(summary.errors)} errors"
        )
        return summary
