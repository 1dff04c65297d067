"""
Scheduler-triggered jobs router.

The daily program delivery is invoked by an external scheduler with a
shared secret in the query string:

    GET /cron/daily-program-delivery?secret=<CRON_SECRET>

Enrollments the run does not reach (timeout, crash) keep their cursor
and are picked up by the next run.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field

from api.deps import get_daily_delivery_job, get_settings
from backend.settings import Settings
from services.daily_delivery import DailyDeliveryJob, DeliveryRunSummary

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/cron",
    tags=["Cron"],
)


class DeliveryErrorEntry(BaseModel):
    """One failure reported by a delivery run."""

    model_config = ConfigDict(populate_by_name=True)

    enrollment_id: str = Field(alias="enrollmentId")
    program_day: int = Field(alias="programDay")
    error: str
    element_id: Optional[str] = Field(None, alias="elementId")


class DeliveryRunResponse(BaseModel):
    """Aggregate result of a daily delivery run."""

    success: bool = True
    date: str
    processed: int
    delivered: int
    skipped: int
    errors: List[DeliveryErrorEntry] = []

    @classmethod
    def from_summary(cls, summary: DeliveryRunSummary) -> "DeliveryRunResponse":
        return cls(
            date=summary.date.isoformat(),
            processed=summary.processed,
            delivered=summary.delivered,
            skipped=summary.skipped,
            errors=[
                DeliveryErrorEntry(
                    enrollment_id=e.enrollment_id,
                    program_day=e.program_day,
                    error=e.error,
                    element_id=e.element_id,
                )
                for e in summary.errors
            ],
        )


def verify_cron_secret(
    secret: Optional[str] = Query(None, description="Shared scheduler secret"),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Check the scheduler's shared secret.

    Raises:
        HTTPException: 401 if the secret is missing, wrong, or not configured
    """
    if not settings.cron_secret:
        logger.error("CRON_SECRET is not configured; refusing cron request")
        raise HTTPException(status_code=401, detail="Unauthorized")
    if secret != settings.cron_secret:
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.get(
    "/daily-program-delivery",
    response_model=DeliveryRunResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(verify_cron_secret)],
)
async def daily_program_delivery(
    run_date: Optional[date] = Query(
        None,
        alias="date",
        description="Deliver as of this UTC date (defaults to today)",
    ),
    job: DailyDeliveryJob = Depends(get_daily_delivery_job),
) -> DeliveryRunResponse:
    """
    Deliver today's program content to every due enrollment.

    Returns:
        Counts of processed, delivered and skipped enrollments plus any
        enrollment- or element-level errors
    """
    today = run_date or datetime.now(timezone.utc).date()
    summary = job.run(today)
    return DeliveryRunResponse.from_summary(summary)
