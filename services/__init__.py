"""
Services package for the program delivery API.

Contains business logic services for:
- Program calendar arithmetic (program day <-> week/day)
- Delivery selection (which enrollments are due today)
- Delivery execution (materializing a day's elements)
- Element materializers (message, task, document)
- Progress tracking (enrollment lifecycle)
- The daily delivery job
"""

from services.daily_delivery import DailyDeliveryJob, DeliveryError, DeliveryRunSummary
from services.delivery_executor import DeliveryExecutor, DeliveryResult, ElementFailure
from services.delivery_selector import DeliveryCandidate, DeliverySelector
from services.materializers import (
    ArtifactRef,
    DocumentMaterializer,
    ElementMaterializer,
    MessageMaterializer,
    TaskMaterializer,
    build_materializers,
)
from services.program_calendar import (
    calculate_program_day,
    program_day_to_week_day,
    total_program_days,
    truncate_to_day,
    week_day_to_program_day,
)
from services.progress_tracker import ALLOWED_TRANSITIONS, ProgressTracker

__all__ = [
    # Daily job
    "DailyDeliveryJob",
    "DeliveryError",
    "DeliveryRunSummary",
    # Executor
    "DeliveryExecutor",
    "DeliveryResult",
    "ElementFailure",
    # Selector
    "DeliveryCandidate",
    "DeliverySelector",
    # Materializers
    "ArtifactRef",
    "DocumentMaterializer",
    "ElementMaterializer",
    "MessageMaterializer",
    "TaskMaterializer",
    "build_materializers",
    # Calendar
    "calculate_program_day",
    "program_day_to_week_day",
    "total_program_days",
    "truncate_to_day",
    "week_day_to_program_day",
    # Progress
    "ALLOWED_TRANSITIONS",
    "ProgressTracker",
]
