"""Domain models, time arithmetic and business rules for shift planning."""

from shiftplanner.domain.models import (
    ConflictRecord,
    CoverageCheck,
    DayCoverage,
    DayStatus,
    DaySummary,
    Employee,
    ScheduleRules,
    Shift,
    ShiftStatus,
    SlotCoverage,
    TimePreference,
)
from shiftplanner.domain.policies import (
    BlockPolicy,
    DefaultBlockPolicy,
    DefaultShiftPolicy,
    PriorityBlock,
    ShiftPolicy,
    period_for,
)
from shiftplanner.domain.serialization import Planning, load_planning, save_planning
from shiftplanner.domain.timeutils import (
    DAY_NAMES,
    InvalidTimeError,
    add_hours,
    covers,
    crosses_midnight,
    duration,
    ranges_overlap,
    to_minutes,
)

__all__ = [
    # Models
    "ConflictRecord",
    "CoverageCheck",
    "DayCoverage",
    "DayStatus",
    "DaySummary",
    "Employee",
    "ScheduleRules",
    "Shift",
    "ShiftStatus",
    "SlotCoverage",
    "TimePreference",
    # Policies
    "BlockPolicy",
    "DefaultBlockPolicy",
    "DefaultShiftPolicy",
    "PriorityBlock",
    "ShiftPolicy",
    "period_for",
    # Serialization
    "Planning",
    "load_planning",
    "save_planning",
    # Time arithmetic
    "DAY_NAMES",
    "InvalidTimeError",
    "add_hours",
    "covers",
    "crosses_midnight",
    "duration",
    "ranges_overlap",
    "to_minutes",
]
