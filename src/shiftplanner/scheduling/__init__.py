"""Analysis and generation engine for shift plannings."""

from shiftplanner.scheduling.availability import (
    available_employees,
    find_blocking_shifts,
    is_available,
)
from shiftplanner.scheduling.conflicts import (
    conflicting_shift_ids,
    detect_conflicts,
    detect_week_conflicts,
    is_shift_in_conflict,
)
from shiftplanner.scheduling.coverage import (
    CoverageAnalyzer,
    analyze_day,
    generate_week_summary,
)
from shiftplanner.scheduling.cpsat_generator import (
    CPSATGenerator,
    SolverConfig,
    SolverResult,
)
from shiftplanner.scheduling.generator import (
    GenerationResult,
    HeuristicGenerator,
    generate,
)
from shiftplanner.scheduling.hours import (
    HoursMetrics,
    daily_hours,
    day_total_hours,
    hours_by_employee,
    overworked_employees,
    weekly_hours,
)
from shiftplanner.scheduling.scheduler import ScheduleGenerator, SolverType

__all__ = [
    # Queries
    "is_available",
    "find_blocking_shifts",
    "available_employees",
    "detect_conflicts",
    "detect_week_conflicts",
    "conflicting_shift_ids",
    "is_shift_in_conflict",
    "CoverageAnalyzer",
    "analyze_day",
    "generate_week_summary",
    # Hours
    "HoursMetrics",
    "weekly_hours",
    "daily_hours",
    "day_total_hours",
    "hours_by_employee",
    "overworked_employees",
    # Generators
    "ScheduleGenerator",
    "HeuristicGenerator",
    "CPSATGenerator",
    "GenerationResult",
    "generate",
    # Solver configuration
    "SolverConfig",
    "SolverResult",
    "SolverType",
]
