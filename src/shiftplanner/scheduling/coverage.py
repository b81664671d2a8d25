"""Per-slot staffing analysis and the weekly overview.

A day is sampled at every operating slot start time. Each slot counts the
distinct employees whose shifts cover it; the counts drive the empty,
understaffed and excessive lists, the filling percentage, and the day
status.
"""

import math
from typing import Iterable, Optional

from shiftplanner.domain.models import (
    CoverageCheck,
    DayCoverage,
    DayStatus,
    DaySummary,
    ScheduleRules,
    Shift,
    SlotCoverage,
)
from shiftplanner.scheduling.hours import day_total_hours, unique_employees_for_day


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _share(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


class CoverageAnalyzer:
    """Analyzes how well shifts staff the operating hours.

    Status precedence, worst first:
    - incomplete: at least one operating slot has nobody
    - critical: too many rush-hour slots below the rush minimum
    - warning: too many evening slots, or slots overall, understaffed
    - good: otherwise
    """

    def __init__(self, rules: Optional[ScheduleRules] = None):
        self.rules = rules or ScheduleRules()

    def slot_coverage(self, shifts: Iterable[Shift], day: int) -> list[SlotCoverage]:
        """Distinct employees at each of the day's slot start times."""
        day_shifts = [s for s in shifts if s.day == day]
        coverage = []
        for slot in self.rules.time_slots_for(day):
            employee_ids = frozenset(
                e for s in day_shifts if s.covers(slot) for e in s.employee_ids
            )
            coverage.append(SlotCoverage(time=slot, employee_ids=employee_ids))
        return coverage

    def filling_percentage(self, slots: list[SlotCoverage], day: int) -> int:
        """Staffed slot count against the day's target, capped at 100."""
        required = self.rules.required_hours_for(day) * 2
        if required <= 0:
            return 100
        total = sum(slot.count for slot in slots)
        return min(100, _round_half_up(total / required * 100))

    def analyze_day(self, shifts: Iterable[Shift], day: int) -> DayCoverage:
        rules = self.rules
        shifts = list(shifts)
        slots = self.slot_coverage(shifts, day)

        empty = [s.time for s in slots if s.count == 0]
        excessive = [
            s.time for s in slots if s.count > rules.max_employees_per_time_slot
        ]
        understaffed = [
            s.time for s in slots if s.count < rules.min_employees_per_time_slot
        ]

        evening = [s for s in slots if rules.is_evening_slot(s.time)]
        evening_short = [
            s.time for s in evening if s.count < rules.min_employees_after_18h
        ]
        evening_employees = {e for s in evening for e in s.employee_ids}

        rush = [s for s in slots if rules.is_rush_hour(s.time)]
        rush_short = [
            s.time for s in rush if s.count < rules.min_employees_rush_hour
        ]

        evening_check = CoverageCheck.VALID
        if any(s.count == 0 for s in evening):
            evening_check = CoverageCheck.INCOMPLETE
        elif _share(len(evening_short), len(evening)) > rules.evening_tolerance:
            evening_check = CoverageCheck.WARNING

        rush_check = CoverageCheck.VALID
        if any(s.count == 0 for s in rush):
            rush_check = CoverageCheck.INCOMPLETE
        elif rush and _share(len(rush_short), len(rush)) >= rules.rush_hour_tolerance:
            rush_check = CoverageCheck.WARNING

        general_check = CoverageCheck.VALID
        if empty:
            general_check = CoverageCheck.INCOMPLETE
        elif _share(len(understaffed), len(slots)) > rules.understaffed_tolerance:
            general_check = CoverageCheck.WARNING

        if empty:
            status = DayStatus.INCOMPLETE
        elif rush_check is not CoverageCheck.VALID:
            status = DayStatus.CRITICAL
        elif (
            evening_check is not CoverageCheck.VALID
            or general_check is not CoverageCheck.VALID
        ):
            status = DayStatus.WARNING
        else:
            status = DayStatus.GOOD

        return DayCoverage(
            day=day,
            slot_coverage=slots,
            empty_slots=empty,
            excessive_slots=excessive,
            understaffed_slots=understaffed,
            evening_understaffed_slots=evening_short,
            rush_hour_understaffed_slots=rush_short,
            evening_employee_count=len(evening_employees),
            evening_coverage=evening_check,
            rush_hour_coverage=rush_check,
            general_coverage=general_check,
            status=status,
            filling_percentage=self.filling_percentage(slots, day),
        )

    def summarize_day(self, shifts: Iterable[Shift], day: int) -> DaySummary:
        shifts = list(shifts)
        coverage = self.analyze_day(shifts, day)
        return DaySummary(
            day_index=day,
            employee_count=len(unique_employees_for_day(shifts, day)),
            total_hours=day_total_hours(shifts, day),
            filling_percentage=coverage.filling_percentage,
            status=coverage.status,
        )

    def week_summary(self, shifts: Iterable[Shift]) -> list[DaySummary]:
        shifts = list(shifts)
        return [self.summarize_day(shifts, day) for day in range(7)]


def analyze_day(
    shifts: Iterable[Shift],
    day: int,
    rules: Optional[ScheduleRules] = None,
) -> DayCoverage:
    """Analyze one day's staffing under the given rules."""
    return CoverageAnalyzer(rules).analyze_day(shifts, day)


def generate_week_summary(
    shifts: Iterable[Shift],
    rules: Optional[ScheduleRules] = None,
) -> list[DaySummary]:
    """Summaries for days 0..6, Monday first."""
    return CoverageAnalyzer(rules).week_summary(shifts)
