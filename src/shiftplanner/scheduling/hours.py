"""Worked-hours aggregation per employee and per day."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from shiftplanner.domain.models import Employee, ScheduleRules, Shift


def weekly_hours(shifts: Iterable[Shift], employee_id: int) -> float:
    """Total hours of every shift that includes the employee."""
    return sum(s.duration_hours for s in shifts if s.has_employee(employee_id))


def daily_hours(shifts: Iterable[Shift], employee_id: int, day: int) -> float:
    return sum(
        s.duration_hours
        for s in shifts
        if s.day == day and s.has_employee(employee_id)
    )


def day_total_hours(shifts: Iterable[Shift], day: int) -> float:
    """Staffed hours on a day: each shift's duration times its headcount."""
    return sum(
        s.duration_hours * len(s.employee_ids) for s in shifts if s.day == day
    )


def unique_employees_for_day(shifts: Iterable[Shift], day: int) -> set[int]:
    return {e for s in shifts if s.day == day for e in s.employee_ids}


def hours_by_employee(shifts: Iterable[Shift]) -> dict[int, float]:
    """Weekly hours keyed by employee id, for every employee on a shift."""
    totals: dict[int, float] = {}
    for shift in shifts:
        for employee_id in shift.employee_ids:
            totals[employee_id] = totals.get(employee_id, 0.0) + shift.duration_hours
    return totals


def overworked_employees(
    shifts: Iterable[Shift],
    employees: Iterable[Employee],
    rules: Optional[ScheduleRules] = None,
) -> list[tuple[Employee, float]]:
    """Employees whose weekly hours exceed the rules' weekly maximum."""
    rules = rules or ScheduleRules()
    totals = hours_by_employee(shifts)
    return [
        (e, totals[e.id])
        for e in employees
        if totals.get(e.id, 0.0) > rules.max_weekly_hours_per_employee
    ]


@dataclass
class HoursMetrics:
    """Spread of weekly hours across a roster.

    Attributes:
        hours_per_employee: Weekly hours keyed by employee id.
        days_per_employee: Distinct days worked keyed by employee id.
        avg_hours: Average weekly hours.
        hours_std_dev: Standard deviation of weekly hours.
        min_hours: Lowest weekly hours.
        max_hours: Highest weekly hours.
        balance_score: 0-100, higher means hours are spread more evenly.
    """

    hours_per_employee: dict[int, float] = field(default_factory=dict)
    days_per_employee: dict[int, int] = field(default_factory=dict)
    avg_hours: float = 0.0
    hours_std_dev: float = 0.0
    min_hours: float = 0.0
    max_hours: float = 0.0
    balance_score: float = 100.0

    @classmethod
    def calculate(
        cls,
        shifts: Iterable[Shift],
        employees: Iterable[Employee],
        max_acceptable_std_dev: float = 4.0,
    ) -> "HoursMetrics":
        """Calculate metrics over the whole roster, idle employees included."""
        shifts = list(shifts)
        employees = list(employees)
        if not employees:
            return cls()

        totals = hours_by_employee(shifts)
        hours = {e.id: totals.get(e.id, 0.0) for e in employees}
        days = {
            e.id: len({s.day for s in shifts if s.has_employee(e.id)})
            for e in employees
        }
        values = list(hours.values())

        avg = sum(values) / len(values)
        variance = sum((h - avg) ** 2 for h in values) / len(values)
        std_dev = variance ** 0.5
        score = max(0.0, 100.0 - (std_dev / max_acceptable_std_dev) * 100.0)

        return cls(
            hours_per_employee=hours,
            days_per_employee=days,
            avg_hours=avg,
            hours_std_dev=std_dev,
            min_hours=min(values),
            max_hours=max(values),
            balance_score=score,
        )
