"""Detection of employees booked on overlapping shifts."""

from typing import Iterable

from shiftplanner.domain.models import ConflictRecord, Employee, Shift


def detect_conflicts(
    shifts: Iterable[Shift],
    employees: Iterable[Employee],
    day: int,
) -> list[ConflictRecord]:
    """Find double-booked employees on one day.

    Each roster employee's shifts on the day are compared pairwise; every
    shift in an overlapping pair lands in that employee's record once.
    Employee ids missing from the roster are not reported.

    Returns:
        One record per double-booked employee, in roster order.
    """
    day_shifts = [s for s in shifts if s.day == day]
    conflicts = []

    for employee in employees:
        own = [s for s in day_shifts if s.has_employee(employee.id)]
        if len(own) < 2:
            continue

        involved: dict[int, Shift] = {}
        for i, first in enumerate(own):
            for second in own[i + 1:]:
                if first.id == second.id:
                    continue
                if first.overlaps(second):
                    involved.setdefault(first.id, first)
                    involved.setdefault(second.id, second)

        if involved:
            conflicts.append(
                ConflictRecord(
                    employee_id=employee.id,
                    day=day,
                    shifts=list(involved.values()),
                )
            )

    return conflicts


def detect_week_conflicts(
    shifts: Iterable[Shift],
    employees: Iterable[Employee],
) -> list[ConflictRecord]:
    """Run conflict detection for days 0..6 and concatenate the results."""
    shifts = list(shifts)
    employees = list(employees)
    conflicts = []
    for day in range(7):
        conflicts.extend(detect_conflicts(shifts, employees, day))
    return conflicts


def conflicting_shift_ids(
    shifts: Iterable[Shift],
    employees: Iterable[Employee],
) -> set[int]:
    """Ids of every shift involved in a conflict during the week."""
    return {
        shift.id
        for record in detect_week_conflicts(shifts, employees)
        for shift in record.shifts
    }


def is_shift_in_conflict(
    shift: Shift,
    shifts: Iterable[Shift],
    employees: Iterable[Employee],
) -> bool:
    return any(
        s.id == shift.id
        for record in detect_conflicts(shifts, employees, shift.day)
        for s in record.shifts
    )
