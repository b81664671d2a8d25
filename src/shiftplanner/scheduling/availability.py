"""Availability checks for placing an employee in a time range."""

from typing import Iterable, Optional

from shiftplanner.domain.models import Employee, Shift
from shiftplanner.domain.timeutils import ranges_overlap


def find_blocking_shifts(
    shifts: Iterable[Shift],
    employee_id: int,
    day: int,
    start_time: str,
    end_time: str,
    exclude_shift_id: Optional[int] = None,
) -> list[Shift]:
    """Get the employee's shifts on `day` that overlap the given range.

    Args:
        shifts: Shifts to check against.
        employee_id: Employee being placed.
        day: Day of week the range starts on.
        start_time: Range start as "HH:MM".
        end_time: Range end as "HH:MM", may cross midnight.
        exclude_shift_id: Shift to ignore, typically the one being edited.

    Returns:
        Overlapping shifts in input order.
    """
    return [
        shift
        for shift in shifts
        if shift.day == day
        and shift.has_employee(employee_id)
        and shift.id != exclude_shift_id
        and ranges_overlap(start_time, end_time, shift.start_time, shift.end_time)
    ]


def is_available(
    shifts: Iterable[Shift],
    employee_id: int,
    day: int,
    start_time: str,
    end_time: str,
    exclude_shift_id: Optional[int] = None,
) -> bool:
    """Check whether the employee is free for a range on a day."""
    return not find_blocking_shifts(
        shifts, employee_id, day, start_time, end_time, exclude_shift_id
    )


def available_employees(
    shifts: Iterable[Shift],
    employees: Iterable[Employee],
    day: int,
    start_time: str,
    end_time: str,
) -> list[Employee]:
    """Filter a roster down to the employees free for a range."""
    shifts = list(shifts)
    return [
        e for e in employees
        if is_available(shifts, e.id, day, start_time, end_time)
    ]
