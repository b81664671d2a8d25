"""Validation module for shifts and plannings.

This module provides a single place for the rules a planning is checked
against: structural checks on individual shifts, and the day and week
alert sweeps the caller shows after every change. Problems are reported
as structured errors and warnings instead of raising.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

from shiftplanner.domain.models import Employee, ScheduleRules, Shift
from shiftplanner.domain.policies import DefaultShiftPolicy, ShiftPolicy
from shiftplanner.domain.timeutils import (
    InvalidTimeError,
    day_name,
    round_hours,
    to_minutes,
)
from shiftplanner.scheduling.availability import find_blocking_shifts
from shiftplanner.scheduling.conflicts import detect_conflicts
from shiftplanner.scheduling.coverage import CoverageAnalyzer
from shiftplanner.scheduling.hours import (
    day_total_hours,
    hours_by_employee,
    unique_employees_for_day,
)


class ValidationErrorType(Enum):
    """Types of validation errors and warnings."""

    # Shift structure
    INVALID_TIME = "invalid_time"
    INVALID_DAY = "invalid_day"
    ZERO_DURATION = "zero_duration"
    SHIFT_TOO_LONG = "shift_too_long"
    NO_EMPLOYEES = "no_employees"
    UNKNOWN_EMPLOYEE = "unknown_employee"
    DUPLICATE_SHIFT_ID = "duplicate_shift_id"
    OUTSIDE_OPERATING_HOURS = "outside_operating_hours"
    # Day and week alerts
    SCHEDULE_CONFLICT = "schedule_conflict"
    EMPTY_SLOT = "empty_slot"
    EMPTY_SHIFT = "empty_shift"
    EVENING_UNDERSTAFFED = "evening_understaffed"
    EXCESSIVE_STAFFING = "excessive_staffing"
    WEEKLY_HOURS_EXCEEDED = "weekly_hours_exceeded"
    DAILY_HOURS_BELOW_MIN = "daily_hours_below_min"
    TOO_MANY_EMPLOYEES = "too_many_employees"


@dataclass
class ValidationError:
    """A single validation error or warning."""

    error_type: ValidationErrorType
    message: str
    employee_id: Optional[int] = None
    shift_id: Optional[int] = None
    day: Optional[int] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.day is not None and 0 <= self.day <= 6:
            parts.append(f"{day_name(self.day)}:")
        if self.employee_id is not None:
            parts.append(f"Employee {self.employee_id}:")
        parts.append(self.message)
        if self.shift_id is not None:
            parts.append(f"(shift {self.shift_id})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of a validation pass."""

    is_valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: ValidationError) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def merge(self, other: "ValidationResult") -> None:
        for error in other.errors:
            self.add_error(error)
        self.warnings.extend(other.warnings)

    def has(self, error_type: ValidationErrorType) -> bool:
        return any(e.error_type == error_type for e in self.errors + self.warnings)


def _has_valid_times(shift: Shift) -> bool:
    try:
        to_minutes(shift.start_time)
        to_minutes(shift.end_time)
    except InvalidTimeError:
        return False
    return True


class ScheduleValidator:
    """Validates shifts and plannings against the scheduling rules.

    Example:
        >>> validator = ScheduleValidator()
        >>> result = validator.validate_day(shifts, employees, day=4)
        >>> for error in result.errors:
        ...     print(error)
    """

    def __init__(
        self,
        rules: Optional[ScheduleRules] = None,
        shift_policy: Optional[ShiftPolicy] = None,
    ):
        self.rules = rules or ScheduleRules()
        self.shift_policy = shift_policy or DefaultShiftPolicy()
        self.coverage = CoverageAnalyzer(self.rules)

    def validate_shift(
        self,
        shift: Shift,
        employees: Optional[Iterable[Employee]] = None,
    ) -> ValidationResult:
        """Check a single shift's structure.

        Args:
            shift: Shift to check.
            employees: Roster; when given, unknown employee ids are errors.
        """
        result = ValidationResult()

        if not isinstance(shift.day, int) or not 0 <= shift.day <= 6:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.INVALID_DAY,
                    message=f"Day must be 0..6, got {shift.day!r}",
                    shift_id=shift.id,
                )
            )

        try:
            to_minutes(shift.start_time)
            to_minutes(shift.end_time)
        except InvalidTimeError as e:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.INVALID_TIME,
                    message=str(e),
                    shift_id=shift.id,
                )
            )
            return result

        minutes = shift.duration_minutes
        if minutes == 0:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.ZERO_DURATION,
                    message="Start and end times are identical",
                    shift_id=shift.id,
                    day=shift.day,
                )
            )
        elif not self.shift_policy.is_valid_duration(minutes):
            max_hours = self.shift_policy.max_shift_minutes() / 60
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SHIFT_TOO_LONG,
                    message=(
                        f"Shift lasts {round_hours(minutes / 60)}h, "
                        f"more than {max_hours:g}h"
                    ),
                    shift_id=shift.id,
                    day=shift.day,
                    details={"hours": minutes / 60},
                )
            )

        if not shift.employee_ids:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.NO_EMPLOYEES,
                    message="Shift has no employees",
                    shift_id=shift.id,
                    day=shift.day,
                )
            )

        if employees is not None:
            known = {e.id for e in employees}
            for employee_id in shift.employee_ids:
                if employee_id not in known:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.UNKNOWN_EMPLOYEE,
                            message=f"Unknown employee id {employee_id}",
                            employee_id=employee_id,
                            shift_id=shift.id,
                        )
                    )

        if result.is_valid and not self.rules.is_within_operating_hours(
            shift.start_time, shift.day
        ):
            result.add_warning(
                ValidationError(
                    error_type=ValidationErrorType.OUTSIDE_OPERATING_HOURS,
                    message=f"Shift starts at {shift.start_time}, outside opening hours",
                    shift_id=shift.id,
                    day=shift.day,
                )
            )

        return result

    def validate_new_shift(
        self,
        shifts: Iterable[Shift],
        shift: Shift,
        employees: Iterable[Employee],
        days: Optional[Iterable[int]] = None,
    ) -> ValidationResult:
        """Check a shift about to be committed against the current planning.

        Args:
            shifts: Current shifts; a shift with the same id is ignored.
            shift: Candidate shift.
            employees: Roster.
            days: Days the shift will be created on (defaults to its own day).
        """
        shifts = [s for s in shifts if _has_valid_times(s)]
        employees = list(employees)
        days = list(days) if days is not None else [shift.day]

        result = self.validate_shift(shift, employees)
        if not result.is_valid:
            return result

        for employee_id in shift.employee_ids:
            for day in days:
                blocking = find_blocking_shifts(
                    shifts, employee_id, day, shift.start_time, shift.end_time,
                    exclude_shift_id=shift.id,
                )
                if blocking:
                    result.add_warning(
                        ValidationError(
                            error_type=ValidationErrorType.SCHEDULE_CONFLICT,
                            message="Already working at this time",
                            employee_id=employee_id,
                            shift_id=shift.id,
                            day=day,
                            details={"blocking_shift_ids": [s.id for s in blocking]},
                        )
                    )

        others = [s for s in shifts if s.id != shift.id]
        totals = hours_by_employee(others)
        added = shift.duration_hours * len(days)
        for employee_id in shift.employee_ids:
            total = totals.get(employee_id, 0.0) + added
            if total > self.rules.max_weekly_hours_per_employee:
                result.add_warning(
                    ValidationError(
                        error_type=ValidationErrorType.WEEKLY_HOURS_EXCEEDED,
                        message=(
                            f"Would work {round_hours(total)}h this week, above "
                            f"{self.rules.max_weekly_hours_per_employee:g}h"
                        ),
                        employee_id=employee_id,
                        shift_id=shift.id,
                        details={"hours": total},
                    )
                )

        return result

    def validate_day(
        self,
        shifts: Iterable[Shift],
        employees: Iterable[Employee],
        day: int,
    ) -> ValidationResult:
        """Sweep a day for the alerts shown next to the planning.

        Errors: double bookings, empty slots, shifts without employees.
        Warnings: thin evening staff, over-staffed slots, employees over
        the weekly cap, too few staffed hours, too many distinct employees.
        Shifts with malformed times are left out of the sweep; validate_shift
        reports them.
        """
        rules = self.rules
        shifts = [s for s in shifts if _has_valid_times(s)]
        employees = list(employees)
        result = ValidationResult()

        for record in detect_conflicts(shifts, employees, day):
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.SCHEDULE_CONFLICT,
                    message=f"Overlapping shifts {record.shift_ids}",
                    employee_id=record.employee_id,
                    day=day,
                    details={"shift_ids": record.shift_ids},
                )
            )

        coverage = self.coverage.analyze_day(shifts, day)
        if coverage.empty_slots:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.EMPTY_SLOT,
                    message=(
                        "Incomplete day, nobody scheduled at "
                        + ", ".join(coverage.empty_slots)
                    ),
                    day=day,
                    details={"slots": coverage.empty_slots},
                )
            )

        for shift in shifts:
            if shift.day == day and shift.is_empty:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.EMPTY_SHIFT,
                        message="Shift has no employees",
                        shift_id=shift.id,
                        day=day,
                    )
                )

        if coverage.evening_employee_count < rules.min_employees_after_18h:
            result.add_warning(
                ValidationError(
                    error_type=ValidationErrorType.EVENING_UNDERSTAFFED,
                    message=(
                        f"Only {coverage.evening_employee_count} employees after "
                        f"{rules.evening_start}, need {rules.min_employees_after_18h}"
                    ),
                    day=day,
                )
            )

        if coverage.excessive_slots:
            result.add_warning(
                ValidationError(
                    error_type=ValidationErrorType.EXCESSIVE_STAFFING,
                    message=(
                        f"More than {rules.max_employees_per_time_slot} employees at "
                        + ", ".join(coverage.excessive_slots)
                    ),
                    day=day,
                    details={"slots": coverage.excessive_slots},
                )
            )

        totals = hours_by_employee(shifts)
        working_today = unique_employees_for_day(shifts, day)
        for employee in employees:
            hours = totals.get(employee.id, 0.0)
            if employee.id in working_today and hours > rules.max_weekly_hours_per_employee:
                result.add_warning(
                    ValidationError(
                        error_type=ValidationErrorType.WEEKLY_HOURS_EXCEEDED,
                        message=(
                            f"{employee.name} works {round_hours(hours)}h this week, "
                            f"above {rules.max_weekly_hours_per_employee:g}h"
                        ),
                        employee_id=employee.id,
                        day=day,
                        details={"hours": hours},
                    )
                )

        total_hours = day_total_hours(shifts, day)
        if total_hours < rules.min_hours_per_day:
            result.add_warning(
                ValidationError(
                    error_type=ValidationErrorType.DAILY_HOURS_BELOW_MIN,
                    message=(
                        f"{round_hours(total_hours)}h staffed, "
                        f"minimum is {rules.min_hours_per_day:g}h"
                    ),
                    day=day,
                    details={"hours": total_hours},
                )
            )

        if len(working_today) > rules.max_employees_per_day:
            result.add_warning(
                ValidationError(
                    error_type=ValidationErrorType.TOO_MANY_EMPLOYEES,
                    message=(
                        f"{len(working_today)} employees scheduled, "
                        f"maximum is {rules.max_employees_per_day}"
                    ),
                    day=day,
                )
            )

        return result

    def validate_week(
        self,
        shifts: Iterable[Shift],
        employees: Iterable[Employee],
    ) -> ValidationResult:
        """Validate every shift and sweep every day of the week."""
        shifts = list(shifts)
        employees = list(employees)
        result = ValidationResult()

        seen: set[int] = set()
        for shift in shifts:
            if shift.id in seen:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_SHIFT_ID,
                        message=f"Shift id {shift.id} is used more than once",
                        shift_id=shift.id,
                        day=shift.day,
                    )
                )
            seen.add(shift.id)

            structural = self.validate_shift(shift, employees)
            for error in structural.errors:
                # empty shifts are reported by the day sweep
                if error.error_type != ValidationErrorType.NO_EMPLOYEES:
                    result.add_error(error)
            result.warnings.extend(structural.warnings)

        for day in range(7):
            result.merge(self.validate_day(shifts, employees, day))

        return result
