"""In-memory planning board.

The board plays the caller's role around the pure scheduling functions: it
owns the week's shift list, hands out shift ids, validates shifts before
committing them, and applies generator proposals. It does not persist
anything.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from shiftplanner.domain.models import (
    ConflictRecord,
    DaySummary,
    Employee,
    ScheduleRules,
    Shift,
    ShiftStatus,
)
from shiftplanner.scheduling.conflicts import conflicting_shift_ids, detect_week_conflicts
from shiftplanner.scheduling.coverage import generate_week_summary
from shiftplanner.scheduling.generator import GenerationResult
from shiftplanner.scheduling.scheduler import ScheduleGenerator
from shiftplanner.validation.validator import ScheduleValidator, ValidationResult

logger = logging.getLogger(__name__)


class EmptyAssignmentPolicy(Enum):
    """What to do when a shift is saved without any employee."""

    REJECT = "reject"  # Refuse the shift
    DEFAULT_EMPLOYEE = "default_employee"  # Assign the board's default employee


class ShiftRejectedError(ValueError):
    """Raised when a shift fails validation and cannot be committed."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(str(e) for e in result.errors)
        super().__init__(f"Shift rejected: {messages}")


class ShiftBoard:
    """Mutable week of shifts for one roster.

    Ids are monotonic: an id is never handed out twice, even after the
    shift holding it is deleted.
    """

    def __init__(
        self,
        employees: Iterable[Employee],
        rules: Optional[ScheduleRules] = None,
        shifts: Iterable[Shift] = (),
        empty_assignment: EmptyAssignmentPolicy = EmptyAssignmentPolicy.REJECT,
        default_employee_id: Optional[int] = None,
        generator: Optional[ScheduleGenerator] = None,
    ):
        self.employees = list(employees)
        self.rules = rules or ScheduleRules()
        self.shifts: list[Shift] = list(shifts)
        self.empty_assignment = EmptyAssignmentPolicy(empty_assignment)
        self.default_employee_id = default_employee_id
        self.generator = generator or ScheduleGenerator()
        self.validator = ScheduleValidator(self.rules)
        self._last_id = max((s.id for s in self.shifts), default=0)

        if (
            self.empty_assignment == EmptyAssignmentPolicy.DEFAULT_EMPLOYEE
            and default_employee_id is None
        ):
            raise ValueError("DEFAULT_EMPLOYEE policy needs a default_employee_id")

    @property
    def next_id(self) -> int:
        return self._last_id + 1

    def _take_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def _reserve(self, shifts: Iterable[Shift]) -> None:
        for shift in shifts:
            self._last_id = max(self._last_id, shift.id)

    def _resolve_employees(self, employee_ids: Iterable[int]) -> tuple[int, ...]:
        ids = tuple(dict.fromkeys(employee_ids))
        if not ids and self.empty_assignment == EmptyAssignmentPolicy.DEFAULT_EMPLOYEE:
            logger.debug("Empty selection, assigning employee %s", self.default_employee_id)
            return (self.default_employee_id,)
        return ids

    def get_shift(self, shift_id: int) -> Shift:
        for shift in self.shifts:
            if shift.id == shift_id:
                return shift
        raise KeyError(f"No shift with id {shift_id}")

    def shifts_for_day(self, day: int) -> list[Shift]:
        return [s for s in self.shifts if s.day == day]

    def check(self, shift: Shift, days: Optional[Iterable[int]] = None) -> ValidationResult:
        """Validate a shift against the board without committing it."""
        return self.validator.validate_new_shift(self.shifts, shift, self.employees, days)

    def add_shift(
        self,
        employee_ids: Iterable[int],
        day: int,
        start_time: str,
        end_time: str,
        status: ShiftStatus = ShiftStatus.CONFIRMED,
    ) -> Shift:
        """Create and commit a shift.

        Raises:
            ShiftRejectedError: If the shift has validation errors.
        """
        return self.add_shift_on_days(employee_ids, [day], start_time, end_time, status)[0]

    def add_shift_on_days(
        self,
        employee_ids: Iterable[int],
        days: Iterable[int],
        start_time: str,
        end_time: str,
        status: ShiftStatus = ShiftStatus.CONFIRMED,
    ) -> list[Shift]:
        """Create the same shift on several days, all or nothing."""
        days = list(dict.fromkeys(days))
        ids = self._resolve_employees(employee_ids)

        drafts = [
            Shift(
                id=self.next_id + offset,
                employee_ids=ids,
                day=day,
                start_time=start_time,
                end_time=end_time,
                status=status,
            )
            for offset, day in enumerate(days)
        ]
        if not drafts:
            return []

        # the first draft is checked against every day; the rest only structurally
        result = self.check(drafts[0], days)
        for draft in drafts[1:]:
            result.merge(self.validator.validate_shift(draft, self.employees))
        if not result.is_valid:
            raise ShiftRejectedError(result)
        for warning in result.warnings:
            logger.warning("%s", warning)

        for draft in drafts:
            draft.id = self._take_id()
            self.shifts.append(draft)
            logger.debug("Added shift %d on day %d", draft.id, draft.day)
        return drafts

    def update_shift(self, shift_id: int, **changes) -> Shift:
        """Edit a shift in place.

        Raises:
            KeyError: If the shift does not exist.
            ShiftRejectedError: If the edited shift has validation errors.
        """
        shift = self.get_shift(shift_id)
        allowed = {"employee_ids", "day", "start_time", "end_time", "status"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        if "employee_ids" in changes:
            changes["employee_ids"] = self._resolve_employees(changes["employee_ids"])

        draft = Shift(
            id=shift.id,
            employee_ids=changes.get("employee_ids", shift.employee_ids),
            day=changes.get("day", shift.day),
            start_time=changes.get("start_time", shift.start_time),
            end_time=changes.get("end_time", shift.end_time),
            status=changes.get("status", shift.status),
        )
        result = self.check(draft)
        if not result.is_valid:
            raise ShiftRejectedError(result)

        for name, value in changes.items():
            setattr(shift, name, value)
        return shift

    def delete_shift(self, shift_id: int) -> Shift:
        shift = self.get_shift(shift_id)
        self.shifts.remove(shift)
        logger.debug("Deleted shift %d", shift_id)
        return shift

    def remove_employee(self, shift_id: int, employee_id: int) -> Optional[Shift]:
        """Take an employee off a shift, deleting the shift once it is empty.

        Returns:
            The remaining shift, or None if it was deleted.
        """
        shift = self.get_shift(shift_id)
        shift.employee_ids = [e for e in shift.employee_ids if e != employee_id]
        if shift.is_empty:
            self.delete_shift(shift_id)
            return None
        return shift

    def duplicate_to_next_day(self, shift_id: int) -> Shift:
        """Copy a shift to the following day (Sunday wraps to Monday)."""
        shift = self.get_shift(shift_id)
        copy = Shift(
            id=self._take_id(),
            employee_ids=shift.employee_ids,
            day=(shift.day + 1) % 7,
            start_time=shift.start_time,
            end_time=shift.end_time,
            status=shift.status,
        )
        self.shifts.append(copy)
        return copy

    def propose_day(self, day: int) -> GenerationResult:
        """Run the generator for a day without changing the board."""
        return self.generator.generate_with_report(
            self.shifts, self.employees, day, self.rules, self.next_id
        )

    def replace_day(self, day: int, new_shifts: Iterable[Shift]) -> list[Shift]:
        """Drop the day's shifts and commit the given ones instead."""
        new_shifts = list(new_shifts)
        if any(s.day != day for s in new_shifts):
            raise ValueError(f"Replacement shifts must all be on day {day}")
        taken = {s.id for s in self.shifts if s.day != day}
        if any(s.id in taken for s in new_shifts):
            raise ValueError("Replacement shifts reuse ids of other days")

        self.shifts = [s for s in self.shifts if s.day != day] + new_shifts
        self._reserve(new_shifts)
        logger.debug("Replaced day %d with %d shifts", day, len(new_shifts))
        return new_shifts

    def regenerate_day(self, day: int) -> GenerationResult:
        """Generate a day and accept the proposal."""
        result = self.propose_day(day)
        self.replace_day(day, result.shifts)
        return result

    def conflicts(self) -> list[ConflictRecord]:
        return detect_week_conflicts(self.shifts, self.employees)

    def flag_conflicts(self) -> set[int]:
        """Mark conflicting shifts and clear stale conflict marks.

        Returns:
            Ids of the shifts now in conflict.
        """
        in_conflict = conflicting_shift_ids(self.shifts, self.employees)
        for shift in self.shifts:
            if shift.id in in_conflict:
                shift.status = ShiftStatus.CONFLICT
            elif shift.status == ShiftStatus.CONFLICT:
                shift.status = ShiftStatus.CONFIRMED
        return in_conflict

    def week_summary(self) -> list[DaySummary]:
        return generate_week_summary(self.shifts, self.rules)

    def validate(self) -> ValidationResult:
        return self.validator.validate_week(self.shifts, self.employees)
