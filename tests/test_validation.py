"""Tests for shift and planning validation."""

import pytest

from shiftplanner.domain.models import Employee, ScheduleRules, Shift
from shiftplanner.domain.policies import DefaultShiftPolicy
from shiftplanner.validation.validator import (
    ScheduleValidator,
    ValidationErrorType,
)


def make_shift(shift_id, employee_ids, day, start, end):
    return Shift(id=shift_id, employee_ids=employee_ids, day=day,
                 start_time=start, end_time=end)


@pytest.fixture
def employees():
    return [Employee(id=i, name=f"Employee {i}") for i in range(1, 8)]


@pytest.fixture
def validator():
    return ScheduleValidator(ScheduleRules())


@pytest.fixture
def full_monday():
    return [
        make_shift(1, [1, 2, 3], 0, "11:00", "17:00"),
        make_shift(2, [4, 5, 6], 0, "17:00", "02:00"),
    ]


class TestValidateShift:
    """Tests for single-shift validation."""

    def test_valid_shift(self, validator, employees):
        """A normal shift passes without warnings."""
        result = validator.validate_shift(make_shift(1, [1], 0, "11:00", "15:00"), employees)
        assert result.is_valid
        assert result.warnings == []

    def test_zero_duration(self, validator):
        """Equal start and end is rejected."""
        result = validator.validate_shift(make_shift(1, [1], 0, "12:00", "12:00"))
        assert not result.is_valid
        assert result.errors[0].error_type == ValidationErrorType.ZERO_DURATION

    def test_too_long(self, validator):
        """Shifts over 12 hours are rejected, including across midnight."""
        result = validator.validate_shift(make_shift(1, [1], 4, "12:00", "02:00"))
        assert result.has(ValidationErrorType.SHIFT_TOO_LONG)

    def test_twelve_hours_allowed(self, validator):
        """Exactly 12 hours is allowed."""
        result = validator.validate_shift(make_shift(1, [1], 4, "19:00", "07:00"))
        assert result.is_valid

    def test_custom_shift_policy(self):
        """A stricter policy lowers the maximum."""
        validator = ScheduleValidator(shift_policy=DefaultShiftPolicy(max_hours=6))
        result = validator.validate_shift(make_shift(1, [1], 0, "11:00", "18:00"))
        assert result.has(ValidationErrorType.SHIFT_TOO_LONG)

    def test_no_employees(self, validator):
        """A shift must have at least one employee."""
        result = validator.validate_shift(make_shift(1, [], 0, "11:00", "15:00"))
        assert result.has(ValidationErrorType.NO_EMPLOYEES)

    def test_unknown_employee(self, validator, employees):
        """Employee ids must exist in the roster when one is given."""
        result = validator.validate_shift(make_shift(1, [1, 99], 0, "11:00", "15:00"), employees)
        assert [e.employee_id for e in result.errors] == [99]

    def test_invalid_day(self, validator):
        """Days outside 0..6 are rejected."""
        result = validator.validate_shift(make_shift(1, [1], 7, "11:00", "15:00"))
        assert result.has(ValidationErrorType.INVALID_DAY)

    def test_malformed_time(self, validator):
        """Malformed times are reported, not raised."""
        result = validator.validate_shift(make_shift(1, [1], 0, "25:00", "15:00"))
        assert result.has(ValidationErrorType.INVALID_TIME)

    def test_outside_operating_hours_warns(self, validator):
        """A start outside opening hours is only a warning."""
        result = validator.validate_shift(make_shift(1, [1], 0, "08:00", "12:00"))
        assert result.is_valid
        assert result.has(ValidationErrorType.OUTSIDE_OPERATING_HOURS)


class TestValidateNewShift:
    """Tests for commit-time checks."""

    def test_double_booking_warns(self, validator, employees, full_monday):
        """Adding an overlapping shift warns about the employee."""
        shift = make_shift(3, [1, 7], 0, "14:00", "16:00")
        result = validator.validate_new_shift(full_monday, shift, employees)
        conflicts = [w for w in result.warnings
                     if w.error_type == ValidationErrorType.SCHEDULE_CONFLICT]
        assert [w.employee_id for w in conflicts] == [1]
        assert conflicts[0].details["blocking_shift_ids"] == [1]

    def test_editing_does_not_conflict_with_itself(self, validator, employees, full_monday):
        """A shift being edited is not compared with its old version."""
        edited = make_shift(1, [1, 2, 3], 0, "11:00", "16:00")
        result = validator.validate_new_shift(full_monday, edited, employees)
        assert not result.has(ValidationErrorType.SCHEDULE_CONFLICT)

    def test_weekly_hours_across_days(self, validator, employees):
        """Creating a shift on several days warns when the week goes over the cap."""
        shift = make_shift(1, [1], 0, "11:00", "20:00")
        result = validator.validate_new_shift([], shift, employees, days=range(5))
        assert result.is_valid
        assert result.has(ValidationErrorType.WEEKLY_HOURS_EXCEEDED)

    def test_malformed_existing_shift_ignored(self, validator, employees):
        """Existing shifts with unreadable times do not break the check."""
        existing = [make_shift(1, [1], 0, "xx:00", "15:00")]
        shift = make_shift(2, [1], 0, "11:00", "15:00")
        result = validator.validate_new_shift(existing, shift, employees)
        assert result.is_valid
        assert not result.has(ValidationErrorType.SCHEDULE_CONFLICT)

    def test_structural_errors_stop_early(self, validator, employees):
        """Invalid shifts report errors without planning warnings."""
        shift = make_shift(1, [1], 0, "11:00", "11:00")
        result = validator.validate_new_shift([], shift, employees)
        assert not result.is_valid
        assert result.warnings == []


class TestValidateDay:
    """Tests for the day alert sweep."""

    def test_clean_day(self, validator, employees):
        """Five people covering every slot raise no alert."""
        shifts = [
            make_shift(1, [1, 2, 3], 0, "11:00", "17:00"),
            make_shift(2, [3, 4, 5], 0, "17:00", "02:00"),
        ]
        result = validator.validate_day(shifts, employees, 0)
        assert result.is_valid
        assert result.warnings == []

    def test_conflict_is_error(self, validator, employees, full_monday):
        """Double bookings are errors."""
        shifts = full_monday + [make_shift(3, [1], 0, "12:00", "14:00")]
        result = validator.validate_day(shifts, employees, 0)
        assert result.has(ValidationErrorType.SCHEDULE_CONFLICT)
        assert not result.is_valid

    def test_empty_slot_is_error(self, validator, employees):
        """An uncovered slot makes the day incomplete."""
        shifts = [make_shift(1, [1, 2], 0, "11:00", "17:00")]
        result = validator.validate_day(shifts, employees, 0)
        assert result.has(ValidationErrorType.EMPTY_SLOT)

    def test_empty_shift_is_error(self, validator, employees, full_monday):
        """A shift left without employees is an error."""
        shifts = full_monday + [make_shift(3, [], 0, "12:00", "14:00")]
        result = validator.validate_day(shifts, employees, 0)
        assert result.has(ValidationErrorType.EMPTY_SHIFT)

    def test_evening_staff_warning(self, validator, employees):
        """Fewer than two people after 18:00 is a warning."""
        shifts = [
            make_shift(1, [1, 2], 0, "11:00", "18:00"),
            make_shift(2, [3], 0, "18:00", "02:00"),
        ]
        result = validator.validate_day(shifts, employees, 0)
        assert result.has(ValidationErrorType.EVENING_UNDERSTAFFED)

    def test_excessive_staffing_warning(self, validator, employees, full_monday):
        """More than three people in a slot is a warning."""
        shifts = full_monday + [make_shift(3, [7], 0, "12:00", "14:00")]
        result = validator.validate_day(shifts, employees, 0)
        assert result.has(ValidationErrorType.EXCESSIVE_STAFFING)

    def test_low_day_hours_warning(self, validator, employees):
        """Fewer staffed hours than the daily minimum is a warning."""
        shifts = [make_shift(1, [1], 0, "11:00", "15:00")]
        result = validator.validate_day(shifts, employees, 0)
        assert result.has(ValidationErrorType.DAILY_HOURS_BELOW_MIN)

    def test_too_many_employees_warning(self, validator, employees, full_monday):
        """More than five distinct employees in a day is a warning."""
        result = validator.validate_day(full_monday, employees, 0)
        assert result.has(ValidationErrorType.TOO_MANY_EMPLOYEES)

    def test_weekly_hours_warning(self, validator, employees):
        """Employees working today above the weekly cap are flagged."""
        shifts = [make_shift(d + 1, [1], d, "11:00", "20:00") for d in range(5)]
        result = validator.validate_day(shifts, employees, 0)
        flagged = [w for w in result.warnings
                   if w.error_type == ValidationErrorType.WEEKLY_HOURS_EXCEEDED]
        assert [w.employee_id for w in flagged] == [1]

        sunday = validator.validate_day(shifts, employees, 6)
        assert not sunday.has(ValidationErrorType.WEEKLY_HOURS_EXCEEDED)


class TestValidateWeek:
    """Tests for the week sweep."""

    def test_duplicate_ids(self, validator, employees):
        """Shift ids must be unique across the week."""
        shifts = [
            make_shift(1, [1], 0, "11:00", "15:00"),
            make_shift(1, [2], 1, "11:00", "15:00"),
        ]
        result = validator.validate_week(shifts, employees)
        assert result.has(ValidationErrorType.DUPLICATE_SHIFT_ID)

    def test_every_day_swept(self, validator, employees, full_monday):
        """Empty days show up as incomplete."""
        result = validator.validate_week(full_monday, employees)
        empty_days = {e.day for e in result.errors
                      if e.error_type == ValidationErrorType.EMPTY_SLOT}
        assert empty_days == {1, 2, 3, 4, 5, 6}

    def test_error_string(self, validator, employees):
        """Errors render with their type, day and shift."""
        result = validator.validate_week(
            [make_shift(4, [], 0, "11:00", "15:00")], employees
        )
        empty = next(e for e in result.errors
                     if e.error_type == ValidationErrorType.EMPTY_SHIFT)
        assert str(empty) == "[empty_shift] Monday: Shift has no employees (shift 4)"

    def test_malformed_time_reported_not_raised(self, validator, employees):
        """A shift with an unparsable time is reported and the sweep goes on."""
        shifts = [
            make_shift(1, [1], 0, "25:00", "12:00"),
            make_shift(2, [2, 3], 0, "11:00", "15:00"),
        ]
        result = validator.validate_week(shifts, employees)
        invalid = [e for e in result.errors
                   if e.error_type == ValidationErrorType.INVALID_TIME]
        assert [e.shift_id for e in invalid] == [1]
        assert result.has(ValidationErrorType.EMPTY_SLOT)

    def test_malformed_time_skipped_by_day_sweep(self, validator, employees):
        """The day sweep ignores shifts whose times cannot be read."""
        shifts = [make_shift(1, [1], 0, "11:00", "9:75")]
        result = validator.validate_day(shifts, employees, 0)
        assert result.has(ValidationErrorType.EMPTY_SLOT)
        assert not result.has(ValidationErrorType.INVALID_TIME)
