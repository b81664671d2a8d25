"""Tests for availability checks and conflict detection."""

import pytest

from shiftplanner.domain.models import Employee, Shift
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


def make_shift(shift_id, employee_ids, day, start, end):
    return Shift(id=shift_id, employee_ids=employee_ids, day=day,
                 start_time=start, end_time=end)


@pytest.fixture
def employees():
    return [
        Employee(id=1, name="Alice"),
        Employee(id=2, name="Bob"),
        Employee(id=3, name="Carol"),
    ]


class TestAvailability:
    """Tests for is_available."""

    @pytest.fixture
    def shifts(self):
        return [
            make_shift(1, [1], 0, "11:00", "15:00"),
            make_shift(2, [2], 0, "22:00", "02:00"),
            make_shift(3, [1], 1, "17:30", "22:30"),
        ]

    def test_free_employee(self, shifts):
        """An employee with no shift that day is available."""
        assert is_available(shifts, 3, 0, "11:00", "15:00")

    def test_overlapping_daytime(self, shifts):
        """A daytime overlap blocks the employee."""
        assert not is_available(shifts, 1, 0, "14:00", "18:00")

    def test_adjacent_ranges_do_not_block(self, shifts):
        """Back-to-back ranges are allowed."""
        assert is_available(shifts, 1, 0, "15:00", "18:00")

    def test_other_day_ignored(self, shifts):
        """Shifts on another day do not block."""
        assert is_available(shifts, 1, 0, "17:30", "22:30")

    def test_evening_against_night_shift(self, shifts):
        """20:00-23:00 reaches into an existing 22:00-02:00 shift."""
        assert not is_available(shifts, 2, 0, "20:00", "23:00")

    def test_morning_after_night_shift(self, shifts):
        """01:00-05:00 overlaps the early side of 22:00-02:00."""
        assert not is_available(shifts, 2, 0, "01:00", "05:00")

    def test_daytime_next_to_night_shift(self, shifts):
        """A lunch range does not touch a night shift."""
        assert is_available(shifts, 2, 0, "11:00", "15:00")

    def test_two_night_ranges(self, shifts):
        """Two ranges crossing midnight always collide."""
        assert not is_available(shifts, 2, 0, "23:30", "00:30")

    def test_midnight_wrap_symmetry(self):
        """Swapping the new and existing range gives the same answer."""
        night = [make_shift(1, [1], 0, "22:00", "02:00")]
        evening = [make_shift(2, [1], 0, "20:00", "23:00")]
        assert not is_available(night, 1, 0, "20:00", "23:00")
        assert not is_available(evening, 1, 0, "22:00", "02:00")

    def test_exclude_shift_being_edited(self, shifts):
        """The shift being edited does not block its own new times."""
        assert is_available(shifts, 1, 0, "12:00", "16:00", exclude_shift_id=1)

    def test_find_blocking_shifts(self, shifts):
        """The overlapping shifts themselves are returned."""
        blocking = find_blocking_shifts(shifts, 2, 0, "21:00", "23:00")
        assert [s.id for s in blocking] == [2]

    def test_available_employees(self, shifts, employees):
        """Only free employees are kept, in roster order."""
        free = available_employees(shifts, employees, 0, "12:00", "14:00")
        assert [e.id for e in free] == [2, 3]


class TestConflicts:
    """Tests for conflict detection."""

    def test_no_conflicts(self, employees):
        """Disjoint shifts produce no records."""
        shifts = [
            make_shift(1, [1], 0, "11:00", "15:00"),
            make_shift(2, [1], 0, "17:30", "22:30"),
        ]
        assert detect_conflicts(shifts, employees, 0) == []

    def test_overlapping_pair(self, employees):
        """Two overlapping shifts of one employee form one record."""
        shifts = [
            make_shift(1, [1, 2], 0, "11:00", "15:00"),
            make_shift(2, [1], 0, "14:30", "18:30"),
        ]
        records = detect_conflicts(shifts, employees, 0)
        assert len(records) == 1
        assert records[0].employee_id == 1
        assert records[0].day == 0
        assert sorted(records[0].shift_ids) == [1, 2]

    def test_night_conflicts(self, employees):
        """Overlaps across midnight are detected."""
        shifts = [
            make_shift(1, [3], 4, "22:00", "03:00"),
            make_shift(2, [3], 4, "01:00", "07:00"),
        ]
        records = detect_conflicts(shifts, employees, 4)
        assert [r.employee_id for r in records] == [3]

    def test_shifts_listed_once(self, employees):
        """A shift overlapping several others appears once per record."""
        shifts = [
            make_shift(1, [1], 0, "11:00", "18:00"),
            make_shift(2, [1], 0, "12:00", "13:00"),
            make_shift(3, [1], 0, "15:00", "16:00"),
        ]
        records = detect_conflicts(shifts, employees, 0)
        assert len(records) == 1
        assert sorted(records[0].shift_ids) == [1, 2, 3]

    def test_no_self_conflict(self, employees):
        """A shift is never in conflict with itself."""
        shift = make_shift(1, [1, 1, 2], 0, "11:00", "15:00")
        assert detect_conflicts([shift], employees, 0) == []
        assert detect_conflicts([shift, shift], employees, 0) == []

    def test_conflict_symmetry(self, employees):
        """Input order does not change which shifts are in conflict."""
        a = make_shift(1, [1], 0, "11:00", "15:00")
        b = make_shift(2, [1], 0, "14:00", "16:00")
        forward = detect_conflicts([a, b], employees, 0)
        backward = detect_conflicts([b, a], employees, 0)
        assert set(forward[0].shift_ids) == set(backward[0].shift_ids) == {1, 2}

    def test_idempotent(self, employees):
        """Running detection twice gives identical results."""
        shifts = [
            make_shift(1, [1], 0, "11:00", "15:00"),
            make_shift(2, [1], 0, "14:00", "16:00"),
        ]
        assert detect_conflicts(shifts, employees, 0) == detect_conflicts(shifts, employees, 0)

    def test_unknown_employees_ignored(self, employees):
        """Employee ids missing from the roster are not reported."""
        shifts = [
            make_shift(1, [99], 0, "11:00", "15:00"),
            make_shift(2, [99], 0, "14:00", "16:00"),
        ]
        assert detect_conflicts(shifts, employees, 0) == []

    def test_week_conflicts(self, employees):
        """Weekly detection concatenates days in order."""
        shifts = [
            make_shift(1, [2], 5, "11:00", "15:00"),
            make_shift(2, [2], 5, "12:00", "14:00"),
            make_shift(3, [1], 1, "17:00", "20:00"),
            make_shift(4, [1], 1, "19:00", "23:00"),
        ]
        records = detect_week_conflicts(shifts, employees)
        assert [(r.day, r.employee_id) for r in records] == [(1, 1), (5, 2)]
        assert conflicting_shift_ids(shifts, employees) == {1, 2, 3, 4}

    def test_is_shift_in_conflict(self, employees):
        """Only shifts involved in an overlap are flagged."""
        shifts = [
            make_shift(1, [1], 0, "11:00", "15:00"),
            make_shift(2, [1], 0, "14:00", "16:00"),
            make_shift(3, [2], 0, "11:00", "15:00"),
        ]
        assert is_shift_in_conflict(shifts[0], shifts, employees)
        assert not is_shift_in_conflict(shifts[2], shifts, employees)
