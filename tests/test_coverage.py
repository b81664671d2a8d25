"""Tests for coverage analysis and hours aggregation."""

import pytest

from shiftplanner.domain.models import (
    CoverageCheck,
    DayStatus,
    Employee,
    ScheduleRules,
    Shift,
)
from shiftplanner.scheduling.coverage import (
    CoverageAnalyzer,
    analyze_day,
    generate_week_summary,
)
from shiftplanner.scheduling.hours import (
    HoursMetrics,
    daily_hours,
    day_total_hours,
    hours_by_employee,
    overworked_employees,
    weekly_hours,
)


def make_shift(shift_id, employee_ids, day, start, end):
    return Shift(id=shift_id, employee_ids=employee_ids, day=day,
                 start_time=start, end_time=end)


@pytest.fixture
def rules():
    return ScheduleRules()


@pytest.fixture
def full_monday():
    """Three people on every slot of a standard day."""
    return [
        make_shift(1, [1, 2, 3], 0, "11:00", "17:00"),
        make_shift(2, [4, 5, 6], 0, "17:00", "02:00"),
    ]


class TestSlotCoverage:
    """Tests for per-slot counts."""

    def test_counts_distinct_employees(self, rules):
        """An employee on two shifts covering a slot counts once."""
        shifts = [
            make_shift(1, [1, 2], 0, "11:00", "15:00"),
            make_shift(2, [1], 0, "12:00", "13:00"),
        ]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.count_at("12:00") == 2

    def test_shift_end_not_covered(self, rules):
        """The slot starting at a shift's end is not covered by it."""
        shifts = [make_shift(1, [1], 0, "11:00", "15:00")]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.count_at("14:00") == 1
        assert coverage.count_at("15:00") == 0

    def test_night_slots_belong_to_start_day(self, rules):
        """A shift crossing midnight covers the early slots of its own day."""
        shifts = [make_shift(1, [1], 0, "22:00", "02:00")]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.count_at("01:00") == 1
        assert analyze_day(shifts, 1, rules).count_at("01:00") == 0

    def test_empty_and_excessive_slots(self, rules):
        """Empty and over-staffed slots are listed."""
        shifts = [make_shift(1, [1, 2, 3, 4], 0, "11:00", "13:00")]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.excessive_slots == ["11:00", "12:00"]
        assert "13:00" in coverage.empty_slots
        assert "11:00" not in coverage.empty_slots


class TestDayStatus:
    """Tests for the day status ladder."""

    def test_good_day(self, rules, full_monday):
        """Three people everywhere is a good day."""
        coverage = analyze_day(full_monday, 0, rules)
        assert coverage.status is DayStatus.GOOD
        assert coverage.empty_slots == []
        assert coverage.evening_coverage is CoverageCheck.VALID
        assert coverage.rush_hour_coverage is CoverageCheck.VALID

    def test_incomplete_day(self, rules):
        """Any empty slot makes the day incomplete."""
        shifts = [make_shift(1, [1, 2, 3], 0, "11:00", "17:00")]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.status is DayStatus.INCOMPLETE
        assert coverage.evening_coverage is CoverageCheck.INCOMPLETE

    def test_no_shifts_is_incomplete(self, rules):
        """A day without shifts is incomplete and 0% filled."""
        coverage = analyze_day([], 2, rules)
        assert coverage.status is DayStatus.INCOMPLETE
        assert coverage.filling_percentage == 0

    def test_critical_rush_hours(self, rules):
        """Two people through every rush hour is critical."""
        shifts = [
            make_shift(1, [1, 2], 0, "11:00", "17:00"),
            make_shift(2, [3, 4], 0, "17:00", "02:00"),
        ]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.rush_hour_understaffed_slots == ["12:00", "13:00", "19:00", "20:00"]
        assert coverage.status is DayStatus.CRITICAL

    def test_one_thin_rush_hour_is_tolerated(self, rules):
        """A single rush slot under the minimum stays below the tolerance."""
        shifts = [
            make_shift(1, [1, 2, 3], 0, "11:00", "17:00"),
            make_shift(2, [4, 5, 6], 0, "17:00", "19:00"),
            make_shift(3, [4, 5], 0, "19:00", "20:00"),
            make_shift(4, [4, 5, 6], 0, "20:00", "02:00"),
        ]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.rush_hour_understaffed_slots == ["19:00"]
        assert coverage.status is DayStatus.GOOD

    def test_thin_evening_is_warning(self, rules):
        """One person through the late evening is a warning."""
        shifts = [
            make_shift(1, [1, 2, 3], 0, "11:00", "17:00"),
            make_shift(2, [4, 5, 6], 0, "17:00", "22:00"),
            make_shift(3, [7], 0, "22:00", "02:00"),
        ]
        coverage = analyze_day(shifts, 0, rules)
        assert coverage.evening_understaffed_slots == ["22:00", "23:00", "00:00", "01:00"]
        assert coverage.evening_coverage is CoverageCheck.WARNING
        assert coverage.status is DayStatus.WARNING

    def test_evening_employee_count(self, rules, full_monday):
        """Distinct employees working evening slots are counted."""
        coverage = analyze_day(full_monday, 0, rules)
        assert coverage.evening_employee_count == 3


class TestFillingPercentage:
    """Tests for the filling percentage."""

    def test_standard_day(self, rules, full_monday):
        """45 staffed slots against a 90 target is 50%."""
        assert analyze_day(full_monday, 0, rules).filling_percentage == 50

    def test_extended_day_target_is_higher(self, rules):
        """The same staffing fills less of an extended day."""
        shifts = [
            make_shift(1, [1, 2, 3], 4, "11:00", "17:00"),
            make_shift(2, [4, 5, 6], 4, "17:00", "02:00"),
        ]
        # 45 staffed slots against 120
        assert analyze_day(shifts, 4, rules).filling_percentage == 38

    def test_capped_at_100(self, rules):
        """Heavy overstaffing never reports more than 100%."""
        shifts = [make_shift(1, list(range(1, 11)), 4, "11:00", "07:00")]
        assert analyze_day(shifts, 4, rules).filling_percentage == 100


class TestCoverageMonotonicity:
    """Adding staff never makes coverage worse."""

    def test_adding_employee(self, rules):
        """Empty slots never grow and filling never drops."""
        base = [
            make_shift(1, [1], 0, "11:00", "15:00"),
            make_shift(2, [2], 0, "18:00", "23:00"),
        ]
        more = [
            make_shift(1, [1, 3], 0, "11:00", "15:00"),
            make_shift(2, [2], 0, "18:00", "23:00"),
        ]
        before = analyze_day(base, 0, rules)
        after = analyze_day(more, 0, rules)
        assert set(after.empty_slots) <= set(before.empty_slots)
        assert after.filling_percentage >= before.filling_percentage


class TestWeekSummary:
    """Tests for the weekly overview."""

    def test_seven_days(self, rules, full_monday):
        """One summary per day, Monday first."""
        summaries = generate_week_summary(full_monday, rules)
        assert [s.day_index for s in summaries] == list(range(7))

    def test_monday_summary(self, rules, full_monday):
        """Staff, hours, filling and status are reported."""
        monday = generate_week_summary(full_monday, rules)[0]
        assert monday.employee_count == 6
        assert monday.total_hours == pytest.approx(6 * 3 + 9 * 3)
        assert monday.filling_percentage == 50
        assert monday.status is DayStatus.GOOD

    def test_empty_day(self, rules, full_monday):
        """Days without shifts are incomplete with zero totals."""
        tuesday = CoverageAnalyzer(rules).week_summary(full_monday)[1]
        assert tuesday.employee_count == 0
        assert tuesday.total_hours == 0
        assert tuesday.status is DayStatus.INCOMPLETE


class TestHours:
    """Tests for hours aggregation."""

    @pytest.fixture
    def shifts(self):
        return [
            make_shift(1, [1, 2], 0, "11:00", "15:00"),
            make_shift(2, [1], 1, "22:00", "03:00"),
            make_shift(3, [2, 3], 1, "11:00", "11:30"),
        ]

    def test_weekly_hours(self, shifts):
        """Weekly hours sum every shift containing the employee."""
        assert weekly_hours(shifts, 1) == pytest.approx(9.0)
        assert weekly_hours(shifts, 2) == pytest.approx(4.5)
        assert weekly_hours(shifts, 42) == 0

    def test_daily_hours(self, shifts):
        """Daily hours only count the given day."""
        assert daily_hours(shifts, 1, 1) == pytest.approx(5.0)

    def test_day_total_hours(self, shifts):
        """Day totals multiply each shift by its headcount."""
        assert day_total_hours(shifts, 0) == pytest.approx(8.0)
        assert day_total_hours(shifts, 1) == pytest.approx(6.0)

    def test_hour_conservation(self, shifts):
        """Per-employee hours add up to the shifts' staffed hours."""
        total = sum(weekly_hours(shifts, e) for e in (1, 2, 3))
        staffed = sum(s.duration_hours * len(s.employee_ids) for s in shifts)
        assert total == pytest.approx(staffed)
        assert sum(hours_by_employee(shifts).values()) == pytest.approx(staffed)

    def test_overworked_employees(self):
        """Employees above the weekly maximum are reported."""
        shifts = [
            make_shift(day + 1, [1], day, "11:00", "20:00") for day in range(5)
        ]
        employees = [Employee(id=1, name="Alice"), Employee(id=2, name="Bob")]
        result = overworked_employees(shifts, employees)
        assert [(e.id, h) for e, h in result] == [(1, 45.0)]

    def test_hours_metrics(self, shifts):
        """Metrics cover the whole roster, idle employees included."""
        employees = [Employee(id=i, name=str(i)) for i in (1, 2, 3, 4)]
        metrics = HoursMetrics.calculate(shifts, employees)
        assert metrics.hours_per_employee[4] == 0.0
        assert metrics.max_hours == pytest.approx(9.0)
        assert metrics.min_hours == 0.0
        assert metrics.days_per_employee[1] == 2
        assert 0.0 <= metrics.balance_score < 100.0

    def test_even_hours_score_perfectly(self):
        """Identical hours give a perfect balance score."""
        shifts = [make_shift(1, [1, 2], 0, "11:00", "15:00")]
        employees = [Employee(id=1, name="A"), Employee(id=2, name="B")]
        assert HoursMetrics.calculate(shifts, employees).balance_score == 100.0
