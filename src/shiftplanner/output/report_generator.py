"""Text report of a week's planning.

This module creates a plain-text report showing:
- The week overview (status, staff, hours, filling per day)
- Per-day shift lists and slot coverage histograms
- Double bookings and validation alerts
- Weekly hours per employee
"""

from pathlib import Path
from typing import Iterable, Optional, Union

from shiftplanner.domain.models import Employee, ScheduleRules, Shift
from shiftplanner.domain.timeutils import DAY_NAMES, round_hours
from shiftplanner.scheduling.conflicts import detect_week_conflicts
from shiftplanner.scheduling.coverage import CoverageAnalyzer
from shiftplanner.scheduling.hours import HoursMetrics
from shiftplanner.validation.validator import ScheduleValidator


class ReportGenerator:
    """Generates text reports for a week of shifts."""

    def __init__(self, rules: Optional[ScheduleRules] = None):
        self.rules = rules or ScheduleRules()
        self.analyzer = CoverageAnalyzer(self.rules)
        self.validator = ScheduleValidator(self.rules)

    def generate(
        self,
        shifts: Iterable[Shift],
        employees: Iterable[Employee],
        output_path: Union[str, Path],
    ) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self.generate_to_string(shifts, employees)
        Path(output_path).write_text(content, encoding="utf-8")
        return content

    def generate_to_string(
        self,
        shifts: Iterable[Shift],
        employees: Iterable[Employee],
    ) -> str:
        return self._generate_content(list(shifts), list(employees))

    def _generate_content(self, shifts: list[Shift], employees: list[Employee]) -> str:
        names = {e.id: e.name for e in employees}
        lines = []

        lines.append("=" * 80)
        lines.append("WEEKLY PLANNING REPORT")
        lines.append("=" * 80)
        lines.append("")
        lines.append(f"Employees: {len(employees)}")
        lines.append(f"Shifts: {len(shifts)}")
        lines.append("")

        # Week overview
        lines.append("-" * 80)
        lines.append("WEEK OVERVIEW")
        lines.append("-" * 80)
        lines.append(f"{'Day':<10} {'Status':<11} {'Staff':>5} {'Hours':>7} {'Filled':>7}")
        for summary in self.analyzer.week_summary(shifts):
            lines.append(
                f"{DAY_NAMES[summary.day_index]:<10} {summary.status.value:<11} "
                f"{summary.employee_count:>5} {round_hours(summary.total_hours):>7} "
                f"{summary.filling_percentage:>6}%"
            )
        lines.append("")

        # Per-day detail
        for day in range(7):
            day_shifts = sorted(
                (s for s in shifts if s.day == day), key=lambda s: s.start_time
            )
            lines.append("-" * 80)
            lines.append(f"{DAY_NAMES[day].upper()}")
            lines.append("-" * 80)

            if not day_shifts:
                lines.append("  No shifts")
            for shift in day_shifts:
                staff = ", ".join(names.get(e, f"#{e}") for e in shift.employee_ids)
                lines.append(
                    f"  #{shift.id:<4} {shift.start_time}-{shift.end_time} "
                    f"[{shift.status.value}] {staff}"
                )
            lines.append("")

            coverage = self.analyzer.analyze_day(shifts, day)
            for slot in coverage.slot_coverage:
                bar = "#" * slot.count
                marker = ""
                if slot.count == 0:
                    marker = "  <- EMPTY"
                elif slot.time in coverage.excessive_slots:
                    marker = "  <- OVER"
                elif slot.time in coverage.understaffed_slots:
                    marker = "  <- LOW"
                lines.append(f"  {slot.time} |{bar:<6}| {slot.count}{marker}")
            lines.append("")

        # Conflicts
        lines.append("-" * 80)
        lines.append("CONFLICTS")
        lines.append("-" * 80)
        conflicts = detect_week_conflicts(shifts, employees)
        if not conflicts:
            lines.append("  None")
        for record in conflicts:
            lines.append(
                f"  {DAY_NAMES[record.day]}: {names.get(record.employee_id)} "
                f"on shifts {record.shift_ids}"
            )
        lines.append("")

        # Alerts
        lines.append("-" * 80)
        lines.append("ALERTS")
        lines.append("-" * 80)
        result = self.validator.validate_week(shifts, employees)
        for error in result.errors:
            lines.append(f"  ERROR   {error}")
        for warning in result.warnings:
            lines.append(f"  WARNING {warning}")
        if result.is_valid:
            lines.append("  Planning is valid")
        lines.append("")

        # Hours
        metrics = HoursMetrics.calculate(shifts, employees)
        lines.append("-" * 80)
        lines.append("WEEKLY HOURS")
        lines.append("-" * 80)
        for employee in employees:
            hours = metrics.hours_per_employee.get(employee.id, 0.0)
            flag = ""
            if hours > self.rules.max_weekly_hours_per_employee:
                flag = "  <- OVER MAX"
            lines.append(
                f"  {employee.name:<20} {round_hours(hours):>6}h "
                f"/ {employee.weekly_hours:g}h contract"
                f"  ({metrics.days_per_employee.get(employee.id, 0)} days){flag}"
            )
        lines.append("")
        lines.append(
            f"  Average {round_hours(metrics.avg_hours)}h, "
            f"std dev {round_hours(metrics.hours_std_dev)}h, "
            f"balance score {metrics.balance_score:.0f}/100"
        )
        lines.append("")
        lines.append("=" * 80)

        return "\n".join(lines)
