"""PDF generation for planning output.

This module creates printable PDF plannings showing:
- One page per day with employee timelines over the opening hours
- Slot coverage under each day's timelines
- A week summary page with status, hours, and filling per day
"""

from io import BytesIO
from pathlib import Path
from typing import Iterable, Optional, Union

from shiftplanner.domain.models import (
    DayStatus,
    Employee,
    ScheduleRules,
    Shift,
    ShiftStatus,
)
from shiftplanner.domain.timeutils import (
    DAY_NAMES,
    MINUTES_PER_DAY,
    duration_minutes,
    from_minutes,
    round_hours,
    to_minutes,
)
from shiftplanner.scheduling.conflicts import conflicting_shift_ids
from shiftplanner.scheduling.coverage import CoverageAnalyzer

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    ShiftStatus.CONFIRMED: (0.4, 0.7, 0.4),  # Green
    ShiftStatus.PENDING: (1.0, 0.85, 0.4),  # Yellow
    ShiftStatus.CONFLICT: (0.9, 0.4, 0.4),  # Red
    ShiftStatus.CANCELLED: (0.75, 0.75, 0.75),  # Gray
    DayStatus.GOOD: (0.4, 0.7, 0.4),
    DayStatus.WARNING: (1.0, 0.75, 0.3),
    DayStatus.CRITICAL: (0.9, 0.4, 0.4),
    DayStatus.INCOMPLETE: (0.6, 0.2, 0.2),
    "off_shift": (0.95, 0.95, 0.95),  # Light gray
}


def _require_canvas():
    try:
        from reportlab.lib.pagesizes import landscape, letter
        from reportlab.pdfgen import canvas
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF generation. "
            "Install with: pip install reportlab"
        )
    return canvas, landscape(letter)


class PDFGenerator:
    """Generates printable PDF plannings.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(shifts, employees, "planning.pdf")
    """

    def __init__(
        self,
        rules: Optional[ScheduleRules] = None,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.rules = rules or ScheduleRules()
        self.analyzer = CoverageAnalyzer(self.rules)
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        shifts: Iterable[Shift],
        employees: Iterable[Employee],
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate a PDF planning and save it to a file.

        Args:
            shifts: Shifts of the week.
            employees: Roster; every employee gets a row on each day.
            output_path: Path to save the PDF.
            include_summary: Whether to include the week summary page.
        """
        canvas, pagesize = _require_canvas()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw(c, list(shifts), list(employees), include_summary)
        c.save()

    def generate_to_buffer(
        self,
        shifts: Iterable[Shift],
        employees: Iterable[Employee],
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate a PDF planning and return it as a bytes buffer."""
        canvas, pagesize = _require_canvas()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw(c, list(shifts), list(employees), include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(
        self,
        c,
        shifts: list[Shift],
        employees: list[Employee],
        include_summary: bool,
    ) -> None:
        in_conflict = conflicting_shift_ids(shifts, employees)
        for day in range(7):
            self._draw_day_page(c, shifts, employees, day, in_conflict)
        if include_summary:
            self._draw_summary_page(c, shifts)

    def _window(self, day: int) -> tuple[int, int]:
        """Opening minute and window length for a day."""
        opening = self.rules.opening_time
        return to_minutes(opening), duration_minutes(
            opening, self.rules.closing_time_for(day)
        )

    def _draw_day_page(
        self,
        c,
        shifts: list[Shift],
        employees: list[Employee],
        day: int,
        in_conflict: set[int],
    ) -> None:
        """Draw one day's employee timelines and coverage strip."""
        day_shifts = [s for s in shifts if s.day == day]
        open_m, length = self._window(day)

        row_height = 22
        header_height = 60
        timeline_left = self.margin + 120  # Space for names
        timeline_width = self.page_width - self.margin - 20 - timeline_left

        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"{DAY_NAMES[day]} Planning",
        )
        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"Open {self.rules.opening_time} - {self.rules.closing_time_for(day)}"
            f"    Shifts: {len(day_shifts)}",
        )

        axis_y = self.page_height - self.margin - header_height - 20
        self._draw_time_axis(c, open_m, length, timeline_left, axis_y, timeline_width)

        y = axis_y - 10
        bottom = self.margin + 90
        for employee in employees:
            if y - row_height < bottom:
                break
            y -= row_height
            own = [s for s in day_shifts if s.has_employee(employee.id)]
            self._draw_employee_row(
                c, employee, own, in_conflict, open_m, length,
                timeline_left, timeline_width, y, row_height - 4,
            )

        coverage = self.analyzer.analyze_day(shifts, day)
        counts = [slot.count for slot in coverage.slot_coverage]
        c.setFont("Helvetica-Bold", 9)
        c.setFillColorRGB(0, 0, 0)
        c.drawString(self.margin, self.margin + 60, "Staff per slot")
        self._draw_coverage_chart(
            c, counts, timeline_left, self.margin + 30, timeline_width, 40
        )

        c.setFont("Helvetica", 9)
        c.drawString(
            self.margin,
            self.margin + 10,
            f"Status: {coverage.status.value}    Filling: {coverage.filling_percentage}%",
        )
        c.showPage()

    def _draw_time_axis(
        self,
        c,
        open_m: int,
        length: int,
        x: float,
        y: float,
        width: float,
    ) -> None:
        """Draw time axis with hour markers."""
        if length <= 0:
            return
        c.setFont("Helvetica", 8)
        c.setStrokeColorRGB(0.7, 0.7, 0.7)
        c.setFillColorRGB(0, 0, 0)

        for offset in range(0, length + 1, 60):
            tick_x = x + offset / length * width
            c.line(tick_x, y, tick_x, y - 5)
            if offset < length:
                c.drawCentredString(tick_x, y + 5, from_minutes(open_m + offset)[:2])

    def _draw_employee_row(
        self,
        c,
        employee: Employee,
        shifts: list[Shift],
        in_conflict: set[int],
        open_m: int,
        length: int,
        timeline_x: float,
        timeline_width: float,
        y: float,
        height: float,
    ) -> None:
        """Draw a single employee's shifts on the day's timeline."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 9)
        c.drawString(self.margin, y + height / 2 - 3, employee.name[:18])

        c.setFillColorRGB(*COLORS["off_shift"])
        c.rect(timeline_x, y, timeline_width, height, fill=1, stroke=0)
        if length <= 0:
            return

        for shift in shifts:
            start = (to_minutes(shift.start_time) - open_m) % MINUTES_PER_DAY
            end = min(start + shift.duration_minutes, length)
            if start >= length:
                continue

            status = ShiftStatus.CONFLICT if shift.id in in_conflict else shift.status
            bx = timeline_x + start / length * timeline_width
            bw = (end - start) / length * timeline_width

            c.setFillColorRGB(*COLORS[status])
            c.rect(bx, y, bw, height, fill=1, stroke=0)
            c.setStrokeColorRGB(0.3, 0.3, 0.3)
            c.setLineWidth(0.5)
            c.rect(bx, y, bw, height, fill=0, stroke=1)

            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica", 7)
            c.drawCentredString(
                bx + bw / 2, y + height / 2 - 3,
                f"{shift.start_time}-{shift.end_time}",
            )

    def _draw_summary_page(self, c, shifts: list[Shift]) -> None:
        """Draw the week summary table and filling chart."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin, self.page_height - self.margin - 20, "Week Summary"
        )

        y = self.page_height - self.margin - 60
        c.setFont("Helvetica-Bold", 10)
        columns = [("Day", 0), ("Status", 100), ("Staff", 190), ("Hours", 250), ("Filled", 320)]
        for label, offset in columns:
            c.drawString(self.margin + offset, y, label)
        y -= 18

        summaries = self.analyzer.week_summary(shifts)
        c.setFont("Helvetica", 10)
        for summary in summaries:
            c.setFillColorRGB(*COLORS[summary.status])
            c.rect(self.margin + 88, y - 2, 8, 8, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            values = [
                DAY_NAMES[summary.day_index],
                summary.status.value,
                str(summary.employee_count),
                f"{round_hours(summary.total_hours)}",
                f"{summary.filling_percentage}%",
            ]
            for (_, offset), value in zip(columns, values):
                c.drawString(self.margin + offset, y, value)
            y -= 16

        y -= 30
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Filling by Day")
        self._draw_coverage_chart(
            c,
            [s.filling_percentage for s in summaries],
            self.margin + 20,
            y - 170,
            400,
            150,
            labels=[name[:3] for name in DAY_NAMES],
        )
        c.showPage()

    def _draw_coverage_chart(
        self,
        c,
        values: list[int],
        x: float,
        y: float,
        width: float,
        height: float,
        labels: Optional[list[str]] = None,
    ) -> None:
        """Draw a simple bar chart."""
        if not values:
            return

        max_value = max(values) or 1
        bar_width = width / len(values)

        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(1)
        c.line(x, y, x, y + height)  # Y axis
        c.line(x, y, x + width, y)  # X axis

        c.setFillColorRGB(0.4, 0.6, 0.8)
        for i, value in enumerate(values):
            bar_height = (value / max_value) * height
            c.rect(x + i * bar_width, y, bar_width - 1, bar_height, fill=1, stroke=0)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 7)
        c.drawRightString(x - 5, y, "0")
        c.drawRightString(x - 5, y + height - 5, str(max_value))
        if labels:
            for i, label in enumerate(labels):
                c.drawCentredString(x + (i + 0.5) * bar_width, y - 12, label)
