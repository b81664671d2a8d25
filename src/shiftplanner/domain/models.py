"""Domain models for the shift planner.

This module contains the core data structures shared by every component:
employees, shifts, scheduling rules, and the reports produced by the
conflict, coverage and hours analysis.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from shiftplanner.domain.timeutils import (
    covers,
    crosses_midnight,
    duration_minutes,
    from_minutes,
    is_within_operating_hours,
    ranges_overlap,
    to_minutes,
)


class ShiftStatus(Enum):
    """Lifecycle status of a shift as set by the caller."""

    CONFIRMED = "confirmed"
    PENDING = "pending"
    CONFLICT = "conflict"
    CANCELLED = "cancelled"


class DayStatus(Enum):
    """Overall health of a day's staffing, from best to worst."""

    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
    INCOMPLETE = "incomplete"


class CoverageCheck(Enum):
    """Outcome of a single coverage check (evening, rush hour, general)."""

    VALID = "valid"
    WARNING = "warning"
    INCOMPLETE = "incomplete"


class TimePreference(Enum):
    """Periods of the day an employee prefers to work."""

    MORNING = "morning"  # Starts 9:00 - 12:59
    EVENING = "evening"  # Starts 17:00 - 21:59
    NIGHT = "night"  # Starts 22:00 - 8:59


def _unique(values: Iterable[int]) -> tuple[int, ...]:
    return tuple(dict.fromkeys(values))


@dataclass
class Employee:
    """A staff member who can be assigned to shifts.

    Attributes:
        id: Unique identifier.
        name: Display name.
        weekly_hours: Contracted hours per week.
        preferred_times: Periods the employee prefers. Empty means any.
    """

    id: int
    name: str
    weekly_hours: float = 35.0
    preferred_times: frozenset[TimePreference] = field(default_factory=frozenset)

    def __post_init__(self):
        self.preferred_times = frozenset(
            TimePreference(p) for p in self.preferred_times
        )

    @property
    def has_preferences(self) -> bool:
        return bool(self.preferred_times)

    def accepts(self, period: Optional[TimePreference]) -> bool:
        """Check whether a block in the given period suits this employee."""
        if not self.preferred_times:
            return True
        return period in self.preferred_times


@dataclass
class Shift:
    """A contiguous block of work on one day for a set of employees.

    A shift whose end is earlier than its start crosses midnight; it still
    belongs to the day it starts on. Employee ids are de-duplicated whenever
    they are assigned, preserving first-seen order.

    Attributes:
        id: Unique identifier, assigned by the caller.
        employee_ids: Employees working this shift.
        day: Day of week, 0 = Monday.
        start_time: Start as "HH:MM".
        end_time: End as "HH:MM".
        status: Caller-managed lifecycle status.
    """

    id: int
    employee_ids: tuple[int, ...]
    day: int
    start_time: str
    end_time: str
    status: ShiftStatus = ShiftStatus.CONFIRMED

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "employee_ids":
            value = _unique(value)
        elif name == "status":
            value = ShiftStatus(value)
        super().__setattr__(name, value)

    @property
    def crosses_midnight(self) -> bool:
        return crosses_midnight(self.start_time, self.end_time)

    @property
    def duration_minutes(self) -> int:
        return duration_minutes(self.start_time, self.end_time)

    @property
    def duration_hours(self) -> float:
        return self.duration_minutes / 60.0

    @property
    def is_empty(self) -> bool:
        return not self.employee_ids

    def has_employee(self, employee_id: int) -> bool:
        return employee_id in self.employee_ids

    def covers(self, moment: str) -> bool:
        """Check whether the shift is running at a clock time."""
        return covers(self.start_time, self.end_time, moment)

    def overlaps(self, other: "Shift") -> bool:
        """Check time overlap with another shift on the same day."""
        if self.day != other.day:
            return False
        return ranges_overlap(
            self.start_time, self.end_time, other.start_time, other.end_time
        )


@dataclass(frozen=True)
class ScheduleRules:
    """Staffing rules and the restaurant's operating window.

    Standard days run 11:00 to 02:00; extended days (Thursday, Friday,
    Saturday by default) run 11:00 to 07:00. Coverage is sampled at
    `slot_minutes` steps from opening up to the day's closing time.
    """

    min_employees_per_time_slot: int = 2
    max_employees_per_time_slot: int = 3
    min_employees_after_18h: int = 2
    max_employees_per_day: int = 5
    min_hours_per_day: float = 16.0
    max_weekly_hours_per_employee: float = 40.0

    # Operating window
    opening_time: str = "11:00"
    closing_time: str = "02:00"
    extended_closing_time: str = "07:00"
    extended_days: frozenset[int] = frozenset({3, 4, 5})
    slot_minutes: int = 60
    evening_start: str = "18:00"

    # Rush hours
    rush_hour_slots: tuple[str, ...] = ("12:00", "13:00", "19:00", "20:00")
    min_employees_rush_hour: int = 3

    # Share of understaffed slots that degrades the day status
    rush_hour_tolerance: float = 0.5
    evening_tolerance: float = 0.3
    understaffed_tolerance: float = 0.3

    # Staffing hours that count as a fully filled day
    required_hours_per_day: float = 45.0
    required_hours_extended_day: float = 60.0

    # Generator caps employees at min(weekly max, contract hours)
    cap_at_contract_hours: bool = True

    # Optional explicit slot list per day index
    time_slots: Optional[dict[int, tuple[str, ...]]] = None

    @staticmethod
    def check_day(day: int) -> int:
        if not isinstance(day, int) or not 0 <= day <= 6:
            raise ValueError(f"Day index must be 0..6, got {day!r}")
        return day

    def is_extended_day(self, day: int) -> bool:
        return self.check_day(day) in self.extended_days

    def closing_time_for(self, day: int) -> str:
        if self.is_extended_day(day):
            return self.extended_closing_time
        return self.closing_time

    def required_hours_for(self, day: int) -> float:
        if self.is_extended_day(day):
            return self.required_hours_extended_day
        return self.required_hours_per_day

    def is_within_operating_hours(self, moment: str, day: int) -> bool:
        return is_within_operating_hours(
            moment, self.opening_time, self.closing_time_for(day)
        )

    def time_slots_for(self, day: int) -> list[str]:
        """Slot start times for a day, opening up to (not including) closing."""
        self.check_day(day)
        if self.time_slots is not None and day in self.time_slots:
            return list(self.time_slots[day])

        open_m = to_minutes(self.opening_time)
        length = duration_minutes(self.opening_time, self.closing_time_for(day))
        return [
            from_minutes(open_m + offset)
            for offset in range(0, length, self.slot_minutes)
        ]

    def is_evening_slot(self, moment: str) -> bool:
        """Slots from the evening start until opening time the next morning."""
        t = to_minutes(moment)
        return t >= to_minutes(self.evening_start) or t < to_minutes(self.opening_time)

    def is_rush_hour(self, moment: str) -> bool:
        return moment in self.rush_hour_slots

    def weekly_cap_for(self, employee: Employee) -> float:
        """Maximum weekly hours the generator may give an employee."""
        if self.cap_at_contract_hours:
            return min(self.max_weekly_hours_per_employee, employee.weekly_hours)
        return self.max_weekly_hours_per_employee

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScheduleRules":
        """Build rules from a mapping of overrides.

        Raises:
            ValueError: If the mapping contains an unknown rule name.
        """
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown schedule rules: {', '.join(unknown)}")

        values = dict(data)
        if "extended_days" in values:
            values["extended_days"] = frozenset(values["extended_days"])
        if "rush_hour_slots" in values:
            values["rush_hour_slots"] = tuple(values["rush_hour_slots"])
        if values.get("time_slots") is not None:
            values["time_slots"] = {
                int(day): tuple(slots) for day, slots in values["time_slots"].items()
            }
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            name: getattr(self, name) for name in self.__dataclass_fields__
        }
        data["extended_days"] = sorted(self.extended_days)
        data["rush_hour_slots"] = list(self.rush_hour_slots)
        if self.time_slots is not None:
            data["time_slots"] = {
                str(day): list(slots) for day, slots in self.time_slots.items()
            }
        return data


@dataclass
class ConflictRecord:
    """Overlapping shifts of one employee on one day.

    Attributes:
        employee_id: The double-booked employee.
        day: Day of week the shifts start on.
        shifts: Every shift involved in at least one overlap, no duplicates.
    """

    employee_id: int
    day: int
    shifts: list[Shift] = field(default_factory=list)

    @property
    def shift_ids(self) -> list[int]:
        return [s.id for s in self.shifts]


@dataclass(frozen=True)
class SlotCoverage:
    """Distinct employees working at a slot start time."""

    time: str
    employee_ids: frozenset[int] = frozenset()

    @property
    def count(self) -> int:
        return len(self.employee_ids)


@dataclass
class DayCoverage:
    """Staffing analysis for a single day.

    Attributes:
        day: Day of week.
        slot_coverage: Coverage of every operating slot, in slot order.
        empty_slots: Slots nobody covers.
        excessive_slots: Slots above the per-slot maximum.
        understaffed_slots: Slots below the per-slot minimum.
        evening_understaffed_slots: Evening slots below the evening minimum.
        rush_hour_understaffed_slots: Rush-hour slots below the rush minimum.
        evening_employee_count: Distinct employees working evening slots.
        evening_coverage: Evening check outcome.
        rush_hour_coverage: Rush-hour check outcome.
        general_coverage: Whole-day check outcome.
        status: Overall day status.
        filling_percentage: Staffed hours against the day's target, 0-100.
    """

    day: int
    slot_coverage: list[SlotCoverage] = field(default_factory=list)
    empty_slots: list[str] = field(default_factory=list)
    excessive_slots: list[str] = field(default_factory=list)
    understaffed_slots: list[str] = field(default_factory=list)
    evening_understaffed_slots: list[str] = field(default_factory=list)
    rush_hour_understaffed_slots: list[str] = field(default_factory=list)
    evening_employee_count: int = 0
    evening_coverage: CoverageCheck = CoverageCheck.VALID
    rush_hour_coverage: CoverageCheck = CoverageCheck.VALID
    general_coverage: CoverageCheck = CoverageCheck.VALID
    status: DayStatus = DayStatus.GOOD
    filling_percentage: int = 0

    def count_at(self, moment: str) -> int:
        for slot in self.slot_coverage:
            if slot.time == moment:
                return slot.count
        return 0


@dataclass
class DaySummary:
    """One row of the weekly overview."""

    day_index: int
    employee_count: int
    total_hours: float
    filling_percentage: int
    status: DayStatus
