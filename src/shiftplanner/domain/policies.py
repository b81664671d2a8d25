"""Policy definitions for shift rules and generator blocks.

Policies are kept separate from the analysis and generation code so the
business rules can be swapped or tested independently.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from shiftplanner.domain.models import ScheduleRules, TimePreference
from shiftplanner.domain.timeutils import duration_minutes, to_minutes


def period_for(start_time: str) -> Optional[TimePreference]:
    """Classify a start time into the preference period it belongs to.

    Morning is 9:00-12:59, evening 17:00-21:59, night 22:00-8:59. Starts
    between 13:00 and 16:59 belong to no period.
    """
    hour = to_minutes(start_time) // 60
    if 9 <= hour <= 12:
        return TimePreference.MORNING
    if 17 <= hour <= 21:
        return TimePreference.EVENING
    if hour >= 22 or hour < 9:
        return TimePreference.NIGHT
    return None


@dataclass(frozen=True)
class PriorityBlock:
    """A time block the generator tries to staff.

    Attributes:
        name: Short label (e.g. "lunch").
        start_time: Block start as "HH:MM".
        end_time: Block end as "HH:MM", may cross midnight.
        required_staff: Headcount wanted for the block.
        importance: Ranking weight, used by the CP-SAT objective and, when
            enabled, to fill more important blocks first.
    """

    name: str
    start_time: str
    end_time: str
    required_staff: int
    importance: int = 1

    @property
    def duration_hours(self) -> float:
        return duration_minutes(self.start_time, self.end_time) / 60.0

    @property
    def period(self) -> Optional[TimePreference]:
        return period_for(self.start_time)


class ShiftPolicy(ABC):
    """Abstract base class for shift length policies."""

    @abstractmethod
    def max_shift_minutes(self) -> int:
        """Longest allowed shift in minutes."""
        pass

    @abstractmethod
    def is_valid_duration(self, minutes: int) -> bool:
        """Check if a shift duration is allowed."""
        pass


class BlockPolicy(ABC):
    """Abstract base class for the blocks the generator staffs."""

    @abstractmethod
    def blocks_for_day(self, day: int, rules: ScheduleRules) -> list[PriorityBlock]:
        """Get the blocks to staff on a day, in the order they are filled.

        Args:
            day: Day of week, 0 = Monday.
            rules: Rules in effect, used for the operating window.

        Returns:
            Blocks in fill order.
        """
        pass


@dataclass
class DefaultShiftPolicy(ShiftPolicy):
    """Default shift policy: shifts must last more than zero and at most 12 hours."""

    max_hours: float = 12.0

    def max_shift_minutes(self) -> int:
        return int(round(self.max_hours * 60))

    def is_valid_duration(self, minutes: int) -> bool:
        return 0 < minutes <= self.max_shift_minutes()


@dataclass
class DefaultBlockPolicy(BlockPolicy):
    """Default restaurant blocks.

    Every day:
    - lunch 11:00-15:00
    - afternoon 14:30-18:30
    - dinner 17:30-22:30

    Extended days add:
    - late 22:00-03:00
    - night 01:00-07:00

    Lunch and dinner need 3 people on extended days and 2 otherwise; the
    other blocks need `default_staff`. Lunch matters most on the quieter
    days (Mon, Tue, Wed, Sun), dinner matters most on extended days.

    Blocks are filled in the order listed above. With `order_by_importance`
    they are filled from most to least important instead, equal importance
    keeping the listed order.
    """

    default_staff: int = 2
    peak_staff: int = 3
    lunch_heavy_days: frozenset[int] = frozenset({0, 1, 2, 6})
    order_by_importance: bool = False

    def blocks_for_day(self, day: int, rules: ScheduleRules) -> list[PriorityBlock]:
        extended = rules.is_extended_day(day)
        peak = self.peak_staff if extended else self.default_staff

        blocks = [
            PriorityBlock(
                "lunch", "11:00", "15:00", peak,
                importance=5 if day in self.lunch_heavy_days else 3,
            ),
            PriorityBlock("afternoon", "14:30", "18:30", self.default_staff, importance=2),
            PriorityBlock(
                "dinner", "17:30", "22:30", peak,
                importance=5 if extended else 4,
            ),
        ]
        if extended:
            blocks.append(
                PriorityBlock("late", "22:00", "03:00", self.default_staff, importance=3)
            )
            blocks.append(
                PriorityBlock("night", "01:00", "07:00", self.default_staff, importance=2)
            )

        if self.order_by_importance:
            # sorted() is stable: equal importance keeps definition order
            return sorted(blocks, key=lambda b: -b.importance)
        return blocks
