"""Greedy generator proposing shifts for one day.

The generator walks the day's priority blocks in order and fills each one
with the least-loaded employees that are:
1. Free for the block (no overlap with kept or already proposed shifts)
2. Below their weekly hour cap once the block is added
3. Willing to work the block's period of the day

The output is a proposal; nothing is committed until the caller accepts it.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from shiftplanner.domain.models import (
    Employee,
    ScheduleRules,
    Shift,
    ShiftStatus,
)
from shiftplanner.domain.policies import BlockPolicy, DefaultBlockPolicy, PriorityBlock
from shiftplanner.scheduling.availability import is_available
from shiftplanner.scheduling.hours import hours_by_employee

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Proposed shifts for a day and what could not be staffed.

    Attributes:
        day: Day the shifts were generated for.
        shifts: Proposed shifts in emission order.
        next_id: First id not used by the proposal.
        unfilled_blocks: Blocks nobody could take (no shift emitted).
        understaffed_blocks: Blocks emitted below their required headcount.
        solver: Name of the strategy that produced the proposal.
    """

    day: int
    shifts: list[Shift] = field(default_factory=list)
    next_id: int = 1
    unfilled_blocks: list[PriorityBlock] = field(default_factory=list)
    understaffed_blocks: list[PriorityBlock] = field(default_factory=list)
    solver: str = "heuristic"

    @property
    def is_complete(self) -> bool:
        return not self.unfilled_blocks and not self.understaffed_blocks


def kept_shifts(existing_shifts: Iterable[Shift], day: int) -> list[Shift]:
    """Shifts that survive regenerating `day`: everything on other days."""
    return [s for s in existing_shifts if s.day != day]


class HeuristicGenerator:
    """Deterministic greedy block filler."""

    def __init__(self, block_policy: Optional[BlockPolicy] = None):
        self.block_policy = block_policy or DefaultBlockPolicy()

    def generate(
        self,
        existing_shifts: Iterable[Shift],
        employees: Iterable[Employee],
        day: int,
        rules: Optional[ScheduleRules] = None,
        next_id: int = 1,
    ) -> list[Shift]:
        """Propose shifts for a day, replacing the day's existing shifts."""
        return self.generate_with_report(
            existing_shifts, employees, day, rules, next_id
        ).shifts

    def generate_with_report(
        self,
        existing_shifts: Iterable[Shift],
        employees: Iterable[Employee],
        day: int,
        rules: Optional[ScheduleRules] = None,
        next_id: int = 1,
    ) -> GenerationResult:
        rules = rules or ScheduleRules()
        rules.check_day(day)
        employees = list(employees)
        kept = kept_shifts(existing_shifts, day)

        hours = hours_by_employee(kept)
        proposed: list[Shift] = []
        result = GenerationResult(day=day, next_id=next_id)

        for block in self.block_policy.blocks_for_day(day, rules):
            # sorted() is stable: ties keep roster order
            candidates = sorted(employees, key=lambda e: hours.get(e.id, 0.0))
            accepted = []

            for employee in candidates:
                if len(accepted) >= block.required_staff:
                    break
                if not employee.accepts(block.period):
                    continue
                current = hours.get(employee.id, 0.0)
                if current + block.duration_hours > rules.weekly_cap_for(employee):
                    continue
                if not is_available(
                    kept + proposed, employee.id, day,
                    block.start_time, block.end_time,
                ):
                    continue
                accepted.append(employee.id)

            if not accepted:
                logger.debug("No employee available for %s block on day %d", block.name, day)
                result.unfilled_blocks.append(block)
                continue

            shift = Shift(
                id=result.next_id,
                employee_ids=accepted,
                day=day,
                start_time=block.start_time,
                end_time=block.end_time,
                status=ShiftStatus.CONFIRMED,
            )
            proposed.append(shift)
            result.next_id += 1
            for employee_id in accepted:
                hours[employee_id] = hours.get(employee_id, 0.0) + block.duration_hours

            if len(accepted) < block.required_staff:
                result.understaffed_blocks.append(block)
                logger.debug(
                    "%s block on day %d staffed %d/%d",
                    block.name, day, len(accepted), block.required_staff,
                )

        result.shifts = proposed
        logger.info(
            "Generated %d shifts for day %d (%d blocks unfilled)",
            len(proposed), day, len(result.unfilled_blocks),
        )
        return result


def generate(
    existing_shifts: Iterable[Shift],
    employees: Iterable[Employee],
    day: int,
    rules: Optional[ScheduleRules] = None,
    next_id: int = 1,
) -> list[Shift]:
    """Propose shifts for a day with the default block policy."""
    return HeuristicGenerator().generate(existing_shifts, employees, day, rules, next_id)
