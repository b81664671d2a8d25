"""Main generator interface.

This module provides the ScheduleGenerator class that picks a generation
strategy, runs it for a day or a whole week, and reports statistics.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from shiftplanner.domain.models import Employee, ScheduleRules, Shift
from shiftplanner.domain.policies import BlockPolicy, DefaultBlockPolicy
from shiftplanner.scheduling.cpsat_generator import CPSATGenerator, SolverConfig
from shiftplanner.scheduling.generator import (
    GenerationResult,
    HeuristicGenerator,
    kept_shifts,
)

logger = logging.getLogger(__name__)


class SolverType(Enum):
    """Type of generator to use."""

    HEURISTIC = "heuristic"  # Deterministic greedy pass
    CPSAT = "cpsat"  # OR-Tools CP-SAT (optimal but slower)
    HYBRID = "hybrid"  # Try CP-SAT, fall back to heuristic


class ScheduleGenerator:
    """High-level generator for proposing a day's shifts.

    Example:
        >>> generator = ScheduleGenerator()
        >>> new_shifts = generator.generate(shifts, employees, day=3, next_id=42)
        >>> # caller replaces day 3 with new_shifts to accept the proposal
    """

    def __init__(
        self,
        solver_type: SolverType = SolverType.HEURISTIC,
        block_policy: Optional[BlockPolicy] = None,
        solver_config: Optional[SolverConfig] = None,
    ):
        """Initialize the generator.

        Args:
            solver_type: Strategy used to staff the blocks.
            block_policy: Blocks to staff on each day.
            solver_config: CP-SAT settings, used by CPSAT and HYBRID.
        """
        self.solver_type = SolverType(solver_type)
        self.block_policy = block_policy or DefaultBlockPolicy()
        self.heuristic = HeuristicGenerator(self.block_policy)
        self.cpsat = CPSATGenerator(self.block_policy, solver_config)

    def generate(
        self,
        existing_shifts: Iterable[Shift],
        employees: Iterable[Employee],
        day: int,
        rules: Optional[ScheduleRules] = None,
        next_id: int = 1,
    ) -> list[Shift]:
        """Propose replacement shifts for a day."""
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
        result, _ = self.generate_with_stats(
            existing_shifts, employees, day, rules, next_id
        )
        return result

    def generate_with_stats(
        self,
        existing_shifts: Iterable[Shift],
        employees: Iterable[Employee],
        day: int,
        rules: Optional[ScheduleRules] = None,
        next_id: int = 1,
    ) -> tuple[GenerationResult, dict]:
        """Propose shifts and return solver statistics.

        Returns:
            Tuple of (result, stats_dict).
        """
        existing_shifts = list(existing_shifts)
        employees = list(employees)
        stats: dict = {"solver_type": self.solver_type.value, "day": day}

        if self.solver_type == SolverType.HEURISTIC:
            result = self.heuristic.generate_with_report(
                existing_shifts, employees, day, rules, next_id
            )
            stats["method"] = "heuristic"

        else:
            solved = self.cpsat.solve(existing_shifts, employees, day, rules, next_id)
            stats.update({
                "method": self.solver_type.value,
                "status": solved.status,
                "objective_value": solved.objective_value,
                "solve_time": solved.solve_time_seconds,
            })

            if solved.is_feasible and solved.generation is not None:
                result = solved.generation
                stats["used"] = "cpsat"
            elif self.solver_type == SolverType.HYBRID:
                logger.warning(
                    "CP-SAT found no solution for day %d (%s), using heuristic",
                    day, solved.status,
                )
                result = self.heuristic.generate_with_report(
                    existing_shifts, employees, day, rules, next_id
                )
                stats["used"] = "heuristic"
            else:
                rules = rules or ScheduleRules()
                result = GenerationResult(
                    day=day,
                    next_id=next_id,
                    unfilled_blocks=self.block_policy.blocks_for_day(day, rules),
                    solver="cpsat",
                )
                stats["used"] = "none"

        stats.update({
            "shifts": len(result.shifts),
            "assignments": sum(len(s.employee_ids) for s in result.shifts),
            "unfilled_blocks": [b.name for b in result.unfilled_blocks],
            "understaffed_blocks": [b.name for b in result.understaffed_blocks],
        })
        return result, stats

    def generate_week(
        self,
        existing_shifts: Iterable[Shift],
        employees: Iterable[Employee],
        rules: Optional[ScheduleRules] = None,
        next_id: int = 1,
        days: Iterable[int] = range(7),
    ) -> tuple[list[Shift], int]:
        """Regenerate several days in turn, each seeing the previous proposals.

        Returns:
            Tuple of (all shifts after regeneration, next unused id).
        """
        shifts = list(existing_shifts)
        employees = list(employees)
        for day in days:
            result = self.generate_with_report(shifts, employees, day, rules, next_id)
            shifts = kept_shifts(shifts, day) + result.shifts
            next_id = result.next_id
        return shifts, next_id
