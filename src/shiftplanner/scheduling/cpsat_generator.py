"""OR-Tools CP-SAT generator for optimal block staffing.

This module formulates one day's block staffing as a 0/1 assignment
problem. It applies the same rules as the greedy generator, but as hard
constraints, and finds the assignment that staffs the most important
blocks best.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ortools.sat.python import cp_model

from shiftplanner.domain.models import Employee, ScheduleRules, Shift, ShiftStatus
from shiftplanner.domain.policies import BlockPolicy, DefaultBlockPolicy, PriorityBlock
from shiftplanner.domain.timeutils import ranges_overlap
from shiftplanner.scheduling.availability import is_available
from shiftplanner.scheduling.generator import GenerationResult, kept_shifts

logger = logging.getLogger(__name__)


@dataclass
class SolverConfig:
    """Configuration for the CP-SAT generator.

    Attributes:
        time_limit_seconds: Maximum solver runtime.
        num_workers: Number of parallel search workers (0 = auto).
        importance_weight: Objective weight per unit of block importance.
        balance_weight: Objective penalty per hour already worked.
    """

    time_limit_seconds: float = 10.0
    num_workers: int = 1  # single worker: deterministic search
    importance_weight: int = 1000
    balance_weight: int = 1


@dataclass
class SolverResult:
    """Result from the CP-SAT generator.

    Attributes:
        generation: Proposed shifts, None when no solution was found.
        status: Solver status (OPTIMAL, FEASIBLE, etc.).
        objective_value: Final objective value.
        solve_time_seconds: Time taken to solve.
    """

    generation: Optional[GenerationResult]
    status: str
    objective_value: int = 0
    solve_time_seconds: float = 0.0

    @property
    def is_optimal(self) -> bool:
        return self.status == "OPTIMAL"

    @property
    def is_feasible(self) -> bool:
        return self.status in ("OPTIMAL", "FEASIBLE")


class CPSATGenerator:
    """Constraint programming block staffing using OR-Tools CP-SAT.

    Constraints:
    - a block gets at most its required headcount
    - an employee takes at most one of any overlapping blocks
    - weekly hours stay within the employee's cap
    - an employee only takes blocks in a preferred period
    """

    def __init__(
        self,
        block_policy: Optional[BlockPolicy] = None,
        config: Optional[SolverConfig] = None,
    ):
        self.block_policy = block_policy or DefaultBlockPolicy()
        self.config = config or SolverConfig()

    def solve(
        self,
        existing_shifts: Iterable[Shift],
        employees: Iterable[Employee],
        day: int,
        rules: Optional[ScheduleRules] = None,
        next_id: int = 1,
    ) -> SolverResult:
        """Staff the day's blocks optimally.

        Args:
            existing_shifts: Current shifts; the day's own shifts are replaced.
            employees: Roster to draw from.
            day: Day of week to generate.
            rules: Rules in effect.
            next_id: Id for the first proposed shift.

        Returns:
            SolverResult with the proposal and solver statistics.
        """
        rules = rules or ScheduleRules()
        rules.check_day(day)
        employees = list(employees)
        kept = kept_shifts(existing_shifts, day)
        blocks = self.block_policy.blocks_for_day(day, rules)

        base_minutes = {
            e.id: sum(s.duration_minutes for s in kept if s.has_employee(e.id))
            for e in employees
        }

        model = cp_model.CpModel()

        # Decision variables: x[(e, b)] = 1 if employee e works block b
        x: dict[tuple[int, int], cp_model.IntVar] = {}
        for e_idx, employee in enumerate(employees):
            cap_minutes = int(rules.weekly_cap_for(employee) * 60)
            for b_idx, block in enumerate(blocks):
                block_minutes = int(round(block.duration_hours * 60))
                if not employee.accepts(block.period):
                    continue
                if base_minutes[employee.id] + block_minutes > cap_minutes:
                    continue
                if not is_available(
                    kept, employee.id, day, block.start_time, block.end_time
                ):
                    continue
                x[(e_idx, b_idx)] = model.NewBoolVar(f"x_{employee.id}_{block.name}")

        # Constraint 1: Headcount per block
        for b_idx, block in enumerate(blocks):
            assigned = [v for (e, b), v in x.items() if b == b_idx]
            if assigned:
                model.Add(sum(assigned) <= block.required_staff)

        # Constraint 2: No overlapping blocks for the same employee
        for e_idx in range(len(employees)):
            for i, first in enumerate(blocks):
                for j in range(i + 1, len(blocks)):
                    second = blocks[j]
                    if (e_idx, i) not in x or (e_idx, j) not in x:
                        continue
                    if ranges_overlap(
                        first.start_time, first.end_time,
                        second.start_time, second.end_time,
                    ):
                        model.AddAtMostOne([x[(e_idx, i)], x[(e_idx, j)]])

        # Constraint 3: Weekly hour cap
        for e_idx, employee in enumerate(employees):
            terms = [
                x[(e_idx, b_idx)] * int(round(block.duration_hours * 60))
                for b_idx, block in enumerate(blocks)
                if (e_idx, b_idx) in x
            ]
            if terms:
                cap_minutes = int(rules.weekly_cap_for(employee) * 60)
                model.Add(sum(terms) <= cap_minutes - base_minutes[employee.id])

        # Objective: important blocks first, then employees with fewer hours
        objective_terms = []
        for (e_idx, b_idx), var in x.items():
            employee = employees[e_idx]
            weight = blocks[b_idx].importance * self.config.importance_weight
            weight -= (base_minutes[employee.id] // 60) * self.config.balance_weight
            objective_terms.append(var * weight)
        if objective_terms:
            model.Maximize(sum(objective_terms))

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = self.config.time_limit_seconds
        if self.config.num_workers > 0:
            solver.parameters.num_workers = self.config.num_workers

        status = solver.Solve(model)

        status_map = {
            cp_model.OPTIMAL: "OPTIMAL",
            cp_model.FEASIBLE: "FEASIBLE",
            cp_model.INFEASIBLE: "INFEASIBLE",
            cp_model.MODEL_INVALID: "MODEL_INVALID",
            cp_model.UNKNOWN: "UNKNOWN",
        }
        status_str = status_map.get(status, "UNKNOWN")
        logger.info("CP-SAT status for day %d: %s", day, status_str)

        if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
            return SolverResult(
                generation=None,
                status=status_str,
                solve_time_seconds=solver.WallTime(),
            )

        generation = self._extract_solution(solver, x, employees, blocks, day, next_id)

        return SolverResult(
            generation=generation,
            status=status_str,
            objective_value=int(solver.ObjectiveValue()),
            solve_time_seconds=solver.WallTime(),
        )

    def _extract_solution(
        self,
        solver: cp_model.CpSolver,
        x: dict[tuple[int, int], cp_model.IntVar],
        employees: list[Employee],
        blocks: list[PriorityBlock],
        day: int,
        next_id: int,
    ) -> GenerationResult:
        """Turn the chosen assignments into shifts, one per staffed block."""
        result = GenerationResult(day=day, next_id=next_id, solver="cpsat")

        for b_idx, block in enumerate(blocks):
            accepted = [
                employees[e_idx].id
                for e_idx in range(len(employees))
                if (e_idx, b_idx) in x and solver.Value(x[(e_idx, b_idx)]) == 1
            ]
            if not accepted:
                result.unfilled_blocks.append(block)
                continue

            result.shifts.append(
                Shift(
                    id=result.next_id,
                    employee_ids=accepted,
                    day=day,
                    start_time=block.start_time,
                    end_time=block.end_time,
                    status=ShiftStatus.CONFIRMED,
                )
            )
            result.next_id += 1
            if len(accepted) < block.required_staff:
                result.understaffed_blocks.append(block)

        return result
