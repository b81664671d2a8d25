"""Command-line interface for the shift planner."""

import argparse
import json
import logging
import sys
from typing import Optional

from shiftplanner.domain.models import Employee, ScheduleRules, Shift, TimePreference
from shiftplanner.domain.serialization import (
    Planning,
    load_planning,
    save_planning,
    shift_to_dict,
)
from shiftplanner.domain.timeutils import DAY_NAMES, round_hours
from shiftplanner.output.pdf_generator import PDFGenerator
from shiftplanner.output.report_generator import ReportGenerator
from shiftplanner.scheduling.conflicts import detect_week_conflicts
from shiftplanner.scheduling.coverage import CoverageAnalyzer
from shiftplanner.scheduling.cpsat_generator import SolverConfig
from shiftplanner.scheduling.scheduler import ScheduleGenerator, SolverType
from shiftplanner.validation.validator import ScheduleValidator, ValidationResult

logger = logging.getLogger(__name__)


def create_sample_employees(count: int = 8) -> list[Employee]:
    """Create a sample roster with a mix of contracts and preferences.

    Args:
        count: Number of employees to create.
    """
    names = [
        "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
        "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
    ]
    preferences = [
        frozenset(),
        frozenset({TimePreference.MORNING}),
        frozenset({TimePreference.EVENING}),
        frozenset({TimePreference.EVENING, TimePreference.NIGHT}),
        frozenset({TimePreference.MORNING, TimePreference.EVENING}),
        frozenset({TimePreference.NIGHT}),
    ]
    contracts = [35.0, 24.0, 39.0, 20.0, 30.0]

    return [
        Employee(
            id=i + 1,
            name=names[i % len(names)] + (f" {i // len(names) + 1}" if i >= len(names) else ""),
            weekly_hours=contracts[i % len(contracts)],
            preferred_times=preferences[i % len(preferences)],
        )
        for i in range(count)
    ]


def _print_summary(shifts: list[Shift], rules: ScheduleRules) -> None:
    print(f"\n  {'Day':<10} {'Status':<11} {'Staff':>5} {'Hours':>7} {'Filled':>7}")
    for summary in CoverageAnalyzer(rules).week_summary(shifts):
        print(
            f"  {DAY_NAMES[summary.day_index]:<10} {summary.status.value:<11} "
            f"{summary.employee_count:>5} {round_hours(summary.total_hours):>7} "
            f"{summary.filling_percentage:>6}%"
        )


def _print_alerts(result: ValidationResult, limit: int = 10) -> None:
    if result.is_valid:
        print("\n  Validation: PASSED")
    else:
        print(f"\n  Validation: FAILED ({len(result.errors)} errors)")
        for error in result.errors[:limit]:
            print(f"    - {error}")
        if len(result.errors) > limit:
            print(f"    ... and {len(result.errors) - limit} more errors")
    if result.warnings:
        print(f"  Warnings: {len(result.warnings)}")
        for warning in result.warnings[:limit]:
            print(f"    - {warning}")
        if len(result.warnings) > limit:
            print(f"    ... and {len(result.warnings) - limit} more warnings")


def _write_outputs(
    planning: Planning,
    pdf_path: Optional[str],
    report_path: Optional[str],
) -> None:
    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        PDFGenerator(planning.rules).generate(
            planning.shifts, planning.employees, pdf_path
        )
        print("  PDF created successfully!")
    if report_path:
        print(f"\nGenerating report: {report_path}")
        ReportGenerator(planning.rules).generate(
            planning.shifts, planning.employees, report_path
        )


def _make_generator(solver: str, time_limit: float) -> ScheduleGenerator:
    return ScheduleGenerator(
        solver_type=SolverType(solver),
        solver_config=SolverConfig(time_limit_seconds=time_limit),
    )


def run_demo(
    employee_count: int = 8,
    solver: str = "heuristic",
    time_limit: float = 10.0,
    pdf_path: Optional[str] = None,
    report_path: Optional[str] = None,
    save_path: Optional[str] = None,
) -> None:
    """Generate a full week for a sample roster and print the results."""
    print(f"Generating demo week for {employee_count} employees ({solver})...")

    rules = ScheduleRules()
    employees = create_sample_employees(employee_count)
    generator = _make_generator(solver, time_limit)
    shifts, next_id = generator.generate_week([], employees, rules)

    print(f"\nGenerated {len(shifts)} shifts (next id {next_id})")
    _print_summary(shifts, rules)

    conflicts = detect_week_conflicts(shifts, employees)
    print(f"\n  Conflicts: {len(conflicts)}")

    result = ScheduleValidator(rules).validate_week(shifts, employees)
    _print_alerts(result)

    planning = Planning(employees=employees, shifts=shifts, rules=rules)
    _write_outputs(planning, pdf_path, report_path)
    if save_path:
        save_planning(planning, save_path)
        print(f"\nPlanning saved to {save_path}")


def run_analyze(
    path: str,
    day: Optional[int] = None,
    pdf_path: Optional[str] = None,
    report_path: Optional[str] = None,
) -> None:
    """Print conflicts, coverage, and alerts for a planning file."""
    planning = load_planning(path)
    rules = planning.rules
    validator = ScheduleValidator(rules)

    print(
        f"Planning: {len(planning.employees)} employees, "
        f"{len(planning.shifts)} shifts"
    )
    _print_summary(planning.shifts, rules)

    conflicts = detect_week_conflicts(planning.shifts, planning.employees)
    names = {e.id: e.name for e in planning.employees}
    print(f"\n  Conflicts: {len(conflicts)}")
    for record in conflicts:
        print(
            f"    - {DAY_NAMES[record.day]}: {names[record.employee_id]} "
            f"on shifts {record.shift_ids}"
        )

    if day is None:
        result = validator.validate_week(planning.shifts, planning.employees)
    else:
        rules.check_day(day)
        coverage = CoverageAnalyzer(rules).analyze_day(planning.shifts, day)
        print(f"\n  {DAY_NAMES[day]}: {coverage.status.value}, "
              f"{coverage.filling_percentage}% filled")
        for slot in coverage.slot_coverage:
            print(f"    {slot.time} {'#' * slot.count}")
        result = validator.validate_day(planning.shifts, planning.employees, day)
    _print_alerts(result)

    _write_outputs(planning, pdf_path, report_path)


def run_generate(
    path: str,
    day: int,
    solver: str = "heuristic",
    time_limit: float = 10.0,
    next_id: Optional[int] = None,
) -> None:
    """Print proposed shifts for a day as JSON. The file is left untouched."""
    planning = load_planning(path)
    if next_id is None:
        next_id = max((s.id for s in planning.shifts), default=0) + 1

    generator = _make_generator(solver, time_limit)
    result, stats = generator.generate_with_stats(
        planning.shifts, planning.employees, day, planning.rules, next_id
    )
    logger.info("Generation stats: %s", stats)

    output = {
        "day": day,
        "solver": result.solver,
        "next_id": result.next_id,
        "shifts": [shift_to_dict(s) for s in result.shifts],
        "unfilled_blocks": [b.name for b in result.unfilled_blocks],
        "understaffed_blocks": [b.name for b in result.understaffed_blocks],
    }
    print(json.dumps(output, indent=2))


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Shift Planner - Restaurant Staff Scheduling Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                          Generate a week for 8 sample employees
  %(prog)s demo --count 12 -o week.pdf   Larger roster with PDF output
  %(prog)s demo --solver cpsat           Use the CP-SAT generator

  %(prog)s analyze planning.json         Conflicts, coverage and alerts
  %(prog)s analyze planning.json --day 4 Slot detail for Friday

  %(prog)s generate planning.json --day 3    Propose Thursday's shifts as JSON
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    solver_choices = [s.value for s in SolverType]

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Generate a demo week")
    demo_parser.add_argument(
        "--count", "-c",
        type=int,
        default=8,
        help="Number of employees to generate (default: 8)",
    )
    demo_parser.add_argument(
        "--solver", "-s",
        type=str,
        default="heuristic",
        choices=solver_choices,
        help="Generator: heuristic (default), cpsat (optimal), hybrid",
    )
    demo_parser.add_argument(
        "--time-limit", "-t",
        type=float,
        default=10.0,
        help="CP-SAT time limit per day in seconds (default: 10)",
    )
    demo_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    demo_parser.add_argument("--report", "-r", type=str, help="Output text report path")
    demo_parser.add_argument("--save", type=str, help="Save the planning as JSON")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a planning file")
    analyze_parser.add_argument("file", help="Planning JSON file")
    analyze_parser.add_argument(
        "--day", "-d",
        type=int,
        choices=range(7),
        help="Show slot detail for one day (0 = Monday)",
    )
    analyze_parser.add_argument("--output", "-o", type=str, help="Output PDF file path")
    analyze_parser.add_argument("--report", "-r", type=str, help="Output text report path")

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Propose shifts for one day of a planning file"
    )
    generate_parser.add_argument("file", help="Planning JSON file")
    generate_parser.add_argument(
        "--day", "-d",
        type=int,
        required=True,
        choices=range(7),
        help="Day to generate (0 = Monday)",
    )
    generate_parser.add_argument(
        "--solver", "-s",
        type=str,
        default="heuristic",
        choices=solver_choices,
        help="Generator: heuristic (default), cpsat (optimal), hybrid",
    )
    generate_parser.add_argument(
        "--time-limit", "-t",
        type=float,
        default=10.0,
        help="CP-SAT time limit in seconds (default: 10)",
    )
    generate_parser.add_argument(
        "--next-id",
        type=int,
        help="Id for the first proposed shift (default: highest id + 1)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "demo":
            run_demo(
                args.count, args.solver, args.time_limit,
                args.output, args.report, args.save,
            )
            return 0
        elif args.command == "analyze":
            run_analyze(args.file, args.day, args.output, args.report)
            return 0
        elif args.command == "generate":
            run_generate(
                args.file, args.day, args.solver, args.time_limit, args.next_id
            )
            return 0
        else:
            parser.print_help()
            return 1
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
