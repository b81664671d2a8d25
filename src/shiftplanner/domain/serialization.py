"""Conversion between planning snapshots and plain dicts / JSON files."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Union

from shiftplanner.domain.models import (
    Employee,
    ScheduleRules,
    Shift,
    ShiftStatus,
    TimePreference,
)
from shiftplanner.domain.timeutils import to_minutes


@dataclass
class Planning:
    """A snapshot of the caller's state: rules, roster, and shifts."""

    employees: list[Employee] = field(default_factory=list)
    shifts: list[Shift] = field(default_factory=list)
    rules: ScheduleRules = field(default_factory=ScheduleRules)


def employee_from_dict(data: dict[str, Any]) -> Employee:
    return Employee(
        id=int(data["id"]),
        name=str(data.get("name", f"Employee {data['id']}")),
        weekly_hours=float(data.get("weekly_hours", 35.0)),
        preferred_times=frozenset(
            TimePreference(p) for p in data.get("preferred_times", [])
        ),
    )


def employee_to_dict(employee: Employee) -> dict[str, Any]:
    return {
        "id": employee.id,
        "name": employee.name,
        "weekly_hours": employee.weekly_hours,
        "preferred_times": sorted(p.value for p in employee.preferred_times),
    }


def shift_from_dict(data: dict[str, Any]) -> Shift:
    """Build a shift from a dict, validating its clock times."""
    to_minutes(data["start_time"])
    to_minutes(data["end_time"])
    return Shift(
        id=int(data["id"]),
        employee_ids=[int(e) for e in data.get("employee_ids", [])],
        day=int(data["day"]),
        start_time=data["start_time"],
        end_time=data["end_time"],
        status=ShiftStatus(data.get("status", ShiftStatus.CONFIRMED.value)),
    )


def shift_to_dict(shift: Shift) -> dict[str, Any]:
    return {
        "id": shift.id,
        "employee_ids": list(shift.employee_ids),
        "day": shift.day,
        "start_time": shift.start_time,
        "end_time": shift.end_time,
        "status": shift.status.value,
    }


def planning_from_dict(data: dict[str, Any]) -> Planning:
    """Build a planning snapshot.

    Raises:
        ValueError: On unknown rule names, bad times, or missing keys.
    """
    try:
        return Planning(
            employees=[employee_from_dict(e) for e in data.get("employees", [])],
            shifts=[shift_from_dict(s) for s in data.get("shifts", [])],
            rules=ScheduleRules.from_dict(data.get("rules", {})),
        )
    except KeyError as e:
        raise ValueError(f"Missing field in planning data: {e}") from e


def planning_to_dict(planning: Planning) -> dict[str, Any]:
    return {
        "rules": planning.rules.to_dict(),
        "employees": [employee_to_dict(e) for e in planning.employees],
        "shifts": [shift_to_dict(s) for s in planning.shifts],
    }


def load_planning(path: Union[str, Path]) -> Planning:
    """Read a planning snapshot from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return planning_from_dict(data)


def save_planning(planning: Planning, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(planning_to_dict(planning), f, indent=2)
