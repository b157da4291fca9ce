from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List

from .errors import InvalidInputError
from .models import ProcessSpec
from .roster import Roster, validate_process_fields


def load_workload(path: str | Path) -> List[ProcessSpec]:
    """
    Load a workload from a JSON or CSV file into a list of ProcessSpec objects.

    Entries without a pid are numbered P1, P2, ... in file order.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        entries = _load_json(path)
    elif suffix == ".csv":
        entries = _load_csv(path)
    else:
        raise InvalidInputError(f"Unsupported workload format: {suffix} (use .json or .csv)", field="workload")

    processes: List[ProcessSpec] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries, start=1):
        spec = _process_from_mapping(entry, default_pid=f"P{index}")
        if spec.pid in seen:
            raise InvalidInputError(f"Duplicate process id '{spec.pid}' in {path}", field="pid")
        seen.add(spec.pid)
        processes.append(spec)

    return processes


def load_roster(path: str | Path) -> Roster:
    roster = Roster()
    for spec in load_workload(path):
        roster.add_spec(spec)
    return roster


def _load_json(path: Path) -> list:
    # utf-8-sig also accepts files saved with a byte-order mark.
    with path.open("r", encoding="utf-8-sig") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Invalid JSON in {path}: {exc}", field="workload") from exc
        except UnicodeDecodeError as exc:
            raise InvalidInputError(f"Workload is not valid UTF-8 ({path}): {exc}", field="workload") from exc

    if not isinstance(raw, list):
        raise InvalidInputError("JSON workload must be a list of process objects", field="workload")

    return raw


def _load_csv(path: Path) -> list:
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        try:
            return list(csv.DictReader(f))
        except UnicodeDecodeError as exc:
            raise InvalidInputError(f"Workload is not valid UTF-8 ({path}): {exc}", field="workload") from exc
        except csv.Error as exc:
            raise InvalidInputError(f"Invalid CSV in {path}: {exc}", field="workload") from exc


def _process_from_mapping(mapping, default_pid: str) -> ProcessSpec:
    if not isinstance(mapping, dict):
        raise InvalidInputError(f"Invalid process entry: {mapping!r}", field="workload")

    pid_val = mapping.get("pid")
    pid = str(pid_val).strip() if pid_val not in (None, "") else default_pid

    priority_val = mapping.get("priority")
    priority = priority_val if priority_val not in (None, "") else 0

    try:
        arrival_time, burst_time, prio = validate_process_fields(
            mapping.get("arrival_time"),
            mapping.get("burst_time"),
            priority,
        )
    except InvalidInputError as exc:
        raise InvalidInputError(f"Invalid process entry {mapping!r}: {exc}", field=exc.field) from exc

    return ProcessSpec(pid=pid, arrival_time=arrival_time, burst_time=burst_time, priority=prio)
