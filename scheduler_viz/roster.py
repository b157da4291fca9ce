from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from .errors import InvalidInputError, UnknownProcessError
from .models import ProcessSpec

logger = logging.getLogger(__name__)


def parse_int(value, field: str) -> int:
    """
    Coerce user input (an int or a numeric string) to an int.

    Raises InvalidInputError naming the field for anything else.
    """
    if value is None:
        raise InvalidInputError(f"{field} is required", field=field)
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be an integer, got {value!r}", field=field)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidInputError(f"{field} is required", field=field)
        try:
            return int(text)
        except ValueError:
            raise InvalidInputError(f"{field} must be an integer, got {value!r}", field=field) from None
    raise InvalidInputError(f"{field} must be an integer, got {value!r}", field=field)


def validate_process_fields(arrival, burst, priority) -> tuple[int, int, int]:
    arrival_time = parse_int(arrival, "arrival_time")
    burst_time = parse_int(burst, "burst_time")
    prio = parse_int(priority, "priority")

    if arrival_time < 0:
        raise InvalidInputError("arrival_time must be >= 0", field="arrival_time")
    if burst_time <= 0:
        raise InvalidInputError("burst_time must be > 0", field="burst_time")

    return arrival_time, burst_time, prio


def parse_quantum(value) -> int:
    quantum = parse_int(value, "quantum")
    if quantum <= 0:
        raise InvalidInputError("quantum must be > 0", field="quantum")
    return quantum


class Roster:
    """
    Caller-owned list of processes waiting to be simulated.

    Ids are assigned as P1, P2, ... from a counter local to this roster.
    Deleting a process does not reuse its id; clear() starts over at P1.
    Every mutating call validates first, so a rejected call leaves the
    roster exactly as it was.
    """

    def __init__(self) -> None:
        self._processes: Dict[str, ProcessSpec] = {}
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._processes)

    def __iter__(self) -> Iterator[ProcessSpec]:
        return iter(self.processes)

    def __contains__(self, pid: object) -> bool:
        return pid in self._processes

    @property
    def processes(self) -> List[ProcessSpec]:
        return sorted(self._processes.values(), key=lambda p: (p.arrival_time, p.pid))

    def snapshot(self) -> List[ProcessSpec]:
        return self.processes

    def get(self, pid: str) -> ProcessSpec:
        try:
            return self._processes[pid]
        except KeyError:
            raise UnknownProcessError(pid) from None

    def add(self, arrival, burst, priority=0) -> ProcessSpec:
        arrival_time, burst_time, prio = validate_process_fields(arrival, burst, priority)

        spec = ProcessSpec(
            pid=f"P{self._next_id}",
            arrival_time=arrival_time,
            burst_time=burst_time,
            priority=prio,
        )
        self._next_id += 1
        self._processes[spec.pid] = spec
        logger.info("added %s (arrival=%d burst=%d priority=%d)", spec.pid, arrival_time, burst_time, prio)
        return spec

    def add_spec(self, spec: ProcessSpec) -> ProcessSpec:
        """
        Insert an already-identified process, e.g. one loaded from a workload file.

        The id counter moves past any numeric P<n> id so later add() calls
        never collide with it.
        """
        if spec.pid in self._processes:
            raise InvalidInputError(f"duplicate process id '{spec.pid}'", field="pid")
        validate_process_fields(spec.arrival_time, spec.burst_time, spec.priority)

        self._processes[spec.pid] = spec
        suffix = spec.pid[1:]
        if spec.pid.startswith("P") and suffix.isdigit():
            self._next_id = max(self._next_id, int(suffix) + 1)
        return spec

    def update(
        self,
        pid: str,
        arrival: Optional[object] = None,
        burst: Optional[object] = None,
        priority: Optional[object] = None,
    ) -> ProcessSpec:
        current = self.get(pid)
        arrival_time, burst_time, prio = validate_process_fields(
            current.arrival_time if arrival is None else arrival,
            current.burst_time if burst is None else burst,
            current.priority if priority is None else priority,
        )

        updated = replace(current, arrival_time=arrival_time, burst_time=burst_time, priority=prio)
        self._processes[pid] = updated
        logger.info("updated %s (arrival=%d burst=%d priority=%d)", pid, arrival_time, burst_time, prio)
        return updated

    def remove(self, pid: str) -> ProcessSpec:
        spec = self.get(pid)
        del self._processes[pid]
        logger.info("removed %s", pid)
        return spec

    def clear(self) -> None:
        self._processes.clear()
        self._next_id = 1
        logger.info("roster cleared")
