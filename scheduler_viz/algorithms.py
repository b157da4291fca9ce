from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Iterable, List, Optional

from .errors import EmptyRosterError, InvalidInputError
from .metrics import compute_system_metrics
from .models import GanttSegment, ProcessRunState, ProcessSpec, SimulationResult

logger = logging.getLogger(__name__)


def _arrival_order(state: ProcessRunState):
    return (state.arrival_time, state.pid)


def _prepare(processes: Iterable[ProcessSpec]) -> List[ProcessRunState]:
    """
    Build the per-run working copy, sorted by (arrival time, pid).

    The caller's specs are frozen and never touched; all mutation happens on
    the run states created here.
    """
    states = [ProcessRunState.from_spec(p) for p in processes]
    if not states:
        raise EmptyRosterError()
    states.sort(key=_arrival_order)
    return states


def _finalize(
    algorithm: str,
    quantum: Optional[int],
    states: List[ProcessRunState],
    timeline: List[GanttSegment],
) -> SimulationResult:
    result = SimulationResult(algorithm=algorithm, quantum=quantum, processes=states, timeline=timeline)
    compute_system_metrics(result)
    return result


def _run_to_completion(state: ProcessRunState, time: int, timeline: List[GanttSegment]) -> int:
    start_time = time
    end_time = start_time + state.burst_time
    logger.debug("t=%d dispatch %s until %d", start_time, state.pid, end_time)

    state.start_time = start_time
    timeline.append(GanttSegment(pid=state.pid, start_time=start_time, end_time=end_time))
    state.finish(end_time)
    return end_time


def simulate_fcfs(processes: Iterable[ProcessSpec]) -> SimulationResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    states = _prepare(processes)

    time = 0
    timeline: List[GanttSegment] = []

    for state in states:
        if time < state.arrival_time:
            logger.debug("t=%d idle until %d", time, state.arrival_time)
            time = state.arrival_time
        time = _run_to_completion(state, time, timeline)

    return _finalize("FCFS", None, states, timeline)


def _simulate_by_selection(
    processes: Iterable[ProcessSpec],
    primary_key: Callable[[ProcessRunState], int],
    algorithm: str,
) -> SimulationResult:
    """
    Shared loop for the non-preemptive selection policies.

    At each decision point, among processes that have arrived and are not yet
    completed, run the one with the smallest primary key to completion. Ties
    fall back to earlier arrival, then pid. When nothing is ready the clock
    jumps straight to the next arrival.
    """
    states = _prepare(processes)
    pending: List[ProcessRunState] = list(states)

    time = 0
    timeline: List[GanttSegment] = []

    while pending:
        ready = [s for s in pending if s.arrival_time <= time]

        if not ready:
            next_arrival = min(s.arrival_time for s in pending)
            logger.debug("t=%d idle until %d", time, next_arrival)
            time = next_arrival
            continue

        state = min(ready, key=lambda s: (primary_key(s), s.arrival_time, s.pid))
        time = _run_to_completion(state, time, timeline)
        pending.remove(state)

    return _finalize(algorithm, None, states, timeline)


def simulate_sjf(processes: Iterable[ProcessSpec]) -> SimulationResult:
    """
    Shortest Job First (non-preemptive), keyed on burst time.
    """
    return _simulate_by_selection(processes, lambda s: s.burst_time, "SJF (non-preemptive)")


def simulate_priority(processes: Iterable[ProcessSpec]) -> SimulationResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority.
    """
    return _simulate_by_selection(processes, lambda s: s.priority, "Priority (non-preemptive)")


def simulate_round_robin(processes: Iterable[ProcessSpec], quantum: Optional[int]) -> SimulationResult:
    """
    Round Robin scheduling with a fixed time quantum.

    After each slice, processes that arrived while it ran are queued ahead of
    the process that was just preempted.
    """
    states = _prepare(processes)
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise InvalidInputError("Round Robin requires a positive integer quantum", field="quantum")

    count = len(states)

    time = 0
    timeline: List[GanttSegment] = []
    ready: Deque[ProcessRunState] = deque()
    next_index = 0

    def enqueue_arrivals(current_time: int) -> None:
        nonlocal next_index
        while next_index < count and states[next_index].arrival_time <= current_time:
            ready.append(states[next_index])
            next_index += 1

    while next_index < count or ready:
        enqueue_arrivals(time)

        if not ready:
            next_arrival = states[next_index].arrival_time
            logger.debug("t=%d idle until %d", time, next_arrival)
            time = next_arrival
            continue

        state = ready.popleft()
        if state.start_time is None:
            state.start_time = time

        run_time = min(quantum, state.remaining_time)
        slice_end = time + run_time
        logger.debug("t=%d dispatch %s for %d", time, state.pid, run_time)
        timeline.append(GanttSegment(pid=state.pid, start_time=time, end_time=slice_end))

        time = slice_end
        state.remaining_time -= run_time

        enqueue_arrivals(time)

        if state.remaining_time > 0:
            ready.append(state)
        else:
            state.finish(time)

    return _finalize("Round Robin", quantum, states, timeline)


ALGORITHMS = {
    "fcfs": simulate_fcfs,
    "sjf": simulate_sjf,
    "priority": simulate_priority,
    "rr": simulate_round_robin,
}

QUANTUM_ALGORITHMS = {"rr"}


def run_algorithm(name: str, processes: Iterable[ProcessSpec], quantum: Optional[int] = None) -> SimulationResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round robin.
    """
    key = name.lower()
    if key not in ALGORITHMS:
        choices = ", ".join(ALGORITHMS)
        raise InvalidInputError(f"Unknown algorithm '{name}' (choose from {choices})", field="algorithm")

    func = ALGORITHMS[key]
    if key in QUANTUM_ALGORITHMS:
        return func(processes, quantum)
    return func(processes)
