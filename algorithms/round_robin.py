"""
Round-Robin Scheduling Algorithm for the Simulator.

Implements the per-tick transition of a preemptive Round-Robin scheduler
with a fixed time quantum on a single CPU.
"""

from typing import Iterable, Tuple

from models.process import Process, ProcessState
from models.scheduler_state import SchedulerState, Segment
from analysis.events import EventType, SimulationEvent


def initial_state(processes: Iterable[Process], quantum: int) -> SchedulerState:
    """
    Build the time-0 state for a run.

    Arrivals are stable-sorted by arrival time, so processes arriving at the
    same time keep their input order.

    Args:
        processes: Validated processes in input order
        quantum: Time slice per dispatch

    Returns:
        Fresh SchedulerState
    """
    arrivals: Tuple[Process, ...] = tuple(
        sorted((p.copy() for p in processes), key=lambda p: p.arrival)
    )
    return SchedulerState(quantum=quantum, arrivals=arrivals)


def tick(state: SchedulerState) -> SchedulerState:
    """
    Advance the scheduler by one time unit.

    Step Ordering (for deterministic execution):
    1. Admit processes whose arrival == time, in arrival-list order
    2. Append last tick's deferred requeues after those arrivals
    3. If the CPU is idle, dispatch the queue head with min(quantum, remaining)
    4. Execute one unit and record it in the Gantt history;
       completion frees the CPU, quantum expiry defers the requeue
    5. Advance time
    6. Halt once all arrivals are past and no work is left

    The input state is never modified; a halted state is returned unchanged.

    Args:
        state: Current scheduler state

    Returns:
        New SchedulerState after the tick
    """
    if state.halted:
        return state

    nxt = state.copy()
    t = nxt.time

    # Step 1: Admit arrivals
    arrived = [p.admit() for p in nxt.arrivals if p.arrival == t]
    if arrived:
        nxt.ready_queue.extend(arrived)
        nxt.events.add(SimulationEvent(
            step=t,
            event_type=EventType.ARRIVAL,
            process_id=", ".join(p.pid for p in arrived)
        ))

    # Step 2: Preempted-last-tick processes rejoin behind this tick's arrivals
    if nxt.pending_requeue:
        for process in nxt.pending_requeue:
            process.state = ProcessState.READY
        nxt.ready_queue.extend(nxt.pending_requeue)
        nxt.pending_requeue = []

    # Step 3: Dispatch
    if nxt.running is None and nxt.ready_queue:
        process = nxt.ready_queue.pop(0)
        process.dispatch(nxt.quantum)
        nxt.running = process
        nxt.events.add(SimulationEvent(step=t, event_type=EventType.DISPATCH, process_id=process.pid))

    # Step 4: Execute one unit
    if nxt.running is not None:
        running = nxt.running
        running.execute()
        _record_segment(nxt, running.pid, t)

        if running.is_finished():
            nxt.events.add(SimulationEvent(step=t + 1, event_type=EventType.COMPLETE, process_id=running.pid))
            nxt.running = None
        elif running.slice_expired():
            running.state = ProcessState.READY
            nxt.pending_requeue.append(running)
            nxt.events.add(SimulationEvent(step=t + 1, event_type=EventType.PREEMPT, process_id=running.pid))
            nxt.running = None
    else:
        nxt.idle_ticks += 1
        nxt.events.add(SimulationEvent(step=t, event_type=EventType.IDLE))

    # Step 5: Advance time
    nxt.time = t + 1

    # Step 6: Termination
    nxt.halted = is_halted(nxt)

    return nxt


def is_halted(state: SchedulerState) -> bool:
    """
    Check whether the run is over.

    All arrivals must be in the past and the CPU, ready queue and deferred
    list must all be empty.
    """
    return (
        state.time > state.max_arrival
        and state.running is None
        and not state.ready_queue
        and not state.pending_requeue
    )


def run_to_completion(state: SchedulerState, max_ticks: int = 100000) -> SchedulerState:
    """
    Tick until the scheduler halts.

    Args:
        state: Starting state
        max_ticks: Safety bound on the number of ticks

    Returns:
        Halted state (or the state reached after max_ticks)
    """
    for _ in range(max_ticks):
        if state.halted:
            break
        state = tick(state)
    return state


def _record_segment(state: SchedulerState, pid: str, t: int) -> None:
    """Extend the open Gantt segment for a contiguous run, else open [t, t+1)."""
    if state.segments:
        last = state.segments[-1]
        if last.pid == pid and last.end == t:
            last.end = t + 1
            return
    state.segments.append(Segment(pid=pid, start=t, end=t + 1))
