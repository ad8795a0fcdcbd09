"""
Scheduler State model for the Round-Robin & Deadlock Simulator.

Holds everything the Round-Robin transition reads and writes in one tick:
the arrival list, ready queue, deferred requeues, running process and the
execution history.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from models.process import Process
from analysis.events import EventLog


@dataclass
class Segment:
    """
    Contiguous interval during which one process held the CPU.

    Invariant:
        start < end
    """
    pid: str
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Segment {self.pid}: start ({self.start}) must be < end ({self.end})")

    @property
    def duration(self) -> int:
        return self.end - self.start

    def as_dict(self) -> Dict:
        return {'id': self.pid, 'start': self.start, 'end': self.end}


@dataclass
class SchedulerState:
    """
    Complete Round-Robin engine state.

    Attributes:
        quantum: Time slice granted per dispatch (fixed for the run)
        arrivals: Configured processes, stable-sorted by arrival time
        time: Current simulated time
        running: Process holding the CPU, or None when idle
        ready_queue: Processes waiting for the CPU, head first
        pending_requeue: Processes preempted last tick, appended after arrivals
        segments: Gantt segments in execution order
        events: Event log of arrivals, dispatches, preemptions, completions
        idle_ticks: Ticks in which no process executed
        halted: True once all work is done; later ticks are no-ops
    """
    quantum: int
    arrivals: Tuple[Process, ...] = ()
    time: int = 0
    running: Optional[Process] = None
    ready_queue: List[Process] = field(default_factory=list)
    pending_requeue: List[Process] = field(default_factory=list)
    segments: List[Segment] = field(default_factory=list)
    events: EventLog = field(default_factory=EventLog)
    idle_ticks: int = 0
    halted: bool = False

    @property
    def max_arrival(self) -> int:
        """Latest arrival time among configured processes."""
        return max([p.arrival for p in self.arrivals], default=0)

    def copy(self) -> "SchedulerState":
        """
        Copy for the next tick.

        Processes are copied. Closed segments and logged events are never
        modified again, so they are shared; only the open (last) segment,
        which a tick may extend, is copied.
        """
        segments = list(self.segments)
        if segments:
            last = segments[-1]
            segments[-1] = Segment(last.pid, last.start, last.end)
        return SchedulerState(
            quantum=self.quantum,
            arrivals=self.arrivals,
            time=self.time,
            running=self.running.copy() if self.running else None,
            ready_queue=[p.copy() for p in self.ready_queue],
            pending_requeue=[p.copy() for p in self.pending_requeue],
            segments=segments,
            events=self.events.copy(),
            idle_ticks=self.idle_ticks,
            halted=self.halted,
        )

    def executed_time(self) -> Dict[str, int]:
        """Total executed time per process, from the Gantt segments."""
        totals = {p.pid: 0 for p in self.arrivals}
        for segment in self.segments:
            totals[segment.pid] = totals.get(segment.pid, 0) + segment.duration
        return totals

    def display(self) -> str:
        """Readable one-screen view of the scheduler."""
        output = []
        output.append(f"t={self.time} quantum={self.quantum}")
        output.append(f"  Running: {self.running.pid if self.running else 'idle'}")
        queue = ", ".join(f"{p.pid}({p.remaining})" for p in self.ready_queue) or "empty"
        output.append(f"  Ready queue: [{queue}]")
        if self.pending_requeue:
            output.append(f"  Deferred: [{', '.join(p.pid for p in self.pending_requeue)}]")
        return "\n".join(output)

    def assert_conservation(self, context: str = "") -> None:
        """
        Verify execution history is consistent with the configured bursts.

        Raises:
            AssertionError: If a process ran longer than its burst, a counter
                went negative, or busy + idle time disagrees with the clock
        """
        bursts = {p.pid: p.burst for p in self.arrivals}
        for pid, executed in self.executed_time().items():
            assert executed <= bursts[pid], (
                f"{pid} executed {executed} units but burst is {bursts[pid]} {context}"
            )

        active = list(self.ready_queue) + list(self.pending_requeue)
        if self.running:
            active.append(self.running)
        for process in active:
            assert process.remaining >= 0 and process.quantum_left >= 0, (
                f"Negative counter for {process.pid} {context}: {process!r}"
            )

        busy = sum(s.duration for s in self.segments)
        assert busy + self.idle_ticks == self.time, (
            f"Clock mismatch {context}: busy={busy} + idle={self.idle_ticks} != time={self.time}"
        )
