"""
Round-Robin engine for the Round-Robin & Deadlock Simulator.

Owns the configuration and current SchedulerState and exposes the
configure / tick / pause / resume / reset surface used by a driver.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from models.process import Process
from models.scheduler_state import SchedulerState
from algorithms import round_robin
from analysis.metrics import SchedulingMetrics, compute_metrics
from engine.validation import ProcessRow, validate_processes, validate_quantum
from utils.logger import SimulatorLogger


@dataclass
class RoundRobinSnapshot:
    """Observable state of the Round-Robin engine after a tick."""
    time: int
    running: Optional[Dict]
    ready_queue: List[Dict]
    segments: List[Dict]
    event_log: List[str]
    halted: bool
    paused: bool
    idle_ticks: int = 0
    deferred: List[str] = field(default_factory=list)


def _process_view(process: Process) -> Dict:
    return {
        'id': process.pid,
        'arrival': process.arrival,
        'burst': process.burst,
        'remaining': process.remaining,
        'quantum_left': process.quantum_left,
    }


class RoundRobinEngine:
    """
    Discrete-time Round-Robin scheduler.

    Every tick() replaces the current state with round_robin.tick(state),
    so a tick is applied completely or not at all.
    """

    def __init__(self, logger: Optional[SimulatorLogger] = None):
        self.logger = logger
        self.processes: Tuple[Process, ...] = ()
        self.quantum: Optional[int] = None
        self.state: Optional[SchedulerState] = None
        self.paused = False

    @property
    def configured(self) -> bool:
        return self.state is not None

    @property
    def halted(self) -> bool:
        return self.state is None or self.state.halted

    def configure(self, processes: Iterable[ProcessRow], quantum: int) -> None:
        """
        Validate input and prepare a run at time 0.

        Args:
            processes: Process rows (Process, dict or (id, arrival, burst))
            quantum: Time slice per dispatch

        Raises:
            ConfigurationError: If any row or the quantum is invalid
        """
        quantum = validate_quantum(quantum)
        validated = validate_processes(processes)

        self.processes = tuple(validated)
        self.quantum = quantum
        self.reset()

        if self.logger:
            self.logger.log(
                f"Configured {len(self.processes)} processes, quantum={quantum}", "debug"
            )

    def reset(self) -> None:
        """Discard the run and start over from the configured input."""
        if self.quantum is None:
            return
        self.state = round_robin.initial_state(self.processes, self.quantum)
        self.paused = False

    def tick(self) -> bool:
        """
        Advance one time unit.

        Returns:
            True if the state advanced, False if unconfigured or halted
        """
        if self.state is None:
            if self.logger:
                self.logger.log("tick ignored - engine not configured", "warning")
            return False
        if self.state.halted:
            return False

        before = len(self.state.events)
        self.state = round_robin.tick(self.state)

        if self.logger:
            for event in self.state.events.events[before:]:
                self.logger.log_event(event, "debug")
            if self.state.halted:
                self.logger.log(f"t={self.state.time}: all processes completed", "debug")
        return True

    def step(self) -> bool:
        """Driver hook: one step is one tick."""
        return self.tick()

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def run_to_completion(self, max_ticks: int = 100000) -> SchedulerState:
        """Tick synchronously until halted."""
        for _ in range(max_ticks):
            if not self.tick():
                break
        return self.state

    def snapshot(self) -> Optional[RoundRobinSnapshot]:
        """Current observable state, or None before configure()."""
        state = self.state
        if state is None:
            return None
        return RoundRobinSnapshot(
            time=state.time,
            running=_process_view(state.running) if state.running else None,
            ready_queue=[_process_view(p) for p in state.ready_queue],
            segments=[s.as_dict() for s in state.segments],
            event_log=state.events.lines(),
            halted=state.halted,
            paused=self.paused,
            idle_ticks=state.idle_ticks,
            deferred=[p.pid for p in state.pending_requeue],
        )

    def compute_metrics(self) -> SchedulingMetrics:
        """Metrics table for the segments recorded so far."""
        segments = self.state.segments if self.state else []
        return compute_metrics(segments, self.processes)
