"""
Process model for the Round-Robin & Deadlock Simulator.

Represents a CPU-bound process in the Round-Robin scheduler with its burst
and the countdowns the dispatcher maintains.
"""

from dataclasses import dataclass, replace
from enum import Enum


class ProcessState(Enum):
    """Process states in the scheduler."""
    NEW = "NEW"
    READY = "READY"
    RUNNING = "RUNNING"
    FINISHED = "FINISHED"


@dataclass
class Process:
    """
    Represents a process in the Round-Robin simulation.

    Attributes:
        pid: Process identifier (unique, non-empty)
        arrival: Time unit at which the process enters the ready queue
        burst: Total CPU time the process requires
        remaining: CPU time still required (set to burst on admission)
        quantum_left: Time left in the current slice while dispatched
        state: Current process state

    Invariant:
        0 <= remaining <= burst and quantum_left >= 0
    """
    pid: str
    arrival: int
    burst: int
    remaining: int = -1
    quantum_left: int = 0
    state: ProcessState = ProcessState.NEW

    def __post_init__(self):
        """Validate the (id, arrival, burst) triple."""
        if self.pid is None or not str(self.pid).strip():
            raise ValueError("Each process needs an ID.")
        self.pid = str(self.pid).strip()
        if isinstance(self.arrival, bool) or not isinstance(self.arrival, int):
            raise ValueError(f"{self.pid}: arrival time must be an integer")
        if isinstance(self.burst, bool) or not isinstance(self.burst, int):
            raise ValueError(f"{self.pid}: burst time must be an integer")
        if self.arrival < 0:
            raise ValueError(f"{self.pid}: arrival time must be non-negative (got {self.arrival})")
        if self.burst <= 0:
            raise ValueError(f"{self.pid}: burst time must be positive (got {self.burst})")
        if self.remaining < 0:
            self.remaining = self.burst

    def admit(self) -> "Process":
        """Return a fresh copy entering the ready queue with its full burst."""
        return replace(self, remaining=self.burst, quantum_left=0, state=ProcessState.READY)

    def dispatch(self, quantum: int) -> None:
        """
        Give the process the CPU for one slice.

        Args:
            quantum: Configured time quantum
        """
        self.quantum_left = min(quantum, self.remaining)
        self.state = ProcessState.RUNNING

    def execute(self) -> None:
        """
        Run the process for one time unit.

        Raises:
            ValueError: If the process has nothing left to run in this slice
        """
        if self.remaining <= 0 or self.quantum_left <= 0:
            raise ValueError(
                f"{self.pid}: cannot execute (remaining={self.remaining}, "
                f"quantum_left={self.quantum_left})"
            )
        self.remaining -= 1
        self.quantum_left -= 1
        if self.remaining == 0:
            self.state = ProcessState.FINISHED

    def is_finished(self) -> bool:
        """True once the whole burst has been executed."""
        return self.remaining == 0

    def slice_expired(self) -> bool:
        """True when the current quantum is used up but work remains."""
        return self.quantum_left == 0 and self.remaining > 0

    def copy(self) -> "Process":
        """Independent copy for state snapshots."""
        return replace(self)

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"Process(pid={self.pid}, arrival={self.arrival}, burst={self.burst}, "
            f"remaining={self.remaining}, quantum_left={self.quantum_left}, "
            f"state={self.state.value})"
        )
