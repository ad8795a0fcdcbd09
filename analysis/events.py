"""
Event Model for the Round-Robin & Deadlock Simulator.

Defines event types for tracking scheduler and resource-graph actions.
The string form of each event is the line shown in the event log.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class EventType(Enum):
    """Types of events in the simulation."""
    # Round-Robin
    ARRIVAL = "arrival"
    DISPATCH = "dispatch"
    PREEMPT = "preempt"
    COMPLETE = "complete"
    IDLE = "idle"
    # Resource graph
    ALLOCATION = "allocation"
    ALLOCATION_FAILED = "allocation_failed"
    REQUEST = "request"
    CANCEL = "cancel"
    RELEASE = "release"
    GRANT = "grant"
    NO_OP = "no_op"
    DIAGNOSTIC = "diagnostic"


@dataclass
class SimulationEvent:
    """
    Represents a single event in the simulation.

    Attributes:
        step: Simulated time (RR) or operation counter (deadlock) of the event
        event_type: Type of event
        process_id: Process involved; for ARRIVAL a comma-separated batch
        resource_id: Resource involved (if applicable)
        message: Free text for diagnostics
    """
    step: int
    event_type: EventType
    process_id: Optional[str] = None
    resource_id: Optional[str] = None
    message: str = ""

    def __str__(self) -> str:
        """Format event for logging."""
        t = f"t={self.step}"

        if self.event_type == EventType.ARRIVAL:
            return f"{t}: arrived -> {self.process_id}"
        elif self.event_type == EventType.DISPATCH:
            return f"{t}: {self.process_id} dispatched to CPU (RR)"
        elif self.event_type == EventType.PREEMPT:
            return f"{t}: {self.process_id} time slice over -> requeued (deferred)"
        elif self.event_type == EventType.COMPLETE:
            return f"{t}: {self.process_id} completed"
        elif self.event_type == EventType.IDLE:
            return f"{t}: CPU idle"
        elif self.event_type == EventType.ALLOCATION:
            return f"alloc: {self.resource_id} -> {self.process_id}"
        elif self.event_type == EventType.ALLOCATION_FAILED:
            return f"alloc-failed: {self.resource_id} busy"
        elif self.event_type == EventType.REQUEST:
            return f"req: {self.process_id} -> {self.resource_id}"
        elif self.event_type == EventType.CANCEL:
            return f"cancel: {self.process_id} -> {self.resource_id}"
        elif self.event_type == EventType.RELEASE:
            return f"rel: {self.resource_id} from {self.process_id}"
        elif self.event_type == EventType.GRANT:
            return f"grant: {self.resource_id} -> {self.process_id}"
        elif self.event_type == EventType.NO_OP:
            return "no-op: all requested resources busy"
        else:
            return f"{self.event_type.value}: {self.message}"


@dataclass
class EventLog:
    """Collection of simulation events."""
    events: list = None

    def __post_init__(self):
        if self.events is None:
            self.events = []

    def add(self, event: SimulationEvent) -> None:
        """Add an event to the log."""
        self.events.append(event)

    def copy(self) -> "EventLog":
        """New log sharing the recorded events (events are not modified once added)."""
        return EventLog(events=list(self.events))

    def get_events_by_type(self, event_type: EventType) -> list:
        """Get all events of a specific type."""
        return [e for e in self.events if e.event_type == event_type]

    def lines(self) -> List[str]:
        """Event log as display lines."""
        return [str(event) for event in self.events]

    def __len__(self) -> int:
        return len(self.events)
