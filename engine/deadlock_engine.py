"""
Deadlock engine for the Round-Robin & Deadlock Simulator.

Wraps the resource graph with the allocate / request / release / grant
surface, records every operation in an event log and answers wait-for and
deadlock queries on demand.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.system_state import ResourceGraph
from algorithms import allocation as ops
from algorithms.detection import detect_deadlock, project_wait_for
from analysis.events import EventLog, EventType, SimulationEvent
from engine.validation import validate_graph
from utils.logger import SimulatorLogger


@dataclass
class DeadlockSnapshot:
    """Observable state of the deadlock engine."""
    processes: List[str]
    resources: List[str]
    allocation: Dict[str, Optional[str]]
    requests: List[Dict]
    wait_for_edges: List[Tuple[str, str]]
    deadlocked: List[str]
    event_log: List[str]
    paused: bool

    @property
    def has_deadlock(self) -> bool:
        return len(self.deadlocked) > 0


class DeadlockEngine:
    """
    Resource-allocation graph with FCFS request granting.

    Failed operations never raise: the graph is left unchanged and a
    diagnostic line is added to the event log.
    """

    def __init__(self, logger: Optional[SimulatorLogger] = None):
        self.logger = logger
        self.graph = ResourceGraph()
        self.events = EventLog()
        self.paused = False
        self._operations = 0
        self._initial = self.graph.snapshot()

    @property
    def halted(self) -> bool:
        """The graph never reaches a terminal state on its own."""
        return False

    def configure(
        self,
        processes: Sequence[str] = (),
        resources: Sequence[str] = (),
        allocation: Optional[Dict[str, Optional[str]]] = None,
        requests: Iterable = ()
    ) -> None:
        """
        Load an initial graph; reset() returns to it.

        Raises:
            ConfigurationError: On blank/duplicate ids or unknown references
        """
        process_ids, resource_ids, holders, pending = validate_graph(
            processes, resources, allocation, requests
        )
        self._initial = {
            'processes': process_ids,
            'resources': resource_ids,
            'allocation': holders,
            'requests': [req.as_dict() for req in pending],
        }
        self.reset()

    def reset(self) -> None:
        """Discard all changes and the log; restore the configured graph."""
        self.graph = ResourceGraph()
        self.graph.restore(self._initial)
        self.graph.assert_consistency("after reset")
        self.events = EventLog()
        self.paused = False
        self._operations = 0

    def add_process(self, pid: Optional[str] = None) -> bool:
        """Add a process node; without an id the next free P<n> is used."""
        if pid is None:
            pid = self._next_id("P", self.graph.processes)
        ok, reason = ops.add_process(self.graph, pid)
        if not ok:
            self._diagnose("add_process", reason)
        return ok

    def add_resource(self, rid: Optional[str] = None) -> bool:
        """Add a free resource node; without an id the next free R<n> is used."""
        if rid is None:
            rid = self._next_id("R", [r.rid for r in self.graph.resources])
        ok, reason = ops.add_resource(self.graph, rid)
        if not ok:
            self._diagnose("add_resource", reason)
        return ok

    def allocate(self, rid: str, pid: str) -> bool:
        """Assign a free resource to a process."""
        ok, reason = ops.allocate(self.graph, rid, pid)
        if ok:
            self._record(EventType.ALLOCATION, pid, rid)
            self.graph.assert_consistency(f"after allocating {rid} to {pid}")
        elif self.graph.get_resource(rid) is not None and self.graph.has_process(pid):
            self._record(EventType.ALLOCATION_FAILED, pid, rid)
            if self.logger:
                self.logger.log_rejected("allocate", reason)
        else:
            self._diagnose("allocate", reason)
        return ok

    def request(self, pid: str, rid: str) -> bool:
        """Add a request edge (idempotent)."""
        ok, reason = ops.request(self.graph, pid, rid)
        if ok:
            self._record(EventType.REQUEST, pid, rid)
        else:
            self._diagnose("request", reason)
        return ok

    def cancel_request(self, pid: str, rid: str) -> bool:
        """Withdraw a pending request."""
        ok, reason = ops.cancel_request(self.graph, pid, rid)
        if ok:
            self._record(EventType.CANCEL, pid, rid)
        else:
            self._diagnose("cancel_request", reason)
        return ok

    def release(self, rid: str) -> Optional[str]:
        """
        Free a resource.

        Returns:
            The previous holder, or None if nothing was released
        """
        holder, reason = ops.release(self.graph, rid)
        if holder is not None:
            self._record(EventType.RELEASE, holder, rid)
        else:
            self._diagnose("release", reason)
        return holder

    def grant_step(self) -> bool:
        """
        Grant at most one pending request whose resource is free.

        Returns:
            True if a request was granted
        """
        granted = ops.grant_step(self.graph)
        if granted is None:
            self._record(EventType.NO_OP)
            return False
        self._record(EventType.GRANT, granted.pid, granted.rid)
        self.graph.assert_consistency(f"after granting {granted.rid} to {granted.pid}")
        return True

    def step(self) -> bool:
        """Driver hook: one step is one grant attempt."""
        return self.grant_step()

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def project_wait_for(self) -> List[Tuple[str, str]]:
        return project_wait_for(self.graph)

    def detect_deadlock(self) -> List[str]:
        """Ids of processes on a wait-for cycle, in process order."""
        _, deadlocked = detect_deadlock(self.graph)
        return deadlocked

    def snapshot(self) -> DeadlockSnapshot:
        return DeadlockSnapshot(
            processes=list(self.graph.processes),
            resources=[r.rid for r in self.graph.resources],
            allocation=self.graph.allocation,
            requests=[req.as_dict() for req in self.graph.requests],
            wait_for_edges=self.project_wait_for(),
            deadlocked=self.detect_deadlock(),
            event_log=self.events.lines(),
            paused=self.paused,
        )

    def _record(self, event_type: EventType, pid: str = None, rid: str = None, message: str = "") -> None:
        self._operations += 1
        event = SimulationEvent(
            step=self._operations,
            event_type=event_type,
            process_id=pid,
            resource_id=rid,
            message=message
        )
        self.events.add(event)
        if self.logger:
            self.logger.log_event(event, "debug")

    def _diagnose(self, operation: str, reason: str) -> None:
        self._record(EventType.DIAGNOSTIC, message=f"{operation} ignored: {reason}")
        if self.logger:
            self.logger.log_rejected(operation, reason)

    @staticmethod
    def _next_id(prefix: str, existing: List[str]) -> str:
        n = len(existing) + 1
        while f"{prefix}{n}" in existing:
            n += 1
        return f"{prefix}{n}"
