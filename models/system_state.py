"""
Resource Graph model for the Round-Robin & Deadlock Simulator.

Maintains the resource-allocation graph: allocation edges (resource ->
process), request edges (process -> resource) and the matrices derived
from them for wait-for projection.
"""

import numpy as np
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from models.resource import Resource, Request


@dataclass
class ResourceGraph:
    """
    Global resource-allocation graph for deadlock simulation.

    Attributes:
        processes: Process ids in insertion order
        resources: Single-instance resources in insertion order
        requests: Pending (process, resource) pairs in insertion order, unique
        allocation_matrix: [P][R] 1 where resource r is held by process p
        request_matrix: [P][R] 1 where process p has a pending request for r
    """
    processes: List[str] = field(default_factory=list)
    resources: List[Resource] = field(default_factory=list)
    requests: List[Request] = field(default_factory=list)

    # Matrices (initialized as None, computed on first access)
    _allocation_matrix: Optional[np.ndarray] = field(default=None, repr=False, compare=False)
    _request_matrix: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    @property
    def num_processes(self) -> int:
        """Number of processes in the graph."""
        return len(self.processes)

    @property
    def num_resources(self) -> int:
        """Number of resources in the graph."""
        return len(self.resources)

    @property
    def process_index(self) -> Dict[str, int]:
        """Map process id -> row index."""
        return {pid: i for i, pid in enumerate(self.processes)}

    @property
    def resource_index(self) -> Dict[str, int]:
        """Map resource id -> column index."""
        return {r.rid: j for j, r in enumerate(self.resources)}

    @property
    def allocation(self) -> Dict[str, Optional[str]]:
        """Map resource id -> holder (None when free)."""
        return {r.rid: r.holder for r in self.resources}

    @property
    def allocation_matrix(self) -> np.ndarray:
        """Get allocation matrix [P][R]."""
        if self._allocation_matrix is None:
            self._build_allocation_matrix()
        return self._allocation_matrix

    @property
    def request_matrix(self) -> np.ndarray:
        """Get pending request matrix [P][R]."""
        if self._request_matrix is None:
            self._build_request_matrix()
        return self._request_matrix

    def _build_allocation_matrix(self) -> None:
        """Build allocation matrix from resource holders."""
        self._allocation_matrix = np.zeros((self.num_processes, self.num_resources), dtype=int)
        index = self.process_index
        for j, resource in enumerate(self.resources):
            if resource.holder is not None and resource.holder in index:
                self._allocation_matrix[index[resource.holder]][j] = 1

    def _build_request_matrix(self) -> None:
        """Build request matrix from pending requests."""
        self._request_matrix = np.zeros((self.num_processes, self.num_resources), dtype=int)
        p_index = self.process_index
        r_index = self.resource_index
        for req in self.requests:
            self._request_matrix[p_index[req.pid]][r_index[req.rid]] = 1

    def refresh_matrices(self) -> None:
        """Drop cached matrices after a mutation."""
        self._allocation_matrix = None
        self._request_matrix = None

    def has_process(self, pid: str) -> bool:
        return pid in self.processes

    def get_resource(self, rid: str) -> Optional[Resource]:
        """Find a resource by id."""
        return next((r for r in self.resources if r.rid == rid), None)

    def holder_of(self, rid: str) -> Optional[str]:
        resource = self.get_resource(rid)
        return resource.holder if resource else None

    def has_request(self, pid: str, rid: str) -> bool:
        return Request(pid, rid) in self.requests

    def snapshot(self) -> Dict:
        """
        Create snapshot of the graph for reset.

        Returns:
            Dictionary containing serializable state
        """
        return {
            'processes': list(self.processes),
            'resources': [r.rid for r in self.resources],
            'allocation': self.allocation,
            'requests': [req.as_dict() for req in self.requests],
        }

    def restore(self, snapshot: Dict) -> None:
        """
        Restore the graph from a snapshot.

        Args:
            snapshot: State dictionary from a previous snapshot()
        """
        self.processes = list(snapshot['processes'])
        allocation = snapshot.get('allocation', {})
        self.resources = [Resource(rid, allocation.get(rid)) for rid in snapshot['resources']]
        self.requests = [Request(r['process'], r['resource']) for r in snapshot.get('requests', [])]
        self.refresh_matrices()

    def display(self) -> str:
        """
        Generate readable string representation of the graph.

        Returns:
            Formatted string showing allocation and pending requests
        """
        output = []
        output.append("\n" + "="*60)
        output.append("RESOURCE-ALLOCATION GRAPH")
        output.append("="*60)

        output.append("\nAllocation:")
        for resource in self.resources:
            output.append(f"  {resource.rid} -> {resource.holder or 'free'}")

        output.append("\nPending Requests:")
        if not self.requests:
            output.append("  none")
        for req in self.requests:
            output.append(f"  {req.pid} -> {req.rid}")

        output.append("\n" + "="*60)
        return "\n".join(output)

    def assert_consistency(self, context=""):
        """Verify the graph is well-formed.

        Args:
            context: Description of when this check is being run (for error messages)

        Raises:
            AssertionError: If a resource has more than one holder, a holder or
                request names an unknown id, or a request is duplicated
        """
        holders_per_resource = self.allocation_matrix.sum(axis=0)
        assert np.all(holders_per_resource <= 1), (
            f"Resource held by more than one process {context}\n"
            f"  Holders per resource: {list(holders_per_resource)}"
        )

        for resource in self.resources:
            assert resource.holder is None or resource.holder in self.processes, (
                f"{resource.rid} held by unknown process {resource.holder} {context}"
            )

        assert len(set(self.requests)) == len(self.requests), (
            f"Duplicate request pair {context}: {self.requests}"
        )
        known_resources = self.resource_index
        for req in self.requests:
            assert req.pid in self.processes and req.rid in known_resources, (
                f"Request {req.pid} -> {req.rid} names an unknown id {context}"
            )
