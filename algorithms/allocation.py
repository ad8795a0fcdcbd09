"""
Resource Allocation operations for the Simulator.

Mutating operations on the resource-allocation graph. Each operation either
applies its full effect or leaves the graph untouched and reports why.
"""

from typing import Optional, Tuple

from models.resource import Resource, Request
from models.system_state import ResourceGraph


def add_process(graph: ResourceGraph, pid: str) -> Tuple[bool, str]:
    """
    Register a process node.

    Returns:
        Tuple of (added, reason)
    """
    pid = (pid or "").strip()
    if not pid:
        return False, "process id is empty"
    if graph.has_process(pid):
        return False, f"process {pid} already exists"

    graph.processes.append(pid)
    graph.refresh_matrices()
    return True, f"process {pid} added"


def add_resource(graph: ResourceGraph, rid: str) -> Tuple[bool, str]:
    """
    Register a free resource node.

    Returns:
        Tuple of (added, reason)
    """
    rid = (rid or "").strip()
    if not rid:
        return False, "resource id is empty"
    if graph.get_resource(rid) is not None:
        return False, f"resource {rid} already exists"

    graph.resources.append(Resource(rid))
    graph.refresh_matrices()
    return True, f"resource {rid} added"


def allocate(graph: ResourceGraph, rid: str, pid: str) -> Tuple[bool, str]:
    """
    Assign a free resource to a process.

    A pending request for the same (process, resource) pair is considered
    fulfilled and removed.

    Args:
        graph: Resource graph
        rid: Resource to assign
        pid: Receiving process

    Returns:
        Tuple of (granted, reason)
    """
    resource = graph.get_resource(rid)
    if resource is None:
        return False, f"unknown resource {rid}"
    if not graph.has_process(pid):
        return False, f"unknown process {pid}"
    if not resource.allocate(pid):
        return False, f"{rid} busy (held by {resource.holder})"

    fulfilled = Request(pid, rid)
    if fulfilled in graph.requests:
        graph.requests.remove(fulfilled)
    graph.refresh_matrices()
    return True, f"{rid} -> {pid}"


def request(graph: ResourceGraph, pid: str, rid: str) -> Tuple[bool, str]:
    """
    Add a request edge process -> resource (idempotent).

    Returns:
        Tuple of (added, reason); a duplicate pair is reported, not added
    """
    if not graph.has_process(pid):
        return False, f"unknown process {pid}"
    if graph.get_resource(rid) is None:
        return False, f"unknown resource {rid}"
    if graph.has_request(pid, rid):
        return False, f"duplicate request {pid} -> {rid}"

    graph.requests.append(Request(pid, rid))
    graph.refresh_matrices()
    return True, f"{pid} -> {rid}"


def cancel_request(graph: ResourceGraph, pid: str, rid: str) -> Tuple[bool, str]:
    """
    Withdraw a pending request.

    Returns:
        Tuple of (removed, reason)
    """
    pending = Request(pid, rid)
    if pending not in graph.requests:
        return False, f"no pending request {pid} -> {rid}"

    graph.requests.remove(pending)
    graph.refresh_matrices()
    return True, f"{pid} -> {rid}"


def release(graph: ResourceGraph, rid: str) -> Tuple[Optional[str], str]:
    """
    Free a resource.

    Returns:
        Tuple of (previous holder or None, reason)
    """
    resource = graph.get_resource(rid)
    if resource is None:
        return None, f"unknown resource {rid}"
    if resource.is_free():
        return None, f"{rid} is not held"

    holder = resource.release()
    graph.refresh_matrices()
    return holder, f"{rid} from {holder}"


def grant_step(graph: ResourceGraph) -> Optional[Request]:
    """
    Grant at most one pending request (FCFS over insertion order).

    Scans requests in the order they were made and grants the first whose
    resource is free. No priority or aging is applied.

    Args:
        graph: Resource graph

    Returns:
        The granted Request, or None if every requested resource is busy
    """
    for req in graph.requests:
        resource = graph.get_resource(req.rid)
        if resource is not None and resource.is_free():
            resource.allocate(req.pid)
            graph.requests.remove(req)
            graph.refresh_matrices()
            return req
    return None
