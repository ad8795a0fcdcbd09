"""
Configuration validation for the Round-Robin & Deadlock engines.

Invalid input is rejected before a run starts; the engines never run with
a configuration that failed these checks.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from models.process import Process
from models.resource import Request

ProcessRow = Union[Process, Dict, Sequence]


class ConfigurationError(ValueError):
    """Raised when an engine is configured with invalid input."""
    pass


def validate_quantum(quantum) -> int:
    """
    Check the time quantum.

    Raises:
        ConfigurationError: If quantum is not a positive integer
    """
    if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
        raise ConfigurationError(f"Quantum must be a positive integer (got {quantum!r})")
    return quantum


def validate_processes(rows: Iterable[ProcessRow]) -> List[Process]:
    """
    Build validated processes from input rows.

    Accepted row shapes: Process, {"id", "arrival", "burst"} dict or an
    (id, arrival, burst) sequence.

    Args:
        rows: Process rows in input order

    Returns:
        List of Process in input order

    Raises:
        ConfigurationError: If the list is empty, a row is malformed, a
            value is out of range or an id is duplicated
    """
    processes = []
    seen = set()

    for i, row in enumerate(rows):
        try:
            process = _to_process(row)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Process row {i + 1}: {e}") from e

        if process.pid in seen:
            raise ConfigurationError(f"Duplicate process ID: {process.pid}")
        seen.add(process.pid)
        processes.append(process)

    if not processes:
        raise ConfigurationError("Please add at least one process.")

    return processes


def _to_process(row: ProcessRow) -> Process:
    """Convert one input row to a Process."""
    if isinstance(row, Process):
        return Process(pid=row.pid, arrival=row.arrival, burst=row.burst)
    if isinstance(row, dict):
        return Process(pid=row['id'], arrival=row['arrival'], burst=row['burst'])
    pid, arrival, burst = row
    return Process(pid=pid, arrival=arrival, burst=burst)


def validate_graph(
    processes: Sequence[str],
    resources: Sequence[str],
    allocation: Optional[Dict[str, Optional[str]]] = None,
    requests: Iterable = ()
) -> Tuple[List[str], List[str], Dict[str, Optional[str]], List[Request]]:
    """
    Validate an initial resource-allocation graph.

    Args:
        processes: Process ids
        resources: Resource ids
        allocation: Resource id -> holder (or None)
        requests: (process, resource) pairs, Request objects or
            {"process", "resource"} dicts; duplicates are dropped

    Returns:
        Tuple of (processes, resources, allocation, requests) normalised

    Raises:
        ConfigurationError: On blank or duplicate ids, or references to
            unknown processes/resources
    """
    process_ids = _validate_ids(processes, "process")
    resource_ids = _validate_ids(resources, "resource")
    known_p = set(process_ids)
    known_r = set(resource_ids)

    normalised_allocation = {rid: None for rid in resource_ids}
    for raw_rid, raw_holder in (allocation or {}).items():
        rid = _clean_id(raw_rid)
        holder = _clean_id(raw_holder) if raw_holder is not None else None
        if rid not in known_r:
            raise ConfigurationError(f"Allocation names unknown resource {rid}")
        if holder is not None and holder not in known_p:
            raise ConfigurationError(f"{rid} allocated to unknown process {holder}")
        normalised_allocation[rid] = holder

    normalised_requests: List[Request] = []
    for entry in requests:
        if isinstance(entry, Request):
            pid, rid = entry.pid, entry.rid
        elif isinstance(entry, dict):
            pid, rid = entry['process'], entry['resource']
        else:
            pid, rid = entry
        req = Request(_clean_id(pid), _clean_id(rid))
        if req.pid not in known_p:
            raise ConfigurationError(f"Request from unknown process {req.pid}")
        if req.rid not in known_r:
            raise ConfigurationError(f"Request for unknown resource {req.rid}")
        if req not in normalised_requests:
            normalised_requests.append(req)

    return process_ids, resource_ids, normalised_allocation, normalised_requests


def _clean_id(raw) -> str:
    return str(raw).strip() if raw is not None else ""


def _validate_ids(ids: Iterable[str], kind: str) -> List[str]:
    """Strip ids and reject blanks and duplicates."""
    result = []
    for raw in ids:
        ident = _clean_id(raw)
        if not ident:
            raise ConfigurationError(f"Each {kind} needs an ID.")
        if ident in result:
            raise ConfigurationError(f"Duplicate {kind} ID: {ident}")
        result.append(ident)
    return result
