"""
Scenario Loader for the Round-Robin & Deadlock Simulator.

Loads and validates JSON scenario files for both engines and holds the
built-in default scenarios.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.process import Process
from models.resource import Request
from engine.validation import (
    ConfigurationError,
    validate_graph,
    validate_processes,
    validate_quantum,
)

DEFAULT_QUANTUM = 2

DEFAULT_RR_PROCESSES = [
    {'id': 'P1', 'arrival': 0, 'burst': 5},
    {'id': 'P2', 'arrival': 2, 'burst': 3},
    {'id': 'P3', 'arrival': 4, 'burst': 4},
]

DEFAULT_DEADLOCK_SCENARIO = {
    'processes': ['P1', 'P2', 'P3'],
    'resources': ['R1', 'R2'],
    'allocation': {'R1': 'P1', 'R2': 'P2'},
    'requests': [
        {'process': 'P1', 'resource': 'R2'},
        {'process': 'P2', 'resource': 'R1'},
    ],
}


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is invalid."""
    pass


@dataclass
class RoundRobinScenario:
    """Validated Round-Robin input."""
    processes: List[Process]
    quantum: int
    description: str = ""


@dataclass
class DeadlockScenario:
    """Validated initial resource-allocation graph."""
    processes: List[str]
    resources: List[str]
    allocation: Dict[str, Optional[str]]
    requests: List[Request] = field(default_factory=list)
    description: str = ""


def _read_json(file_path: str) -> Dict[str, Any]:
    """Read a scenario file into a dict."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")

    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")
    return data


def load_rr_scenario(file_path: str, quantum: Optional[int] = None) -> RoundRobinScenario:
    """
    Load a Round-Robin scenario from JSON file.

    Format:
        {"description": "...", "quantum": 2,
         "processes": [{"id": "P1", "arrival": 0, "burst": 5}, ...]}

    Args:
        file_path: Path to scenario JSON file
        quantum: Overrides the file's quantum when given

    Returns:
        RoundRobinScenario

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    data = _read_json(file_path)
    if 'processes' not in data:
        raise ScenarioLoadError("Scenario missing 'processes' field")

    for i, row in enumerate(data['processes']):
        if not isinstance(row, dict):
            raise ScenarioLoadError(f"Process row {i + 1} must be an object")
        for key in ('id', 'arrival', 'burst'):
            if key not in row:
                raise ScenarioLoadError(f"Process row {i + 1} missing required field: {key}")

    try:
        processes = validate_processes(data['processes'])
        chosen = quantum if quantum is not None else data.get('quantum', DEFAULT_QUANTUM)
        chosen = validate_quantum(chosen)
    except ConfigurationError as e:
        raise ScenarioLoadError(f"VALIDATION FAILED: {e}")

    return RoundRobinScenario(
        processes=processes,
        quantum=chosen,
        description=data.get('description', '')
    )


def load_deadlock_scenario(file_path: str) -> DeadlockScenario:
    """
    Load an initial resource-allocation graph from JSON file.

    Format:
        {"description": "...", "processes": ["P1", ...], "resources": ["R1", ...],
         "allocation": {"R1": "P1", "R2": null},
         "requests": [{"process": "P1", "resource": "R2"}, ...]}

    Raises:
        ScenarioLoadError: If file cannot be loaded or is invalid
    """
    data = _read_json(file_path)
    for key in ('processes', 'resources'):
        if key not in data:
            raise ScenarioLoadError(f"Scenario missing '{key}' field")

    for i, entry in enumerate(data.get('requests', [])):
        if not isinstance(entry, dict) or 'process' not in entry or 'resource' not in entry:
            raise ScenarioLoadError(f"Request {i + 1} must have 'process' and 'resource'")

    try:
        processes, resources, allocation, requests = validate_graph(
            data['processes'],
            data['resources'],
            data.get('allocation', {}),
            data.get('requests', [])
        )
    except ConfigurationError as e:
        raise ScenarioLoadError(f"VALIDATION FAILED: {e}")

    return DeadlockScenario(
        processes=processes,
        resources=resources,
        allocation=allocation,
        requests=requests,
        description=data.get('description', '')
    )


def default_rr_scenario(quantum: Optional[int] = None) -> RoundRobinScenario:
    """Built-in three-process workload."""
    try:
        chosen = validate_quantum(quantum if quantum is not None else DEFAULT_QUANTUM)
    except ConfigurationError as e:
        raise ScenarioLoadError(f"VALIDATION FAILED: {e}")
    return RoundRobinScenario(
        processes=validate_processes(DEFAULT_RR_PROCESSES),
        quantum=chosen,
        description="Default workload"
    )


def default_deadlock_scenario() -> DeadlockScenario:
    """Built-in two-process circular wait."""
    processes, resources, allocation, requests = validate_graph(
        DEFAULT_DEADLOCK_SCENARIO['processes'],
        DEFAULT_DEADLOCK_SCENARIO['resources'],
        DEFAULT_DEADLOCK_SCENARIO['allocation'],
        DEFAULT_DEADLOCK_SCENARIO['requests']
    )
    return DeadlockScenario(processes, resources, allocation, requests, "Default circular wait")
