"""
Quantum Analysis Library for the Round-Robin & Deadlock Simulator.

Called by simulator.py rr --compare-quanta to run the same workload under
several time quanta and compare the resulting metrics.
This is a library module, not a standalone CLI tool.
"""

from typing import Callable, List, Sequence
from dataclasses import dataclass

from models.process import Process
from models.scheduler_state import SchedulerState
from algorithms.round_robin import initial_state, run_to_completion
from analysis.events import EventType
from analysis.metrics import compute_metrics


@dataclass
class QuantumResult:
    """Results from one run at a given quantum."""
    quantum: int
    avg_waiting_time: float
    avg_turnaround_time: float
    makespan: int
    dispatches: int
    preemptions: int
    cpu_utilization: float

    def display(self) -> str:
        """Format results for display."""
        result = f"\nQuantum: {self.quantum}\n"
        result += f"  Avg Waiting Time: {self.avg_waiting_time:.2f}\n"
        result += f"  Avg Turnaround Time: {self.avg_turnaround_time:.2f}\n"
        result += f"  Makespan: {self.makespan}\n"
        result += f"  Dispatches: {self.dispatches} (preemptions: {self.preemptions})\n"
        result += f"  CPU Utilization: {self.cpu_utilization:.2f}%"
        return result


def analyze_quantum(
    processes: Sequence[Process],
    quantum: int,
    run_func: Callable[[SchedulerState], SchedulerState] = run_to_completion
) -> QuantumResult:
    """
    Run the workload to completion at one quantum and collect metrics.

    Args:
        processes: Validated processes
        quantum: Time quantum to test
        run_func: Function driving a state to its halt (injectable for tests)

    Returns:
        QuantumResult
    """
    if quantum <= 0:
        raise ValueError(f"Quantum must be positive (got {quantum})")

    final = run_func(initial_state(processes, quantum))
    metrics = compute_metrics(final.segments, processes)

    return QuantumResult(
        quantum=quantum,
        avg_waiting_time=metrics.avg_waiting_time,
        avg_turnaround_time=metrics.avg_turnaround_time,
        makespan=metrics.makespan,
        dispatches=len(final.events.get_events_by_type(EventType.DISPATCH)),
        preemptions=len(final.events.get_events_by_type(EventType.PREEMPT)),
        cpu_utilization=metrics.cpu_utilization
    )


def compare_quanta(processes: Sequence[Process], quanta: Sequence[int]) -> List[QuantumResult]:
    """
    Compare several quanta on the same workload.

    Args:
        processes: Validated processes
        quanta: Quanta to test, reported in this order

    Returns:
        One QuantumResult per quantum
    """
    return [analyze_quantum(processes, q) for q in quanta]


def generate_comparison_report(results: List[QuantumResult], scenario_path: str = None) -> str:
    """
    Generate formatted comparison report.

    Args:
        results: List of quantum results
        scenario_path: Path to scenario file (optional)

    Returns:
        Formatted string report
    """
    report = "\n" + "="*70 + "\n"
    report += "QUANTUM COMPARISON REPORT\n"
    report += "="*70 + "\n"
    if scenario_path:
        report += f"Scenario: {scenario_path}\n"
    report += f"Quanta tested: {', '.join(str(r.quantum) for r in results)}\n"
    report += "="*70 + "\n"

    for result in results:
        report += result.display()
        report += "\n" + "-"*70

    def format_best(metric_name: str, key_func, format_func) -> str:
        """Format the lowest value, handling ties. Returns empty string if all tied."""
        target_value = min(key_func(r) for r in results)
        winners = [r for r in results if key_func(r) == target_value]
        if len(winners) == len(results):
            return ""
        names = ", ".join(f"q={w.quantum}" for w in winners)
        return f"  {metric_name}: {names} ({format_func(target_value)})\n"

    report += "\n\nKEY INSIGHTS:\n"
    report += "-"*70 + "\n"
    if len(results) > 1:
        insights = [
            format_best("Lowest Waiting Time", lambda r: r.avg_waiting_time, lambda v: f"{v:.2f}"),
            format_best("Lowest Turnaround Time", lambda r: r.avg_turnaround_time, lambda v: f"{v:.2f}"),
            format_best("Fewest Dispatches", lambda r: r.dispatches, lambda v: f"{v}"),
        ]
        insights = [i for i in insights if i]
        if insights:
            for insight in insights:
                report += insight
        else:
            report += "  All quanta showed identical performance.\n"
    else:
        report += "  Only one quantum tested.\n"

    report += "="*70 + "\n"
    return report
