"""
Metrics for the Round-Robin & Deadlock Simulator.

Derives completion, turnaround and waiting times from the Gantt history.
All values are kept at full precision; rounding happens only for display.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
import statistics

from models.process import Process
from models.scheduler_state import Segment


@dataclass
class ProcessMetrics:
    """
    Per-process row of the metrics table.

    completion/turnaround/waiting are None for a process that never ran.
    """
    pid: str
    arrival: int
    burst: int
    completion: Optional[int] = None
    turnaround: Optional[int] = None
    waiting: Optional[int] = None

    def is_complete(self) -> bool:
        return self.completion is not None


@dataclass
class SchedulingMetrics:
    """
    Per-process and aggregate metrics of a Round-Robin run.

    Aggregates:
    1. Average Waiting Time: mean of (turnaround - burst)
    2. Average Turnaround Time: mean of (completion - arrival)
    3. CPU Utilization %: busy time / makespan x 100
    4. Throughput: processes / makespan
    """
    rows: List[ProcessMetrics] = field(default_factory=list)
    makespan: int = 0
    busy_time: int = 0

    @property
    def completed_rows(self) -> List[ProcessMetrics]:
        return [r for r in self.rows if r.is_complete()]

    @property
    def avg_waiting_time(self) -> float:
        rows = self.completed_rows
        if not rows:
            return 0.0
        return statistics.mean(r.waiting for r in rows)

    @property
    def avg_turnaround_time(self) -> float:
        rows = self.completed_rows
        if not rows:
            return 0.0
        return statistics.mean(r.turnaround for r in rows)

    @property
    def cpu_utilization(self) -> float:
        if self.makespan == 0:
            return 0.0
        return (self.busy_time / self.makespan) * 100

    @property
    def throughput(self) -> float:
        if self.makespan == 0:
            return 0.0
        return len(self.completed_rows) / self.makespan

    def row(self, pid: str) -> ProcessMetrics:
        """Look up the row of one process."""
        for r in self.rows:
            if r.pid == pid:
                return r
        raise KeyError(pid)

    def rounded(self) -> Dict[str, float]:
        """Aggregates rounded to 2 decimals for display."""
        return {
            'avg_waiting_time': round(self.avg_waiting_time, 2),
            'avg_turnaround_time': round(self.avg_turnaround_time, 2),
            'cpu_utilization': round(self.cpu_utilization, 2),
            'throughput': round(self.throughput, 2),
        }


def compute_metrics(segments: Iterable[Segment], processes: Iterable[Process]) -> SchedulingMetrics:
    """
    Compute the metrics table from Gantt segments.

    Formulas:
        completion = max end among the process's segments
        turnaround = completion - arrival
        waiting    = turnaround - burst

    Args:
        segments: Gantt segments of the run
        processes: Configured processes (table order follows this order)

    Returns:
        SchedulingMetrics with one row per process
    """
    segments = list(segments)
    completion: Dict[str, int] = {}
    for s in segments:
        completion[s.pid] = max(completion.get(s.pid, s.end), s.end)

    rows = []
    for p in processes:
        ct = completion.get(p.pid)
        if ct is None:
            rows.append(ProcessMetrics(pid=p.pid, arrival=p.arrival, burst=p.burst))
            continue
        tat = ct - p.arrival
        rows.append(ProcessMetrics(
            pid=p.pid,
            arrival=p.arrival,
            burst=p.burst,
            completion=ct,
            turnaround=tat,
            waiting=tat - p.burst
        ))

    return SchedulingMetrics(
        rows=rows,
        makespan=max([s.end for s in segments], default=0),
        busy_time=sum(s.duration for s in segments)
    )


def format_gantt(segments: Iterable[Segment]) -> str:
    """
    Render segments as a one-line text Gantt chart.

    Example: "|0 P1 2|2 P2 4|4 P1 6|"; gaps are shown as "idle".
    """
    parts = []
    cursor = 0
    for s in segments:
        if s.start > cursor:
            parts.append(f"{cursor} idle {s.start}")
        parts.append(f"{s.start} {s.pid} {s.end}")
        cursor = s.end
    if not parts:
        return "|"
    return "|" + "|".join(parts) + "|"


def format_metrics_report(
    metrics: SchedulingMetrics,
    quantum: int = None,
    scenario: str = None,
    verbose: bool = False
) -> str:
    """
    Format metrics for display at end of simulation.

    Args:
        metrics: SchedulingMetrics of a finished run
        quantum: Quantum used in the run
        scenario: Scenario file path
        verbose: If True, include the metric formulas

    Returns:
        Formatted metrics report string
    """
    lines = []
    lines.append("\n" + "="*60)
    lines.append("ROUND-ROBIN METRICS")
    lines.append("="*60)

    if quantum is not None:
        lines.append(f"Quantum: {quantum}")
    if scenario:
        lines.append(f"Scenario: {scenario}")
    if quantum is not None or scenario:
        lines.append("")

    lines.append(f"{'Process':<10} {'AT':>4} {'BT':>4} {'CT':>4} {'TAT':>5} {'WT':>5}")
    lines.append("-" * 60)
    for r in metrics.rows:
        if r.is_complete():
            lines.append(
                f"{r.pid:<10} {r.arrival:>4} {r.burst:>4} {r.completion:>4} "
                f"{r.turnaround:>5} {r.waiting:>5}"
            )
        else:
            lines.append(f"{r.pid:<10} {r.arrival:>4} {r.burst:>4} {'-':>4} {'-':>5} {'-':>5}")

    shown = metrics.rounded()
    lines.append("")
    lines.append(f"Average Waiting Time: {shown['avg_waiting_time']:.2f}")
    lines.append(f"Average Turnaround Time: {shown['avg_turnaround_time']:.2f}")
    lines.append(f"CPU Utilization: {shown['cpu_utilization']:.2f}%")
    lines.append(f"Throughput: {metrics.throughput:.4f} processes/unit")

    if verbose:
        lines.append("")
        lines.append("METRIC FORMULAS:")
        lines.append("-" * 60)
        lines.append("CT  = end of the process's last Gantt segment")
        lines.append("TAT = CT - AT")
        lines.append("WT  = TAT - BT")
        lines.append("Utilization = busy time / makespan x 100")

    lines.append("="*60)
    return "\n".join(lines)
