#!/usr/bin/env python3
"""
Round-Robin & Deadlock Simulator
Main entry point for the simulation system.

Educational tool for demonstrating Round-Robin CPU scheduling and
wait-for-graph deadlock detection.
"""

import argparse
import sys
import time
from typing import List, Optional, Tuple

from analysis.analyzer import compare_quanta, generate_comparison_report
from analysis.events import EventType
from analysis.metrics import SchedulingMetrics, format_gantt, format_metrics_report
from engine.deadlock_engine import DeadlockEngine
from engine.driver import DEADLOCK_MIN_INTERVAL, RR_MIN_INTERVAL, SimulationDriver
from engine.rr_engine import RoundRobinEngine
from utils.logger import SimulatorLogger
from utils.scenario_loader import (
    ScenarioLoadError,
    default_deadlock_scenario,
    default_rr_scenario,
    load_deadlock_scenario,
    load_rr_scenario,
)


def _no_sleep(_seconds: float) -> None:
    return None


def run_rr_simulation(
    scenario_path: Optional[str] = None,
    quantum: Optional[int] = None,
    speed: Optional[float] = None,
    verbose: bool = False,
    logger: Optional[SimulatorLogger] = None
) -> Tuple[Optional[RoundRobinEngine], Optional[SchedulingMetrics]]:
    """
    Run a Round-Robin simulation to completion.

    Args:
        scenario_path: Path to RR scenario JSON (None = built-in default)
        quantum: Overrides the scenario quantum
        speed: Pacing multiplier; None runs without pauses
        verbose: Enable verbose logging
        logger: Logger to use (created when None)

    Returns:
        Tuple of (engine, metrics); (None, None) if the scenario is invalid
    """
    logger = logger or SimulatorLogger(verbose=verbose)

    try:
        scenario = load_rr_scenario(scenario_path, quantum) if scenario_path else default_rr_scenario(quantum)
    except ScenarioLoadError as e:
        logger.log(f"Failed to load scenario: {e}", "error")
        return None, None

    logger.log(f"\n{'='*60}")
    logger.log(f"SIMULATION START: ROUND-ROBIN (quantum={scenario.quantum})")
    if scenario_path:
        logger.log(f"Scenario: {scenario_path}")
    if scenario.description:
        logger.log(f"Description: {scenario.description}")
    logger.log(f"{'='*60}\n")

    for p in scenario.processes:
        logger.log(f"  {p.pid}: arrival={p.arrival}, burst={p.burst}")

    engine = RoundRobinEngine(logger=logger)
    engine.configure(scenario.processes, scenario.quantum)

    driver = SimulationDriver(
        engine,
        speed=speed or 1.0,
        min_interval=RR_MIN_INTERVAL,
        sleep=_no_sleep if speed is None else time.sleep,
        on_step=lambda clock: logger.log_system_state(engine.state.display())
    )
    driver.run()

    engine.state.assert_conservation("at end of run")

    logger.log("\nEvent Log:")
    for line in engine.state.events.lines():
        logger.log(f"  {line}")

    logger.log("\nGantt:")
    logger.log(f"  {format_gantt(engine.state.segments)}")

    metrics = engine.compute_metrics()
    logger.log(format_metrics_report(
        metrics,
        quantum=scenario.quantum,
        scenario=scenario_path,
        verbose=verbose
    ))
    return engine, metrics


def run_quantum_comparison(
    scenario_path: Optional[str],
    quanta: List[int],
    logger: SimulatorLogger
) -> bool:
    """Compare several quanta on one workload and print the report."""
    try:
        scenario = load_rr_scenario(scenario_path) if scenario_path else default_rr_scenario()
        results = compare_quanta(scenario.processes, quanta)
    except (ScenarioLoadError, ValueError) as e:
        logger.log(f"Quantum comparison failed: {e}", "error")
        return False

    logger.log(generate_comparison_report(results, scenario_path))
    return True


def run_deadlock_simulation(
    scenario_path: Optional[str] = None,
    max_steps: int = 10,
    speed: Optional[float] = None,
    verbose: bool = False,
    logger: Optional[SimulatorLogger] = None
) -> Optional[DeadlockEngine]:
    """
    Load a resource graph, report deadlock, then grant pending requests
    step by step until nothing more can be granted.

    Args:
        scenario_path: Path to deadlock scenario JSON (None = built-in default)
        max_steps: Maximum grant steps
        speed: Pacing multiplier; None runs without pauses
        verbose: Enable verbose logging
        logger: Logger to use (created when None)

    Returns:
        The engine after the run, or None if the scenario is invalid
    """
    logger = logger or SimulatorLogger(verbose=verbose)

    try:
        scenario = load_deadlock_scenario(scenario_path) if scenario_path else default_deadlock_scenario()
    except ScenarioLoadError as e:
        logger.log(f"Failed to load scenario: {e}", "error")
        return None

    logger.log(f"\n{'='*60}")
    logger.log("SIMULATION START: DEADLOCK DETECTION")
    if scenario_path:
        logger.log(f"Scenario: {scenario_path}")
    if scenario.description:
        logger.log(f"Description: {scenario.description}")
    logger.log(f"{'='*60}")

    engine = DeadlockEngine(logger=logger)
    engine.configure(scenario.processes, scenario.resources, scenario.allocation, scenario.requests)

    logger.log(engine.graph.display())
    logger.log_deadlock(engine.detect_deadlock(), engine.project_wait_for())

    def after_step(clock: int) -> None:
        logger.log(f"Step {clock}: {engine.events.lines()[-1]}")

    driver = SimulationDriver(
        engine,
        speed=speed or 1.0,
        min_interval=DEADLOCK_MIN_INTERVAL,
        sleep=_no_sleep if speed is None else time.sleep,
        on_step=after_step
    )
    granted = driver.run(max_steps=max_steps)
    if len(engine.events) and engine.events.events[-1].event_type == EventType.NO_OP:
        logger.log(f"Step {driver.clock + 1}: {engine.events.lines()[-1]}")

    logger.log(f"\nGranted {granted} request(s)")
    logger.log(engine.graph.display())

    snapshot = engine.snapshot()
    logger.log_deadlock(snapshot.deadlocked, snapshot.wait_for_edges)
    return engine


def _parse_quanta(value: str) -> List[int]:
    try:
        quanta = [int(part) for part in value.split(',') if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid quanta list: {value}")
    if not quanta or any(q <= 0 for q in quanta):
        raise argparse.ArgumentTypeError("quanta must be positive integers")
    return quanta


def _positive_float(value: str) -> float:
    try:
        speed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid speed: {value}")
    if speed <= 0:
        raise argparse.ArgumentTypeError("speed must be positive")
    return speed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Round-Robin & Deadlock Simulator'
    )
    subparsers = parser.add_subparsers(dest='mode', required=True)

    rr = subparsers.add_parser('rr', help='Round-Robin CPU scheduling')
    rr.add_argument('--scenario', type=str, help='Path to RR scenario JSON file')
    rr.add_argument('--quantum', type=int, help='Time quantum (overrides scenario)')
    rr.add_argument('--speed', type=_positive_float, help='Pace ticks in real time at this speed')
    rr.add_argument('--compare-quanta', type=_parse_quanta, metavar='Q1,Q2,...',
                    help='Compare several quanta on the same workload')
    rr.add_argument('--verbose', action='store_true', help='Enable verbose logging')
    rr.add_argument('--log-file', type=str, help='Also write the log to this file')

    dl = subparsers.add_parser('deadlock', help='Resource-allocation graph deadlock detection')
    dl.add_argument('--scenario', type=str, help='Path to deadlock scenario JSON file')
    dl.add_argument('--steps', type=int, default=10, help='Maximum grant steps (default: 10)')
    dl.add_argument('--speed', type=_positive_float, help='Pace steps in real time at this speed')
    dl.add_argument('--verbose', action='store_true', help='Enable verbose logging')
    dl.add_argument('--log-file', type=str, help='Also write the log to this file')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the simulator."""
    args = build_parser().parse_args(argv)
    logger = SimulatorLogger(verbose=args.verbose, log_file=args.log_file)

    try:
        if args.mode == 'rr':
            if args.compare_quanta:
                return 0 if run_quantum_comparison(args.scenario, args.compare_quanta, logger) else 1
            engine, _ = run_rr_simulation(args.scenario, args.quantum, args.speed, args.verbose, logger)
            return 0 if engine is not None else 1

        if args.steps < 0:
            logger.log("--steps must be non-negative", "error")
            return 1
        engine = run_deadlock_simulation(args.scenario, args.steps, args.speed, args.verbose, logger)
        return 0 if engine is not None else 1
    finally:
        logger.close()


if __name__ == '__main__':
    sys.exit(main())
