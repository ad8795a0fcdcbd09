"""
Command-Line Tests

Runs simulator.py's main() for both modes and checks exit codes, returned
engines and the optional log file.
"""

import sys
import tempfile
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from simulator import main, run_deadlock_simulation, run_rr_simulation
from utils.logger import SimulatorLogger

SCENARIOS = project_root / "scenarios"


def test_rr_default_run():
    """Default workload runs to completion through the CLI."""
    print("\n" + "="*60)
    print("TEST 1: rr Mode")
    print("="*60)

    assert main(['rr']) == 0, "Default rr run succeeds"
    assert main(['rr', '--scenario', str(SCENARIOS / "rr_idle_gap.json"), '--quantum', '1']) == 0, \
        "Scenario file with quantum override"
    assert main(['rr', '--compare-quanta', '1,2,4']) == 0, "Quantum comparison"
    print("  ✓ rr mode exit codes")


def test_rr_simulation_results():
    logger = SimulatorLogger(quiet=True)
    engine, metrics = run_rr_simulation(str(SCENARIOS / "rr_default.json"), logger=logger)
    assert engine.state.time == 12, "Run completed"
    assert metrics.rounded()['avg_turnaround_time'] == 8.33, "Average turnaround"

    engine, metrics = run_rr_simulation(str(SCENARIOS / "missing.json"), logger=logger)
    assert engine is None and metrics is None, "Missing scenario gives no engine"


def test_deadlock_runs():
    """Deadlock mode loads, reports and grants."""
    print("\n" + "="*60)
    print("TEST 2: deadlock Mode")
    print("="*60)

    assert main(['deadlock']) == 0, "Default deadlock run succeeds"
    assert main(['deadlock', '--scenario', str(SCENARIOS / "deadlock_two_cycles.json")]) == 0, \
        "Two-cycle scenario"

    logger = SimulatorLogger(quiet=True)
    engine = run_deadlock_simulation(str(SCENARIOS / "deadlock_grant.json"), logger=logger)
    assert engine.graph.holder_of("R1") == "P2", "R1 granted to P2"
    assert engine.events.lines()[-1] == "no-op: all requested resources busy", "Ends on a no-op"
    assert engine.detect_deadlock() == [], "No deadlock after the grant"
    print("  ✓ deadlock mode correct")


def test_bad_input_exit_codes():
    assert main(['rr', '--scenario', str(SCENARIOS / "missing.json")]) == 1, "Missing rr scenario"
    assert main(['rr', '--quantum', '0']) == 1, "Non-positive quantum"
    assert main(['deadlock', '--scenario', str(SCENARIOS / "missing.json")]) == 1, "Missing graph"
    assert main(['deadlock', '--steps', '-1']) == 1, "Negative step bound"


def test_log_file_written():
    with tempfile.TemporaryDirectory() as tmp:
        log_path = Path(tmp) / "run.log"
        assert main(['rr', '--log-file', str(log_path)]) == 0, "Run with log file"
        text = log_path.read_text(encoding='utf-8')
    assert text.startswith("Simulation Log - "), "Header written"
    assert "Average Waiting Time: 4.33" in text, "Report written to file"
    assert "Description: Default workload" in text, "Scenario description in the header"


def test_scenario_description_in_header():
    with tempfile.TemporaryDirectory() as tmp:
        log_path = Path(tmp) / "deadlock.log"
        scenario = str(SCENARIOS / "deadlock_free.json")
        assert main(['deadlock', '--scenario', scenario, '--log-file', str(log_path)]) == 0, "Deadlock run"
        text = log_path.read_text(encoding='utf-8')
    assert "Description: P2 waits on P1 but nothing waits on P2" in text, "File description logged"


def main_runner():
    """Run all command-line tests."""
    tests = [
        test_rr_default_run,
        test_rr_simulation_results,
        test_deadlock_runs,
        test_bad_input_exit_codes,
        test_log_file_written,
        test_scenario_description_in_header,
    ]
    try:
        for test in tests:
            test()
        print("\n✅ ALL COMMAND-LINE TESTS PASSED")
        return 0
    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main_runner())
