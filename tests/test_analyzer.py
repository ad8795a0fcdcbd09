"""
Quantum Comparison Tests

Tests per-quantum analysis and the comparison report.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.process import Process
from algorithms.round_robin import run_to_completion
from analysis.analyzer import analyze_quantum, compare_quanta, generate_comparison_report


def _default_processes():
    return [
        Process(pid="P1", arrival=0, burst=5),
        Process(pid="P2", arrival=2, burst=3),
        Process(pid="P3", arrival=4, burst=4),
    ]


def test_analyze_quantum():
    """Quantum 2 on the default workload."""
    print("\n" + "="*60)
    print("TEST 1: Single Quantum Analysis")
    print("="*60)

    result = analyze_quantum(_default_processes(), 2)
    print(result.display())

    assert abs(result.avg_waiting_time - 13 / 3) < 1e-9, "Average waiting time"
    assert result.makespan == 12, "Makespan"
    assert result.dispatches == 7, "Seven dispatches"
    assert result.preemptions == 4, "Four slice expiries"
    print("  ✓ Analysis correct")


def test_large_quantum_behaves_like_fcfs():
    result = analyze_quantum(_default_processes(), 10)
    assert result.preemptions == 0, "No slice ever expires"
    assert result.dispatches == 3, "One dispatch per process"
    assert abs(result.avg_waiting_time - 7 / 3) < 1e-9, "FCFS waiting times 0, 3, 4"


def test_invalid_quantum():
    try:
        analyze_quantum(_default_processes(), 0)
        raise AssertionError("Quantum 0 should be rejected")
    except ValueError:
        pass


def test_run_func_injection():
    calls = []

    def tracking_run(state):
        calls.append(state.quantum)
        return run_to_completion(state)

    analyze_quantum(_default_processes(), 3, run_func=tracking_run)
    assert calls == [3], "Injected runner used"


def test_comparison_report():
    """Report lists every quantum and names the best ones."""
    print("\n" + "="*60)
    print("TEST 2: Comparison Report")
    print("="*60)

    results = compare_quanta(_default_processes(), [2, 10])
    assert [r.quantum for r in results] == [2, 10], "Results in requested order"

    report = generate_comparison_report(results, "scenarios/rr_default.json")
    print(report)
    assert "Quanta tested: 2, 10" in report, "Quanta listed"
    assert "Lowest Waiting Time: q=10 (2.33)" in report, "Best waiting time named"
    assert "Fewest Dispatches: q=10 (3)" in report, "Fewest dispatches named"

    single = generate_comparison_report(compare_quanta(_default_processes(), [2]))
    assert "Only one quantum tested." in single, "Single quantum note"

    tied = generate_comparison_report(compare_quanta([Process("A", 0, 1)], [1, 2]))
    assert "All quanta showed identical performance." in tied, "Ties reported"
    print("  ✓ Report correct")


def main():
    """Run all analyzer tests."""
    tests = [
        test_analyze_quantum,
        test_large_quantum_behaves_like_fcfs,
        test_invalid_quantum,
        test_run_func_injection,
        test_comparison_report,
    ]
    try:
        for test in tests:
            test()
        print("\n✅ ALL ANALYZER TESTS PASSED")
        return 0
    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
