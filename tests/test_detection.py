"""
Deadlock Detection Tests

Tests wait-for projection, the wait-for matrix and cycle membership,
including disjoint cycles and nodes reachable into a cycle.
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.resource import Resource, Request
from models.system_state import ResourceGraph
from algorithms import allocation as ops
from algorithms.detection import (
    detect_deadlock,
    find_cycle_members,
    project_wait_for,
    wait_for_matrix,
)
from utils.scenario_loader import load_deadlock_scenario

SCENARIOS = project_root / "scenarios"


def _graph(processes, holders, requests):
    return ResourceGraph(
        processes=list(processes),
        resources=[Resource(rid, holder) for rid, holder in holders.items()],
        requests=[Request(p, r) for p, r in requests],
    )


def _from_file(name):
    scenario = load_deadlock_scenario(str(SCENARIOS / name))
    return ResourceGraph(
        processes=scenario.processes,
        resources=[Resource(rid, scenario.allocation.get(rid)) for rid in scenario.resources],
        requests=scenario.requests,
    )


def test_two_process_cycle():
    """P1 holds R1 wants R2, P2 holds R2 wants R1; P3 idle."""
    print("\n" + "="*60)
    print("TEST 1: Two-Process Cycle")
    print("="*60)

    graph = _from_file("deadlock_cycle.json")
    edges = project_wait_for(graph)
    has_deadlock, deadlocked = detect_deadlock(graph)
    print(f"  Wait-for: {edges}")
    print(f"  Deadlocked: {deadlocked}")

    assert edges == [("P1", "P2"), ("P2", "P1")], "Edges in request order"
    assert has_deadlock, "Circular wait is a deadlock"
    assert deadlocked == ["P1", "P2"], "P3 is not part of the cycle"
    print("  ✓ Cycle detected")


def test_chain_without_cycle():
    """A waiting chain with no cycle is not a deadlock."""
    print("\n" + "="*60)
    print("TEST 2: Wait Without Cycle")
    print("="*60)

    graph = _from_file("deadlock_free.json")
    assert project_wait_for(graph) == [("P2", "P1")], "P2 waits on P1"
    assert detect_deadlock(graph) == (False, []), "No cycle"
    print("  ✓ No false positive")


def test_free_and_self_held_resources_give_no_edge():
    graph = _graph(["P1", "P2"], {"R1": None, "R2": "P1"}, [("P1", "R1"), ("P1", "R2")])
    assert project_wait_for(graph) == [], "Free resource and self-held resource give no edge"
    assert not wait_for_matrix(graph).any(), "Matrix has no edges either"


def test_two_disjoint_cycles():
    """Every cycle is reported; a process only waiting on a cycle is not."""
    print("\n" + "="*60)
    print("TEST 3: Two Disjoint Cycles")
    print("="*60)

    graph = _from_file("deadlock_two_cycles.json")
    has_deadlock, deadlocked = detect_deadlock(graph)
    print(f"  Deadlocked: {deadlocked}")

    assert has_deadlock, "Both cycles deadlocked"
    assert deadlocked == ["P1", "P2", "P3", "P4", "P5"], "Union of both cycles, P6 excluded"
    print("  ✓ Both cycles found")


def test_member_reached_through_finished_node():
    """
    A->B, B->A, A->C, C->B: C is on the cycle A->C->B->A even though its
    only edge leads into a node that is already finished when C is explored.
    """
    print("\n" + "="*60)
    print("TEST 4: Cycle Member Behind Finished Node")
    print("="*60)

    members = find_cycle_members(
        ["A", "B", "C"],
        [("A", "B"), ("B", "A"), ("A", "C"), ("C", "B")]
    )
    print(f"  Members: {members}")
    assert members == ["A", "B", "C"], "C lies on A->C->B->A"
    print("  ✓ All members reported")


def test_tail_into_cycle_excluded():
    members = find_cycle_members(["A", "B", "C", "D"], [("D", "C"), ("C", "A"), ("A", "B"), ("B", "A")])
    assert members == ["A", "B"], "Nodes leading into a cycle are not members"


def test_self_loop_and_long_cycle():
    assert find_cycle_members(["X"], [("X", "X")]) == ["X"], "Self loop is a cycle"

    n = 5000
    nodes = [f"N{i}" for i in range(n)]
    edges = [(nodes[i], nodes[(i + 1) % n]) for i in range(n)]
    assert find_cycle_members(nodes, edges) == nodes, "Long ring found without recursion limits"


def test_empty_graph():
    assert find_cycle_members([], []) == [], "Empty graph"
    assert detect_deadlock(ResourceGraph()) == (False, []), "Empty resource graph"


def test_wait_for_matrix():
    """Matrix form agrees with the edge list."""
    print("\n" + "="*60)
    print("TEST 5: Wait-For Matrix")
    print("="*60)

    graph = _from_file("deadlock_two_cycles.json")
    waits = wait_for_matrix(graph)
    index = graph.process_index
    expected = {(index[p], index[q]) for p, q in project_wait_for(graph)}
    actual = {(int(i), int(j)) for i, j in zip(*waits.nonzero())}
    print(f"  Edges: {sorted(actual)}")
    assert actual == expected, "Matrix and edge list agree"
    print("  ✓ Matrix matches")


def test_detection_is_stateless():
    """Detection reflects the graph after each mutation."""
    print("\n" + "="*60)
    print("TEST 6: Detection After Mutation")
    print("="*60)

    graph = _from_file("deadlock_cycle.json")
    assert detect_deadlock(graph)[1] == ["P1", "P2"], "Deadlocked before release"

    ops.release(graph, "R1")
    assert detect_deadlock(graph) == (False, []), "Releasing R1 breaks the cycle"

    ops.grant_step(graph)
    assert graph.holder_of("R1") == "P2", "P2 granted R1"
    assert detect_deadlock(graph) == (False, []), "Still no cycle"

    ops.request(graph, "P2", "R2")
    ops.allocate(graph, "R1", "P1")
    assert detect_deadlock(graph)[0] is False, "Repeated calls stay consistent"
    print("  ✓ No cached state")


def main():
    """Run all detection tests."""
    tests = [
        test_two_process_cycle,
        test_chain_without_cycle,
        test_free_and_self_held_resources_give_no_edge,
        test_two_disjoint_cycles,
        test_member_reached_through_finished_node,
        test_tail_into_cycle_excluded,
        test_self_loop_and_long_cycle,
        test_empty_graph,
        test_wait_for_matrix,
        test_detection_is_stateless,
    ]
    try:
        for test in tests:
            test()
        print("\n✅ ALL DETECTION TESTS PASSED")
        return 0
    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
