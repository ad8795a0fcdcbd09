"""
Scenario Loader Tests

Tests loading of the bundled scenario files, the built-in defaults and
rejection of malformed files.
"""

import json
import sys
import tempfile
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.resource import Request
from utils.scenario_loader import (
    DEFAULT_QUANTUM,
    ScenarioLoadError,
    default_deadlock_scenario,
    default_rr_scenario,
    load_deadlock_scenario,
    load_rr_scenario,
)

SCENARIOS = project_root / "scenarios"


def _expect_load_error(loader, content, *args):
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "scenario.json"
        path.write_text(content if isinstance(content, str) else json.dumps(content), encoding='utf-8')
        try:
            loader(str(path), *args)
        except ScenarioLoadError as e:
            return str(e)
    raise AssertionError(f"{loader.__name__} should reject {content!r}")


def test_bundled_rr_scenarios():
    """Every bundled Round-Robin file loads."""
    print("\n" + "="*60)
    print("TEST 1: Bundled Round-Robin Scenarios")
    print("="*60)

    for path in sorted(SCENARIOS.glob("rr_*.json")):
        scenario = load_rr_scenario(str(path))
        print(f"  {path.name}: {len(scenario.processes)} processes, q={scenario.quantum}")
        assert scenario.processes, f"{path.name} has processes"
        assert scenario.quantum > 0, f"{path.name} has a positive quantum"

    scenario = load_rr_scenario(str(SCENARIOS / "rr_simultaneous.json"))
    assert [p.pid for p in scenario.processes] == ["C", "A", "B"], "Input order preserved"
    print("  ✓ All load")


def test_quantum_override_and_default():
    scenario = load_rr_scenario(str(SCENARIOS / "rr_default.json"), quantum=5)
    assert scenario.quantum == 5, "Explicit quantum wins"

    default = default_rr_scenario()
    assert default.quantum == DEFAULT_QUANTUM, "Default quantum"
    assert [(p.pid, p.arrival, p.burst) for p in default.processes] == [
        ("P1", 0, 5), ("P2", 2, 3), ("P3", 4, 4)
    ], "Default workload"


def test_bundled_deadlock_scenarios():
    """Every bundled deadlock file loads and normalises allocation."""
    print("\n" + "="*60)
    print("TEST 2: Bundled Deadlock Scenarios")
    print("="*60)

    for path in sorted(SCENARIOS.glob("deadlock_*.json")):
        scenario = load_deadlock_scenario(str(path))
        print(f"  {path.name}: {scenario.description}")
        assert set(scenario.allocation) == set(scenario.resources), "Every resource in allocation"

    grant = load_deadlock_scenario(str(SCENARIOS / "deadlock_grant.json"))
    assert grant.allocation == {"R1": None, "R2": "P2"}, "Null holder kept as free"
    assert grant.requests == [Request("P1", "R2"), Request("P2", "R1")], "Requests in file order"

    default = default_deadlock_scenario()
    assert default.processes == ["P1", "P2", "P3"], "Default processes"
    print("  ✓ All load")


def test_rr_rejections():
    """Malformed Round-Robin files raise ScenarioLoadError."""
    print("\n" + "="*60)
    print("TEST 3: Round-Robin Rejections")
    print("="*60)

    message = _expect_load_error(load_rr_scenario, "{ not json")
    assert "Invalid JSON" in message, "JSON error reported"
    _expect_load_error(load_rr_scenario, [1, 2])
    _expect_load_error(load_rr_scenario, {"quantum": 2})
    _expect_load_error(load_rr_scenario, {"processes": [{"id": "P1", "arrival": 0}]})
    message = _expect_load_error(load_rr_scenario, {"processes": []})
    assert "Please add at least one process." in message, "Empty workload message"
    _expect_load_error(load_rr_scenario, {"quantum": 0, "processes": [{"id": "P1", "arrival": 0, "burst": 1}]})
    _expect_load_error(load_rr_scenario, {"processes": [
        {"id": "P1", "arrival": 0, "burst": 1}, {"id": "P1", "arrival": 1, "burst": 1}
    ]})

    try:
        load_rr_scenario(str(SCENARIOS / "missing.json"))
        raise AssertionError("Missing file should be rejected")
    except ScenarioLoadError as e:
        assert "not found" in str(e), "Missing file reported"

    try:
        default_rr_scenario(quantum=-1)
        raise AssertionError("Negative quantum should be rejected")
    except ScenarioLoadError:
        pass
    print("  ✓ Rejections correct")


def test_deadlock_rejections():
    _expect_load_error(load_deadlock_scenario, {"resources": ["R1"]})
    _expect_load_error(load_deadlock_scenario, {"processes": ["P1", "P1"], "resources": []})
    _expect_load_error(load_deadlock_scenario, {"processes": ["P1"], "resources": ["R1"],
                                                "allocation": {"R1": "P2"}})
    _expect_load_error(load_deadlock_scenario, {"processes": ["P1"], "resources": ["R1"],
                                                "requests": [{"process": "P1"}]})


def test_description():
    assert load_deadlock_scenario(str(SCENARIOS / "deadlock_free.json")).description.startswith("P2 waits"), \
        "Description read"
    assert default_rr_scenario().description == "Default workload", "Built-in description"


def test_padded_ids_in_graph_file():
    """Whitespace around ids is stripped everywhere, not only in the id lists."""
    print("\n" + "="*60)
    print("TEST 4: Padded Graph IDs")
    print("="*60)

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "padded.json"
        path.write_text(json.dumps({
            "processes": [" P1", "P2 "],
            "resources": ["R1 ", " R2"],
            "allocation": {" R1": " P1", "R2 ": "P2 "},
            "requests": [{"process": "P1 ", "resource": " R2"}, {"process": " P2", "resource": "R1 "}]
        }), encoding='utf-8')
        scenario = load_deadlock_scenario(str(path))

    assert scenario.processes == ["P1", "P2"], "Process ids stripped"
    assert scenario.allocation == {"R1": "P1", "R2": "P2"}, "Allocation keys and holders stripped"
    assert scenario.requests == [Request("P1", "R2"), Request("P2", "R1")], "Request ids stripped"
    print("  ✓ Padded ids normalised")


def main():
    """Run all scenario loader tests."""
    tests = [
        test_bundled_rr_scenarios,
        test_quantum_override_and_default,
        test_bundled_deadlock_scenarios,
        test_rr_rejections,
        test_deadlock_rejections,
        test_description,
        test_padded_ids_in_graph_file,
    ]
    try:
        for test in tests:
            test()
        print("\n✅ ALL SCENARIO LOADER TESTS PASSED")
        return 0
    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
