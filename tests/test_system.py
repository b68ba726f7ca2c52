#!/usr/bin/env python3
"""
Quick Test Script for Rover Navigation
======================================

Tests all modules can be imported and an end-to-end journey works.
"""

import sys
import os
import traceback

# Fix path - add parent directory so 'rover_nav' package is found
script_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(script_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

import matplotlib

matplotlib.use('Agg')


def test_imports():
    """Test all module imports"""
    print("Testing imports...")

    from rover_nav.config import Config, SimulationConfig
    print("  ✓ config")
    from rover_nav.environment import Grid, ObstacleKnowledge
    print("  ✓ environment")
    from rover_nav.planning import AStarPlanner, DStarLitePlanner, FieldDStarPlanner
    print("  ✓ planning")
    from rover_nav.rover import RoverController, NavigationSession
    print("  ✓ rover")
    from rover_nav.metrics import JourneyStats, RunResult
    print("  ✓ metrics")
    from rover_nav.scenario import ScenarioGenerator
    print("  ✓ scenario")
    from rover_nav.simulation import TickDriver, ExperimentRunner
    print("  ✓ simulation")
    from rover_nav.visualization import LiveMonitor
    print("  ✓ visualization")

    import rover_nav
    assert rover_nav.__version__
    print("All imports successful!\n")


def test_end_to_end_journey():
    """Generated scenario driven to completion by every algorithm"""
    print("Testing end-to-end journey...")

    from rover_nav import Config, ExperimentRunner, RunStatus

    config = Config()
    config.grid.width = 30
    config.grid.height = 20
    config.rover.start = (2, 2)
    config.rover.goal = (27, 17)

    runner = ExperimentRunner(config)
    scenario = runner.generate(seed=42)
    result = runner.compare(scenario)

    for name, data in result.methods.items():
        print(f"  {name:10s}: {data['status']:10s} ticks={data['ticks']}")
        assert data['status'] in (RunStatus.SUCCESS, RunStatus.BLOCKED)
        path = result.paths[name]
        assert tuple(path[0]) == (2, 2)
        if data['status'] == RunStatus.SUCCESS:
            assert tuple(path[-1]) == (27, 17)

    print("End-to-end test passed!\n")


def test_compare_writes_outputs(tmp_path):
    """compare with an output directory stores scenario, paths and logs"""
    print("Testing comparison outputs...")

    from rover_nav import Config, ExperimentRunner, Scenario

    config = Config()
    config.grid.width = 20
    config.grid.height = 15
    config.rover.start = (1, 1)
    config.rover.goal = (18, 13)

    runner = ExperimentRunner(config)
    scenario = runner.generate(seed=3)
    runner.compare(scenario, algorithms=['A*', 'D*-Lite'], output_dir=str(tmp_path))

    assert (tmp_path / 'logs.json').exists()
    assert (tmp_path / 'paths.npz').exists()
    assert Scenario.load_npz(tmp_path / 'scenario.npz') == scenario
    print("Comparison output test passed!\n")


def test_cli(tmp_path):
    """Command line entry point"""
    print("Testing CLI...")

    from rover_nav.main import main

    assert main([]) == 1

    scenario_file = tmp_path / 'scenario.npz'
    code = main(['run', '--seed', '5', '--fast', '--algorithm', 'A*',
                 '--save_scenario', str(scenario_file)])
    assert code in (0, 1)
    assert scenario_file.exists()

    code = main(['compare', '--scenario', str(scenario_file),
                 '--output', str(tmp_path / 'cmp'), '--figure'])
    assert code == 0
    assert (tmp_path / 'cmp' / 'comparison.png').exists()
    print("CLI test passed!\n")


def run_all_tests():
    """Run all tests"""
    import tempfile
    from pathlib import Path

    print("=" * 60)
    print("ROVER NAVIGATION - MODULE TESTS")
    print("=" * 60 + "\n")

    tests = [
        ("Imports", test_imports, False),
        ("End-to-end Journey", test_end_to_end_journey, False),
        ("Comparison Outputs", test_compare_writes_outputs, True),
        ("CLI", test_cli, True),
    ]

    results = []

    for name, test_func, needs_dir in tests:
        try:
            if needs_dir:
                with tempfile.TemporaryDirectory() as tmp:
                    test_func(Path(tmp))
            else:
                test_func()
            results.append((name, True, None))
        except Exception as e:
            print(f"  ✗ EXCEPTION: {e}")
            traceback.print_exc()
            results.append((name, False, str(e)))

    # Summary
    print("=" * 60)
    print("TEST SUMMARY")
    print("=" * 60)

    passed = sum(1 for _, s, _ in results if s)
    total = len(results)

    for name, success, error in results:
        status = "✓ PASS" if success else "✗ FAIL"
        print(f"  {status}: {name}")
        if error:
            print(f"         Error: {error}")

    print(f"\nTotal: {passed}/{total} tests passed")
    print("=" * 60)

    return passed == total


if __name__ == '__main__':
    success = run_all_tests()
    sys.exit(0 if success else 1)
