#!/usr/bin/env python3
"""
Rover Navigation - Main Entry Point
===================================

Usage:
    # Drive one generated scenario
    python -m rover_nav.main run --seed 42 --algorithm "D*-Lite"

    # Compare all algorithms on the same scenario
    python -m rover_nav.main compare --seed 42 --output results/

    # Live visualization
    python -m rover_nav.main debug --seed 42 --speed 8

From Python:
    from rover_nav import Config, NavigationSession, TickDriver

    session = NavigationSession(Config())
    result = TickDriver(session).run()
"""

import argparse
import json
import sys
from pathlib import Path


def _load_config(args):
    from rover_nav import Config, setup_logger

    config = Config.from_json(args.config) if args.config else Config()
    if args.seed is not None:
        config.random_seed = args.seed
    if getattr(args, 'algorithm', None):
        config.rover.algorithm = args.algorithm
    if getattr(args, 'speed', None):
        config.simulation.speed = args.speed
    config.verbose = args.verbose
    config.validate()

    setup_logger('DEBUG' if args.verbose else config.logging.level,
                 config.logging.log_dir)
    return config


def _load_scenario(args, config):
    from rover_nav import Scenario, ScenarioGenerator

    if args.scenario:
        return Scenario.load_npz(args.scenario)
    return ScenarioGenerator(config, seed=config.random_seed).generate()


def _print_result(result):
    stats = result.stats
    print("\n" + "=" * 60)
    print(f"RESULT: {result.status} ({result.algorithm})")
    print(f"Ticks: {result.ticks}")
    if stats:
        print(f"Steps: {stats.steps}  Distance: {stats.total_distance:.1f} cells")
        print(f"Re-routes: {stats.reroute_count}  Detected: {stats.obstacles_detected}")
        print(f"Path efficiency: {stats.path_efficiency:.1f}%")
        print(f"Planning: {stats.avg_plan_time_ms:.2f} ms avg, "
              f"{stats.max_plan_time_ms:.2f} ms max")
    print("=" * 60)


def run_single(args):
    """Drive one scenario with one algorithm"""
    from rover_nav import TickDriver

    config = _load_config(args)
    scenario = _load_scenario(args, config)
    session = scenario.build_session(config)

    print(f"Start: {scenario.start}, Goal: {scenario.goal}, "
          f"{len(scenario.static_obstacles)} static cells, "
          f"{len(scenario.events)} scripted obstacles")

    sleep = (lambda _s: None) if args.fast else None
    kwargs = {'sleep': sleep} if sleep else {}
    result = TickDriver(session, events=scenario.events, **kwargs).run()
    _print_result(result)

    if args.save_scenario:
        scenario.save_npz(args.save_scenario)
        print(f"Scenario saved to: {args.save_scenario}")

    return 0 if result.is_success else 1


def run_compare(args):
    """Run every algorithm on the same scenario"""
    from rover_nav import ExperimentRunner

    config = _load_config(args)
    scenario = _load_scenario(args, config)
    runner = ExperimentRunner(config)

    algorithms = args.algorithms.split(',') if args.algorithms else None
    result = runner.compare(scenario, algorithms=algorithms, output_dir=args.output)

    print("\n" + "=" * 70)
    print(f"COMPARISON (seed={scenario.seed})")
    print("=" * 70)
    print(f"{'Algorithm':<12} {'Status':>12} {'Steps':>8} {'Re-routes':>10} "
          f"{'Efficiency':>11} {'Plan(ms)':>9}")
    print("-" * 70)
    for name, data in result.methods.items():
        stats = data.get('stats') or {}
        print(f"{name:<12} {data['status']:>12} {stats.get('steps', 0):>8} "
              f"{stats.get('reroute_count', 0):>10} "
              f"{stats.get('path_efficiency', 0.0):>10.1f}% "
              f"{stats.get('avg_plan_time_ms', 0.0):>9.2f}")
    print("=" * 70)

    if args.output:
        print(f"\nResults saved to: {args.output}")
        if args.figure:
            from rover_nav import MapVisualizer
            session = scenario.build_session(config)
            viz = MapVisualizer(session.grid, config.visualization)
            fig = viz.create_comparison_figure(
                session.knowledge, scenario.start, scenario.goal,
                paths=result.paths,
                metrics={k: v['stats'] for k, v in result.methods.items() if v['stats']},
            )
            figure_path = Path(args.output) / 'comparison.png'
            viz.save_figure(fig, str(figure_path))
            print(f"Figure saved to: {figure_path}")

    if args.json:
        print(json.dumps(result.to_dict()['methods'], indent=2, default=str))

    return 0


def run_debug(args):
    """Run with live visualization"""
    from rover_nav import LiveMonitor, TickDriver, create_tick_callback

    config = _load_config(args)
    scenario = _load_scenario(args, config)
    session = scenario.build_session(config)

    print(f"Start: {scenario.start}, Goal: {scenario.goal}")

    monitor = LiveMonitor(session)
    session.subscribe(create_tick_callback(monitor))

    print("\nStarting navigation with live visualization...")
    print("Press Ctrl+C to stop.\n")

    try:
        monitor.update()
        result = TickDriver(session, events=scenario.events).run()
        _print_result(result)
    except KeyboardInterrupt:
        print("\nStopped by user.")
    finally:
        monitor.close()

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Rover Navigation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--config', type=str, help='JSON configuration file')
    common.add_argument('--seed', type=int, default=None, help='Random seed')
    common.add_argument('--scenario', type=str, help='Load scenario from .npz')
    common.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Run command
    run_parser = subparsers.add_parser('run', parents=[common],
                                       help='Drive one scenario')
    run_parser.add_argument('--algorithm', type=str, help='A*, D*-Lite or Field D*')
    run_parser.add_argument('--speed', type=int, help='Tick speed 1-10')
    run_parser.add_argument('--fast', action='store_true', help='No delay between ticks')
    run_parser.add_argument('--save_scenario', type=str, help='Save scenario to .npz')

    # Compare command
    cmp_parser = subparsers.add_parser('compare', parents=[common],
                                       help='Compare algorithms on one scenario')
    cmp_parser.add_argument('--algorithms', type=str, help='Comma-separated algorithms')
    cmp_parser.add_argument('--output', type=str, help='Output directory')
    cmp_parser.add_argument('--figure', action='store_true', help='Save comparison figure')
    cmp_parser.add_argument('--json', action='store_true', help='Print results as JSON')

    # Debug command
    debug_parser = subparsers.add_parser('debug', parents=[common],
                                         help='Run with live visualization')
    debug_parser.add_argument('--algorithm', type=str, help='A*, D*-Lite or Field D*')
    debug_parser.add_argument('--speed', type=int, help='Tick speed 1-10')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == 'run':
        return run_single(args)
    elif args.command == 'compare':
        return run_compare(args)
    elif args.command == 'debug':
        return run_debug(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
