"""
Experiment Runner Module
========================

Runs the same scenario once per planning algorithm and collects results.
"""

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np
from loguru import logger

from ..config import Config
from ..metrics import RunResult
from ..planning import Algorithm
from ..scenario import Scenario, ScenarioGenerator
from .driver import TickDriver


def _no_sleep(_seconds: float):
    pass


@dataclass
class ComparisonResult:
    """Results of every algorithm on one scenario"""
    seed: Optional[int]
    methods: Dict[str, Dict] = field(default_factory=dict)
    runtimes: Dict[str, float] = field(default_factory=dict)
    paths: Dict[str, List] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)


class ExperimentRunner:
    """
    Algorithm comparison on generated or loaded scenarios.

    Every algorithm gets a fresh session built from the same scenario, and
    the same scripted obstacle events.
    """

    def __init__(self, config: Optional[Config] = None,
                 sleep: Callable[[float], None] = _no_sleep):
        """
        Initialize experiment runner.

        Args:
            config: Configuration object (uses default if None)
            sleep: Sleep between ticks; no delay by default
        """
        self.config = config or Config()
        self.sleep = sleep

    def generate(self, seed: Optional[int] = None) -> Scenario:
        return ScenarioGenerator(self.config, seed=seed).generate()

    def run_algorithm(self, scenario: Scenario, algorithm) -> RunResult:
        """Drive one algorithm through the scenario"""
        config = scenario.to_config(self.config)
        config.rover.algorithm = Algorithm.from_name(algorithm).value
        session = scenario.build_session(config)
        driver = TickDriver(session, events=scenario.events, sleep=self.sleep)
        return driver.run()

    def compare(self, scenario: Scenario,
                algorithms: Optional[List] = None,
                output_dir: Optional[str] = None) -> ComparisonResult:
        """
        Run each algorithm on the scenario.

        Args:
            scenario: Scenario to run
            algorithms: Algorithms or names (default: all)
            output_dir: Directory for scenario.npz, paths.npz and logs.json

        Returns:
            ComparisonResult keyed by algorithm display name
        """
        algorithms = [Algorithm.from_name(a) for a in (algorithms or list(Algorithm))]
        result = ComparisonResult(seed=scenario.seed)

        for algorithm in algorithms:
            t0 = time.perf_counter()
            run = self.run_algorithm(scenario, algorithm)
            elapsed = time.perf_counter() - t0

            result.methods[algorithm.value] = run.to_dict()
            result.runtimes[algorithm.value] = elapsed
            result.paths[algorithm.value] = [list(c) for c in run.path]
            logger.info("{}: {} in {} tick(s), {:.2f}s",
                        algorithm.value, run.status, run.ticks, elapsed)

        if output_dir:
            self._save(scenario, result, Path(output_dir))
        return result

    def _save(self, scenario: Scenario, result: ComparisonResult, out: Path):
        out.mkdir(parents=True, exist_ok=True)
        scenario.save_npz(out / 'scenario.npz')
        arrays = {
            name.replace(' ', '_').replace('*', 'star'): np.array(path)
            for name, path in result.paths.items()
        }
        np.savez_compressed(out / 'paths.npz', **arrays)
        with open(out / 'logs.json', 'w') as f:
            json.dump(result.to_dict(), f, indent=2, default=str)
        logger.info("Comparison saved to {}", out)
