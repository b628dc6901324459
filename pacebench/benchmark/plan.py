"""
Benchmark definitions and execution plans.
"""

import math
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..config import Configuration
from ..params import Parameters, ParameterRegistry, resolve_params
from .clock import Clock, invoke_benchmark, run_for_at_least, repeat
from .environment import CalibrationSettings, Environment

logger = logging.getLogger(__name__)


@dataclass
class ExecutionPlan:
    """
    A benchmark prepared for one configuration, parameter set and
    environment, ready to produce samples.

    Attributes:
        iterations_per_sample: Iterations timed together in each sample
        estimated_duration: Expected time to collect all samples (ns)
        params: Resolved parameters the benchmark sees
        runnable: Benchmark code
        warmup_time: Minimum warm-up time before sampling (ns)
        warmup_iterations: Initial warm-up iteration count
    """
    iterations_per_sample: int
    estimated_duration: float
    params: Parameters
    runnable: Callable
    warmup_time: float
    warmup_iterations: int
    param_types: Optional[ParameterRegistry] = None

    def run(self, cfg: Configuration, env: Environment, clock: Clock) -> List[float]:
        """
        Collect cfg.samples samples.

        Each sample is the time for iterations_per_sample iterations, less
        the cost of reading the clock, divided by the iteration count.

        Returns:
            Per-iteration times in nanoseconds
        """
        run_for_at_least(clock, self.warmup_time, self.warmup_iterations, repeat(clock.now))

        samples: List[float] = []
        for _ in range(cfg.samples):
            elapsed = invoke_benchmark(
                self.runnable,
                clock,
                self.iterations_per_sample,
                self.params,
                self.param_types,
            )
            sample_time = max(elapsed - env.clock_cost.mean, 0.0)
            samples.append(sample_time / self.iterations_per_sample)
        return samples

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iterations_per_sample": self.iterations_per_sample,
            "estimated_duration_ns": self.estimated_duration,
            "params": self.params.to_dict(),
        }


@dataclass
class Benchmark:
    """
    A named, user-supplied runnable whose timing is measured.

    The runnable takes either no arguments, or a single Chronometer.
    """
    name: str
    runnable: Callable

    def prepare(
        self,
        cfg: Configuration,
        params: Parameters,
        env: Environment,
        clock: Clock,
        settings: CalibrationSettings,
        param_types: ParameterRegistry,
    ) -> ExecutionPlan:
        """
        Size an execution plan so that each sample lasts at least
        settings.minimum_ticks clock ticks.

        Returns:
            ExecutionPlan for this benchmark
        """
        resolved = resolve_params(params, cfg, param_types)

        min_time = env.clock_resolution.mean * settings.minimum_ticks
        run_time = max(min_time, settings.warmup_time)

        def trial(iterations: int) -> float:
            return invoke_benchmark(self.runnable, clock, iterations, resolved, param_types)

        test = run_for_at_least(clock, run_time, 1, trial, self_timed=True)
        new_iters = 1
        if test.elapsed > 0:
            new_iters = max(int(math.ceil(min_time * test.iterations / test.elapsed)), 1)
        estimated = test.elapsed / test.iterations * new_iters * cfg.samples
        logger.debug(
            f"Prepared '{self.name}': {new_iters} iterations per sample, "
            f"estimated {estimated:.0f}ns"
        )

        return ExecutionPlan(
            iterations_per_sample=new_iters,
            estimated_duration=estimated,
            params=resolved,
            runnable=self.runnable,
            warmup_time=settings.warmup_time,
            warmup_iterations=settings.warmup_iterations,
            param_types=param_types,
        )

    def __repr__(self) -> str:
        return f"<Benchmark(name={self.name})>"
