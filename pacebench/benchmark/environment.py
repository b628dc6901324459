"""
Timing environment calibration.

Measures, once per run, how fine-grained the clock is and how long a clock
read takes, so that benchmark plans can be sized and samples corrected.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..config import Settings
from .clock import Clock, measure, run_for_at_least
from .metrics import OutlierClassification, classify_outliers, mean

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationSettings:
    """Timing tunables. Durations are in nanoseconds."""
    warmup_time: float = 20e6
    warmup_iterations: int = 10000
    clock_resolution_estimation_time: float = 50e6
    clock_cost_estimation_time: float = 10e6
    clock_cost_estimation_iterations: int = 10000
    clock_cost_estimation_tick_limit: int = 100000
    clock_cost_estimation_time_limit: float = 1e9
    minimum_ticks: int = 1000

    @classmethod
    def from_settings(cls) -> "CalibrationSettings":
        """Build from environment-driven Settings."""
        return cls(**Settings.get_timing_config())


@dataclass(frozen=True)
class EnvironmentEstimate:
    """Mean of a calibration measurement and the outliers seen."""
    mean: float
    outliers: OutlierClassification = field(default_factory=OutlierClassification)

    def to_dict(self) -> Dict[str, Any]:
        return {"mean": self.mean, "outliers": self.outliers.to_dict()}


@dataclass(frozen=True)
class Environment:
    """Calibration data shared read-only by every benchmark in a run."""
    clock_resolution: EnvironmentEstimate
    clock_cost: EnvironmentEstimate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clock_resolution": self.clock_resolution.to_dict(),
            "clock_cost": self.clock_cost.to_dict(),
        }


def clock_deltas(clock: Clock):
    """
    Build a callable returning the deltas between k+1 successive clock
    readings.
    """
    def resolution(k: int) -> List[float]:
        times = [clock.now() for _ in range(k + 1)]
        return [float(b - a) for a, b in zip(times, times[1:])]
    return resolution


def warmup(clock: Clock, settings: CalibrationSettings) -> int:
    """Run the clock until it is warm; returns the iteration count used."""
    timing = run_for_at_least(
        clock,
        settings.warmup_time,
        settings.warmup_iterations,
        clock_deltas(clock),
    )
    return timing.iterations


def estimate_clock_resolution(
    clock: Clock,
    settings: CalibrationSettings,
    iterations: int,
) -> EnvironmentEstimate:
    """Mean delta between successive clock readings."""
    timing = run_for_at_least(
        clock,
        settings.clock_resolution_estimation_time,
        iterations,
        clock_deltas(clock),
    )
    deltas = timing.result
    return EnvironmentEstimate(mean=mean(deltas), outliers=classify_outliers(deltas))


def estimate_clock_cost(
    clock: Clock,
    settings: CalibrationSettings,
    resolution: float,
) -> EnvironmentEstimate:
    """
    Mean time taken by one clock read.

    Args:
        clock: Time source
        settings: Timing tunables
        resolution: Mean clock resolution in nanoseconds
    """
    time_limit = min(
        resolution * settings.clock_cost_estimation_tick_limit,
        settings.clock_cost_estimation_time_limit,
    )

    def time_clock(k: int) -> float:
        def reads():
            for _ in range(k):
                clock.now()
        return measure(clock, reads).elapsed

    time_clock(1)
    timing = run_for_at_least(
        clock,
        settings.clock_cost_estimation_time,
        settings.clock_cost_estimation_iterations,
        time_clock,
    )
    n_samples = max(int(math.ceil(time_limit / timing.elapsed)), 1)
    times = [time_clock(timing.iterations) / timing.iterations for _ in range(n_samples)]
    return EnvironmentEstimate(mean=mean(times), outliers=classify_outliers(times))


def measure_environment(clock: Clock, reporter, settings: CalibrationSettings) -> Environment:
    """
    Calibrate the timing environment, notifying the reporter around each
    step: warm-up, clock resolution, clock cost.

    Returns:
        Environment combining both estimates
    """
    reporter.warmup_start()
    iterations = warmup(clock, settings)
    reporter.warmup_end(iterations)
    logger.debug(f"Clock warm-up used {iterations} iterations")

    reporter.estimate_clock_resolution_start()
    resolution = estimate_clock_resolution(clock, settings, iterations)
    reporter.estimate_clock_resolution_complete(resolution)
    logger.debug(f"Clock resolution: {resolution.mean:.1f}ns")

    reporter.estimate_clock_cost_start()
    cost = estimate_clock_cost(clock, settings, resolution.mean)
    reporter.estimate_clock_cost_complete(cost)
    logger.debug(f"Clock cost: {cost.mean:.1f}ns")

    return Environment(clock_resolution=resolution, clock_cost=cost)
