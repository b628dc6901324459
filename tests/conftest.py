"""Shared pytest fixtures for pacebench tests.

Provides a deterministic clock, a reporter that records every lifecycle
call, and calibration settings small enough to run in microseconds of
simulated time.
"""

from __future__ import annotations

from typing import Any, List, Tuple

import pytest

from pacebench.benchmark.clock import Clock
from pacebench.benchmark.environment import CalibrationSettings
from pacebench.params import ParameterRegistry
from pacebench.registry import BenchmarkRegistry
from pacebench.reporters.base import Reporter


class TickClock(Clock):
    """Clock that moves forward by `tick` on every read."""

    name = "tick"

    def __init__(self, tick: int = 10):
        self.tick = tick
        self.t = 0

    def now(self) -> int:
        current = self.t
        self.t += self.tick
        return current

    def advance(self, ns: int) -> None:
        self.t += ns


class RecordingReporter(Reporter):
    """Reporter test double that records (method, args) for every call."""

    name = "recording"
    description = "Records lifecycle calls"

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))

    @property
    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def args_of(self, method: str) -> List[Any]:
        return [args[0] if args else None for name, args in self.calls if name == method]

    def configure(self, cfg):
        self.cfg = cfg
        self._record("configure", cfg)

    def warmup_start(self):
        self._record("warmup_start")

    def warmup_end(self, iterations):
        self._record("warmup_end", iterations)

    def estimate_clock_resolution_start(self):
        self._record("estimate_clock_resolution_start")

    def estimate_clock_resolution_complete(self, estimate):
        self._record("estimate_clock_resolution_complete", estimate)

    def estimate_clock_cost_start(self):
        self._record("estimate_clock_cost_start")

    def estimate_clock_cost_complete(self, estimate):
        self._record("estimate_clock_cost_complete", estimate)

    def suite_start(self):
        self._record("suite_start")

    def params_start(self, params):
        self._record("params_start", params)

    def benchmark_start(self, name):
        self._record("benchmark_start", name)

    def benchmark_failure(self, failure):
        self._record("benchmark_failure", failure)

    def measurement_start(self, plan):
        self._record("measurement_start", plan)

    def measurement_complete(self, samples):
        self._record("measurement_complete", samples)

    def analysis_start(self):
        self._record("analysis_start")

    def analysis_complete(self, analysis):
        self._record("analysis_complete", analysis)

    def benchmark_complete(self):
        self._record("benchmark_complete")

    def params_complete(self):
        self._record("params_complete")

    def suite_complete(self):
        self._record("suite_complete")


CALIBRATION_CALLS = [
    "warmup_start",
    "warmup_end",
    "estimate_clock_resolution_start",
    "estimate_clock_resolution_complete",
    "estimate_clock_cost_start",
    "estimate_clock_cost_complete",
]


@pytest.fixture()
def clock() -> TickClock:
    return TickClock(tick=10)


@pytest.fixture()
def fast_settings() -> CalibrationSettings:
    return CalibrationSettings(
        warmup_time=1000,
        warmup_iterations=10,
        clock_resolution_estimation_time=1000,
        clock_cost_estimation_time=1000,
        clock_cost_estimation_iterations=10,
        clock_cost_estimation_tick_limit=100,
        clock_cost_estimation_time_limit=2000,
        minimum_ticks=10,
    )


@pytest.fixture()
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture()
def param_registry() -> ParameterRegistry:
    registry = ParameterRegistry()
    registry.declare("n", 0)
    registry.declare("size", 1)
    registry.declare("ratio", 0.5)
    return registry


@pytest.fixture()
def make_registry(clock):
    """Factory for a BenchmarkRegistry of benchmarks that advance the clock."""

    def _factory(*names: str, cost: int = 100) -> BenchmarkRegistry:
        registry = BenchmarkRegistry()
        for name in names:
            registry.add(name, lambda: clock.advance(cost))
        return registry

    return _factory
