"""
Clock abstraction and timing primitives.

All durations are expressed in nanoseconds: clocks return integer
timestamps, elapsed times and estimates are floats.
"""

import inspect
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from ..errors import BenchmarkNotMeasured, OptimizedAway
from ..params import Parameters

# run_for_at_least() gives up once the iteration count passes this
MAX_ITERATIONS = 1 << 30


class Clock(ABC):
    """Monotonic time source."""

    name: str = "base"

    @abstractmethod
    def now(self) -> int:
        """Current time in nanoseconds."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"


class SystemClock(Clock):
    """Clock backed by time.perf_counter_ns()."""

    name = "perf_counter"

    def now(self) -> int:
        return time.perf_counter_ns()


@dataclass
class Timing:
    """Outcome of a timed call."""
    elapsed: float
    result: Any
    iterations: int


def measure(clock: Clock, fun: Callable, *args) -> Timing:
    """Time a single call of fun(*args)."""
    start = clock.now()
    result = fun(*args)
    end = clock.now()
    return Timing(elapsed=float(end - start), result=result, iterations=1)


def run_for_at_least(
    clock: Clock,
    how_long: float,
    seed: int,
    fun: Callable[[int], Any],
    self_timed: bool = False,
) -> Timing:
    """
    Call fun(iterations) with a doubling iteration count until a single
    call takes at least `how_long` nanoseconds.

    Args:
        clock: Time source
        how_long: Minimum elapsed time in nanoseconds
        seed: Initial iteration count
        fun: Callable taking the iteration count
        self_timed: fun returns its own elapsed time, which is used in
            place of timing the whole call

    Returns:
        Timing of the final call, with the iteration count that reached it

    Raises:
        OptimizedAway: If the iteration count grows past MAX_ITERATIONS
    """
    iterations = max(seed, 1)
    while iterations <= MAX_ITERATIONS:
        timing = measure(clock, fun, iterations)
        if self_timed:
            timing.elapsed = float(timing.result)
        if timing.elapsed >= how_long:
            return Timing(elapsed=timing.elapsed, result=timing.result, iterations=iterations)
        iterations *= 2
    raise OptimizedAway()


def repeat(fun: Callable[[], Any]) -> Callable[[int], Any]:
    """Turn a nullary callable into one that runs it k times."""
    def repeated(k: int) -> None:
        for _ in range(k):
            fun()
    return repeated


def _positional_arity(fun: Callable) -> int:
    try:
        signature = inspect.signature(fun)
    except (TypeError, ValueError):
        return 0
    return sum(
        1 for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
        and p.default is p.empty
    )


def takes_argument(fun: Callable) -> bool:
    """Whether `fun` needs one positional argument."""
    return _positional_arity(fun) >= 1


class Chronometer:
    """
    Timing helper handed to chronometer-style benchmarks.

    Only the code passed to measure() is timed, so setup can happen
    outside of it.

    Example:
        @benchmark("sort")
        def sort_bench(meter):
            data = make_data(meter.param("size"))
            meter.measure(lambda: sorted(data))
    """

    def __init__(self, clock: Clock, runs: int, params: Parameters, param_types=None):
        self._clock = clock
        self._runs = runs
        self._params = params
        self._param_types = param_types
        self.elapsed: float = 0.0
        self.measured = False

    @property
    def runs(self) -> int:
        """Number of times measure() runs its callable."""
        return self._runs

    @property
    def params(self) -> Parameters:
        return self._params

    def param(self, name: str) -> Any:
        """
        Current value of a parameter, parsed with its registered type.

        Raises:
            KeyError: If the parameter has no value
        """
        value = self._params[name]
        if self._param_types is not None and name in self._param_types:
            return self._param_types.get(name).parse(value)
        return value

    def measure(self, fun: Callable) -> None:
        """
        Time `runs` calls of fun. fun takes either no arguments or the
        iteration index.
        """
        with_index = takes_argument(fun)
        start = self._clock.now()
        if with_index:
            for i in range(self._runs):
                fun(i)
        else:
            for _ in range(self._runs):
                fun()
        end = self._clock.now()
        self.elapsed = float(end - start)
        self.measured = True


def invoke_benchmark(
    runnable: Callable,
    clock: Clock,
    iterations: int,
    params: Parameters,
    param_types=None,
) -> float:
    """
    Run a benchmark runnable for `iterations` iterations and return the
    elapsed time.

    A runnable taking no arguments is repeated and timed as a whole; one
    taking a Chronometer times only what it passes to meter.measure().

    Raises:
        BenchmarkNotMeasured: If a chronometer runnable never measured
    """
    if takes_argument(runnable):
        meter = Chronometer(clock, iterations, params, param_types)
        runnable(meter)
        if not meter.measured:
            raise BenchmarkNotMeasured()
        return meter.elapsed
    return measure(clock, repeat(runnable), iterations).elapsed
