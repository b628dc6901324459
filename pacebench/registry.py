"""
Benchmark registration, filtering and validation.
"""

import re
import logging
from typing import Callable, Iterator, List, Optional, Sequence

from .benchmark.plan import Benchmark
from .errors import DuplicateBenchmark, InvalidFilterPattern

logger = logging.getLogger(__name__)


class BenchmarkRegistry:
    """
    Ordered collection of registered benchmarks.

    Duplicate names are accepted here and rejected by validate_benchmarks()
    before a run starts.

    Example:
        registry = BenchmarkRegistry()

        @registry.benchmark("list append")
        def append():
            items.append(1)
    """

    def __init__(self):
        self._benchmarks: List[Benchmark] = []

    def add(self, name: str, runnable: Callable) -> Benchmark:
        """Register a runnable under a name."""
        bench = Benchmark(name=name, runnable=runnable)
        self._benchmarks.append(bench)
        return bench

    def benchmark(self, name: Optional[str] = None) -> Callable:
        """Decorator registering a function, named after it by default."""
        def decorator(fn: Callable) -> Callable:
            self.add(name or fn.__name__, fn)
            return fn
        return decorator

    def names(self) -> List[str]:
        return [b.name for b in self._benchmarks]

    def clear(self) -> None:
        self._benchmarks.clear()

    def __iter__(self) -> Iterator[Benchmark]:
        return iter(list(self._benchmarks))

    def __len__(self) -> int:
        return len(self._benchmarks)


# Default registry used by the @benchmark decorator and the CLI
default_benchmarks = BenchmarkRegistry()


def benchmark(name: Optional[str] = None) -> Callable:
    """Register a benchmark on the default registry."""
    return default_benchmarks.benchmark(name)


def filter_benchmarks(benchmarks: Sequence[Benchmark], pattern: str) -> List[Benchmark]:
    """
    Select the benchmarks whose whole name matches `pattern`.

    Order is preserved.

    Raises:
        InvalidFilterPattern: If the pattern does not compile
    """
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise InvalidFilterPattern(pattern, str(e)) from e
    return [b for b in benchmarks if regex.fullmatch(b.name)]


def validate_benchmarks(benchmarks: Sequence[Benchmark]) -> List[Benchmark]:
    """
    Check that no two benchmarks share a name.

    Returns:
        The benchmarks, unchanged

    Raises:
        DuplicateBenchmark: For the first name seen twice, in registration order
    """
    seen = set()
    for bench in benchmarks:
        if bench.name in seen:
            raise DuplicateBenchmark(bench.name)
        seen.add(bench.name)
    return list(benchmarks)
