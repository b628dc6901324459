"""
pacebench - a microbenchmarking harness.

Example:
    from pacebench import benchmark, declare_param

    declare_param("size", 100)

    @benchmark("sorted")
    def sort_bench(meter):
        data = list(range(meter.param("size"), 0, -1))
        meter.measure(lambda: sorted(data))
"""

from .config import Configuration, ParamRunSpec, Settings
from .errors import (
    FailureKind,
    PaceBenchError,
    BenchmarkUserError,
    ConfigurationError,
    DuplicateBenchmark,
    NoSuchReporter,
    UnknownParameter,
    InvalidFilterPattern,
    InvalidParamRunSpec,
    InvalidParameterValue,
)
from .params import Parameters, ParameterRegistry, declare_param, default_params, generate_params
from .registry import (
    BenchmarkRegistry,
    benchmark,
    default_benchmarks,
    filter_benchmarks,
    validate_benchmarks,
)
from .reporters import Reporter, ReporterRegistry, default_reporters
from .benchmark.runner import BenchmarkRunner, go, run, run_user_code

__version__ = "1.0.0"

__all__ = [
    "Configuration",
    "ParamRunSpec",
    "Settings",
    "FailureKind",
    "PaceBenchError",
    "BenchmarkUserError",
    "ConfigurationError",
    "DuplicateBenchmark",
    "NoSuchReporter",
    "UnknownParameter",
    "InvalidFilterPattern",
    "InvalidParamRunSpec",
    "InvalidParameterValue",
    "Parameters",
    "ParameterRegistry",
    "declare_param",
    "default_params",
    "generate_params",
    "BenchmarkRegistry",
    "benchmark",
    "default_benchmarks",
    "filter_benchmarks",
    "validate_benchmarks",
    "Reporter",
    "ReporterRegistry",
    "default_reporters",
    "BenchmarkRunner",
    "go",
    "run",
    "run_user_code",
]
