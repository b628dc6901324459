"""
Harness error types.

Every error carries a FailureKind so callers can branch on the class of
failure without matching on exception types.
"""

from enum import Enum


class FailureKind(Enum):
    """Classes of failure that terminate a run."""
    BENCHMARK_USER_ERROR = "benchmark_user_error"
    DUPLICATE_BENCHMARK = "duplicate_benchmark"
    NO_SUCH_REPORTER = "no_such_reporter"
    UNKNOWN_PARAMETER = "unknown_parameter"
    INVALID_FILTER_PATTERN = "invalid_filter_pattern"
    INVALID_PARAM_RUN_SPEC = "invalid_param_run_spec"
    INVALID_PARAMETER_VALUE = "invalid_parameter_value"


class PaceBenchError(Exception):
    """Base exception for harness errors."""
    kind: FailureKind


class BenchmarkUserError(PaceBenchError):
    """
    Raised when a benchmark's preparation or execution code failed.

    Carries no detail about the original failure; that has already been
    handed to the reporter through benchmark_failure().
    """
    kind = FailureKind.BENCHMARK_USER_ERROR

    def __init__(self, message: str = "a benchmark failed to run successfully"):
        super().__init__(message)


class ConfigurationError(PaceBenchError):
    """Raised when a run is misconfigured; detected before the run starts."""
    pass


class DuplicateBenchmark(ConfigurationError):
    """Raised when two registered benchmarks share a name."""
    kind = FailureKind.DUPLICATE_BENCHMARK

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Duplicate benchmark name: {name}")


class NoSuchReporter(ConfigurationError):
    """Raised when the configured reporter is not registered."""
    kind = FailureKind.NO_SUCH_REPORTER

    def __init__(self, name: str, available=()):
        self.name = name
        message = f"Unknown reporter: {name}"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)


class UnknownParameter(ConfigurationError):
    """Raised when a parameter name has no registered type."""
    kind = FailureKind.UNKNOWN_PARAMETER

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown parameter: {name}")


class InvalidFilterPattern(ConfigurationError):
    """Raised when the benchmark filter is not a valid regular expression."""
    kind = FailureKind.INVALID_FILTER_PATTERN

    def __init__(self, pattern: str, reason: str = ""):
        self.pattern = pattern
        message = f"Invalid filter pattern: {pattern!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidParameterValue(ConfigurationError):
    """Raised when a fixed parameter value cannot be parsed by its type."""
    kind = FailureKind.INVALID_PARAMETER_VALUE

    def __init__(self, name: str, value: str, reason: str = ""):
        self.name = name
        self.value = value
        message = f"Invalid value for parameter {name}: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class InvalidParamRunSpec(ConfigurationError):
    """Raised when a parameter sweep specification is malformed."""
    kind = FailureKind.INVALID_PARAM_RUN_SPEC


class OptimizedAway(RuntimeError):
    """Raised when timed code keeps taking no measurable time."""

    def __init__(self):
        super().__init__(
            "could not measure benchmark, maybe it was optimized away"
        )


class BenchmarkNotMeasured(RuntimeError):
    """Raised when a chronometer benchmark never calls meter.measure()."""

    def __init__(self):
        super().__init__("benchmark did not call meter.measure()")
