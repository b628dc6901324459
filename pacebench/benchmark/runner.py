"""
Benchmark runner: drives a whole run and the reporter protocol around it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar

from ..config import Configuration
from ..errors import BenchmarkUserError
from ..params import (
    ParameterRegistry,
    Parameters,
    default_params,
    generate_params,
    validate_overrides,
)
from ..registry import BenchmarkRegistry, default_benchmarks, filter_benchmarks, validate_benchmarks
from ..reporters import Reporter, ReporterRegistry, default_reporters
from .clock import Clock, SystemClock
from .environment import CalibrationSettings, Environment, measure_environment
from .metrics import SampleAnalysis, analyse_samples
from .plan import Benchmark, ExecutionPlan

logger = logging.getLogger(__name__)

T = TypeVar("T")

Analyser = Callable[[Configuration, Environment, List[float]], SampleAnalysis]


@dataclass
class UserCodeResult(Generic[T]):
    """
    Outcome of one guarded call into benchmark code: either the value it
    returned or the BenchmarkUserError that replaces its failure.
    """
    value: Optional[T] = None
    error: Optional[BenchmarkUserError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the BenchmarkUserError."""
        if self.error is not None:
            raise self.error
        return self.value


def run_user_code(reporter: Reporter, fun: Callable[[], T]) -> UserCodeResult[T]:
    """
    Invoke benchmark code, isolating its failures.

    Any exception is handed to reporter.benchmark_failure() and replaced
    by a fresh BenchmarkUserError, so the original type never reaches the
    runner.
    """
    try:
        return UserCodeResult(value=fun())
    except Exception as e:
        logger.error(f"Benchmark code failed: {e!r}")
        reporter.benchmark_failure(e)
        return UserCodeResult(error=BenchmarkUserError())


class BenchmarkRunner:
    """
    Executes benchmarks and issues the reporter protocol.

    Features:
        - Clock calibration once per run
        - Parameter sweeps
        - Fail-fast on benchmark failure
        - Optional statistical analysis

    Example:
        runner = BenchmarkRunner(ConsoleReporter())
        runner.go(Configuration(), list(default_benchmarks))
    """

    def __init__(
        self,
        reporter: Reporter,
        clock: Optional[Clock] = None,
        param_registry: Optional[ParameterRegistry] = None,
        settings: Optional[CalibrationSettings] = None,
        analyser: Optional[Analyser] = None,
    ):
        """
        Initialize benchmark runner.

        Args:
            reporter: Sink for the run's lifecycle notifications
            clock: Time source (default: SystemClock)
            param_registry: Declared parameter types (default: process registry)
            settings: Timing tunables (default: from environment Settings)
            analyser: Sample analysis (default: bootstrap analysis)
        """
        self.reporter = reporter
        self.clock = clock or SystemClock()
        self.param_registry = param_registry if param_registry is not None else default_params
        self.settings = settings or CalibrationSettings.from_settings()
        self.analyser = analyser or analyse_samples

    def go(self, cfg: Configuration, benchmarks: Sequence[Benchmark]) -> None:
        """
        Run every selected benchmark under every parameter set.

        Configuration errors (bad filter, unknown parameter, unparseable
        parameter value) are raised before the reporter sees any call.
        The reporter's output is closed however the run ends.

        Raises:
            ConfigurationError: If the configuration is invalid
            BenchmarkUserError: If any benchmark fails; the run stops there
        """
        selected = filter_benchmarks(benchmarks, cfg.filter_pattern)
        param_sets = generate_params(cfg, self.param_registry)
        validate_overrides(cfg, self.param_registry)
        logger.info(
            f"Running {len(selected)} benchmarks over {len(param_sets)} parameter sets"
        )

        reporter = self.reporter
        reporter.configure(cfg)
        try:
            env = measure_environment(self.clock, reporter, self.settings)
            reporter.suite_start()

            for params in param_sets:
                reporter.params_start(params)
                for bench in selected:
                    self._run_benchmark(cfg, bench, params, env)
                reporter.params_complete()

            reporter.suite_complete()
        finally:
            reporter.close_output()
        logger.info("Benchmark suite complete")

    def _run_benchmark(
        self,
        cfg: Configuration,
        bench: Benchmark,
        params: Parameters,
        env: Environment,
    ) -> None:
        reporter = self.reporter
        reporter.benchmark_start(bench.name)
        logger.info(f"Benchmarking '{bench.name}'")

        plan: ExecutionPlan = run_user_code(
            reporter,
            lambda: bench.prepare(cfg, params, env, self.clock, self.settings, self.param_registry),
        ).unwrap()
        reporter.measurement_start(plan)

        samples: List[float] = run_user_code(
            reporter,
            lambda: plan.run(cfg, env, self.clock),
        ).unwrap()
        reporter.measurement_complete(samples)

        if not cfg.no_analysis:
            reporter.analysis_start()
            analysis = self.analyser(cfg, env, samples)
            reporter.analysis_complete(analysis)

        reporter.benchmark_complete()


def go(
    cfg: Configuration,
    benchmarks: Sequence[Benchmark],
    reporter: Reporter,
    **kwargs: Any,
) -> None:
    """Run `benchmarks` with `reporter`. See BenchmarkRunner for kwargs."""
    BenchmarkRunner(reporter, **kwargs).go(cfg, benchmarks)


def run(
    cfg: Configuration,
    benchmarks: Optional[BenchmarkRegistry] = None,
    reporters: Optional[ReporterRegistry] = None,
    param_registry: Optional[ParameterRegistry] = None,
    **kwargs: Any,
) -> None:
    """
    Resolve the reporter named by cfg.reporter_id, validate the registered
    benchmarks, then run them.

    Args:
        cfg: Run configuration
        benchmarks: Benchmark registry (default: process registry)
        reporters: Reporter registry (default: built-in reporters)
        param_registry: Parameter registry (default: process registry)
        **kwargs: Passed to BenchmarkRunner (clock, settings, analyser)

    Raises:
        NoSuchReporter: If cfg.reporter_id is not registered
        DuplicateBenchmark: If two benchmarks share a name
    """
    reporters = reporters if reporters is not None else default_reporters()
    benchmarks = benchmarks if benchmarks is not None else default_benchmarks
    param_registry = param_registry if param_registry is not None else default_params

    reporter = reporters.get(cfg.reporter_id)
    validated = validate_benchmarks(list(benchmarks))
    go(cfg, validated, reporter, param_registry=param_registry, **kwargs)
