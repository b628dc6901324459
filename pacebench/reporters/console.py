"""
Standard console reporter, rendered with rich.
"""

import logging
from typing import List, Optional, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .base import Reporter
from ..benchmark.utils import column_name, format_duration, format_percentage

logger = logging.getLogger(__name__)


def variance_effect(outlier_variance: float) -> str:
    """Describe how much outliers inflate the variance."""
    if outlier_variance < 0.01:
        return "unaffected"
    if outlier_variance < 0.1:
        return "slightly inflated"
    if outlier_variance < 0.5:
        return "moderately inflated"
    return "severely inflated"


class ConsoleReporter(Reporter):
    """
    Human readable progress and results on the terminal.

    Honours cfg.verbose (calibration progress, outlier detail) and
    cfg.summary (only names and headline statistics). A table of every
    analysed benchmark is printed when the suite completes.
    """

    name = "standard"
    description = "Human readable console output"

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream)
        self.console = Console(file=self.stream, highlight=False, soft_wrap=True)
        self._current = ""
        self._params = None
        self._rows: List[tuple] = []

    @property
    def verbose(self) -> bool:
        return bool(self.cfg and self.cfg.verbose)

    @property
    def summary(self) -> bool:
        return bool(self.cfg and self.cfg.summary)

    def print(self, message: str = "") -> None:
        self.console.print(message)

    def configure(self, cfg) -> None:
        super().configure(cfg)
        self.console = Console(file=self.stream, highlight=False, soft_wrap=True)
        self._rows = []

    # -- Calibration ----------------------------------------------------------

    def warmup_start(self) -> None:
        if self.verbose:
            self.print("warming up")

    def estimate_clock_resolution_start(self) -> None:
        if self.verbose:
            self.print("estimating clock resolution")

    def estimate_clock_resolution_complete(self, estimate) -> None:
        if self.summary:
            return
        prefix = "" if self.verbose else "clock resolution: "
        # samples_seen deltas come from samples_seen + 1 readings
        self._print_environment_estimate(prefix, estimate, estimate.outliers.samples_seen + 1)

    def estimate_clock_cost_start(self) -> None:
        if self.verbose:
            self.print("estimating cost of a clock call")

    def estimate_clock_cost_complete(self, estimate) -> None:
        if self.verbose:
            self._print_environment_estimate("", estimate, estimate.outliers.samples_seen)

    def _print_environment_estimate(self, prefix: str, estimate, iterations: int) -> None:
        self.print(
            f"{prefix}mean is [bold]{format_duration(estimate.mean)}[/bold] "
            f"({iterations} iterations)"
        )
        if self.verbose:
            self._print_outliers(estimate.outliers)

    # -- Benchmarks -----------------------------------------------------------

    def params_start(self, params) -> None:
        self._params = params
        if params and not self.summary:
            assignments = ", ".join(f"{k} = {v}" for k, v in params.items())
            self.print(f"\n[bold]parameters:[/bold] {escape(assignments)}")

    def benchmark_start(self, name: str) -> None:
        self._current = name
        label = "" if self.summary else "benchmarking "
        self.print(f"\n{label}[cyan]{escape(repr(name))}[/cyan]")

    def benchmark_failure(self, failure: BaseException) -> None:
        self.print(f"[red]{escape(self._current)} failed to run successfully[/red]")
        if not self.summary:
            detail = str(failure) or failure.__class__.__name__
            self.print(f"[red]error: {escape(detail)}[/red]")
        self.print("\n[bold red]benchmark aborted[/bold red]")

    def measurement_start(self, plan) -> None:
        if self.summary:
            return
        self.print(
            f"collecting {self.cfg.samples} samples, "
            f"{plan.iterations_per_sample} iterations each, "
            f"in estimated {format_duration(plan.estimated_duration)}"
        )

    def analysis_start(self) -> None:
        if self.verbose:
            self.print(f"bootstrapping with {self.cfg.resamples} resamples")

    def analysis_complete(self, analysis) -> None:
        self._print_statistic_estimate("mean", analysis.mean)
        self._print_statistic_estimate("std dev", analysis.standard_deviation)
        if not self.summary:
            self._print_outliers(analysis.outliers)
        if self.verbose:
            self.print(
                f"variance introduced by outliers: "
                f"{format_percentage(analysis.outlier_variance)}"
            )
        self.print(f"variance is {variance_effect(analysis.outlier_variance)} by outliers")
        self._rows.append((
            column_name(self._current, self._params or {}),
            format_duration(analysis.mean.point),
            format_duration(analysis.standard_deviation.point),
            str(analysis.outliers.total()),
        ))

    def _print_statistic_estimate(self, label: str, estimate) -> None:
        self.print(
            f"{label}: [bold]{format_duration(estimate.point)}[/bold], "
            f"lb {format_duration(estimate.lower_bound)}, "
            f"ub {format_duration(estimate.upper_bound)}, "
            f"ci {estimate.confidence_interval:g}"
        )

    def _print_outliers(self, outliers) -> None:
        total = outliers.total()
        if total == 0 or outliers.samples_seen == 0:
            return
        seen = outliers.samples_seen
        self.print(
            f"found {total} outliers among {seen} samples "
            f"({format_percentage(total / seen)})"
        )
        if self.verbose:
            for count, label in (
                (outliers.low_severe, "low severe"),
                (outliers.low_mild, "low mild"),
                (outliers.high_mild, "high mild"),
                (outliers.high_severe, "high severe"),
            ):
                if count > 0:
                    self.print(f"  {count} ({format_percentage(count / seen)}) {label}")

    # -- Suite ----------------------------------------------------------------

    def suite_complete(self) -> None:
        if self._rows:
            table = Table(title=self.cfg.title if self.cfg else None)
            table.add_column("Benchmark", style="cyan")
            table.add_column("Mean", justify="right")
            table.add_column("Std Dev", justify="right")
            table.add_column("Outliers", justify="right")
            for row in self._rows:
                table.add_row(*(escape(cell) for cell in row))
            self.print()
            self.console.print(table)
        super().suite_complete()
