"""
Base reporter interface.
All reporters implement this interface.
"""

import sys
import logging
from abc import ABC
from pathlib import Path
from typing import Any, List, Optional, TextIO

logger = logging.getLogger(__name__)


class Reporter(ABC):
    """
    Abstract base class for benchmark reporters.

    A run calls the lifecycle methods below in a fixed order:

        configure
        warmup_start, warmup_end
        estimate_clock_resolution_start, estimate_clock_resolution_complete
        estimate_clock_cost_start, estimate_clock_cost_complete
        suite_start
          params_start                         (per parameter set)
            benchmark_start                    (per benchmark)
            benchmark_failure                  (only if user code failed)
            measurement_start, measurement_complete
            analysis_start, analysis_complete  (unless analysis is disabled)
            benchmark_complete
          params_complete
        suite_complete

    Every method is a no-op here; subclasses override what they render.

    Example:
        class MyReporter(Reporter):
            name = "mine"

            def benchmark_start(self, name):
                self.stream.write(f"running {name}\\n")
    """

    # Reporter identification
    name: str = "base"
    description: str = "Base Reporter"

    def __init__(self, stream: Optional[TextIO] = None):
        """
        Initialize reporter.

        Args:
            stream: Output stream (default: cfg.output_file if set, else stdout)
        """
        self._given_stream = stream
        self._owned_stream: Optional[TextIO] = None
        self.stream: TextIO = stream or sys.stdout
        self.output_file = ""
        self.output_path: Optional[Path] = None
        self.cfg = None

    # -- Stream management --------------------------------------------------

    def default_output_file(self, cfg) -> str:
        """Output file used when cfg.output_file is empty; empty means stdout."""
        return ""

    def open_output(self, output_file: str) -> None:
        """Point the reporter at `output_file` unless a stream was given."""
        self.close_output()
        self.output_path = None
        if self._given_stream is not None or not output_file:
            self.stream = self._given_stream or sys.stdout
            return
        path = Path(output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._owned_stream = open(path, "w", encoding="utf-8", newline="")
        self.stream = self._owned_stream
        self.output_path = path
        logger.info(f"Writing {self.name} report to {path}")

    def close_output(self) -> None:
        if self._owned_stream is not None:
            self._owned_stream.close()
            self._owned_stream = None
            self.stream = self._given_stream or sys.stdout

    # -- Lifecycle ------------------------------------------------------------

    def configure(self, cfg) -> None:
        self.cfg = cfg
        self.output_file = cfg.output_file or self.default_output_file(cfg)
        self.open_output(self.output_file)

    def warmup_start(self) -> None:
        pass

    def warmup_end(self, iterations: int) -> None:
        pass

    def estimate_clock_resolution_start(self) -> None:
        pass

    def estimate_clock_resolution_complete(self, estimate) -> None:
        pass

    def estimate_clock_cost_start(self) -> None:
        pass

    def estimate_clock_cost_complete(self, estimate) -> None:
        pass

    def suite_start(self) -> None:
        pass

    def params_start(self, params) -> None:
        pass

    def benchmark_start(self, name: str) -> None:
        pass

    def benchmark_failure(self, failure: BaseException) -> None:
        pass

    def measurement_start(self, plan) -> None:
        pass

    def measurement_complete(self, samples: List[float]) -> None:
        pass

    def analysis_start(self) -> None:
        pass

    def analysis_complete(self, analysis) -> None:
        pass

    def benchmark_complete(self) -> None:
        pass

    def params_complete(self) -> None:
        pass

    def suite_complete(self) -> None:
        self.close_output()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name})>"


class CollectingReporter(Reporter):
    """
    Reporter base that keeps every benchmark result of the run in memory
    for file reporters that write once at suite_complete().

    The output file is only opened in suite_complete(), so an aborted run
    leaves no partial report behind. Subclasses implement write_report().
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream)
        self.results: List[dict] = []
        self.environment: dict = {}
        self._params: Any = None
        self._current: Optional[dict] = None

    def configure(self, cfg) -> None:
        self.cfg = cfg
        self.output_file = cfg.output_file or self.default_output_file(cfg)
        self.open_output("")
        self.results = []
        self.environment = {}

    def write_report(self) -> None:
        """Write the collected results to self.stream."""
        raise NotImplementedError

    def suite_complete(self) -> None:
        self.open_output(self.output_file)
        try:
            self.write_report()
        finally:
            self.close_output()

    def estimate_clock_resolution_complete(self, estimate) -> None:
        self.environment["clock_resolution"] = estimate.to_dict()

    def estimate_clock_cost_complete(self, estimate) -> None:
        self.environment["clock_cost"] = estimate.to_dict()

    def params_start(self, params) -> None:
        self._params = params

    def benchmark_start(self, name: str) -> None:
        self._current = {
            "name": name,
            "params": dict(self._params or {}),
            "plan": None,
            "samples": [],
            "analysis": None,
        }

    def measurement_start(self, plan) -> None:
        self._current["plan"] = plan.to_dict()

    def measurement_complete(self, samples: List[float]) -> None:
        self._current["samples"] = list(samples)

    def analysis_complete(self, analysis) -> None:
        self._current["analysis"] = analysis.to_dict()

    def benchmark_complete(self) -> None:
        self.results.append(self._current)
        self._current = None
