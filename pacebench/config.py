"""
Configuration management for pacebench.
Loads defaults from environment variables and a .env file.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional
from dotenv import load_dotenv

from .errors import InvalidParamRunSpec

# Load .env file from the working directory
load_dotenv(Path.cwd() / ".env")


class Settings:
    """Central configuration management."""

    # ==========================================================================
    # Run Settings
    # ==========================================================================
    SAMPLES: int = int(os.getenv("PACEBENCH_SAMPLES", "100"))
    RESAMPLES: int = int(os.getenv("PACEBENCH_RESAMPLES", "10000"))
    CONFIDENCE_INTERVAL: float = float(os.getenv("PACEBENCH_CONFIDENCE_INTERVAL", "0.95"))
    REPORTER: str = os.getenv("PACEBENCH_REPORTER", "standard")

    # Output directory for file reporters
    REPORT_DIR: Path = Path(os.getenv("PACEBENCH_REPORT_DIR", "reports"))

    # ==========================================================================
    # Timing Settings (milliseconds unless stated otherwise)
    # ==========================================================================
    WARMUP_TIME_MS: float = float(os.getenv("PACEBENCH_WARMUP_TIME_MS", "20"))
    WARMUP_ITERATIONS: int = int(os.getenv("PACEBENCH_WARMUP_ITERATIONS", "10000"))
    RESOLUTION_TIME_MS: float = float(os.getenv("PACEBENCH_RESOLUTION_TIME_MS", "50"))
    CLOCK_COST_TIME_MS: float = float(os.getenv("PACEBENCH_CLOCK_COST_TIME_MS", "10"))
    CLOCK_COST_ITERATIONS: int = int(os.getenv("PACEBENCH_CLOCK_COST_ITERATIONS", "10000"))
    CLOCK_COST_TICK_LIMIT: int = int(os.getenv("PACEBENCH_CLOCK_COST_TICK_LIMIT", "100000"))
    CLOCK_COST_TIME_LIMIT_MS: float = float(os.getenv("PACEBENCH_CLOCK_COST_TIME_LIMIT_MS", "1000"))
    MINIMUM_TICKS: int = int(os.getenv("PACEBENCH_MINIMUM_TICKS", "1000"))

    @classmethod
    def get_timing_config(cls) -> Dict[str, Any]:
        """Get timing tunables, in nanoseconds."""
        ms = 1_000_000
        return {
            "warmup_time": cls.WARMUP_TIME_MS * ms,
            "warmup_iterations": cls.WARMUP_ITERATIONS,
            "clock_resolution_estimation_time": cls.RESOLUTION_TIME_MS * ms,
            "clock_cost_estimation_time": cls.CLOCK_COST_TIME_MS * ms,
            "clock_cost_estimation_iterations": cls.CLOCK_COST_ITERATIONS,
            "clock_cost_estimation_tick_limit": cls.CLOCK_COST_TICK_LIMIT,
            "clock_cost_estimation_time_limit": cls.CLOCK_COST_TIME_LIMIT_MS * ms,
            "minimum_ticks": cls.MINIMUM_TICKS,
        }


SWEEP_OPERATORS = ("+", "*")


@dataclass
class ParamRunSpec:
    """
    Sweep parameter `name` starting at `init`, advancing by `step`
    under `operator`, `count` times.

    Attributes:
        name: Swept parameter name
        operator: "+" for addition, "*" for multiplication
        init: Initial value (string form)
        step: Step value (string form)
        count: Number of parameter sets to generate
        current_map: Current value of each swept parameter, updated
            while the sweep is generated
    """
    name: str
    operator: str
    init: str
    step: str
    count: int
    current_map: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.operator not in SWEEP_OPERATORS:
            raise InvalidParamRunSpec(
                f"Unsupported sweep operator {self.operator!r} (expected '+' or '*')"
            )
        if self.count < 0:
            raise InvalidParamRunSpec(f"Sweep count must be >= 0, got {self.count}")

    @classmethod
    def parse(cls, text: str) -> "ParamRunSpec":
        """
        Parse the command line form NAME:OP:INIT:STEP:COUNT.

        Example:
            ParamRunSpec.parse("size:*:1:2:10")
        """
        parts = text.split(":")
        if len(parts) != 5:
            raise InvalidParamRunSpec(
                f"Expected NAME:OP:INIT:STEP:COUNT, got {text!r}"
            )
        name, operator, init, step, count = (p.strip() for p in parts)
        try:
            count_value = int(count)
        except ValueError:
            raise InvalidParamRunSpec(f"Sweep count is not an integer: {count!r}")
        return cls(name=name, operator=operator, init=init, step=step, count=count_value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "operator": self.operator,
            "init": self.init,
            "step": self.step,
            "count": self.count,
        }


@dataclass(frozen=True)
class Configuration:
    """Settings for a single benchmark run. Immutable once the run starts."""
    filter_pattern: str = ".*"
    reporter_id: str = "standard"
    no_analysis: bool = False
    params: Optional[ParamRunSpec] = None

    samples: int = 100
    resamples: int = 10000
    confidence_interval: float = 0.95
    param_overrides: Dict[str, str] = field(default_factory=dict)

    # Reporter output
    output_file: str = ""
    title: str = "benchmarks"
    verbose: bool = False
    summary: bool = False

    @classmethod
    def from_settings(cls, **overrides) -> "Configuration":
        """Build a configuration from environment defaults plus overrides."""
        cfg = cls(
            reporter_id=Settings.REPORTER,
            samples=Settings.SAMPLES,
            resamples=Settings.RESAMPLES,
            confidence_interval=Settings.CONFIDENCE_INTERVAL,
        )
        return replace(cfg, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "filter_pattern": self.filter_pattern,
            "reporter_id": self.reporter_id,
            "no_analysis": self.no_analysis,
            "params": self.params.to_dict() if self.params else None,
            "samples": self.samples,
            "resamples": self.resamples,
            "confidence_interval": self.confidence_interval,
            "param_overrides": dict(self.param_overrides),
            "title": self.title,
        }
