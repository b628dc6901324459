"""
Benchmark timing, planning and analysis package.
"""

from .clock import Clock, SystemClock, Chronometer, run_for_at_least
from .environment import CalibrationSettings, Environment, EnvironmentEstimate, measure_environment
from .metrics import Estimate, OutlierClassification, SampleAnalysis, analyse_samples
from .plan import Benchmark, ExecutionPlan

__all__ = [
    "Clock",
    "SystemClock",
    "Chronometer",
    "run_for_at_least",
    "CalibrationSettings",
    "Environment",
    "EnvironmentEstimate",
    "measure_environment",
    "Estimate",
    "OutlierClassification",
    "SampleAnalysis",
    "analyse_samples",
    "Benchmark",
    "ExecutionPlan",
]
