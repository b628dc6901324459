"""
Utility functions for the benchmark package.
Separated to avoid circular imports.
"""

import os
import socket
import platform
from typing import Dict, Mapping


def get_machine_info() -> Dict[str, str]:
    """
    Get machine information for report context.

    Returns:
        Dictionary with machine details including:
        - hostname: Machine hostname
        - platform: OS platform info
        - machine: CPU architecture
        - processor: Processor description (may be empty)
        - cpu_count: Logical CPU count
        - python: Python implementation and version
    """
    return {
        "hostname": socket.gethostname(),
        "platform": f"{platform.system()} {platform.release()}",
        "machine": platform.machine(),
        "processor": platform.processor() or "unknown",
        "cpu_count": str(os.cpu_count() or "unknown"),
        "python": f"{platform.python_implementation()} {platform.python_version()}",
    }


_UNITS = (
    (1e9, "s"),
    (1e6, "ms"),
    (1e3, "μs"),
)


def format_duration(ns: float) -> str:
    """
    Format a duration in nanoseconds with a readable unit.

    Example:
        format_duration(1500)      # -> "1.5 μs"
        format_duration(2.5e9)     # -> "2.5 s"
    """
    for scale, unit in _UNITS:
        if abs(ns) >= scale:
            return f"{ns / scale:.4g} {unit}"
    return f"{ns:.4g} ns"


def format_percentage(ratio: float) -> str:
    return f"{ratio * 100:.2f}%"


def column_name(name: str, params: Mapping[str, str]) -> str:
    """
    Label for one benchmark under one parameter set.

    Example:
        column_name("sort", {"size": "10"})   # -> "sort[size=10]"
    """
    if not params:
        return name
    assignments = ",".join(f"{k}={v}" for k, v in params.items())
    return f"{name}[{assignments}]"
