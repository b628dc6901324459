"""
Benchmark reporters package.
Each reporter implements the Reporter interface.
"""

from typing import Dict, Iterator, List, Optional

from .base import Reporter, CollectingReporter
from .console import ConsoleReporter
from .csv_reporter import CsvReporter
from .json_reporter import JsonReporter
from ..errors import NoSuchReporter


class ReporterRegistry:
    """
    Registry of reporter instances, looked up by name.

    Example:
        registry = ReporterRegistry()
        registry.register(ConsoleReporter())
        reporter = registry.get("standard")
    """

    def __init__(self, reporters: Optional[List[Reporter]] = None):
        self._reporters: Dict[str, Reporter] = {}
        for reporter in reporters or []:
            self.register(reporter)

    def register(self, reporter: Reporter, name: Optional[str] = None) -> Reporter:
        self._reporters[name or reporter.name] = reporter
        return reporter

    def get(self, name: str) -> Reporter:
        """
        Get a reporter instance by name.

        Raises:
            NoSuchReporter: If no reporter is registered under that name
        """
        reporter = self._reporters.get(name)
        if reporter is None:
            raise NoSuchReporter(name, list(self._reporters.keys()))
        return reporter

    def names(self) -> List[str]:
        return list(self._reporters.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._reporters

    def __iter__(self) -> Iterator[Reporter]:
        return iter(self._reporters.values())

    def __len__(self) -> int:
        return len(self._reporters)


def default_reporters() -> ReporterRegistry:
    """Registry holding one instance of each built-in reporter."""
    return ReporterRegistry([ConsoleReporter(), CsvReporter(), JsonReporter()])


__all__ = [
    "Reporter",
    "CollectingReporter",
    "ConsoleReporter",
    "CsvReporter",
    "JsonReporter",
    "ReporterRegistry",
    "default_reporters",
]
