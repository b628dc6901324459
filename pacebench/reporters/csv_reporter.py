"""
CSV reporter: raw samples, one column per benchmark and parameter set.
"""

import csv
import logging
from typing import List

from .base import CollectingReporter
from ..benchmark.utils import column_name

logger = logging.getLogger(__name__)


class CsvReporter(CollectingReporter):
    """
    Writes every sample of the run, in seconds, when the suite completes.

    The header row holds one quoted column name per benchmark (suffixed
    with its parameters when a sweep is running); row i holds sample i
    of every column.
    """

    name = "csv"
    description = "Raw samples as CSV"

    def write_report(self) -> None:
        columns = [column_name(r["name"], r["params"]) for r in self.results]
        samples: List[List[float]] = [r["samples"] for r in self.results]
        n_rows = max((len(s) for s in samples), default=0)

        if self.cfg and self.cfg.verbose:
            logger.info("Generating CSV report")

        writer = csv.writer(self.stream, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
        writer.writerow(columns)
        for i in range(n_rows):
            writer.writerow([
                s[i] / 1e9 if i < len(s) else ""
                for s in samples
            ])
        self.stream.flush()
