"""
JSON reporter: the whole run as a single document.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

from .base import CollectingReporter
from ..benchmark.utils import get_machine_info
from ..config import Settings

logger = logging.getLogger(__name__)


class JsonReporter(CollectingReporter):
    """
    Writes the configuration, machine info, calibration estimates and
    every benchmark's plan, samples and analysis as JSON.

    Without an explicit output file or stream the report goes to
    <report dir>/<title>_<timestamp>.json.

    Example:
        reporter = JsonReporter()
        cfg = Configuration(reporter_id="json", output_file="results.json")
    """

    name = "json"
    description = "Full results as JSON"

    def __init__(self, stream: Optional[TextIO] = None, output_dir: Optional[Path] = None):
        """
        Initialize reporter.

        Args:
            stream: Output stream (optional)
            output_dir: Directory for default report files (default: Settings.REPORT_DIR)
        """
        super().__init__(stream)
        self.output_dir = output_dir or Settings.REPORT_DIR

        # Cache machine info for this reporter instance
        self._machine_info = get_machine_info()

    def default_output_file(self, cfg) -> str:
        file_timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return str(Path(self.output_dir) / f"{cfg.title}_{file_timestamp}.json")

    def build_document(self) -> Dict[str, Any]:
        """Assemble the JSON document for the run so far."""
        return {
            "title": self.cfg.title if self.cfg else "",
            "generated_at": datetime.now().isoformat(),
            "test_environment": self._machine_info,
            "configuration": self.cfg.to_dict() if self.cfg else {},
            "clock": self.environment,
            "benchmarks": self.results,
        }

    def write_report(self) -> None:
        json.dump(self.build_document(), self.stream, ensure_ascii=False, indent=2)
        self.stream.write("\n")
        self.stream.flush()
        if self.output_path:
            logger.info(f"JSON results written to: {self.output_path}")
