"""JSON reporter: machine-readable diff and uncovered results."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from gcovr_util import __version__
from gcovr_util.analyzers.diff import CoverageIncreaseReport

if TYPE_CHECKING:
    from pathlib import Path

    from gcovr_util.analyzers.uncovered import UncoveredReport

logger = logging.getLogger(__name__)


class JSONReporter:
    """Serialize analysis results into a single JSON document."""

    def generate(
        self,
        output_path: Path,
        report: CoverageIncreaseReport | UncoveredReport,
    ) -> Path:
        """Write a JSON report file.

        Args:
            output_path: Path to write the JSON file.
            report: The diff or uncovered result.

        Returns:
            The path to the generated JSON file.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate_string(report), encoding="utf-8")
        logger.info("JSON report written to %s", output_path)
        return output_path

    def generate_string(self, report: CoverageIncreaseReport | UncoveredReport) -> str:
        """Return the JSON report as a string."""
        return json.dumps(_build_report(report), indent=2, ensure_ascii=False)


def _build_report(report: CoverageIncreaseReport | UncoveredReport) -> dict[str, Any]:
    """Build the JSON report structure."""
    payload: dict[str, Any] = {"tool": "gcovr-util", "version": __version__}
    if isinstance(report, CoverageIncreaseReport):
        payload["kind"] = "coverage_increase"
        payload["summary"] = {
            "functions": len(report.increases),
            "lines_increased": report.total_lines_increased,
        }
        payload["increases"] = [
            {
                **asdict(inc),
                "old_coverage_percentage": round(inc.old_coverage_percentage, 1),
                "new_coverage_percentage": round(inc.new_coverage_percentage, 1),
            }
            for inc in report.increases
        ]
    else:
        payload["kind"] = "uncovered"
        payload["summary"] = {
            "files": len(report.files),
            "functions": report.total_functions,
            "uncovered_lines": report.total_uncovered_lines,
        }
        payload["files"] = [asdict(file_unc) for file_unc in report.files]
    return payload
