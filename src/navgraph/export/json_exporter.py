"""JSON export format.

Serializes an AnalysisResult to a structured JSON file suitable for
report rendering, CI gating, or programmatic analysis.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from navgraph import __version__

if TYPE_CHECKING:
    from pathlib import Path

    from navgraph.graph.analysis import AnalysisResult

RESULT_FILENAME = "navgraph-result.json"


def result_to_json(result: AnalysisResult) -> str:
    """Render a result as deterministic, indented JSON."""
    data = {"navgraph_version": __version__, **result.to_dict()}
    return json.dumps(data, indent=2, ensure_ascii=False)


class JsonExporter:
    """Export an analysis result as structured JSON."""

    format_name = "json"

    def export(self, result: AnalysisResult, output_dir: Path) -> Path:
        """Write the analysis result as formatted JSON.

        Args:
            result: Assembled analysis result.
            output_dir: Directory to write output files.

        Returns:
            Path to the generated result file.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / RESULT_FILENAME
        output_file.write_text(result_to_json(result) + "\n", encoding="utf-8")
        return output_file
