"""Exporters that write analysis results to disk."""

from navgraph.export.json_exporter import RESULT_FILENAME, JsonExporter, result_to_json

__all__ = ["RESULT_FILENAME", "JsonExporter", "result_to_json"]
