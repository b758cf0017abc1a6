"""Output formatters (JSON, text)."""

from bdcat.export.json_out import catalog_to_dict, export_json
from bdcat.export.text_report import format_pts, format_stream, text_report
