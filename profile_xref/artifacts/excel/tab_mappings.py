"""
Mappings Tab Generator

Lists every mapping decision: which profile was mapped to which core type,
and which profiles were ignored or skipped and why.
"""

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from profile_xref.artifacts.common.styles import ExcelStyles
from profile_xref.core.models import MappingResult


KIND_LABELS = {
    "mapped": "Mapped",
    "duplicate": "Duplicate ignored",
    "unresolved_base": "Base type not found",
    "snapshot_failed": "Snapshot failed",
}


def create_mappings_tab(wb: Workbook, mapping_result: MappingResult) -> Worksheet:
    """Create the Mappings tab (one row per mapping event)."""
    ws = wb.create_sheet("Mappings")

    headers = ["Status", "Type", "User profile", "Mapped profile", "Message"]
    ExcelStyles.write_header(ws, headers)

    row = 2
    for event in mapping_result.events:
        data = [
            KIND_LABELS.get(event.kind, event.kind),
            event.type_name,
            event.profile_url,
            event.existing_url or (event.profile_url if event.kind == "mapped" else ""),
            event.message
        ]
        ExcelStyles.write_row(ws, row, data, status=event.kind)
        row += 1

    ExcelStyles.set_column_widths(ws, {"A": 20, "B": 25, "C": 55, "D": 55, "E": 80})
    return ws
