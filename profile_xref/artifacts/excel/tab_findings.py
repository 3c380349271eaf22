"""
Cross References Tab Generator

One row per finding: the reference found in a user profile and the local
profile it could point at instead.
"""

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet
from typing import List

from profile_xref.artifacts.common.styles import ExcelStyles
from profile_xref.core.models import Finding


HEADERS = [
    "Resource name",
    "Element path",
    "Reference found",
    "Reference suggestion"
]

COLUMN_WIDTHS = {
    "A": 20,  # Resource name
    "B": 30,  # Element path
    "C": 55,  # Reference found
    "D": 55,  # Reference suggestion
}


def create_findings_tab(wb: Workbook, findings: List[Finding]) -> Worksheet:
    """
    Create the Cross References tab.

    Columns:
    - Resource name
    - Element path
    - Reference found
    - Reference suggestion
    """
    ws = wb.create_sheet("Cross References")

    ExcelStyles.write_header(ws, HEADERS)

    row = 2
    for finding in findings:
        ExcelStyles.write_row(ws, row, finding.to_row())
        row += 1

    ExcelStyles.set_column_widths(ws, COLUMN_WIDTHS)

    if findings:
        ws.auto_filter.ref = f"A1:D{row - 1}"

    return ws
