# profile_xref/artifacts/common/styles.py
"""Shared styling for the x-ref Excel and Word reports."""

from typing import Iterable, Optional

from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.worksheet.worksheet import Worksheet


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


class ExcelStyles:
    """Excel formatting for the findings, mappings and summary tabs."""

    HEADER_BG = "4472C4"  # Blue
    ALT_ROW_BG = "D9E2F3"  # Light blue

    HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
    TITLE_FONT = Font(bold=True, size=16)
    BODY_FONT = Font(size=10)
    BOLD_FONT = Font(bold=True, size=10)

    HEADER_FILL = _fill(HEADER_BG)
    ALT_FILL = _fill(ALT_ROW_BG)

    # Mapping event kind -> row highlight
    STATUS_FILLS = {
        "mapped": _fill("E2EFDA"),  # Light green
        "duplicate": _fill("FCE4D6"),  # Light orange
        "unresolved_base": _fill("F8CBAD"),
        "snapshot_failed": _fill("F8CBAD"),
    }

    HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
    BODY_ALIGN = Alignment(horizontal="left", vertical="top", wrap_text=True)

    THIN_BORDER = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin")
    )

    @classmethod
    def write_header(cls, ws: Worksheet, headers: Iterable[str], row: int = 1):
        """Write a styled header row and freeze everything above the next row."""
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = cls.HEADER_FONT
            cell.fill = cls.HEADER_FILL
            cell.alignment = cls.HEADER_ALIGN
            cell.border = cls.THIN_BORDER
        ws.freeze_panes = f"A{row + 1}"

    @classmethod
    def write_row(cls, ws: Worksheet, row: int, values: Iterable, status: Optional[str] = None):
        """
        Write one body row.

        Rows carrying a mapping event ``status`` get that status colour;
        other rows alternate plain / light blue.
        """
        fill = cls.STATUS_FILLS.get(status) if status else (cls.ALT_FILL if row % 2 == 1 else None)
        for col, value in enumerate(values, 1):
            cell = ws.cell(row=row, column=col, value=value)
            cell.font = cls.BODY_FONT
            cell.alignment = cls.BODY_ALIGN
            cell.border = cls.THIN_BORDER
            if fill is not None:
                cell.fill = fill

    @classmethod
    def set_column_widths(cls, sheet, width_map: dict):
        """Set column widths from a mapping of column letter to width."""
        for col, width in width_map.items():
            sheet.column_dimensions[col].width = width


class WordStyles:
    """Word document styling constants."""

    FONT_NAME = "Calibri"
    HEADING_1_SIZE = 14
    BODY_SIZE = 10
    TABLE_STYLE = "Table Grid"
