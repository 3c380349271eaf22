"""Generate Summary tab for the x-ref workbook."""

from datetime import datetime
from typing import Optional

from openpyxl import Workbook

from profile_xref.artifacts.common.styles import ExcelStyles
from profile_xref.core.config import XRefConfig
from profile_xref.xref.runner import XRefResult


def _add_section_header(ws, row: int, title: str) -> int:
    ws.cell(row=row, column=1, value=title).font = ExcelStyles.HEADER_FONT
    ws.cell(row=row, column=1).fill = ExcelStyles.HEADER_FILL
    ws.cell(row=row, column=2).fill = ExcelStyles.HEADER_FILL
    return row + 1


def create_summary_tab(wb: Workbook, result: XRefResult, config: Optional[XRefConfig] = None) -> None:
    """
    Create the Summary tab with run information and counts.

    Contents:
    - Location, core package, generation date
    - Definition / mapping / finding counts
    """
    ws = wb.create_sheet("Summary")

    ws["A1"] = "FHIR Profile Cross References"
    ws["A1"].font = ExcelStyles.TITLE_FONT
    ws.merge_cells("A1:D1")

    row = 3
    row = _add_section_header(ws, row, "Run Information")

    info_data = [("Generated Date", datetime.now().strftime("%Y-%m-%d %H:%M"))]
    if config is not None:
        info_data.extend([
            ("Location", str(config.paths.target_dir)),
            ("Core package", str(config.paths.core_package)),
            ("Include subdirectories", "Yes" if config.include_subdirs else "No")
        ])

    for label, value in info_data:
        ws.cell(row=row, column=1, value=label).font = ExcelStyles.BOLD_FONT
        ws.cell(row=row, column=2, value=value)
        row += 1

    row += 1
    row = _add_section_header(ws, row, "Statistics")

    count_data = [
        ("Core definitions", result.core_count),
        ("User profiles", result.user_count),
        ("Mapped types", len(result.mapping_result.mapping)),
        ("Duplicate profiles ignored", result.duplicate_count),
        ("Profiles skipped", result.skipped_count),
        ("Cross references found", len(result.findings))
    ]

    for label, value in count_data:
        ws.cell(row=row, column=1, value=label).font = ExcelStyles.BOLD_FONT
        ws.cell(row=row, column=2, value=value)
        row += 1

    ExcelStyles.set_column_widths(ws, {"A": 30, "B": 70})
