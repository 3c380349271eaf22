"""
Excel X-Ref Report Generator

Writes the findings workbook: Cross References, Mappings and Summary tabs.
"""

from pathlib import Path
from typing import Optional
from openpyxl import Workbook

from profile_xref.core.config import XRefConfig
from profile_xref.xref.runner import XRefResult

from profile_xref.artifacts.excel.tab_findings import create_findings_tab
from profile_xref.artifacts.excel.tab_mappings import create_mappings_tab
from profile_xref.artifacts.excel.tab_summary import create_summary_tab


def generate_excel_report(
    result: XRefResult,
    output_path: Path,
    config: Optional[XRefConfig] = None
) -> Path:
    """
    Generate the x-ref Excel workbook.

    Args:
        result: Result of the x-ref run
        output_path: Output Excel file path
        config: Run configuration (shown on the Summary tab)

    Returns:
        Path to generated Excel file

    Raises:
        PermissionError: If the file cannot be written (e.g. open in Excel)
    """
    wb = Workbook()

    # Remove default sheet
    if "Sheet" in wb.sheetnames:
        del wb["Sheet"]

    print(f"   Creating tabs...")

    # 1. Cross References - primary output first
    print(f"      - Cross References")
    create_findings_tab(wb, result.findings)

    # 2. Mappings
    print(f"      - Mappings")
    create_mappings_tab(wb, result.mapping_result)

    # 3. Summary
    print(f"      - Summary")
    create_summary_tab(wb, result, config)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)

    print(f"   Excel report saved: {output_path.name}")
    print(f"      Findings: {len(result.findings)}")
    print(f"      Tabs: {len(wb.sheetnames)}")

    return output_path
