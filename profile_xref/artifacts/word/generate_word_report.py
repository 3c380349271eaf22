"""
Word X-Ref Report Generator

Generates a short Word document: run summary, mapped types and findings.
Format: Landscape, narrow margins, Calibri 10pt.
"""

from pathlib import Path
from datetime import datetime
from typing import List, Optional

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.shared import Inches, Pt

from profile_xref.artifacts.common.styles import WordStyles
from profile_xref.core.config import XRefConfig
from profile_xref.xref.runner import XRefResult


def setup_document(doc: Document):
    """Configure document: landscape, narrow margins, Calibri 10pt."""
    for section in doc.sections:
        section.orientation = WD_ORIENT.LANDSCAPE
        section.page_width, section.page_height = section.page_height, section.page_width
        section.top_margin = Inches(0.5)
        section.bottom_margin = Inches(0.5)
        section.left_margin = Inches(0.5)
        section.right_margin = Inches(0.5)

    style = doc.styles['Normal']
    style.font.name = WordStyles.FONT_NAME
    style.font.size = Pt(WordStyles.BODY_SIZE)

    h1 = doc.styles['Heading 1']
    h1.font.name = WordStyles.FONT_NAME
    h1.font.size = Pt(WordStyles.HEADING_1_SIZE)
    h1.font.bold = True


def _add_table(doc: Document, headers: List[str], rows: List[List[str]]):
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = WordStyles.TABLE_STYLE
    for cell, header in zip(table.rows[0].cells, headers):
        cell.text = header
        for run in cell.paragraphs[0].runs:
            run.font.bold = True
    for values in rows:
        cells = table.add_row().cells
        for cell, value in zip(cells, values):
            cell.text = value or ""
    return table


def generate_word_report(
    result: XRefResult,
    output_path: Path,
    config: Optional[XRefConfig] = None
) -> Path:
    """
    Generate the x-ref Word document.

    Args:
        result: Result of the x-ref run
        output_path: Output .docx path
        config: Run configuration

    Returns:
        Path to generated Word document
    """
    print(f"   Generating Word report...")

    doc = Document()
    setup_document(doc)

    doc.add_heading("FHIR Profile Cross References", level=1)
    doc.add_paragraph(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    if config is not None:
        doc.add_paragraph(f"Location: {config.paths.target_dir}")
        doc.add_paragraph(f"Core package: {config.paths.core_package}")

    summary = result.summary()
    _add_table(
        doc,
        ["Measure", "Count"],
        [[label.replace("_", " ").capitalize(), str(value)] for label, value in summary.items()]
    )

    doc.add_heading("Mapped types", level=1)
    _add_table(
        doc,
        ["Core type", "User profile"],
        [[key, value] for key, value in result.mapping_result.mapping.items()]
    )

    warnings = result.mapping_result.warnings
    if warnings:
        doc.add_heading("Mapping warnings", level=1)
        for event in warnings:
            doc.add_paragraph(event.message, style='List Bullet')

    doc.add_heading("Cross references", level=1)
    if result.findings:
        _add_table(
            doc,
            ["Resource name", "Element path", "Reference found", "Reference suggestion"],
            [finding.to_row() for finding in result.findings]
        )
    else:
        doc.add_paragraph("No references to specialized core types found.")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(str(output_path))

    print(f"   Word report saved: {output_path.name}")
    return output_path
