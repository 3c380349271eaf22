"""
Profile cross-referencing: the mapping builder, the scanner and the runner
that ties them together.

Usage:
    from profile_xref.core.run_context import RunContext
    from profile_xref.xref import run_xref

    ctx = RunContext.from_config(config)
    result = run_xref(ctx)
    for finding in result.findings:
        print(finding.path, finding.found, finding.suggestion)
"""

from .snapshots import ensure_snapshot
from .mappings import build_mappings
from .scanner import scan, scan_element, CrossReferenceScan
from .runner import run_xref, XRefResult

__all__ = [
    "ensure_snapshot",
    "build_mappings",
    "scan",
    "scan_element",
    "CrossReferenceScan",
    "run_xref",
    "XRefResult",
]
