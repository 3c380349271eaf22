# profile_xref/xref/runner.py
"""
Run the audit end to end: list user profiles, build the mapping, scan.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

from ..core.models import Finding, MappingResult
from ..core.run_context import RunContext
from .mappings import build_mappings
from .scanner import scan


logger = logging.getLogger(__name__)


@dataclass
class XRefResult:
    """Everything a reporter needs from one run."""
    mapping_result: MappingResult
    findings: List[Finding] = field(default_factory=list)
    core_count: int = 0
    user_count: int = 0

    @property
    def skipped_count(self) -> int:
        return len(self.mapping_result.skipped_urls)

    @property
    def duplicate_count(self) -> int:
        return len(self.mapping_result.events_of("duplicate"))

    def summary(self) -> Dict[str, Any]:
        return {
            "core_definitions": self.core_count,
            "user_profiles": self.user_count,
            "mapped_types": len(self.mapping_result.mapping),
            "duplicates": self.duplicate_count,
            "skipped": self.skipped_count,
            "findings": len(self.findings)
        }


def run_xref(ctx: RunContext, progress: Optional[Callable[[str], None]] = None) -> XRefResult:
    """
    Audit the user profiles in ``ctx``.

    Findings are collected in discovery order and written to the run log.

    Args:
        ctx: Run context
        progress: Called with a console line as each step starts and ends
    """
    report = progress or (lambda line: None)

    report("Load FHIR core resource definitions...")
    core_count = len(ctx.core_definition_urls())
    report(f"Found {core_count} core definitions.")

    report("Fetch profiles in target location...")
    definitions = ctx.user_definitions()
    report(f"Found {len(definitions)} profiles.")
    if ctx.user_source.skipped_files:
        report(f"   Skipped {len(ctx.user_source.skipped_files)} XML file(s) (only JSON is supported)")

    report("Determine mappings...")
    mapping_result = build_mappings(ctx, definitions)
    for event in mapping_result.events:
        if event.kind in ("mapped", "duplicate"):
            report(f"   {event.message}")
    for url in mapping_result.skipped_urls:
        report(f"   Skipped '{url}' (see log)")

    report("Validate x-refs...")
    findings = []
    excluded = mapping_result.skipped_urls
    for finding in scan(ctx, definitions, mapping_result.mapping, excluded):
        logger.debug(f"'{finding.path}' : '{finding.found}' => '{finding.suggestion}'")
        ctx.log_event("finding", finding.to_dict())
        findings.append(finding)
    report(f"Found {len(findings)} cross reference(s).")

    result = XRefResult(
        mapping_result=mapping_result,
        findings=findings,
        core_count=core_count,
        user_count=len(definitions)
    )
    ctx.log_event("summary", result.summary())
    return result
