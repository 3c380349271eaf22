"""Console output for the x-ref run."""

from profile_xref.core.models import Finding
from profile_xref.xref.runner import XRefResult


def finding_line(finding: Finding) -> str:
    return f"Warning! '{finding.path}' : '{finding.found}' => '{finding.suggestion}'"


def print_findings(result: XRefResult) -> None:
    """Print findings grouped by the profile they were found in."""
    current = None
    for finding in result.findings:
        if finding.profile_url != current:
            current = finding.profile_url
            print(f"\n   {finding.resource_name or current}")
        print(f"      {finding_line(finding)}")


def print_summary(result: XRefResult) -> None:
    """Print mapped types and run counts."""
    mapping = result.mapping_result.mapping

    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")

    if len(mapping):
        print("   Mapped types:")
        for key, profile in mapping.items():
            print(f"      {key.rsplit('/', 1)[-1]:<30} -> {profile}")

    summary = result.summary()
    print(f"\n   Core definitions:       {summary['core_definitions']}")
    print(f"   User profiles:          {summary['user_profiles']}")
    print(f"   Mapped types:           {summary['mapped_types']}")
    print(f"   Duplicates ignored:     {summary['duplicates']}")
    print(f"   Profiles skipped:       {summary['skipped']}")
    print(f"   Cross references found: {summary['findings']}")
