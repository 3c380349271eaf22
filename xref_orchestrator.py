# xref_orchestrator.py
"""
FHIR Profile Cross-Reference Orchestrator

Flow:
  1. Load FHIR core resource definitions (package directory, .tgz or .zip)
  2. Fetch the user profiles in the target location
  3. Determine mappings (core type -> single user profile)
  4. Validate x-refs (Reference targets that could use a user profile)
  5. Write reports (console, Excel, optional Word)

The audit is read-only: snapshots generated for profiles stay in memory.
"""
from __future__ import annotations
import argparse
import sys
from typing import List, Optional
from dotenv import load_dotenv

from profile_xref import __version__
from profile_xref.artifacts.console import print_findings, print_summary
from profile_xref.core.config import XRefConfig
from profile_xref.core.errors import CatalogError, ConfigurationError
from profile_xref.core.logging_utils import setup_logging
from profile_xref.core.run_context import RunContext
from profile_xref.xref import run_xref, XRefResult

load_dotenv()

APP_TITLE = f"FhirProfileXRef {__version__}"


def show_intro():
    print(APP_TITLE)
    print("=" * len(APP_TITLE))
    print("FHIR profile cross references validator")
    print()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="fhir-profile-xref",
        description="Find references to core FHIR types that could target a local profile instead",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python xref_orchestrator.py
  python xref_orchestrator.py ./profiles --core ~/.fhir/packages/hl7.fhir.r4.core#4.0.1/package
  python xref_orchestrator.py ./profiles --core hl7.fhir.r4.core-4.0.1.tgz --word
        """
    )
    ap.add_argument("path", nargs="?", help="Directory with user profiles (default: current directory)")
    ap.add_argument("--core", help="FHIR core package: directory, .tgz or .zip (env FHIR_CORE_PACKAGE)")
    ap.add_argument("--outdir", help="Output directory for reports and logs (env XREF_OUTPUT_DIR)")
    ap.add_argument("--no-subdirs", action="store_true", help="Do not scan sub-directories")
    ap.add_argument("--skip-excel", action="store_true", help="Do not write the Excel report")
    ap.add_argument("--word", action="store_true", help="Also write a Word report")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return ap


def run(config: XRefConfig) -> XRefResult:
    """Run the audit, printing each step of the module docstring as it happens."""
    ctx = RunContext.from_config(config)
    return run_xref(ctx, progress=print)


def write_reports(config: XRefConfig, result: XRefResult) -> None:
    if config.report.show_findings:
        print_findings(result)
    print_summary(result)

    if not config.report.skip_excel:
        from profile_xref.artifacts.excel.generate_excel_report import generate_excel_report

        print(f"\n{'='*60}")
        print("EXCEL REPORT")
        print(f"{'='*60}")
        generate_excel_report(result, config.paths.report_path(config.timestamp), config)

    if config.report.word_report:
        from profile_xref.artifacts.word.generate_word_report import generate_word_report

        print(f"\n{'='*60}")
        print("WORD REPORT")
        print(f"{'='*60}")
        generate_word_report(result, config.paths.report_path(config.timestamp, ".docx"), config)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    show_intro()

    config = XRefConfig.from_env_and_args(
        target_dir=args.path,
        core_package=args.core,
        outdir=args.outdir,
        include_subdirs=not args.no_subdirs,
        skip_excel=args.skip_excel,
        word_report=args.word,
        verbose=args.verbose
    )
    setup_logging(config.verbose)

    try:
        config.require_valid()
    except ConfigurationError as e:
        for error in e.errors:
            print(f"   ❌ {error}")
        print()
        ap.print_usage()
        return 1

    print(config)
    config.paths.ensure_dirs()
    config.save_to_file(config.paths.log_dir / f"config_{config.timestamp}.json")

    try:
        result = run(config)
    except CatalogError as e:
        print(f"\n❌ {e}")
        return 1

    try:
        write_reports(config, result)
    except PermissionError as e:
        print(f"\n❌ Could not write report: {e}")
        return 1

    print(f"\n✓ Done. {len(result.findings)} cross reference(s) found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
