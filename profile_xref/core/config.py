# profile_xref/core/config.py
"""
Configuration management for the profile cross-reference auditor.
Centralizes paths, report options and environment variables.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
import os
import json

from .errors import ConfigurationError


DEFAULT_CORE_PACKAGE = "~/.fhir/packages/hl7.fhir.r4.core#4.0.1/package"


@dataclass
class PathConfig:
    """Input and output locations for a run."""
    target_dir: Path = field(default_factory=Path.cwd)
    core_package: Path = field(default_factory=lambda: Path(DEFAULT_CORE_PACKAGE).expanduser())
    output_dir: Path = Path("output")

    @property
    def log_dir(self) -> Path:
        return self.output_dir / "logs"

    @property
    def runlog_path(self) -> Path:
        return self.log_dir / "xref_runlog.jsonl"

    def report_path(self, timestamp: str, suffix: str = ".xlsx") -> Path:
        return self.output_dir / f"fhir_profile_xref_{timestamp}{suffix}"

    def ensure_dirs(self):
        """Create output directories."""
        for dir_path in [self.output_dir, self.log_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_args(
        cls,
        target_dir: str | None = None,
        core_package: str | None = None,
        output_dir: str | None = None
    ) -> "PathConfig":
        """Create PathConfig from command line arguments, falling back to the environment."""
        config = cls()
        if target_dir:
            config.target_dir = Path(target_dir)

        core = core_package or os.getenv("FHIR_CORE_PACKAGE")
        if core:
            config.core_package = Path(core).expanduser()

        outdir = output_dir or os.getenv("XREF_OUTPUT_DIR")
        if outdir:
            config.output_dir = Path(outdir)
        return config


@dataclass
class ReportConfig:
    """Which report artifacts to produce."""
    skip_excel: bool = False
    word_report: bool = False
    show_findings: bool = True

    def to_dict(self) -> dict:
        return {
            "skip_excel": self.skip_excel,
            "word_report": self.word_report,
            "show_findings": self.show_findings
        }


@dataclass
class XRefConfig:
    """Main application configuration combining all settings."""
    paths: PathConfig
    report: ReportConfig = field(default_factory=ReportConfig)

    include_subdirs: bool = True
    verbose: bool = False
    log_level: str = "INFO"
    timestamp: str = field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))

    @classmethod
    def from_env_and_args(
        cls,
        target_dir: str | None = None,
        core_package: str | None = None,
        outdir: str | None = None,
        include_subdirs: bool = True,
        skip_excel: bool = False,
        word_report: bool = False,
        verbose: bool = False
    ) -> "XRefConfig":
        """
        Create XRefConfig from environment variables and command line arguments.

        Args:
            target_dir: Directory holding the user profiles (default: current directory)
            core_package: FHIR core package directory, .tgz or .zip (env FHIR_CORE_PACKAGE)
            outdir: Output directory for reports and logs (env XREF_OUTPUT_DIR)
            include_subdirs: Scan the target directory recursively
            skip_excel: Do not write the Excel report
            word_report: Also write a Word report
            verbose: Enable verbose logging
        """
        return cls(
            paths=PathConfig.from_args(target_dir, core_package, outdir),
            report=ReportConfig(skip_excel=skip_excel, word_report=word_report),
            include_subdirs=include_subdirs,
            verbose=verbose,
            log_level="DEBUG" if verbose else "INFO"
        )

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        target = self.paths.target_dir
        if not target.exists():
            errors.append(f"Target directory not found: {target}")
        elif not target.is_dir():
            errors.append(f"Target path is not a directory: {target}")

        if not self.paths.core_package.exists():
            errors.append(
                f"FHIR core package not found: {self.paths.core_package} "
                f"(set FHIR_CORE_PACKAGE or pass --core)"
            )

        return errors

    def require_valid(self) -> None:
        """
        Raises:
            ConfigurationError: With every error validate() found
        """
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)

    def to_dict(self) -> dict:
        return {
            "target_dir": str(self.paths.target_dir),
            "core_package": str(self.paths.core_package),
            "output_dir": str(self.paths.output_dir),
            "include_subdirs": self.include_subdirs,
            "report": self.report.to_dict(),
            "verbose": self.verbose,
            "log_level": self.log_level,
            "timestamp": self.timestamp
        }

    def save_to_file(self, filepath: Path):
        """Save configuration to JSON file."""
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def __str__(self) -> str:
        """Human-readable configuration summary."""
        return (
            f"Location: '{self.paths.target_dir}'\n"
            f"Core package: '{self.paths.core_package}'\n"
            f"Include subdirectories: {self.include_subdirs}\n"
            f"Output Directory: {self.paths.output_dir}\n"
            f"Verbose: {self.verbose}\n"
        )
