"""
Tests for configuration loading and validation (profile_xref/core/config.py)

Run: pytest tests/test_config.py -v
"""
import json
from pathlib import Path

import pytest

from profile_xref.core.config import DEFAULT_CORE_PACKAGE, PathConfig, XRefConfig
from profile_xref.core.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("FHIR_CORE_PACKAGE", raising=False)
    monkeypatch.delenv("XREF_OUTPUT_DIR", raising=False)


class TestPathConfig:
    def test_defaults(self):
        paths = PathConfig.from_args()

        assert paths.target_dir == Path.cwd()
        assert paths.core_package == Path(DEFAULT_CORE_PACKAGE).expanduser()
        assert paths.output_dir == Path("output")
        assert paths.log_dir == Path("output") / "logs"

    def test_environment_fallback(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FHIR_CORE_PACKAGE", str(tmp_path / "core"))
        monkeypatch.setenv("XREF_OUTPUT_DIR", str(tmp_path / "out"))
        paths = PathConfig.from_args()

        assert paths.core_package == tmp_path / "core"
        assert paths.output_dir == tmp_path / "out"

    def test_arguments_win_over_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FHIR_CORE_PACKAGE", str(tmp_path / "env-core"))
        paths = PathConfig.from_args(core_package=str(tmp_path / "arg-core"))

        assert paths.core_package == tmp_path / "arg-core"

    def test_report_path_is_timestamped(self, tmp_path):
        paths = PathConfig(output_dir=tmp_path)

        assert paths.report_path("20240101_120000") == tmp_path / "fhir_profile_xref_20240101_120000.xlsx"
        assert paths.report_path("20240101_120000", ".docx").suffix == ".docx"

    def test_ensure_dirs(self, tmp_path):
        paths = PathConfig(output_dir=tmp_path / "out")
        paths.ensure_dirs()

        assert (tmp_path / "out" / "logs").is_dir()


class TestXRefConfig:
    def test_valid(self, tmp_path):
        (tmp_path / "core").mkdir()
        config = XRefConfig.from_env_and_args(target_dir=str(tmp_path), core_package=str(tmp_path / "core"))

        assert config.validate() == []

    def test_missing_paths(self, tmp_path):
        config = XRefConfig.from_env_and_args(
            target_dir=str(tmp_path / "nope"),
            core_package=str(tmp_path / "no-core")
        )
        errors = config.validate()

        assert len(errors) == 2
        assert errors[0].startswith("Target directory not found")
        assert "FHIR_CORE_PACKAGE" in errors[1]

    def test_require_valid_raises_all_errors(self, tmp_path):
        config = XRefConfig.from_env_and_args(
            target_dir=str(tmp_path / "nope"),
            core_package=str(tmp_path / "no-core")
        )
        with pytest.raises(ConfigurationError) as exc_info:
            config.require_valid()

        assert exc_info.value.errors == config.validate()

    def test_target_must_be_directory(self, tmp_path):
        target = tmp_path / "profile.json"
        target.write_text("{}")
        config = XRefConfig.from_env_and_args(target_dir=str(target), core_package=str(tmp_path))

        assert config.validate() == [f"Target path is not a directory: {target}"]

    def test_verbose_sets_log_level(self):
        assert XRefConfig.from_env_and_args(verbose=True).log_level == "DEBUG"
        assert XRefConfig.from_env_and_args().log_level == "INFO"

    def test_report_options(self):
        config = XRefConfig.from_env_and_args(skip_excel=True, word_report=True, include_subdirs=False)

        assert config.report.skip_excel
        assert config.report.word_report
        assert not config.include_subdirs

    def test_save_to_file(self, tmp_path):
        config = XRefConfig.from_env_and_args(target_dir=str(tmp_path), outdir=str(tmp_path / "out"))
        path = tmp_path / "logs" / "config.json"
        config.save_to_file(path)

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved == config.to_dict()
        assert saved["target_dir"] == str(tmp_path)
        assert saved["report"] == {"skip_excel": False, "word_report": False, "show_findings": True}

    def test_str(self, tmp_path):
        text = str(XRefConfig.from_env_and_args(target_dir=str(tmp_path)))

        assert f"Location: '{tmp_path}'" in text
        assert "Include subdirectories: True" in text
