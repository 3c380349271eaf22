"""
Tests for the end-to-end runner (profile_xref/xref/runner.py)

Run: pytest tests/test_runner.py -v
"""

from profile_xref.core.logging_utils import read_runlog
from profile_xref.xref import run_xref

from fhir_fixtures import (
    CORE,
    USER,
    datatype,
    element,
    my_patient,
    observation_profile,
    structure_definition,
)


class TestRunXRef:
    def test_summary(self, make_context):
        result = run_xref(make_context([my_patient(), observation_profile()]))

        assert result.summary() == {
            "core_definitions": 5,
            "user_profiles": 2,
            "mapped_types": 2,
            "duplicates": 0,
            "skipped": 0,
            "findings": 1,
        }

    def test_counts(self, make_context):
        unicorn = structure_definition(USER + "Unicorn", "Unicorn", "Unicorn", base=CORE + "Unicorn",
                                       differential=[element("Unicorn")])
        result = run_xref(make_context([my_patient("A"), my_patient("B"), unicorn]))

        assert result.duplicate_count == 1
        assert result.skipped_count == 1
        assert result.findings == []

    def test_progress_lines_follow_the_steps(self, make_context):
        lines = []
        run_xref(make_context([my_patient("A"), my_patient("B"), observation_profile()]), progress=lines.append)

        assert lines == [
            "Load FHIR core resource definitions...",
            "Found 5 core definitions.",
            "Fetch profiles in target location...",
            "Found 3 profiles.",
            "Determine mappings...",
            f"   Map references of type 'Patient' to user profile '{USER}A'",
            f"   Warning! Ignore duplicate user profile '{USER}B' for reference "
            f"target type 'Patient' (already mapped to '{USER}A')",
            f"   Map references of type 'Observation' to user profile '{USER}MyObservation'",
            "Validate x-refs...",
            "Found 1 cross reference(s).",
        ]

    def test_runlog_events(self, make_context, tmp_path):
        runlog = tmp_path / "logs" / "runlog.jsonl"
        run_xref(make_context([my_patient(), observation_profile()], runlog_path=runlog))

        entries = read_runlog(runlog)
        assert [e["event"] for e in entries] == ["mapping", "mapping", "finding", "summary"]
        assert entries[0]["kind"] == "mapped"
        assert entries[2]["found"] == CORE + "Patient"
        assert entries[2]["suggestion"] == USER + "MyPatient"
        assert entries[3]["findings"] == 1
        assert all("timestamp" in e for e in entries)

    def test_runlog_filter_by_event(self, make_context, tmp_path):
        runlog = tmp_path / "runlog.jsonl"
        run_xref(make_context([my_patient(), observation_profile()], runlog_path=runlog))
        with runlog.open("a", encoding="utf-8") as f:
            f.write("not json\n")

        findings = read_runlog(runlog, event="finding")
        assert [e["path"] for e in findings] == ["Observation.subject"]
        assert len(read_runlog(runlog)) == 4
        assert read_runlog(tmp_path / "missing.jsonl") == []

    def test_runlog_records_snapshot_failures(self, make_context, tmp_path):
        runlog = tmp_path / "runlog.jsonl"
        orphan = structure_definition(USER + "Orphan", "Orphan", "Patient", base=USER + "Missing",
                                      differential=[element("Patient")])
        run_xref(make_context([orphan], runlog_path=runlog))

        events = [e["event"] for e in read_runlog(runlog)]
        assert events == ["snapshot_failed", "mapping", "summary"]

    def test_no_runlog_configured(self, make_context, tmp_path):
        run_xref(make_context([my_patient()]))
        assert list(tmp_path.iterdir()) == []

    def test_profiles_without_references(self, make_context):
        plain = structure_definition(
            USER + "MyOrganization", "MyOrganization", "Organization", base=CORE + "Organization",
            differential=[element("Organization.name", datatype("string"), min=1)]
        )
        result = run_xref(make_context([plain]))

        assert result.findings == []
        assert len(result.mapping_result.mapping) == 1

    def test_empty_target(self, make_context):
        result = run_xref(make_context([]))

        assert result.user_count == 0
        assert result.findings == []
        assert len(result.mapping_result.mapping) == 0

    def test_profile_on_profile(self, make_context):
        base = my_patient()
        derived = structure_definition(
            USER + "MyDerivedObservation", "MyDerivedObservation", "Observation",
            base=USER + "MyObservation",
            differential=[element("Observation.status", datatype("code"), min=1)]
        )
        result = run_xref(make_context([base, derived, observation_profile()]))

        # Both Observation profiles inherit the subject reference to core Patient
        assert [(f.resource_name, f.path) for f in result.findings] == [
            ("MyDerivedObservation", "Observation.subject"),
            ("Observation", "Observation.subject"),
        ]
        assert result.mapping_result.mapping[CORE + "Observation"] == USER + "MyDerivedObservation"
