"""
Tests for the data model (profile_xref/core/models.py)

Run: pytest tests/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from profile_xref.core.errors import MappingFrozenError
from profile_xref.core.models import (
    Definition,
    Element,
    Mapping,
    MappingEvent,
    MappingResult,
    TypeEntry,
    canonical_uri_for_core_type,
    strip_canonical_version,
)

from fhir_fixtures import CORE, USER, element, my_patient, reference


class TestCanonicalUris:
    def test_core_type(self):
        assert canonical_uri_for_core_type("Patient") == CORE + "Patient"

    def test_logical_model_url_unchanged(self):
        url = "http://example.org/fhir/StructureDefinition/Model"
        assert canonical_uri_for_core_type(url) == url

    def test_empty(self):
        assert canonical_uri_for_core_type("") is None
        assert canonical_uri_for_core_type(None) is None

    def test_strip_version(self):
        assert strip_canonical_version(CORE + "Patient|4.0.1") == CORE + "Patient"
        assert strip_canonical_version(CORE + "Patient") == CORE + "Patient"


class TestTypeEntries:
    def test_r4_target_profile_list_expands(self):
        el = Element.model_validate(element("Observation.subject", reference(CORE + "Patient", CORE + "Group")))
        assert [t.target_profile for t in el.types] == [CORE + "Patient", CORE + "Group"]
        assert all(t.is_reference for t in el.types)

    def test_stu3_scalar_target_profile(self):
        el = Element.model_validate({
            "path": "Observation.subject",
            "type": [{"code": "Reference", "targetProfile": CORE + "Patient"}]
        })
        assert len(el.types) == 1
        assert el.types[0].target_profile == CORE + "Patient"

    def test_reference_without_target(self):
        el = Element.model_validate({"path": "Observation.focus", "type": [{"code": "Reference"}]})
        assert len(el.types) == 1
        assert el.types[0].target_profile is None

    def test_empty_target_list_keeps_the_type(self):
        entries = TypeEntry.expand({"code": "Reference", "targetProfile": []})
        assert len(entries) == 1
        assert entries[0].target_profile is None

    def test_profile_scalar_becomes_list(self):
        entry = TypeEntry.model_validate({"code": "Identifier", "profile": "http://x/y"})
        assert entry.profile == ["http://x/y"]

    def test_non_reference(self):
        assert not TypeEntry(code="string").is_reference


class TestElement:
    def test_extra_fields_kept(self):
        el = Element.model_validate(element("Patient.identifier", min=1, max="*"))
        assert el.to_resource()["min"] == 1
        assert el.to_resource()["max"] == "*"

    def test_key_prefers_id(self):
        el = Element.model_validate(element("Patient.identifier", id="Patient.identifier:bsn"))
        assert el.key == "Patient.identifier:bsn"
        assert Element(path="Patient.name").key == "Patient.name"

    def test_path_required(self):
        with pytest.raises(ValidationError):
            Element.model_validate({"id": "x"})


class TestDefinition:
    def test_from_resource(self):
        d = Definition.from_resource(my_patient(), source="a.json")
        assert d.url == USER + "MyPatient"
        assert d.type == "Patient"
        assert d.base_definition == CORE + "Patient"
        assert d.base_type_url == CORE + "Patient"
        assert d.source == "a.json"
        assert [e.path for e in d.differential] == ["Patient.identifier"]
        assert d.snapshot is None
        assert not d.has_snapshot

    def test_empty_snapshot_is_not_a_snapshot(self):
        d = Definition.from_resource({**my_patient(), "snapshot": {"element": []}})
        assert not d.has_snapshot

    def test_other_resource_type_rejected(self):
        with pytest.raises(ValidationError):
            Definition.from_resource({"resourceType": "ValueSet", "url": "http://x"})


class TestMapping:
    def test_first_registration_wins(self):
        mapping = Mapping()
        assert mapping.register(CORE + "Patient", USER + "A")
        assert not mapping.register(CORE + "Patient", USER + "B")
        assert mapping[CORE + "Patient"] == USER + "A"
        assert len(mapping) == 1

    def test_frozen_rejects_registration(self):
        mapping = Mapping()
        mapping.register(CORE + "Patient", USER + "A")
        mapping.freeze()
        with pytest.raises(MappingFrozenError):
            mapping.register(CORE + "Group", USER + "G")
        assert mapping.to_dict() == {CORE + "Patient": USER + "A"}

    def test_get_missing_or_empty(self):
        mapping = Mapping()
        assert mapping.get(CORE + "Patient") is None
        assert mapping.get(None) is None
        assert mapping.get("") is None
        assert CORE + "Patient" not in mapping


class TestMappingResult:
    def test_warnings_and_skipped(self):
        result = MappingResult(mapping=Mapping(), events=[
            MappingEvent("mapped", USER + "A", "Patient"),
            MappingEvent("duplicate", USER + "B", "Patient", existing_url=USER + "A"),
            MappingEvent("snapshot_failed", USER + "C"),
            MappingEvent("unresolved_base", USER + "D", "Unicorn"),
        ])
        assert [e.profile_url for e in result.warnings] == [USER + "B", USER + "C", USER + "D"]
        assert result.skipped_urls == [USER + "C", USER + "D"]
        assert len(result.events_of("duplicate")) == 1
