# profile_xref/core/models.py
"""
Data model for the profile cross-reference auditor.

FHIR resources (StructureDefinition, ElementDefinition and its type entries)
are parsed with Pydantic so malformed input is rejected at load time. Run
products (mapping, mapping events, findings, snapshot issues) are plain
dataclasses, serializable with to_dict().
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterator, List, Literal, Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import MappingFrozenError


logger = logging.getLogger(__name__)

REFERENCE_TYPE = "Reference"
CORE_CANONICAL_BASE = "http://hl7.org/fhir/StructureDefinition/"


def canonical_uri_for_core_type(type_name: str | None) -> str | None:
    """
    Canonical URL of the core StructureDefinition for a FHIR type.

    Examples:
        "Patient" -> "http://hl7.org/fhir/StructureDefinition/Patient"
        "http://example.org/Model" -> unchanged (logical models use URLs as type)
    """
    if not type_name:
        return None
    if "://" in type_name:
        return type_name
    return CORE_CANONICAL_BASE + type_name


def strip_canonical_version(url: str | None) -> str | None:
    """Drop the '|version' suffix a canonical reference may carry."""
    if not url:
        return url
    return url.split("|", 1)[0]


# ============================================================================
# FHIR resources
# ============================================================================

class TypeEntry(BaseModel):
    """One declared type of an element (ElementDefinition.type)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    code: str = ""
    target_profile: Optional[str] = Field(None, alias="targetProfile")
    profile: List[str] = Field(default_factory=list)

    @field_validator("profile", mode="before")
    @classmethod
    def profile_as_list(cls, v: Any) -> List[str]:
        """STU3 declares a single profile, R4 a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @property
    def is_reference(self) -> bool:
        return self.code == REFERENCE_TYPE

    @classmethod
    def expand(cls, raw: Dict[str, Any]) -> List["TypeEntry"]:
        """
        Parse one raw type entry into one TypeEntry per target profile.

        R4 declares targetProfile as a list; each target becomes its own entry
        so every reference target is inspected individually. STU3's scalar
        targetProfile (or none at all) yields a single entry.
        """
        targets = raw.get("targetProfile")
        if isinstance(targets, list):
            if not targets:
                return [cls.model_validate({**raw, "targetProfile": None})]
            return [cls.model_validate({**raw, "targetProfile": t}) for t in targets]
        return [cls.model_validate(raw)]


class Element(BaseModel):
    """One entry in a differential or snapshot element list."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    path: str = Field(..., min_length=1)
    types: List[TypeEntry] = Field(default_factory=list, alias="type")

    @field_validator("types", mode="before")
    @classmethod
    def expand_target_profiles(cls, v: Any) -> List[Any]:
        if v is None:
            return []
        expanded: List[Any] = []
        for entry in v:
            if isinstance(entry, dict):
                expanded.extend(TypeEntry.expand(entry))
            else:
                expanded.append(entry)
        return expanded

    @property
    def key(self) -> str:
        """Identity used to match differential elements to snapshot elements."""
        return self.id or self.path

    def to_resource(self) -> Dict[str, Any]:
        """Dump back to FHIR JSON field names (extra ElementDefinition fields included)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Definition(BaseModel):
    """
    A StructureDefinition: a core resource/type definition or a user profile.

    Only the fields the auditor needs are modelled; everything else in the
    resource is ignored. ``snapshot`` stays None until it is loaded from the
    resource or materialized by the snapshot generator.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    resource_type: Literal["StructureDefinition"] = Field(
        "StructureDefinition", alias="resourceType"
    )
    url: str = Field(..., min_length=1)
    name: str = ""
    type: str = ""
    base_definition: Optional[str] = Field(None, alias="baseDefinition")
    kind: Optional[str] = None
    derivation: Optional[str] = None
    abstract: bool = False
    differential: List[Element] = Field(default_factory=list)
    snapshot: Optional[List[Element]] = None
    source: Optional[str] = Field(None, exclude=True)

    @field_validator("differential", "snapshot", mode="before")
    @classmethod
    def unwrap_element_container(cls, v: Any) -> Any:
        """FHIR wraps element lists as {"element": [...]}."""
        if isinstance(v, dict):
            return v.get("element") or []
        return v

    @property
    def has_snapshot(self) -> bool:
        return bool(self.snapshot)

    @property
    def base_type_url(self) -> str | None:
        """Canonical URL of the core type this definition constrains."""
        return canonical_uri_for_core_type(self.type)

    @classmethod
    def from_resource(cls, data: Dict[str, Any], source: str | None = None) -> "Definition":
        """Build a Definition from a parsed StructureDefinition JSON resource."""
        definition = cls.model_validate(data)
        definition.source = source
        return definition


# ============================================================================
# Run products
# ============================================================================

@dataclass
class SnapshotIssue:
    """A non-fatal problem reported while materializing a snapshot."""
    details: str
    severity: str = "error"
    code: str = "processing"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


MappingEventKind = Literal["mapped", "duplicate", "unresolved_base", "snapshot_failed"]


@dataclass
class MappingEvent:
    """Structured record of one decision taken while building the mapping."""
    kind: MappingEventKind
    profile_url: str
    type_name: str = ""
    key: str | None = None
    existing_url: str | None = None
    message: str = ""

    @property
    def is_warning(self) -> bool:
        return self.kind != "mapped"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Mapping:
    """
    Base-type canonical URL -> canonical URL of the single user profile
    specializing it. The first registration for a key wins.
    """
    entries: Dict[str, str] = field(default_factory=dict)
    frozen: bool = False

    def register(self, key: str, profile_url: str) -> bool:
        """
        Register a specialization.

        Returns:
            False (and leaves the existing value) when the key is already mapped
        """
        if self.frozen:
            raise MappingFrozenError(f"Cannot register '{key}': mapping is frozen")
        if key in self.entries:
            return False
        self.entries[key] = profile_url
        return True

    def freeze(self) -> "Mapping":
        self.frozen = True
        return self

    def get(self, key: str | None) -> str | None:
        if not key:
            return None
        return self.entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> str:
        return self.entries[key]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def items(self):
        return self.entries.items()

    def to_dict(self) -> Dict[str, str]:
        return dict(self.entries)


@dataclass
class MappingResult:
    """Output of the mapping builder: the frozen mapping plus its event log."""
    mapping: Mapping
    events: List[MappingEvent] = field(default_factory=list)

    @property
    def warnings(self) -> List[MappingEvent]:
        return [e for e in self.events if e.is_warning]

    def events_of(self, kind: MappingEventKind) -> List[MappingEvent]:
        return [e for e in self.events if e.kind == kind]

    @property
    def skipped_urls(self) -> List[str]:
        return [e.profile_url for e in self.events if e.kind in ("unresolved_base", "snapshot_failed")]


@dataclass
class Finding:
    """A reference element whose target could point at a local profile instead."""
    resource_name: str
    path: str
    found: str
    suggestion: str
    profile_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_row(self) -> List[str]:
        """Report row: resource name, element path, reference found, suggestion."""
        return [self.resource_name, self.path, self.found, self.suggestion]
