# profile_xref/catalog/sources.py
"""
Definition catalogs: StructureDefinitions loaded from a directory of JSON
resources, a FHIR NPM package tarball (.tgz) or a zip archive.

Each source indexes its StructureDefinitions by canonical URL on first use and
hands out one Definition instance per URL, so a snapshot attached to a
definition stays attached for the rest of the run.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple
import json
import logging
import tarfile
import zipfile

from pydantic import ValidationError

from ..core.errors import CatalogError
from ..core.models import Definition, strip_canonical_version


logger = logging.getLogger(__name__)

# Package metadata, not FHIR resources
IGNORED_FILENAMES = {"package.json", ".index.json", "validation-summary.json", "validation-oo.json"}


def _parse_json_bytes(content: bytes, location: str) -> Any | None:
    try:
        return json.loads(content.decode("utf-8-sig"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug(f"Could not parse JSON in {location}, skipping: {e}")
        return None


def _structure_definitions(data: Any) -> Iterator[Dict[str, Any]]:
    """Yield StructureDefinition resources from a resource or a Bundle of them."""
    if not isinstance(data, dict):
        return
    resource_type = data.get("resourceType")
    if resource_type == "StructureDefinition":
        yield data
    elif resource_type == "Bundle":
        for entry in data.get("entry", []):
            resource = entry.get("resource") if isinstance(entry, dict) else None
            if isinstance(resource, dict) and resource.get("resourceType") == "StructureDefinition":
                yield resource


class DefinitionSource(ABC):
    """
    A catalog of StructureDefinitions.

    Subclasses only enumerate raw resources; indexing, duplicate detection and
    Definition construction are shared.
    """

    def __init__(self, location: Path | str):
        self.location = Path(location)
        self._raw: Optional[Dict[str, Tuple[Dict[str, Any], str]]] = None
        self._definitions: Dict[str, Definition] = {}
        self.skipped_files: List[str] = []

    @abstractmethod
    def _iter_resources(self) -> Iterable[Tuple[str, Any]]:
        """Yield (location, parsed JSON) for each candidate file."""

    def _index(self) -> Dict[str, Tuple[Dict[str, Any], str]]:
        if self._raw is None:
            raw: Dict[str, Tuple[Dict[str, Any], str]] = {}
            for location, data in self._iter_resources():
                for resource in _structure_definitions(data):
                    url = resource.get("url")
                    if not url:
                        logger.warning(f"StructureDefinition without url in {location}, skipping")
                        continue
                    if url in raw:
                        logger.warning(
                            f"Duplicate canonical '{url}' in {location}; "
                            f"keeping {raw[url][1]}"
                        )
                        continue
                    raw[url] = (resource, location)
            self._raw = raw
            logger.debug(f"Indexed {len(raw)} StructureDefinitions in {self.location}")
        return self._raw

    def list_structure_definitions(self) -> List[str]:
        """Canonical URLs of all StructureDefinitions, in enumeration order."""
        return list(self._index().keys())

    def resolve(self, url: str) -> Definition | None:
        """Return the Definition with this canonical URL, or None."""
        url = strip_canonical_version(url)
        if not url:
            return None
        if url in self._definitions:
            return self._definitions[url]

        entry = self._index().get(url)
        if entry is None:
            return None
        if url in self._definitions:
            # Indexing may register ready-made instances
            return self._definitions[url]

        resource, location = entry
        try:
            definition = Definition.from_resource(resource, source=location)
        except ValidationError as e:
            logger.warning(f"Invalid StructureDefinition '{url}' in {location}: {e}")
            return None
        self._definitions[url] = definition
        return definition

    def __len__(self) -> int:
        return len(self._index())

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self.location}')"


class DirectorySource(DefinitionSource):
    """JSON resources in a directory, optionally including sub-directories."""

    def __init__(self, location: Path | str, include_subdirs: bool = True):
        super().__init__(location)
        self.include_subdirs = include_subdirs

    def _iter_resources(self) -> Iterable[Tuple[str, Any]]:
        if not self.location.is_dir():
            raise CatalogError(f"Not a directory: {self.location}")

        pattern = "**/*" if self.include_subdirs else "*"
        for path in sorted(self.location.glob(pattern)):
            if not path.is_file():
                continue
            if path.suffix.lower() != ".json":
                if path.suffix.lower() == ".xml":
                    self.skipped_files.append(str(path))
                continue
            if path.name.lower() in IGNORED_FILENAMES:
                continue
            data = _parse_json_bytes(path.read_bytes(), str(path))
            if data is not None:
                yield str(path), data


class PackageArchiveSource(DefinitionSource):
    """A FHIR NPM package tarball (e.g. hl7.fhir.r4.core-4.0.1.tgz)."""

    def _iter_resources(self) -> Iterable[Tuple[str, Any]]:
        try:
            with tarfile.open(self.location, "r:gz") as tar:
                for member in tar:
                    if not (member.isfile() and member.name.lower().endswith(".json")):
                        continue
                    if Path(member.name).name.lower() in IGNORED_FILENAMES:
                        continue
                    fileobj = tar.extractfile(member)
                    if fileobj is None:
                        continue
                    with fileobj:
                        data = _parse_json_bytes(fileobj.read(), member.name)
                    if data is not None:
                        yield member.name, data
        except (tarfile.TarError, OSError) as e:
            raise CatalogError(f"Cannot read package archive {self.location}: {e}") from e


class ZipArchiveSource(DefinitionSource):
    """A zip archive of definitions (individual resources or Bundles)."""

    def _iter_resources(self) -> Iterable[Tuple[str, Any]]:
        try:
            with zipfile.ZipFile(self.location) as archive:
                for name in archive.namelist():
                    if not name.lower().endswith(".json"):
                        continue
                    if Path(name).name.lower() in IGNORED_FILENAMES:
                        continue
                    data = _parse_json_bytes(archive.read(name), name)
                    if data is not None:
                        yield name, data
        except (zipfile.BadZipFile, OSError) as e:
            raise CatalogError(f"Cannot read zip archive {self.location}: {e}") from e


class InMemorySource(DefinitionSource):
    """Definitions already held in memory (raw resources or Definition objects)."""

    def __init__(self, resources: Iterable[Dict[str, Any] | Definition], name: str = "<memory>"):
        super().__init__(name)
        self._resources = list(resources)

    def _iter_resources(self) -> Iterable[Tuple[str, Any]]:
        for i, resource in enumerate(self._resources):
            if isinstance(resource, Definition):
                # Serve the given instance itself rather than a re-parsed copy
                self._definitions.setdefault(resource.url, resource)
                resource = resource.model_dump(by_alias=True, exclude_none=True)
            yield f"{self.location}[{i}]", resource


def open_core_source(path: Path | str) -> DefinitionSource:
    """
    Open the FHIR core definitions from a package directory, .tgz or .zip.

    Raises:
        CatalogError: If the path does not exist or has an unknown format
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Core package not found: {path}")
    if path.is_dir():
        return DirectorySource(path, include_subdirs=True)

    name = path.name.lower()
    if name.endswith(".tgz") or name.endswith(".tar.gz"):
        return PackageArchiveSource(path)
    if name.endswith(".zip"):
        return ZipArchiveSource(path)
    raise CatalogError(f"Unsupported core package format: {path} (expected directory, .tgz or .zip)")
