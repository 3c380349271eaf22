# profile_xref/snapshot/generator.py
"""
Snapshot generation: expand a differential into a full element list by
walking the baseDefinition chain and overlaying each differential onto its
parent's snapshot.

The merge is intentionally simple. It does not expand type profiles into
child elements, apply slicing rules or check constraint inheritance; it only
produces an element list good enough to find the declared types of every
element a profile inherits or constrains.
"""
from __future__ import annotations
from typing import List, Optional
import logging

from ..catalog.resolver import Resolver
from ..core.models import Definition, Element, SnapshotIssue


logger = logging.getLogger(__name__)

MAX_DEPTH = 50


def rebase_path(path: str, old_root: str, new_root: str) -> str:
    """
    Move an element path from one root type to another.

    Examples:
        ("DomainResource.text", "DomainResource", "Patient") -> "Patient.text"
        ("Patient.name", "Patient", "Patient") -> "Patient.name"
    """
    if not old_root or not new_root or old_root == new_root:
        return path
    if path == old_root:
        return new_root
    if path.startswith(old_root + ".") or path.startswith(old_root + ":"):
        return new_root + path[len(old_root):]
    return path


def _is_within(key: str, anchor: str) -> bool:
    return key == anchor or key.startswith(anchor + ".") or key.startswith(anchor + ":")


def _parent_key(key: str) -> str | None:
    """
    Key of the enclosing element.

    Examples:
        "Patient.identifier:bsn.system" -> "Patient.identifier:bsn"
        "Patient.identifier:bsn" -> "Patient.identifier"
        "Patient" -> None
    """
    last = key.rsplit(".", 1)[-1]
    if ":" in last:
        return key[:key.rindex(":")]
    if "." not in key:
        return None
    return key.rsplit(".", 1)[0]


def _find_match(elements: List[Element], diff: Element) -> Optional[int]:
    """Index of the element a differential entry constrains, or None for new elements."""
    if diff.id:
        for i, element in enumerate(elements):
            if element.id == diff.id:
                return i
        if ":" in diff.id:
            # A slice (or slice child) never matches its unsliced base element
            return None
    for i, element in enumerate(elements):
        if element.path == diff.path and not (element.id and ":" in element.id):
            return i
    return None


def _insertion_point(elements: List[Element], diff: Element) -> int:
    """Position after the last element inside the nearest enclosing subtree."""
    anchor = diff.key
    while anchor:
        last = None
        for i, element in enumerate(elements):
            if _is_within(element.key, anchor):
                last = i
        if last is not None:
            return last + 1
        anchor = _parent_key(anchor)
    return len(elements)


def merge_differential(
    base_elements: List[Element],
    differential: List[Element],
    base_type: str = "",
    type_name: str = ""
) -> List[Element]:
    """
    Overlay a differential onto its parent's snapshot.

    Args:
        base_elements: Parent snapshot (left untouched)
        differential: Differential elements of the derived definition
        base_type: Root type of the parent's paths
        type_name: Root type of the derived definition's paths

    Returns:
        New snapshot element list
    """
    merged: List[Element] = []
    for element in base_elements:
        data = element.to_resource()
        data["path"] = rebase_path(element.path, base_type, type_name)
        if element.id:
            data["id"] = rebase_path(element.id, base_type, type_name)
        merged.append(Element.model_validate(data))

    for diff in differential:
        overrides = diff.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)
        overrides.update(diff.model_extra or {})

        pos = _find_match(merged, diff)
        if pos is None:
            merged.insert(_insertion_point(merged, diff), Element.model_validate(overrides))
            continue

        data = merged[pos].to_resource()
        data.update(overrides)
        merged[pos] = Element.model_validate(data)

    return merged


class SnapshotGenerator:
    """
    Materializes snapshots for definitions that only carry a differential.

    Parents are resolved through the given resolver (normally user profiles
    first, then core definitions) and materialized recursively when they lack
    a snapshot themselves. Issues from the last update() are kept in
    ``outcome``.
    """

    def __init__(self, resolver: Resolver):
        self.resolver = resolver
        self.outcome: List[SnapshotIssue] = []
        self.generated = 0

    def update(self, definition: Definition) -> List[SnapshotIssue]:
        """
        Attach a snapshot to ``definition`` in place.

        Returns:
            Issues found; the snapshot is only attached when the list is empty
        """
        self.outcome = self._generate(definition, [])
        return self.outcome

    def _generate(self, definition: Definition, chain: List[str]) -> List[SnapshotIssue]:
        if definition.url in chain:
            cycle = " -> ".join(chain + [definition.url])
            return [SnapshotIssue(f"Circular baseDefinition chain: {cycle}", code="circular")]
        if len(chain) >= MAX_DEPTH:
            return [SnapshotIssue(
                f"baseDefinition chain of '{chain[0]}' exceeds {MAX_DEPTH} levels",
                code="too-long"
            )]

        if not definition.base_definition:
            definition.snapshot = [e.model_copy(deep=True) for e in definition.differential]
            self.generated += 1
            return []

        parent = self.resolver.resolve(definition.base_definition)
        if parent is None:
            return [SnapshotIssue(
                f"Unable to resolve reference to profile '{definition.base_definition}' "
                f"(base of '{definition.url}')",
                code="not-found"
            )]

        if not parent.has_snapshot:
            logger.debug(f"Generate snapshot for base profile '{parent.url}' ...")
            issues = self._generate(parent, chain + [definition.url])
            if issues:
                return issues

        definition.snapshot = merge_differential(
            parent.snapshot or [],
            definition.differential,
            base_type=parent.type,
            type_name=definition.type or parent.type
        )
        self.generated += 1
        return []

