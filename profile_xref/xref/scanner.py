# profile_xref/xref/scanner.py
"""
Cross-reference scanner.

Walks every snapshot element of every user profile and reports Reference
types whose targetProfile is a core type that a user profile specializes.
References that deliberately target the generic core type are reported too;
the scanner cannot tell them apart.
"""
from __future__ import annotations
from typing import Iterable, Iterator, List, Set
import logging

from ..core.models import Definition, Element, Finding, Mapping, strip_canonical_version
from ..core.run_context import RunContext
from .snapshots import ensure_snapshot


logger = logging.getLogger(__name__)


def scan_element(definition: Definition, element: Element, mapping: Mapping) -> Iterator[Finding]:
    """Findings for one element, in type declaration order."""
    for entry in element.types:
        if not entry.is_reference:
            continue
        target = entry.target_profile
        if not target:
            continue
        suggestion = mapping.get(strip_canonical_version(target))
        if suggestion is None:
            continue
        yield Finding(
            resource_name=definition.name,
            path=element.path,
            found=target,
            suggestion=suggestion,
            profile_url=definition.url
        )


class CrossReferenceScan:
    """
    Lazy, restartable sequence of findings.

    Each iteration walks the definitions again in the same order; snapshots
    are already cached in the run context after the first pass.
    """

    def __init__(
        self,
        ctx: RunContext,
        definitions: Iterable[Definition],
        mapping: Mapping,
        excluded: Iterable[str] = ()
    ):
        self.ctx = ctx
        self.definitions: List[Definition] = list(definitions)
        self.mapping = mapping
        self.excluded: Set[str] = set(excluded)

    def __iter__(self) -> Iterator[Finding]:
        for definition in self.definitions:
            logger.debug(f"Validate '{definition.url}' ...")
            if definition.url in self.excluded:
                continue
            if not ensure_snapshot(self.ctx, definition):
                continue
            for element in definition.snapshot or []:
                yield from scan_element(definition, element, self.mapping)


def scan(
    ctx: RunContext,
    definitions: Iterable[Definition],
    mapping: Mapping,
    excluded: Iterable[str] = ()
) -> CrossReferenceScan:
    """
    Scan user definitions for references that could target a local profile.

    Definitions whose URL is in ``excluded`` (profiles the mapping builder
    skipped) are walked past without yielding findings.
    """
    return CrossReferenceScan(ctx, definitions, mapping, excluded)
