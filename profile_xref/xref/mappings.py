# profile_xref/xref/mappings.py
"""
Mapping builder: which user profile specializes which core type.

Every user definition is mapped from the canonical URL of the core type it
constrains to its own canonical URL. Only one profile per core type can be
suggested, so the first one encountered wins and later ones are reported.
"""
from __future__ import annotations
from typing import Iterable
import logging

from ..core.models import Definition, Mapping, MappingEvent, MappingResult
from ..core.run_context import RunContext
from .snapshots import ensure_snapshot


logger = logging.getLogger(__name__)


def _record(ctx: RunContext, result: MappingResult, event: MappingEvent) -> None:
    result.events.append(event)
    if event.is_warning:
        logger.warning(event.message)
    else:
        logger.info(event.message)
    ctx.log_event("mapping", event.to_dict())


def build_mappings(ctx: RunContext, definitions: Iterable[Definition]) -> MappingResult:
    """
    Build the core type -> user profile mapping.

    Args:
        ctx: Run context (snapshot generation, combined resolver, run log)
        definitions: User definitions in catalog order

    Returns:
        MappingResult with the frozen mapping and one event per definition
    """
    result = MappingResult(mapping=Mapping())

    for definition in definitions:
        if not ensure_snapshot(ctx, definition):
            _record(ctx, result, MappingEvent(
                kind="snapshot_failed",
                profile_url=definition.url,
                type_name=definition.type,
                message=f"Skip user profile '{definition.url}': snapshot could not be generated"
            ))
            continue

        key = definition.base_type_url
        if not key or ctx.get_combined_resolver().resolve(key) is None:
            _record(ctx, result, MappingEvent(
                kind="unresolved_base",
                profile_url=definition.url,
                type_name=definition.type,
                key=key,
                message=(
                    f"Warning! Skip user profile '{definition.url}': "
                    f"cannot resolve base type '{definition.type}'"
                )
            ))
            continue

        if result.mapping.register(key, definition.url):
            _record(ctx, result, MappingEvent(
                kind="mapped",
                profile_url=definition.url,
                type_name=definition.type,
                key=key,
                message=f"Map references of type '{definition.type}' to user profile '{definition.url}'"
            ))
        else:
            _record(ctx, result, MappingEvent(
                kind="duplicate",
                profile_url=definition.url,
                type_name=definition.type,
                key=key,
                existing_url=result.mapping[key],
                message=(
                    f"Warning! Ignore duplicate user profile '{definition.url}' for reference "
                    f"target type '{definition.type}' (already mapped to '{result.mapping[key]}')"
                )
            ))

    result.mapping.freeze()
    return result
