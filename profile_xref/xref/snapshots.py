# profile_xref/xref/snapshots.py
"""Ensure a definition has a snapshot before its elements are inspected."""
from __future__ import annotations
import logging

from ..core.models import Definition
from ..core.run_context import RunContext


logger = logging.getLogger(__name__)


def ensure_snapshot(ctx: RunContext, definition: Definition) -> bool:
    """
    Make sure ``definition`` carries a snapshot.

    A definition that already has one is usable as-is. Otherwise the shared
    snapshot generator runs once; its result (usable or not) is remembered in
    the run context so later calls neither regenerate nor retry.

    Returns:
        True if the definition can be used, False if it must be skipped
    """
    if definition.has_snapshot:
        return True

    key = definition.url
    if key in ctx.snapshot_results:
        return ctx.snapshot_results[key]

    generator = ctx.get_snapshot_generator()
    logger.info(f"Generate snapshot for profile '{definition.url}' ...")
    issues = generator.update(definition)

    usable = not issues
    if issues:
        logger.warning(
            f"Snapshot generator returned {len(issues)} issue(s) for '{definition.url}':"
        )
        for issue in issues:
            logger.warning(f"   {issue.details}")
        ctx.log_event("snapshot_failed", {
            "profile_url": definition.url,
            "issues": [issue.to_dict() for issue in issues]
        })

    ctx.snapshot_results[key] = usable
    return usable
