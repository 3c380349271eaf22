"""Snapshot generation from differentials and their baseDefinition chain."""

from .generator import SnapshotGenerator, merge_differential, rebase_path

__all__ = ["SnapshotGenerator", "merge_differential", "rebase_path"]
