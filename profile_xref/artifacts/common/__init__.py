"""Shared helpers for report artifacts."""
