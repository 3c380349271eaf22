"""Core configuration, data model and run state for the x-ref auditor."""
