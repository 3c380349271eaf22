# profile_xref/core/errors.py
"""Exception types raised by the x-ref auditor."""


class XRefError(Exception):
    """Base class for all auditor errors."""


class ConfigurationError(XRefError):
    """Invalid or missing run configuration. Fatal before any catalog access."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class CatalogError(XRefError):
    """A definition catalog (directory or archive) could not be opened."""


class MappingFrozenError(XRefError):
    """Raised when registering into a mapping that has already been built."""
