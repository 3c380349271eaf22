# profile_xref/catalog/resolver.py
"""
Resolvers answer "which Definition has this canonical URL?".

CachedResolver memoizes a single source; MultiResolver chains several and
returns the first answer, which is how user profiles and core definitions are
combined for snapshot generation.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Protocol
import logging

from ..core.models import Definition, strip_canonical_version


logger = logging.getLogger(__name__)


class Resolver(Protocol):
    def resolve(self, url: str) -> Optional[Definition]:
        ...


class CachedResolver:
    """Memoizes lookups (hits and misses) against one resolver or source."""

    def __init__(self, source: Resolver):
        self.source = source
        self._cache: Dict[str, Optional[Definition]] = {}
        self.lookups = 0

    def resolve(self, url: str) -> Optional[Definition]:
        key = strip_canonical_version(url)
        if not key:
            return None
        if key not in self._cache:
            self.lookups += 1
            self._cache[key] = self.source.resolve(key)
        return self._cache[key]

    def __repr__(self) -> str:
        return f"CachedResolver({self.source!r})"


class MultiResolver:
    """Tries each resolver in order; the first non-None result wins."""

    def __init__(self, *resolvers: Resolver):
        self.resolvers: List[Resolver] = list(resolvers)

    def resolve(self, url: str) -> Optional[Definition]:
        for resolver in self.resolvers:
            definition = resolver.resolve(url)
            if definition is not None:
                return definition
        logger.debug(f"Unresolved canonical '{url}'")
        return None

    def __repr__(self) -> str:
        return f"MultiResolver({', '.join(repr(r) for r in self.resolvers)})"
