"""Definition catalogs (directories, package archives) and resolvers over them."""

from .sources import (
    DefinitionSource,
    DirectorySource,
    PackageArchiveSource,
    ZipArchiveSource,
    InMemorySource,
    open_core_source,
)
from .resolver import Resolver, CachedResolver, MultiResolver

__all__ = [
    "DefinitionSource",
    "DirectorySource",
    "PackageArchiveSource",
    "ZipArchiveSource",
    "InMemorySource",
    "open_core_source",
    "Resolver",
    "CachedResolver",
    "MultiResolver",
]
