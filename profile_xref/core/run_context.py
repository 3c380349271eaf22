# profile_xref/core/run_context.py
"""
Run state for one x-ref audit.

The RunContext owns everything that lives for the duration of a run: the core
and user catalogs, their cached resolvers, the combined resolver and snapshot
generator (both built lazily, once), and the per-definition snapshot results.
It is created once per invocation and passed to every step.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import logging

from ..catalog.resolver import CachedResolver, MultiResolver, Resolver
from ..catalog.sources import DefinitionSource, DirectorySource, open_core_source
from ..snapshot.generator import SnapshotGenerator
from .config import XRefConfig
from .logging_utils import append_runlog
from .models import Definition


logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """
    Complete state of an x-ref run.

    Single-threaded: the lazily built collaborators are not guarded by a lock.
    """
    core_source: DefinitionSource
    user_source: DefinitionSource
    config: Optional[XRefConfig] = None
    runlog_path: Optional[Path] = None
    generator_factory: Callable[[Resolver], Any] = SnapshotGenerator

    core_resolver: CachedResolver = field(init=False)
    user_resolver: CachedResolver = field(init=False)
    snapshot_results: Dict[str, bool] = field(default_factory=dict, init=False)

    _combined_resolver: Optional[MultiResolver] = field(default=None, init=False, repr=False)
    _snapshot_generator: Optional[Any] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.core_resolver = CachedResolver(self.core_source)
        self.user_resolver = CachedResolver(self.user_source)

    @classmethod
    def from_config(cls, config: XRefConfig) -> "RunContext":
        """
        Open the core package and the target directory named by the config.

        Raises:
            CatalogError: If the core package cannot be opened
        """
        return cls(
            core_source=open_core_source(config.paths.core_package),
            user_source=DirectorySource(config.paths.target_dir, include_subdirs=config.include_subdirs),
            config=config,
            runlog_path=config.paths.runlog_path
        )

    def get_combined_resolver(self) -> MultiResolver:
        """User profiles first, then core definitions. Built on first use."""
        if self._combined_resolver is None:
            self._combined_resolver = MultiResolver(self.user_resolver, self.core_resolver)
        return self._combined_resolver

    def get_snapshot_generator(self):
        """The shared snapshot generator. Built on first use."""
        if self._snapshot_generator is None:
            self._snapshot_generator = self.generator_factory(self.get_combined_resolver())
        return self._snapshot_generator

    def core_definition_urls(self) -> List[str]:
        return self.core_source.list_structure_definitions()

    def user_definition_urls(self) -> List[str]:
        return self.user_source.list_structure_definitions()

    def user_definitions(self) -> List[Definition]:
        """User definitions in catalog order; unparsable ones are dropped."""
        definitions = []
        for url in self.user_definition_urls():
            definition = self.user_resolver.resolve(url)
            if definition is None:
                logger.warning(f"Could not load user profile '{url}', skipping")
                continue
            definitions.append(definition)
        return definitions

    def log_event(self, event: str, data: Dict[str, Any]) -> None:
        """Append a record to the JSONL run log, if one is configured."""
        if self.runlog_path is None:
            return
        append_runlog(self.runlog_path, event, data)
