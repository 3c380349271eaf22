from typing import Any, Dict, List, Optional

import pytest

from profile_xref.catalog.sources import InMemorySource
from profile_xref.core.run_context import RunContext

from fhir_fixtures import CountingGenerator, core_resources


@pytest.fixture
def make_context():
    """Build a RunContext over in-memory core and user catalogs."""

    def _make(user: List[Dict[str, Any]], core: Optional[List[Dict[str, Any]]] = None, **kwargs) -> RunContext:
        return RunContext(
            core_source=InMemorySource(core if core is not None else core_resources(), name="core"),
            user_source=InMemorySource(user, name="user"),
            **kwargs
        )

    return _make


@pytest.fixture
def counting_generator_factory():
    created: List[CountingGenerator] = []

    def _factory(resolver):
        generator = CountingGenerator(resolver)
        created.append(generator)
        return generator

    _factory.created = created
    return _factory
