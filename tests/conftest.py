"""
Shared fixtures for the gag simulator tests.
"""

import pytest

from gagsim.core.content import GagRepository
from gagsim.items.gag import new_instance


@pytest.fixture(scope="session")
def repo():
    return GagRepository()


@pytest.fixture
def gag(repo):
    """Builds a gag instance from its catalog name."""

    def _make(name: str, organic: bool = False):
        info = repo.get_gag_by_name(name)
        assert info is not None, f"Unknown gag {name}"
        return new_instance(info, organic=organic)

    return _make
