"""
Pytest configuration and shared fixtures for all memrange tests.
"""

import sys
import pytest
from pathlib import Path
from typing import Iterable, Set, Tuple

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
from memrange.frontend.parser import Parser
from memrange.shared.location import Dimension, MemoryLocationRange


# =============================================================================
# Session-scoped fixtures (shared across all tests)
# =============================================================================

@pytest.fixture(scope="session")
def session_parser():
    """
    Session-scoped parser shared across ALL tests.

    The parser keeps no per-parse state, so sharing it is safe.
    """
    return Parser()


@pytest.fixture(scope="session")
def loc(session_parser):
    """Parse location notation: loc("A bytes [0, 10)")"""
    def _parse(text: str) -> MemoryLocationRange:
        return session_parser.parse(text, "<test>")
    return _parse


# =============================================================================
# Brute-force helpers
# =============================================================================

def _points(location: MemoryLocationRange) -> Set[Tuple[int, ...]]:
    """Index tuples covered by a collapsed location"""
    points = {()}
    for dim in location.dims:
        points = {p + (i,) for p in points for i in dim}
    return points


def _union_points(locations: Iterable[MemoryLocationRange]) -> Set[Tuple[int, ...]]:
    result: Set[Tuple[int, ...]] = set()
    for location in locations:
        result |= _points(location)
    return result


@pytest.fixture(scope="session")
def points():
    """Set of index tuples of a collapsed location"""
    return _points


@pytest.fixture(scope="session")
def union_points():
    """Set of index tuples of several collapsed locations"""
    return _union_points


@pytest.fixture(scope="session")
def dim_set():
    """Set of indices of one Dimension"""
    def _dim_set(dim: Dimension) -> Set[int]:
        return set(dim)
    return _dim_set


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers for test organization."""
    config.addinivalue_line(
        "markers", "property: marks brute-force property tests"
    )
