"""
memrange: relations between memory location ranges.

Decides whether two accesses to the same object are disjoint, overlap
exactly (and by how much), or can only be answered conservatively, and
computes the parts of each access outside the overlap.
"""

from .shared import (
    LocKind, Dimension, MemoryLocationRange,
    MemrangeError, LocationSyntaxError, FootprintError, PreconditionError,
)
from .analysis import intersect, IntersectionResult, Relation, difference, delinearize
from .frontend import parse_location
from .ir import serialize_location, serialize_result, deserialize_location

__version__ = "0.1.0"

__all__ = [
    "LocKind", "Dimension", "MemoryLocationRange",
    "MemrangeError", "LocationSyntaxError", "FootprintError", "PreconditionError",
    "intersect", "IntersectionResult", "Relation", "difference", "delinearize",
    "parse_location", "serialize_location", "serialize_result", "deserialize_location",
]
