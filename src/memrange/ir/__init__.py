"""
S-expression form of locations and relation results.
"""

from .serialization import (
    serialize_location, serialize_result, deserialize_location,
    LocationSerializer, LocationDeserializer,
)
