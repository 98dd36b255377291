"""
Shared components: location value types, source spans and errors.
"""

from .source_location import SourceLocation
from .errors import (
    Error, ErrorReporter, MemrangeError, MemrangeSourceError, LocationSyntaxError,
    FootprintError, MemrangeImplementationError, PreconditionError,
)
from .location import LocKind, Dimension, MemoryLocationRange
