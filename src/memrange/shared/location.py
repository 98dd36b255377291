"""
Memory Location Ranges

Value types describing the set of addresses a single access may touch:

- Dimension: one affine axis {start + k * step : k in [0, trip_count)}
- MemoryLocationRange: a base object plus either a flat byte interval
  (DEFAULT), a list of per-axis Dimensions (COLLAPSED), or nothing at all
  (NON_COLLAPSABLE, the whole object)

All values are frozen. Algorithms build new values with dataclasses.replace.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterator, Optional, Sequence, Tuple
import re

from .errors import PreconditionError
from ..utils.config import (
    SCALAR_KEYWORD, COLLAPSED_KEYWORD, NON_COLLAPSABLE_KEYWORD, ELEMENT_SIZE_KEYWORD,
    RESERVED_NAMES,
)

# Same pattern as NAME in frontend/grammar.lark
_BARE_NAME = re.compile(r"[A-Za-z_%$][A-Za-z0-9_.$]*")


class LocKind(Enum):
    """Representation of a memory location range"""
    DEFAULT = "default"
    COLLAPSED = "collapsed"
    NON_COLLAPSABLE = "non-collapsable"


@dataclass(frozen=True)
class Dimension:
    """
    Affine index set of one array axis.

    Example: start=1, step=2, trip_count=4, dim_size=10 is {1, 3, 5, 7}

    dim_size == 0 means the axis size is unknown (outermost axis only).
    Iterable like a Python range.
    """
    start: int
    step: int
    trip_count: int
    dim_size: int = 0

    @property
    def end(self) -> int:
        """Last index of the axis (inclusive)"""
        return self.start + self.step * (self.trip_count - 1)

    def is_valid(self) -> bool:
        if self.start < 0 or self.step <= 0 or self.trip_count <= 0 or self.dim_size < 0:
            return False
        return self.dim_size == 0 or self.end < self.dim_size

    def check(self) -> "Dimension":
        """Return self, or raise PreconditionError if the invariants do not hold."""
        if self.start < 0:
            raise PreconditionError(f"Start must be non-negative: {self!r}")
        if self.step <= 0:
            raise PreconditionError(f"Step must be positive: {self!r}")
        if self.trip_count <= 0:
            raise PreconditionError(f"Trip count must be positive: {self!r}")
        if self.dim_size < 0:
            raise PreconditionError(f"Dimension size must be non-negative: {self!r}")
        if self.dim_size and self.end >= self.dim_size:
            raise PreconditionError(f"Index {self.end} is out of dimension bounds: {self!r}")
        return self

    def to_python_range(self) -> range:
        return range(self.start, self.end + 1, self.step)

    def __iter__(self) -> Iterator[int]:
        return iter(self.to_python_range())

    def __len__(self) -> int:
        return self.trip_count

    def __contains__(self, index: int) -> bool:
        return (self.start <= index <= self.end and
                (index - self.start) % self.step == 0)

    def __str__(self) -> str:
        step = f" step {self.step}" if self.step != 1 else ""
        return f"{self.start}{step} count {self.trip_count} of {self.dim_size}"


@dataclass(frozen=True)
class MemoryLocationRange:
    """
    Addresses of one access to the object identified by ``ptr``.

    DEFAULT:          bytes [lower_bound, upper_bound); None means open
    COLLAPSED:        one Dimension per axis, outermost first; upper_bound
                      holds the size in bytes of one innermost element
    NON_COLLAPSABLE:  could not be refined, stands for the whole object

    ``ptr`` is only ever compared for equality. Printed names read back as
    strings, so only string ptrs survive a print/parse round trip. The
    default-constructed value (no ptr, no bounds) is the "imprecise"
    intersection sentinel.
    """
    ptr: Any = None
    kind: LocKind = LocKind.DEFAULT
    lower_bound: Optional[int] = None
    upper_bound: Optional[int] = None
    dims: Tuple[Dimension, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not isinstance(self.dims, tuple):
            object.__setattr__(self, "dims", tuple(self.dims))

    @classmethod
    def scalar(cls, ptr: Any, lower: Optional[int], upper: Optional[int]) -> "MemoryLocationRange":
        return cls(ptr=ptr, kind=LocKind.DEFAULT, lower_bound=lower, upper_bound=upper)

    @classmethod
    def collapsed(cls, ptr: Any, dims: Sequence[Dimension],
                  element_size: Optional[int] = None) -> "MemoryLocationRange":
        return cls(ptr=ptr, kind=LocKind.COLLAPSED, upper_bound=element_size, dims=tuple(dims))

    @property
    def is_collapsed(self) -> bool:
        return self.kind is LocKind.COLLAPSED

    @property
    def is_non_collapsable(self) -> bool:
        return self.kind is LocKind.NON_COLLAPSABLE

    @property
    def has_bounds(self) -> bool:
        return self.lower_bound is not None and self.upper_bound is not None

    @property
    def element_size(self) -> Optional[int]:
        """Bytes per innermost element of a collapsed location"""
        return self.upper_bound if self.is_collapsed else None

    def as_non_collapsable(self) -> "MemoryLocationRange":
        """Same object, marked as the unrefined rest of the location"""
        return replace(self, kind=LocKind.NON_COLLAPSABLE, dims=())

    def __str__(self) -> str:
        name = _format_name(self.ptr)
        if self.is_collapsed:
            dims = ", ".join(str(d) for d in self.dims)
            elem = f" {ELEMENT_SIZE_KEYWORD} {self.upper_bound}" if self.upper_bound is not None else ""
            return f"{name} {COLLAPSED_KEYWORD}({dims}){elem}"
        bounds = self._format_bounds()
        if self.is_non_collapsable:
            suffix = f" {bounds}" if self.lower_bound is not None or self.upper_bound is not None else ""
            return f"{name} {NON_COLLAPSABLE_KEYWORD}{suffix}"
        return f"{name} {bounds}"

    def _format_bounds(self) -> str:
        lower = "" if self.lower_bound is None else str(self.lower_bound)
        upper = " " if self.upper_bound is None else f" {self.upper_bound}"
        return f"{SCALAR_KEYWORD} [{lower},{upper})"


def _format_name(ptr: Any) -> str:
    """Bare name when it reads back as one, otherwise a quoted string"""
    if ptr is None:
        return "<none>"
    name = str(ptr)
    if _BARE_NAME.fullmatch(name) and name not in RESERVED_NAMES:
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
