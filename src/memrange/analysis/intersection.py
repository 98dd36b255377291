"""
Memory Location Intersection

Decides how two accesses to the same object relate and, for an exact
overlap, computes the leftover parts of each side.

Per axis the common indices of
    L1 + K1 * x,  x in [0, N1)
    L2 + K2 * y,  y in [0, N2)
are the solutions of K1 * x - K2 * y = L2 - L1, found exactly with
solve_binomial. The solutions form one arithmetic sequence with step
lcm(K1, K2); clipping it to both trip counts gives the intersection axis.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple
import logging

from typing_extensions import TypeAlias

from ..shared.errors import PreconditionError
from ..shared.location import Dimension, LocKind, MemoryLocationRange
from ..utils.config import DEFAULT_COMPLEMENT_THRESHOLD
from .complement import difference
from .delinearize import delinearize
from .equation import solve_binomial
from .scalar import IMPRECISE, intersect_scalar

logger = logging.getLogger(__name__)

Fragments: TypeAlias = List[MemoryLocationRange]
Tracer: TypeAlias = Callable[[str], None]


class Relation(Enum):
    """Outcome of comparing two locations"""
    EXACT = "exact"
    DISJOINT = "disjoint"
    IMPRECISE = "imprecise"
    # Different base objects: nothing was computed. Whether this means
    # "independent" or "may alias" is left to the caller.
    DIFFERENT_OBJECTS = "different-objects"


@dataclass(frozen=True)
class IntersectionResult:
    """Relation tag plus the intersection location for EXACT / IMPRECISE"""
    relation: Relation
    location: Optional[MemoryLocationRange] = None

    @classmethod
    def exact(cls, location: MemoryLocationRange) -> "IntersectionResult":
        return cls(Relation.EXACT, location)

    @classmethod
    def disjoint(cls) -> "IntersectionResult":
        return cls(Relation.DISJOINT)

    @classmethod
    def imprecise(cls) -> "IntersectionResult":
        return cls(Relation.IMPRECISE, IMPRECISE)

    @classmethod
    def different_objects(cls) -> "IntersectionResult":
        return cls(Relation.DIFFERENT_OBJECTS)

    def is_exact(self) -> bool:
        return self.relation is Relation.EXACT

    def is_disjoint(self) -> bool:
        return self.relation is Relation.DISJOINT

    def is_imprecise(self) -> bool:
        return self.relation is Relation.IMPRECISE

    def may_overlap(self) -> bool:
        """Conservative answer for a dependence test"""
        return self.relation is not Relation.DISJOINT

    def __str__(self) -> str:
        if self.location is not None and self.is_exact():
            return f"{self.relation.value}: {self.location}"
        return self.relation.value


@dataclass
class _SideFragments:
    """Leftover pieces of one side, collected until the result is known"""
    base: MemoryLocationRange
    fragments: Fragments = field(default_factory=list)
    saturated: bool = False

    def add_axis(self, axis: int, prefix: Tuple[Dimension, ...],
                 pieces: Optional[List[Dimension]]) -> None:
        if self.saturated:
            return
        if pieces is None:
            self.fragments = [self.base.as_non_collapsable()]
            self.saturated = True
            return
        # Axes before ``axis`` are already restricted to the intersection,
        # so fragments of different axes never overlap.
        for piece in pieces:
            dims = prefix + (piece,) + self.base.dims[axis + 1:]
            self.fragments.append(MemoryLocationRange(
                ptr=self.base.ptr,
                kind=LocKind.COLLAPSED,
                lower_bound=self.base.lower_bound,
                upper_bound=self.base.upper_bound,
                dims=dims,
            ))


def intersect(
    lhs: MemoryLocationRange,
    rhs: MemoryLocationRange,
    lc: Optional[Fragments] = None,
    rc: Optional[Fragments] = None,
    threshold: int = DEFAULT_COMPLEMENT_THRESHOLD,
    tracer: Optional[Tracer] = None,
) -> IntersectionResult:
    """
    Relate two locations.

    Args:
        lhs, rhs: Locations to compare; both must have a ptr
        lc, rc: If given, receive the parts of lhs / rhs outside the
            intersection (only for an EXACT result)
        threshold: Budget of skipped-phase fragments per axis; when it is
            exceeded the side gets a single NON_COLLAPSABLE fragment
        tracer: Optional sink for a human readable account of the solve

    Returns: EXACT with the shared region, DISJOINT, IMPRECISE (assume full
    overlap) or DIFFERENT_OBJECTS.
    """
    if lhs.ptr is None or rhs.ptr is None:
        raise PreconditionError("Pointers of intersected memory locations must not be null")
    if lhs.ptr != rhs.ptr:
        return IntersectionResult.different_objects()

    if lhs.kind is LocKind.DEFAULT and rhs.kind is LocKind.COLLAPSED:
        lhs = delinearize(rhs, lhs) or lhs
    elif rhs.kind is LocKind.DEFAULT and lhs.kind is LocKind.COLLAPSED:
        rhs = delinearize(lhs, rhs) or rhs

    if not lhs.is_collapsed and not rhs.is_collapsed:
        if lhs.kind is LocKind.DEFAULT and rhs.kind is LocKind.DEFAULT:
            return _scalar_result(lhs, rhs, lc, rc)
        return IntersectionResult.imprecise()
    if not lhs.is_collapsed or not rhs.is_collapsed:
        return IntersectionResult.imprecise()
    # Malformed axes fail fast, whichever exit is taken below
    for dim in lhs.dims + rhs.dims:
        dim.check()
    if len(lhs.dims) != len(rhs.dims):
        logger.debug(f"[EQUATION] axis count mismatch: {lhs} vs {rhs}")
        return IntersectionResult.imprecise()
    if lhs.upper_bound != rhs.upper_bound:
        logger.debug(f"[EQUATION] element size mismatch: {lhs} vs {rhs}")
        return IntersectionResult.imprecise()
    if lhs.lower_bound == rhs.lower_bound and lhs.dims == rhs.dims:
        return IntersectionResult.exact(lhs)

    left = _SideFragments(lhs) if lc is not None else None
    right = _SideFragments(rhs) if rc is not None else None
    dims: List[Dimension] = []
    for axis, (l_dim, r_dim) in enumerate(zip(lhs.dims, rhs.dims)):
        if l_dim.dim_size != r_dim.dim_size:
            logger.debug(f"[EQUATION] axis {axis}: size {l_dim.dim_size} vs {r_dim.dim_size}")
            return IntersectionResult.imprecise()
        common = intersect_dimension(l_dim, r_dim)
        if tracer is not None:
            tracer(f"[EQUATION] axis {axis}: ({l_dim}) & ({r_dim}) = "
                   f"{common if common is not None else 'empty'}")
        if common is None:
            return IntersectionResult.disjoint()
        prefix = tuple(dims)
        if left is not None and not left.saturated:
            left.add_axis(axis, prefix, difference(l_dim, common, threshold))
        if right is not None and not right.saturated:
            right.add_axis(axis, prefix, difference(r_dim, common, threshold))
        dims.append(common)

    result = MemoryLocationRange(
        ptr=lhs.ptr,
        kind=LocKind.COLLAPSED,
        lower_bound=lhs.lower_bound,
        upper_bound=lhs.upper_bound,
        dims=tuple(dims),
    )
    if left is not None:
        lc.extend(left.fragments)
    if right is not None:
        rc.extend(right.fragments)
    if tracer is not None:
        tracer(format_solution(result,
                               left.fragments if left is not None else None,
                               right.fragments if right is not None else None))
    return IntersectionResult.exact(result)


def intersect_dimension(left: Dimension, right: Dimension) -> Optional[Dimension]:
    """
    Common indices of two axes of equal size, or None if there are none.
    """
    if left.end < right.start or right.end < left.start:
        return None
    solution = solve_binomial(left.step, -right.step, right.start - left.start)
    if solution is None:
        return None
    tx_min, tx_max = solution.x.window(0, left.trip_count - 1)
    ty_min, ty_max = solution.y.window(0, right.trip_count - 1)
    t_min = max(tx_min, ty_min)
    t_max = min(tx_max, ty_max)
    if t_max < t_min:
        return None
    step = left.step * solution.x.slope
    start = left.start + left.step * solution.x.at(t_min)
    return Dimension(start, step, t_max - t_min + 1, left.dim_size).check()


def _scalar_result(lhs, rhs, lc, rc) -> IntersectionResult:
    found = intersect_scalar(lhs, rhs, lc, rc)
    if found is None:
        return IntersectionResult.disjoint()
    if found is IMPRECISE:
        return IntersectionResult.imprecise()
    return IntersectionResult.exact(found)


def format_solution(intersection: MemoryLocationRange,
                    lc: Optional[Fragments] = None,
                    rc: Optional[Fragments] = None) -> str:
    """
    Summary of a solved intersection, first axis of every location:

        Left: {Full | 1 + 2 * T, T in [0, 4), DimSize: 10}
        Intersection: ...
        Right: ...
    """
    def describe(loc: MemoryLocationRange) -> str:
        state = "Empty" if loc.ptr is None else "Full"
        if not loc.dims:
            return f"{{{state} | {loc}}}"
        dim = loc.dims[0]
        return (f"{{{state} | {dim.start} + {dim.step} * T, T in [0, {dim.trip_count}), "
                f"DimSize: {dim.dim_size}}}")

    lines = ["[EQUATION] Solution:"]
    lines.append("Left: " + " ".join(describe(r) for r in (lc or [])))
    lines.append("Intersection: " + describe(intersection))
    lines.append("Right: " + " ".join(describe(r) for r in (rc or [])))
    return "\n".join(lines)
