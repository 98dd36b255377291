"""
Footprint Materialisation

Enumerates the addresses a location touches with numpy, and cross-checks a
relation result against brute force. Meant for small locations: debugging,
the CLI ``--verify`` flag and tests.
"""

from typing import List, Optional, Sequence

import numpy as np

from ..shared.errors import FootprintError
from ..shared.location import Dimension, LocKind, MemoryLocationRange
from .intersection import IntersectionResult, Relation


def dimension_indices(dim: Dimension) -> np.ndarray:
    """Indices of one axis, in increasing order"""
    return np.arange(dim.start, dim.end + 1, dim.step, dtype=np.int64)


def element_offsets(loc: MemoryLocationRange) -> np.ndarray:
    """
    Row-major element offsets of a collapsed location (sorted, unique).

    The outermost axis may have an unknown size; inner axes may not.
    """
    if loc.kind is not LocKind.COLLAPSED or not loc.dims:
        raise FootprintError(f"Only collapsed locations have element offsets: {loc}")
    strides = np.ones(len(loc.dims), dtype=np.int64)
    for i in range(len(loc.dims) - 2, -1, -1):
        inner = loc.dims[i + 1].dim_size
        if inner <= 0:
            raise FootprintError(f"Axis {i + 1} of {loc} has unknown size")
        strides[i] = strides[i + 1] * inner
    grids = np.ix_(*[dimension_indices(d) for d in loc.dims])
    offsets = sum(g * s for g, s in zip(grids, strides))
    return np.unique(np.asarray(offsets).ravel())


def byte_footprint(loc: MemoryLocationRange) -> np.ndarray:
    """Byte addresses touched by a location (sorted, unique)"""
    if loc.kind is LocKind.DEFAULT:
        if not loc.has_bounds:
            raise FootprintError(f"Open bounds cannot be enumerated: {loc}")
        return np.arange(loc.lower_bound, max(loc.lower_bound, loc.upper_bound), dtype=np.int64)
    if loc.kind is LocKind.COLLAPSED:
        elem = loc.element_size
        if not elem or elem <= 0:
            raise FootprintError(f"Element size is unknown: {loc}")
        offsets = element_offsets(loc) * elem
        return np.unique((offsets[:, None] + np.arange(elem, dtype=np.int64)).ravel())
    raise FootprintError(f"Non-collapsable location has no known footprint: {loc}")


def _union(locations: Sequence[MemoryLocationRange], footprint) -> np.ndarray:
    parts = [footprint(loc) for loc in locations]
    if not parts:
        return np.empty(0, dtype=np.int64)
    return np.unique(np.concatenate(parts))


def verify_relation(
    lhs: MemoryLocationRange,
    rhs: MemoryLocationRange,
    result: IntersectionResult,
    lc: Optional[Sequence[MemoryLocationRange]] = None,
    rc: Optional[Sequence[MemoryLocationRange]] = None,
) -> List[str]:
    """
    Compare a relation result with the brute-force answer.

    Returns a list of problems, empty when the result is consistent.
    Imprecise and different-object results claim nothing and always pass;
    a side whose fragments include a non-collapsable marker is not checked.
    """
    if result.relation in (Relation.IMPRECISE, Relation.DIFFERENT_OBJECTS):
        return []
    # Compare in elements when both sides are collapsed, otherwise in bytes
    if lhs.is_collapsed and rhs.is_collapsed and not lhs.element_size:
        footprint = element_offsets
    else:
        footprint = byte_footprint
    problems: List[str] = []
    left_set = footprint(lhs)
    right_set = footprint(rhs)
    overlap = np.intersect1d(left_set, right_set)

    if result.is_disjoint():
        if overlap.size:
            problems.append(f"reported disjoint, but {overlap.size} addresses are shared")
        return problems

    common = footprint(result.location)
    if not np.array_equal(common, overlap):
        problems.append(f"intersection {result.location} does not match the "
                        f"{overlap.size} shared addresses")
    for name, base, base_set, fragments in (("left", lhs, left_set, lc),
                                            ("right", rhs, right_set, rc)):
        if fragments is None or any(f.is_non_collapsable for f in fragments):
            continue
        rest = _union(fragments, footprint)
        if np.setdiff1d(rest, base_set).size:
            problems.append(f"{name} fragments reach outside {base}")
        if np.intersect1d(rest, common).size:
            problems.append(f"{name} fragments overlap the intersection")
        if not np.array_equal(np.union1d(rest, common), base_set):
            problems.append(f"{name} fragments and intersection do not cover {base}")
    return problems
