"""
Scalar Intersection

Intersection of two flat byte intervals [lower, upper) of the same object.
Either bound may be missing, in which case only disjointness can be proven.
"""

from dataclasses import replace
from typing import List, Optional
import logging

from ..shared.location import MemoryLocationRange

logger = logging.getLogger(__name__)

# Marker returned when the intervals may overlap but the overlap is unknown
IMPRECISE = MemoryLocationRange()


def intersect_scalar(
    lhs: MemoryLocationRange,
    rhs: MemoryLocationRange,
    lc: Optional[List[MemoryLocationRange]] = None,
    rc: Optional[List[MemoryLocationRange]] = None,
) -> Optional[MemoryLocationRange]:
    """
    Intersect two non-collapsed locations.

    Returns None if the locations are disjoint (or refer to different objects),
    IMPRECISE if they may overlap by an unknown amount, and otherwise the
    exact overlap [max(lower), min(upper)). Leftover pieces before and after
    the overlap are appended to ``lc`` / ``rc`` when given.

    Example:
        [0, 10) and [5, 15)  ->  [5, 10), lc = [[0, 5)], rc = [[10, 15)]
    """
    if lhs.ptr != rhs.ptr:
        return None
    if not lhs.has_bounds or not rhs.has_bounds:
        if ((lhs.upper_bound is not None and rhs.lower_bound is not None and
             lhs.upper_bound <= rhs.lower_bound) or
                (lhs.lower_bound is not None and rhs.upper_bound is not None and
                 lhs.lower_bound >= rhs.upper_bound)):
            logger.debug(f"[SCALAR] {lhs} and {rhs} are disjoint")
            return None
        logger.debug(f"[SCALAR] {lhs} and {rhs} may overlap (open bound)")
        return IMPRECISE
    # Empty intervals touch nothing
    if (lhs.upper_bound <= rhs.lower_bound or lhs.lower_bound >= rhs.upper_bound or
            lhs.lower_bound >= lhs.upper_bound or rhs.lower_bound >= rhs.upper_bound):
        logger.debug(f"[SCALAR] {lhs} and {rhs} are disjoint")
        return None
    lower = max(lhs.lower_bound, rhs.lower_bound)
    upper = min(lhs.upper_bound, rhs.upper_bound)
    if lc is not None:
        lc.extend(_leftover(lhs, lower, upper))
    if rc is not None:
        rc.extend(_leftover(rhs, lower, upper))
    return replace(lhs, lower_bound=lower, upper_bound=upper)


def _leftover(loc: MemoryLocationRange, lower: int, upper: int) -> List[MemoryLocationRange]:
    """Parts of ``loc`` outside [lower, upper): at most one before, one after"""
    pieces = []
    if loc.lower_bound < lower:
        pieces.append(replace(loc, upper_bound=lower))
    if loc.upper_bound > upper:
        pieces.append(replace(loc, lower_bound=upper))
    return pieces
