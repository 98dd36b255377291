"""
Bounded Complement

Difference D \\ I of an axis D and a sub-range I of it. The leftover is made
of the part of D before I, the part after I, and one fragment per stride
phase of D that I's coarser stride skips over. Indices right next to I that
continue a skipped phase are folded into that phase's fragment.

Example:
    D = 0 count 10 of 10, I = 0 step 2 count 5 of 10
    D \\ I = [1 step 2 count 5 of 10]
"""

from typing import List, Optional
import logging

from ..shared.errors import PreconditionError
from ..shared.location import Dimension

logger = logging.getLogger(__name__)


def check_subset(dim: Dimension, sub: Dimension) -> None:
    """Raise PreconditionError unless ``sub`` is a stride-aligned subset of ``dim``."""
    if sub.step % dim.step != 0:
        raise PreconditionError(f"Step of {sub} is not a multiple of the step of {dim}")
    if sub.start < dim.start or sub.end > dim.end or (sub.start - dim.start) % dim.step != 0:
        raise PreconditionError(f"{sub} is not a subset of {dim}")


def difference(dim: Dimension, sub: Dimension, threshold: int) -> Optional[List[Dimension]]:
    """
    Fragments covering exactly the indices of ``dim`` that are not in ``sub``.

    Returns None when more than ``threshold`` skipped-phase fragments would be
    needed; the caller must then treat the rest of the location as unrefined.
    """
    check_subset(dim, sub)
    phases = sub.step // dim.step - 1 if sub.trip_count > 1 else 0
    if phases > threshold:
        logger.debug(f"[COMPLEMENT] {dim} \\ {sub}: {phases} phases exceed threshold {threshold}")
        return None
    before = (sub.start - dim.start) // dim.step
    after = (dim.end - sub.end) // dim.step
    # Neighbours of sub that extend a skipped phase by one element
    lead = min(before, phases)
    trail = min(after, phases)

    result: List[Dimension] = []
    if before > lead:
        result.append(Dimension(dim.start, dim.step, before - lead, dim.dim_size))
    for j in range(phases):
        start = sub.start + dim.step * (j + 1)
        count = sub.trip_count - 1
        if phases - j <= lead:
            start -= sub.step
            count += 1
        if j < trail:
            count += 1
        result.append(Dimension(start, sub.step, count, dim.dim_size))
    if after > trail:
        result.append(Dimension(sub.end + dim.step * (trail + 1), dim.step,
                                after - trail, dim.dim_size))
    return result
