"""
Delinearization

Rebuilds per-axis indices for a flat byte interval so that it can be compared
with a collapsed access of the same array. Only two shapes are recovered
exactly:

- whole rows: every axis except the outermost is fully covered
- part of one row: every axis except the innermost is fixed

Anything else is left flat and later compares as imprecise.

Example (int A[4][8], elem 4):
    bytes [32, 96)  ->  dims(1 count 2 of 4, 0 count 8 of 8)
    bytes [40, 48)  ->  dims(1 count 1 of 4, 2 count 2 of 8)
"""

from typing import List, Optional
import logging

from ..shared.location import Dimension, LocKind, MemoryLocationRange

logger = logging.getLogger(__name__)


def delinearize(source: MemoryLocationRange,
                target: MemoryLocationRange) -> Optional[MemoryLocationRange]:
    """
    Express ``target`` (a bounded DEFAULT location) with the axes of
    ``source`` (a COLLAPSED location with a known element size).

    Returns the new COLLAPSED location, or None if any precondition fails or
    the interval does not map onto a rectangular region.
    """
    if target.kind is not LocKind.DEFAULT or source.kind is not LocKind.COLLAPSED:
        return None
    if not target.has_bounds:
        return None
    lower, upper = target.lower_bound, target.upper_bound
    if lower >= upper or lower < 0:
        return None
    dim_n = len(source.dims)
    elem_size = source.element_size
    if dim_n == 0 or not elem_size or elem_size <= 0:
        return None
    if lower % elem_size != 0 or upper % elem_size != 0:
        return None

    # sizes[i]: bytes spanned by one index step of axis i - 1, sizes[dim_n] = elem_size
    sizes: List[int] = [0] * (dim_n + 1)
    sizes[dim_n] = elem_size
    for i in range(dim_n - 1, -1, -1):
        sizes[i] = source.dims[i].dim_size * sizes[i + 1]
        if sizes[i] == 0 and i != 0:
            logger.debug(f"[DELINEARIZE] axis {i} of {source} has unknown size")
            return None
    if sizes[0] and upper > sizes[0]:
        logger.debug(f"[DELINEARIZE] {target} exceeds the object ({sizes[0]} bytes)")
        return None

    last = upper - 1
    lower_idx = [_axis_index(lower, sizes[i], sizes[i + 1]) for i in range(dim_n)]
    upper_idx = [_axis_index(last, sizes[i], sizes[i + 1]) for i in range(dim_n)]

    inner = dim_n - 1
    if lower_idx[inner] == 0 and upper_idx[inner] + 1 == source.dims[inner].dim_size:
        for i in range(1, inner):
            if lower_idx[i] != 0 or upper_idx[i] + 1 != source.dims[i].dim_size:
                logger.debug(f"[DELINEARIZE] {target}: axis {i} is partially covered")
                return None
    else:
        for i in range(inner):
            if lower_idx[i] != upper_idx[i]:
                logger.debug(f"[DELINEARIZE] {target} spans several rows of axis {i}")
                return None

    dims = []
    for i, axis in enumerate(source.dims):
        dims.append(Dimension(
            start=lower_idx[i],
            step=1,
            trip_count=upper_idx[i] - lower_idx[i] + 1,
            dim_size=axis.dim_size,
        ))
    result = MemoryLocationRange(
        ptr=target.ptr,
        kind=LocKind.COLLAPSED,
        lower_bound=source.lower_bound,
        upper_bound=elem_size,
        dims=tuple(dims),
    )
    logger.debug(f"[DELINEARIZE] {target} -> {result}")
    return result


def _axis_index(offset: int, size: int, next_size: int) -> int:
    if size > 0:
        return (offset % size) // next_size
    return offset // next_size
