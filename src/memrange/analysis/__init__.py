"""
Relation engine: scalar intersection, delinearization, per-axis affine
intersection and bounded complement.
"""

from .equation import solve_binomial, extended_gcd, floor_div, ceil_div, BinomialSolution, SolutionLine
from .scalar import intersect_scalar, IMPRECISE
from .delinearize import delinearize
from .complement import difference, check_subset
from .intersection import (
    intersect, intersect_dimension, format_solution, IntersectionResult, Relation,
)
