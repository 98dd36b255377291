"""
Exact Integer Linear Equations

Solves a * x + b * y = c over the integers (a, b nonzero) with the extended
Euclidean algorithm. Every solution lies on one line parametrised by T:

    x = x0 + sx * T
    y = y0 + sy * T

with sx > 0. Restricting x and y to index windows turns into a window on T,
computed with exact floor/ceiling division (no floating point).

Example:
    2x - 3y = 1  ->  x = 2 + 3T, y = 1 + 2T
    x in [0, 9]  ->  T in [0, 2]
"""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from ..shared.errors import PreconditionError

logger = logging.getLogger(__name__)


def floor_div(a: int, b: int) -> int:
    """Largest integer <= a / b"""
    return a // b


def ceil_div(a: int, b: int) -> int:
    """Smallest integer >= a / b"""
    return -((-a) // b)


def extended_gcd(a: int, b: int) -> Tuple[int, int, int]:
    """
    Return (g, s, t) with g = gcd(a, b) >= 0 and a * s + b * t = g.
    """
    old_r, r = a, b
    old_s, s = 1, 0
    old_t, t = 0, 1
    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
        old_t, t = t, old_t - q * t
    if old_r < 0:
        old_r, old_s, old_t = -old_r, -old_s, -old_t
    return old_r, old_s, old_t


@dataclass(frozen=True)
class SolutionLine:
    """One variable of the solution: constant + slope * T"""
    constant: int
    slope: int

    def at(self, t: int) -> int:
        return self.constant + self.slope * t

    def window(self, low: int, high: int) -> Tuple[int, int]:
        """
        Range [tmin, tmax] of T for which low <= constant + slope * T <= high.
        Empty when tmax < tmin. Requires a positive slope.
        """
        if self.slope <= 0:
            raise PreconditionError(f"Solution slope must be positive: {self}")
        return (ceil_div(low - self.constant, self.slope),
                floor_div(high - self.constant, self.slope))

    def __str__(self) -> str:
        return f"{self.constant} + {self.slope} * T"


@dataclass(frozen=True)
class BinomialSolution:
    """All integer solutions of a * x + b * y = c"""
    x: SolutionLine
    y: SolutionLine


def solve_binomial(a: int, b: int, c: int) -> Optional[BinomialSolution]:
    """
    Solve a * x + b * y = c over the integers.

    Returns None if there is no integer solution (c is not a multiple of
    gcd(a, b)). The x line always has a positive slope and 0 <= x0 < sx.
    """
    if a == 0 or b == 0:
        raise PreconditionError(f"Coefficients must be nonzero: a={a}, b={b}")
    g, s, t = extended_gcd(a, b)
    if c % g != 0:
        logger.debug(f"[EQUATION] {a}*x + {b}*y = {c} has no solution (gcd {g})")
        return None
    k = c // g
    x0, y0 = s * k, t * k
    sx, sy = -b // g, a // g
    if sx < 0:
        sx, sy = -sx, -sy
    # Move to the smallest non-negative x on the line
    shift = floor_div(x0, sx)
    x0 -= shift * sx
    y0 -= shift * sy
    solution = BinomialSolution(SolutionLine(x0, sx), SolutionLine(y0, sy))
    logger.debug(f"[EQUATION] {a}*x + {b}*y = {c}: x = {solution.x}, y = {solution.y}")
    return solution
