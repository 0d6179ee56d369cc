"""Real roots of polynomials up to degree four.

Cubics and quartics are not solved with the closed-form formulas, which get
unstable around repeated or nearly complex roots. Instead the roots of the
derivative (the critical points) split the real line into intervals on which
the polynomial is monotonic, and each interval is bisected for at most one
sign change. The derivative is solved the same way, so a quartic recurses
down to the quadratic formula.

The outermost intervals are bracketed ``BRACKET_MARGIN`` units past the
outermost critical points. Roots further out than that are not found.
"""
from __future__ import annotations

from math import sqrt
from typing import Callable, List, NamedTuple, Optional, Sequence

from aimsolver.engine.logger import ChannelLogger
from aimsolver.math.polynomial import Polynomial

DEFAULT_TOLERANCE = 0.025
DEFAULT_MAX_ITERATIONS = 12
BRACKET_MARGIN = 20.0


class Bisection(NamedTuple):
    root: float
    converged: bool


def _sign(value: float) -> int:
    return (value > 0.0) - (value < 0.0)


def bisect(
    function: Callable[[float], float],
    ta: float,
    tb: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> Optional[Bisection]:
    """Search ``[ta, tb]`` for a sign change of ``function``.

    Returns ``None`` when both ends have the same sign. Otherwise the
    midpoint is refined until ``function`` is exactly zero there or the half
    width drops below ``tolerance``. When ``max_iterations`` runs out first the
    last midpoint is returned with ``converged`` set to ``False``.
    """

    fa = function(ta)
    fb = function(tb)
    if fa * fb > 0.0:
        return None

    t = ta
    for _ in range(max_iterations):
        t = ta + (tb - ta) * 0.5
        ft = function(t)
        if ft == 0.0 or abs(tb - ta) / 2.0 < tolerance:
            return Bisection(t, True)
        if _sign(ft) == _sign(fa):
            ta, fa = t, ft
        else:
            tb = t
    return Bisection(t, False)


def solve_linear(a: float, b: float) -> List[float]:
    """Roots of ``a*x + b``. A zero polynomial reports the single root 0."""

    if a == 0.0 and b == 0.0:
        return [0.0]
    if a == 0.0:
        return []
    return [-b / a]


def solve_quadratic(a: float, b: float, c: float) -> List[float]:
    """Roots of ``a*x^2 + b*x + c`` in ascending order."""

    if a == 0.0:
        return solve_linear(b, c)
    discriminant = b * b - 4.0 * a * c
    if discriminant < 0.0:
        return []
    root = sqrt(discriminant)
    first = (-b + root) / (2.0 * a)
    second = (-b - root) / (2.0 * a)
    if first <= second:
        return [first, second]
    return [second, first]


def _solve_between_critical_points(
    polynomial: Polynomial,
    tolerance: float,
    max_iterations: int,
    logger: Optional[ChannelLogger],
) -> List[float]:
    critical = find_roots(
        polynomial.derivative().coefficients, tolerance, max_iterations, logger
    )
    if not critical:
        if logger and logger.enabled:
            logger.debug("No critical points for %s; reporting no roots", polynomial.coefficients)
        return []

    critical.sort()
    bounds = [critical[0] - BRACKET_MARGIN, *critical, critical[-1] + BRACKET_MARGIN]
    roots: List[float] = []
    for ta, tb in zip(bounds, bounds[1:]):
        result = bisect(polynomial, ta, tb, tolerance, max_iterations)
        if result is None:
            continue
        if not result.converged and logger and logger.enabled:
            logger.debug(
                "Bisection on [%.4f, %.4f] used all %d iterations, best guess %.6f",
                ta,
                tb,
                max_iterations,
                result.root,
            )
        roots.append(result.root)
    return roots


def find_roots(
    coefficients: Sequence[float],
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    logger: Optional[ChannelLogger] = None,
) -> List[float]:
    """Real roots of a degree 1-4 polynomial, coefficients highest power first.

    Vanishing leading coefficients drop the degree before solving.
    """

    values = Polynomial(tuple(coefficients)).coefficients
    if len(values) == 2:
        return solve_linear(*values)
    if len(values) == 3:
        return solve_quadratic(*values)
    if values[0] == 0.0:
        return find_roots(values[1:], tolerance, max_iterations, logger)
    return _solve_between_critical_points(
        Polynomial(values), tolerance, max_iterations, logger
    )


def solve_cubic(
    a: float,
    b: float,
    c: float,
    d: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    logger: Optional[ChannelLogger] = None,
) -> List[float]:
    return find_roots((a, b, c, d), tolerance, max_iterations, logger)


def solve_quartic(
    a: float,
    b: float,
    c: float,
    d: float,
    e: float,
    tolerance: float = DEFAULT_TOLERANCE,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    logger: Optional[ChannelLogger] = None,
) -> List[float]:
    return find_roots((a, b, c, d, e), tolerance, max_iterations, logger)


__all__ = [
    "BRACKET_MARGIN",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_TOLERANCE",
    "Bisection",
    "bisect",
    "find_roots",
    "solve_cubic",
    "solve_linear",
    "solve_quadratic",
    "solve_quartic",
]
