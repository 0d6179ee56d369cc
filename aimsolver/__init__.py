"""Projectile intercept prediction for moving shooters and targets."""
from __future__ import annotations

from aimsolver.math.ballistics import (
    DEFAULT_GRAVITY,
    WORLD_UP,
    KinematicState,
    ShotQuery,
    TrajectorySample,
    compute_lead,
)
from aimsolver.math.polynomial import Polynomial
from aimsolver.math.roots import (
    Bisection,
    bisect,
    find_roots,
    solve_cubic,
    solve_linear,
    solve_quadratic,
    solve_quartic,
)

__all__ = [
    "DEFAULT_GRAVITY",
    "WORLD_UP",
    "KinematicState",
    "ShotQuery",
    "TrajectorySample",
    "compute_lead",
    "Polynomial",
    "Bisection",
    "bisect",
    "find_roots",
    "solve_cubic",
    "solve_linear",
    "solve_quadratic",
    "solve_quartic",
]
