"""Polynomial evaluation for the root finder."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

MIN_COEFFICIENTS = 2
MAX_COEFFICIENTS = 5


def _check_coefficients(coefficients: Sequence[float]) -> Tuple[float, ...]:
    values = tuple(float(c) for c in coefficients)
    if not MIN_COEFFICIENTS <= len(values) <= MAX_COEFFICIENTS:
        raise ValueError(
            f"expected {MIN_COEFFICIENTS}-{MAX_COEFFICIENTS} coefficients, got {len(values)}"
        )
    return values


def evaluate(coefficients: Sequence[float], t: float) -> float:
    """Evaluate a degree 1-4 polynomial, coefficients highest power first."""

    degree = len(coefficients) - 1
    total = 0.0
    for index, coefficient in enumerate(coefficients):
        total += coefficient * t ** (degree - index)
    return total


def derivative(coefficients: Sequence[float]) -> Tuple[float, ...]:
    """Return the derivative's coefficients, e.g. ``4a, 3b, 2c, d`` for a quartic."""

    degree = len(coefficients) - 1
    return tuple(c * (degree - i) for i, c in enumerate(coefficients[:-1]))


@dataclass(frozen=True)
class Polynomial:
    """Immutable coefficient set that can be called like ``f(t)``."""

    coefficients: Tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "coefficients", _check_coefficients(self.coefficients))

    @classmethod
    def of(cls, *coefficients: float) -> "Polynomial":
        return cls(tuple(coefficients))

    @property
    def degree(self) -> int:
        return len(self.coefficients) - 1

    def __call__(self, t: float) -> float:
        return evaluate(self.coefficients, t)

    def derivative(self) -> "Polynomial":
        return Polynomial(derivative(self.coefficients))


__all__ = ["Polynomial", "evaluate", "derivative"]
