"""Solver settings loaded from settings.json."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

from pygame.math import Vector3

from aimsolver.math.ballistics import DEFAULT_GRAVITY
from aimsolver.math.roots import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE


@dataclass
class SolverSettings:
    """Runtime knobs for shot queries."""

    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    gravity: Tuple[float, float, float] = DEFAULT_GRAVITY
    delay: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SolverSettings":
        settings = cls()
        try:
            settings.tolerance = float(data.get("solverTolerance", settings.tolerance))
            settings.max_iterations = int(data.get("solverMaxIterations", settings.max_iterations))
            settings.delay = float(data.get("fireDelay", settings.delay))
            gravity = data.get("gravity", settings.gravity)
            x, y, z = (float(component) for component in gravity)
            settings.gravity = (x, y, z)
        except (TypeError, ValueError):
            return cls()
        return settings

    @classmethod
    def from_settings(cls, settings_path: Path) -> "SolverSettings":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    def gravity_vector(self) -> Vector3:
        return Vector3(self.gravity)


__all__ = ["SolverSettings"]
