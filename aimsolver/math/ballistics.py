"""Math helpers for ballistics and targeting.

A shot is solved as the intersection of two shapes over time: the sphere of
every point a projectile fired at ``muzzle_speed`` could have reached after
``t`` seconds, and the parabola the target traces relative to the shooter.
Squaring both distances gives a quartic in ``t`` whose non-negative roots are
the hit timings. The earliest timing is the low, fast arc (fastball) and the
latest one the high, slow arc (mortar).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Protocol, Sequence, Tuple, Union

from pygame.math import Vector3

from aimsolver.engine.logger import SolverLogger
from aimsolver.math.polynomial import Polynomial
from aimsolver.math.roots import DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, find_roots

# Read-only component tuples; wrap in Vector3 before doing vector math.
DEFAULT_GRAVITY: Tuple[float, float, float] = (0.0, -9.81, 0.0)
WORLD_UP: Tuple[float, float, float] = (0.0, 1.0, 0.0)

VectorInput = Union[Vector3, Sequence[float]]


class VectorLike(Protocol):
    x: float
    y: float
    z: float

    def __add__(self, other: "VectorLike") -> "VectorLike":
        ...

    def __mul__(self, scalar: float) -> "VectorLike":
        ...


def _as_vector(value: VectorLike) -> Vector3:
    return Vector3(value.x, value.y, value.z)


class TrajectorySample(NamedTuple):
    position: Vector3
    velocity: Vector3


@dataclass(frozen=True)
class KinematicState:
    """Point moving under constant acceleration; either end of a shot."""

    position: Vector3
    velocity: Vector3
    acceleration: Vector3 = field(default_factory=Vector3)

    # Vector3 fields are unhashable.
    __hash__ = None

    def __post_init__(self) -> None:
        # Own copies; pygame vectors are mutable.
        object.__setattr__(self, "position", Vector3(self.position))
        object.__setattr__(self, "velocity", Vector3(self.velocity))
        object.__setattr__(self, "acceleration", Vector3(self.acceleration))

    @classmethod
    def grounded(cls, position: Vector3, velocity: Vector3) -> "KinematicState":
        return cls(position, velocity, Vector3())

    @classmethod
    def falling(
        cls, position: Vector3, velocity: Vector3, gravity: VectorInput = DEFAULT_GRAVITY
    ) -> "KinematicState":
        return cls(position, velocity, gravity)

    @classmethod
    def custom(
        cls, position: Vector3, velocity: Vector3, acceleration: Vector3
    ) -> "KinematicState":
        return cls(position, velocity, acceleration)

    @classmethod
    def shot_target(
        cls,
        position: Vector3,
        velocity: Vector3,
        grounded: bool = True,
        gravity: VectorInput = DEFAULT_GRAVITY,
    ) -> "KinematicState":
        """Actor that shoots or gets shot; airborne actors fall with ``gravity``."""

        if grounded:
            return cls.grounded(position, velocity)
        return cls.falling(position, velocity, gravity)

    def sample(self, t: float) -> TrajectorySample:
        """Position and velocity ``t`` seconds from now (negative looks back)."""

        position = self.position + self.velocity * t + self.acceleration * (0.5 * t * t)
        velocity = self.velocity + self.acceleration * t
        return TrajectorySample(position, velocity)


@dataclass(frozen=True)
class ShotQuery:
    """A shooter, a target and the projectile flying between them.

    ``inherited_velocity`` is the part of the shooter's motion the projectile
    keeps regardless of aim: zero for most weapons, the full shooter velocity
    for a realistic gun. ``muzzle_speed`` must be positive.
    """

    shooter: KinematicState
    target: KinematicState
    muzzle_speed: float
    projectile_acceleration: Vector3
    inherited_velocity: Vector3 = field(default_factory=Vector3)

    __hash__ = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "projectile_acceleration", Vector3(self.projectile_acceleration))
        object.__setattr__(self, "inherited_velocity", Vector3(self.inherited_velocity))

    @classmethod
    def create(
        cls,
        shooter: KinematicState,
        target: KinematicState,
        muzzle_speed: float,
        projectile_acceleration: Vector3,
        inherited_velocity: Optional[Vector3] = None,
    ) -> "ShotQuery":
        return cls(
            shooter,
            target,
            muzzle_speed,
            projectile_acceleration,
            inherited_velocity if inherited_velocity is not None else Vector3(),
        )

    def _relative_motion(self, delay: float) -> Tuple[Vector3, Vector3, Vector3]:
        target_position, target_velocity = self.target.sample(delay)
        shooter_position, _ = self.shooter.sample(delay)
        p = target_position - shooter_position
        v = target_velocity - self.inherited_velocity
        a = self.target.acceleration - self.projectile_acceleration
        return p, v, a

    def hit_polynomial(self, delay: float = 0.0) -> Polynomial:
        """Quartic in the flight time whose roots are the hit timings."""

        p, v, a = self._relative_motion(delay)
        t4 = a.length_squared() / 4.0
        t3 = a.dot(v)
        t2 = v.length_squared() + p.dot(a) - self.muzzle_speed * self.muzzle_speed
        t1 = 2.0 * p.dot(v)
        t0 = p.length_squared()
        return Polynomial.of(t4, t3, t2, t1, t0)

    def find_hit_timings(
        self,
        buffer: List[float],
        delay: float = 0.0,
        tolerance: float = DEFAULT_TOLERANCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        logger: Optional[SolverLogger] = None,
    ) -> int:
        """Overwrite ``buffer`` with the ascending hit timings and return how many.

        ``delay`` is how long the shooter waits before firing; timings are
        measured from that moment. Usually there are 0, 1 or 2 timings.
        """

        roots_log = logger.channel("roots") if logger else None
        roots = find_roots(
            self.hit_polynomial(delay).coefficients, tolerance, max_iterations, roots_log
        )
        buffer.clear()
        # Negative roots would mean firing into the past.
        buffer.extend(sorted(root for root in roots if root >= 0.0))

        log = logger.channel("ballistics") if logger else None
        if log and log.enabled:
            log.debug(
                "Shot query at delay %.3f: %d of %d roots usable %s",
                delay,
                len(buffer),
                len(roots),
                buffer,
            )
        return len(buffer)

    def _try_aim(
        self,
        latest: bool,
        delay: float,
        tolerance: float,
        max_iterations: int,
        logger: Optional[SolverLogger],
    ) -> Tuple[bool, Vector3]:
        timings: List[float] = []
        if self.find_hit_timings(timings, delay, tolerance, max_iterations, logger) == 0:
            return False, Vector3(WORLD_UP)
        timing = timings[-1] if latest else timings[0]
        return True, self.direction_for_timing(timing, delay)

    def try_fastball(
        self,
        delay: float = 0.0,
        tolerance: float = DEFAULT_TOLERANCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        logger: Optional[SolverLogger] = None,
    ) -> Tuple[bool, Vector3]:
        """Aim for the lowest, fastest arc. Fails with ``WORLD_UP`` if no shot exists."""

        return self._try_aim(False, delay, tolerance, max_iterations, logger)

    def try_mortar(
        self,
        delay: float = 0.0,
        tolerance: float = DEFAULT_TOLERANCE,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        logger: Optional[SolverLogger] = None,
    ) -> Tuple[bool, Vector3]:
        """Aim for the highest, slowest arc. Fails with ``WORLD_UP`` if no shot exists."""

        return self._try_aim(True, delay, tolerance, max_iterations, logger)

    def direction_for_timing(self, t: float, delay: float = 0.0) -> Vector3:
        """Unit vector to fire along so the projectile arrives after ``t`` seconds.

        Returns the zero vector when the required displacement is zero.
        """

        p, v, a = self._relative_motion(delay)
        aim = p + v * t + a * (0.5 * t * t)
        if aim.length_squared() == 0.0:
            return Vector3()
        return aim.normalize()

    def intercept_point(self, t: float, delay: float = 0.0) -> Vector3:
        """World position of the target when a shot with timing ``t`` lands."""

        return self.target.sample(delay + t).position


def compute_lead(
    origin: VectorLike,
    target_pos: VectorLike,
    target_vel: VectorLike,
    projectile_speed: float,
) -> VectorLike:
    """Lead point for a constant velocity target and an unaccelerated projectile.

    Without acceleration the hit polynomial is a quadratic, so the timings are
    exact and no bisection settings apply.
    """

    if projectile_speed <= 0.0:
        return target_pos
    query = ShotQuery(
        shooter=KinematicState.grounded(_as_vector(origin), Vector3()),
        target=KinematicState.grounded(_as_vector(target_pos), _as_vector(target_vel)),
        muzzle_speed=projectile_speed,
        projectile_acceleration=Vector3(),
    )
    timings = [t for t in find_roots(query.hit_polynomial().coefficients) if t > 0.0]
    if not timings:
        return target_pos
    t = min(timings)
    return target_pos + target_vel * t


__all__ = [
    "DEFAULT_GRAVITY",
    "WORLD_UP",
    "KinematicState",
    "ShotQuery",
    "TrajectorySample",
    "VectorLike",
    "compute_lead",
]
