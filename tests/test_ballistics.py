"""Tests for shot prediction between moving actors."""
from __future__ import annotations

import logging
from math import asin, isclose
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from pygame.math import Vector3

from aimsolver.engine.logger import LoggerConfig, SolverLogger
from aimsolver.math.ballistics import (
    DEFAULT_GRAVITY,
    WORLD_UP,
    KinematicState,
    ShotQuery,
    compute_lead,
)

TIGHT = dict(tolerance=1e-10, max_iterations=100)


def assert_vector_close(actual: Vector3, expected, abs_tol: float = 1e-6) -> None:
    expected = Vector3(expected)
    assert isclose(actual.x, expected.x, abs_tol=abs_tol)
    assert isclose(actual.y, expected.y, abs_tol=abs_tol)
    assert isclose(actual.z, expected.z, abs_tol=abs_tol)


def still_shot(target_position, target_velocity=(0.0, 0.0, 0.0), speed: float = 20.0) -> ShotQuery:
    return ShotQuery.create(
        KinematicState.grounded(Vector3(), Vector3()),
        KinematicState.grounded(Vector3(target_position), Vector3(target_velocity)),
        speed,
        Vector3(),
    )


def ledge_shot() -> ShotQuery:
    # Shooter on the ground, target drifting along a ledge, shell under gravity.
    return ShotQuery.create(
        KinematicState.grounded(Vector3(), Vector3()),
        KinematicState.grounded(Vector3(40.0, 10.0, 0.0), Vector3(0.0, 0.0, 3.0)),
        30.0,
        DEFAULT_GRAVITY,
    )


def elevation(direction: Vector3) -> float:
    return asin(max(-1.0, min(1.0, direction.y)))


def test_sample_constant_acceleration() -> None:
    state = KinematicState.custom(Vector3(0, 0, 0), Vector3(1, 2, 0), Vector3(0, -10, 0))
    position, velocity = state.sample(2.0)
    assert_vector_close(position, (2.0, -16.0, 0.0))
    assert_vector_close(velocity, (1.0, -18.0, 0.0))
    past_position, past_velocity = state.sample(-1.0)
    assert_vector_close(past_position, (-1.0, -7.0, 0.0))
    assert_vector_close(past_velocity, (1.0, 12.0, 0.0))


def test_constructors_pick_acceleration() -> None:
    position = Vector3(1, 2, 3)
    velocity = Vector3(4, 5, 6)
    assert KinematicState.grounded(position, velocity).acceleration == Vector3()
    assert KinematicState.falling(position, velocity).acceleration == DEFAULT_GRAVITY
    moon = Vector3(0.0, -1.62, 0.0)
    assert KinematicState.falling(position, velocity, moon).acceleration == moon
    assert KinematicState.custom(position, velocity, Vector3(0, 2, 0)).acceleration == Vector3(0, 2, 0)
    assert KinematicState.shot_target(position, velocity).acceleration == Vector3()
    airborne = KinematicState.shot_target(position, velocity, grounded=False)
    assert airborne.acceleration == DEFAULT_GRAVITY


def test_state_is_isolated_from_caller_vectors() -> None:
    position = Vector3(1, 2, 3)
    state = KinematicState.grounded(position, Vector3())
    position.x = 100.0
    assert state.position == Vector3(1, 2, 3)
    with pytest.raises(AttributeError):
        state.position = Vector3()


def test_default_vectors_are_read_only() -> None:
    with pytest.raises(AttributeError):
        DEFAULT_GRAVITY.y = 0.0
    first = KinematicState.falling(Vector3(), Vector3())
    first.acceleration.y = 0.0
    second = KinematicState.falling(Vector3(), Vector3())
    assert second.acceleration == Vector3(0.0, -9.81, 0.0)


def test_states_and_queries_are_unhashable() -> None:
    state = KinematicState.grounded(Vector3(), Vector3())
    query = still_shot((0.0, 0.0, 10.0))
    assert KinematicState.__hash__ is None
    assert ShotQuery.__hash__ is None
    with pytest.raises(TypeError):
        hash(state)
    with pytest.raises(TypeError):
        hash(query)
    assert state == KinematicState.grounded(Vector3(), Vector3())


def test_hit_polynomial_coefficients() -> None:
    query = still_shot((0.0, 0.0, 10.0))
    assert query.hit_polynomial().coefficients == (0.0, 0.0, -400.0, 0.0, 100.0)


def test_stationary_target_without_gravity() -> None:
    query = still_shot((0.0, 0.0, 10.0))
    timings = [99.0, -1.0, 3.0]
    count = query.find_hit_timings(timings)
    assert count == 1
    assert timings == pytest.approx([0.5])
    ok, direction = query.try_fastball()
    assert ok
    assert_vector_close(direction, (0.0, 0.0, 1.0))
    assert_vector_close(query.direction_for_timing(timings[0]), (0.0, 0.0, 1.0))


def test_receding_target_cannot_be_caught() -> None:
    query = still_shot((0.0, 0.0, 10.0), (0.0, 0.0, 30.0))
    timings = [1.0]
    assert query.find_hit_timings(timings) == 0
    assert timings == []
    for solver in (query.try_fastball, query.try_mortar):
        ok, direction = solver()
        assert not ok
        assert direction == WORLD_UP


def test_failed_query_returns_fresh_up_vector() -> None:
    query = still_shot((0.0, 0.0, 10.0), (0.0, 0.0, 30.0))
    _, direction = query.try_fastball()
    direction.y = 5.0
    assert WORLD_UP == (0.0, 1.0, 0.0)


def test_gravity_gives_low_and_high_arcs() -> None:
    query = ledge_shot()
    timings: list = []
    assert query.find_hit_timings(timings) == 2
    assert timings == pytest.approx([1.518, 5.536], abs=0.05)

    fast_ok, fastball = query.try_fastball()
    slow_ok, mortar = query.try_mortar()
    assert fast_ok and slow_ok
    assert isclose(fastball.length(), 1.0, abs_tol=1e-9)
    assert isclose(mortar.length(), 1.0, abs_tol=1e-9)
    assert elevation(fastball) < elevation(mortar)


def test_falling_target_gives_two_timings() -> None:
    # Target thrown sideways off a ledge; a flat-shooting bolt ignores gravity.
    shooter = KinematicState.grounded(Vector3(), Vector3())
    target = KinematicState.falling(Vector3(30.0, 20.0, 0.0), Vector3(-5.0, 0.0, 0.0))
    query = ShotQuery.create(shooter, target, 40.0, Vector3())

    timings: list = []
    assert query.find_hit_timings(timings) == 2
    assert timings == pytest.approx([0.80, 8.62], abs=0.05)

    fast_ok, fastball = query.try_fastball()
    slow_ok, mortar = query.try_mortar()
    assert fast_ok and slow_ok
    # The later shot meets the target after it has dropped below the shooter.
    assert fastball.y > 0.0 > mortar.y
    assert elevation(mortar) < elevation(fastball)

    timings = []
    query.find_hit_timings(timings, **TIGHT)
    for t in timings:
        projectile = query.direction_for_timing(t) * query.muzzle_speed * t
        assert_vector_close(projectile, target.sample(t).position, abs_tol=1e-4)


@pytest.mark.parametrize("delay", [0.0, 0.25, 1.0])
def test_timings_are_non_negative_and_ordered(delay: float) -> None:
    query = ShotQuery.create(
        KinematicState.grounded(Vector3(0, 0, 0), Vector3(1, 0, 0)),
        KinematicState.falling(Vector3(20, 30, 5), Vector3(-2, 4, 0)),
        25.0,
        Vector3(DEFAULT_GRAVITY) * 0.5,
    )
    timings: list = []
    query.find_hit_timings(timings, delay=delay)
    assert all(t >= 0.0 for t in timings)
    assert timings == sorted(timings)
    assert len(timings) <= 4


def test_round_trip_projectile_meets_target() -> None:
    delay = 0.5
    shooter = KinematicState.grounded(Vector3(0, 0, 0), Vector3(2, 0, 0))
    target = KinematicState.falling(Vector3(30, 25, 5), Vector3(4, 0, 0))
    projectile_acceleration = Vector3(DEFAULT_GRAVITY) * 0.5
    inherited = shooter.velocity * 0.5
    query = ShotQuery.create(shooter, target, 40.0, projectile_acceleration, inherited)

    timings: list = []
    assert query.find_hit_timings(timings, delay, **TIGHT) >= 1
    muzzle, _ = shooter.sample(delay)
    for t in timings:
        direction = query.direction_for_timing(t, delay)
        launch_velocity = direction * query.muzzle_speed + inherited
        projectile = muzzle + launch_velocity * t + projectile_acceleration * (0.5 * t * t)
        assert_vector_close(projectile, target.sample(delay + t).position, abs_tol=1e-4)
        assert_vector_close(query.intercept_point(t, delay), target.sample(delay + t).position)


def test_direction_for_zero_displacement_is_zero_vector() -> None:
    query = still_shot((0.0, 0.0, 0.0))
    assert query.direction_for_timing(0.0) == Vector3()


def test_queries_do_not_share_buffers() -> None:
    near = still_shot((0.0, 0.0, 10.0))
    high = ledge_shot()
    near_timings: list = []
    high_timings: list = []
    near.find_hit_timings(near_timings)
    high.find_hit_timings(high_timings)
    assert near_timings == pytest.approx([0.5])
    assert len(high_timings) == 2


def test_query_logs_on_ballistics_channel(caplog) -> None:
    logger = SolverLogger(LoggerConfig(level=logging.DEBUG, channels={"ballistics": True}))
    query = still_shot((0.0, 0.0, 10.0))
    with caplog.at_level(logging.DEBUG, logger="aimsolver.ballistics"):
        query.find_hit_timings([], logger=logger)
    assert any("1 of 2 roots usable" in record.getMessage() for record in caplog.records)


class Vec3:
    def __init__(self, x: float, y: float, z: float) -> None:
        self.x = x
        self.y = y
        self.z = z

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __mul__(self, scalar: float) -> "Vec3":
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__


def test_lead_solution() -> None:
    origin = Vec3(0, 0, 0)
    target_pos = Vec3(1000, 0, 0)
    target_vel = Vec3(10, 0, 0)
    lead = compute_lead(origin, target_pos, target_vel, 200.0)
    assert lead.x > target_pos.x
    # 1000 + 10t = 200t
    assert isclose(lead.x, 1000.0 + 10.0 * 1000.0 / 190.0, rel_tol=1e-12)


def test_lead_falls_back_to_target_position() -> None:
    target_pos = Vector3(0, 0, 100)
    assert compute_lead(Vector3(), target_pos, Vector3(0, 0, 50), 0.0) is target_pos
    assert compute_lead(Vector3(), target_pos, Vector3(0, 0, 50), 20.0) is target_pos
