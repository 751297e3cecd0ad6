import math

import pytest

from orrery.constants import G
from orrery.data_models import Body
from orrery.diagnostics import center_of_mass, total_momentum
from orrery.registry import make_circular_bodies
from orrery.seeding import seed_circular_velocities, zero_system_momentum
from orrery.vector_utils import vec_dot, vec_len, vec_sub


def test_seeded_speed_and_direction_are_circular():
    bodies = seed_circular_velocities(make_circular_bodies(), "sun")
    sun = bodies[0]
    assert sun.velocity == (0.0, 0.0, 0.0)
    for b in bodies[1:]:
        r = vec_sub(b.position, sun.position)
        assert vec_len(b.velocity) == pytest.approx(math.sqrt(G / vec_len(r)))
        assert vec_dot(b.velocity, r) == pytest.approx(0.0, abs=1e-15)
        # counter-clockwise seen from +Z
        assert b.velocity[1] > 0.0


def test_clockwise_flips_every_seeded_velocity():
    ccw = seed_circular_velocities(make_circular_bodies(), "sun")
    cw = seed_circular_velocities(make_circular_bodies(), "sun", clockwise=True)
    for a, b in zip(ccw[1:], cw[1:]):
        assert b.velocity == pytest.approx(tuple(-c for c in a.velocity))


def test_seeding_uses_offset_from_the_center():
    center = Body("c", "C", 2.0, (3.0, 4.0, 0.0), (0.1, 0.0, 0.0))
    probe = Body("p", "P", 0.0, (3.0, 6.0, 0.0))
    seeded = seed_circular_velocities([center, probe], "c")
    speed = math.sqrt(G * 2.0 / 2.0)
    # tangent k x (0, 2, 0) points along -X
    assert seeded[1].velocity == pytest.approx((-speed, 0.0, 0.0))
    assert seeded[0] == center


def test_radius_parallel_to_z_uses_fallback_tangent():
    bodies = [Body("sun", "Sun", 1.0, (0.0, 0.0, 0.0)), Body("polar", "Polar", 0.0, (0.0, 0.0, 2.0))]
    seeded = seed_circular_velocities(bodies, "sun")
    v = seeded[1].velocity
    assert vec_len(v) == pytest.approx(math.sqrt(G / 2.0))
    assert v[0] == 0.0 and v[2] == pytest.approx(0.0, abs=1e-18)
    assert v[1] < 0.0


def test_coincident_body_and_missing_center_are_left_alone():
    bodies = [Body("sun", "Sun", 1.0, (0.0, 0.0, 0.0)),
              Body("twin", "Twin", 0.1, (0.0, 0.0, 0.0), (0.01, 0.0, 0.0))]
    seeded = seed_circular_velocities(bodies, "sun")
    assert seeded[1].velocity == (0.01, 0.0, 0.0)

    unchanged = seed_circular_velocities(bodies, "nowhere")
    assert unchanged == bodies
    assert unchanged is not bodies


def test_zero_momentum_removes_barycentric_drift():
    bodies = seed_circular_velocities(make_circular_bodies(), "sun")
    assert vec_len(total_momentum(bodies)) > 1e-6
    zeroed = zero_system_momentum(bodies)
    assert total_momentum(zeroed) == pytest.approx((0.0, 0.0, 0.0), abs=1e-15)
    # positions are untouched
    assert center_of_mass(zeroed) == center_of_mass(bodies)


def test_zero_momentum_without_mass_is_a_no_op():
    bodies = [Body("a", "A", 0.0, (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))]
    assert zero_system_momentum(bodies) == bodies
