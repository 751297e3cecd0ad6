import dataclasses
import math

import pytest

from orrery.data_models import Body, IntegratorKind, SimulationConfig, ensure_unique_ids


def test_body_coerces_fields():
    b = Body("rock", "Rock", 1, [1, 2, 3], [0, 0, 1], radius=1, color=[10, 20, 30])
    assert b.mass == 1.0 and isinstance(b.mass, float)
    assert b.position == (1.0, 2.0, 3.0)
    assert b.velocity == (0.0, 0.0, 1.0)
    assert b.color == (10, 20, 30)
    assert not b.is_test_particle
    assert Body("dust", "Dust", 0.0, (0.0, 0.0, 0.0)).is_test_particle


@pytest.mark.parametrize("kwargs", [
    {"mass": -1.0},
    {"mass": math.inf},
    {"position": (0.0, math.nan, 0.0)},
    {"velocity": (math.inf, 0.0, 0.0)},
    {"position": (0.0, 0.0)},
    {"color": (10, 20)},
    {"color": (10, 20, 30, 255)},
    {"color": (300, 0, 0)},
])
def test_body_rejects_invalid_state(kwargs):
    fields = {"id": "x", "name": "X", "mass": 1.0, "position": (0.0, 0.0, 0.0)}
    fields.update(kwargs)
    with pytest.raises(ValueError):
        Body(**fields)


def test_body_is_immutable_and_moves_by_copy():
    b = Body("rock", "Rock", 1.0, (0.0, 0.0, 0.0))
    with pytest.raises(dataclasses.FrozenInstanceError):
        b.mass = 2.0
    moved = b.moved((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    assert moved.id == b.id and moved.mass == b.mass
    assert b.position == (0.0, 0.0, 0.0)


def test_duplicate_ids_are_rejected():
    ensure_unique_ids([Body("a", "A", 1.0, (0, 0, 0)), Body("b", "B", 1.0, (0, 0, 0))])
    with pytest.raises(ValueError):
        ensure_unique_ids([Body("a", "A", 1.0, (0, 0, 0)), Body("a", "B", 1.0, (0, 0, 0))])


def test_integrator_coercion():
    assert IntegratorKind.coerce(" RK4 ") is IntegratorKind.RK4
    assert IntegratorKind.coerce(IntegratorKind.LEAPFROG) is IntegratorKind.LEAPFROG
    assert SimulationConfig(integrator="leapfrog").integrator is IntegratorKind.LEAPFROG
    with pytest.raises(ValueError):
        IntegratorKind.coerce("verlet")


def test_frame_span():
    assert SimulationConfig(dt=0.25, time_scale=4.0).frame_span == 1.0
    assert SimulationConfig(dt=0.0).frame_span == 0.0
    assert SimulationConfig(time_scale=-1.0).frame_span == 0.0
    assert SimulationConfig(dt=math.inf).frame_span == 0.0


def test_clamped_limits_dt_and_time_scale():
    cfg = SimulationConfig(dt=3.0, time_scale=500.0, vel_scale=2.0).clamped()
    assert cfg.dt == 0.25
    assert cfg.time_scale == 100.0
    assert cfg.vel_scale == 2.0
    assert SimulationConfig(dt=math.nan).clamped().frame_span == 0.0


def test_with_changes():
    cfg = SimulationConfig()
    paused = cfg.with_changes(running=False)
    assert cfg.running and not paused.running
    with pytest.raises(TypeError):
        cfg.with_changes(bogus=1)
