import json
from dataclasses import replace

import pytest

from orrery.constants import GEO_RADIUS_AU
from orrery.diagnostics import total_momentum
from orrery.physics import circular_orbit_velocity
from orrery.presets_loader import list_templates, load_template, scenario_from_dict
from orrery.registry import (
    PAYLOAD_ID,
    PLANETS,
    build_solar_system,
    ensure_payload,
    ensure_payload_geo,
    make_circular_bodies,
)
from orrery.vector_utils import vec_cross, vec_len, vec_sub


def test_solar_system_layout():
    bodies = build_solar_system()
    assert [b.id for b in bodies] == ["sun"] + [p.id for p in PLANETS]
    assert bodies[0].mass == 1.0
    assert all(b.position[1] == 0.0 for b in bodies)
    assert total_momentum(bodies) == pytest.approx((0.0, 0.0, 0.0), abs=1e-15)


def test_unseeded_bodies_start_at_rest():
    assert all(b.velocity == (0.0, 0.0, 0.0) for b in make_circular_bodies())


def test_clockwise_system_orbits_the_other_way():
    earth_ccw = build_solar_system()[3]
    earth_cw = build_solar_system(clockwise=True)[3]
    assert earth_ccw.velocity[1] > 0.0 > earth_cw.velocity[1]


def test_ensure_payload_appends_then_replaces_in_place():
    bodies = build_solar_system()
    with_payload = ensure_payload(bodies)
    assert with_payload[-1].id == PAYLOAD_ID
    assert with_payload[-1].mass == 0.0
    assert with_payload[-1].position == (1.0, 0.0, 0.0)

    extended = with_payload + [replace(bodies[1], id="extra")]
    moved = ensure_payload(extended, position=(2.0, 0.0, 0.0))
    assert len(moved) == len(extended)
    assert moved[len(bodies)].id == PAYLOAD_ID
    assert moved[len(bodies)].position == (2.0, 0.0, 0.0)
    assert moved[-1].id == "extra"


def test_geo_payload_is_a_prograde_circular_orbit_around_earth():
    bodies = ensure_payload_geo(build_solar_system())
    earth = next(b for b in bodies if b.id == "earth")
    payload = bodies[-1]
    offset = vec_sub(payload.position, earth.position)
    rel_v = vec_sub(payload.velocity, earth.velocity)

    assert vec_len(offset) == pytest.approx(GEO_RADIUS_AU)
    assert vec_len(rel_v) == pytest.approx(circular_orbit_velocity(earth.mass, GEO_RADIUS_AU))
    assert vec_cross(offset, rel_v)[2] > 0.0


def test_geo_payload_needs_its_planet():
    bodies = [b for b in build_solar_system() if b.id != "earth"]
    assert ensure_payload_geo(bodies) == bodies


def test_bundled_templates_are_listed_and_load():
    names = dict(list_templates())
    assert names["inner_planets.json"] == "Inner planets"
    assert names["binary_star.json"] == "Equal-mass binary"

    inner = load_template("inner_planets.json")
    assert [b.id for b in inner.bodies] == ["sun", "mercury", "venus", "earth", "mars"]
    assert inner.dt == 0.25 and inner.time_scale == 4.0
    assert inner.trail_lengths["mars"] == 2000
    assert total_momentum(inner.bodies) == pytest.approx((0.0, 0.0, 0.0), abs=1e-15)
    assert all(vec_len(b.velocity) > 0.0 for b in inner.bodies[1:])


def test_missing_or_malformed_file_gives_empty_scenario(tmp_path):
    (tmp_path / "broken.json").write_text("{ not json", encoding="utf-8")
    (tmp_path / "list.json").write_text("[1, 2, 3]", encoding="utf-8")

    broken = load_template("broken.json", str(tmp_path))
    assert broken.name == "broken"
    assert broken.bodies == []
    assert load_template("list.json", str(tmp_path)).bodies == []
    assert load_template("absent.json", str(tmp_path)).bodies == []
    assert [fn for fn, _ in list_templates(str(tmp_path))] == ["broken.json", "list.json"]


def test_bad_bodies_and_duplicates_are_skipped(tmp_path):
    data = {
        "name": "Messy",
        "dt": "fast",
        "trail_lengths": {"Rock": 10, "b": "long"},
        "bodies": [
            {"name": "Big Rock", "mass": 1.0, "position": [0, 0, 0]},
            {"id": "b", "mass": -1.0, "position": [1, 0, 0]},
            {"id": "c", "mass": 1.0, "position": [1, 0]},
            {"id": "d", "position": [1, 0, 0]},
            {"id": "big-rock", "mass": 2.0, "position": [2, 0, 0]},
            {"id": "e", "mass": 0.0, "position": [3, 0, 0], "color": [999, -5, 10]},
        ],
    }
    (tmp_path / "messy.json").write_text(json.dumps(data), encoding="utf-8")
    scenario = load_template("messy.json", str(tmp_path))

    assert scenario.name == "Messy"
    assert [b.id for b in scenario.bodies] == ["big-rock", "e"]
    assert scenario.bodies[1].color == (255, 0, 10)
    assert scenario.dt is None
    assert scenario.trail_lengths == {"Rock": 10}


def test_scenario_seeding_options():
    data = {
        "central_id": "star",
        "seed_circular": True,
        "clockwise": True,
        "bodies": [
            {"id": "star", "mass": 1.0, "position": [0, 0, 0]},
            {"id": "rock", "mass": 0.0, "position": [1, 0, 0]},
        ],
    }
    scenario = scenario_from_dict(data, "seeded")
    assert scenario.name == "seeded"
    assert scenario.bodies[1].velocity[1] == pytest.approx(-circular_orbit_velocity(1.0, 1.0))
