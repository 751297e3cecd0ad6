#!/usr/bin/env python3
"""
Built-in body registry: the Sun, the eight planets and an optional payload.

Orbits are circular and coplanar "toy" orbits (i=0, e=0). Planets start on the +X
axis at their semi-major axis with zero velocity; build_solar_system() seeds
circular velocities around the Sun and removes net momentum.
"""
from typing import Dict, List, NamedTuple, Optional, Tuple

from .constants import GEO_RADIUS_AU, PAYLOAD_COLOR
from .data_models import Body
from .physics import circular_orbit_velocity
from .seeding import seed_circular_velocities, zero_system_momentum
from .vector_utils import Vec3, vec_add

SUN_ID = "sun"
PAYLOAD_ID = "payload"


class PlanetSpec(NamedTuple):
    id: str
    name: str
    color: Tuple[int, int, int]
    mass: float  # Msun
    a: float  # AU
    radius: float  # visual, AU


PLANETS: Tuple[PlanetSpec, ...] = (
    PlanetSpec("mercury", "Mercury", (156, 163, 175), 1.651e-7, 0.39, 0.006),
    PlanetSpec("venus", "Venus", (251, 191, 36), 2.447e-6, 0.723, 0.008),
    PlanetSpec("earth", "Earth", (96, 165, 250), 3.003e-6, 1.0, 0.009),
    PlanetSpec("mars", "Mars", (239, 68, 68), 3.213e-7, 1.524, 0.007),
    PlanetSpec("jupiter", "Jupiter", (234, 179, 8), 9.545e-4, 5.204, 0.020),
    PlanetSpec("saturn", "Saturn", (253, 224, 71), 2.858e-4, 9.58, 0.018),
    PlanetSpec("uranus", "Uranus", (34, 211, 238), 4.365e-5, 19.2, 0.016),
    PlanetSpec("neptune", "Neptune", (59, 130, 246), 5.148e-5, 30.05, 0.016),
)

# Trail samples per body; inner planets get longer tails since they move faster.
DEFAULT_TRAIL_LENGTHS: Dict[str, int] = {
    "sun": 1200,
    "mercury": 1200,
    "venus": 1500,
    "earth": 2000,
    "mars": 2000,
    "jupiter": 1500,
    "saturn": 1200,
    "uranus": 1000,
    "neptune": 1000,
}


def make_sun() -> Body:
    return Body(
        id=SUN_ID,
        name="Sun",
        mass=1.0,
        position=(0.0, 0.0, 0.0),
        velocity=(0.0, 0.0, 0.0),
        radius=0.022,
        color=(245, 158, 11),
    )


def make_circular_bodies() -> List[Body]:
    """Sun at the origin plus every planet on +X at rest (velocities seeded later)."""
    bodies = [make_sun()]
    for p in PLANETS:
        bodies.append(Body(
            id=p.id,
            name=p.name,
            mass=p.mass,
            position=(p.a, 0.0, 0.0),
            velocity=(0.0, 0.0, 0.0),
            radius=p.radius,
            color=p.color,
        ))
    return bodies


def build_solar_system(clockwise: bool = False) -> List[Body]:
    """Circular-orbit solar system with the barycenter at rest."""
    bodies = seed_circular_velocities(make_circular_bodies(), SUN_ID, clockwise)
    return zero_system_momentum(bodies)


def ensure_payload(bodies: List[Body], position: Optional[Vec3] = None,
                   velocity: Optional[Vec3] = None) -> List[Body]:
    """
    Return bodies with a zero-mass payload created or replaced in place.

    The payload defaults to [1, 0, 0] at rest; an existing payload keeps its index.
    """
    payload = Body(
        id=PAYLOAD_ID,
        name="Payload",
        mass=0.0,
        position=position if position is not None else (1.0, 0.0, 0.0),
        velocity=velocity if velocity is not None else (0.0, 0.0, 0.0),
        radius=0.006,
        color=PAYLOAD_COLOR,
    )
    bodies = list(bodies)
    for k, b in enumerate(bodies):
        if b.id == PAYLOAD_ID:
            bodies[k] = payload
            return bodies
    bodies.append(payload)
    return bodies


def ensure_payload_geo(bodies: List[Body], planet_id: str = "earth") -> List[Body]:
    """
    Spawn (or respawn) the payload on a circular prograde orbit at geostationary
    radius around `planet_id`: placed +Y of the planet, moving -X relative to it
    (counter-clockwise seen from +Z, the same sense as the seeded planets).
    Without that planet the bodies are returned unchanged.
    """
    planet = next((b for b in bodies if b.id == planet_id), None)
    if planet is None:
        return list(bodies)
    v_circ = circular_orbit_velocity(planet.mass, GEO_RADIUS_AU)
    position = vec_add(planet.position, (0.0, GEO_RADIUS_AU, 0.0))
    velocity = vec_add(planet.velocity, (-v_circ, 0.0, 0.0))
    return ensure_payload(bodies, position, velocity)
