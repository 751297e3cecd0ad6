#!/usr/bin/env python3
"""
Initial-condition helpers.

- seed_circular_velocities: give every non-central body the circular orbital
  speed around a central body, tangential to the radius in the ecliptic (XY) plane.
- zero_system_momentum: remove the barycenter's drift so a long run stays on camera.

Both return new lists; the input bodies are left untouched.
"""
from typing import List, Sequence

from .physics import circular_orbit_velocity
from .vector_utils import ZERO, vec_len, vec_norm, vec_scale, vec_sub


def _tangent(r):
    # k x r = (-ry, rx, 0); degenerate when r is parallel to k, then use i x r
    t = (-r[1], r[0], 0.0)
    if vec_len(t) == 0.0:
        t = (0.0, -r[2], r[1])
    return vec_norm(t)


def seed_circular_velocities(bodies: Sequence, central_id: str = "sun",
                             clockwise: bool = False) -> List:
    """
    Assign circular velocities around the body named `central_id`.

    Speed is sqrt(G * M_central / r) along the unit tangent k x r (prograde, i.e.
    counter-clockwise seen from +Z) or its negation when clockwise is set. Bodies
    sitting on the central body keep their velocity. If no body has `central_id`
    the bodies are returned unchanged.
    """
    central = next((b for b in bodies if b.id == central_id), None)
    if central is None:
        return list(bodies)

    sense = -1.0 if clockwise else 1.0
    seeded = []
    for b in bodies:
        if b is central:
            seeded.append(b)
            continue
        r = vec_sub(b.position, central.position)
        dist = vec_len(r)
        if dist == 0.0:
            seeded.append(b)
            continue
        speed = circular_orbit_velocity(central.mass, dist)
        seeded.append(b.moved(b.position, vec_scale(_tangent(r), speed * sense)))
    return seeded


def zero_system_momentum(bodies: Sequence) -> List:
    """
    Subtract the mass-weighted mean velocity (total momentum / total mass) from
    every body, leaving the barycenter at rest. Massless systems are unchanged.
    """
    total_mass = sum(b.mass for b in bodies)
    if total_mass <= 0.0:
        return list(bodies)

    px = py = pz = 0.0
    for b in bodies:
        px += b.mass * b.velocity[0]
        py += b.mass * b.velocity[1]
        pz += b.mass * b.velocity[2]
    drift = (px / total_mass, py / total_mass, pz / total_mass)
    if drift == ZERO:
        return list(bodies)
    return [b.moved(b.position, vec_sub(b.velocity, drift)) for b in bodies]
