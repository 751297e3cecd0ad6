#!/usr/bin/env python3
"""
Conserved-quantity diagnostics for judging integrator accuracy.

The potential uses the same softening and mass scale as the force law, so a
symplectic integrator conserves exactly this total energy up to a bounded error.
"""
import math
from typing import Sequence

from .constants import DEFAULT_SOFTENING2, G
from .vector_utils import Vec3, vec_dot


def kinetic_energy(bodies: Sequence) -> float:
    return sum(0.5 * b.mass * vec_dot(b.velocity, b.velocity) for b in bodies)


def potential_energy(bodies: Sequence, mass_scale: float = 1.0,
                     softening2: float = DEFAULT_SOFTENING2) -> float:
    """Softened pairwise potential, -G * ms * m_i * m_j / sqrt(r^2 + eps^2)."""
    u = 0.0
    n = len(bodies)
    for i in range(n):
        bi = bodies[i]
        for j in range(i + 1, n):
            bj = bodies[j]
            dx = bj.position[0] - bi.position[0]
            dy = bj.position[1] - bi.position[1]
            dz = bj.position[2] - bi.position[2]
            r = math.sqrt(dx * dx + dy * dy + dz * dz + softening2)
            u -= G * mass_scale * bi.mass * bj.mass / r
    return u


def total_energy(bodies: Sequence, mass_scale: float = 1.0,
                 softening2: float = DEFAULT_SOFTENING2) -> float:
    return kinetic_energy(bodies) + potential_energy(bodies, mass_scale, softening2)


def total_momentum(bodies: Sequence) -> Vec3:
    px = py = pz = 0.0
    for b in bodies:
        px += b.mass * b.velocity[0]
        py += b.mass * b.velocity[1]
        pz += b.mass * b.velocity[2]
    return (px, py, pz)


def center_of_mass(bodies: Sequence) -> Vec3:
    """Mass-weighted mean position; the origin for a massless system."""
    m = sum(b.mass for b in bodies)
    if m <= 0.0:
        return (0.0, 0.0, 0.0)
    cx = sum(b.mass * b.position[0] for b in bodies) / m
    cy = sum(b.mass * b.position[1] for b in bodies) / m
    cz = sum(b.mass * b.position[2] for b in bodies) / m
    return (cx, cy, cz)


def orbital_period(semi_major_axis: float, central_mass: float) -> float:
    """Kepler's third law, T = 2*pi*sqrt(a^3 / (G*M)), in days."""
    return 2.0 * math.pi * math.sqrt(semi_major_axis ** 3 / (G * central_mass))
