#!/usr/bin/env python3
"""
Core Physics Engine for the orrery

Responsibilities
- Compute pairwise gravitational accelerations with Plummer-like softening.
- Advance body states one frame at a time with either a kick-drift-kick leapfrog
  (default) or a classical fourth-order Runge-Kutta (RK4) integrator.
- Subdivide each frame into stability-bounded substeps.
- Provide the circular-orbit speed helper used by the seeder and the presets.

Units and conventions
- Positions are in astronomical units [AU].
- Velocities are in AU per day.
- Masses are in solar masses [Msun]; a mass of 0 is a test particle.
- Time steps are in days.
- G is expressed in AU^3 Msun^-1 day^-2.

Numerical notes
- Softening: adds eps^2 to r^2 to limit accelerations at short range. This is not
  physically exact but keeps the force finite even for coincident bodies, so the
  evaluator never has to branch on small separations.
- Complexity: acceleration computation is O(N^2) per evaluation (direct summation),
  visiting each unordered pair once and applying Newton's third law.
- Energy: leapfrog is symplectic and time-reversible; its energy error stays bounded
  over long runs. RK4 is more accurate per step but not symplectic, so energy slowly
  drifts over many orbits.
- velocity scale: only the drift (position update) is multiplied by vel_scale; the
  velocity state itself is never rescaled.

Threading
- This module is pure compute. The engine keeps no state between frames besides its
  softening and substep ceiling; callers own the body array.
"""

import math
from typing import Callable, List, Optional, Sequence, Tuple

from .constants import DEFAULT_SOFTENING2, G, H_MAX
from .data_models import Body, IntegratorKind, SimulationConfig
from .vector_utils import ZERO, Vec3, vec_add, vec_scale

# Auxiliary acceleration provider: called once per frame with the frame's starting
# bodies; returns, per body index, either an extra acceleration or None.
ExtraAccel = Callable[[Sequence[Body]], Sequence[Optional[Vec3]]]


class NBodyPhysics:
    """
    N-body gravitational physics engine with softened gravity.

    The acceleration of body i due to body j is:
    a_i = G * m_j * mass_scale * r_ij / (|r_ij|^2 + eps^2)^(3/2)

    where r_ij = pos_j - pos_i and eps^2 is the softening parameter.
    """

    def __init__(self, softening2: float = DEFAULT_SOFTENING2, h_max: float = H_MAX):
        """
        Initialize the physics engine.

        Args:
            softening2: Softening eps^2 in AU^2 (must be > 0)
            h_max: Largest substep in days (must be > 0)
        """
        self.set_softening(softening2)
        h_max = float(h_max)
        if not math.isfinite(h_max) or h_max <= 0.0:
            raise ValueError(f"h_max must be positive, got {h_max!r}")
        self.h_max = h_max

    def set_softening(self, softening2: float) -> None:
        """
        Update the softening parameter.

        Args:
            softening2: New eps^2 in AU^2 (must be > 0)
        """
        softening2 = float(softening2)
        if not math.isfinite(softening2) or softening2 <= 0.0:
            raise ValueError(f"softening2 must be positive, got {softening2!r}")
        self.softening2 = softening2

    def substeps(self, span: float) -> Tuple[int, float]:
        """
        Split a frame of `span` days into n = ceil(span / h_max) equal substeps.

        Returns (n, h). A non-positive span gives (0, 0.0).
        """
        if not span > 0.0:
            return 0, 0.0
        # tolerate round-off so that e.g. 1.0 / 0.05 is 20 substeps, not 21
        n = max(1, math.ceil(span / self.h_max - 1e-9))
        return n, span / n

    # ------------------------------------------------------------------
    # Force evaluation
    # ------------------------------------------------------------------

    def compute_accelerations(self, bodies: Sequence[Body],
                              positions: Optional[Sequence[Vec3]] = None,
                              mass_scale: float = 1.0,
                              extra: Optional[Sequence[Optional[Vec3]]] = None,
                              central_id: Optional[str] = None) -> List[Vec3]:
        """
        Compute gravitational accelerations for all bodies.

        For each body i, sums the softened pull of every other body:

            a_i = sum_j G * m_j * mass_scale * r_ij / (|r_ij|^2 + eps^2)^(3/2)

        With central_id set, each non-central body feels only the named body and
        the central body itself gets zero; an unknown central_id gives all zeros.

        Args:
            bodies: Body records (only .mass, and .position when positions is None).
            positions: Optional positions overriding the bodies' own, same order.
            mass_scale: Multiplier on every source mass.
            extra: Optional per-index auxiliary accelerations (None = no extra).
            central_id: Restrict attraction to this body (bootstrapping only).

        Returns:
            List of (ax, ay, az) accelerations in AU/day^2, same order as inputs.
        """
        masses = [b.mass for b in bodies]
        if positions is None:
            positions = [b.position for b in bodies]
        if central_id is not None:
            central = next((k for k, b in enumerate(bodies) if b.id == central_id), None)
            acc = self._toward_central(masses, positions, mass_scale, central)
        else:
            acc = self._pairwise(masses, positions, mass_scale)
        return _with_extra(acc, extra)

    def _pairwise(self, masses: Sequence[float], positions: Sequence[Vec3],
                  mass_scale: float) -> List[Vec3]:
        n = len(masses)
        ax = [0.0] * n
        ay = [0.0] * n
        az = [0.0] * n
        eps2 = self.softening2
        gs = G * mass_scale

        for i in range(n):
            xi, yi, zi = positions[i]
            gmi = gs * masses[i]
            for j in range(i + 1, n):
                xj, yj, zj = positions[j]

                # Vector from body i to body j
                dx = xj - xi
                dy = yj - yi
                dz = zj - zi

                r2 = dx * dx + dy * dy + dz * dz + eps2
                inv_r3 = 1.0 / (r2 * math.sqrt(r2))

                s_i = gs * masses[j] * inv_r3
                s_j = gmi * inv_r3

                ax[i] += dx * s_i
                ay[i] += dy * s_i
                az[i] += dz * s_i

                ax[j] -= dx * s_j
                ay[j] -= dy * s_j
                az[j] -= dz * s_j

        return list(zip(ax, ay, az))

    def _toward_central(self, masses: Sequence[float], positions: Sequence[Vec3],
                        mass_scale: float, central: Optional[int]) -> List[Vec3]:
        n = len(masses)
        if central is None:
            return [ZERO] * n
        xc, yc, zc = positions[central]
        gm = G * masses[central] * mass_scale
        eps2 = self.softening2
        acc: List[Vec3] = []
        for i in range(n):
            if i == central:
                acc.append(ZERO)
                continue
            xi, yi, zi = positions[i]
            dx = xc - xi
            dy = yc - yi
            dz = zc - zi
            r2 = dx * dx + dy * dy + dz * dz + eps2
            s = gm / (r2 * math.sqrt(r2))
            acc.append((dx * s, dy * s, dz * s))
        return acc

    # ------------------------------------------------------------------
    # Integrators
    # ------------------------------------------------------------------

    def advance(self, bodies: Sequence[Body], config: SimulationConfig,
                extra_accel: Optional[ExtraAccel] = None) -> List[Body]:
        """
        Advance all bodies by one frame, H = config.dt * config.time_scale days.

        H is split into ceil(H / h_max) substeps; the selected integrator runs each
        of them to completion. The input sequence is not modified; a new list of new
        Body values (same length, order and ids) is returned. A non-positive H
        returns the bodies unchanged.

        Args:
            bodies: Current state.
            config: Frame parameters (integrator, mass_scale, vel_scale, dt, ...).
            extra_accel: Optional auxiliary acceleration provider, evaluated once at
                the start of the frame and held for every force evaluation in it.
        """
        bodies = list(bodies)
        n_sub, h = self.substeps(config.frame_span)
        if n_sub == 0 or not bodies:
            return bodies

        masses = [b.mass for b in bodies]
        positions = [b.position for b in bodies]
        velocities = [b.velocity for b in bodies]
        extra = list(extra_accel(bodies)) if extra_accel is not None else None
        mass_scale = config.mass_scale
        vel_scale = config.vel_scale

        if config.integrator is IntegratorKind.RK4:
            for _ in range(n_sub):
                positions, velocities = self.rk4_step(
                    masses, positions, velocities, h, mass_scale, vel_scale, extra)
        else:
            acc = None
            for _ in range(n_sub):
                positions, velocities, acc = self.leapfrog_step(
                    masses, positions, velocities, h, mass_scale, vel_scale, extra, acc)

        return [b.moved(p, v) for b, p, v in zip(bodies, positions, velocities)]

    def _accelerations(self, masses, positions, mass_scale, extra) -> List[Vec3]:
        return _with_extra(self._pairwise(masses, positions, mass_scale), extra)

    def leapfrog_step(self, masses: Sequence[float], positions: List[Vec3],
                      velocities: List[Vec3], h: float, mass_scale: float = 1.0,
                      vel_scale: float = 1.0,
                      extra: Optional[Sequence[Optional[Vec3]]] = None,
                      acc: Optional[List[Vec3]] = None
                      ) -> Tuple[List[Vec3], List[Vec3], List[Vec3]]:
        """
        One kick-drift-kick substep of size h.

        Workflow:
        1) a(t) at the current positions (reused from the previous substep if given)
        2) half kick: v += a(t) * h/2
        3) drift: x += v * h * vel_scale
        4) a(t+h) at the new positions
        5) half kick: v += a(t+h) * h/2

        Returns (positions, velocities, a(t+h)); the last item can be fed back as
        `acc` for the next substep of the same frame.
        """
        if acc is None:
            acc = self._accelerations(masses, positions, mass_scale, extra)
        half = 0.5 * h
        drift = h * vel_scale

        velocities = [vec_add(v, vec_scale(a, half)) for v, a in zip(velocities, acc)]
        positions = [vec_add(p, vec_scale(v, drift)) for p, v in zip(positions, velocities)]
        acc = self._accelerations(masses, positions, mass_scale, extra)
        velocities = [vec_add(v, vec_scale(a, half)) for v, a in zip(velocities, acc)]
        return positions, velocities, acc

    def rk4_step(self, masses: Sequence[float], positions: List[Vec3],
                 velocities: List[Vec3], h: float, mass_scale: float = 1.0,
                 vel_scale: float = 1.0,
                 extra: Optional[Sequence[Optional[Vec3]]] = None
                 ) -> Tuple[List[Vec3], List[Vec3]]:
        """
        One classical RK4 substep of size h on dx/dt = vel_scale * v, dv/dt = a(x).

        Workflow:
        1) k1 at t
        2) k2 at t + h/2 using k1
        3) k3 at t + h/2 using k2
        4) k4 at t + h using k3
        Combine (k1 + 2*k2 + 2*k3 + k4) * h/6.
        """
        half_drift = 0.5 * h * vel_scale
        half_kick = 0.5 * h

        a1 = self._accelerations(masses, positions, mass_scale, extra)

        x2 = [vec_add(p, vec_scale(v, half_drift)) for p, v in zip(positions, velocities)]
        v2 = [vec_add(v, vec_scale(a, half_kick)) for v, a in zip(velocities, a1)]
        a2 = self._accelerations(masses, x2, mass_scale, extra)

        x3 = [vec_add(p, vec_scale(v, half_drift)) for p, v in zip(positions, v2)]
        v3 = [vec_add(v, vec_scale(a, half_kick)) for v, a in zip(velocities, a2)]
        a3 = self._accelerations(masses, x3, mass_scale, extra)

        x4 = [vec_add(p, vec_scale(v, h * vel_scale)) for p, v in zip(positions, v3)]
        v4 = [vec_add(v, vec_scale(a, h)) for v, a in zip(velocities, a3)]
        a4 = self._accelerations(masses, x4, mass_scale, extra)

        sixth_drift = h * vel_scale / 6.0
        sixth_kick = h / 6.0
        new_positions = []
        new_velocities = []
        for i in range(len(positions)):
            dv_sum = _weighted(velocities[i], v2[i], v3[i], v4[i])
            da_sum = _weighted(a1[i], a2[i], a3[i], a4[i])
            new_positions.append(vec_add(positions[i], vec_scale(dv_sum, sixth_drift)))
            new_velocities.append(vec_add(velocities[i], vec_scale(da_sum, sixth_kick)))
        return new_positions, new_velocities


def _weighted(k1: Vec3, k2: Vec3, k3: Vec3, k4: Vec3) -> Vec3:
    """k1 + 2*k2 + 2*k3 + k4"""
    return (
        k1[0] + 2.0 * (k2[0] + k3[0]) + k4[0],
        k1[1] + 2.0 * (k2[1] + k3[1]) + k4[1],
        k1[2] + 2.0 * (k2[2] + k3[2]) + k4[2],
    )


def _with_extra(acc: List[Vec3], extra: Optional[Sequence[Optional[Vec3]]]) -> List[Vec3]:
    if not extra:
        return acc
    acc = list(acc)
    for k in range(min(len(acc), len(extra))):
        e = extra[k]
        if e is not None:
            acc[k] = vec_add(acc[k], e)
    return acc


def circular_orbit_velocity(central_mass: float, orbital_radius: float) -> float:
    """
    Calculate the speed needed for a circular orbit.

    For a circular orbit, gravity provides exactly the centripetal force:
    G * M / r^2 = v^2 / r, therefore v = sqrt(G * M / r).

    Args:
        central_mass: Mass of the central body in Msun
        orbital_radius: Orbital radius in AU

    Returns:
        Orbital speed in AU/day for a circular orbit (0 for r <= 0)
    """
    if orbital_radius <= 0:
        return 0.0

    return math.sqrt(G * central_mass / orbital_radius)
