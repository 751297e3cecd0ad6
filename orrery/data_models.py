#!/usr/bin/env python3
"""
Data models for the orrery.

This module defines the Body record shared between physics, trails, rendering and
UI, plus the per-frame SimulationConfig bundle.

Units and usage
- position is in astronomical units [AU], velocity in AU/day, mass in solar masses
  [Msun]. A mass of 0 marks a test particle (pulled by gravity, pulls nothing).
- radius and color are display attributes; the physics core never reads them.
- Bodies are immutable. Every frame the integrator returns a new list of new Body
  values; edits go through dataclasses.replace.
- SimulationConfig is immutable too. The controller swaps in a new instance when
  the UI changes a knob, and passes the current one into every frame advance.
"""
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Tuple, Union

from .constants import DEFAULT_DT, DEFAULT_TIME_SCALE, MAX_DT, MAX_TIME_SCALE
from .vector_utils import Vec3, as_vec3, clamp, is_finite


class IntegratorKind(str, Enum):
    """Time-stepping scheme selectable per frame."""
    LEAPFROG = "leapfrog"
    RK4 = "rk4"

    @classmethod
    def coerce(cls, value: Union[str, "IntegratorKind"]) -> "IntegratorKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown integrator {value!r}; expected one of "
                             f"{', '.join(k.value for k in cls)}") from None


@dataclass(frozen=True)
class Body:
    """
    Represents one gravitating (or test) particle.

    Fields:
    - id: Stable identifier, unique within one body array
    - name: Human-friendly label
    - mass: Mass in solar masses (>= 0)
    - position: 3D position (x, y, z) in AU
    - velocity: 3D velocity (vx, vy, vz) in AU/day
    - radius: Visual radius in AU
    - color: RGB tuple used for rendering
    """
    id: str
    name: str
    mass: float
    position: Vec3
    velocity: Vec3 = (0.0, 0.0, 0.0)
    radius: float = 0.01
    color: Tuple[int, int, int] = (200, 200, 255)

    def __post_init__(self) -> None:
        mass = float(self.mass)
        if not math.isfinite(mass) or mass < 0.0:
            raise ValueError(f"body {self.id!r}: mass must be finite and >= 0, got {self.mass!r}")
        position = as_vec3(self.position)
        velocity = as_vec3(self.velocity)
        if not is_finite(position) or not is_finite(velocity):
            raise ValueError(f"body {self.id!r}: position and velocity must be finite")
        color = tuple(int(c) for c in self.color)
        if len(color) != 3 or not all(0 <= c <= 255 for c in color):
            raise ValueError(f"body {self.id!r}: color must be 3 components in 0..255, got {self.color!r}")
        object.__setattr__(self, "mass", mass)
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "velocity", velocity)
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "color", color)

    @property
    def is_test_particle(self) -> bool:
        return self.mass == 0.0

    def moved(self, position: Vec3, velocity: Vec3) -> "Body":
        """Return a copy at a new phase-space point."""
        return replace(self, position=position, velocity=velocity)


def ensure_unique_ids(bodies: Iterable[Body]) -> None:
    """Raise ValueError if two bodies share an id."""
    seen = set()
    for b in bodies:
        if b.id in seen:
            raise ValueError(f"duplicate body id {b.id!r}")
        seen.add(b.id)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Per-frame simulation parameters, owned by the controller and read-only to
    the physics core.

    Fields:
    - dt: Days per tick before scaling
    - time_scale: Multiplier on dt
    - integrator: IntegratorKind (strings are coerced)
    - mass_scale: Multiplies every gravitational source's effective mass
    - vel_scale: Scales only the drift (position update), never the velocity state
    - running: Gate for frame advances
    - trails: Whether trail samples are recorded
    """
    dt: float = DEFAULT_DT
    time_scale: float = DEFAULT_TIME_SCALE
    integrator: IntegratorKind = IntegratorKind.LEAPFROG
    mass_scale: float = 1.0
    vel_scale: float = 1.0
    running: bool = True
    trails: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "integrator", IntegratorKind.coerce(self.integrator))
        object.__setattr__(self, "dt", float(self.dt))
        object.__setattr__(self, "time_scale", float(self.time_scale))
        object.__setattr__(self, "mass_scale", float(self.mass_scale))
        object.__setattr__(self, "vel_scale", float(self.vel_scale))

    @property
    def frame_span(self) -> float:
        """
        Simulated days advanced by one frame, H = dt * time_scale.

        Non-finite or non-positive inputs give 0 (no motion this frame).
        """
        span = self.dt * self.time_scale
        if not math.isfinite(span) or self.dt <= 0.0 or self.time_scale <= 0.0:
            return 0.0
        return span

    def clamped(self) -> "SimulationConfig":
        """
        Return a copy with dt and time_scale limited to [0, MAX_DT] and
        [0, MAX_TIME_SCALE], bounding the substep count of one frame.
        """
        dt = self.dt if math.isfinite(self.dt) else 0.0
        scale = self.time_scale if math.isfinite(self.time_scale) else 0.0
        return replace(
            self,
            dt=clamp(dt, 0.0, MAX_DT),
            time_scale=clamp(scale, 0.0, MAX_TIME_SCALE),
        )

    def with_changes(self, **changes) -> "SimulationConfig":
        """Return a new config with the given fields replaced."""
        return replace(self, **changes)
