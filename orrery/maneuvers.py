#!/usr/bin/env python3
"""
Maneuver hooks layered on top of the conservative gravity core.

- apply_delta_v: an instantaneous burn, a direct velocity edit along the body's
  current direction of motion. Applied once per trigger, outside integration.
- BrachistochroneAutopilot: continuous directed thrust that flies one body toward
  a target, accelerating until half the initial separation is covered and then
  braking. It plugs into NBodyPhysics.advance as an auxiliary acceleration
  provider: called with the frame's bodies, it returns an extra acceleration for
  the thrusting body and None for everyone else.

Referenced bodies that cannot be found make the operation a no-op for that call.
"""
import logging
from enum import Enum
from typing import List, Optional, Sequence

from .constants import DEFAULT_THRUST_ACCEL, M_PER_S_TO_AU_PER_DAY
from .vector_utils import Vec3, vec_add, vec_len, vec_scale, vec_sub

logger = logging.getLogger(__name__)


def _index_of(bodies: Sequence, body_id: str) -> Optional[int]:
    return next((k for k, b in enumerate(bodies) if b.id == body_id), None)


def apply_delta_v(bodies: Sequence, body_id: str, dv: float) -> List:
    """
    Add `dv` (AU/day) along the named body's velocity direction (prograde for
    dv > 0, retrograde for dv < 0). A body at rest keeps its velocity. Returns a
    new list; an unknown id returns the bodies unchanged.
    """
    bodies = list(bodies)
    k = _index_of(bodies, body_id)
    if k is None:
        logger.debug("delta-v skipped: no body %r", body_id)
        return bodies
    b = bodies[k]
    speed = vec_len(b.velocity) or 1.0
    unit = vec_scale(b.velocity, 1.0 / speed)
    bodies[k] = b.moved(b.position, vec_add(b.velocity, vec_scale(unit, dv)))
    return bodies


def apply_delta_v_mps(bodies: Sequence, body_id: str, dv_mps: float) -> List:
    """apply_delta_v with the increment given in meters per second."""
    return apply_delta_v(bodies, body_id, dv_mps * M_PER_S_TO_AU_PER_DAY)


class ThrustPhase(str, Enum):
    IDLE = "idle"
    ACCELERATING = "accelerating"
    DECELERATING = "decelerating"


class BrachistochroneAutopilot:
    """
    Accelerate-then-brake autopilot for one body.

    Phases: IDLE -> ACCELERATING (on engage) -> DECELERATING (once the remaining
    distance drops below half the separation measured at engage). DECELERATING is
    terminal until disengage(); thrust is not cut automatically on arrival.
    """

    def __init__(self, thruster_id: str = "payload", target_id: str = "mars",
                 thrust_accel: float = DEFAULT_THRUST_ACCEL):
        self.thruster_id = thruster_id
        self.target_id = target_id
        self.thrust_accel = float(thrust_accel)
        self.phase = ThrustPhase.IDLE
        self.initial_separation = 0.0

    @property
    def engaged(self) -> bool:
        return self.phase is not ThrustPhase.IDLE

    def _separation(self, bodies: Sequence) -> Optional[Vec3]:
        i = _index_of(bodies, self.thruster_id)
        j = _index_of(bodies, self.target_id)
        if i is None or j is None:
            return None
        return vec_sub(bodies[j].position, bodies[i].position)

    def engage(self, bodies: Sequence) -> bool:
        """Start accelerating toward the target. Returns False if that's impossible."""
        r = self._separation(bodies)
        if r is None or vec_len(r) == 0.0:
            logger.warning("autopilot not engaged: %r -> %r unavailable",
                           self.thruster_id, self.target_id)
            return False
        self.initial_separation = vec_len(r)
        self.phase = ThrustPhase.ACCELERATING
        logger.info("autopilot engaged: %s -> %s, %.4f AU",
                    self.thruster_id, self.target_id, self.initial_separation)
        return True

    def disengage(self) -> None:
        self.phase = ThrustPhase.IDLE
        self.initial_separation = 0.0

    def __call__(self, bodies: Sequence) -> List[Optional[Vec3]]:
        extra: List[Optional[Vec3]] = [None] * len(bodies)
        if not self.engaged:
            return extra
        i = _index_of(bodies, self.thruster_id)
        r = self._separation(bodies)
        if i is None or r is None:
            return extra
        dist = vec_len(r)
        if dist == 0.0:
            return extra

        if self.phase is ThrustPhase.ACCELERATING and dist < 0.5 * self.initial_separation:
            self.phase = ThrustPhase.DECELERATING
            logger.info("autopilot flipping to decelerate at %.4f AU", dist)

        sign = 1.0 if self.phase is ThrustPhase.ACCELERATING else -1.0
        extra[i] = vec_scale(r, sign * self.thrust_accel / dist)
        return extra
