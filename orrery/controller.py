#!/usr/bin/env python3
"""
Simulation controller: the shared state between the UI thread and the renderer.

It owns the authoritative body array, the trail buffers, the maneuver state and the
current SimulationConfig. Every public method takes the re-entrant lock, so the
Dear PyGui callbacks and the pygame thread can call into it concurrently. The
physics itself only ever sees an explicit config value and a body list; it never
reads controller state.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from .constants import DEFAULT_BURN_MPS, DEFAULT_TRAIL_LENGTH, MAX_TRAIL_LENGTH
from .data_models import Body, SimulationConfig, ensure_unique_ids
from .maneuvers import BrachistochroneAutopilot, ThrustPhase, apply_delta_v_mps
from .physics import NBodyPhysics
from .presets_loader import Scenario
from .registry import DEFAULT_TRAIL_LENGTHS, PAYLOAD_ID, build_solar_system, ensure_payload_geo
from .trails import TrailBank
from .vector_utils import Vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameSnapshot:
    """Consistent copy of what the renderer needs for one draw."""
    bodies: List[Body]
    paths: Dict[str, List[Vec3]]
    config: SimulationConfig
    sim_time: float
    selected_id: Optional[str]
    thrust_phase: ThrustPhase


class SimulationController:
    """
    Shared state between UI thread (Dear PyGui) and rendering thread (pygame).
    Includes thread-safe operations guarded by a lock.
    """

    def __init__(self, physics: Optional[NBodyPhysics] = None,
                 config: Optional[SimulationConfig] = None,
                 bodies: Optional[List[Body]] = None):
        self.lock = threading.RLock()
        self.physics = physics or NBodyPhysics()
        self.config = config or SimulationConfig()
        self.app_running = True  # cleared when either window closes
        self.bodies: List[Body] = []
        self.trail_lengths: Dict[str, int] = dict(DEFAULT_TRAIL_LENGTHS)
        self.trails = TrailBank(DEFAULT_TRAIL_LENGTH)
        self.autopilot = BrachistochroneAutopilot()
        self.payload_enabled = False
        self.selected_id: Optional[str] = None
        self.scenario_name = "Solar System"
        self.sim_time = 0.0
        self.last_message: Optional[str] = None

        if bodies is None:
            self.reset()
        else:
            self.replace_bodies(bodies)

    # -----------------------
    # Configuration
    # -----------------------

    def configure(self, **changes) -> SimulationConfig:
        """Swap in a new config with `changes` applied; returns it."""
        with self.lock:
            self.config = self.config.with_changes(**changes)
            if changes.get("trails") is False:
                self.trails.clear()
            logger.debug("config updated: %s", changes)
            return self.config

    def toggle_running(self) -> bool:
        with self.lock:
            self.configure(running=not self.config.running)
            return self.config.running

    def set_trail_length(self, body_id: str, n: int) -> int:
        """Configure a body's trail length (0 disables it); returns the stored value."""
        with self.lock:
            n = max(0, min(MAX_TRAIL_LENGTH, int(n)))
            self.trail_lengths[body_id] = n
            self.trails.sync(self.bodies, self.trail_lengths)
            return n

    def trail_length(self, body_id: str) -> int:
        with self.lock:
            return self.trails.desired_length(body_id, self.trail_lengths)

    # -----------------------
    # Scene management
    # -----------------------

    def replace_bodies(self, bodies: List[Body],
                       trail_lengths: Optional[Mapping[str, int]] = None) -> None:
        """Install a new body array and discard all trails."""
        bodies = list(bodies)
        ensure_unique_ids(bodies)
        with self.lock:
            self.bodies = bodies
            if trail_lengths is not None:
                self.trail_lengths = dict(trail_lengths)
            self.trails.clear()
            self.autopilot.disengage()
            self.sim_time = 0.0
            ids = [b.id for b in bodies]
            if self.selected_id not in ids:
                self.selected_id = ids[0] if ids else None

    def reset(self) -> None:
        """Rebuild the built-in solar system and clear trails."""
        with self.lock:
            bodies = build_solar_system()
            if self.payload_enabled:
                bodies = ensure_payload_geo(bodies)
            self.scenario_name = "Solar System"
            self.replace_bodies(bodies, DEFAULT_TRAIL_LENGTHS)
            logger.info("reset to built-in solar system (%d bodies)", len(bodies))

    def load_scenario(self, scenario: Scenario) -> None:
        """Install a loaded template, applying its optional dt/time scale."""
        with self.lock:
            changes = {}
            if scenario.dt is not None:
                changes["dt"] = scenario.dt
            if scenario.time_scale is not None:
                changes["time_scale"] = scenario.time_scale
            if changes:
                self.configure(**changes)
            self.payload_enabled = any(b.id == PAYLOAD_ID for b in scenario.bodies)
            self.scenario_name = scenario.name
            self.replace_bodies(scenario.bodies, scenario.trail_lengths)
            logger.info("loaded scenario %r (%d bodies)", scenario.name, len(scenario.bodies))

    def select(self, body_id: Optional[str]) -> None:
        with self.lock:
            if body_id is None or any(b.id == body_id for b in self.bodies):
                self.selected_id = body_id

    def get_body(self, body_id: Optional[str]) -> Optional[Body]:
        with self.lock:
            return next((b for b in self.bodies if b.id == body_id), None)

    def get_selected_body(self) -> Optional[Body]:
        return self.get_body(self.selected_id)

    # -----------------------
    # Frame advance
    # -----------------------

    def step_frame(self, force: bool = False) -> bool:
        """
        Advance one frame of H = dt * time_scale simulated days.

        Skipped while paused unless `force` is set (single-step). dt and time scale
        are clamped before the advance so one frame's substep count stays bounded.
        Returns True if the bodies advanced.
        """
        with self.lock:
            cfg = self.config
            if not (cfg.running or force):
                return False
            frame_cfg = cfg.clamped()
            extra = self.autopilot if self.autopilot.engaged else None
            try:
                bodies = self.physics.advance(self.bodies, frame_cfg, extra)
            except ValueError as exc:
                # non-finite state: keep the last good frame and pause
                logger.error("frame advance failed, pausing: %s", exc)
                self.last_message = f"Simulation paused: {exc}"
                self.config = cfg.with_changes(running=False)
                return False
            self.bodies = bodies
            self.sim_time += frame_cfg.frame_span
            if cfg.trails:
                self.trails.record(self.bodies, self.trail_lengths)
            return True

    # -----------------------
    # Maneuvers
    # -----------------------

    def spawn_payload(self) -> bool:
        """(Re)spawn the payload in a circular orbit at GEO radius around Earth."""
        with self.lock:
            bodies = ensure_payload_geo(self.bodies)
            if not any(b.id == PAYLOAD_ID for b in bodies):
                self.last_message = "No Earth to launch the payload from."
                logger.warning("payload spawn skipped: no earth in scene")
                return False
            self.bodies = bodies
            self.payload_enabled = True
            self.trails.discard(PAYLOAD_ID)
            return True

    def fire_burn(self, dv_mps: float = DEFAULT_BURN_MPS, body_id: str = PAYLOAD_ID) -> bool:
        """Instant prograde delta-v (m/s) on `body_id`; spawns the payload if absent."""
        with self.lock:
            if not any(b.id == body_id for b in self.bodies):
                if body_id == PAYLOAD_ID:
                    return self.spawn_payload()
                logger.debug("burn skipped: no body %r", body_id)
                return False
            self.bodies = apply_delta_v_mps(self.bodies, body_id, dv_mps)
            self.last_message = f"Burn: {dv_mps:+.0f} m/s on {body_id}"
            return True

    def engage_autopilot(self, target_id: Optional[str] = None,
                         thrust_accel: Optional[float] = None) -> bool:
        with self.lock:
            if target_id is not None:
                self.autopilot.target_id = target_id
            if thrust_accel is not None:
                self.autopilot.thrust_accel = float(thrust_accel)
            ok = self.autopilot.engage(self.bodies)
            if not ok:
                self.last_message = (f"Autopilot unavailable: need "
                                     f"{self.autopilot.thruster_id} and {self.autopilot.target_id}")
            return ok

    def disengage_autopilot(self) -> None:
        with self.lock:
            self.autopilot.disengage()

    def set_thrust_accel(self, thrust_accel: float) -> None:
        with self.lock:
            self.autopilot.thrust_accel = float(thrust_accel)

    # -----------------------
    # Readback
    # -----------------------

    def snapshot(self) -> FrameSnapshot:
        with self.lock:
            return FrameSnapshot(
                bodies=list(self.bodies),
                paths=self.trails.paths() if self.config.trails else {},
                config=self.config,
                sim_time=self.sim_time,
                selected_id=self.selected_id,
                thrust_phase=self.autopilot.phase,
            )

    def pop_message(self) -> Optional[str]:
        with self.lock:
            msg, self.last_message = self.last_message, None
            return msg
