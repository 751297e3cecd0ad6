#!/usr/bin/env python3
"""
Orrery application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Shares one SimulationController between them; every access goes through its
  re-entrant lock.
- Draws bodies and their trails projected onto the ecliptic (with optional tilt),
  and exposes the simulation knobs, presets and maneuvers as Dear PyGui controls.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the
  viewport), one physics frame per display refresh, and drawing from a snapshot.
- The UI class runs in the main thread via Dear PyGui. Widget callbacks call
  SimulationController methods, which are lock-protected.

Units and conventions
- AU, days, solar masses throughout. The camera stores AU-per-pixel.
- Colors are RGB tuples in 0..255.

Running
1) Install: `pip install -e .`
2) Run: `orrery` or `python orrery_app.py`
"""

import logging
import math
import threading
import time
from typing import Optional

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from orrery.camera import Camera
from orrery.constants import (
    AU_IN_METERS,
    BACKGROUND_COLOR,
    DEFAULT_BURN_MPS,
    DEFAULT_THRUST_ACCEL,
    HUD_COLOR,
    MAX_DT,
    MAX_TIME_SCALE,
    MAX_TRAIL_LENGTH,
    SAFE_COORD_LIMIT,
    SECONDS_PER_DAY,
    SELECTION_COLOR,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from orrery.controller import SimulationController
from orrery.data_models import IntegratorKind
from orrery.diagnostics import total_energy
from orrery.presets_loader import list_templates, load_template
from orrery.vector_utils import vec_len

logger = logging.getLogger("orrery")

BUILTIN_PRESET = "Solar System (built-in)"


def try_float(val) -> Optional[float]:
    try:
        return float(val)
    except (TypeError, ValueError):
        return None


# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: advances one frame per refresh, draws bodies, trails and a HUD.
    Handles selection, camera panning and zoom.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = Camera(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.follow_selected = False
        self.running = True
        self._font = None

    def auto_frame_camera(self):
        """Adjust camera to fit all bodies into view with margin."""
        snap = self.sim.snapshot()
        self.camera.fit([b.position for b in snap.bodies])

    def run(self):
        pygame.init()
        pygame.display.set_caption("Orrery - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()
        self.auto_frame_camera()

        last_time = time.perf_counter()
        while self.running and self.sim.app_running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)

            # One physics frame per refresh; the controller gates on config.running
            self.sim.step_frame()

            self.draw()
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.app_running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    self.sim.toggle_running()
                elif event.key == pygame.K_r:
                    self.sim.reset()
                elif event.key == pygame.K_f:
                    self.follow_selected = not self.follow_selected

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0 / 1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self.select_at(pygame.mouse.get_pos())
                if event.button in (1, 2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION:
                if self.dragging_background:
                    mouse = pygame.mouse.get_pos()
                    dx = mouse[0] - self.drag_start_screen[0]
                    dy = mouse[1] - self.drag_start_screen[1]
                    self.camera.pan_pixels(dx, dy)
                    self.drag_start_screen = mouse

    def select_at(self, screen, pick_radius_px: int = 10):
        snap = self.sim.snapshot()
        best, best_d = None, float("inf")
        for b in snap.bodies:
            sx, sy = self.camera.world_to_screen(b.position)
            d = math.hypot(sx - screen[0], sy - screen[1])
            if d < pick_radius_px and d < best_d:
                best, best_d = b.id, d
        if best is not None:
            self.sim.select(best)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        snap = self.sim.snapshot()
        if self.follow_selected:
            sel = next((b for b in snap.bodies if b.id == snap.selected_id), None)
            if sel is not None:
                self.camera.center = list(self.camera.project(sel.position))

        colors = {b.id: b.color for b in snap.bodies}
        for body_id, path in snap.paths.items():
            pts = [p for p in (_safe_point(self.camera.world_to_screen(q)) for q in path) if p]
            if len(pts) > 1:
                pygame.draw.aalines(surf, colors.get(body_id, HUD_COLOR), False, pts)

        for b in snap.bodies:
            screen_pos = _safe_point(self.camera.world_to_screen(b.position))
            if not screen_pos:
                continue
            vis_r = int(min(50, max(2, b.radius / self.camera.app)))
            # massless bodies (payloads, probes) are drawn hollow
            if not b.is_test_particle:
                gfxdraw.filled_circle(surf, screen_pos[0], screen_pos[1], vis_r, b.color)
            gfxdraw.aacircle(surf, screen_pos[0], screen_pos[1], vis_r, b.color)
            if b.id == snap.selected_id:
                gfxdraw.aacircle(surf, screen_pos[0], screen_pos[1], vis_r + 4, SELECTION_COLOR)

        cfg = snap.config
        energy = total_energy(snap.bodies, cfg.mass_scale, self.sim.physics.softening2)
        self.draw_text(surf, "Wheel: zoom | Drag/Arrows: pan | Click: select | F: follow | Space: pause | R: reset", 10, 10)
        self.draw_text(surf, f"t = {snap.sim_time:10.1f} d   {cfg.integrator.value}   "
                             f"H = {cfg.clamped().frame_span:.3f} d/frame   "
                             f"[{'Running' if cfg.running else 'Paused'}]", 10, 30)
        self.draw_text(surf, f"E = {energy:.9e}   autopilot: {snap.thrust_phase.value}", 10, 50)

        pygame.display.flip()

    def draw_text(self, surface, text, x, y, color=HUD_COLOR):
        if self._font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            self._font = pygame.font.SysFont("consolas", 16)
        img = self._font.render(text, True, color)
        surface.blit(img, (x, y))


def _safe_point(pt):
    x, y = int(pt[0]), int(pt[1])
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: presets, simulation knobs, per-body trails, maneuvers.
    """
    def __init__(self, sim: SimulationController, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer
        self.status_msg_id = None
        self.body_list_id = None
        self.trail_len_id = None
        self.sel_info_id = None
        self._template_map = {}

        self._build_ui()
        self._refresh_body_list()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (~10Hz)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title="Orrery - Controls", width=460, height=720)
        cfg = self.sim.config

        with dpg.window(label="Controls", width=440, height=700, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Preset:")
                for fn, display in list_templates():
                    self._template_map[display] = fn
                items = [BUILTIN_PRESET] + list(self._template_map)
                dpg.add_combo(items, default_value=BUILTIN_PRESET, width=220, tag="preset_combo")
                dpg.add_button(label="Load", callback=lambda: self.load_preset(dpg.get_value("preset_combo")))
                dpg.add_button(label="Fit", callback=self.renderer.auto_frame_camera)

            dpg.add_separator()
            dpg.add_text("Simulation")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)
                dpg.add_button(label="Reset", callback=self._reset)
            dpg.add_slider_float(label="dt (days/tick)", min_value=0.05, max_value=MAX_DT,
                                 default_value=cfg.dt, width=220, tag="dt_slider",
                                 callback=lambda s, a, u: self.sim.configure(dt=float(a)))
            dpg.add_slider_float(label="Time scale", min_value=0.1, max_value=MAX_TIME_SCALE,
                                 default_value=cfg.time_scale, width=220, tag="time_scale_slider",
                                 callback=lambda s, a, u: self.sim.configure(time_scale=float(a)))
            dpg.add_combo([k.value for k in IntegratorKind], label="Integrator",
                          default_value=cfg.integrator.value, width=120,
                          callback=lambda s, a, u: self._set_integrator(a))
            dpg.add_slider_float(label="Mass scale", min_value=0.1, max_value=5.0,
                                 default_value=cfg.mass_scale, width=220,
                                 callback=lambda s, a, u: self.sim.configure(mass_scale=float(a)))
            dpg.add_slider_float(label="Velocity scale", min_value=0.5, max_value=1.5,
                                 default_value=cfg.vel_scale, width=220,
                                 callback=lambda s, a, u: self.sim.configure(vel_scale=float(a)))
            dpg.add_slider_float(label="View tilt (deg)", min_value=0.0, max_value=90.0,
                                 default_value=0.0, width=220,
                                 callback=lambda s, a, u: self.renderer.camera.set_tilt(float(a)))

            dpg.add_separator()
            dpg.add_text("Bodies and trails")
            dpg.add_checkbox(label="Trails", default_value=cfg.trails, callback=self._toggle_trails)
            self.body_list_id = dpg.add_listbox(items=[], width=420, num_items=6, callback=self._on_select_body)
            self.sel_info_id = dpg.add_text("")
            self.trail_len_id = dpg.add_input_int(label="Trail length", default_value=0, min_value=0,
                                                  max_value=MAX_TRAIL_LENGTH, width=120,
                                                  callback=self._on_trail_length)

            dpg.add_separator()
            dpg.add_text("Payload")
            with dpg.group(horizontal=True):
                dpg.add_button(label="Spawn at GEO", callback=self._spawn_payload)
                dpg.add_input_float(label="dv (m/s)", default_value=DEFAULT_BURN_MPS, width=100, tag="dv_input")
                dpg.add_button(label="Burn", callback=self._fire_burn)
            with dpg.group(horizontal=True):
                dpg.add_checkbox(label="Autopilot to Mars", default_value=False, callback=self._toggle_autopilot,
                                 tag="autopilot_checkbox")
                dpg.add_slider_float(label="Thrust (AU/d^2)", min_value=1e-6, max_value=8e-5,
                                     default_value=DEFAULT_THRUST_ACCEL, width=150, format="%.2e",
                                     callback=lambda s, a, u: self.sim.set_thrust_accel(float(a)))

            self.status_msg_id = dpg.add_text("")

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(255, 120, 120))

    def _refresh_body_list(self):
        snap = self.sim.snapshot()
        items = [b.id for b in snap.bodies]
        dpg.configure_item(self.body_list_id, items=items)
        if snap.selected_id in items:
            dpg.set_value(self.body_list_id, snap.selected_id)
            dpg.set_value(self.trail_len_id, self.sim.trail_length(snap.selected_id))

    def _on_select_body(self, sender, app_data, user_data):
        self.sim.select(app_data)
        dpg.set_value(self.trail_len_id, self.sim.trail_length(app_data))

    def _on_trail_length(self, sender, app_data, user_data=None):
        body_id = self.sim.selected_id
        if body_id is None:
            self._set_error("No body selected.")
            return
        n = self.sim.set_trail_length(body_id, int(app_data or 0))
        dpg.set_value(self.trail_len_id, n)
        self._set_status(f"Trail length of {body_id} set to {n}.")

    def _toggle_play(self):
        running = self.sim.toggle_running()
        self._set_status(f"Simulation {'running' if running else 'paused'}.")

    def _step_once(self):
        self.sim.step_frame(force=True)
        self._set_status("Stepped one frame.")

    def _reset(self):
        self.sim.reset()
        dpg.set_value("autopilot_checkbox", False)
        self._refresh_body_list()
        self._set_status("Reset.")

    def _toggle_trails(self, sender, value, user_data=None):
        self.sim.configure(trails=bool(value))
        self._set_status(f"Trails {'ON' if value else 'OFF'}.")

    def _set_integrator(self, value):
        self.sim.configure(integrator=value)
        self._set_status(f"Integrator: {value}")

    def _spawn_payload(self):
        if self.sim.spawn_payload():
            self._refresh_body_list()
            self._set_status("Payload spawned at GEO.")

    def _fire_burn(self):
        dv = try_float(dpg.get_value("dv_input"))
        if dv is None:
            self._set_error("Invalid delta-v.")
            return
        self.sim.fire_burn(dv)
        self._refresh_body_list()

    def _toggle_autopilot(self, sender, value, user_data=None):
        if value:
            if not self.sim.engage_autopilot():
                dpg.set_value("autopilot_checkbox", False)
        else:
            self.sim.disengage_autopilot()
            self._set_status("Autopilot off.")

    def load_preset(self, name: str):
        if name in self._template_map:
            scenario = load_template(self._template_map[name])
            if not scenario.bodies:
                self._set_error(f"Preset '{name}' has no valid bodies.")
                return
            self.sim.load_scenario(scenario)
            logger.info("preset %s loaded from %s", name, self._template_map[name])
            cfg = self.sim.config
            dpg.set_value("dt_slider", cfg.dt)
            dpg.set_value("time_scale_slider", cfg.time_scale)
        else:
            self.sim.reset()
        dpg.set_value("autopilot_checkbox", False)
        self._refresh_body_list()
        self.renderer.auto_frame_camera()
        self._set_status(f"Loaded preset: {name}")

    def _sync_ui_with_sim(self):
        """Periodic UI update: body list, selected body readout and controller messages."""
        ids = dpg.get_item_configuration(self.body_list_id).get("items", [])
        if list(ids) != [body.id for body in self.sim.snapshot().bodies]:
            self._refresh_body_list()
        b = self.sim.get_selected_body()
        if b:
            speed_kms = vec_len(b.velocity) * AU_IN_METERS / 1000.0 / SECONDS_PER_DAY
            dpg.set_value(self.sel_info_id,
                          f"{b.name}: r = ({b.position[0]:.4f}, {b.position[1]:.4f}, {b.position[2]:.4f}) AU, "
                          f"|v| = {speed_kms:.2f} km/s")
        msg = self.sim.pop_message()
        if msg:
            self._set_status(msg)
        self._schedule_sync()


# ============================================================
# Application Entry
# ============================================================

def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    sim = SimulationController()
    renderer = PygameRenderer(sim)
    renderer.start()

    UI(sim, renderer)

    try:
        dpg.start_dearpygui()
    finally:
        sim.app_running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()


if __name__ == "__main__":
    main()
