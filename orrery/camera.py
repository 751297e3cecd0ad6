#!/usr/bin/env python3
"""
Camera utilities for projecting 3D world coordinates (AU) onto the 2D viewport.

The view looks down the -Z axis onto the ecliptic, optionally tilted about the
X axis so inclined orbits and out-of-plane payload paths become visible.
"""
import math
from typing import Iterable, Optional, Tuple

from .constants import (
    DEFAULT_AU_PER_PIXEL,
    MAX_AU_PER_PIXEL,
    MIN_AU_PER_PIXEL,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import Vec3, clamp


class Camera:
    """
    Simple camera that maps world coordinates (AU) to screen pixels.

    Screen y grows downward, so world +Y is drawn upward.
    """

    def __init__(self, center=(0.0, 0.0), au_per_pixel=DEFAULT_AU_PER_PIXEL, tilt_deg=0.0):
        self.center = [center[0], center[1]]
        self.app = au_per_pixel
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self.tilt = 0.0
        self.set_tilt(tilt_deg)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def set_tilt(self, tilt_deg: float) -> None:
        """Tilt about the X axis in degrees, 0 = top-down, 90 = edge-on."""
        self.tilt = math.radians(clamp(tilt_deg, 0.0, 90.0))

    def project(self, pos: Vec3) -> Tuple[float, float]:
        """World point to the camera's 2D plane (AU)."""
        c, s = math.cos(self.tilt), math.sin(self.tilt)
        return (pos[0], pos[1] * c + pos[2] * s)

    def world_to_screen(self, pos: Vec3) -> Tuple[int, int]:
        px_world, py_world = self.project(pos)
        cx, cy = self.center
        app = self.app
        px = (px_world - cx) / app + self.viewport_size[0] / 2
        py = -(py_world - cy) / app + self.viewport_size[1] / 2
        return (int(px), int(py))

    def screen_to_plane(self, screen: Tuple[int, int]) -> Tuple[float, float]:
        """Screen pixel back to the camera plane (AU); depth is not recoverable."""
        cx, cy = self.center
        app = self.app
        wx = (screen[0] - self.viewport_size[0] / 2) * app + cx
        wy = -(screen[1] - self.viewport_size[1] / 2) * app + cy
        return (wx, wy)

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self.screen_to_plane(pivot_screen)
        self.app = clamp(self.app * (1.0 / factor), MIN_AU_PER_PIXEL, MAX_AU_PER_PIXEL)
        if pivot_screen is not None and before is not None:
            after = self.screen_to_plane(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[1] - after[1])

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels * self.app
        self.center[1] += dy_pixels * self.app

    def fit(self, points: Iterable[Vec3], margin: float = 1.3) -> None:
        """Center on and zoom to fit all points, with a relative margin."""
        projected = [self.project(p) for p in points]
        if not projected:
            self.center = [0.0, 0.0]
            self.app = DEFAULT_AU_PER_PIXEL
            return
        xs = [p[0] for p in projected]
        ys = [p[1] for p in projected]
        minx, maxx = min(xs), max(xs)
        miny, maxy = min(ys), max(ys)
        width = (maxx - minx) * margin or 1.0
        height = (maxy - miny) * margin or 1.0
        app_x = width / max(self.viewport_size[0], 1)
        app_y = height / max(self.viewport_size[1], 1)
        self.center = [(minx + maxx) / 2, (miny + maxy) / 2]
        self.app = clamp(max(app_x, app_y), MIN_AU_PER_PIXEL, MAX_AU_PER_PIXEL)
