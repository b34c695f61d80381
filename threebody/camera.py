#!/usr/bin/env python3
"""
Orbit camera with perspective projection for the pygame viewport.

The camera circles a target point at a given distance. Yaw turns around the
world y-axis; pitch lifts the camera above the x-z plane and is clamped so it
never drops below the horizon. At yaw = pitch = 0 it sits on the +z axis
looking toward -z.
"""
import math
from typing import Optional, Tuple

from .constants import (
    CAMERA_DAMPING,
    CAMERA_DISTANCE,
    CAMERA_FAR,
    CAMERA_FOV_DEG,
    CAMERA_NEAR,
    MAX_CAMERA_DISTANCE,
    MAX_PITCH,
    MIN_CAMERA_DISTANCE,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import Vec3, clamp, vec_add, vec_cross, vec_dot, vec_norm, vec_scale, vec_sub

WORLD_UP: Vec3 = (0.0, 1.0, 0.0)


class OrbitCamera:
    """
    Attributes:
        target: world point the camera looks at.
        distance: distance from target to camera.
        yaw, pitch: orbit angles in radians.
        viewport_size: (width, height) in pixels.

    orbit() queues rotation; update() applies a damped share of it each frame.
    """

    def __init__(self, target: Vec3 = (0.0, 0.0, 0.0), distance: float = CAMERA_DISTANCE,
                 fov_deg: float = CAMERA_FOV_DEG, damping: float = CAMERA_DAMPING):
        self.target = target
        self.distance = distance
        self.yaw = 0.0
        self.pitch = 0.0
        self.fov_deg = fov_deg
        self.near = CAMERA_NEAR
        self.far = CAMERA_FAR
        self.damping = clamp(damping, 0.0, 1.0)
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self._pending_yaw = 0.0
        self._pending_pitch = 0.0

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    @property
    def focal_length(self) -> float:
        """Pixels per unit at depth 1, from the vertical field of view."""
        return (self.viewport_size[1] / 2) / math.tan(math.radians(self.fov_deg) / 2)

    def position(self) -> Vec3:
        cp = math.cos(self.pitch)
        offset = (
            self.distance * cp * math.sin(self.yaw),
            self.distance * math.sin(self.pitch),
            self.distance * cp * math.cos(self.yaw),
        )
        return vec_add(self.target, offset)

    def basis(self) -> Tuple[Vec3, Vec3, Vec3]:
        """(right, up, forward) unit vectors of the camera frame."""
        forward = vec_norm(vec_sub(self.target, self.position()))
        right = vec_norm(vec_cross(forward, WORLD_UP))
        up = vec_cross(right, forward)
        return right, up, forward

    def world_to_screen(self, point: Vec3) -> Optional[Tuple[float, float, float]]:
        """Project a world point to (sx, sy, depth); None when outside the near/far range."""
        right, up, forward = self.basis()
        rel = vec_sub(point, self.position())
        depth = vec_dot(rel, forward)
        if depth <= self.near or depth > self.far:
            return None
        f = self.focal_length / depth
        sx = self.viewport_size[0] / 2 + vec_dot(rel, right) * f
        sy = self.viewport_size[1] / 2 - vec_dot(rel, up) * f
        return (sx, sy, depth)

    def projected_radius(self, radius: float, depth: float) -> float:
        if depth <= 0:
            return 0.0
        return radius * self.focal_length / depth

    def orbit(self, d_yaw: float, d_pitch: float) -> None:
        self._pending_yaw += d_yaw
        self._pending_pitch += d_pitch

    def update(self) -> None:
        """Apply a damped share of the queued rotation."""
        share = self.damping if self.damping > 0 else 1.0
        dy = self._pending_yaw * share
        dp = self._pending_pitch * share
        self._pending_yaw -= dy
        self._pending_pitch -= dp
        self.yaw = (self.yaw + dy) % (2 * math.pi)
        self.pitch = clamp(self.pitch + dp, 0.0, MAX_PITCH)

    def zoom(self, factor: float) -> None:
        factor = clamp(factor, 0.05, 20.0)
        self.distance = clamp(self.distance / factor, MIN_CAMERA_DISTANCE, MAX_CAMERA_DISTANCE)

    def pan(self, dx: float, dy: float) -> None:
        """Move the target within the view plane by (dx, dy) world units."""
        right, up, _ = self.basis()
        self.target = vec_add(self.target, vec_add(vec_scale(right, dx), vec_scale(up, dy)))
