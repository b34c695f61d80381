import math

import pytest

from threebody.camera import OrbitCamera
from threebody.constants import MAX_CAMERA_DISTANCE, MAX_PITCH, MIN_CAMERA_DISTANCE


def test_default_camera_sits_on_positive_z():
    cam = OrbitCamera()
    assert cam.position() == pytest.approx((0.0, 0.0, 300.0))


def test_target_projects_to_viewport_centre():
    cam = OrbitCamera()
    cam.set_viewport_size(800, 600)
    sx, sy, depth = cam.world_to_screen((0.0, 0.0, 0.0))
    assert (sx, sy) == pytest.approx((400.0, 300.0))
    assert depth == pytest.approx(300.0)


def test_axes_map_to_screen_directions():
    cam = OrbitCamera()
    cam.set_viewport_size(800, 600)
    right = cam.world_to_screen((10.0, 0.0, 0.0))
    up = cam.world_to_screen((0.0, 10.0, 0.0))
    assert right[0] > 400.0
    assert up[1] < 300.0


def test_points_behind_camera_are_culled():
    cam = OrbitCamera()
    assert cam.world_to_screen((0.0, 0.0, 400.0)) is None


def test_projected_radius_shrinks_with_depth():
    cam = OrbitCamera()
    assert cam.projected_radius(10.0, 100.0) > cam.projected_radius(10.0, 200.0)
    assert cam.projected_radius(10.0, 0.0) == 0.0


def test_orbit_is_damped_and_pitch_clamped():
    cam = OrbitCamera(damping=0.25)
    cam.orbit(1.0, 0.0)
    cam.update()
    assert cam.yaw == pytest.approx(0.25)
    for _ in range(200):
        cam.update()
    assert cam.yaw == pytest.approx(1.0)

    cam.orbit(0.0, 10.0)
    for _ in range(200):
        cam.update()
    assert cam.pitch == pytest.approx(MAX_PITCH)
    cam.orbit(0.0, -20.0)
    for _ in range(200):
        cam.update()
    assert cam.pitch == 0.0


def test_zoom_is_clamped():
    cam = OrbitCamera()
    cam.zoom(2.0)
    assert cam.distance == pytest.approx(150.0)
    for _ in range(100):
        cam.zoom(10.0)
    assert cam.distance == MIN_CAMERA_DISTANCE
    for _ in range(100):
        cam.zoom(0.1)
    assert cam.distance == MAX_CAMERA_DISTANCE


def test_pan_moves_target_in_view_plane():
    cam = OrbitCamera()
    cam.pan(5.0, 2.0)
    assert cam.target == pytest.approx((5.0, 2.0, 0.0))
    assert math.isclose(cam.position()[2], 300.0)
