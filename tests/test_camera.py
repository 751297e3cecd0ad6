import pytest

from orrery.camera import Camera
from orrery.constants import MAX_AU_PER_PIXEL, MIN_AU_PER_PIXEL


@pytest.fixture
def cam():
    c = Camera(au_per_pixel=0.25)
    c.set_viewport_size(800, 600)
    return c


def test_world_to_screen_flips_y(cam):
    assert cam.world_to_screen((0.0, 0.0, 0.0)) == (400, 300)
    assert cam.world_to_screen((1.0, 0.0, 0.0)) == (404, 300)
    assert cam.world_to_screen((0.0, 1.0, 0.0)) == (400, 296)
    # top-down view ignores depth
    assert cam.world_to_screen((0.0, 0.0, 5.0)) == (400, 300)


def test_edge_on_tilt_shows_height(cam):
    cam.set_tilt(90.0)
    x, y = cam.project((0.0, 3.0, 2.0))
    assert x == 0.0
    assert y == pytest.approx(2.0)
    cam.set_tilt(200.0)
    assert cam.project((0.0, 0.0, 1.0))[1] == pytest.approx(1.0)


def test_screen_to_plane_inverts_world_to_screen(cam):
    cam.center = [1.5, -2.0]
    sx, sy = cam.world_to_screen((3.5, 1.0, 0.0))
    assert cam.screen_to_plane((sx, sy)) == pytest.approx((3.5, 1.0))


def test_zoom_keeps_pivot_fixed(cam):
    pivot = (600, 100)
    before = cam.screen_to_plane(pivot)
    cam.zoom(2.0, pivot)
    assert cam.app == pytest.approx(0.125)
    assert cam.screen_to_plane(pivot) == pytest.approx(before)


def test_zoom_is_bounded(cam):
    for _ in range(50):
        cam.zoom(20.0)
    assert cam.app == MIN_AU_PER_PIXEL
    for _ in range(50):
        cam.zoom(0.05)
    assert cam.app == MAX_AU_PER_PIXEL


def test_pan_moves_center_with_the_drag(cam):
    cam.pan_pixels(8, 4)
    assert cam.center == [-2.0, 1.0]


def test_fit_frames_all_points(cam):
    points = [(-10.0, -2.0, 0.0), (30.0, 6.0, 0.0), (0.0, 0.0, 0.0)]
    cam.fit(points)
    assert cam.center == pytest.approx([10.0, 2.0])
    for p in points:
        x, y = cam.world_to_screen(p)
        assert 0 <= x <= 800 and 0 <= y <= 600

    cam.fit([])
    assert cam.center == [0.0, 0.0]
