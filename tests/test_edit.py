import math

import numpy as np
import pytest

from splatkit.edit import SdfRegion, SdfShape, delete_splats, find_splats


def _quat_z(angle):
    return np.array([math.cos(angle / 2), 0.0, 0.0, math.sin(angle / 2)])


def test_sphere_distance_at_center_is_minus_radius():
    region = SdfRegion(SdfShape.SPHERE, center=np.array([1.0, 2.0, 3.0]), size=np.array([2.0, 9.0, 9.0]))
    assert region.distance([1.0, 2.0, 3.0]) == pytest.approx(-2.0)
    assert region.distance([3.0, 2.0, 3.0]) == pytest.approx(0.0)


def test_sphere_smoothness_widens_region():
    region = SdfRegion(SdfShape.SPHERE, smoothness=0.5)
    assert region.contains([1.4, 0.0, 0.0])
    assert not region.contains([1.6, 0.0, 0.0])


def test_box_surface_and_inside():
    region = SdfRegion(SdfShape.BOX, size=np.array([1.0, 2.0, 3.0]))
    assert region.distance([1.0, 0.0, 0.0]) == pytest.approx(0.0)
    assert region.distance([0.0, 0.0, 0.0]) < 0.0
    assert region.contains([0.9, 1.9, 2.9])
    assert not region.contains([1.1, 0.0, 0.0])


def test_box_rotation():
    region = SdfRegion(SdfShape.BOX, size=np.array([2.0, 0.5, 0.5]), rotation=_quat_z(math.pi / 2))
    assert region.contains([0.0, 1.5, 0.0])
    assert not region.contains([1.5, 0.0, 0.0])


def test_cylinder():
    region = SdfRegion(SdfShape.CYLINDER, size=np.array([1.0, 2.0, 0.0]))
    assert region.contains([0.0, 1.9, 0.0])
    assert region.contains([0.5, 0.0, 0.5])
    assert not region.contains([0.0, 2.1, 0.0])
    assert not region.contains([0.8, 0.0, 0.8])


def test_plane_distance_is_local_height():
    region = SdfRegion(SdfShape.PLANE, center=np.array([0.0, 1.0, 0.0]))
    assert region.distance([3.0, 3.5, -1.0]) == pytest.approx(2.5)
    assert region.contains([5.0, 0.0, 5.0])


def test_find_splats():
    centers = [[0.0, 0.0, 0.0], [5.0, 0.0, 0.0], [0.5, 0.5, 0.0], [0.0, -3.0, 0.0]]
    assert find_splats(centers, SdfRegion()) == [0, 2]


def test_find_splats_none_inside():
    assert find_splats(np.full((3, 3), 10.0), SdfRegion()) == []


def test_delete_splats_compacts_in_order():
    packed = np.arange(20, dtype=np.uint32).reshape(5, 4)
    out = delete_splats(packed, [1, 3, 99])
    np.testing.assert_array_equal(out, packed[[0, 2, 4]])


def test_delete_with_no_indices_keeps_all():
    packed = np.arange(8, dtype=np.uint32)
    out = delete_splats(packed, [])
    np.testing.assert_array_equal(out, packed.reshape(2, 4))


def test_delete_find_roundtrip_removes_selected():
    centers = np.array([[0.0, 0.0, 0.0], [3.0, 0.0, 0.0], [0.2, 0.0, 0.0]])
    packed = np.arange(12, dtype=np.uint32).reshape(3, 4)
    region = SdfRegion()
    out = delete_splats(packed, find_splats(centers, region))
    assert len(out) == len(packed) - len(find_splats(centers, region))
    np.testing.assert_array_equal(out, packed[[1]])