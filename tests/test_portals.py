import math

import numpy as np
import pytest

from splatkit.portals import Portal, SparkPortals


def _quat_y(angle):
    return np.array([math.cos(angle / 2), 0.0, math.sin(angle / 2), 0.0])


def test_contains_respects_radius():
    portal = Portal(position=np.array([1.0, 2.0, 3.0]), radius=0.5)
    assert portal.contains([1.0, 2.0, 3.0])
    assert portal.contains([1.4, 2.0, 3.0])
    assert not portal.contains([1.6, 2.0, 3.0])


def test_contains_uses_scale_and_rotation():
    portal = Portal(scale=np.array([3.0, 1.0, 1.0]), rotation=_quat_y(math.pi / 2))
    # local x axis maps to world -z after a quarter turn about y
    assert portal.contains([0.0, 0.0, 2.5])
    assert not portal.contains([2.5, 0.0, 0.0])


def test_find_and_remove():
    portals = SparkPortals()
    a = Portal(name="a")
    portals.add_portal(a)
    portals.add_portal(Portal(name="b"))
    portals.add_portal(Portal(name="a"))
    assert portals.find_portal("a") is a
    portals.remove_portal("a")
    assert [p.name for p in portals.portals] == ["b"]
    assert portals.find_portal("a") is None


def test_check_trigger_skips_inactive():
    portals = SparkPortals()
    off = Portal(name="off", active=False)
    on = Portal(name="on")
    portals.add_portal(off)
    portals.add_portal(on)
    assert portals.check_trigger([0.0, 0.0, 0.0]) is on
    assert portals.check_trigger([10.0, 0.0, 0.0]) is None


def test_teleport_identity_rotations_translates():
    portal = Portal(
        position=np.array([1.0, 0.0, 0.0]),
        target_position=np.array([10.0, 5.0, 0.0]),
        target_scene="next",
    )
    rot = np.array([1.0, 0.0, 0.0, 0.0])
    result = SparkPortals().teleport(portal, [1.5, 0.25, 0.0], rot)
    np.testing.assert_allclose(result.position, [10.5, 5.25, 0.0])
    np.testing.assert_allclose(result.rotation, rot)
    assert result.scene_name == "next"


def test_teleport_to_self_keeps_pose():
    q = _quat_y(0.7)
    portal = Portal(
        position=np.array([2.0, 1.0, -1.0]),
        rotation=q,
        target_position=np.array([2.0, 1.0, -1.0]),
        target_rotation=q,
    )
    pos = np.array([2.3, 0.9, -0.4])
    rot = _quat_y(-0.3)
    result = SparkPortals().teleport(portal, pos, rot)
    np.testing.assert_allclose(result.position, pos, atol=1e-12)
    np.testing.assert_allclose(result.rotation, rot, atol=1e-12)


def test_teleport_rotation_applied():
    portal = Portal(target_rotation=_quat_y(math.pi / 2))
    result = SparkPortals().teleport(portal, [1.0, 0.0, 0.0], [1.0, 0.0, 0.0, 0.0])
    np.testing.assert_allclose(result.position, [0.0, 0.0, -1.0], atol=1e-12)
    np.testing.assert_allclose(result.rotation, _quat_y(math.pi / 2))


def test_callback_receives_result():
    seen = []
    portals = SparkPortals(callback=seen.append)
    result = portals.teleport(Portal(target_scene="s"), [0, 0, 0], [1, 0, 0, 0])
    assert seen == [result]


@pytest.mark.parametrize("radius", [0.1, 1.0, 4.0])
def test_contains_boundary(radius):
    portal = Portal(radius=radius)
    assert portal.contains([0.0, radius * 0.99, 0.0])
    assert not portal.contains([0.0, radius * 1.01, 0.0])