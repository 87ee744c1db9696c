import numpy as np
import pytest

from splatkit.accumulator import AccumSplat, SplatAccumulator
from splatkit.transforms import IDENTITY_QUAT


def _add(acc, index, center, weight=1.0, rotation=IDENTITY_QUAT):
    acc.accumulate(index, center, (0.2, 0.4, 0.6), 0.5, (0.1, 0.1, 0.1), rotation, weight)


def test_resize_creates_empty_splats():
    acc = SplatAccumulator()
    acc.resize(3)
    assert acc.count == 3
    assert len(acc) == 3
    for s in acc.splats:
        assert s.weight == 0.0
        np.testing.assert_allclose(s.rotation, IDENTITY_QUAT)
        np.testing.assert_allclose(s.center, np.zeros(3))


def test_negative_resize_raises():
    with pytest.raises(ValueError):
        SplatAccumulator().resize(-1)


def test_single_contribution_roundtrips_after_normalize():
    acc = SplatAccumulator(1)
    acc.accumulate(0, (1.0, 2.0, 3.0), (0.2, 0.4, 0.6), 0.5, (0.1, 0.2, 0.3), IDENTITY_QUAT)
    acc.normalize()
    s = acc[0]
    np.testing.assert_allclose(s.center, (1.0, 2.0, 3.0))
    np.testing.assert_allclose(s.rgb, (0.2, 0.4, 0.6))
    assert s.opacity == pytest.approx(0.5)
    np.testing.assert_allclose(s.scale, (0.1, 0.2, 0.3))
    np.testing.assert_allclose(s.rotation, IDENTITY_QUAT)
    assert s.weight == pytest.approx(1.0)


def test_weighted_mean_of_centers():
    acc = SplatAccumulator(1)
    _add(acc, 0, (0.0, 0.0, 0.0), weight=1.0)
    _add(acc, 0, (4.0, 0.0, 0.0), weight=3.0)
    acc.normalize()
    assert acc[0].center[0] == pytest.approx(3.0)
    assert acc[0].weight == pytest.approx(4.0)
    np.testing.assert_allclose(acc[0].rgb, (0.2, 0.4, 0.6))


def test_opposite_hemisphere_rotation_is_flipped():
    acc = SplatAccumulator(1)
    _add(acc, 0, (0.0, 0.0, 0.0), rotation=-np.array(IDENTITY_QUAT))
    acc.normalize()
    np.testing.assert_allclose(acc[0].rotation, IDENTITY_QUAT)


def test_normalized_rotation_is_unit_length():
    acc = SplatAccumulator(1)
    q = np.array([0.5, 0.5, 0.5, 0.5])
    _add(acc, 0, (0.0, 0.0, 0.0), rotation=q, weight=2.0)
    acc.normalize()
    assert np.linalg.norm(acc[0].rotation) == pytest.approx(1.0)


def test_out_of_range_index_is_ignored():
    acc = SplatAccumulator(2)
    _add(acc, 5, (1.0, 1.0, 1.0))
    _add(acc, -1, (1.0, 1.0, 1.0))
    assert all(s.weight == 0.0 for s in acc.splats)


def test_zero_weight_splat_untouched_by_normalize():
    acc = SplatAccumulator(2)
    _add(acc, 0, (2.0, 2.0, 2.0), weight=2.0)
    acc.normalize()
    np.testing.assert_allclose(acc[1].center, np.zeros(3))
    np.testing.assert_allclose(acc[1].rotation, IDENTITY_QUAT)
    np.testing.assert_allclose(acc[0].center, (2.0, 2.0, 2.0))


def test_clear_resets_but_keeps_count():
    acc = SplatAccumulator(2)
    _add(acc, 1, (1.0, 0.0, 0.0))
    acc.clear()
    assert acc.count == 2
    assert acc[1].weight == 0.0
    np.testing.assert_allclose(acc[1].center, np.zeros(3))


def test_default_accum_splat_matches_fresh_entry():
    acc = SplatAccumulator(1)
    fresh = AccumSplat()
    assert acc[0].opacity == fresh.opacity
    np.testing.assert_allclose(acc[0].scale, fresh.scale)