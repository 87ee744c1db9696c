"""Signed-distance regions for selecting splats, and compaction of packed arrays."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

import numpy as np

from splatkit.transforms import IDENTITY_QUAT, quat_conjugate, quat_rotate


class SdfShape(Enum):
    """Region shapes."""

    SPHERE = "sphere"
    BOX = "box"
    CYLINDER = "cylinder"
    PLANE = "plane"


@dataclass(eq=False)
class SdfRegion:
    """A shape placed in space.

    ``size`` holds the sphere radius in x, the box half extents, or the
    cylinder radius (x) and half height (y). A point is inside when its
    distance is at most ``smoothness``.
    """

    shape: SdfShape = SdfShape.SPHERE
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    size: np.ndarray = field(default_factory=lambda: np.ones(3))
    rotation: np.ndarray = field(default_factory=lambda: np.array(IDENTITY_QUAT))
    smoothness: float = 0.0

    def distance(self, point) -> float:
        """Signed distance from ``point`` to the shape's surface."""
        offset = np.asarray(point, dtype=np.float64) - np.asarray(self.center, dtype=np.float64)
        local = quat_rotate(quat_conjugate(self.rotation), offset)
        size = np.asarray(self.size, dtype=np.float64)

        if self.shape is SdfShape.SPHERE:
            return float(np.linalg.norm(local) - size[0])
        if self.shape is SdfShape.BOX:
            d = np.abs(local) - size
            outside = float(np.linalg.norm(np.maximum(d, 0.0)))
            return outside + min(float(d.max()), 0.0)
        if self.shape is SdfShape.CYLINDER:
            d_xz = float(np.hypot(local[0], local[2]) - size[0])
            d_y = float(abs(local[1]) - size[1])
            return max(d_xz, d_y)
        return float(local[1])

    def contains(self, point) -> bool:
        """Whether ``point`` lies within the region."""
        return self.distance(point) <= self.smoothness


def find_splats(centers, region: SdfRegion) -> list[int]:
    """Indices of the centers (N x 3) inside ``region``, ascending."""
    pts = np.asarray(centers, dtype=np.float64).reshape(-1, 3)
    return [i for i, c in enumerate(pts) if region.contains(c)]


def delete_splats(packed, indices: Iterable[int]) -> np.ndarray:
    """Packed splats (4 words each) with the given indices removed.

    Order is kept; indices outside the array are ignored.
    """
    rows = np.asarray(packed, dtype=np.uint32).reshape(-1, 4)
    keep = np.ones(len(rows), dtype=bool)
    for idx in indices:
        if 0 <= idx < len(rows):
            keep[idx] = False
    return rows[keep].copy()