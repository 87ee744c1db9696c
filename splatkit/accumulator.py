"""Weighted blending of several contributions into a set of splats."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from splatkit.transforms import IDENTITY_QUAT, quat_dot, quat_normalize


def _zeros() -> np.ndarray:
    return np.zeros(3)


def _identity() -> np.ndarray:
    return np.array(IDENTITY_QUAT)


@dataclass(eq=False)
class AccumSplat:
    """Running weighted sums for one splat (or, after normalising, the means)."""

    center: np.ndarray = field(default_factory=_zeros)
    rgb: np.ndarray = field(default_factory=_zeros)
    opacity: float = 0.0
    scale: np.ndarray = field(default_factory=_zeros)
    rotation: np.ndarray = field(default_factory=_identity)
    weight: float = 0.0


class SplatAccumulator:
    """Accumulates weighted splat attributes and averages them."""

    def __init__(self, count: int = 0) -> None:
        self._splats: list[AccumSplat] = []
        self.resize(count)

    def __len__(self) -> int:
        return len(self._splats)

    def __getitem__(self, index: int) -> AccumSplat:
        return self._splats[index]

    @property
    def count(self) -> int:
        return len(self._splats)

    @property
    def splats(self) -> tuple[AccumSplat, ...]:
        return tuple(self._splats)

    def clear(self) -> None:
        """Reset every splat to its empty state, keeping the count."""
        self._splats = [AccumSplat() for _ in self._splats]

    def resize(self, count: int) -> None:
        """Hold ``count`` splats, all reset to the empty state."""
        if count < 0:
            raise ValueError("count must not be negative")
        self._splats = [AccumSplat() for _ in range(count)]

    def accumulate(
        self,
        index: int,
        center,
        rgb,
        opacity: float,
        scale,
        rotation,
        weight: float = 1.0,
    ) -> None:
        """Add one weighted contribution to splat ``index``.

        The rotation is flipped into the hemisphere of the running sum
        before adding. Indices outside the accumulator are ignored.
        """
        if not 0 <= index < len(self._splats):
            return
        s = self._splats[index]
        s.center = s.center + np.asarray(center, dtype=np.float64) * weight
        s.rgb = s.rgb + np.asarray(rgb, dtype=np.float64) * weight
        s.opacity += opacity * weight
        s.scale = s.scale + np.asarray(scale, dtype=np.float64) * weight

        q = np.asarray(rotation, dtype=np.float64)
        if quat_dot(s.rotation, q) < 0.0:
            q = -q
        s.rotation = s.rotation + q * weight
        s.weight += weight

    def normalize(self) -> None:
        """Turn sums into weighted means for every splat with positive weight."""
        for s in self._splats:
            if s.weight > 0.0:
                inv_w = 1.0 / s.weight
                s.center = s.center * inv_w
                s.rgb = s.rgb * inv_w
                s.opacity *= inv_w
                s.scale = s.scale * inv_w
                s.rotation = quat_normalize(s.rotation)