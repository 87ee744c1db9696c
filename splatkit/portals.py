"""Portals: trigger zones that teleport a viewer to another pose or scene."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from splatkit.transforms import (
    IDENTITY_QUAT,
    quat_conjugate,
    quat_multiply,
    quat_rotate,
)


def _zeros() -> np.ndarray:
    return np.zeros(3)


def _ones() -> np.ndarray:
    return np.ones(3)


def _identity() -> np.ndarray:
    return np.array(IDENTITY_QUAT)


@dataclass(eq=False)
class Portal:
    """An ellipsoidal trigger zone with a destination pose."""

    name: str = ""
    target_scene: str = ""
    position: np.ndarray = field(default_factory=_zeros)
    rotation: np.ndarray = field(default_factory=_identity)
    scale: np.ndarray = field(default_factory=_ones)
    radius: float = 1.0
    target_position: np.ndarray = field(default_factory=_zeros)
    target_rotation: np.ndarray = field(default_factory=_identity)
    active: bool = True
    visible: bool = True

    def contains(self, point) -> bool:
        """Whether ``point`` lies inside the trigger zone."""
        offset = np.asarray(point, dtype=np.float64) - np.asarray(self.position, dtype=np.float64)
        local = quat_rotate(quat_conjugate(self.rotation), offset)
        scaled = local / np.asarray(self.scale, dtype=np.float64)
        return bool(np.linalg.norm(scaled) <= self.radius)


@dataclass
class TeleportResult:
    """Pose and scene after passing through a portal."""

    position: np.ndarray
    rotation: np.ndarray
    scene_name: str


TeleportCallback = Callable[[TeleportResult], None]


class SparkPortals:
    """A set of portals with trigger checks and teleport transforms."""

    def __init__(self, callback: Optional[TeleportCallback] = None) -> None:
        self._portals: list[Portal] = []
        self.callback = callback

    @property
    def portals(self) -> tuple[Portal, ...]:
        return tuple(self._portals)

    def add_portal(self, portal: Portal) -> None:
        self._portals.append(portal)

    def remove_portal(self, name: str) -> None:
        """Remove every portal called ``name``."""
        self._portals = [p for p in self._portals if p.name != name]

    def find_portal(self, name: str) -> Optional[Portal]:
        """The first portal called ``name``, or None."""
        return next((p for p in self._portals if p.name == name), None)

    def check_trigger(self, position) -> Optional[Portal]:
        """The first active portal containing ``position``, or None."""
        return next((p for p in self._portals if p.active and p.contains(position)), None)

    def teleport(self, portal: Portal, current_pos, current_rot) -> TeleportResult:
        """Carry a pose relative to ``portal`` over to its target."""
        inverse = quat_conjugate(portal.rotation)
        offset = np.asarray(current_pos, dtype=np.float64) - np.asarray(
            portal.position, dtype=np.float64
        )
        local = quat_rotate(inverse, offset)
        position = np.asarray(portal.target_position, dtype=np.float64) + quat_rotate(
            portal.target_rotation, local
        )
        relative = quat_multiply(inverse, current_rot)
        rotation = quat_multiply(portal.target_rotation, relative)
        result = TeleportResult(position, rotation, portal.target_scene)
        if self.callback is not None:
            self.callback(result)
        return result