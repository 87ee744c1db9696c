"""Skeletal deformation of splats by dual-quaternion blending of bones."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from splatkit.transforms import (
    IDENTITY_QUAT,
    matrix_to_quat,
    quat_dot,
    quat_multiply,
    quat_rotate,
    quat_to_matrix,
    scale_matrix,
    translation_matrix,
)


@dataclass(eq=False)
class DualQuat:
    """Rigid transform as a dual quaternion; both parts ordered (w, x, y, z)."""

    real: np.ndarray = field(default_factory=lambda: np.array(IDENTITY_QUAT))
    dual: np.ndarray = field(default_factory=lambda: np.zeros(4))


@dataclass(eq=False)
class Bone:
    """A bone pose relative to its parent (``parent`` is -1 for a root)."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.array(IDENTITY_QUAT))
    scale: np.ndarray = field(default_factory=lambda: np.ones(3))
    parent: int = -1
    name: str = ""

    def local_matrix(self) -> np.ndarray:
        """Translation, then rotation, then scale, as one 4x4 matrix."""
        return (
            translation_matrix(self.position)
            @ quat_to_matrix(self.rotation)
            @ scale_matrix(self.scale)
        )

    def dual_quaternion(self) -> DualQuat:
        """Dual quaternion of the bone's rotation and translation."""
        real = np.asarray(self.rotation, dtype=np.float64)
        rw, rx, ry, rz = real
        px, py, pz = np.asarray(self.position, dtype=np.float64)
        dual = np.array(
            [
                0.0,
                0.5 * (px * rw + py * rz - pz * ry),
                0.5 * (-px * rz + py * rw + pz * rx),
                0.5 * (px * ry - py * rx + pz * rw),
            ]
        )
        return DualQuat(real.copy(), dual)


@dataclass
class SkinWeight:
    """Up to four bone influences on one splat."""

    bone_indices: tuple[int, ...] = (0, 0, 0, 0)
    weights: tuple[float, ...] = (1.0, 0.0, 0.0, 0.0)


def _world_matrices(bones: Sequence[Bone]) -> list[np.ndarray]:
    world: list[np.ndarray] = []
    for i, bone in enumerate(bones):
        local = bone.local_matrix()
        if 0 <= bone.parent < i:
            world.append(world[bone.parent] @ local)
        else:
            world.append(local)
    return world


def _resized(items: list, size: int, fill) -> list:
    return items[:size] + [fill() for _ in range(size - len(items))]


class SplatSkinning:
    """Bones, bind pose and per-splat weights used to deform splats."""

    def __init__(self) -> None:
        self._bones: list[Bone] = []
        self._bind_pose: list[Bone] = []
        self._weights: list[SkinWeight] = []
        self._bone_matrices: list[np.ndarray] = []
        self._bone_dualquats: list[DualQuat] = []
        self._inverse_bind: list[np.ndarray] = []

    @property
    def bones(self) -> tuple[Bone, ...]:
        return tuple(self._bones)

    @property
    def num_bones(self) -> int:
        return len(self._bones)

    @property
    def bone_matrices(self) -> tuple[np.ndarray, ...]:
        """Skinning matrices (posed world times inverse bind) per bone."""
        return tuple(self._bone_matrices)

    def set_bones(self, bones: Sequence[Bone]) -> None:
        """Set the skeleton; per-bone buffers grow or shrink to match."""
        self._bones = list(bones)
        n = len(self._bones)
        self._bone_matrices = _resized(self._bone_matrices, n, lambda: np.eye(4))
        self._bone_dualquats = _resized(self._bone_dualquats, n, DualQuat)
        self._inverse_bind = _resized(self._inverse_bind, n, lambda: np.eye(4))

    def set_bind_pose(self, bind_pose: Sequence[Bone]) -> None:
        """Set the rest pose and compute its inverse world matrices."""
        if len(bind_pose) > len(self._inverse_bind):
            raise ValueError("bind pose has more bones than the skeleton")
        self._bind_pose = list(bind_pose)
        for i, world in enumerate(_world_matrices(self._bind_pose)):
            self._inverse_bind[i] = np.linalg.inv(world)

    def set_weights(self, weights: Sequence[SkinWeight]) -> None:
        """Set per-splat bone influences, indexed like the splats."""
        self._weights = list(weights)

    def update_bones(self, posed_bones: Sequence[Bone]) -> None:
        """Compute skinning transforms for a new pose.

        A pose whose bone count differs from the skeleton is ignored.
        """
        if len(posed_bones) != len(self._bones):
            return
        for i, world in enumerate(_world_matrices(posed_bones)):
            m = world @ self._inverse_bind[i]
            self._bone_matrices[i] = m
            pose = Bone(position=m[:3, 3].copy(), rotation=matrix_to_quat(m))
            self._bone_dualquats[i] = pose.dual_quaternion()

    def deform(self, index: int, center, rotation) -> tuple[np.ndarray, np.ndarray]:
        """Skinned ``(center, rotation)`` of splat ``index``.

        Without weights or bones, or for a splat beyond the weights, the
        inputs are returned unchanged.
        """
        center = np.asarray(center, dtype=np.float64)
        rotation = np.asarray(rotation, dtype=np.float64)
        if not self._weights or not self._bones or not 0 <= index < len(self._weights):
            return center.copy(), rotation.copy()

        skin = self._weights[index]
        real = np.zeros(4)
        dual = np.zeros(4)
        for bone_index, weight in zip(skin.bone_indices, skin.weights):
            if weight <= 0.0:
                continue
            if not 0 <= bone_index < len(self._bone_dualquats):
                continue
            dq = self._bone_dualquats[bone_index]
            dq_real, dq_dual = dq.real, dq.dual
            if quat_dot(real, dq_real) < 0.0:
                dq_real, dq_dual = -dq_real, -dq_dual
            real = real + dq_real * weight
            dual = dual + dq_dual * weight

        length = float(np.linalg.norm(real))
        if length > 1e-6:
            real = real / length
            dual = dual / length

        rw, rx, ry, rz = real
        dw, dx, dy, dz = dual
        translation = 2.0 * np.array(
            [
                -dw * rx + dx * rw - dy * rz + dz * ry,
                -dw * ry + dx * rz + dy * rw - dz * rx,
                -dw * rz - dx * ry + dy * rx + dz * rw,
            ]
        )
        new_center = quat_rotate(real, center) + translation
        new_rotation = quat_multiply(real, rotation)
        return new_center, new_rotation