"""Quaternion and matrix helpers, camera state and renderer settings.

Quaternions are numpy arrays ordered ``(w, x, y, z)``. Matrices are 4x4
numpy arrays acting on column vectors (``m @ v``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

IDENTITY_QUAT = (1.0, 0.0, 0.0, 0.0)


def _vec(values) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def quat_multiply(a, b) -> np.ndarray:
    """Hamilton product ``a * b``."""
    aw, ax, ay, az = _vec(a)
    bw, bx, by, bz = _vec(b)
    return np.array(
        [
            aw * bw - ax * bx - ay * by - az * bz,
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
        ]
    )


def quat_conjugate(q) -> np.ndarray:
    """Conjugate: the vector part negated."""
    w, x, y, z = _vec(q)
    return np.array([w, -x, -y, -z])


def quat_rotate(q, v) -> np.ndarray:
    """Rotate vector ``v`` by quaternion ``q``."""
    q = _vec(q)
    v = _vec(v)
    axis = q[1:]
    uv = np.cross(axis, v)
    uuv = np.cross(axis, uv)
    return v + (uv * q[0] + uuv) * 2.0


def quat_dot(a, b) -> float:
    """Four-component dot product."""
    return float(np.dot(_vec(a), _vec(b)))


def quat_normalize(q) -> np.ndarray:
    """Unit quaternion; a zero quaternion becomes the identity."""
    q = _vec(q)
    length = float(np.linalg.norm(q))
    if length <= 0.0:
        return np.array(IDENTITY_QUAT)
    return q / length


def quat_to_matrix(q) -> np.ndarray:
    """4x4 rotation matrix of a unit quaternion."""
    w, x, y, z = _vec(q)
    m = np.eye(4)
    m[:3, :3] = [
        [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
        [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
        [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
    ]
    return m


def matrix_to_quat(m) -> np.ndarray:
    """Rotation quaternion from the upper-left 3x3 block of a matrix."""
    m = _vec(m)
    four_x = m[0, 0] - m[1, 1] - m[2, 2]
    four_y = m[1, 1] - m[0, 0] - m[2, 2]
    four_z = m[2, 2] - m[0, 0] - m[1, 1]
    four_w = m[0, 0] + m[1, 1] + m[2, 2]

    candidates = [four_w, four_x, four_y, four_z]
    biggest_index = max(range(4), key=lambda k: (candidates[k], -k))
    biggest = math.sqrt(candidates[biggest_index] + 1.0) * 0.5
    mult = 0.25 / biggest

    if biggest_index == 0:
        return np.array(
            [
                biggest,
                (m[2, 1] - m[1, 2]) * mult,
                (m[0, 2] - m[2, 0]) * mult,
                (m[1, 0] - m[0, 1]) * mult,
            ]
        )
    if biggest_index == 1:
        return np.array(
            [
                (m[2, 1] - m[1, 2]) * mult,
                biggest,
                (m[1, 0] + m[0, 1]) * mult,
                (m[0, 2] + m[2, 0]) * mult,
            ]
        )
    if biggest_index == 2:
        return np.array(
            [
                (m[0, 2] - m[2, 0]) * mult,
                (m[1, 0] + m[0, 1]) * mult,
                biggest,
                (m[2, 1] + m[1, 2]) * mult,
            ]
        )
    return np.array(
        [
            (m[1, 0] - m[0, 1]) * mult,
            (m[0, 2] + m[2, 0]) * mult,
            (m[2, 1] + m[1, 2]) * mult,
            biggest,
        ]
    )


def translation_matrix(offset) -> np.ndarray:
    """4x4 matrix translating by ``offset``."""
    m = np.eye(4)
    m[:3, 3] = _vec(offset)
    return m


def scale_matrix(factors) -> np.ndarray:
    """4x4 matrix scaling each axis by ``factors``."""
    m = np.eye(4)
    m[0, 0], m[1, 1], m[2, 2] = _vec(factors)
    return m


def perspective(fov_y, aspect, near, far) -> np.ndarray:
    """Right-handed perspective projection with clip depth in [-1, 1].

    ``fov_y`` is the vertical field of view in radians.
    """
    if aspect == 0.0:
        raise ValueError("aspect ratio must be non-zero")
    if far == near:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fov_y / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = 1.0 / (aspect * tan_half)
    m[1, 1] = 1.0 / tan_half
    m[2, 2] = -(far + near) / (far - near)
    m[3, 2] = -1.0
    m[2, 3] = -(2.0 * far * near) / (far - near)
    return m


@dataclass
class RendererConfig:
    """Tunable parameters of the splat renderer."""

    max_std_dev: float = 2.83
    min_pixel_radius: float = 0.0
    max_pixel_radius: float = 512.0
    min_alpha: float = 0.5 / 255.0
    clip_xy: float = 1.4
    focal_adjustment: float = 1.0
    blur_amount: float = 0.0
    pre_blur_amount: float = 0.0
    falloff: float = 1.0
    premultiplied_alpha: bool = True
    encode_linear: bool = False
    lod_inflate: bool = False


@dataclass
class Camera:
    """Perspective camera; ``fov`` is the vertical field of view in degrees."""

    projection: np.ndarray = field(default_factory=lambda: np.eye(4))
    view: np.ndarray = field(default_factory=lambda: np.eye(4))
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.array(IDENTITY_QUAT))
    fov: float = 60.0
    near_plane: float = 0.1
    far_plane: float = 1000.0
    aspect: float = 1.0

    def update_projection(self) -> None:
        """Recompute the projection matrix from fov, aspect and planes."""
        self.projection = perspective(
            math.radians(self.fov), self.aspect, self.near_plane, self.far_plane
        )

    def update_view(self) -> None:
        """Recompute the view matrix from position and rotation."""
        rot = quat_to_matrix(quat_conjugate(self.rotation))
        trans = translation_matrix(-_vec(self.position))
        self.view = rot @ trans

    def forward(self) -> np.ndarray:
        """Direction the camera looks along (local -Z)."""
        return quat_rotate(self.rotation, (0.0, 0.0, -1.0))

    def right(self) -> np.ndarray:
        """Camera's local +X axis in world space."""
        return quat_rotate(self.rotation, (1.0, 0.0, 0.0))

    def up(self) -> np.ndarray:
        """Camera's local +Y axis in world space."""
        return quat_rotate(self.rotation, (0.0, 1.0, 0.0))