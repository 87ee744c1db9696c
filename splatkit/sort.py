"""Back-to-front depth ordering of splats by bucketed depth keys."""

from __future__ import annotations

import numpy as np


def _grow(array: np.ndarray, size: int) -> np.ndarray:
    if array.size >= size:
        return array
    grown = np.zeros(size, dtype=array.dtype)
    grown[: array.size] = array
    return grown


def _check_size(max_splats: int) -> None:
    if max_splats < 0:
        raise ValueError("max_splats must not be negative")


def _order_back_to_front(
    readback: np.ndarray, ordering: np.ndarray, num_splats: int, depth_infinity: int
) -> int:
    """Write indices of non-culled keys into ``ordering``, largest key first.

    Keys at or above ``depth_infinity`` are culled. Equal keys keep their
    index order. Returns the number of indices written.
    """
    if num_splats < 0:
        raise ValueError("num_splats must not be negative")
    if num_splats > readback.size or num_splats > ordering.size:
        raise ValueError(
            f"num_splats {num_splats} exceeds buffer size; call ensure_size first"
        )
    keys = readback[:num_splats].astype(np.int64)
    active = np.flatnonzero(keys < depth_infinity)
    order = active[np.argsort(-keys[active], kind="stable")]
    ordering[: order.size] = order
    return int(order.size)


class RadixSort16:
    """Sorter for half-float depth keys; 0x7C00 (infinity) marks culled splats."""

    depth_infinity = 0x7C00

    def __init__(self) -> None:
        self.readback = np.zeros(0, dtype=np.uint16)
        self.ordering = np.zeros(0, dtype=np.uint32)

    def ensure_size(self, max_splats: int) -> None:
        """Grow the buffers to hold at least ``max_splats`` entries."""
        _check_size(max_splats)
        self.readback = _grow(self.readback, max_splats)
        self.ordering = _grow(self.ordering, max_splats)

    def sort(self, num_splats: int) -> int:
        """Order splats farthest first; return how many were not culled.

        The first returned-count entries of ``ordering`` hold the sorted indices.
        """
        return _order_back_to_front(
            self.readback, self.ordering, num_splats, self.depth_infinity
        )


class RadixSort32:
    """Sorter for float32 depth bit patterns; 0x7F800000 and above are culled."""

    depth_infinity = 0x7F800000

    def __init__(self) -> None:
        self.readback = np.zeros(0, dtype=np.uint32)
        self.ordering = np.zeros(0, dtype=np.uint32)

    def ensure_size(self, max_splats: int) -> None:
        """Grow the buffers to hold at least ``max_splats`` entries."""
        _check_size(max_splats)
        self.readback = _grow(self.readback, max_splats)
        self.ordering = _grow(self.ordering, max_splats)

    def sort(self, num_splats: int) -> int:
        """Order splats farthest first; return how many were not culled.

        The first returned-count entries of ``ordering`` hold the sorted indices.
        """
        return _order_back_to_front(
            self.readback, self.ordering, num_splats, self.depth_infinity
        )