"""Splitting splats into fixed-size pages and choosing which are visible."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np


@dataclass
class PageConfig:
    """Paging limits."""

    max_splats: int = 1_000_000
    page_distance: float = 100.0
    hysteresis: float = 0.1
    page_size: int = 65536


@dataclass
class Page:
    """A contiguous run of splats with its distance range from the scene centre."""

    base_index: int = 0
    count: int = 0
    min_distance: float = 0.0
    max_distance: float = 0.0
    loaded: bool = False
    visible: bool = False


@dataclass(frozen=True)
class VisibleRange:
    """A run of visible splat indices."""

    start: int
    count: int


PageCallback = Callable[[int, bool], None]


class SplatPager:
    """Keeps the visible splats within the configured budget, page by page."""

    def __init__(
        self,
        config: Optional[PageConfig] = None,
        callback: Optional[PageCallback] = None,
    ) -> None:
        self.config = config if config is not None else PageConfig()
        self.callback = callback
        self._pages: list[Page] = []
        self._visible_ranges: list[VisibleRange] = []
        self._visible_count = 0

    @property
    def pages(self) -> tuple[Page, ...]:
        return tuple(self._pages)

    @property
    def visible_ranges(self) -> tuple[VisibleRange, ...]:
        return tuple(self._visible_ranges)

    @property
    def visible_count(self) -> int:
        return self._visible_count

    def configure(self, config: PageConfig) -> None:
        self.config = config

    def build_pages(self, centers) -> None:
        """Split ``centers`` (N x 3) into pages of ``config.page_size`` splats."""
        if self.config.page_size <= 0:
            raise ValueError("page_size must be positive")
        pts = np.asarray(centers, dtype=np.float64).reshape(-1, 3)
        self._pages = []
        if len(pts) == 0:
            return

        scene_center = (pts.min(axis=0) + pts.max(axis=0)) * 0.5
        distances = np.linalg.norm(pts - scene_center, axis=1)
        size = self.config.page_size
        for base in range(0, len(pts), size):
            chunk = distances[base : base + size]
            self._pages.append(
                Page(
                    base_index=base,
                    count=len(chunk),
                    min_distance=float(chunk.min()),
                    max_distance=float(chunk.max()),
                    loaded=True,
                    visible=True,
                )
            )

    def update(self, camera_pos) -> list[VisibleRange]:
        """Mark pages visible in order while they fit in ``max_splats``.

        A page that would exceed the budget is hidden, but later, smaller
        pages may still fit. The callback hears of every change.
        """
        self._visible_ranges = []
        self._visible_count = 0
        for index, page in enumerate(self._pages):
            was_visible = page.visible
            page.visible = self._visible_count + page.count <= self.config.max_splats
            if page.visible:
                self._visible_ranges.append(VisibleRange(page.base_index, page.count))
                self._visible_count += page.count
            if was_visible != page.visible and self.callback is not None:
                self.callback(index, page.visible)
        return list(self._visible_ranges)