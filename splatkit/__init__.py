"""CPU-side tools for Gaussian splats: transforms, depth sorting, shader graphs,
shader sources, portals, paging, region editing, blending and skinning."""

__version__ = "0.1.0"

__all__ = [
    "accumulator",
    "dyno",
    "edit",
    "pager",
    "portals",
    "shaders",
    "skinning",
    "sort",
    "transforms",
]