[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "splatkit"
version = "0.1.0"
description = "CPU-side building blocks for Gaussian splat rendering: depth sorting, shader graphs, editing regions, portals, paging, blending and skinning"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["gaussian-splatting", "rendering", "3d", "depth-sort", "glsl", "skinning", "quaternion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["splatkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
