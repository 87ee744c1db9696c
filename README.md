# splatkit

Building blocks for Gaussian splat rendering that run on the CPU with NumPy.
Quaternions are NumPy arrays ordered `(w, x, y, z)`; matrices are 4x4 arrays
acting on column vectors.

## Modules

- `splatkit.transforms` – quaternion and matrix helpers (`quat_multiply`,
  `quat_conjugate`, `quat_rotate`, `quat_dot`, `quat_normalize`,
  `quat_to_matrix`, `matrix_to_quat`, `translation_matrix`, `scale_matrix`,
  `perspective`), a `Camera` dataclass (`update_projection`, `update_view`,
  `forward`, `right`, `up`) and a `RendererConfig` dataclass of renderer
  settings.
- `splatkit.sort` – back-to-front ordering of depth keys. `RadixSort16` takes
  half-float bit patterns (0x7C00 and above are culled); `RadixSort32` takes
  float32 bit patterns (0x7F800000 and above are culled). Fill `readback`,
  call `sort(n)`, and read the first returned-count entries of `ordering`.
- `splatkit.dyno` – a shader graph. `DynoGraph` holds `DynoMathNode`,
  `DynoValueNode`, `DynoUniformNode`, `DynoTextureNode`, `DynoSwizzleNode`,
  `DynoBranchNode` and `DynoOutputNode` nodes, orders them topologically and
  writes GLSL: uniform declarations followed by a `dyno_main()` function.
  Nodes on a cycle are left out.
- `splatkit.shaders` – `ShaderLibrary` reads shader files (raising
  `ShaderSourceError` when a file cannot be read), replaces lines naming a
  registered `#include "name"` or `#include <name>` with its content, and
  inserts text after the first line of a source (`inject_after_version`).
- `splatkit.portals` – `Portal` trigger zones (ellipsoids with a radius) and
  `SparkPortals` with `add_portal`, `remove_portal`, `find_portal`,
  `check_trigger` and `teleport`, which returns a `TeleportResult` and calls
  an optional callback.
- `splatkit.pager` – `SplatPager` splits splat centres into pages of
  `PageConfig.page_size` and, in `update`, marks pages visible in order while
  they fit within `max_splats`, returning the `VisibleRange` list and calling
  an optional callback on each change. The camera position is not used to
  choose pages.
- `splatkit.edit` – `SdfRegion` (sphere, box, cylinder or plane, see
  `SdfShape`) with `distance` and `contains`, plus `find_splats` (indices of
  centres inside a region) and `delete_splats` (a packed array of four words
  per splat with given indices removed).
- `splatkit.accumulator` – `SplatAccumulator` adds weighted centre, colour,
  opacity, scale and rotation contributions per splat and turns them into
  weighted means with `normalize`.
- `splatkit.skinning` – `SplatSkinning` with `Bone`, `SkinWeight` and
  `DualQuat`: set bones, a bind pose and per-splat weights, call
  `update_bones` with a pose, then `deform(index, center, rotation)` for the
  skinned centre and rotation of a splat.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Example: sort splats back to front

```python
import numpy as np
from splatkit.sort import RadixSort16

sorter = RadixSort16()
sorter.ensure_size(3)
sorter.readback[:3] = np.array([0x3C00, 0x4000, 0x7C00], dtype=np.uint16)
active = sorter.sort(3)          # 2: the third splat is culled
order = sorter.ordering[:active] # farthest first: [1, 0]
```

## Example: build a shader graph

```python
from splatkit.dyno import DynoGraph, DynoUniformNode, DynoOutputNode, DynoType

graph = DynoGraph()
tint = graph.add_node(DynoUniformNode("tint", DynoType.VEC4))
out = graph.add_node(DynoOutputNode())
graph.connect(tint, 0, out, 0)
print(graph.generate_fragment_shader())
```

## Example: select and remove splats in a region

```python
import numpy as np
from splatkit.edit import SdfRegion, SdfShape, find_splats, delete_splats

centers = np.array([[0.0, 0.0, 0.0], [3.0, 0.0, 0.0]])
region = SdfRegion(shape=SdfShape.SPHERE, size=np.array([1.0, 1.0, 1.0]))
inside = find_splats(centers, region)   # [0]

packed = np.arange(8, dtype=np.uint32)  # two splats, four words each
print(delete_splats(packed, inside))    # [[4 5 6 7]]
```

## What this package does not do

- It does not draw anything: there is no GPU upload, shader compilation,
  texture handling or window. `ShaderLibrary` prepares source text only, and
  `DynoGraph` only produces GLSL strings.
- It does not read or write splat files, and it does not encode or decode the
  packed four-word splat layout; `delete_splats` only moves whole rows.
- There is no viewer or command-line program.