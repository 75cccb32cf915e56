# voxelmap

Building blocks for working with voxel-based signed-distance maps. The package
depends only on NumPy.

## Modules

- `voxelmap.mesh` – `Color` (an RGBA dataclass) and `Mesh`, a container of
  vertices, normals, colours and triangle indices with `concatenate`,
  `colorize` and the `clear*` methods. A mesh may carry a positive
  `block_size` and an `origin`, and has an `updated` flag.
- `voxelmap.marching_cubes_tables` – the marching-cubes lookup tables;
  `triangle_edges(configuration)` returns the edge triplets for a cube
  configuration in 0–255.
- `voxelmap.marching_cubes` – marching cubes on one cube of eight corners:
  `calculate_vertex_configuration`, `interpolate_vertex`,
  `interpolate_edge_vertices`, `mesh_cube_triangles` and `mesh_cube`, which
  appends triangles (vertices, indices and face normals) to a `Mesh`. Corner
  coordinates are an `(8, 3)` array; corner distances are eight values.
- `voxelmap.mesh_utils` – `create_connected_mesh(meshes, threshold)` merges
  vertices that fall in the same grid cell of the given size, averages their
  normals and drops triangles that collapse.
- `voxelmap.mesh_layer` – `MeshLayer`, a sparse map from integer block index
  tuples to `Mesh` blocks, with allocation by index or coordinates,
  `clear_distant_meshes`, `allocated_indices`, `updated_indices`,
  `combined_mesh` and `connected_mesh`.
- `voxelmap.geometry` – `Rotation` (unit quaternion, `from_two_vectors`,
  `rotate`, `inverse`, composition with `*`) and `Transformation`
  (rotation plus translation, `transform`, `inverse`, `*`).
- `voxelmap.camera_model` – `Plane` and `CameraModel`, a view frustum looking
  along the camera's x axis, with `is_point_in_view`, `aabb`,
  `bounding_lines` and `far_plane_points`.
- `voxelmap.simulation_world` – `SimulationWorld`, which ray-casts simulated
  point clouds (optionally with Gaussian range noise) from a list of
  `SceneObject`s. `SceneObject` is abstract: subclasses provide
  `distance_to_point` and `ray_intersection`.
- `voxelmap.voxels` – `TsdfVoxel`, `EsdfVoxel`, `OccupancyVoxel` and
  `is_same_voxel`.
- `voxelmap.evaluation` – `compute_voxel_error` returning a
  `VoxelEvaluationResult` and the error for a ground-truth/test voxel pair under
  a `VoxelEvaluationMode`, plus `is_observed_voxel`, `voxel_sdf`,
  `set_voxel_sdf` and `set_voxel_weight`.
- `voxelmap.neighbors` – `neighbor_offsets(connectivity)` for 6-, 18- or
  26-neighbourhoods, each offset paired with its distance in voxel units.
- `voxelmap.framing` – varint length-prefixed framing of raw byte messages on
  binary streams: `write_message_count`, `read_message_count`,
  `write_message`, `read_message`, `encode_varint`, `decode_varint`; read
  errors raise `FramingError`.
- `voxelmap.timing` – `Timing` registries of named timers, the process-wide
  `global_timing()`, and `Timer`, usable as a context manager.

## Installation

```
pip install .
```

## Examples

Meshing one cube whose first corner lies inside the surface:

```python
import numpy as np
from voxelmap.mesh import Mesh
from voxelmap.marching_cubes import mesh_cube
from voxelmap.timing import Timer, global_timing

corners = np.array([
    [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
    [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
], dtype=float)
sdf = [-0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5]

mesh = Mesh()
with Timer("mesh/cube"):
    added = mesh_cube(corners, sdf, mesh)

print(added, "triangle,", len(mesh), "vertices")  # 1 triangle, 3 vertices
print(global_timing().report())
```

Framing messages in a byte stream:

```python
import io
from voxelmap.framing import write_message_count, write_message, read_message_count, read_message

buffer = io.BytesIO()
write_message_count(buffer, 1)
write_message(buffer, b"abc")

count, offset = read_message_count(buffer, 0)   # (1, 1)
payload, offset = read_message(buffer, offset)  # (b"abc", 5)
```

## What the package does not do

There are no voxel layers of blocks, no TSDF or ESDF integrators that fuse
point clouds into a map, and no reading or writing of map files; `MeshLayer`
holds meshes only, and `voxelmap.evaluation` compares single voxel pairs rather
than whole maps. `voxelmap.framing` frames raw bytes and does not define any
message schema. `SimulationWorld` ships no concrete scene shapes. There is no
command-line program or server.

## Running the tests

```
pip install .[test]
pytest
```