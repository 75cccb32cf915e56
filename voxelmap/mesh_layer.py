"""A sparse grid of mesh blocks keyed by integer block index."""

from __future__ import annotations

import math
from typing import Iterable, Iterator

import numpy as np

from voxelmap.mesh import Mesh
from voxelmap.mesh_utils import create_connected_mesh

BlockIndex = tuple[int, int, int]


def _as_index(index: Iterable[int]) -> BlockIndex:
    values = tuple(int(v) for v in index)
    if len(values) != 3:
        raise ValueError(f"block index needs three components, got {values}")
    return values  # type: ignore[return-value]


class MeshLayer:
    """Holds one :class:`Mesh` per allocated block of a regular grid."""

    def __init__(self, block_size: float) -> None:
        if not block_size > 0.0:
            raise ValueError(f"block size must be positive, got {block_size}")
        self.block_size = float(block_size)
        self.block_size_inv = 1.0 / self.block_size
        self._meshes: dict[BlockIndex, Mesh] = {}

    def block_index_from_coordinates(self, coords) -> BlockIndex:
        """Return the index of the block that contains ``coords``."""
        scaled = np.asarray(coords, dtype=float).reshape(3) * self.block_size_inv
        return tuple(int(math.floor(v)) for v in scaled)  # type: ignore[return-value]

    def get_mesh(self, index) -> Mesh:
        """Return the mesh at ``index``; raises ``KeyError`` if unallocated."""
        key = _as_index(index)
        try:
            return self._meshes[key]
        except KeyError:
            raise KeyError(f"no mesh allocated at {key}") from None

    def get_mesh_by_coordinates(self, coords) -> Mesh:
        return self.get_mesh(self.block_index_from_coordinates(coords))

    def allocate_mesh(self, index) -> Mesh:
        """Return the mesh at ``index``, allocating it if needed."""
        key = _as_index(index)
        mesh = self._meshes.get(key)
        return mesh if mesh is not None else self.allocate_new_mesh(key)

    def allocate_mesh_by_coordinates(self, coords) -> Mesh:
        return self.allocate_mesh(self.block_index_from_coordinates(coords))

    def allocate_new_mesh(self, index) -> Mesh:
        """Allocate a mesh at ``index``; raises ``ValueError`` if one exists."""
        key = _as_index(index)
        if key in self._meshes:
            raise ValueError(f"mesh already exists at {key}")
        mesh = Mesh(self.block_size, np.array(key, dtype=float) * self.block_size)
        self._meshes[key] = mesh
        return mesh

    def remove_mesh(self, index) -> None:
        self._meshes.pop(_as_index(index), None)

    def remove_mesh_by_coordinates(self, coords) -> None:
        self._meshes.pop(self.block_index_from_coordinates(coords), None)

    def clear_distant_meshes(self, center, max_distance: float) -> None:
        """Empty meshes whose origin is farther than ``max_distance``.

        The meshes stay allocated and are flagged as updated so that
        consumers learn they were cleared.
        """
        center_point = np.asarray(center, dtype=float).reshape(3)
        limit = float(max_distance) ** 2
        for mesh in self._meshes.values():
            offset = mesh.origin - center_point
            if float(np.dot(offset, offset)) > limit:
                mesh.clear()
                mesh.updated = True

    def allocated_indices(self) -> list[BlockIndex]:
        return list(self._meshes)

    def updated_indices(self) -> list[BlockIndex]:
        return [index for index, mesh in self._meshes.items() if mesh.updated]

    def combined_mesh(self) -> Mesh:
        """Concatenate all blocks into one mesh without sharing vertices."""
        meshes = list(self._meshes.values())
        first = next((m for m in meshes if m.vertices), None)
        has_colors = first.has_colors() if first else False
        has_normals = first.has_normals() if first else False
        has_indices = first.has_triangles() if first else False

        combined = Mesh()
        for mesh in meshes:
            if not mesh.vertices:
                continue
            if (mesh.has_colors(), mesh.has_normals(), mesh.has_triangles()) != (
                has_colors, has_normals, has_indices
            ):
                raise ValueError("mesh blocks disagree on colors, normals or triangles")
            if len(mesh.vertices) % 3 != 0:
                raise ValueError("mesh vertex count must be a multiple of three")
            start = len(combined.vertices)
            count = len(mesh.vertices)
            combined.vertices.extend(np.array(v, dtype=float) for v in mesh.vertices)
            if has_colors:
                combined.colors.extend(mesh.colors[:count])
            if has_normals:
                combined.normals.extend(np.array(n, dtype=float) for n in mesh.normals[:count])
            if has_indices:
                combined.indices.extend(range(start, start + count))

        if combined.has_colors() and len(combined.colors) != len(combined.vertices):
            raise ValueError("combined mesh has mismatched colors")
        if combined.has_normals() and len(combined.normals) != len(combined.vertices):
            raise ValueError("combined mesh has mismatched normals")
        if len(combined.indices) != len(combined.vertices):
            raise ValueError("combined mesh needs one index per vertex")
        return combined

    def connected_mesh(self, approximate_vertex_proximity_threshold: float = 1e-10) -> Mesh:
        """Merge all blocks into one mesh with nearby vertices shared."""
        return create_connected_mesh(
            list(self._meshes.values()), approximate_vertex_proximity_threshold
        )

    def __len__(self) -> int:
        return len(self._meshes)

    def __contains__(self, index) -> bool:
        return _as_index(index) in self._meshes

    def __iter__(self) -> Iterator[BlockIndex]:
        return iter(self._meshes)

    def clear(self) -> None:
        """Delete every mesh block."""
        self._meshes.clear()