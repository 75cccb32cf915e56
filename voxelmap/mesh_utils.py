"""Merging of mesh blocks into one connected mesh."""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from voxelmap.mesh import Mesh

EPSILON = 1e-6


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _grid_key(vertex: np.ndarray, threshold_inv: float) -> tuple[int, int, int]:
    scaled = np.asarray(vertex, dtype=float) * threshold_inv
    return (
        _round_half_away(scaled[0]),
        _round_half_away(scaled[1]),
        _round_half_away(scaled[2]),
    )


def create_connected_mesh(
    meshes: Mesh | Iterable[Mesh],
    approximate_vertex_proximity_threshold: float = 1e-10,
) -> Mesh:
    """Combine meshes into one mesh whose nearby vertices are shared.

    Vertices falling into the same grid cell of size
    ``approximate_vertex_proximity_threshold`` are merged, their normals are
    averaged, and triangles that collapse onto fewer than three distinct
    vertices are dropped.
    """
    if isinstance(meshes, Mesh):
        meshes = [meshes]

    connected = Mesh()
    uniques: dict[tuple[int, int, int], int] = {}
    threshold_inv = 1.0 / float(approximate_vertex_proximity_threshold)

    for mesh in meshes:
        if not mesh.vertices:
            continue

        if len(mesh.vertices) != len(mesh.indices):
            raise ValueError("each mesh needs exactly one index per vertex")
        if len(mesh.vertices) % 3 != 0:
            raise ValueError("mesh vertex count must be a multiple of three")

        has_colors = mesh.has_colors()
        has_normals = mesh.has_normals()
        old_to_new: list[int] = []

        for old_index, vertex in enumerate(mesh.vertices):
            key = _grid_key(vertex, threshold_inv)
            existing = uniques.get(key)
            if existing is None:
                new_index = len(connected.vertices)
                connected.vertices.append(np.array(vertex, dtype=float))
                if has_colors:
                    connected.colors.append(mesh.colors[old_index])
                if has_normals:
                    connected.normals.append(np.array(mesh.normals[old_index], dtype=float))
                uniques[key] = new_index
                old_to_new.append(new_index)
            else:
                old_to_new.append(existing)
                if has_normals:
                    connected.normals[existing] = (
                        connected.normals[existing]
                        + np.asarray(mesh.normals[old_index], dtype=float)
                    )

        for i, normal in enumerate(connected.normals):
            length = float(np.linalg.norm(normal))
            if length > EPSILON:
                connected.normals[i] = normal / length
            else:
                connected.normals[i] = np.array([0.0, 0.0, 1.0])

        for start in range(0, len(mesh.indices), 3):
            triangle = mesh.indices[start:start + 3]
            if any(not 0 <= index < len(old_to_new) for index in triangle):
                raise ValueError(f"triangle index out of range in {triangle}")
            v0, v1, v2 = (old_to_new[index] for index in triangle)
            if v0 == v1 or v1 == v2 or v0 == v2:
                continue
            connected.indices.extend((v0, v1, v2))

    if connected.has_colors() and len(connected.colors) != len(connected.vertices):
        raise ValueError("meshes disagree on having colors")
    if connected.has_normals() and len(connected.normals) != len(connected.vertices):
        raise ValueError("meshes disagree on having normals")

    return connected