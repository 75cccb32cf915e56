"""Marching cubes surface extraction for a single cube of eight corners.

Corner coordinates are given as an ``(8, 3)`` array, one row per corner, and
signed distances as a sequence of eight values. Corners with a negative
signed distance lie inside the surface.
"""

from __future__ import annotations

import numpy as np

from voxelmap.marching_cubes_tables import EDGE_INDEX_PAIRS, triangle_edges
from voxelmap.mesh import Mesh

MIN_SDF_DIFFERENCE = 1e-6


def _as_corner_coords(vertex_coords) -> np.ndarray:
    coords = np.asarray(vertex_coords, dtype=float)
    if coords.shape != (8, 3):
        raise ValueError(f"corner coordinates must have shape (8, 3), got {coords.shape}")
    return coords


def _as_corner_sdf(vertex_sdf) -> np.ndarray:
    sdf = np.asarray(vertex_sdf, dtype=float).reshape(-1)
    if sdf.shape != (8,):
        raise ValueError(f"expected 8 corner distances, got {sdf.size}")
    return sdf


def calculate_vertex_configuration(vertex_sdf) -> int:
    """Return the 8-bit cube configuration: bit ``i`` set when corner ``i`` < 0."""
    sdf = _as_corner_sdf(vertex_sdf)
    configuration = 0
    for bit, value in enumerate(sdf):
        if value < 0:
            configuration |= 1 << bit
    return configuration


def interpolate_vertex(vertex1, vertex2, sdf1: float, sdf2: float) -> np.ndarray:
    """Estimate the zero crossing between two corners by linear interpolation.

    When the two distances are nearly equal the midpoint is returned.
    """
    v1 = np.asarray(vertex1, dtype=float).reshape(3)
    v2 = np.asarray(vertex2, dtype=float).reshape(3)
    sdf_diff = float(sdf1) - float(sdf2)
    if abs(sdf_diff) >= MIN_SDF_DIFFERENCE:
        t = float(sdf1) / sdf_diff
        return v1 + t * (v2 - v1)
    return 0.5 * (v1 + v2)


def interpolate_edge_vertices(vertex_coords, vertex_sdf) -> np.ndarray:
    """Return a ``(12, 3)`` array of surface crossings on the cube edges.

    Rows of edges without a sign change are NaN.
    """
    coords = _as_corner_coords(vertex_coords)
    sdf = _as_corner_sdf(vertex_sdf)
    edge_coords = np.full((len(EDGE_INDEX_PAIRS), 3), np.nan)
    for edge, (c0, c1) in enumerate(EDGE_INDEX_PAIRS):
        if (sdf[c0] < 0) != (sdf[c1] < 0):
            edge_coords[edge] = interpolate_vertex(coords[c0], coords[c1], sdf[c0], sdf[c1])
    return edge_coords


def mesh_cube_triangles(vertex_coords, vertex_sdf) -> list[np.ndarray]:
    """Return the cube's triangles, each a ``(3, 3)`` array of vertex rows."""
    configuration = calculate_vertex_configuration(vertex_sdf)
    edge_coords = interpolate_edge_vertices(vertex_coords, vertex_sdf)
    return [edge_coords[list(edges)].copy() for edges in triangle_edges(configuration)]


def _unit_normal(p0: np.ndarray, p1: np.ndarray, p2: np.ndarray) -> np.ndarray:
    normal = np.cross(p1 - p0, p2 - p0)
    length = float(np.linalg.norm(normal))
    return normal / length if length > 0.0 else normal


def mesh_cube(vertex_coords, vertex_sdf, mesh: Mesh) -> int:
    """Append the cube's triangles to ``mesh`` and return how many were added.

    Every triangle gets three new vertices, in reversed table order, three
    consecutive indices and its face normal on each vertex.
    """
    configuration = calculate_vertex_configuration(vertex_sdf)
    if configuration == 0:
        return 0

    edge_coords = interpolate_edge_vertices(vertex_coords, vertex_sdf)
    triangles = triangle_edges(configuration)
    for e0, e1, e2 in triangles:
        p0 = edge_coords[e2].copy()
        p1 = edge_coords[e1].copy()
        p2 = edge_coords[e0].copy()
        next_index = len(mesh.vertices)
        mesh.vertices.extend((p0, p1, p2))
        mesh.indices.extend((next_index, next_index + 1, next_index + 2))
        normal = _unit_normal(p0, p1, p2)
        mesh.normals.extend((normal.copy(), normal.copy(), normal.copy()))
    return len(triangles)