"""Triangle mesh container used for surface extraction."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

INVALID_BLOCK_SIZE = -1.0


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit channels."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0


def as_point(value: Iterable[float]) -> np.ndarray:
    """Return ``value`` as a float vector of length three."""
    return np.asarray(value, dtype=float).reshape(3)


class Mesh:
    """Vertices, normals, colours and triangle indices of a mesh block.

    Triangles are stored as consecutive triplets in ``indices``.
    """

    def __init__(self, block_size: float | None = None, origin=None) -> None:
        if block_size is None:
            self.block_size = INVALID_BLOCK_SIZE
        else:
            if not block_size > 0.0:
                raise ValueError(f"block size must be positive, got {block_size}")
            self.block_size = float(block_size)
        self.origin = np.zeros(3) if origin is None else as_point(origin)
        self.vertices: list[np.ndarray] = []
        self.indices: list[int] = []
        self.normals: list[np.ndarray] = []
        self.colors: list[Color] = []
        self.updated = False

    def has_vertices(self) -> bool:
        return bool(self.vertices)

    def has_normals(self) -> bool:
        return bool(self.normals)

    def has_colors(self) -> bool:
        return bool(self.colors)

    def has_triangles(self) -> bool:
        return bool(self.indices)

    def __len__(self) -> int:
        return len(self.vertices)

    def __repr__(self) -> str:
        return (
            f"Mesh(vertices={len(self.vertices)}, indices={len(self.indices)}, "
            f"block_size={self.block_size}, updated={self.updated})"
        )

    def clear(self) -> None:
        """Remove all vertices, normals, colours and triangles."""
        self.vertices.clear()
        self.normals.clear()
        self.colors.clear()
        self.indices.clear()

    def clear_triangles(self) -> None:
        self.indices.clear()

    def clear_normals(self) -> None:
        self.normals.clear()

    def clear_colors(self) -> None:
        self.colors.clear()

    def colorize(self, color: Color) -> None:
        """Give every vertex the same colour."""
        self.colors = [color] * len(self.vertices)

    def concatenate(self, other: "Mesh") -> None:
        """Append ``other`` to this mesh, shifting its triangle indices."""
        if other.has_colors() != self.has_colors():
            raise ValueError("meshes disagree on having colors")
        if other.has_normals() != self.has_normals():
            raise ValueError("meshes disagree on having normals")
        if other.has_triangles() != self.has_triangles():
            raise ValueError("meshes disagree on having triangles")

        offset = len(self.vertices)
        self.vertices.extend(np.array(v, dtype=float) for v in other.vertices)
        self.colors.extend(other.colors)
        self.normals.extend(np.array(n, dtype=float) for n in other.normals)
        self.indices.extend(index + offset for index in other.indices)