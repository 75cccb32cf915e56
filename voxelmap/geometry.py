"""Rigid-body rotations and transformations in three dimensions."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

_PARALLEL_TOLERANCE = 1e-12


def _as_vector(value) -> np.ndarray:
    return np.asarray(value, dtype=float).reshape(3)


@dataclass(frozen=True)
class Rotation:
    """A rotation stored as a unit quaternion ``w + xi + yj + zk``."""

    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_quaternion(cls, w: float, x: float, y: float, z: float) -> "Rotation":
        """Build a rotation from quaternion components, normalising them."""
        norm = float(np.sqrt(w * w + x * x + y * y + z * z))
        if norm == 0.0:
            raise ValueError("quaternion must not be zero")
        return cls(w / norm, x / norm, y / norm, z / norm)

    @classmethod
    def from_two_vectors(cls, source, target) -> "Rotation":
        """Return the smallest rotation taking the direction of ``source`` to ``target``."""
        v0 = _as_vector(source)
        v1 = _as_vector(target)
        n0 = float(np.linalg.norm(v0))
        n1 = float(np.linalg.norm(v1))
        if n0 == 0.0 or n1 == 0.0:
            raise ValueError("vectors must not be zero")
        v0 = v0 / n0
        v1 = v1 / n1
        c = float(np.dot(v0, v1))

        if c < -1.0 + _PARALLEL_TOLERANCE:
            # Opposite directions: rotate half a turn about any perpendicular axis.
            c = max(c, -1.0)
            _, _, vt = np.linalg.svd(np.vstack([v0, v1]))
            axis = vt[2]
            w2 = (1.0 + c) * 0.5
            vec = axis * np.sqrt(1.0 - w2)
            return cls.from_quaternion(np.sqrt(w2), *vec)

        axis = np.cross(v0, v1)
        s = np.sqrt((1.0 + c) * 2.0)
        vec = axis / s
        return cls.from_quaternion(s * 0.5, *vec)

    @property
    def vector(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def as_matrix(self) -> np.ndarray:
        """Return the 3x3 rotation matrix."""
        return np.column_stack([self.rotate(axis) for axis in np.eye(3)])

    def rotate(self, vector) -> np.ndarray:
        """Apply the rotation to ``vector``."""
        v = _as_vector(vector)
        q = self.vector
        t = 2.0 * np.cross(q, v)
        return v + self.w * t + np.cross(q, t)

    def inverse(self) -> "Rotation":
        return Rotation(self.w, -self.x, -self.y, -self.z)

    def __mul__(self, other):
        if isinstance(other, Rotation):
            q1 = self.vector
            q2 = other.vector
            w = self.w * other.w - float(np.dot(q1, q2))
            vec = self.w * q2 + other.w * q1 + np.cross(q1, q2)
            return Rotation.from_quaternion(w, *vec)
        return self.rotate(other)


@dataclass(frozen=True, eq=False)
class Transformation:
    """A rotation followed by a translation: ``p -> R p + t``."""

    rotation: Rotation = field(default_factory=Rotation)
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _as_vector(self.position).copy())

    def inverse(self) -> "Transformation":
        inverse_rotation = self.rotation.inverse()
        return Transformation(inverse_rotation, -inverse_rotation.rotate(self.position))

    def transform(self, point) -> np.ndarray:
        """Map ``point`` through this transformation."""
        return self.rotation.rotate(point) + self.position

    def __mul__(self, other):
        if isinstance(other, Transformation):
            return Transformation(
                self.rotation * other.rotation,
                self.rotation.rotate(other.position) + self.position,
            )
        return self.transform(other)

    def __repr__(self) -> str:
        return f"Transformation(rotation={self.rotation!r}, position={self.position.tolist()})"