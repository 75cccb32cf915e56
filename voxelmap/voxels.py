"""Voxel types stored in map layers, and comparison between voxels."""

from __future__ import annotations

from dataclasses import dataclass, field

from voxelmap.mesh import Color

SAME_VOXEL_TOLERANCE = 1e-10


@dataclass
class TsdfVoxel:
    """Truncated signed distance, its integration weight and a colour."""

    distance: float = 0.0
    weight: float = 0.0
    color: Color = field(default_factory=Color)


@dataclass
class EsdfVoxel:
    """Euclidean signed distance with the bookkeeping of its propagation."""

    distance: float = 0.0
    observed: bool = False
    in_queue: bool = False
    fixed: bool = False
    parent: tuple[int, int, int] = (0, 0, 0)


@dataclass
class OccupancyVoxel:
    """Log-odds occupancy probability."""

    probability_log: float = 0.0
    observed: bool = False


def _close(a: float, b: float) -> bool:
    return abs(a - b) < SAME_VOXEL_TOLERANCE


def is_same_voxel(voxel_a, voxel_b) -> bool:
    """True if two voxels of the same type hold the same contents.

    Distances, weights and probabilities are compared within a small
    tolerance; everything else must match exactly. Raises ``TypeError`` for
    voxels of different or unsupported types.
    """
    if type(voxel_a) is not type(voxel_b):
        raise TypeError(
            f"cannot compare {type(voxel_a).__name__} with {type(voxel_b).__name__}"
        )
    if isinstance(voxel_a, TsdfVoxel):
        return (
            _close(voxel_a.distance, voxel_b.distance)
            and _close(voxel_a.weight, voxel_b.weight)
            and voxel_a.color == voxel_b.color
        )
    if isinstance(voxel_a, EsdfVoxel):
        return (
            _close(voxel_a.distance, voxel_b.distance)
            and voxel_a.observed == voxel_b.observed
            and voxel_a.in_queue == voxel_b.in_queue
            and voxel_a.fixed == voxel_b.fixed
            and tuple(voxel_a.parent) == tuple(voxel_b.parent)
        )
    if isinstance(voxel_a, OccupancyVoxel):
        return (
            _close(voxel_a.probability_log, voxel_b.probability_log)
            and voxel_a.observed == voxel_b.observed
        )
    raise TypeError(f"unsupported voxel type {type(voxel_a).__name__}")