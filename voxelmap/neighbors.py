"""Offsets and distances to the neighbours of a voxel."""

from __future__ import annotations

import math

# Face neighbours first, then edge neighbours, then corner neighbours.
_XS = (-1, 1, 0, 0, 0, 0, -1, -1, 1, 1, 0, 0, 0, 0, -1, 1, -1, 1,
       -1, -1, -1, -1, 1, 1, 1, 1)
_YS = (0, 0, -1, 1, 0, 0, -1, 1, -1, 1, -1, -1, 1, 1, 0, 0, 0, 0,
       -1, -1, 1, 1, -1, -1, 1, 1)
_ZS = (0, 0, 0, 0, -1, 1, 0, 0, 0, 0, -1, 1, -1, 1, -1, -1, 1, 1,
       -1, 1, -1, 1, -1, 1, -1, 1)

OFFSETS: tuple[tuple[int, int, int], ...] = tuple(zip(_XS, _YS, _ZS))

DISTANCES: tuple[float, ...] = (
    (1.0,) * 6 + (math.sqrt(2.0),) * 12 + (math.sqrt(3.0),) * 8
)

CONNECTIVITIES = (6, 18, 26)


def neighbor_offsets(connectivity: int = 26) -> list[tuple[tuple[int, int, int], float]]:
    """Return ``(offset, distance)`` pairs for a 6-, 18- or 26-neighbourhood.

    Distances are in voxel units. Raises ``ValueError`` for any other
    connectivity.
    """
    if connectivity not in CONNECTIVITIES:
        raise ValueError(
            f"connectivity must be one of {CONNECTIVITIES}, got {connectivity}"
        )
    return list(zip(OFFSETS[:connectivity], DISTANCES[:connectivity]))