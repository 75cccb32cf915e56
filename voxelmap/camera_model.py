"""View frustum of a camera, used to test points for visibility."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from voxelmap.geometry import Transformation

logger = logging.getLogger(__name__)

# Corner pairs of the 12 frustum edges, as drawn by bounding_lines().
_FRUSTUM_EDGES = (
    (0, 1), (1, 2), (2, 3), (3, 0),
    (4, 5), (5, 6), (6, 7), (7, 4),
    (0, 4), (1, 5), (3, 7), (2, 6),
)

# Corner triplets defining near, far, left, right, top and bottom planes.
_PLANE_CORNERS = (
    (0, 2, 1),
    (4, 5, 6),
    (3, 6, 2),
    (0, 5, 4),
    (3, 4, 7),
    (2, 6, 5),
)


@dataclass(eq=False)
class Plane:
    """A plane ``normal . p = distance``; the inside is where ``normal . p >= distance``."""

    normal: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    distance: float = 0.0

    def __post_init__(self) -> None:
        self.normal = np.asarray(self.normal, dtype=float).reshape(3)
        self.distance = float(self.distance)

    @classmethod
    def from_points(cls, p1, p2, p3) -> "Plane":
        """Plane through three points, normal along ``(p2 - p1) x (p3 - p1)``."""
        a = np.asarray(p1, dtype=float).reshape(3)
        b = np.asarray(p2, dtype=float).reshape(3)
        c = np.asarray(p3, dtype=float).reshape(3)
        cross = np.cross(b - a, c - a)
        length = float(np.linalg.norm(cross))
        if length == 0.0:
            raise ValueError("points are collinear and define no plane")
        normal = cross / length
        return cls(normal, float(np.dot(normal, a)))

    def is_point_inside(self, point) -> bool:
        return float(np.dot(np.asarray(point, dtype=float).reshape(3), self.normal)) >= self.distance


class CameraModel:
    """A camera frustum looking along its positive x axis."""

    def __init__(self) -> None:
        self._initialized = False
        self._corners_c: list[np.ndarray] = []
        self._bounding_planes: list[Plane] = []
        self._t_g_c = Transformation()
        self._t_c_b = Transformation()
        self._aabb_min = np.zeros(3)
        self._aabb_max = np.zeros(3)

    def set_intrinsics_from_focal_length(self, resolution, focal_length: float,
                                         min_distance: float, max_distance: float) -> None:
        """Set the frustum from image resolution ``(width, height)`` and focal length."""
        width, height = (float(v) for v in resolution)
        horizontal_fov = 2.0 * math.atan(width / (2.0 * focal_length))
        vertical_fov = 2.0 * math.atan(height / (2.0 * focal_length))
        self.set_intrinsics_from_fov(horizontal_fov, vertical_fov, min_distance, max_distance)

    def set_intrinsics_from_fov(self, horizontal_fov: float, vertical_fov: float,
                                min_distance: float, max_distance: float) -> None:
        """Set the frustum from fields of view (radians) and depth limits."""
        tan_h = math.tan(horizontal_fov / 2.0)
        tan_v = math.tan(vertical_fov / 2.0)
        corners = []
        for depth in (min_distance, max_distance):
            for sy, sz in ((1, 1), (1, -1), (-1, -1), (-1, 1)):
                corners.append(np.array([depth, sy * depth * tan_h, sz * depth * tan_v]))
        self._corners_c = corners
        self._initialized = True

    def set_extrinsics(self, T_C_B: Transformation) -> None:
        """Set the transformation from body frame to camera frame."""
        self._t_c_b = T_C_B

    def camera_pose(self) -> Transformation:
        return self._t_g_c

    def body_pose(self) -> Transformation:
        return self._t_g_c * self._t_c_b

    def set_camera_pose(self, cam_pose: Transformation) -> None:
        self._t_g_c = cam_pose
        self._calculate_bounding_planes()

    def set_body_pose(self, body_pose: Transformation) -> None:
        self.set_camera_pose(body_pose * self._t_c_b.inverse())

    def _corners_global(self) -> list[np.ndarray]:
        return [self._t_g_c.transform(corner) for corner in self._corners_c]

    def _calculate_bounding_planes(self) -> None:
        if not self._initialized:
            return
        corners_g = self._corners_global()
        self._bounding_planes = [
            Plane.from_points(corners_g[a], corners_g[b], corners_g[c])
            for a, b, c in _PLANE_CORNERS
        ]
        for name, plane in zip(("near", "far", "left", "right", "top", "bottom"),
                               self._bounding_planes):
            logger.debug("%s plane: normal %s distance %s", name, plane.normal, plane.distance)
        stacked = np.vstack(corners_g)
        self._aabb_min = stacked.min(axis=0)
        self._aabb_max = stacked.max(axis=0)

    def aabb(self) -> tuple[np.ndarray, np.ndarray]:
        """Return the axis-aligned bounding box ``(min, max)`` of the frustum."""
        return self._aabb_min.copy(), self._aabb_max.copy()

    def is_point_in_view(self, point) -> bool:
        """True if ``point`` lies inside every bounding plane."""
        return all(plane.is_point_inside(point) for plane in self._bounding_planes)

    def _require_intrinsics(self) -> None:
        if not self._initialized:
            raise RuntimeError("camera intrinsics have not been set")

    def bounding_lines(self) -> list[np.ndarray]:
        """Return the 12 frustum edges as 24 points, two per line segment."""
        self._require_intrinsics()
        corners_g = self._corners_global()
        return [corners_g[i].copy() for edge in _FRUSTUM_EDGES for i in edge]

    def far_plane_points(self) -> list[np.ndarray]:
        """Return three corners of the far plane in the global frame."""
        self._require_intrinsics()
        return [self._t_g_c.transform(self._corners_c[i]) for i in (4, 5, 6)]