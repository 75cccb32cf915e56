"""A world of simple objects that can be ray cast to simulate depth sensors."""

from __future__ import annotations

import abc
import logging
import math
from typing import Optional

import numpy as np

from voxelmap.geometry import Rotation, Transformation
from voxelmap.mesh import Color

logger = logging.getLogger(__name__)

_NOMINAL_VIEW_DIRECTION = np.array([1.0, 0.0, 0.0])


class SceneObject(abc.ABC):
    """A solid in the simulated world."""

    def __init__(self, color: Color = Color()) -> None:
        self.color = color

    @abc.abstractmethod
    def distance_to_point(self, point) -> float:
        """Signed distance from ``point`` to the object's surface."""

    @abc.abstractmethod
    def ray_intersection(self, origin, direction, max_dist: float
                         ) -> Optional[tuple[np.ndarray, float]]:
        """Return ``(intersection, distance)`` of the ray with the object, or None."""


def _half(value: int) -> int:
    return int(value / 2)


class SimulationWorld:
    """A collection of objects inside axis-aligned bounds."""

    def __init__(self, seed: int = 0) -> None:
        self.min_bound = np.array([-5.0, -5.0, -1.0])
        self.max_bound = np.array([5.0, 5.0, 9.0])
        self.objects: list[SceneObject] = []
        self._rng = np.random.default_rng(seed)

    def set_bounds(self, min_bound, max_bound) -> None:
        self.min_bound = np.asarray(min_bound, dtype=float).reshape(3)
        self.max_bound = np.asarray(max_bound, dtype=float).reshape(3)

    def add_object(self, obj: SceneObject) -> None:
        self.objects.append(obj)

    def clear(self) -> None:
        self.objects.clear()

    def distance_to_point(self, coords, max_dist: float) -> float:
        """Smallest distance from ``coords`` to any object, capped at ``max_dist``."""
        return min((obj.distance_to_point(coords) for obj in self.objects),
                   default=max_dist, key=float) if self.objects and min(
            obj.distance_to_point(coords) for obj in self.objects) < max_dist else max_dist

    def _cast(self, view_origin: np.ndarray, ray_direction: np.ndarray, max_dist: float):
        best = None
        for obj in self.objects:
            hit = obj.ray_intersection(view_origin, ray_direction, max_dist)
            if hit is None:
                continue
            intersect, dist = hit
            if best is None or dist < best[1]:
                best = (np.asarray(intersect, dtype=float).reshape(3), float(dist), obj.color)
        return best

    def _rays(self, view_direction, camera_res, fov_h_rad: float):
        res_x, res_y = (int(v) for v in camera_res)
        focal_length = res_x / (2.0 * math.tan(fov_h_rad / 2.0))
        ray_rotation = Rotation.from_two_vectors(_NOMINAL_VIEW_DIRECTION, view_direction)
        half_x = _half(res_x)
        half_y = _half(res_y)
        for u in range(-half_x, half_x):
            for v in range(-half_y, half_y):
                camera_ray = np.array([1.0, u / focal_length, v / focal_length])
                yield ray_rotation.rotate(camera_ray / np.linalg.norm(camera_ray))

    def pointcloud_from_transform(self, pose: Transformation, camera_res,
                                  fov_h_rad: float, max_dist: float):
        """Simulate a scan from ``pose``, which looks along its x axis."""
        view_direction = pose.rotation.rotate(_NOMINAL_VIEW_DIRECTION)
        return self.pointcloud_from_viewpoint(pose.position, view_direction, camera_res,
                                              fov_h_rad, max_dist)

    def pointcloud_from_viewpoint(self, view_origin, view_direction, camera_res,
                                  fov_h_rad: float, max_dist: float):
        """Return ``(points, colors)`` of the closest hits of each camera ray."""
        origin = np.asarray(view_origin, dtype=float).reshape(3)
        points: list[np.ndarray] = []
        colors: list[Color] = []
        for ray_direction in self._rays(view_direction, camera_res, fov_h_rad):
            hit = self._cast(origin, ray_direction, max_dist)
            if hit is None:
                continue
            intersect, _, color = hit
            if np.isnan(intersect).any():
                logger.error("Simulation ray intersect is NaN!")
                continue
            points.append(intersect)
            colors.append(color)
        return points, colors

    def noisy_pointcloud_from_transform(self, pose: Transformation, camera_res,
                                        fov_h_rad: float, max_dist: float,
                                        noise_sigma: float):
        """Simulate a noisy scan from ``pose``, which looks along its z axis."""
        view_direction = pose.rotation.rotate([0.0, 0.0, 1.0])
        return self.noisy_pointcloud_from_viewpoint(pose.position, view_direction, camera_res,
                                                    fov_h_rad, max_dist, noise_sigma)

    def noisy_pointcloud_from_viewpoint(self, view_origin, view_direction, camera_res,
                                        fov_h_rad: float, max_dist: float,
                                        noise_sigma: float):
        """Like :meth:`pointcloud_from_viewpoint` with Gaussian noise on each range."""
        origin = np.asarray(view_origin, dtype=float).reshape(3)
        points: list[np.ndarray] = []
        colors: list[Color] = []
        for ray_direction in self._rays(view_direction, camera_res, fov_h_rad):
            hit = self._cast(origin, ray_direction, max_dist)
            if hit is None:
                continue
            intersect, ray_dist, color = hit
            if np.isnan(intersect).any():
                logger.error("Simulation ray intersect is NaN!")
                continue
            ray_dist = max(ray_dist + self.noise(noise_sigma), 0.0)
            points.append(origin + ray_dist * ray_direction)
            colors.append(color)
        return points, colors

    def noise(self, noise_sigma: float) -> float:
        """Draw one sample from a zero-mean normal distribution."""
        if noise_sigma < 0.0:
            raise ValueError(f"noise sigma must not be negative, got {noise_sigma}")
        return float(self._rng.normal(0.0, noise_sigma))