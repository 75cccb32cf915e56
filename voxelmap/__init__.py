"""Voxel map meshing, mesh layers, geometry, camera frusta, simulation, evaluation, framing and timing."""

__version__ = "0.1.0"