import numpy as np
import pytest

from voxelmap.marching_cubes import mesh_cube
from voxelmap.mesh import Color
from voxelmap.mesh_layer import MeshLayer

UNIT_CORNERS = np.array(
    [
        [0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
        [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1],
    ],
    dtype=float,
)


def _plane_sdf(corners):
    return [c[2] - 0.5 for c in corners]


def _fill(layer, index, offset):
    mesh = layer.allocate_mesh(index)
    corners = UNIT_CORNERS + np.asarray(offset, dtype=float)
    mesh_cube(corners, _plane_sdf(corners), mesh)
    return mesh


def test_block_index_floors_coordinates():
    layer = MeshLayer(2.0)
    assert layer.block_index_from_coordinates([0.5, -0.5, 3.9]) == (0, -1, 1)


def test_block_size_must_be_positive():
    with pytest.raises(ValueError):
        MeshLayer(0.0)


def test_allocate_returns_same_mesh():
    layer = MeshLayer(1.5)
    first = layer.allocate_mesh((1, 2, -3))
    assert layer.allocate_mesh((1, 2, -3)) is first
    assert len(layer) == 1
    np.testing.assert_allclose(first.origin, np.array([1, 2, -3]) * 1.5)
    assert first.block_size == 1.5


def test_allocate_by_coordinates_contains_point():
    layer = MeshLayer(2.0)
    point = np.array([3.1, -0.2, 7.9])
    mesh = layer.allocate_mesh_by_coordinates(point)
    assert np.all(mesh.origin <= point)
    assert np.all(point < mesh.origin + layer.block_size)
    assert layer.get_mesh_by_coordinates(point) is mesh


def test_allocate_new_mesh_twice_raises():
    layer = MeshLayer(1.0)
    layer.allocate_new_mesh((0, 0, 0))
    with pytest.raises(ValueError):
        layer.allocate_new_mesh((0, 0, 0))


def test_get_missing_mesh_raises():
    layer = MeshLayer(1.0)
    with pytest.raises(KeyError):
        layer.get_mesh((4, 4, 4))


def test_remove_mesh():
    layer = MeshLayer(1.0)
    layer.allocate_mesh((0, 0, 0))
    layer.allocate_mesh((1, 0, 0))
    layer.remove_mesh((0, 0, 0))
    layer.remove_mesh_by_coordinates([1.5, 0.5, 0.5])
    assert len(layer) == 0
    assert layer.allocated_indices() == []


def test_allocated_and_updated_indices():
    layer = MeshLayer(1.0)
    layer.allocate_mesh((0, 0, 0))
    layer.allocate_mesh((0, 1, 0)).updated = True
    assert set(layer.allocated_indices()) == {(0, 0, 0), (0, 1, 0)}
    assert layer.updated_indices() == [(0, 1, 0)]


def test_clear_distant_meshes():
    layer = MeshLayer(1.0)
    near = _fill(layer, (0, 0, 0), (0, 0, 0))
    far = _fill(layer, (10, 0, 0), (10, 0, 0))
    layer.clear_distant_meshes([0, 0, 0], 5.0)
    assert near.has_vertices()
    assert not near.updated
    assert not far.has_vertices()
    assert far.updated
    assert len(layer) == 2


def test_combined_mesh_concatenates_blocks():
    layer = MeshLayer(1.0)
    a = _fill(layer, (0, 0, 0), (0, 0, 0))
    b = _fill(layer, (1, 0, 0), (1, 0, 0))
    layer.allocate_mesh((5, 5, 5))
    combined = layer.combined_mesh()
    assert len(combined) == len(a) + len(b)
    assert combined.indices == list(range(len(combined)))
    assert len(combined.normals) == len(combined)
    assert not combined.has_colors()


def test_combined_mesh_rejects_mixed_blocks():
    layer = MeshLayer(1.0)
    a = _fill(layer, (0, 0, 0), (0, 0, 0))
    _fill(layer, (1, 0, 0), (1, 0, 0))
    a.colorize(Color(1, 2, 3, 4))
    with pytest.raises(ValueError):
        layer.combined_mesh()


def test_combined_mesh_of_empty_layer():
    layer = MeshLayer(1.0)
    layer.allocate_mesh((0, 0, 0))
    assert len(layer.combined_mesh()) == 0


def test_connected_mesh_shares_vertices():
    layer = MeshLayer(1.0)
    _fill(layer, (0, 0, 0), (0, 0, 0))
    _fill(layer, (1, 0, 0), (1, 0, 0))
    combined = layer.combined_mesh()
    connected = layer.connected_mesh(1e-6)
    assert len(connected) < len(combined)
    combined_points = {tuple(np.round(v, 9)) for v in combined.vertices}
    connected_points = [tuple(np.round(v, 9)) for v in connected.vertices]
    assert set(connected_points) == combined_points
    assert len(set(connected_points)) == len(connected_points)
    assert len(connected.indices) == len(combined.indices)


def test_clear_removes_everything():
    layer = MeshLayer(1.0)
    _fill(layer, (0, 0, 0), (0, 0, 0))
    layer.clear()
    assert len(layer) == 0
    assert (0, 0, 0) not in layer