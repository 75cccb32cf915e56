import pytest

from voxelmap.mesh import Color
from voxelmap.voxels import EsdfVoxel, OccupancyVoxel, TsdfVoxel, is_same_voxel


def test_identical_tsdf_voxels_are_same():
    a = TsdfVoxel(distance=0.3, weight=2.0, color=Color(10, 20, 30, 255))
    b = TsdfVoxel(distance=0.3, weight=2.0, color=Color(10, 20, 30, 255))
    assert is_same_voxel(a, b) is True


def test_tsdf_distance_within_tolerance_is_same():
    a = TsdfVoxel(distance=0.3, weight=1.0)
    b = TsdfVoxel(distance=0.3 + 1e-12, weight=1.0)
    assert is_same_voxel(a, b) is True


def test_tsdf_distance_difference_detected():
    a = TsdfVoxel(distance=0.3, weight=1.0)
    b = TsdfVoxel(distance=0.31, weight=1.0)
    assert is_same_voxel(a, b) is False


def test_tsdf_weight_difference_detected():
    assert is_same_voxel(TsdfVoxel(weight=1.0), TsdfVoxel(weight=2.0)) is False


def test_tsdf_color_difference_detected():
    a = TsdfVoxel(color=Color(1, 2, 3, 4))
    b = TsdfVoxel(color=Color(1, 2, 3, 5))
    assert is_same_voxel(a, b) is False


@pytest.mark.parametrize(
    "changes",
    [
        {"distance": 1.5},
        {"observed": True},
        {"in_queue": True},
        {"fixed": True},
        {"parent": (0, 1, 0)},
    ],
)
def test_esdf_each_field_matters(changes):
    base = EsdfVoxel()
    other = EsdfVoxel(**changes)
    assert is_same_voxel(base, EsdfVoxel()) is True
    assert is_same_voxel(base, other) is False


def test_esdf_parent_compared_by_components():
    a = EsdfVoxel(parent=(1, -1, 0))
    b = EsdfVoxel(parent=(1, -1, 0))
    assert is_same_voxel(a, b) is True


def test_occupancy_voxels():
    a = OccupancyVoxel(probability_log=0.7, observed=True)
    assert is_same_voxel(a, OccupancyVoxel(probability_log=0.7, observed=True)) is True
    assert is_same_voxel(a, OccupancyVoxel(probability_log=0.7, observed=False)) is False
    assert is_same_voxel(a, OccupancyVoxel(probability_log=0.8, observed=True)) is False


def test_different_types_raise():
    with pytest.raises(TypeError):
        is_same_voxel(TsdfVoxel(), EsdfVoxel())


def test_unsupported_type_raises():
    with pytest.raises(TypeError):
        is_same_voxel(object(), object())


def test_defaults_are_unobserved():
    assert TsdfVoxel().weight == 0.0
    assert EsdfVoxel().observed is False
    assert OccupancyVoxel().observed is False