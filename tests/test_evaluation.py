import pytest

from voxelmap.evaluation import (
    VoxelEvaluationMode,
    VoxelEvaluationResult,
    compute_voxel_error,
    is_observed_voxel,
    set_voxel_sdf,
    set_voxel_weight,
    voxel_sdf,
)
from voxelmap.voxels import EsdfVoxel, OccupancyVoxel, TsdfVoxel

Mode = VoxelEvaluationMode
Result = VoxelEvaluationResult


def test_tsdf_observed_threshold():
    assert is_observed_voxel(TsdfVoxel(weight=0.0)) is False
    assert is_observed_voxel(TsdfVoxel(weight=1e-7)) is False
    assert is_observed_voxel(TsdfVoxel(weight=1e-5)) is True


def test_esdf_observed_flag():
    assert is_observed_voxel(EsdfVoxel(observed=True)) is True
    assert is_observed_voxel(EsdfVoxel(observed=False)) is False


def test_other_voxel_types_unobserved():
    assert is_observed_voxel(OccupancyVoxel(observed=True)) is False


def test_evaluated_error_is_test_minus_gt():
    gt = TsdfVoxel(distance=0.5, weight=1.0)
    test = TsdfVoxel(distance=0.25, weight=1.0)
    result, error = compute_voxel_error(gt, test, Mode.EVALUATE_ALL_VOXELS)
    assert result is Result.EVALUATED
    assert error == pytest.approx(test.distance - gt.distance)
    assert error < 0


def test_no_overlap_when_unobserved():
    gt = TsdfVoxel(distance=0.5, weight=1.0)
    test = TsdfVoxel(distance=0.25, weight=0.0)
    assert compute_voxel_error(gt, test, Mode.EVALUATE_ALL_VOXELS) == (
        Result.NO_OVERLAP,
        0.0,
    )


@pytest.mark.parametrize(
    "mode, gt_dist, test_dist, expected",
    [
        (Mode.EVALUATE_ALL_VOXELS, -0.5, -0.5, Result.EVALUATED),
        (Mode.IGNORE_ERROR_BEHIND_TEST_SURFACE, 0.5, -0.5, Result.IGNORED),
        (Mode.IGNORE_ERROR_BEHIND_TEST_SURFACE, -0.5, 0.5, Result.EVALUATED),
        (Mode.IGNORE_ERROR_BEHIND_GT_SURFACE, -0.5, 0.5, Result.IGNORED),
        (Mode.IGNORE_ERROR_BEHIND_GT_SURFACE, 0.5, -0.5, Result.EVALUATED),
        (Mode.IGNORE_ERROR_BEHIND_ALL_SURFACES, 0.5, -0.5, Result.IGNORED),
        (Mode.IGNORE_ERROR_BEHIND_ALL_SURFACES, -0.5, 0.5, Result.IGNORED),
        (Mode.IGNORE_ERROR_BEHIND_ALL_SURFACES, 0.5, 0.5, Result.EVALUATED),
    ],
)
def test_modes_for_esdf(mode, gt_dist, test_dist, expected):
    gt = EsdfVoxel(distance=gt_dist, observed=True)
    test = EsdfVoxel(distance=test_dist, observed=True)
    result, error = compute_voxel_error(gt, test, mode)
    assert result is expected
    if expected is not Result.EVALUATED:
        assert error == 0.0


def test_mismatched_types_raise():
    with pytest.raises(TypeError):
        compute_voxel_error(TsdfVoxel(weight=1.0), EsdfVoxel(observed=True),
                            Mode.EVALUATE_ALL_VOXELS)


def test_unsupported_type_raises():
    with pytest.raises(TypeError):
        compute_voxel_error(OccupancyVoxel(), OccupancyVoxel(), Mode.EVALUATE_ALL_VOXELS)


def test_sdf_round_trip():
    for voxel in (TsdfVoxel(), EsdfVoxel()):
        set_voxel_sdf(voxel, 1.25)
        assert voxel_sdf(voxel) == 1.25


def test_sdf_unsupported():
    with pytest.raises(TypeError):
        voxel_sdf(OccupancyVoxel())
    with pytest.raises(TypeError):
        set_voxel_sdf(OccupancyVoxel(), 1.0)


def test_set_weight():
    tsdf = TsdfVoxel()
    set_voxel_weight(tsdf, 3.0)
    assert tsdf.weight == 3.0
    esdf = EsdfVoxel()
    set_voxel_weight(esdf, 0.5)
    assert esdf.observed is True
    set_voxel_weight(esdf, 0.0)
    assert esdf.observed is False
    with pytest.raises(TypeError):
        set_voxel_weight(OccupancyVoxel(), 1.0)