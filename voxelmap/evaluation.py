"""Per-voxel comparison of a test map against ground truth."""

from __future__ import annotations

import enum

from voxelmap.voxels import EsdfVoxel, TsdfVoxel

OBSERVED_WEIGHT_THRESHOLD = 1e-6

_SDF_VOXEL_TYPES = (TsdfVoxel, EsdfVoxel)


class VoxelEvaluationMode(enum.Enum):
    """Which voxels behind surfaces are left out of the error."""

    EVALUATE_ALL_VOXELS = enum.auto()
    IGNORE_ERROR_BEHIND_TEST_SURFACE = enum.auto()
    IGNORE_ERROR_BEHIND_GT_SURFACE = enum.auto()
    IGNORE_ERROR_BEHIND_ALL_SURFACES = enum.auto()


class VoxelEvaluationResult(enum.Enum):
    """Outcome of comparing one voxel pair."""

    EVALUATED = enum.auto()
    IGNORED = enum.auto()
    NO_OVERLAP = enum.auto()


def _require_sdf_voxel(voxel) -> None:
    if not isinstance(voxel, _SDF_VOXEL_TYPES):
        raise TypeError(f"{type(voxel).__name__} holds no signed distance")


def is_observed_voxel(voxel) -> bool:
    """True if the voxel holds a measurement.

    TSDF voxels need a weight above a small threshold, ESDF voxels their
    observed flag; voxels of any other type count as unobserved.
    """
    if isinstance(voxel, TsdfVoxel):
        return voxel.weight > OBSERVED_WEIGHT_THRESHOLD
    if isinstance(voxel, EsdfVoxel):
        return bool(voxel.observed)
    return False


def voxel_sdf(voxel) -> float:
    """Return the signed distance of a TSDF or ESDF voxel."""
    _require_sdf_voxel(voxel)
    return voxel.distance


def set_voxel_sdf(voxel, sdf: float) -> None:
    """Set the signed distance of a TSDF or ESDF voxel."""
    _require_sdf_voxel(voxel)
    voxel.distance = float(sdf)


def set_voxel_weight(voxel, weight: float) -> None:
    """Set a TSDF voxel's weight, or mark an ESDF voxel observed if weight > 0."""
    if isinstance(voxel, TsdfVoxel):
        voxel.weight = float(weight)
    elif isinstance(voxel, EsdfVoxel):
        voxel.observed = weight > 0.0
    else:
        raise TypeError(f"{type(voxel).__name__} holds no weight")


def compute_voxel_error(
    voxel_gt, voxel_test, evaluation_mode: VoxelEvaluationMode
) -> tuple[VoxelEvaluationResult, float]:
    """Compare a test voxel with its ground truth.

    Returns the outcome and the error ``test - gt``; the error is 0.0 unless
    the pair was evaluated.
    """
    if type(voxel_gt) is not type(voxel_test):
        raise TypeError(
            f"cannot compare {type(voxel_gt).__name__} with {type(voxel_test).__name__}"
        )
    _require_sdf_voxel(voxel_gt)

    if not is_observed_voxel(voxel_gt) or not is_observed_voxel(voxel_test):
        return VoxelEvaluationResult.NO_OVERLAP, 0.0

    ignore_behind_test = evaluation_mode in (
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_TEST_SURFACE,
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
    )
    ignore_behind_gt = evaluation_mode in (
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_GT_SURFACE,
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
    )
    if (ignore_behind_test and voxel_test.distance < 0.0) or (
        ignore_behind_gt and voxel_gt.distance < 0.0
    ):
        return VoxelEvaluationResult.IGNORED, 0.0

    return VoxelEvaluationResult.EVALUATED, voxel_test.distance - voxel_gt.distance