import itertools
import math

import pytest

from voxelmap.neighbors import neighbor_offsets


@pytest.mark.parametrize("connectivity", [6, 18, 26])
def test_count_and_uniqueness(connectivity):
    pairs = neighbor_offsets(connectivity)
    assert len(pairs) == connectivity
    offsets = [offset for offset, _ in pairs]
    assert len(set(offsets)) == connectivity
    assert (0, 0, 0) not in offsets


@pytest.mark.parametrize("connectivity", [6, 18, 26])
def test_distance_is_offset_length(connectivity):
    for offset, distance in neighbor_offsets(connectivity):
        assert distance == pytest.approx(math.sqrt(sum(c * c for c in offset)))


def test_face_neighbors_have_one_nonzero_component():
    for offset, _ in neighbor_offsets(6):
        assert sum(1 for c in offset if c != 0) == 1


def test_eighteen_neighborhood_excludes_corners():
    for offset, _ in neighbor_offsets(18):
        assert sum(1 for c in offset if c != 0) <= 2


def test_full_neighborhood_covers_cube():
    expected = {p for p in itertools.product((-1, 0, 1), repeat=3) if p != (0, 0, 0)}
    assert {offset for offset, _ in neighbor_offsets(26)} == expected


def test_smaller_neighborhoods_are_prefixes():
    full = neighbor_offsets(26)
    assert neighbor_offsets(6) == full[:6]
    assert neighbor_offsets(18) == full[:18]


def test_default_is_full():
    assert neighbor_offsets() == neighbor_offsets(26)


@pytest.mark.parametrize("connectivity", [0, 4, 8, 27])
def test_invalid_connectivity(connectivity):
    with pytest.raises(ValueError):
        neighbor_offsets(connectivity)