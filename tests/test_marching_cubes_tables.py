import pytest

from voxelmap.marching_cubes_tables import (
    EDGE_INDEX_PAIRS,
    NUM_CONFIGURATIONS,
    TRIANGLE_TABLE,
    triangle_edges,
)


def _crossing_edges(configuration):
    inside = {corner for corner in range(8) if configuration >> corner & 1}
    return {
        edge
        for edge, (a, b) in enumerate(EDGE_INDEX_PAIRS)
        if (a in inside) != (b in inside)
    }


def test_table_has_one_row_per_configuration():
    rows = [triangle_edges(configuration) for configuration in range(NUM_CONFIGURATIONS)]
    assert len(rows) == len(TRIANGLE_TABLE) == 256
    with pytest.raises(ValueError):
        triangle_edges(NUM_CONFIGURATIONS)


def test_edge_pairs_match_source():
    assert len(EDGE_INDEX_PAIRS) == 12
    assert EDGE_INDEX_PAIRS[0] == (0, 1)
    assert EDGE_INDEX_PAIRS[8] == (0, 4)
    assert EDGE_INDEX_PAIRS[11] == (3, 7)
    # Corner 0 alone inside: the triangle lies on the edges that touch corner 0.
    (triangle,) = triangle_edges(1)
    assert sorted(triangle) == [0, 3, 8]
    assert all(0 in EDGE_INDEX_PAIRS[edge] for edge in triangle)


def test_edge_pairs_join_adjacent_corners():
    for a, b in EDGE_INDEX_PAIRS:
        assert a != b
        assert 0 <= a < 8 and 0 <= b < 8
    assert len({frozenset(pair) for pair in EDGE_INDEX_PAIRS}) == 12
    # Each corner alone inside gives one triangle on its three edges.
    for corner in range(8):
        triangles = triangle_edges(1 << corner)
        assert len(triangles) == 1
        assert all(corner in EDGE_INDEX_PAIRS[edge] for edge in triangles[0])


def test_known_rows():
    assert triangle_edges(1) == ((0, 8, 3),)
    assert triangle_edges(3) == ((1, 8, 3), (9, 8, 1))
    assert triangle_edges(254) == ((0, 3, 8),)


def test_empty_and_full_cubes_have_no_triangles():
    assert triangle_edges(0) == ()
    assert triangle_edges(255) == ()


@pytest.mark.parametrize("configuration", range(256))
def test_triangles_use_exactly_the_crossing_edges(configuration):
    triangles = triangle_edges(configuration)
    used = {edge for triangle in triangles for edge in triangle}
    assert used == _crossing_edges(configuration)


@pytest.mark.parametrize("configuration", range(256))
def test_triangles_are_well_formed(configuration):
    triangles = triangle_edges(configuration)
    assert len(triangles) <= 5
    for triangle in triangles:
        assert len(triangle) == 3
        assert len(set(triangle)) == 3
        assert all(0 <= edge < 12 for edge in triangle)


def test_complementary_configurations_share_edges():
    for configuration in range(256):
        used = {e for t in triangle_edges(configuration) for e in t}
        used_complement = {e for t in triangle_edges(255 - configuration) for e in t}
        assert used == used_complement


def test_lookup_matches_table():
    for configuration in range(256):
        assert triangle_edges(configuration) is TRIANGLE_TABLE[configuration]


@pytest.mark.parametrize("bad", [-1, 256, 1000])
def test_out_of_range_configuration_raises(bad):
    with pytest.raises(ValueError):
        triangle_edges(bad)


def test_non_integer_configuration_raises():
    with pytest.raises(TypeError):
        triangle_edges(1.5)