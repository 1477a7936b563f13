# pylint: skip-file
# type: ignore

import pytest
import numpy as np

from accipiter.resample.filters import ResampleFilter, list_filters
from accipiter.resample.weights import WeightEntry, WeightTable, build_weight_table
from accipiter.utils.utils_errors import InvalidDimension


EXTENTS = [(1, 1), (1, 7), (4, 2), (5, 5), (7, 3), (10, 23), (64, 9)]


@pytest.mark.parametrize("name", list_filters())
@pytest.mark.parametrize("source_extent, dest_extent", EXTENTS)
def test_weights_sum_to_one(name, source_extent, dest_extent):
    table = build_weight_table(source_extent, dest_extent, name)

    assert len(table) == dest_extent
    assert table.source_extent == source_extent

    for entry in table:
        assert 0 <= entry.low < entry.high <= source_extent
        assert len(entry.weights) == entry.high - entry.low
        assert entry.weights.sum() == pytest.approx(1.0, abs=1e-9)

def test_box_halving():
    table = build_weight_table(4, 2, "box")

    assert table[0].low == 0
    assert table[0].high == 2
    assert np.allclose(table[0].weights, [0.5, 0.5])

    assert table[1].low == 2
    assert table[1].high == 4
    assert np.allclose(table[1].weights, [0.5, 0.5])

def test_box_counts_every_sample_once():
    table = build_weight_table(5, 2, "box")

    dense = np.zeros((2, 5))
    for idx, entry in enumerate(table):
        dense[idx, entry.low:entry.high] = entry.weights

    # Sample 2 lies on the boundary between both outputs and goes to the second
    assert np.allclose(dense[0], [0.5, 0.5, 0.0, 0.0, 0.0])
    assert np.allclose(dense[1], [0.0, 0.0, 1.0 / 3.0, 1.0 / 3.0, 1.0 / 3.0])
    assert np.count_nonzero(dense, axis=0).tolist() == [1, 1, 1, 1, 1]

def test_linear_doubling():
    table = build_weight_table(2, 4, "linear")

    # The first destination sample falls left of the first source center
    assert table[0].low == 0
    assert table[0].high == 1
    assert np.allclose(table[0].weights, [1.0])

    assert table[1].low == 0
    assert table[1].high == 2
    assert np.allclose(table[1].weights, [0.75, 0.25])

    assert table[3].low == 1
    assert table[3].high == 2

def test_nearest_identity():
    table = build_weight_table(6, 6, "nearest_neighbor")

    for idx, entry in enumerate(table):
        assert entry == WeightEntry(idx, idx + 1, entry.weights)
        assert entry.weights.tolist() == [1.0]

def test_nearest_downscale_picks_single_sample():
    table = build_weight_table(10, 3, "nearest")

    assert table.max_taps == 1
    assert table.low.tolist() == [1, 5, 8]

def test_nearest_upscale_repeats_samples():
    table = build_weight_table(2, 6, "nearest")

    assert table.low.tolist() == [0, 0, 0, 1, 1, 1]

def test_same_size_lanczos_is_identity():
    table = build_weight_table(9, 9, "lanczos")

    for idx, entry in enumerate(table):
        position = idx - entry.low
        assert entry.weights[position] == pytest.approx(1.0, abs=1e-9)

def test_downscale_widens_support():
    table = build_weight_table(100, 10, "lanczos")

    # Lanczos has support 3, stretched by a factor 10
    assert table.max_taps >= 59

def test_tiny_support_falls_back_to_closest_sample():
    tiny = ResampleFilter(lambda x: np.ones_like(x), 0.01, "tiny")
    table = build_weight_table(4, 8, tiny)

    for entry in table:
        assert entry.high - entry.low == 1
        assert entry.weights.tolist() == [1.0]

def test_table_layout():
    table = build_weight_table(7, 3, "catmull_rom")

    assert isinstance(table, WeightTable)
    assert table.dest_extent == 3
    assert table.weights.shape == (3, table.max_taps)
    assert table.low.dtype == np.int64
    assert "WeightTable" in repr(table)

def test_invalid_extents():
    with pytest.raises(InvalidDimension):
        build_weight_table(0, 4)

    with pytest.raises(InvalidDimension):
        build_weight_table(4, -2)

    with pytest.raises(TypeError):
        build_weight_table(4.0, 2)

    with pytest.raises(ValueError):
        build_weight_table(4, 2, "unknown")
