# pylint: skip-file
# type: ignore

import pytest
import numpy as np

import accipiter as acc


def test_top_level_exports():
    for name in [
        "PixelBuffer", "AccipiterError", "InvalidDimension", "InvalidKernel", "UnsupportedEdgePolicy",
        "set_parallelism", "get_parallelism", "partition_rows", "parallel_for",
        "ResampleFilter", "Filter", "get_filter", "list_filters", "gaussian_filter", "build_weight_table",
        "resize", "fit", "fill", "thumbnail", "crop_anchor", "Anchor",
        "EdgePolicy", "convolve", "convolve_3x3", "convolve_5x5", "blur", "sharpen",
    ]:
        assert hasattr(acc, name), name

    assert isinstance(acc.__version__, str)

def test_private_helpers_are_not_exported():
    assert not hasattr(acc, "_type_check")
    assert not hasattr(acc, "_resample")

def test_scenario_downscale_gray():
    image = acc.PixelBuffer.new(4, 4, fill=(128, 128, 128, 255))
    result = acc.resize(image, 2, 2, acc.Filter.BOX)

    assert result.size == (2, 2)
    assert result.pixels[0, 0].tolist() == [128, 128, 128, 255]

def test_scenario_identity_convolution():
    rng = np.random.default_rng(7)
    image = acc.PixelBuffer(rng.integers(0, 256, size=(5, 6, 4), dtype=np.uint8))

    for edge in acc.EdgePolicy:
        assert acc.convolve_3x3(image, [0, 0, 0, 0, 1, 0, 0, 0, 0], edge=edge) == image

def test_scenario_pipeline():
    rng = np.random.default_rng(3)
    image = acc.PixelBuffer.from_array(rng.random((48, 64, 3)))

    acc.set_parallelism(3)

    thumb = acc.thumbnail(image, 16, 16, "catmull_rom")
    soft = acc.blur(thumb, 1.0)
    crisp = acc.sharpen(soft, 1.0)
    edges = acc.convolve(crisp, [-1, -1, -1, -1, 8, -1, -1, -1, -1], absolute=True, preserve_alpha=True)

    assert edges.size == (16, 16)
    assert np.all(edges.pixels[:, :, 3] == 255)
    assert image.size == (64, 48)
