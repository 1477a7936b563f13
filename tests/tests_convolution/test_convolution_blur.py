# pylint: skip-file
# type: ignore

import pytest
import numpy as np

from accipiter import PixelBuffer
from accipiter.convolution.blur import blur, sharpen
from accipiter.resample.filters import gaussian_filter
from accipiter.resample.resize import resize


def test_blur_constant_image(gray_4x4):
    assert blur(gray_4x4, 1.5) == gray_4x4

def test_blur_reduces_variance(random_image):
    result = blur(random_image, 2.0)

    assert result.size == random_image.size
    assert result.pixels[:, :, 0].astype(np.float64).var() < random_image.pixels[:, :, 0].astype(np.float64).var()

def test_blur_is_gaussian_resize(random_image):
    expected = resize(random_image, random_image.width, random_image.height, gaussian_filter(1.3))

    assert blur(random_image, 1.3) == expected

def test_blur_impulse_spreads_symmetrically(impulse_image):
    result = blur(PixelBuffer(impulse_image), 1.0).pixels[:, :, 0].astype(np.int64)

    assert result[3, 3] < 255
    assert result[3, 2] > 0
    assert result[0, 0] < result[3, 3]

    assert abs(result[3, 2] - result[3, 4]) <= 1
    assert abs(result[2, 3] - result[4, 3]) <= 1
    assert abs(result[3, 2] - result[2, 3]) <= 1

    # Alpha is opaque everywhere and stays that way
    assert np.all(blur(PixelBuffer(impulse_image), 1.0).pixels[:, :, 3] == 255)

def test_blur_non_positive_sigma_returns_copy(random_image):
    with pytest.warns(UserWarning):
        result = blur(random_image, 0.0)

    assert result == random_image
    assert result is not random_image

    with pytest.warns(UserWarning):
        assert blur(random_image, -2) == random_image

def test_blur_deterministic_across_partitions(random_image):
    reference = blur(random_image, 1.7, n_partitions=1)

    for n_partitions in [2, 4, 16]:
        assert blur(random_image, 1.7, n_partitions=n_partitions) == reference

def test_blur_invalid_sigma(gray_4x4):
    with pytest.raises(TypeError):
        blur(gray_4x4, "1.0")

    with pytest.raises(TypeError):
        blur(gray_4x4, float("nan"))

    with pytest.raises(TypeError):
        blur(gray_4x4, None)

def test_sharpen_constant_image(gray_4x4):
    assert sharpen(gray_4x4, 1.0) == gray_4x4

def test_sharpen_step_edge(step_image):
    result = sharpen(PixelBuffer(step_image), 1.0).pixels[:, :, 0].astype(np.int64)

    # Overshoot on both sides of the edge
    assert np.all(result[:, 5] < 60)
    assert np.all(result[:, 6] > 180)

    # Far from the edge nothing changes
    assert np.all(result[:, 0] == 60)
    assert np.all(result[:, 11] == 180)

def test_sharpen_formula(random_image):
    blurred = blur(random_image, 0.8).pixels.astype(np.int64)
    original = random_image.pixels.astype(np.int64)
    expected = np.clip(2 * original - blurred, 0, 255).astype(np.uint8)

    np.testing.assert_array_equal(sharpen(random_image, 0.8).pixels, expected)

def test_sharpen_non_positive_sigma_returns_copy(random_image):
    with pytest.warns(UserWarning):
        assert sharpen(random_image, 0) == random_image

def test_sharpen_deterministic_across_partitions(random_image):
    reference = sharpen(random_image, 1.2, n_partitions=1)

    assert sharpen(random_image, 1.2, n_partitions=5) == reference

def test_sharpen_invalid(gray_4x4):
    with pytest.raises(TypeError):
        sharpen(gray_4x4, [1.0])

    with pytest.raises(ValueError):
        sharpen(gray_4x4, 1.0, n_partitions=0)
