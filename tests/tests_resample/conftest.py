"""Fixtures for resampling tests."""

import pytest
import numpy as np

from accipiter import PixelBuffer


@pytest.fixture
def split_image():
    """An 8x4 opaque buffer, black on the left half and white on the right.

    Returns:
        PixelBuffer: The split image.
    """
    pixels = np.zeros((4, 8, 4), dtype=np.uint8)
    pixels[:, 4:, 0:3] = 255
    pixels[:, :, 3] = 255

    return PixelBuffer(pixels)


@pytest.fixture
def indexed_image():
    """A 5x5 buffer where the red channel holds `y * 5 + x`.

    Returns:
        PixelBuffer: The indexed image.
    """
    pixels = np.zeros((5, 5, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.arange(25, dtype=np.uint8).reshape(5, 5)
    pixels[:, :, 3] = 255

    return PixelBuffer(pixels)
