"""Fixtures for convolution tests."""

import pytest
import numpy as np


@pytest.fixture
def impulse_image():
    """A 7x7 opaque black buffer with a single white pixel in the middle.

    Returns:
        np.ndarray: (7, 7, 4) uint8 samples.
    """
    pixels = np.zeros((7, 7, 4), dtype=np.uint8)
    pixels[3, 3, 0:3] = 255
    pixels[:, :, 3] = 255

    return pixels


@pytest.fixture
def step_image():
    """A 12x3 opaque buffer, dark gray left of column 6 and light gray from it.

    Returns:
        np.ndarray: (3, 12, 4) uint8 samples.
    """
    pixels = np.full((3, 12, 4), 60, dtype=np.uint8)
    pixels[:, 6:, 0:3] = 180
    pixels[:, :, 3] = 255

    return pixels
