"""Common test fixtures for all test modules."""

import os
import sys
import pytest
import numpy as np

# Add the parent directory to sys.path for imports
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from accipiter import PixelBuffer, set_parallelism


@pytest.fixture(autouse=True)
def reset_parallelism():
    """Make sure no test leaks a process-wide partition count into another."""
    set_parallelism(None)
    yield
    set_parallelism(None)


@pytest.fixture
def gray_4x4():
    """A 4x4 buffer where every channel is 128 and alpha is 255.

    Returns:
        PixelBuffer: Uniform gray, opaque.
    """
    return PixelBuffer.new(4, 4, fill=(128, 128, 128, 255))


@pytest.fixture
def random_image():
    """A deterministic 23x17 RGBA buffer of random samples.

    Returns:
        PixelBuffer: Random noise, alpha included.
    """
    rng = np.random.default_rng(42)
    return PixelBuffer(rng.integers(0, 256, size=(17, 23, 4), dtype=np.uint8))


@pytest.fixture
def smooth_image():
    """A 32x32 opaque buffer holding a gentle gradient.

    Returns:
        PixelBuffer: Red grows along x, green along y, blue along both.
    """
    y, x = np.mgrid[0:32, 0:32]
    pixels = np.zeros((32, 32, 4), dtype=np.uint8)
    pixels[:, :, 0] = 64 + 2 * x
    pixels[:, :, 1] = 64 + 2 * y
    pixels[:, :, 2] = 64 + x + y
    pixels[:, :, 3] = 255

    return PixelBuffer(pixels)
