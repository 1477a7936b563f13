"""
### Gaussian blur and unsharp-mask sharpening. ###

Both run the separable resampling passes with an unchanged extent, so a blur
is a resize to the same size with a Gaussian kernel of the requested sigma.
"""

# Standard Library
import math
from functools import partial
from typing import Optional, Union
from warnings import warn

# External
import numpy as np
from numba import jit

# Internal
from accipiter.image.buffer import PixelBuffer, as_pixel_buffer
from accipiter.resample.filters import gaussian_filter
from accipiter.resample.resize import _resample
from accipiter.utils.utils_base import _check_variable_is_number_type
from accipiter.utils.utils_parallel import _check_n_partitions, parallel_for


__all__ = [
    "blur",
    "sharpen",
]


def _check_sigma(sigma: float) -> float:
    if not _check_variable_is_number_type(sigma) or math.isnan(sigma):
        raise TypeError(f"sigma must be a number, got {sigma!r}")

    return float(sigma)


def _blur_pixels(
    pixels: np.ndarray,
    sigma: float,
    n_partitions: Optional[int] = None,
) -> np.ndarray:
    return _resample(pixels, pixels.shape[1], pixels.shape[0], gaussian_filter(sigma), n_partitions)


def blur(
    image: Union[PixelBuffer, np.ndarray],
    sigma: float,
    n_partitions: Optional[int] = None,
) -> PixelBuffer:
    """
    Blur an image with a Gaussian kernel.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The source image.

    sigma : float
        The standard deviation of the kernel in pixels. The kernel spans
        `ceil(3 * sigma)` pixels on each side. Values <= 0 return a copy.

    n_partitions : int or None, optional
        The number of row partitions processed in parallel. Default: None.

    Returns
    -------
    PixelBuffer
        A new buffer of the same size.
    """
    sigma = _check_sigma(sigma)
    n_partitions = _check_n_partitions(n_partitions)
    src = as_pixel_buffer(image)

    if sigma <= 0.0:
        warn(f"blur called with sigma={sigma}, returning an unchanged copy.", UserWarning)
        return src.copy()

    return PixelBuffer(_blur_pixels(src.pixels, sigma, n_partitions))


@jit(nopython=True, nogil=True, cache=True, fastmath=True)
def _unsharp_rows(
    original: np.ndarray,
    blurred: np.ndarray,
    dst: np.ndarray,
    row_start: int,
    row_stop: int,
) -> None:
    """ dst = clamp(2 * original - blurred) on the rows `[row_start, row_stop)`. """
    for idx_y in range(row_start, row_stop):
        for idx_x in range(original.shape[1]):
            for idx_c in range(original.shape[2]):
                value = 2 * np.int64(original[idx_y, idx_x, idx_c]) - np.int64(blurred[idx_y, idx_x, idx_c])

                if value < 0:
                    value = 0
                elif value > 255:
                    value = 255

                dst[idx_y, idx_x, idx_c] = value


def sharpen(
    image: Union[PixelBuffer, np.ndarray],
    sigma: float,
    n_partitions: Optional[int] = None,
) -> PixelBuffer:
    """
    Sharpen an image with an unsharp mask.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The source image.

    sigma : float
        The sigma of the Gaussian blur that is subtracted. Values <= 0 return a copy.

    n_partitions : int or None, optional
        The number of row partitions processed in parallel. Default: None.

    Returns
    -------
    PixelBuffer
        `original + (original - blurred)`, clamped per channel.
    """
    sigma = _check_sigma(sigma)
    n_partitions = _check_n_partitions(n_partitions)
    src = as_pixel_buffer(image)

    if sigma <= 0.0:
        warn(f"sharpen called with sigma={sigma}, returning an unchanged copy.", UserWarning)
        return src.copy()

    blurred = _blur_pixels(src.pixels, sigma, n_partitions)
    result = np.empty_like(src.pixels)

    parallel_for(src.height, partial(_unsharp_rows, src.pixels, blurred, result), n_partitions)

    return PixelBuffer(result)
