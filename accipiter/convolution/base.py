"""
### Convolve images with small square kernels. ###
"""

# Standard Library
import math
from enum import Enum
from functools import partial
from typing import Any, Optional, Union
from warnings import warn

# External
import numpy as np
from numba import jit

# Internal
from accipiter.image.buffer import PixelBuffer, as_pixel_buffer
from accipiter.utils.utils_base import _check_variable_is_number_type, _type_check
from accipiter.utils.utils_errors import InvalidKernel, UnsupportedEdgePolicy
from accipiter.utils.utils_parallel import _check_n_partitions, parallel_for


__all__ = [
    "EdgePolicy",
    "get_kernel_matrix",
    "convolve",
    "convolve_3x3",
    "convolve_5x5",
]


class EdgePolicy(Enum):
    """
    How samples outside the image are read.

    EXTEND clamps coordinates to the nearest edge, WRAP tiles the image and
    CROP reads them as zero in every channel.
    """
    EXTEND = "extend"
    WRAP = "wrap"
    CROP = "crop"


_EDGE_POLICY_ENUMS = {
    EdgePolicy.EXTEND: 0,
    EdgePolicy.WRAP: 1,
    EdgePolicy.CROP: 2,
}


def _get_edge_policy(edge: Union[str, EdgePolicy]) -> EdgePolicy:
    """ Resolve an edge policy given by name or enum member. """
    if isinstance(edge, EdgePolicy):
        return edge

    if isinstance(edge, str):
        name = edge.strip().lower()
        name = {"clamp": "extend", "same": "extend", "edge": "extend", "tile": "wrap", "zero": "crop"}.get(name, name)

        for policy in EdgePolicy:
            if policy.value == name:
                return policy

    raise UnsupportedEdgePolicy(
        f"Unsupported edge policy: {edge!r}. Available policies: {', '.join(p.value for p in EdgePolicy)}"
    )


def get_kernel_matrix(kernel: Any) -> np.ndarray:
    """
    Validate a convolution kernel and return it as a square float64 matrix.

    Parameters
    ----------
    kernel : array_like
        A square 2D matrix with an odd side, or a flat sequence whose length
        is the square of an odd number (9 for 3x3, 25 for 5x5, ...).

    Returns
    -------
    numpy.ndarray
        The `(size, size)` matrix.

    Raises
    ------
    InvalidKernel
        If the kernel is not square and odd, or holds non-finite values.
    """
    try:
        matrix = np.array(kernel, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidKernel(f"Unable to read the kernel as a matrix of numbers: {e}") from e

    if matrix.ndim == 1:
        side = math.isqrt(matrix.size)
        if side * side != matrix.size:
            raise InvalidKernel(f"A flat kernel must hold a square number of values, got {matrix.size}")

        matrix = matrix.reshape(side, side)

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise InvalidKernel(f"The kernel must be a square matrix, got shape {matrix.shape}")

    if matrix.shape[0] % 2 == 0:
        raise InvalidKernel(f"The kernel must have an odd size, got {matrix.shape[0]}x{matrix.shape[1]}")

    if not np.all(np.isfinite(matrix)):
        raise InvalidKernel("The kernel must only hold finite values.")

    return np.ascontiguousarray(matrix)


@jit(nopython=True, nogil=True, cache=True, fastmath=True)
def _convolve_rows(
    src: np.ndarray,
    dst: np.ndarray,
    kernel: np.ndarray,
    divisor: float,
    bias: float,
    edge: int,
    absolute: bool,
    preserve_alpha: bool,
    row_start: int,
    row_stop: int,
) -> None:
    """
    Internal function. Convolve the rows `[row_start, row_stop)` of `src` into `dst`.

    `edge` is 0 for extend, 1 for wrap and 2 for crop.
    """
    height = src.shape[0]
    width = src.shape[1]
    size = kernel.shape[0]
    radius = size // 2

    for idx_y in range(row_start, row_stop):
        for idx_x in range(width):
            for idx_c in range(src.shape[2]):

                if preserve_alpha and idx_c == 3:
                    dst[idx_y, idx_x, idx_c] = src[idx_y, idx_x, idx_c]
                    continue

                acc = 0.0
                for idx_ky in range(size):
                    hood_y = idx_y + idx_ky - radius

                    if hood_y < 0 or hood_y >= height:
                        if edge == 0:
                            hood_y = 0 if hood_y < 0 else height - 1
                        elif edge == 1:
                            hood_y = hood_y % height
                            if hood_y < 0:
                                hood_y += height
                        else:
                            continue

                    for idx_kx in range(size):
                        weight = kernel[idx_ky, idx_kx]
                        if weight == 0.0:
                            continue

                        hood_x = idx_x + idx_kx - radius

                        if hood_x < 0 or hood_x >= width:
                            if edge == 0:
                                hood_x = 0 if hood_x < 0 else width - 1
                            elif edge == 1:
                                hood_x = hood_x % width
                                if hood_x < 0:
                                    hood_x += width
                            else:
                                continue

                        acc += weight * src[hood_y, hood_x, idx_c]

                value = acc / divisor

                if absolute:
                    value = abs(value)

                value += bias

                if value <= 0.0:
                    dst[idx_y, idx_x, idx_c] = 0
                elif value >= 255.0:
                    dst[idx_y, idx_x, idx_c] = 255
                else:
                    dst[idx_y, idx_x, idx_c] = int(value + 0.5)


def convolve(
    image: Union[PixelBuffer, np.ndarray],
    kernel: Any,
    edge: Union[str, EdgePolicy] = "extend",
    divisor: Optional[float] = None,
    bias: float = 0.0,
    absolute: bool = False,
    preserve_alpha: bool = False,
    n_partitions: Optional[int] = None,
) -> PixelBuffer:
    """
    Convolve an image with a square kernel matrix.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The source image. It is not modified.

    kernel : array_like
        A square matrix with an odd side, or its values as a flat sequence.
        `kernel[ky][kx]` weights the pixel at `(x + kx - r, y + ky - r)`.

    edge : str or EdgePolicy, optional
        How pixels outside the image are read: "extend", "wrap" or "crop".
        Default: "extend".

    divisor : float or None, optional
        The weighted sum is divided by it. None uses the sum of the kernel, or
        1 when that sum is 0. Default: None.

    bias : float, optional
        Added after the division. Default: 0.0.

    absolute : bool, optional
        If True, the absolute value of the divided sum is used, which suits
        edge-detection kernels. Default: False.

    preserve_alpha : bool, optional
        If True, alpha is copied from the source instead of convolved. Default: False.

    n_partitions : int or None, optional
        The number of row partitions processed in parallel. Default: None.

    Returns
    -------
    PixelBuffer
        A new buffer of the same size, every channel clamped to [0, 255].

    Raises
    ------
    InvalidKernel
        If the kernel is not square and odd.
    UnsupportedEdgePolicy
        If the edge policy is unknown.
    """
    matrix = get_kernel_matrix(kernel)
    policy = _get_edge_policy(edge)
    _type_check(absolute, [bool], "absolute")
    _type_check(preserve_alpha, [bool], "preserve_alpha")

    if not _check_variable_is_number_type(bias) or not math.isfinite(bias):
        raise TypeError(f"bias must be a finite number, got {bias!r}")

    if divisor is None:
        divisor = float(matrix.sum())
        if divisor == 0.0:
            divisor = 1.0
    elif not _check_variable_is_number_type(divisor) or not math.isfinite(divisor):
        raise TypeError(f"divisor must be a finite number or None, got {divisor!r}")
    elif divisor == 0.0:
        warn("A divisor of 0 was given, using 1 instead.", UserWarning)
        divisor = 1.0

    n_partitions = _check_n_partitions(n_partitions)
    src = as_pixel_buffer(image)
    result = np.empty_like(src.pixels)

    worker = partial(
        _convolve_rows,
        src.pixels,
        result,
        matrix,
        float(divisor),
        float(bias),
        _EDGE_POLICY_ENUMS[policy],
        absolute,
        preserve_alpha,
    )
    parallel_for(src.height, worker, n_partitions)

    return PixelBuffer(result)


def convolve_3x3(
    image: Union[PixelBuffer, np.ndarray],
    kernel: Any,
    **kwargs,
) -> PixelBuffer:
    """ `convolve` with a kernel that must be 3x3. See `convolve` for the keyword arguments. """
    matrix = get_kernel_matrix(kernel)

    if matrix.shape != (3, 3):
        raise InvalidKernel(f"Expected a 3x3 kernel, got {matrix.shape[0]}x{matrix.shape[1]}")

    return convolve(image, matrix, **kwargs)


def convolve_5x5(
    image: Union[PixelBuffer, np.ndarray],
    kernel: Any,
    **kwargs,
) -> PixelBuffer:
    """ `convolve` with a kernel that must be 5x5. See `convolve` for the keyword arguments. """
    matrix = get_kernel_matrix(kernel)

    if matrix.shape != (5, 5):
        raise InvalidKernel(f"Expected a 5x5 kernel, got {matrix.shape[0]}x{matrix.shape[1]}")

    return convolve(image, matrix, **kwargs)
