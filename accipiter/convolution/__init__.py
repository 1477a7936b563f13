"""### Convolution module for images. ###"""

from .base import (
    EdgePolicy,
    get_kernel_matrix,
    convolve,
    convolve_3x3,
    convolve_5x5,
)

from .blur import (
    blur,
    sharpen,
)

__all__ = [
    "EdgePolicy",
    "get_kernel_matrix",
    "convolve",
    "convolve_3x3",
    "convolve_5x5",
    "blur",
    "sharpen",
]
