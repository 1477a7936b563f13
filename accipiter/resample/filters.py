"""### Catalog of resampling filter kernels. ###

Every kernel maps an array of distances to an array of weights and is zero
outside `[-support, support]`.
"""

# Standard Library
import math
from enum import Enum
from typing import Any, Callable, Dict, List, Union

# External
import numpy as np

# Internal
from accipiter.utils.utils_base import _check_variable_is_number_type
from accipiter.utils.utils_errors import InvalidKernel


__all__ = [
    "ResampleFilter",
    "Filter",
    "get_filter",
    "list_filters",
    "gaussian_filter",
    "NEAREST_NEIGHBOR",
    "BOX",
    "LINEAR",
    "HERMITE",
    "BSPLINE",
    "MITCHELL_NETRAVALI",
    "CATMULL_ROM",
    "GAUSSIAN",
    "LANCZOS",
    "HANN",
    "HAMMING",
    "BLACKMAN",
    "BARTLETT",
    "WELCH",
    "COSINE",
]


class ResampleFilter:
    """
    A kernel function together with its support radius.

    Parameters
    ----------
    kernel : Callable
        Maps an array of distances to an array of weights. A callable that only
        accepts scalars is vectorised with `numpy.vectorize`.

    support : float
        The radius beyond which the kernel is zero. Must be positive and finite.

    name : str, optional
        A name for the filter. Default: "custom".

    vectorised : bool, optional
        Whether `kernel` accepts arrays. Default: True.
    """

    __slots__ = ("_kernel", "_support", "_name")

    def __init__(
        self,
        kernel: Callable[[np.ndarray], np.ndarray],
        support: float,
        name: str = "custom",
        vectorised: bool = True,
    ):
        if not callable(kernel):
            raise InvalidKernel(f"kernel must be callable, got {type(kernel).__name__}")

        if not _check_variable_is_number_type(support) or not math.isfinite(support) or support <= 0.0:
            raise InvalidKernel(f"support must be a positive finite number, got {support!r}")

        if not isinstance(name, str):
            raise TypeError(f"name must be a string, got {type(name).__name__}")

        self._kernel = kernel if vectorised else np.vectorize(kernel, otypes=[np.float64])
        self._support = float(support)
        self._name = name

    @property
    def kernel(self) -> Callable[[np.ndarray], np.ndarray]:
        return self._kernel

    @property
    def support(self) -> float:
        return self._support

    @property
    def name(self) -> str:
        return self._name

    def __call__(self, distances: Any) -> np.ndarray:
        """Evaluate the kernel, forcing zero outside the support."""
        distances = np.asarray(distances, dtype=np.float64)
        weights = np.asarray(self._kernel(distances), dtype=np.float64)

        if weights.shape != distances.shape:
            weights = np.broadcast_to(weights, distances.shape)

        return np.where(np.abs(distances) <= self._support, weights, 0.0)

    def __repr__(self) -> str:
        return f"ResampleFilter(name={self._name!r}, support={self._support})"


def _sinc(x: np.ndarray) -> np.ndarray:
    """ Normalised sinc, sin(pi x) / (pi x). """
    return np.sinc(x)


def _cubic(x: np.ndarray, b: float, c: float) -> np.ndarray:
    """
    The two-parameter cubic family of Mitchell and Netravali.

    B=1, C=0 is the cubic B-spline. B=C=1/3 is the Mitchell filter.
    B=0, C=0.5 is Catmull-Rom. B=0, C=0 is the Hermite curve.
    """
    x = np.abs(x)
    x2 = x * x
    x3 = x2 * x

    inner = ((12.0 - 9.0 * b - 6.0 * c) * x3 + (-18.0 + 12.0 * b + 6.0 * c) * x2 + (6.0 - 2.0 * b)) / 6.0
    outer = ((-b - 6.0 * c) * x3 + (6.0 * b + 30.0 * c) * x2 + (-12.0 * b - 48.0 * c) * x + (8.0 * b + 24.0 * c)) / 6.0

    return np.where(x < 1.0, inner, np.where(x < 2.0, outer, 0.0))


def _kernel_nearest(x: np.ndarray) -> np.ndarray:
    x = np.asarray(x)
    return np.where((-0.5 <= x) & (x < 0.5), 1.0, 0.0)


def _kernel_box(x: np.ndarray) -> np.ndarray:
    # Half-open, so a source sample on a boundary is only averaged once.
    x = np.asarray(x)
    return np.where((-0.5 <= x) & (x < 0.5), 1.0, 0.0)


def _kernel_linear(x: np.ndarray) -> np.ndarray:
    return np.clip(1.0 - np.abs(x), 0.0, 1.0)


def _kernel_hermite(x: np.ndarray) -> np.ndarray:
    return _cubic(x, 0.0, 0.0)


def _kernel_bspline(x: np.ndarray) -> np.ndarray:
    return _cubic(x, 1.0, 0.0)


def _kernel_mitchell_netravali(x: np.ndarray) -> np.ndarray:
    return _cubic(x, 1.0 / 3.0, 1.0 / 3.0)


def _kernel_catmull_rom(x: np.ndarray) -> np.ndarray:
    return _cubic(x, 0.0, 0.5)


def _kernel_gaussian(x: np.ndarray) -> np.ndarray:
    # sigma = 0.5
    x = np.abs(x)
    return np.where(x < 2.0, np.exp(-2.0 * x * x), 0.0)


def _kernel_lanczos(x: np.ndarray) -> np.ndarray:
    x = np.abs(x)
    return np.where(x < 3.0, _sinc(x) * _sinc(x / 3.0), 0.0)


def _kernel_hann(x: np.ndarray) -> np.ndarray:
    x = np.abs(x)
    return np.where(x < 3.0, _sinc(x) * (0.5 + 0.5 * np.cos(np.pi * x / 3.0)), 0.0)


def _kernel_hamming(x: np.ndarray) -> np.ndarray:
    x = np.abs(x)
    return np.where(x < 3.0, _sinc(x) * (0.54 + 0.46 * np.cos(np.pi * x / 3.0)), 0.0)


def _kernel_blackman(x: np.ndarray) -> np.ndarray:
    x = np.abs(x)
    window = 0.42 - 0.5 * np.cos(np.pi * x / 3.0 - np.pi) + 0.08 * np.cos(2.0 * np.pi * x / 3.0)
    return np.where(x < 3.0, _sinc(x) * window, 0.0)


def _kernel_bartlett(x: np.ndarray) -> np.ndarray:
    x = np.abs(x)
    return np.where(x < 3.0, _sinc(x) * (3.0 - x) / 3.0, 0.0)


def _kernel_welch(x: np.ndarray) -> np.ndarray:
    x = np.abs(x)
    return np.where(x < 3.0, _sinc(x) * (1.0 - (x * x / 9.0)), 0.0)


def _kernel_cosine(x: np.ndarray) -> np.ndarray:
    x = np.abs(x)
    return np.where(x < 3.0, _sinc(x) * np.cos((np.pi / 2.0) * (x / 3.0)), 0.0)


NEAREST_NEIGHBOR = ResampleFilter(_kernel_nearest, 0.5, "nearest_neighbor")
BOX = ResampleFilter(_kernel_box, 0.5, "box")
LINEAR = ResampleFilter(_kernel_linear, 1.0, "linear")
HERMITE = ResampleFilter(_kernel_hermite, 2.0, "hermite")
BSPLINE = ResampleFilter(_kernel_bspline, 2.0, "bspline")
MITCHELL_NETRAVALI = ResampleFilter(_kernel_mitchell_netravali, 2.0, "mitchell_netravali")
CATMULL_ROM = ResampleFilter(_kernel_catmull_rom, 2.0, "catmull_rom")
GAUSSIAN = ResampleFilter(_kernel_gaussian, 2.0, "gaussian")
LANCZOS = ResampleFilter(_kernel_lanczos, 3.0, "lanczos")
HANN = ResampleFilter(_kernel_hann, 3.0, "hann")
HAMMING = ResampleFilter(_kernel_hamming, 3.0, "hamming")
BLACKMAN = ResampleFilter(_kernel_blackman, 3.0, "blackman")
BARTLETT = ResampleFilter(_kernel_bartlett, 3.0, "bartlett")
WELCH = ResampleFilter(_kernel_welch, 3.0, "welch")
COSINE = ResampleFilter(_kernel_cosine, 3.0, "cosine")


class Filter(Enum):
    """ The built-in filters, usable wherever a filter is expected. """
    NEAREST_NEIGHBOR = NEAREST_NEIGHBOR
    BOX = BOX
    LINEAR = LINEAR
    HERMITE = HERMITE
    BSPLINE = BSPLINE
    MITCHELL_NETRAVALI = MITCHELL_NETRAVALI
    CATMULL_ROM = CATMULL_ROM
    GAUSSIAN = GAUSSIAN
    LANCZOS = LANCZOS
    HANN = HANN
    HAMMING = HAMMING
    BLACKMAN = BLACKMAN
    BARTLETT = BARTLETT
    WELCH = WELCH
    COSINE = COSINE


_FILTER_ENUMS: Dict[str, ResampleFilter] = {member.value.name: member.value for member in Filter}

_FILTER_ALIASES = {
    "nearest": "nearest_neighbor",
    "nearestneighbor": "nearest_neighbor",
    "bilinear": "linear",
    "triangle": "linear",
    "mitchell": "mitchell_netravali",
    "mitchellnetravali": "mitchell_netravali",
    "catmullrom": "catmull_rom",
    "bicubic": "catmull_rom",
    "b_spline": "bspline",
}


def _normalise_filter_name(name: str) -> str:
    """ "CatmullRom", "catmull-rom" and "catmull_rom" all become "catmull_rom". """
    name = name.strip()
    snake = ""
    for idx, char in enumerate(name):
        if char.isupper() and idx > 0 and name[idx - 1].islower():
            snake += "_"
        snake += char.lower()

    snake = snake.replace("-", "_").replace(" ", "_")

    return _FILTER_ALIASES.get(snake, _FILTER_ALIASES.get(snake.replace("_", ""), snake))


def get_filter(resample_filter: Union[str, ResampleFilter, Filter]) -> ResampleFilter:
    """
    Resolve a filter given by name, enum member or object.

    Parameters
    ----------
    resample_filter : str or ResampleFilter or Filter
        The filter. Names are case-insensitive and accept snake_case, CamelCase
        and a few common aliases ("bilinear", "bicubic", "mitchell").

    Returns
    -------
    ResampleFilter
        The filter object.

    Raises
    ------
    InvalidKernel
        If the name is not in the catalog.
    TypeError
        If the filter is neither a name nor a filter object.
    """
    if isinstance(resample_filter, ResampleFilter):
        return resample_filter

    if isinstance(resample_filter, Filter):
        return resample_filter.value

    if not isinstance(resample_filter, str):
        raise TypeError(f"Type mismatch for 'filter': Expected str or ResampleFilter, got {type(resample_filter).__name__}")

    name = _normalise_filter_name(resample_filter)

    if name not in _FILTER_ENUMS:
        raise InvalidKernel(f"Unknown filter: {resample_filter}. Available filters: {', '.join(list_filters())}")

    return _FILTER_ENUMS[name]


def list_filters() -> List[str]:
    """Return the names of the built-in filters."""
    return list(_FILTER_ENUMS.keys())


def gaussian_filter(sigma: float) -> ResampleFilter:
    """
    Create a normalised Gaussian kernel for blurring.

    Parameters
    ----------
    sigma : float
        The standard deviation in pixels. Must be positive.

    Returns
    -------
    ResampleFilter
        A filter with weight `exp(-d^2 / (2 sigma^2)) / (sigma sqrt(2 pi))` and
        support `ceil(sigma * 3)`.
    """
    if not _check_variable_is_number_type(sigma) or not math.isfinite(sigma) or sigma <= 0.0:
        raise InvalidKernel(f"sigma must be a positive finite number, got {sigma!r}")

    sigma = float(sigma)
    radius = math.ceil(sigma * 3.0)
    scale = 1.0 / (sigma * math.sqrt(2.0 * math.pi))

    def _kernel(x: np.ndarray) -> np.ndarray:
        return scale * np.exp(-(x * x) / (2.0 * sigma * sigma))

    return ResampleFilter(_kernel, radius, f"gaussian_sigma_{sigma:g}")
