"""
### Resize images with separable two-pass resampling. ###
"""

# Standard Library
import math
from enum import Enum
from functools import partial
from typing import Optional, Tuple, Union

# External
import numpy as np
from numba import jit

# Internal
from accipiter.image.buffer import PixelBuffer, as_pixel_buffer
from accipiter.resample.filters import ResampleFilter, Filter, get_filter
from accipiter.resample.weights import WeightTable, build_weight_table
from accipiter.utils.utils_base import _check_dimension, _type_check
from accipiter.utils.utils_parallel import _check_n_partitions, parallel_for


__all__ = [
    "Anchor",
    "resize",
    "fit",
    "fill",
    "thumbnail",
    "crop_anchor",
]

# Samples between the two passes are kept in this type, never rounded to 8-bit.
INTERMEDIATE_DTYPE = np.float64


@jit(nopython=True, nogil=True, cache=True, fastmath=True, inline="always")
def _clamp_to_uint8(value: float) -> np.uint8:
    """ Round to the nearest integer and clamp to [0, 255]. """
    if value <= 0.0:
        return np.uint8(0)
    if value >= 255.0:
        return np.uint8(255)

    return np.uint8(int(value + 0.5))


@jit(nopython=True, nogil=True, cache=True, fastmath=True)
def _resample_rows_horizontal(
    src: np.ndarray,
    dst: np.ndarray,
    low: np.ndarray,
    high: np.ndarray,
    weights: np.ndarray,
    row_start: int,
    row_stop: int,
) -> None:
    """
    Resample the rows `[row_start, row_stop)` of `src` along the x-axis into `dst`.

    `dst` has the destination width and the source height. Nothing is rounded.
    """
    for idx_y in range(row_start, row_stop):
        for idx_x in range(dst.shape[1]):
            first = low[idx_x]
            taps = high[idx_x] - first

            for idx_c in range(dst.shape[2]):
                acc = 0.0
                for idx_k in range(taps):
                    acc += weights[idx_x, idx_k] * src[idx_y, first + idx_k, idx_c]

                dst[idx_y, idx_x, idx_c] = acc


@jit(nopython=True, nogil=True, cache=True, fastmath=True)
def _resample_rows_vertical(
    src: np.ndarray,
    dst: np.ndarray,
    low: np.ndarray,
    high: np.ndarray,
    weights: np.ndarray,
    row_start: int,
    row_stop: int,
) -> None:
    """
    Compute the destination rows `[row_start, row_stop)` by resampling `src` along the y-axis.

    `dst` is the final 8-bit buffer, values are rounded and clamped on write.
    """
    for idx_y in range(row_start, row_stop):
        first = low[idx_y]
        taps = high[idx_y] - first

        for idx_x in range(dst.shape[1]):
            for idx_c in range(dst.shape[2]):
                acc = 0.0
                for idx_k in range(taps):
                    acc += weights[idx_y, idx_k] * src[first + idx_k, idx_x, idx_c]

                dst[idx_y, idx_x, idx_c] = _clamp_to_uint8(acc)


def _resample_horizontal(
    pixels: np.ndarray,
    table: WeightTable,
    n_partitions: Optional[int] = None,
) -> np.ndarray:
    """ First pass. Returns a `(height, new_width, 4)` array of INTERMEDIATE_DTYPE. """
    intermediate = np.empty((pixels.shape[0], table.dest_extent, pixels.shape[2]), dtype=INTERMEDIATE_DTYPE)

    worker = partial(_resample_rows_horizontal, pixels, intermediate, table.low, table.high, table.weights)
    parallel_for(pixels.shape[0], worker, n_partitions)

    return intermediate


def _resample_vertical(
    intermediate: np.ndarray,
    table: WeightTable,
    n_partitions: Optional[int] = None,
) -> np.ndarray:
    """ Second pass. Returns a `(new_height, width, 4)` uint8 array. """
    result = np.empty((table.dest_extent, intermediate.shape[1], intermediate.shape[2]), dtype=np.uint8)

    worker = partial(_resample_rows_vertical, intermediate, result, table.low, table.high, table.weights)
    parallel_for(table.dest_extent, worker, n_partitions)

    return result


def _resample(
    pixels: np.ndarray,
    width: int,
    height: int,
    resample_filter: ResampleFilter,
    n_partitions: Optional[int] = None,
) -> np.ndarray:
    """ Run both passes on a `(h, w, 4)` uint8 array. Arguments are assumed valid. """
    table_x = build_weight_table(pixels.shape[1], width, resample_filter)
    table_y = build_weight_table(pixels.shape[0], height, resample_filter)

    intermediate = _resample_horizontal(pixels, table_x, n_partitions)

    return _resample_vertical(intermediate, table_y, n_partitions)


def resize(
    image: Union[PixelBuffer, np.ndarray],
    width: int,
    height: int,
    resample_filter: Union[str, ResampleFilter, Filter] = "lanczos",
    n_partitions: Optional[int] = None,
) -> PixelBuffer:
    """
    Resize an image to exactly `width` x `height`.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The source image. It is not modified.

    width : int
        The width of the result. Must be positive.

    height : int
        The height of the result. Must be positive.

    resample_filter : str or ResampleFilter or Filter, optional
        The kernel, e.g. "lanczos", "catmull_rom", "box" or a custom
        `ResampleFilter`. Default: "lanczos".

    n_partitions : int or None, optional
        The number of row partitions processed in parallel. None uses
        `get_parallelism()`. The result does not depend on it. Default: None.

    Returns
    -------
    PixelBuffer
        A new buffer.

    Raises
    ------
    InvalidDimension
        If width or height is not positive.

    Notes
    -----
    The horizontal pass runs first and keeps its output in float64, the
    vertical pass rounds and clamps once. Alpha is resampled like the color
    channels without premultiplication, so fully transparent pixels can bleed
    their color into partially transparent neighbours.
    """
    width = _check_dimension(width, "width")
    height = _check_dimension(height, "height")
    resample_filter = get_filter(resample_filter)
    n_partitions = _check_n_partitions(n_partitions)
    src = as_pixel_buffer(image)

    return PixelBuffer(_resample(src.pixels, width, height, resample_filter, n_partitions))


def fit(
    image: Union[PixelBuffer, np.ndarray],
    max_width: int,
    max_height: int,
    resample_filter: Union[str, ResampleFilter, Filter] = "lanczos",
    upscale: bool = False,
    n_partitions: Optional[int] = None,
) -> PixelBuffer:
    """
    Scale an image down to fit a bounding box, keeping its aspect ratio.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The source image.

    max_width : int
        The width of the bounding box.

    max_height : int
        The height of the bounding box.

    resample_filter : str or ResampleFilter or Filter, optional
        The kernel. Default: "lanczos".

    upscale : bool, optional
        If True, images smaller than the box are enlarged until they touch it.
        Otherwise they are returned unchanged. Default: False.

    n_partitions : int or None, optional
        The number of row partitions. Default: None.

    Returns
    -------
    PixelBuffer
        A new buffer no wider than `max_width` and no taller than `max_height`.
    """
    max_width = _check_dimension(max_width, "max_width")
    max_height = _check_dimension(max_height, "max_height")
    _type_check(upscale, [bool], "upscale")
    resample_filter = get_filter(resample_filter)
    n_partitions = _check_n_partitions(n_partitions)
    src = as_pixel_buffer(image)

    if not upscale and src.width <= max_width and src.height <= max_height:
        return src.copy()

    ratio = min(max_width / src.width, max_height / src.height)

    new_width = min(max_width, max(1, int(math.floor(src.width * ratio + 0.5))))
    new_height = min(max_height, max(1, int(math.floor(src.height * ratio + 0.5))))

    return PixelBuffer(_resample(src.pixels, new_width, new_height, resample_filter, n_partitions))


class Anchor(Enum):
    """ The position of a crop rectangle inside an image. """
    CENTER = "center"
    TOP_LEFT = "top_left"
    TOP = "top"
    TOP_RIGHT = "top_right"
    LEFT = "left"
    RIGHT = "right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM = "bottom"
    BOTTOM_RIGHT = "bottom_right"


def _get_anchor(anchor: Union[str, Anchor]) -> Anchor:
    if isinstance(anchor, Anchor):
        return anchor

    _type_check(anchor, [str, Anchor], "anchor")

    name = anchor.strip().lower().replace("-", "_").replace(" ", "_")
    name = {"topleft": "top_left", "topright": "top_right", "bottomleft": "bottom_left", "bottomright": "bottom_right"}.get(name, name)

    try:
        return Anchor(name)
    except ValueError:
        raise ValueError(f"Unknown anchor: {anchor}. Available anchors: {', '.join(a.value for a in Anchor)}") from None


def _anchor_origin(
    image_width: int,
    image_height: int,
    width: int,
    height: int,
    anchor: Anchor,
) -> Tuple[int, int]:
    """ The top-left corner `(x, y)` of a `width` x `height` rectangle placed by `anchor`. """
    center_x = (image_width - width) // 2
    center_y = (image_height - height) // 2
    right = image_width - width
    bottom = image_height - height

    origins = {
        Anchor.TOP_LEFT: (0, 0),
        Anchor.TOP: (center_x, 0),
        Anchor.TOP_RIGHT: (right, 0),
        Anchor.LEFT: (0, center_y),
        Anchor.CENTER: (center_x, center_y),
        Anchor.RIGHT: (right, center_y),
        Anchor.BOTTOM_LEFT: (0, bottom),
        Anchor.BOTTOM: (center_x, bottom),
        Anchor.BOTTOM_RIGHT: (right, bottom),
    }

    return origins[anchor]


def crop_anchor(
    image: Union[PixelBuffer, np.ndarray],
    width: int,
    height: int,
    anchor: Union[str, Anchor] = "center",
) -> PixelBuffer:
    """
    Cut a `width` x `height` rectangle positioned by an anchor out of an image.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The source image.

    width : int
        The width of the rectangle. Clamped to the image width.

    height : int
        The height of the rectangle. Clamped to the image height.

    anchor : str or Anchor, optional
        Where the rectangle sits, e.g. "center", "top_left" or "bottom".
        Default: "center".

    Returns
    -------
    PixelBuffer
        A copy of the rectangle.
    """
    width = _check_dimension(width, "width")
    height = _check_dimension(height, "height")
    anchor = _get_anchor(anchor)
    src = as_pixel_buffer(image)

    width = min(width, src.width)
    height = min(height, src.height)

    x_min, y_min = _anchor_origin(src.width, src.height, width, height, anchor)

    return PixelBuffer(src.pixels[y_min:y_min + height, x_min:x_min + width].copy())


def fill(
    image: Union[PixelBuffer, np.ndarray],
    width: int,
    height: int,
    anchor: Union[str, Anchor] = "center",
    resample_filter: Union[str, ResampleFilter, Filter] = "lanczos",
    n_partitions: Optional[int] = None,
) -> PixelBuffer:
    """
    Crop an image to the aspect ratio of the target box and resize it to fill the box exactly.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The source image.

    width : int
        The width of the result.

    height : int
        The height of the result.

    anchor : str or Anchor, optional
        The part of the image kept by the crop. Default: "center".

    resample_filter : str or ResampleFilter or Filter, optional
        The kernel. Default: "lanczos".

    n_partitions : int or None, optional
        The number of row partitions. Default: None.

    Returns
    -------
    PixelBuffer
        A new `width` x `height` buffer.
    """
    width = _check_dimension(width, "width")
    height = _check_dimension(height, "height")
    anchor = _get_anchor(anchor)
    resample_filter = get_filter(resample_filter)
    n_partitions = _check_n_partitions(n_partitions)
    src = as_pixel_buffer(image)

    src_aspect = src.width / src.height
    dst_aspect = width / height

    if src_aspect < dst_aspect:
        crop_width = src.width
        crop_height = max(1, int(math.floor(src.width * height / width + 0.5)))
    else:
        crop_width = max(1, int(math.floor(src.height * width / height + 0.5)))
        crop_height = src.height

    cropped = crop_anchor(src, crop_width, crop_height, anchor)

    return PixelBuffer(_resample(cropped.pixels, width, height, resample_filter, n_partitions))


def thumbnail(
    image: Union[PixelBuffer, np.ndarray],
    width: int,
    height: int,
    resample_filter: Union[str, ResampleFilter, Filter] = "lanczos",
    n_partitions: Optional[int] = None,
) -> PixelBuffer:
    """ Center-crop and resize an image to exactly `width` x `height`. """
    return fill(image, width, height, Anchor.CENTER, resample_filter, n_partitions)
