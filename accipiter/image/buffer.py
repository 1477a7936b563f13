"""### The RGBA pixel buffer consumed and produced by every operation. ###

A buffer holds `height` rows of `width` pixels, four 8-bit samples per
pixel (red, green, blue, alpha). Alpha is not premultiplied.
"""

# Standard Library
from typing import Any, Optional, Sequence, Tuple, Union

# External
import numpy as np

# Internal
from accipiter.utils.utils_base import _check_dimension, _check_variable_is_int, _type_check
from accipiter.utils.utils_errors import InvalidDimension


__all__ = [
    "PixelBuffer",
    "as_pixel_buffer",
]

CHANNELS = 4


def _to_uint8(arr: np.ndarray) -> np.ndarray:
    """Convert the samples of an array to the 8-bit range, rounding to nearest."""
    if arr.dtype == np.uint8:
        return arr.copy()

    if arr.dtype == np.bool_:
        return np.where(arr, 255, 0).astype(np.uint8)

    if arr.dtype == np.uint16:
        return np.rint(arr.astype(np.float64) / 257.0).astype(np.uint8)

    if np.issubdtype(arr.dtype, np.floating):
        converted = np.nan_to_num(arr.astype(np.float64), nan=0.0, posinf=1.0, neginf=0.0)
        return np.rint(np.clip(converted, 0.0, 1.0) * 255.0).astype(np.uint8)

    if np.issubdtype(arr.dtype, np.integer):
        return np.clip(arr, 0, 255).astype(np.uint8)

    raise TypeError(f"Unable to convert samples of dtype {arr.dtype} to 8-bit.")


def _expand_channels(arr: np.ndarray) -> np.ndarray:
    """Expand gray, gray+alpha or RGB samples (already 8-bit) to RGBA."""
    height, width, depth = arr.shape
    rgba = np.empty((height, width, CHANNELS), dtype=np.uint8)

    if depth == 1:
        rgba[:, :, 0:3] = arr[:, :, 0:1]
        rgba[:, :, 3] = 255
    elif depth == 2:
        rgba[:, :, 0:3] = arr[:, :, 0:1]
        rgba[:, :, 3] = arr[:, :, 1]
    elif depth == 3:
        rgba[:, :, 0:3] = arr
        rgba[:, :, 3] = 255
    elif depth == 4:
        rgba[:] = arr
    else:
        raise ValueError(f"Unable to interpret an array with {depth} channels as pixels.")

    return rgba


class PixelBuffer:
    """
    A raster of non-premultiplied RGBA pixels with 8 bits per channel.

    Parameters
    ----------
    pixels : numpy.ndarray
        A `(height, width, 4)` array of `uint8`. It is used as is, not copied.
        Use `PixelBuffer.from_array` to convert and copy arbitrary input.

    Notes
    -----
    Buffers returned by the toolbox are never referenced again by it, so the
    caller owns them. The operations never modify their input buffers.
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        _type_check(pixels, [np.ndarray], "pixels")

        if pixels.ndim != 3 or pixels.shape[2] != CHANNELS:
            raise ValueError(f"pixels must have shape (height, width, 4), got {pixels.shape}")

        if pixels.dtype != np.uint8:
            raise TypeError(f"pixels must be of dtype uint8, got {pixels.dtype}")

        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidDimension(f"A pixel buffer must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}")

        if pixels.strides[1] != CHANNELS or pixels.strides[2] != 1:
            pixels = np.ascontiguousarray(pixels)

        self._pixels = pixels

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        fill: Sequence[int] = (0, 0, 0, 0),
    ) -> "PixelBuffer":
        """
        Allocate a buffer filled with a single color.

        Parameters
        ----------
        width : int
            The width in pixels.

        height : int
            The height in pixels.

        fill : Sequence[int], optional
            The RGBA value of every pixel. Default: (0, 0, 0, 0).

        Returns
        -------
        PixelBuffer
            The new buffer.
        """
        width = _check_dimension(width, "width")
        height = _check_dimension(height, "height")

        if len(fill) != CHANNELS:
            raise ValueError(f"fill must have 4 values, got {len(fill)}")

        pixels = np.empty((height, width, CHANNELS), dtype=np.uint8)
        pixels[:, :] = np.clip(np.asarray(fill), 0, 255).astype(np.uint8)

        return cls(pixels)

    @classmethod
    def from_array(cls, arr: Any) -> "PixelBuffer":
        """
        Convert an array of samples to a new buffer.

        Parameters
        ----------
        arr : array_like
            One sample per pixel, shaped `(h, w)` or `(h, w, 1)` for gray,
            `(h, w, 2)` for gray and alpha, `(h, w, 3)` for RGB or
            `(h, w, 4)` for RGBA. Floats are read in the range [0, 1],
            `uint16` in [0, 65535], anything else in [0, 255].

        Returns
        -------
        PixelBuffer
            A buffer holding a converted copy of the samples.
        """
        arr = np.asarray(arr)

        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]

        if arr.ndim != 3:
            raise ValueError(f"arr must be 2 or 3 dimensional, got {arr.ndim} dimensions")

        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise InvalidDimension(f"A pixel buffer must be at least 1x1, got {arr.shape[1]}x{arr.shape[0]}")

        return cls(_expand_channels(_to_uint8(arr)))

    @classmethod
    def from_bytes(
        cls,
        data: Union[bytes, bytearray, memoryview, np.ndarray],
        width: int,
        height: int,
        stride: Optional[int] = None,
    ) -> "PixelBuffer":
        """
        Copy row-major RGBA bytes into a new buffer.

        Parameters
        ----------
        data : bytes-like or numpy.ndarray
            The samples. Bytes between `width * 4` and `stride` at the end of
            every row are ignored.

        width : int
            The width in pixels.

        height : int
            The height in pixels.

        stride : int or None, optional
            The number of bytes between the starts of two rows. None means
            `width * 4`. Default: None.

        Returns
        -------
        PixelBuffer
            The new buffer.
        """
        width = _check_dimension(width, "width")
        height = _check_dimension(height, "height")

        if stride is None:
            stride = width * CHANNELS

        if not _check_variable_is_int(stride):
            raise TypeError(f"stride must be an int, got {type(stride).__name__}")

        if stride < width * CHANNELS:
            raise InvalidDimension(f"stride ({stride}) must be at least width * 4 ({width * CHANNELS})")

        flat = np.frombuffer(data, dtype=np.uint8) if not isinstance(data, np.ndarray) else data.reshape(-1)

        if flat.dtype != np.uint8:
            raise TypeError(f"data must hold uint8 samples, got {flat.dtype}")

        required = stride * height
        if flat.size < required:
            raise InvalidDimension(f"data holds {flat.size} bytes, {required} are required")

        rows = np.lib.stride_tricks.as_strided(
            flat,
            shape=(height, width, CHANNELS),
            strides=(stride, CHANNELS, 1),
            writeable=False,
        )

        return cls(np.array(rows, dtype=np.uint8, copy=True))

    @property
    def pixels(self) -> np.ndarray:
        """The `(height, width, 4)` array of samples."""
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def stride(self) -> int:
        """The number of bytes between the starts of two rows."""
        return self._pixels.strides[0]

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._pixels.shape

    @property
    def size(self) -> Tuple[int, int]:
        """`(width, height)`"""
        return self.width, self.height

    @property
    def data(self) -> np.ndarray:
        """A flat view of the samples, row after row."""
        if self._pixels.flags.c_contiguous:
            return self._pixels.reshape(-1)

        return np.ascontiguousarray(self._pixels).reshape(-1)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self._pixels.copy())

    def to_array(self) -> np.ndarray:
        """Return a `(height, width, 4)` copy of the samples."""
        return self._pixels.copy()

    def to_bytes(self) -> bytes:
        """Return the samples as packed rows, `width * 4` bytes per row."""
        return np.ascontiguousarray(self._pixels).tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented

        return self.shape == other.shape and bool(np.array_equal(self._pixels, other._pixels))

    __hash__ = None

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


def as_pixel_buffer(image: Any, name: str = "image") -> PixelBuffer:
    """
    Accept either a PixelBuffer or an array that converts to one.

    Parameters
    ----------
    image : PixelBuffer or numpy.ndarray
        The input image. Arrays go through `PixelBuffer.from_array`.

    name : str, optional
        The argument name used in error messages. Default: "image".

    Returns
    -------
    PixelBuffer
        The input buffer itself, or a converted copy of the array.
    """
    if isinstance(image, PixelBuffer):
        return image

    _type_check(image, [PixelBuffer, np.ndarray], name)

    return PixelBuffer.from_array(image)
