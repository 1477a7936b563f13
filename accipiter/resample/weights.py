"""### Weight tables for one-dimensional resampling. ###

For every destination index a table holds the range of contributing source
indices and the normalised weight of each of them.
"""

# Standard Library
from typing import Iterator, NamedTuple, Union

# External
import numpy as np

# Internal
from accipiter.utils.utils_base import _check_dimension
from accipiter.resample.filters import ResampleFilter, Filter, NEAREST_NEIGHBOR, get_filter


__all__ = [
    "WeightEntry",
    "WeightTable",
    "build_weight_table",
]


class WeightEntry(NamedTuple):
    """ The source samples `[low, high)` and their weights for one destination index. """
    low: int
    high: int
    weights: np.ndarray


class WeightTable:
    """
    The weight entries of every destination index, stored as arrays.

    Parameters
    ----------
    low : numpy.ndarray
        `(dest_extent,)` int64, the first contributing source index.

    high : numpy.ndarray
        `(dest_extent,)` int64, one past the last contributing source index.

    weights : numpy.ndarray
        `(dest_extent, max_taps)` float64. Row `i` holds the weights of the
        source indices `low[i] .. high[i] - 1` followed by zeros.

    source_extent : int
        The number of source samples.
    """

    __slots__ = ("low", "high", "weights", "source_extent")

    def __init__(
        self,
        low: np.ndarray,
        high: np.ndarray,
        weights: np.ndarray,
        source_extent: int,
    ):
        self.low = np.ascontiguousarray(low, dtype=np.int64)
        self.high = np.ascontiguousarray(high, dtype=np.int64)
        self.weights = np.ascontiguousarray(weights, dtype=np.float64)
        self.source_extent = int(source_extent)

    @property
    def dest_extent(self) -> int:
        return self.low.shape[0]

    @property
    def max_taps(self) -> int:
        return self.weights.shape[1]

    def __len__(self) -> int:
        return self.dest_extent

    def __getitem__(self, idx: int) -> WeightEntry:
        low = int(self.low[idx])
        high = int(self.high[idx])

        return WeightEntry(low, high, self.weights[idx, :high - low].copy())

    def __iter__(self) -> Iterator[WeightEntry]:
        for idx in range(self.dest_extent):
            yield self[idx]

    def __repr__(self) -> str:
        return f"WeightTable(source_extent={self.source_extent}, dest_extent={self.dest_extent}, max_taps={self.max_taps})"


def _nearest_weight_table(
    source_extent: int,
    dest_extent: int,
) -> WeightTable:
    """ One tap per destination index, the source sample whose area contains its center. """
    scale = source_extent / dest_extent
    low = np.floor((np.arange(dest_extent, dtype=np.float64) + 0.5) * scale).astype(np.int64)
    low = np.minimum(low, source_extent - 1)

    return WeightTable(low, low + 1, np.ones((dest_extent, 1), dtype=np.float64), source_extent)


def build_weight_table(
    source_extent: int,
    dest_extent: int,
    resample_filter: Union[str, ResampleFilter, Filter] = "lanczos",
) -> WeightTable:
    """
    Compute the contributing source range and weights of every destination index.

    Parameters
    ----------
    source_extent : int
        The number of source samples along the axis.

    dest_extent : int
        The number of destination samples along the axis.

    resample_filter : str or ResampleFilter or Filter, optional
        The kernel to sample. Default: "lanczos".

    Returns
    -------
    WeightTable
        One entry per destination index. The weights of every entry sum to 1.

    Raises
    ------
    InvalidDimension
        If either extent is not a positive integer.

    Notes
    -----
    Destination index `i` maps to the continuous source position
    `(i + 0.5) * scale - 0.5` with `scale = source_extent / dest_extent`. When
    downscaling, the kernel is stretched by `scale` to avoid aliasing. Source
    indices outside `[0, source_extent)` are clamped to the nearest edge and
    their weights accumulate there.
    """
    source_extent = _check_dimension(source_extent, "source_extent")
    dest_extent = _check_dimension(dest_extent, "dest_extent")
    resample_filter = get_filter(resample_filter)

    if resample_filter is NEAREST_NEIGHBOR:
        return _nearest_weight_table(source_extent, dest_extent)

    scale = source_extent / dest_extent
    filter_scale = max(scale, 1.0)
    support = resample_filter.support * filter_scale

    centers = (np.arange(dest_extent, dtype=np.float64) + 0.5) * scale - 0.5
    first = np.ceil(centers - support).astype(np.int64)
    last = np.floor(centers + support).astype(np.int64)
    taps = max(int(np.max(last - first)) + 1, 1)

    candidates = first[:, np.newaxis] + np.arange(taps, dtype=np.int64)[np.newaxis, :]
    valid = candidates <= last[:, np.newaxis]

    raw = resample_filter((candidates - centers[:, np.newaxis]) / filter_scale)
    raw = np.where(valid, raw, 0.0)

    clamped = np.clip(candidates, 0, source_extent - 1)
    low = np.where(valid, clamped, source_extent).min(axis=1)
    high = np.where(valid, clamped, -1).max(axis=1) + 1

    weights = np.zeros((dest_extent, max(int(np.max(high - low)), 1)), dtype=np.float64)
    rows = np.broadcast_to(np.arange(dest_extent)[:, np.newaxis], candidates.shape)
    np.add.at(weights, (rows[valid], (clamped - low[:, np.newaxis])[valid]), raw[valid])

    sums = weights.sum(axis=1)

    # No usable weight under the kernel, fall back to the closest sample.
    degenerate = np.abs(sums) < 1e-12
    if np.any(degenerate):
        closest = np.clip(np.rint(centers[degenerate]), 0, source_extent - 1).astype(np.int64)
        low[degenerate] = closest
        high[degenerate] = closest + 1
        weights[degenerate] = 0.0
        weights[degenerate, 0] = 1.0
        sums[degenerate] = 1.0

    weights /= sums[:, np.newaxis]

    return WeightTable(low, high, weights, source_extent)
