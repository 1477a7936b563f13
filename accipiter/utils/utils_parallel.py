"""### Fork-join scheduling of row ranges. ###

Every image operation splits the rows of its output into contiguous,
non-overlapping partitions and runs a worker on each of them. Workers are
numba kernels compiled with `nogil=True`, so a plain thread pool is enough
to run them in parallel.
"""

# Standard Library
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple
from warnings import warn

# External
import psutil

# Internal
from accipiter.utils.utils_base import _check_variable_is_int
from accipiter.utils.utils_errors import InvalidDimension


__all__ = [
    "set_parallelism",
    "get_parallelism",
    "partition_rows",
    "parallel_for",
]

_ENV_NUM_THREADS = "ACCIPITER_NUM_THREADS"
_PARALLELISM: Optional[int] = None


def set_parallelism(n_partitions: Optional[int] = None) -> None:
    """Set the default number of partitions used by every operation.

    Parameters
    ----------
    n_partitions : int or None, optional
        The number of partitions. None resets to the automatic value. Default: None.

    Raises
    ------
    TypeError
        If n_partitions is not an integer or None.
    ValueError
        If n_partitions is smaller than 1.
    """
    global _PARALLELISM

    if n_partitions is not None:
        if not _check_variable_is_int(n_partitions):
            raise TypeError(f"n_partitions must be an int or None, got {type(n_partitions).__name__}")
        if n_partitions < 1:
            raise ValueError(f"n_partitions must be at least 1, got {n_partitions}")

        n_partitions = int(n_partitions)

    _PARALLELISM = n_partitions


def get_parallelism() -> int:
    """Get the available-parallelism hint.

    The value set with `set_parallelism` wins, then the
    `ACCIPITER_NUM_THREADS` environment variable, then the number of
    logical CPUs.

    Returns
    -------
    int
        The number of partitions to use, at least 1.
    """
    if _PARALLELISM is not None:
        return _PARALLELISM

    env_value = os.environ.get(_ENV_NUM_THREADS)
    if env_value is not None and env_value.strip() != "":
        try:
            parsed = int(env_value)
        except ValueError:
            parsed = 0

        if parsed >= 1:
            return parsed

        warn(f"Ignoring invalid {_ENV_NUM_THREADS}={env_value!r}, expected a positive integer.", UserWarning)

    cpu_count = psutil.cpu_count(logical=True)

    if cpu_count is None or cpu_count < 1:
        return 1

    return cpu_count


def _check_n_partitions(n_partitions: Optional[int]) -> Optional[int]:
    """ Validate an optional partition count before any work is allocated. """
    if n_partitions is None:
        return None

    if not _check_variable_is_int(n_partitions) or n_partitions < 1:
        raise ValueError(f"n_partitions must be a positive integer or None, got {n_partitions!r}")

    return int(n_partitions)


def partition_rows(
    total_rows: int,
    n_partitions: int,
) -> List[Tuple[int, int]]:
    """
    Divide `[0, total_rows)` into contiguous ranges.

    Parameters
    ----------
    total_rows : int
        The number of rows to divide.

    n_partitions : int
        The maximum number of ranges. Clamped to `total_rows`.

    Returns
    -------
    List[Tuple[int, int]]
        `(start, stop)` pairs. Sizes differ by at most one, the earlier
        ranges being the larger ones. Empty when `total_rows` is 0.
    """
    if not _check_variable_is_int(total_rows) or total_rows < 0:
        raise InvalidDimension(f"total_rows must be a non-negative integer, got {total_rows}")

    if not _check_variable_is_int(n_partitions) or n_partitions < 1:
        raise ValueError(f"n_partitions must be a positive integer, got {n_partitions}")

    if total_rows == 0:
        return []

    steps = min(int(n_partitions), int(total_rows))
    divided, remainder = divmod(int(total_rows), steps)

    ranges = []
    last = 0
    for idx in range(steps):
        step_size = divided + 1 if idx < remainder else divided
        ranges.append((last, last + step_size))
        last += step_size

    return ranges


def parallel_for(
    total_rows: int,
    worker: Callable[[int, int], None],
    n_partitions: Optional[int] = None,
) -> None:
    """
    Run `worker(start, stop)` on every partition of `[0, total_rows)` and wait for all of them.

    Parameters
    ----------
    total_rows : int
        The number of rows to cover.

    worker : Callable[[int, int], None]
        Called once per partition. It must only write to rows in `[start, stop)`.

    n_partitions : int or None, optional
        The maximum number of partitions. None uses `get_parallelism()`. Default: None.

    Notes
    -----
    The union of the partitions covers every row exactly once. When a worker
    raises, the remaining partitions still run to completion and the first
    exception is re-raised afterwards.
    """
    if not callable(worker):
        raise TypeError(f"worker must be callable, got {type(worker).__name__}")

    n_partitions = _check_n_partitions(n_partitions)
    if n_partitions is None:
        n_partitions = get_parallelism()

    ranges = partition_rows(total_rows, n_partitions)

    if len(ranges) == 0:
        return

    if len(ranges) == 1:
        worker(*ranges[0])
        return

    with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
        futures = [pool.submit(worker, start, stop) for start, stop in ranges]

    for future in futures:
        future.result()
