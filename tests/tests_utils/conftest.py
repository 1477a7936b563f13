"""Fixtures for utilities tests."""

import pytest


@pytest.fixture
def recorded_ranges():
    """A list and a worker that appends every `(start, stop)` it receives to it.

    Returns:
        tuple: (list, callable)
    """
    ranges = []

    def worker(start, stop):
        ranges.append((start, stop))

    return ranges, worker
