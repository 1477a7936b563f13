"""### Errors raised by the toolbox. ###

Every error is raised synchronously, before any buffer is allocated or any
partition is scheduled.
"""

__all__ = [
    "AccipiterError",
    "InvalidDimension",
    "InvalidKernel",
    "UnsupportedEdgePolicy",
]


class AccipiterError(ValueError):
    """Base class for the errors raised on invalid operation parameters."""


class InvalidDimension(AccipiterError):
    """A requested width, height or extent is not a positive integer."""


class InvalidKernel(AccipiterError):
    """A convolution matrix is not square and odd, or a filter support is not a positive finite number."""


class UnsupportedEdgePolicy(AccipiterError):
    """The edge-handling option is not one of the known policies."""
