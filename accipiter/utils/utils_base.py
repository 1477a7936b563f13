"""### Generic utility functions. ###

Argument checking used by the public functions of the toolbox.
"""

# Standard Library
from typing import Any, Sequence

# External
import numpy as np

# Internal
from accipiter.utils.utils_errors import InvalidDimension


__all__ = []


def _check_variable_is_int(variable: Any) -> bool:
    """Check if a variable is an integer. Booleans are not integers here.

    Parameters
    ----------
    variable : Any
        The variable to check.

    Returns
    -------
    bool
        True if the variable is a python or numpy integer, False otherwise.
    """
    if variable is None or isinstance(variable, (bool, np.bool_)):
        return False

    return isinstance(variable, (int, np.integer))


def _check_variable_is_number_type(variable: Any) -> bool:
    """Check if variable is a number.

    Parameters
    ----------
    variable : Any
        The variable to check.

    Returns
    -------
    bool
        True if the variable is a number type, False otherwise.
    """
    if variable is None or isinstance(variable, (bool, np.bool_)):
        return False

    if isinstance(variable, (float, int, np.integer, np.floating)):
        return True

    return False


def _type_check(
    variable: Any,
    types: Sequence[type],
    name: str = "",
) -> bool:
    """Raise a TypeError unless a variable is an instance of one of the given types.

    Parameters
    ----------
    variable : Any
        The variable to check.
    types : Sequence[type]
        The accepted types.
    name : str, optional
        The name of the argument, used in the error message.

    Returns
    -------
    bool
        True if the variable matches one of the types.

    Raises
    ------
    TypeError
        If the variable matches none of the types.
    """
    if isinstance(variable, tuple(types)):
        return True

    expected = " or ".join(t.__name__ for t in types)

    raise TypeError(f"Type mismatch for '{name}': Expected {expected}, got {type(variable).__name__}")


def _check_dimension(
    value: Any,
    name: str = "",
) -> int:
    """Ensure a requested extent is a positive integer.

    Parameters
    ----------
    value : Any
        The requested width, height or extent.
    name : str, optional
        The name of the argument, used in the error message.

    Returns
    -------
    int
        The extent as a python integer.

    Raises
    ------
    TypeError
        If the value is not an integer.
    InvalidDimension
        If the value is zero or negative.
    """
    if not _check_variable_is_int(value):
        raise TypeError(f"Type mismatch for '{name}': Expected int, got {type(value).__name__}")

    if value <= 0:
        raise InvalidDimension(f"{name} must be a positive integer, got {value}")

    return int(value)
