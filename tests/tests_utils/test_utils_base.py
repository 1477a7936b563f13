# pylint: skip-file
# type: ignore

import pytest
import numpy as np

from accipiter.utils.utils_base import (
    _type_check,
    _check_dimension,
    _check_variable_is_int,
    _check_variable_is_number_type,
)
from accipiter.utils.utils_errors import (
    AccipiterError,
    InvalidDimension,
    InvalidKernel,
    UnsupportedEdgePolicy,
)


def test_type_check():
    assert _type_check("hello", [str])
    assert _type_check(np.zeros(2), [str, np.ndarray])
    assert _type_check(True, [bool])

    with pytest.raises(TypeError, match="Type mismatch for 'value': Expected str, got float"):
        _type_check(1.0, [str], "value")

    with pytest.raises(TypeError, match="Expected bool or str"):
        _type_check(1, [bool, str], "flag")

def test_check_variable_is_int():
    assert _check_variable_is_int(3)
    assert _check_variable_is_int(np.int32(3))
    assert not _check_variable_is_int(True)
    assert not _check_variable_is_int(3.0)
    assert not _check_variable_is_int(None)

def test_check_variable_is_number_type():
    assert _check_variable_is_number_type(3)
    assert _check_variable_is_number_type(3.5)
    assert _check_variable_is_number_type(np.float32(1.0))
    assert not _check_variable_is_number_type(False)
    assert not _check_variable_is_number_type("3")

def test_check_dimension():
    assert _check_dimension(5, "width") == 5
    assert isinstance(_check_dimension(np.int64(5), "width"), int)

    with pytest.raises(InvalidDimension, match="width"):
        _check_dimension(0, "width")

    with pytest.raises(InvalidDimension):
        _check_dimension(-3, "height")

    with pytest.raises(TypeError):
        _check_dimension(2.0, "width")

def test_errors_are_value_errors():
    for error in [InvalidDimension, InvalidKernel, UnsupportedEdgePolicy]:
        assert issubclass(error, AccipiterError)
        assert issubclass(error, ValueError)
