# test/test_exceptions.py
import pytest

from motionfeatures.core import (
    CoreError,
    InvalidReadingStream,
    InvalidWindow,
    InvalidFeatureTable,
    InvalidConfiguration,
    WindowMismatch,
)


def test_exception_inheritance_validation():
    assert issubclass(InvalidReadingStream, CoreError)
    assert issubclass(InvalidWindow, CoreError)
    assert issubclass(InvalidFeatureTable, CoreError)
    assert issubclass(InvalidConfiguration, CoreError)


def test_window_mismatch_is_core_and_value_error():
    assert issubclass(WindowMismatch, CoreError)
    assert issubclass(WindowMismatch, ValueError)

    with pytest.raises(ValueError):
        raise WindowMismatch("256/0.5 vs 128/0.5")
