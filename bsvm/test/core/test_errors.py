"""Tests for bsvm.core.errors."""

from bsvm.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.INSTALL_ERROR) == 3
    assert int(ErrorCode.NETWORK_ERROR) == 4
    assert int(ErrorCode.IO_ERROR) == 5


def test_str() -> None:
    assert str(ErrorCode.INSTALL_ERROR) == "install error"


def test_is_success() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.IO_ERROR.is_success
