import pytest

from singtun.stack import (
    WITH_GVISOR,
    GVisorNotIncludedError,
    StackClosedError,
    new_gvisor,
    wrap_error,
)


@pytest.mark.parametrize(
    "message",
    ["endpoint is closed for send", "endpoint is closed for receive", "operation aborted"],
)
def test_closed_messages_become_closed_error(message):
    original = OSError(message)
    wrapped = wrap_error(original)
    assert isinstance(wrapped, StackClosedError)
    assert wrapped.__cause__ is original


def test_strerror_is_checked():
    original = OSError(32, "operation aborted")
    wrapped = wrap_error(original)
    assert isinstance(wrapped, StackClosedError)
    assert wrapped.__cause__ is original
    assert str(wrapped) == "use of closed network connection"


def test_other_os_error_unchanged():
    original = OSError("connection refused")
    assert wrap_error(original) is original


def test_non_os_error_unchanged_even_with_matching_text():
    original = ValueError("operation aborted")
    assert wrap_error(original) is original


def test_closed_error_message():
    assert str(StackClosedError()) == "use of closed network connection"


def test_new_gvisor_not_included():
    assert WITH_GVISOR is False
    with pytest.raises(GVisorNotIncludedError, match="gVisor is not included"):
        new_gvisor(object())