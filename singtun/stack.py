"""Stack selection and the mapping of stack errors onto a closed-connection error."""

from __future__ import annotations

WITH_GVISOR = False

_CLOSED_MESSAGES = frozenset(
    {
        "endpoint is closed for send",
        "endpoint is closed for receive",
        "operation aborted",
    }
)


class StackClosedError(OSError):
    """The network connection has been closed."""

    def __init__(self, message: str = "use of closed network connection") -> None:
        super().__init__(message)


class GVisorNotIncludedError(RuntimeError):
    """The gVisor stack is not available in this build."""

    def __init__(self, message: str = "gVisor is not included in this build") -> None:
        super().__init__(message)


def wrap_error(error: BaseException) -> BaseException:
    """Turn an OS error that reports a closed or aborted endpoint into StackClosedError.

    Every other error is returned unchanged.
    """
    if isinstance(error, OSError) and not isinstance(error, StackClosedError):
        message = error.strerror or str(error)
        if message in _CLOSED_MESSAGES:
            closed = StackClosedError()
            closed.__cause__ = error
            return closed
    return error


def new_gvisor(options):
    """Create a gVisor stack; always fails because the stack is not included."""
    raise GVisorNotIncludedError()