"""
errors.py

Failures raised by the sysfs PWM handles.

- NotFoundError: a chip, channel or attribute path is missing
- IoFailure:     any other OS-level open/read/write failure
- DecodeError:   file content does not match the attribute grammar
- EncodeError:   a value cannot be written in the attribute grammar
- AggregateError: work inside an export scope failed and so did the unexport
"""

from __future__ import annotations

from typing import Optional


class PwmError(RuntimeError):
    pass


class NotFoundError(PwmError, LookupError):
    def __init__(self, message: str, *, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class IoFailure(PwmError):
    def __init__(self, message: str, *, path: Optional[str] = None, errno: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.errno = errno


class DecodeError(PwmError, ValueError):
    def __init__(self, message: str, *, attribute: Optional[str] = None, content: Optional[str] = None):
        super().__init__(message)
        self.attribute = attribute
        self.content = content


class EncodeError(PwmError, ValueError):
    pass


class AggregateError(PwmError):
    """
    Raised by the scoped-export helpers when both the caller's work and the
    unexport that follows it fail. Both failures are kept.
    """

    def __init__(self, error: BaseException, unexport_error: BaseException):
        super().__init__(
            f"Failed unexporting due to:\n{unexport_error}\nwhile handling:\n{error}"
        )
        self.error = error
        self.unexport_error = unexport_error
