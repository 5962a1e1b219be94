"""
base.py

File requests yielded by the PWM protocol, plus the blocking primitives that
service them. The drivers in blocking.py / nonblocking.py only differ in which
thread runs these primitives and how a Settle pause is waited out.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Generator, Optional, TypeVar, Union

from ..errors import DecodeError, IoFailure, NotFoundError, PwmError


@dataclass(frozen=True)
class Exists:
    """Does `path` exist? Answered with a bool."""
    path: str


@dataclass(frozen=True)
class Read:
    """Whole-file read, answered with the text content."""
    path: str


@dataclass(frozen=True)
class Write:
    """Truncating write of `data`, answered with None."""
    path: str
    data: str


@dataclass(frozen=True)
class Settle:
    """Pause for `seconds`, answered with None."""
    seconds: float


Request = Union[Exists, Read, Write, Settle]

T = TypeVar("T")

# A protocol operation: a generator that yields requests, receives each
# request's answer, and returns the operation's result.
Operation = Generator[Request, Any, T]


def translate_os_error(exc: OSError, path: str) -> PwmError:
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(f"{path} does not exist", path=path)
    reason = exc.strerror or str(exc)
    return IoFailure(f"{path}: {reason}", path=path, errno=exc.errno)


class FileAccess:
    """
    Blocking file primitives shared by both drivers.

    Subclasses may override exists/read_text/write_text (e.g. to point at a
    different filesystem); perform() maps OSError onto the PWM error types.
    """

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_text(self, path: str) -> str:
        with open(path, "r", encoding="ascii") as f:
            return f.read()

    def write_text(self, path: str, data: str) -> None:
        with open(path, "w", encoding="ascii") as f:
            f.write(data)

    def perform(self, request: Request) -> Optional[Union[bool, str]]:
        if isinstance(request, Settle):
            raise TypeError("Settle must be handled by the driver")
        try:
            if isinstance(request, Exists):
                return self.exists(request.path)
            if isinstance(request, Read):
                return self.read_text(request.path)
            if isinstance(request, Write):
                self.write_text(request.path, request.data)
                return None
        except OSError as exc:
            raise translate_os_error(exc, request.path) from exc
        except UnicodeError as exc:
            raise DecodeError(
                f"{request.path}: not ASCII text",
                attribute=os.path.basename(request.path),
            ) from exc
        raise TypeError(f"Unsupported request: {request!r}")
