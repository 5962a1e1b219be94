"""
codec.py

Text encode/decode for sysfs PWM attributes. Pure functions, no I/O.

Grammar per attribute:
- enable:               "1" / "0"
- period, duty_cycle:   unsigned 32-bit decimal
- polarity:             "normal" / "inversed"
- capture:              two whitespace-separated unsigned decimals
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import List, Tuple

from .errors import DecodeError, EncodeError


logger = logging.getLogger(__name__)

U32_MAX = 2**32 - 1

_DECIMAL = re.compile(r"\+?[0-9]+")


class Polarity(Enum):
    NORMAL = "normal"
    INVERSE = "inversed"

    def encode(self) -> str:
        return self.value

    @classmethod
    def decode(cls, text: str) -> "Polarity":
        try:
            return cls(text.strip())
        except ValueError:
            raise DecodeError(
                f"Unexpected polarity file contents: {text!r}",
                attribute="polarity",
                content=text,
            ) from None


def encode_int(value: int, *, attribute: str = "value", maximum: int = U32_MAX) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodeError(f"{attribute} must be an integer, got {value!r}")
    if value < 0 or value > maximum:
        raise EncodeError(f"{attribute} must be between 0 and {maximum}, got {value}")
    return str(value)


def decode_int(text: str, *, attribute: str = "value", maximum: int = U32_MAX) -> int:
    """
    Parse a bare unsigned decimal after trimming surrounding whitespace.

    An optional leading "+" is accepted. A "-" sign, separators, non-ASCII
    digits and values above `maximum` are rejected.
    """
    s = text.strip()
    if not _DECIMAL.fullmatch(s):
        raise DecodeError(
            f"Unexpected {attribute} file contents: {text!r}",
            attribute=attribute,
            content=text,
        )
    value = int(s)
    if value > maximum:
        raise DecodeError(
            f"{attribute} value {value} exceeds {maximum}",
            attribute=attribute,
            content=text,
        )
    return value


def decode_int_list(text: str, *, attribute: str = "value", maximum: int = U32_MAX) -> List[int]:
    """
    Split on whitespace runs and decode each token. Tokens that do not parse
    are dropped; the survivors keep their original order.
    """
    values: List[int] = []
    for token in text.split():
        try:
            values.append(decode_int(token, attribute=attribute, maximum=maximum))
        except DecodeError:
            logger.debug("Dropping unparseable %s token %r from %r", attribute, token, text)
    return values


def encode_bool(flag: bool) -> str:
    return "1" if flag else "0"


def decode_bool(text: str, *, attribute: str = "enable") -> bool:
    s = text.strip()
    if s == "1":
        return True
    if s == "0":
        return False
    raise DecodeError(
        f"Unexpected {attribute} file contents: {text!r}",
        attribute=attribute,
        content=text,
    )


def decode_capture(text: str) -> Tuple[int, int]:
    values = decode_int_list(text, attribute="capture")
    if len(values) != 2:
        raise DecodeError(
            f"Expected 2 capture values, parsed {len(values)} from {text!r}",
            attribute="capture",
            content=text,
        )
    return values[0], values[1]
