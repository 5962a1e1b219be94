"""
protocol.py

The sysfs PWM protocol, written once.

Each operation is a generator that yields file requests (Exists / Read / Write /
Settle) and returns its result; a driver from `sysfs_pwm.access` services the
requests either on the calling thread or from an asyncio task. Chip/Channel and
AsyncChip/AsyncChannel are thin front-ends over the same operations.

Layout (relative to PwmConfig.sysfs_root):

    pwmchip{N}/npwm, export, unexport
    pwmchip{N}/pwm{M}/enable, period, duty_cycle, polarity, capture

Nothing here caches OS state. The export flag and every attribute file are
shared with other handles and other processes; no locking is attempted.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Optional, Tuple

from . import codec
from .access.base import Operation, Exists, Read, Settle, Write
from .codec import Polarity
from .config import PwmConfig
from .errors import AggregateError, DecodeError, EncodeError, NotFoundError, PwmError


logger = logging.getLogger(__name__)

NS_PER_SECOND = 1_000_000_000


class PwmProtocol:

    def __init__(self, config: PwmConfig):
        self.config = config

    # ---------------------------
    # Paths
    # ---------------------------

    def chip_path(self, chip: int) -> str:
        return os.path.join(self.config.sysfs_root, f"pwmchip{chip}")

    def channel_path(self, chip: int, channel: int) -> str:
        return os.path.join(self.chip_path(chip), f"pwm{channel}")

    def attribute_path(self, chip: int, channel: int, name: str) -> str:
        return os.path.join(self.channel_path(chip, channel), name)

    # ---------------------------
    # Chip
    # ---------------------------

    def check_chip(self, chip: int) -> Operation[None]:
        path = self.chip_path(chip)
        if not (yield Exists(path)):
            raise NotFoundError(f"PWM chip {chip} not found at {path}", path=path)

    def channel_count(self, chip: int) -> Operation[int]:
        content = yield Read(os.path.join(self.chip_path(chip), "npwm"))
        return codec.decode_int(content, attribute="npwm")

    def export(self, chip: int, channel: int) -> Operation[None]:
        # only export if not already exported
        if (yield Exists(self.channel_path(chip, channel))):
            logger.debug("pwmchip%d/pwm%d already exported", chip, channel)
            return
        yield Write(os.path.join(self.chip_path(chip), "export"), codec.encode_int(channel, attribute="channel"))
        logger.info("Exported pwmchip%d/pwm%d", chip, channel)
        if self.config.export_settle_s > 0:
            yield Settle(self.config.export_settle_s)

    def unexport(self, chip: int, channel: int) -> Operation[None]:
        if not (yield Exists(self.channel_path(chip, channel))):
            logger.debug("pwmchip%d/pwm%d not exported", chip, channel)
            return
        yield Write(os.path.join(self.chip_path(chip), "unexport"), codec.encode_int(channel, attribute="channel"))
        logger.info("Unexported pwmchip%d/pwm%d", chip, channel)

    # ---------------------------
    # Channel attributes
    # ---------------------------

    def read_attribute(self, chip: int, channel: int, name: str) -> Operation[str]:
        content = yield Read(self.attribute_path(chip, channel, name))
        logger.debug("pwmchip%d/pwm%d/%s -> %r", chip, channel, name, content)
        return content

    def write_attribute(self, chip: int, channel: int, name: str, data: str) -> Operation[None]:
        logger.debug("pwmchip%d/pwm%d/%s <- %r", chip, channel, name, data)
        yield Write(self.attribute_path(chip, channel, name), data)

    def set_enabled(self, chip: int, channel: int, flag: bool) -> Operation[None]:
        yield from self.write_attribute(chip, channel, "enable", codec.encode_bool(flag))

    def get_enabled(self, chip: int, channel: int) -> Operation[bool]:
        content = yield from self.read_attribute(chip, channel, "enable")
        return codec.decode_bool(content, attribute="enable")

    def set_period_ns(self, chip: int, channel: int, period_ns: int) -> Operation[None]:
        data = codec.encode_int(period_ns, attribute="period")
        yield from self.write_attribute(chip, channel, "period", data)

    def get_period_ns(self, chip: int, channel: int) -> Operation[int]:
        content = yield from self.read_attribute(chip, channel, "period")
        return codec.decode_int(content, attribute="period")

    def set_duty_cycle_ns(self, chip: int, channel: int, duty_cycle_ns: int) -> Operation[None]:
        # the kernel rejects duty_cycle > period, not us
        data = codec.encode_int(duty_cycle_ns, attribute="duty_cycle")
        yield from self.write_attribute(chip, channel, "duty_cycle", data)

    def get_duty_cycle_ns(self, chip: int, channel: int) -> Operation[int]:
        content = yield from self.read_attribute(chip, channel, "duty_cycle")
        return codec.decode_int(content, attribute="duty_cycle")

    def set_duty_cycle(self, chip: int, channel: int, ratio: float) -> Operation[None]:
        """
        Write `ratio` of the current period as the duty cycle.

        Reads the period, then writes the duty cycle: a concurrent period
        change between the two is not detected.
        """
        if not 0.0 <= ratio <= 1.0:
            raise EncodeError(f"duty cycle ratio must be within 0.0..1.0, got {ratio!r}")
        period_ns = yield from self.get_period_ns(chip, channel)
        duty_cycle_ns = int(math.floor(period_ns * ratio + 0.5))
        yield from self.set_duty_cycle_ns(chip, channel, duty_cycle_ns)

    def get_duty_cycle(self, chip: int, channel: int) -> Operation[float]:
        duty_cycle_ns = yield from self.get_duty_cycle_ns(chip, channel)
        period_ns = yield from self.get_period_ns(chip, channel)
        if period_ns == 0:
            raise DecodeError(
                f"pwmchip{chip}/pwm{channel} has no period configured",
                attribute="period",
                content="0",
            )
        return duty_cycle_ns / period_ns

    def set_frequency_hz(self, chip: int, channel: int, hz: float) -> Operation[None]:
        if not hz > 0:
            raise EncodeError(f"frequency must be positive, got {hz!r}")
        yield from self.set_period_ns(chip, channel, int(round(NS_PER_SECOND / hz)))

    def get_frequency_hz(self, chip: int, channel: int) -> Operation[float]:
        period_ns = yield from self.get_period_ns(chip, channel)
        if period_ns == 0:
            raise DecodeError(
                f"pwmchip{chip}/pwm{channel} has no period configured",
                attribute="period",
                content="0",
            )
        return NS_PER_SECOND / period_ns

    def set_polarity(self, chip: int, channel: int, polarity: Polarity) -> Operation[None]:
        if not isinstance(polarity, Polarity):
            raise EncodeError(f"polarity must be a Polarity, got {polarity!r}")
        yield from self.write_attribute(chip, channel, "polarity", polarity.encode())

    def get_polarity(self, chip: int, channel: int) -> Operation[Polarity]:
        content = yield from self.read_attribute(chip, channel, "polarity")
        return Polarity.decode(content)

    def get_capture(self, chip: int, channel: int) -> Operation[Tuple[int, int]]:
        content = yield from self.read_attribute(chip, channel, "capture")
        return codec.decode_capture(content)


def check_release(error: BaseException, unexport_error: Optional[PwmError]) -> None:
    """
    Called while `error` escapes an export scope and the unexport has been
    attempted. Raises AggregateError naming both failures when the unexport
    failed; interrupts (KeyboardInterrupt, CancelledError) keep propagating
    and the unexport failure is logged instead.
    """
    if unexport_error is None:
        return
    if isinstance(error, Exception):
        raise AggregateError(error, unexport_error) from error
    logger.error("Unexport failed while unwinding %s: %s", type(error).__name__, unexport_error)
