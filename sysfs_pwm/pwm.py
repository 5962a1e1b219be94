"""
pwm.py

Blocking PWM handles. Every call may block the calling thread while the
kernel services the sysfs read/write.

Usage:
  channel = Channel.open(0, 0)
  with channel.exported():
      channel.set_period_ns(20_000)
      channel.set_duty_cycle(0.25)
      channel.enable(True)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Tuple, TypeVar

from . import codec
from .access.base import Operation
from .access.blocking import BlockingFileAccess
from .codec import Polarity
from .config import PwmConfig, load_config
from .errors import PwmError
from .protocol import PwmProtocol, check_release


R = TypeVar("R")


class Chip:
    """
    A PWM controller (pwmchipN). Obtain one with Chip.open(); holding a Chip
    holds no kernel resource.
    """

    def __init__(self, number: int, protocol: PwmProtocol, access: BlockingFileAccess):
        self.number = number
        self._protocol = protocol
        self._access = access

    @classmethod
    def open(
        cls,
        number: int,
        *,
        config: Optional[PwmConfig] = None,
        access: Optional[BlockingFileAccess] = None,
    ) -> "Chip":
        """Raises NotFoundError if pwmchip{number} does not exist."""
        codec.encode_int(number, attribute="chip")
        protocol = PwmProtocol(config or load_config())
        access = access or BlockingFileAccess()
        access.run(protocol.check_chip(number))
        return cls(number, protocol, access)

    def __repr__(self) -> str:
        return f"Chip(number={self.number})"

    def _run(self, op: Operation[R]) -> R:
        return self._access.run(op)

    def channel(self, number: int) -> "Channel":
        """A handle for channel `number`; the Channel owns its own copy of this Chip."""
        return Channel(Chip(self.number, self._protocol, self._access), number)

    def channel_count(self) -> int:
        return self._run(self._protocol.channel_count(self.number))

    def export(self, channel: int) -> None:
        """Export `channel`; no-op if it is already exported."""
        self._run(self._protocol.export(self.number, channel))

    def unexport(self, channel: int) -> None:
        """Unexport `channel`; no-op if it is not exported."""
        self._run(self._protocol.unexport(self.number, channel))


class Channel:
    """
    One output (pwmM) of a Chip. Creating it does not export it and the
    channel number is only checked by the kernel on first use.
    """

    def __init__(self, chip: Chip, number: int):
        codec.encode_int(number, attribute="channel")
        self.chip = chip
        self.number = number

    @classmethod
    def open(
        cls,
        chip: int,
        number: int,
        *,
        config: Optional[PwmConfig] = None,
        access: Optional[BlockingFileAccess] = None,
    ) -> "Channel":
        return cls(Chip.open(chip, config=config, access=access), number)

    def __repr__(self) -> str:
        return f"Channel(chip={self.chip.number}, number={self.number})"

    def _run(self, op: Operation[R]) -> R:
        return self.chip._run(op)

    @property
    def _protocol(self) -> PwmProtocol:
        return self.chip._protocol

    # ---------------------------
    # Export lifecycle
    # ---------------------------

    def export(self) -> None:
        self.chip.export(self.number)

    def unexport(self) -> None:
        self.chip.unexport(self.number)

    def _try_unexport(self) -> Optional[PwmError]:
        try:
            self.unexport()
        except PwmError as exc:
            return exc
        return None

    @contextmanager
    def exported(self) -> Iterator["Channel"]:
        """Export for the duration of the block; unexport on every exit path."""
        self.export()
        try:
            yield self
        except BaseException as exc:
            check_release(exc, self._try_unexport())
            raise
        self.unexport()

    def with_export(self, work: Callable[[], R]) -> R:
        """Run `work()` with the channel exported and return its result."""
        with self.exported():
            return work()

    # ---------------------------
    # Attributes
    # ---------------------------

    def enable(self, flag: bool) -> None:
        self._run(self._protocol.set_enabled(self.chip.number, self.number, flag))

    def disable(self) -> None:
        self.enable(False)

    def get_enabled(self) -> bool:
        return self._run(self._protocol.get_enabled(self.chip.number, self.number))

    def set_period_ns(self, period_ns: int) -> None:
        self._run(self._protocol.set_period_ns(self.chip.number, self.number, period_ns))

    def get_period_ns(self) -> int:
        return self._run(self._protocol.get_period_ns(self.chip.number, self.number))

    def set_duty_cycle_ns(self, duty_cycle_ns: int) -> None:
        """Value must not exceed the period; the kernel enforces this."""
        self._run(self._protocol.set_duty_cycle_ns(self.chip.number, self.number, duty_cycle_ns))

    def get_duty_cycle_ns(self) -> int:
        return self._run(self._protocol.get_duty_cycle_ns(self.chip.number, self.number))

    def set_duty_cycle(self, ratio: float) -> None:
        """Duty cycle as a fraction (0.0..1.0) of the current period."""
        self._run(self._protocol.set_duty_cycle(self.chip.number, self.number, ratio))

    def get_duty_cycle(self) -> float:
        return self._run(self._protocol.get_duty_cycle(self.chip.number, self.number))

    def set_frequency_hz(self, hz: float) -> None:
        self._run(self._protocol.set_frequency_hz(self.chip.number, self.number, hz))

    def get_frequency_hz(self) -> float:
        return self._run(self._protocol.get_frequency_hz(self.chip.number, self.number))

    def set_polarity(self, polarity: Polarity) -> None:
        self._run(self._protocol.set_polarity(self.chip.number, self.number, polarity))

    def get_polarity(self) -> Polarity:
        return self._run(self._protocol.get_polarity(self.chip.number, self.number))

    def get_capture(self) -> Tuple[int, int]:
        """(period, duty_cycle) measured in input-capture mode."""
        return self._run(self._protocol.get_capture(self.chip.number, self.number))
