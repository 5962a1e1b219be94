"""
pwm_async.py

asyncio PWM handles. Same protocol as pwm.py; each sysfs call suspends only
the awaiting task. Two tasks driving the same channel may interleave at the
kernel level, nothing here serializes them.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Optional, Tuple, TypeVar

from . import codec
from .access.base import Operation
from .access.nonblocking import AsyncFileAccess
from .codec import Polarity
from .config import PwmConfig, load_config
from .errors import PwmError
from .protocol import PwmProtocol, check_release


R = TypeVar("R")


class AsyncChip:

    def __init__(self, number: int, protocol: PwmProtocol, access: AsyncFileAccess):
        self.number = number
        self._protocol = protocol
        self._access = access

    @classmethod
    async def open(
        cls,
        number: int,
        *,
        config: Optional[PwmConfig] = None,
        access: Optional[AsyncFileAccess] = None,
    ) -> "AsyncChip":
        """Raises NotFoundError if pwmchip{number} does not exist."""
        codec.encode_int(number, attribute="chip")
        protocol = PwmProtocol(config or load_config())
        access = access or AsyncFileAccess()
        await access.run(protocol.check_chip(number))
        return cls(number, protocol, access)

    def __repr__(self) -> str:
        return f"AsyncChip(number={self.number})"

    async def _run(self, op: Operation[R]) -> R:
        return await self._access.run(op)

    def channel(self, number: int) -> "AsyncChannel":
        return AsyncChannel(AsyncChip(self.number, self._protocol, self._access), number)

    async def channel_count(self) -> int:
        return await self._run(self._protocol.channel_count(self.number))

    async def export(self, channel: int) -> None:
        await self._run(self._protocol.export(self.number, channel))

    async def unexport(self, channel: int) -> None:
        await self._run(self._protocol.unexport(self.number, channel))


class AsyncChannel:

    def __init__(self, chip: AsyncChip, number: int):
        codec.encode_int(number, attribute="channel")
        self.chip = chip
        self.number = number

    @classmethod
    async def open(
        cls,
        chip: int,
        number: int,
        *,
        config: Optional[PwmConfig] = None,
        access: Optional[AsyncFileAccess] = None,
    ) -> "AsyncChannel":
        return cls(await AsyncChip.open(chip, config=config, access=access), number)

    def __repr__(self) -> str:
        return f"AsyncChannel(chip={self.chip.number}, number={self.number})"

    async def _run(self, op: Operation[R]) -> R:
        return await self.chip._run(op)

    @property
    def _protocol(self) -> PwmProtocol:
        return self.chip._protocol

    # ---------------------------
    # Export lifecycle
    # ---------------------------

    async def export(self) -> None:
        await self.chip.export(self.number)

    async def unexport(self) -> None:
        await self.chip.unexport(self.number)

    async def _try_unexport(self) -> Optional[PwmError]:
        try:
            await self.unexport()
        except PwmError as exc:
            return exc
        return None

    @asynccontextmanager
    async def exported(self) -> AsyncIterator["AsyncChannel"]:
        """Export for the duration of the block; unexport on every exit path."""
        await self.export()
        try:
            yield self
        except BaseException as exc:
            check_release(exc, await self._try_unexport())
            raise
        await self.unexport()

    async def with_export(self, work: Callable[[], Awaitable[R]]) -> R:
        """Await `work()` with the channel exported and return its result."""
        async with self.exported():
            return await work()

    # ---------------------------
    # Attributes
    # ---------------------------

    async def enable(self, flag: bool) -> None:
        await self._run(self._protocol.set_enabled(self.chip.number, self.number, flag))

    async def disable(self) -> None:
        await self.enable(False)

    async def get_enabled(self) -> bool:
        return await self._run(self._protocol.get_enabled(self.chip.number, self.number))

    async def set_period_ns(self, period_ns: int) -> None:
        await self._run(self._protocol.set_period_ns(self.chip.number, self.number, period_ns))

    async def get_period_ns(self) -> int:
        return await self._run(self._protocol.get_period_ns(self.chip.number, self.number))

    async def set_duty_cycle_ns(self, duty_cycle_ns: int) -> None:
        await self._run(self._protocol.set_duty_cycle_ns(self.chip.number, self.number, duty_cycle_ns))

    async def get_duty_cycle_ns(self) -> int:
        return await self._run(self._protocol.get_duty_cycle_ns(self.chip.number, self.number))

    async def set_duty_cycle(self, ratio: float) -> None:
        await self._run(self._protocol.set_duty_cycle(self.chip.number, self.number, ratio))

    async def get_duty_cycle(self) -> float:
        return await self._run(self._protocol.get_duty_cycle(self.chip.number, self.number))

    async def set_frequency_hz(self, hz: float) -> None:
        await self._run(self._protocol.set_frequency_hz(self.chip.number, self.number, hz))

    async def get_frequency_hz(self) -> float:
        return await self._run(self._protocol.get_frequency_hz(self.chip.number, self.number))

    async def set_polarity(self, polarity: Polarity) -> None:
        await self._run(self._protocol.set_polarity(self.chip.number, self.number, polarity))

    async def get_polarity(self) -> Polarity:
        return await self._run(self._protocol.get_polarity(self.chip.number, self.number))

    async def get_capture(self) -> Tuple[int, int]:
        return await self._run(self._protocol.get_capture(self.chip.number, self.number))
