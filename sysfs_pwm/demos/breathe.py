#!/usr/bin/env python3
"""
breathe.py

Make an LED "breathe" by ramping a PWM channel's duty cycle up and down.

Behavior:
- export the configured channel for the lifetime of the run
- duty -> 0, period -> BreatheConfig.period_ns, enable
- ramp 0 -> period over duration_ms in step_ms increments, then back down
- on exit (Ctrl+C included): disable, unexport

Env overrides: see config.BreatheConfig; LOG_LEVEL sets logging verbosity.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

from ..config import BreatheConfig, load_breathe_config, load_config
from ..errors import PwmError
from ..pwm_async import AsyncChannel


logger = logging.getLogger(__name__)


def _steps(cfg: BreatheConfig) -> int:
    return max(1, cfg.duration_ms // max(1, cfg.step_ms))


async def ramp_up(channel: AsyncChannel, cfg: BreatheConfig) -> None:
    period_ns = await channel.get_period_ns()
    steps = _steps(cfg)
    for i in range(steps):
        await channel.set_duty_cycle_ns(period_ns * i // steps)
        await asyncio.sleep(cfg.step_ms / 1000.0)
    await channel.set_duty_cycle_ns(period_ns)


async def ramp_down(channel: AsyncChannel, cfg: BreatheConfig) -> None:
    period_ns = await channel.get_period_ns()
    steps = _steps(cfg)
    for i in range(steps, 0, -1):
        await channel.set_duty_cycle_ns(period_ns * i // steps)
        await asyncio.sleep(cfg.step_ms / 1000.0)
    await channel.set_duty_cycle_ns(0)


async def breathe(channel: AsyncChannel, cfg: BreatheConfig, *, cycles: Optional[int] = None) -> int:
    """
    Run `cycles` breaths (forever if None) on an exported channel.
    Returns the number of completed breaths.
    """
    # duty first so that shrinking the period never leaves duty > period
    await channel.set_duty_cycle_ns(0)
    await channel.set_period_ns(cfg.period_ns)
    await channel.enable(True)

    done = 0
    try:
        while cycles is None or done < cycles:
            await ramp_up(channel, cfg)
            await ramp_down(channel, cfg)
            done += 1
            logger.debug("Breath %d complete", done)
    except BaseException:
        # the ramp failure is the one to report
        try:
            await channel.disable()
        except PwmError as exc:
            logger.warning("Disabling %r after a failed ramp also failed: %s", channel, exc)
        raise
    await channel.disable()
    return done


async def run(cfg: BreatheConfig, *, cycles: Optional[int] = None) -> int:
    channel = await AsyncChannel.open(cfg.chip, cfg.channel, config=load_config())
    logger.info("Breathing on pwmchip%d/pwm%d (period %d ns)", cfg.chip, cfg.channel, cfg.period_ns)
    async with channel.exported():
        return await breathe(channel, cfg, cycles=cycles)


def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        asyncio.run(run(load_breathe_config()))
    except KeyboardInterrupt:
        logger.info("Stopped by user.")


if __name__ == "__main__":
    main()
