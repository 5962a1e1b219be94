from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv


@dataclass(frozen=True)
class PwmConfig:
    """
    Where the PWM class directory lives and how exports behave.

    - sysfs_root: directory holding the pwmchipN entries
        * can be overridden via env PWM_SYSFS_ROOT
    - export_settle_s: pause after writing `export`, giving udev time to
      populate the channel directory and fix permissions (0 = no pause)
        * can be overridden via env PWM_EXPORT_SETTLE_S
    """
    sysfs_root: str = "/sys/class/pwm"
    export_settle_s: float = 0.0


@dataclass(frozen=True)
class BreatheConfig:
    """
    LED breathing demo.

    Overrides: PWM_CHIP, PWM_CHANNEL, PWM_PERIOD_NS,
    BREATHE_DURATION_MS, BREATHE_STEP_MS.
    """
    # EHRPWM0A (P9_22) on a BeagleBone; board specific
    chip: int = 0
    channel: int = 0

    period_ns: int = 20_000

    # Time for one ramp (off -> full or full -> off) and the update interval
    duration_ms: int = 1000
    step_ms: int = 20


DEFAULT_CONFIG = PwmConfig()
BREATHE_CONFIG = BreatheConfig()


def load_config() -> PwmConfig:
    """
    Build a PwmConfig from the environment. A .env file found from the
    working directory upwards fills in unset variables.
    """
    load_dotenv(find_dotenv(usecwd=True))
    return PwmConfig(
        sysfs_root=os.getenv("PWM_SYSFS_ROOT", DEFAULT_CONFIG.sysfs_root),
        export_settle_s=float(os.getenv("PWM_EXPORT_SETTLE_S", str(DEFAULT_CONFIG.export_settle_s))),
    )


def load_breathe_config() -> BreatheConfig:
    load_dotenv(find_dotenv(usecwd=True))
    return BreatheConfig(
        chip=int(os.getenv("PWM_CHIP", str(BREATHE_CONFIG.chip))),
        channel=int(os.getenv("PWM_CHANNEL", str(BREATHE_CONFIG.channel))),
        period_ns=int(os.getenv("PWM_PERIOD_NS", str(BREATHE_CONFIG.period_ns))),
        duration_ms=int(os.getenv("BREATHE_DURATION_MS", str(BREATHE_CONFIG.duration_ms))),
        step_ms=int(os.getenv("BREATHE_STEP_MS", str(BREATHE_CONFIG.step_ms))),
    )
