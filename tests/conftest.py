"""
Fake sysfs PWM tree for the tests.

The tree is a plain directory under tmp_path; the access drivers are wrapped
so writes to `export` / `unexport` materialize or remove the channel
directory, like the kernel does, and duty_cycle > period is rejected with
EINVAL.
"""

from __future__ import annotations

import errno
import os
import shutil
from pathlib import Path

import pytest

from sysfs_pwm.access import AsyncFileAccess, BlockingFileAccess
from sysfs_pwm.config import PwmConfig


CHANNEL_DEFAULTS = {
    "enable": "0\n",
    "period": "0\n",
    "duty_cycle": "0\n",
    "polarity": "normal\n",
    "capture": "0 0\n",
}


class KernelEmulation:
    def __init__(self) -> None:
        self.export_writes: list[str] = []
        self.unexport_writes: list[str] = []
        self.fail_unexport = False

    def write_text(self, path: str, data: str) -> None:
        chip_dir, name = os.path.split(path)
        if name == "export":
            self.export_writes.append(data)
            channel_dir = Path(chip_dir) / f"pwm{int(data)}"
            if channel_dir.exists():
                raise OSError(errno.EBUSY, "Device or resource busy")
            channel_dir.mkdir()
            for attr, content in CHANNEL_DEFAULTS.items():
                (channel_dir / attr).write_text(content)
            return
        if name == "unexport":
            self.unexport_writes.append(data)
            if self.fail_unexport:
                raise PermissionError(errno.EACCES, "Permission denied")
            shutil.rmtree(Path(chip_dir) / f"pwm{int(data)}")
            return
        if name == "duty_cycle":
            period = int(Path(chip_dir, "period").read_text().strip())
            if int(data) > period:
                raise OSError(errno.EINVAL, "Invalid argument")
        super().write_text(path, data)  # type: ignore[misc]


class FakeBlockingAccess(KernelEmulation, BlockingFileAccess):
    pass


class FakeAsyncAccess(KernelEmulation, AsyncFileAccess):
    pass


@pytest.fixture
def sysfs(tmp_path: Path) -> Path:
    root = tmp_path / "pwm"
    chip = root / "pwmchip0"
    chip.mkdir(parents=True)
    (chip / "npwm").write_text("2\n")
    (chip / "export").write_text("")
    (chip / "unexport").write_text("")
    return root


@pytest.fixture
def config(sysfs: Path) -> PwmConfig:
    return PwmConfig(sysfs_root=str(sysfs))


@pytest.fixture
def access() -> FakeBlockingAccess:
    return FakeBlockingAccess()


@pytest.fixture
def async_access() -> FakeAsyncAccess:
    return FakeAsyncAccess()


@pytest.fixture
def channel_dir(sysfs: Path) -> Path:
    return sysfs / "pwmchip0" / "pwm0"
