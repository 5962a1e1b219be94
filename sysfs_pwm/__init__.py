# sysfs_pwm package root

from .codec import Polarity
from .config import PwmConfig, load_config
from .errors import AggregateError, DecodeError, EncodeError, IoFailure, NotFoundError, PwmError
from .pwm import Channel, Chip
from .pwm_async import AsyncChannel, AsyncChip

__version__ = "0.1.0"

__all__ = [
    'Chip', 'Channel', 'AsyncChip', 'AsyncChannel', 'Polarity',
    'PwmConfig', 'load_config',
    'PwmError', 'NotFoundError', 'IoFailure', 'DecodeError', 'EncodeError', 'AggregateError',
]
