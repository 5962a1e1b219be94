from .base import FileAccess, Operation, Exists, Read, Request, Settle, Write, translate_os_error
from .blocking import BlockingFileAccess
from .nonblocking import AsyncFileAccess

__all__ = [
    'FileAccess', 'BlockingFileAccess', 'AsyncFileAccess',
    'Operation', 'Request', 'Exists', 'Read', 'Write', 'Settle',
    'translate_os_error',
]
