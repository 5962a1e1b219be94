"""
nonblocking.py

asyncio driver for protocol operations.

Every file request runs in the default executor via asyncio.to_thread, so only
the awaiting task is suspended while the kernel services the sysfs call.
Requests of one operation are issued strictly one after another.
"""

from __future__ import annotations

import asyncio

from .base import FileAccess, Operation, Settle, T


class AsyncFileAccess(FileAccess):

    async def run(self, op: Operation[T]) -> T:
        try:
            request = next(op)
            while True:
                if isinstance(request, Settle):
                    await asyncio.sleep(request.seconds)
                    answer = None
                else:
                    answer = await asyncio.to_thread(self.perform, request)
                request = op.send(answer)
        except StopIteration as stop:
            return stop.value
        finally:
            op.close()
