from __future__ import annotations

import time

from .base import FileAccess, Operation, Settle, T


class BlockingFileAccess(FileAccess):
    """Runs protocol operations on the calling thread."""

    def run(self, op: Operation[T]) -> T:
        try:
            request = next(op)
            while True:
                if isinstance(request, Settle):
                    time.sleep(request.seconds)
                    answer = None
                else:
                    answer = self.perform(request)
                request = op.send(answer)
        except StopIteration as stop:
            return stop.value
        finally:
            op.close()
