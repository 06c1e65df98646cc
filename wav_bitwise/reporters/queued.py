"""Reporter that forwards events to another thread through a queue.

WHY: The GUI runs the pipeline on a worker thread, but Tk widgets may
only be touched from the main thread. Progress must therefore cross the
thread boundary as messages, never as shared mutable state.

HOW: Each call puts an immutable tuple ``(msg_type, payload)`` on a
queue.Queue. The GUI drains the queue from its main loop via .after().

RULES:
- PROGRESS_MSG payload: (processed, total) tuple of ints
- DONE_MSG payload: None
- ERROR_MSG payload: the WavBitwiseError instance (read-only after raise)
- Exactly one DONE_MSG or ERROR_MSG per run, always last
- Progress messages are throttled to one per whole percent
"""

from __future__ import annotations

import queue
from typing import Optional

from wav_bitwise.errors import WavBitwiseError
from wav_bitwise.reporters.base import ProgressReporter, percent

PROGRESS_MSG = "progress"
DONE_MSG = "done"
ERROR_MSG = "error"


class QueueReporter(ProgressReporter):
    """Posts progress and completion messages onto a queue."""

    def __init__(self, messages: queue.Queue) -> None:
        self._messages = messages
        self._last_percent: Optional[int] = None

    def progress(self, processed: int, total: int) -> None:
        pct = int(percent(processed, total))
        if pct == self._last_percent and processed != total:
            return
        self._last_percent = pct
        self._messages.put((PROGRESS_MSG, (processed, total)))

    def finished(self, error: Optional[WavBitwiseError]) -> None:
        if error is None:
            self._messages.put((DONE_MSG, None))
        else:
            self._messages.put((ERROR_MSG, error))
