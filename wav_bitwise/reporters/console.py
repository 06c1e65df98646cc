"""Single-line terminal progress display.

WHY: Long files take a while; the CLI shows a live percentage the way the
original console tool did, on one line rewritten with a carriage return.

HOW: Each progress() call rewrites ``Progress: NN% (done/total bytes)``.
finished() ends the line. Output goes to stderr by default so stdout
stays free for --json output.

RULES:
- Never writes more than one progress line per distinct integer percent
- finished() terminates the line if one was started, success or failure
- An empty payload prints nothing
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from wav_bitwise.errors import WavBitwiseError
from wav_bitwise.reporters.base import ProgressReporter, percent


class ConsoleReporter(ProgressReporter):
    """Carriage-return progress line on a text stream."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stderr
        self._last_percent: Optional[int] = None
        self._wrote_line = False

    def progress(self, processed: int, total: int) -> None:
        pct = int(percent(processed, total))
        if pct == self._last_percent and processed != total:
            return
        self._last_percent = pct
        self._stream.write(
            "\rProgress: {}% ({}/{} bytes)".format(pct, processed, total)
        )
        self._stream.flush()
        self._wrote_line = True

    def finished(self, error: Optional[WavBitwiseError]) -> None:
        if self._wrote_line:
            self._stream.write("\n")
            self._stream.flush()
        self._wrote_line = False
