"""Reporter that writes run progress to the logging system."""

from __future__ import annotations

import logging
from typing import Optional

from wav_bitwise.errors import WavBitwiseError
from wav_bitwise.reporters.base import ProgressReporter, percent

logger = logging.getLogger(__name__)


class LoggingReporter(ProgressReporter):
    """Logs progress at DEBUG and the outcome at INFO or ERROR.

    Used by the CLI in --quiet mode so a run still leaves a trace when
    logging is turned up.
    """

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def progress(self, processed: int, total: int) -> None:
        self._log.debug(
            "Processed %d/%d bytes (%.1f%%)", processed, total, percent(processed, total)
        )

    def finished(self, error: Optional[WavBitwiseError]) -> None:
        if error is None:
            self._log.info("Transform finished")
        else:
            self._log.error("Transform failed (%s): %s", error.kind.value, error)
