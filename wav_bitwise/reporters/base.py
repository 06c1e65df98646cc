"""Abstract progress sink for transform runs.

WHY: The pipeline must report progress and a terminal result without
knowing whether a terminal, a Tk window, or a log file is listening.
This base class is the only contract between the core and its front-ends.

HOW: ProgressReporter is an ABC with two calls. progress() fires once per
processed window; finished() fires exactly once per run, with None on
success or the exception that ended the run.

RULES:
- Subclasses MUST implement progress() and finished()
- progress(processed, total): processed is cumulative sample bytes,
  total is the declared data length; processed never decreases
- finished() is called exactly once, after the last progress() call
- finished(error) is called BEFORE the error propagates to the caller
- Reporters must not raise; a broken display must not abort a run
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from wav_bitwise.errors import WavBitwiseError


class ProgressReporter(ABC):
    """Abstract base for all progress sinks.

    To add a new sink:
    1. Create a new file in reporters/
    2. Subclass ProgressReporter
    3. Implement progress() and finished()
    4. Export it from reporters/__init__.py
    """

    @abstractmethod
    def progress(self, processed: int, total: int) -> None:
        """Record that ``processed`` of ``total`` sample bytes are done."""

    @abstractmethod
    def finished(self, error: Optional[WavBitwiseError]) -> None:
        """Record the end of the run.

        Args:
            error: None when the run succeeded, otherwise the error that
                   stopped it.
        """


class NullReporter(ProgressReporter):
    """Reporter that ignores every event."""

    def progress(self, processed: int, total: int) -> None:
        pass

    def finished(self, error: Optional[WavBitwiseError]) -> None:
        pass


def percent(processed: int, total: int) -> float:
    """Completion percentage; an empty payload counts as complete."""
    if total <= 0:
        return 100.0
    return processed * 100.0 / total
