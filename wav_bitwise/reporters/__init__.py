"""Progress reporters: where pipeline events go.

WHY: The CLI, GUI, and tests each want pipeline events delivered
differently. A small package of interchangeable sinks keeps the core
ignorant of its audience.

HOW: All sinks subclass ProgressReporter from reporters/base.py.

RULES:
- Every reporter listed here must be importable without side effects
- The core only ever sees the ProgressReporter interface
"""

from __future__ import annotations

from wav_bitwise.reporters.base import NullReporter, ProgressReporter, percent
from wav_bitwise.reporters.console import ConsoleReporter
from wav_bitwise.reporters.logging_reporter import LoggingReporter
from wav_bitwise.reporters.queued import QueueReporter

__all__ = [
    "ConsoleReporter",
    "LoggingReporter",
    "NullReporter",
    "ProgressReporter",
    "QueueReporter",
    "percent",
]
