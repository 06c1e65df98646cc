"""Tests for the progress reporter implementations.

WHY: The reporters are the pipeline's only voice. The console line must
stay on one line and end cleanly; the queue reporter must deliver exactly
one terminal message, last, for the GUI to unlock its controls.

HOW: ConsoleReporter writes into an io.StringIO. QueueReporter writes
into a queue.Queue that the test drains. LoggingReporter is checked with
pytest's caplog fixture.

RULES:
- Reporters are driven directly; no pipeline is involved
"""

import io
import logging
import queue

import pytest

from wav_bitwise.errors import TruncatedDataError
from wav_bitwise.reporters import (
    ConsoleReporter,
    LoggingReporter,
    NullReporter,
    ProgressReporter,
    QueueReporter,
    percent,
)
from wav_bitwise.reporters.queued import DONE_MSG, ERROR_MSG, PROGRESS_MSG


def _drain(messages):
    items = []
    while True:
        try:
            items.append(messages.get_nowait())
        except queue.Empty:
            return items


class TestBase:
    """ProgressReporter contract and helpers."""

    def test_cannot_instantiate_abstract(self):
        with pytest.raises(TypeError):
            ProgressReporter()

    def test_null_reporter_accepts_everything(self):
        reporter = NullReporter()
        reporter.progress(1, 2)
        reporter.finished(None)
        reporter.finished(TruncatedDataError("x"))

    @pytest.mark.parametrize("processed,total,expected", [
        (0, 10, 0.0), (5, 10, 50.0), (10, 10, 100.0), (0, 0, 100.0),
    ])
    def test_percent(self, processed, total, expected):
        assert percent(processed, total) == expected


class TestConsoleReporter:
    """Single-line terminal output."""

    def test_progress_line(self):
        stream = io.StringIO()
        reporter = ConsoleReporter(stream)
        reporter.progress(1, 4)
        reporter.progress(4, 4)
        reporter.finished(None)
        assert stream.getvalue() == (
            "\rProgress: 25% (1/4 bytes)\rProgress: 100% (4/4 bytes)\n"
        )

    def test_throttles_same_percent(self):
        stream = io.StringIO()
        reporter = ConsoleReporter(stream)
        for done in range(1, 1001):
            reporter.progress(done, 100000)
        assert stream.getvalue().count("\r") == 2  # 0% and 1%

    def test_no_newline_without_progress(self):
        stream = io.StringIO()
        ConsoleReporter(stream).finished(TruncatedDataError("short"))
        assert stream.getvalue() == ""


class TestQueueReporter:
    """Messages for the GUI thread."""

    def test_success_sequence(self):
        messages = queue.Queue()
        reporter = QueueReporter(messages)
        reporter.progress(50, 100)
        reporter.progress(100, 100)
        reporter.finished(None)
        assert _drain(messages) == [
            (PROGRESS_MSG, (50, 100)),
            (PROGRESS_MSG, (100, 100)),
            (DONE_MSG, None),
        ]

    def test_error_message_carries_exception(self):
        messages = queue.Queue()
        reporter = QueueReporter(messages)
        error = TruncatedDataError("short read")
        reporter.finished(error)
        assert _drain(messages) == [(ERROR_MSG, error)]

    def test_final_progress_always_sent(self):
        messages = queue.Queue()
        reporter = QueueReporter(messages)
        reporter.progress(999, 1000)
        reporter.progress(1000, 1000)
        items = _drain(messages)
        assert items[-1] == (PROGRESS_MSG, (1000, 1000))


class TestLoggingReporter:
    """Log records for quiet mode."""

    def test_success_logged_at_info(self, caplog):
        caplog.set_level(logging.DEBUG, logger="wav_bitwise")
        reporter = LoggingReporter()
        reporter.progress(2, 4)
        reporter.finished(None)
        messages = [r.getMessage() for r in caplog.records]
        assert "Processed 2/4 bytes (50.0%)" in messages
        assert "Transform finished" in messages

    def test_failure_logged_at_error(self, caplog):
        caplog.set_level(logging.INFO, logger="wav_bitwise")
        LoggingReporter().finished(TruncatedDataError("short read"))
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "Transform failed (truncated_data): short read"
