"""Tests for the widget-free helpers in the GUI module.

WHY: The spinner ranges, info panel text, and suggested output names are
plain logic that should not need a display to test.

HOW: Skips entirely where tkinter is not installed. No Tk root is ever
created.
"""

import queue

import pytest

pytest.importorskip("tkinter")

from wav_bitwise.gui import (  # noqa: E402
    describe_file,
    drain_messages,
    operand_settings,
    resolve_output_path,
)
from wav_bitwise.reporters.queued import DONE_MSG, ERROR_MSG  # noqa: E402


class TestOperandSettings:

    @pytest.mark.parametrize("name", ["right", "left"])
    def test_shifts(self, name):
        assert operand_settings(name) == ("Shift value (0-7):", 0, 7, True)

    @pytest.mark.parametrize("name", ["and", "or", "xor"])
    def test_masks(self, name):
        assert operand_settings(name) == ("Value (0-255):", 0, 255, True)

    def test_not_disables_spinner(self):
        label, _, _, enabled = operand_settings("not")
        assert enabled is False
        assert "ignored" in label


class TestDescribeFile:

    def test_pcm_file(self, minimal_wav_path):
        text = describe_file(minimal_wav_path)
        assert "Channels: 1" in text
        assert "Sample rate: 8000 Hz" in text
        assert "Data size: 3 bytes" in text
        assert "Warning" not in text

    def test_non_pcm_warns(self, write_wav):
        text = describe_file(write_wav(audio_format=3, bits_per_sample=32, data=bytes(8)))
        assert "Warning: not PCM (format 3)" in text

    def test_unreadable(self, tmp_path):
        assert describe_file(tmp_path / "missing.wav").startswith("Error: ")


class TestResolveOutputPath:

    def test_first_choice(self, tmp_path):
        source = tmp_path / "song.wav"
        assert resolve_output_path(source, "xor") == tmp_path / "song-xor.wav"

    def test_avoids_existing(self, tmp_path):
        source = tmp_path / "song.wav"
        (tmp_path / "song-xor.wav").write_bytes(b"")
        (tmp_path / "song-xor-2.wav").write_bytes(b"")
        assert resolve_output_path(source, "xor") == tmp_path / "song-xor-3.wav"


class TestDrainMessages:

    def test_drops_leftovers(self):
        messages = queue.Queue()
        messages.put((ERROR_MSG, RuntimeError("late failure")))
        messages.put((DONE_MSG, None))
        assert drain_messages(messages) == 2
        assert messages.empty()

    def test_empty_queue(self):
        assert drain_messages(queue.Queue()) == 0
