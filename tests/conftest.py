"""Shared test fixtures for the wav_bitwise test suite.

WHY: Almost every test needs a small, exactly-known WAV file: the minimal
44-byte-header case, files with extra chunks, files with ``data`` before
``fmt ``, truncated payloads, non-PCM formats. Building them in one place
keeps the byte layouts consistent and readable.

HOW: The byte builders live in wavfiles.py (importable from any test
module). The fixtures here wrap them for the common cases and write
files under tmp_path.

RULES:
- The scenario payload is [0x0F, 0xF0, 0x55] in an 8-bit mono 8000 Hz file
- All file fixtures live under tmp_path for isolation
"""

import pytest

from wavfiles import RecordingReporter, build_wav


@pytest.fixture
def minimal_wav_bytes():
    """44-byte header, 8-bit mono 8000 Hz PCM, data [0x0F, 0xF0, 0x55]."""
    return build_wav()


@pytest.fixture
def minimal_wav_path(tmp_path, minimal_wav_bytes):
    path = tmp_path / "minimal.wav"
    path.write_bytes(minimal_wav_bytes)
    return path


@pytest.fixture
def write_wav(tmp_path):
    """Factory: write build_wav(**kwargs) to tmp_path/name and return the path."""

    def _write(name="input.wav", **kwargs):
        path = tmp_path / name
        path.write_bytes(build_wav(**kwargs))
        return path

    return _write


@pytest.fixture
def reporter():
    return RecordingReporter()
