"""WAV Bitwise: byte-wise bit manipulation of WAV sample data.

WHY: Glitch and lo-fi effects (bit crushing, inversion, masking) can be
made by applying plain bitwise operations to the raw sample bytes of a
PCM WAV file, as long as the container metadata survives untouched.

HOW: Three-stage core. Walk the RIFF container (core.riff), validate the
format and operand (core.validator), stream the payload through a fixed
window applying the transform (core.pipeline). The CLI and the Tkinter
GUI are thin front-ends over core.processor.

RULES:
- Only 8/16-bit PCM input is accepted
- Everything before the sample payload is copied byte-for-byte
- Memory use is bounded by the window size, not by file size
"""

__version__ = "0.1.0"
