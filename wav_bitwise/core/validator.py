"""Pre-flight checks for a parsed WAV file and a requested operation.

WHY: A run must be refused before any output file is created when the
input is not 8/16-bit PCM or the operand is outside the operation's
range. Doing the checks up front keeps the pipeline free of policy.

HOW: Pure functions over RiffFormatDescriptor and OperationSpec. No I/O.

RULES:
- Order: PCM format, then bit depth, then operand range; first failure wins
- Only audio_format 1 (PCM) is accepted
- Only 8 and 16 bits per sample are accepted
- NOT accepts any operand
"""

from __future__ import annotations

from wav_bitwise.core.operations import OperationSpec, OperationTag
from wav_bitwise.core.riff import RiffFormatDescriptor
from wav_bitwise.errors import (
    OperandOutOfRangeError,
    UnsupportedBitDepthError,
    UnsupportedFormatError,
)

SUPPORTED_BIT_DEPTHS = (8, 16)

_SHIFTS = (OperationTag.RIGHT_SHIFT, OperationTag.LEFT_SHIFT)


def validate_operation(operation: OperationSpec) -> None:
    """Check the operand against the operation's legal range.

    Raises:
        OperandOutOfRangeError: if the operand is outside the range.
    """
    bounds = operation.operand_range
    if bounds is None:
        return
    low, high = bounds
    if not low <= operation.value <= high:
        what = "Shift value" if operation.tag in _SHIFTS else "Operation value"
        raise OperandOutOfRangeError(
            "{} must be in range {}-{} for '{}', got {}".format(
                what, low, high, operation.tag.value, operation.value
            )
        )


def validate(descriptor: RiffFormatDescriptor, operation: OperationSpec) -> None:
    """Admit or refuse a run.

    Raises:
        UnsupportedFormatError: audio format is not PCM.
        UnsupportedBitDepthError: sample width is not 8 or 16 bits.
        OperandOutOfRangeError: operand outside the operation's range.
    """
    if not descriptor.is_pcm:
        raise UnsupportedFormatError(
            "Only PCM format supported (audio format {})".format(descriptor.audio_format)
        )
    if descriptor.bits_per_sample not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedBitDepthError(
            "Only 8-bit and 16-bit PCM supported ({} bits per sample)".format(
                descriptor.bits_per_sample
            )
        )
    validate_operation(operation)
