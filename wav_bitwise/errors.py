"""Error taxonomy for the WAV bitwise transformer.

WHY: Parsing, validation, and streaming can each fail in several distinct
ways, and the front-ends need to tell them apart (exit codes, GUI
messages, reporter events) without string matching.

HOW: ErrorKind is a str enum naming every failure. WavBitwiseError is the
base exception and carries its kind; ParseError, ValidationError, and
PipelineError group the three stages. Each kind has exactly one concrete
subclass so callers can catch as broadly or narrowly as they need.

RULES:
- Every exception raised by the core is a WavBitwiseError subclass
- str(error) is a human-readable message suitable for end users
- I/O failures are chained with ``raise ... from exc``
- The core never prints; front-ends render str(error)
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    """Every way a run can fail.

    Inherits from str so values serialize cleanly to JSON.
    """

    MALFORMED_CONTAINER = "malformed_container"
    MISSING_FORMAT_CHUNK = "missing_format_chunk"
    MISSING_DATA_CHUNK = "missing_data_chunk"
    UNSUPPORTED_FORMAT = "unsupported_format"
    UNSUPPORTED_BIT_DEPTH = "unsupported_bit_depth"
    UNKNOWN_OPERATION = "unknown_operation"
    OPERAND_OUT_OF_RANGE = "operand_out_of_range"
    SOURCE_OPEN_ERROR = "source_open_error"
    DESTINATION_CREATE_ERROR = "destination_create_error"
    HEADER_IO_ERROR = "header_io_error"
    TRUNCATED_DATA = "truncated_data"
    DESTINATION_IO_ERROR = "destination_io_error"
    ALLOCATION_ERROR = "allocation_error"
    CANCELLED = "cancelled"


PARTIAL_OUTPUT_KINDS = frozenset({
    ErrorKind.HEADER_IO_ERROR,
    ErrorKind.TRUNCATED_DATA,
    ErrorKind.DESTINATION_IO_ERROR,
    ErrorKind.ALLOCATION_ERROR,
    ErrorKind.CANCELLED,
})
"""Kinds raised after the output file was created; it may be incomplete."""


class WavBitwiseError(Exception):
    """Base class for all errors raised by wav_bitwise."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ---------------------------------------------------------------------------
# Container parsing
# ---------------------------------------------------------------------------


class ParseError(WavBitwiseError):
    """The source is not a usable RIFF/WAVE container."""


class MalformedContainerError(ParseError):
    kind = ErrorKind.MALFORMED_CONTAINER


class MissingFormatChunkError(ParseError):
    kind = ErrorKind.MISSING_FORMAT_CHUNK


class MissingDataChunkError(ParseError):
    kind = ErrorKind.MISSING_DATA_CHUNK


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationError(WavBitwiseError):
    """The file or the requested operation is not supported."""


class UnsupportedFormatError(ValidationError):
    kind = ErrorKind.UNSUPPORTED_FORMAT


class UnsupportedBitDepthError(ValidationError):
    kind = ErrorKind.UNSUPPORTED_BIT_DEPTH


class UnknownOperationError(ValidationError):
    kind = ErrorKind.UNKNOWN_OPERATION


class OperandOutOfRangeError(ValidationError):
    kind = ErrorKind.OPERAND_OUT_OF_RANGE


# ---------------------------------------------------------------------------
# File handling and streaming
# ---------------------------------------------------------------------------


class PipelineError(WavBitwiseError):
    """Opening, copying, or streaming failed."""


class SourceOpenError(PipelineError):
    kind = ErrorKind.SOURCE_OPEN_ERROR


class DestinationCreateError(PipelineError):
    kind = ErrorKind.DESTINATION_CREATE_ERROR


class HeaderIoError(PipelineError):
    kind = ErrorKind.HEADER_IO_ERROR


class TruncatedDataError(PipelineError):
    kind = ErrorKind.TRUNCATED_DATA


class DestinationIoError(PipelineError):
    kind = ErrorKind.DESTINATION_IO_ERROR


class AllocationError(PipelineError):
    kind = ErrorKind.ALLOCATION_ERROR


class CancelledError(PipelineError):
    kind = ErrorKind.CANCELLED
