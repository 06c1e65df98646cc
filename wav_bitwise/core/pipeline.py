"""Bounded-memory streaming transform of a WAV sample payload.

WHY: WAV files can be gigabytes long. Loading the payload whole would tie
memory use to file size, so samples are streamed through one fixed-size
window while everything before them is copied byte-for-byte.

HOW: TransformPipeline.run() copies the header region (all bytes before
the data offset) in one read/write pass, then loops: read up to one
window of samples, translate the bytes in place, write them, report
progress. Optionally the bytes after the payload (chunks such as LIST
that follow ``data``) are copied verbatim at the end; when they are
dropped instead, the RIFF size field of the output is rewritten to match.

RULES:
- The header region is copied unmodified, before any sample is touched;
  only the RIFF size field changes, and only when trailing bytes are dropped
- A short header read or write is HeaderIoError
- A short sample read is TruncatedDataError (declared size > real size)
- A short or failed write is DestinationIoError
- Window allocation failure is AllocationError
- reporter.progress() once per window; reporter.finished() exactly once,
  before any error propagates
- The cancel event, when given, is checked once per window
- A partially written destination is left as-is; cleanup is the caller's
- The pipeline never opens or closes handles; the caller owns them
"""

from __future__ import annotations

import logging
import struct
import threading
from typing import BinaryIO, Optional

from wav_bitwise import config
from wav_bitwise.core.operations import OperationSpec, apply_operation, translation_table
from wav_bitwise.core.riff import CHUNK_HEADER_SIZE, RIFF_HEADER_SIZE, DataRegion
from wav_bitwise.errors import (
    AllocationError,
    CancelledError,
    DestinationIoError,
    HeaderIoError,
    TruncatedDataError,
    WavBitwiseError,
)
from wav_bitwise.reporters.base import ProgressReporter

logger = logging.getLogger(__name__)

RIFF_SIZE_OFFSET = 4


def _read_into(source: BinaryIO, view: memoryview) -> int:
    """Fill ``view`` from ``source``; return how many bytes arrived.

    Keeps reading after partial reads and stops only at end of stream.
    """
    filled = 0
    size = len(view)
    while filled < size:
        count = source.readinto(view[filled:])
        if not count:
            break
        filled += count
    return filled


def _write_all(destination: BinaryIO, data: memoryview) -> int:
    """Write ``data``; return how many bytes the destination accepted."""
    written = destination.write(data)
    # Buffered writers return None only in non-blocking mode
    if written is None:
        return 0
    return written


class TransformPipeline:
    """Copies a WAV header region and transforms its sample payload.

    Attributes:
        window_size: Capacity of the transfer window in bytes.
        copy_trailing: Copy the bytes after the payload verbatim.
    """

    def __init__(
        self,
        window_size: Optional[int] = None,
        copy_trailing: Optional[bool] = None,
    ) -> None:
        self.window_size = config.parse_window_size(
            window_size if window_size is not None else config.WINDOW_SIZE
        )
        self.copy_trailing = config.COPY_TRAILING if copy_trailing is None else copy_trailing

    def run(
        self,
        source: BinaryIO,
        destination: BinaryIO,
        header_length: int,
        data_region: DataRegion,
        operation: OperationSpec,
        reporter: ProgressReporter,
        cancel_event: Optional[threading.Event] = None,
    ) -> int:
        """Write the transformed WAV to ``destination``.

        Args:
            source: Seekable binary stream of the input WAV.
            destination: Writable binary stream for the output.
            header_length: Bytes to copy verbatim from offset 0
                (normally ``data_region.offset``).
            data_region: Payload location from parse_wav().
            operation: Validated operation to apply.
            reporter: Receives progress and the terminal event.
            cancel_event: Optional flag that stops the run between windows.

        Returns:
            Number of sample bytes transformed.

        Raises:
            HeaderIoError, TruncatedDataError, DestinationIoError,
            AllocationError, CancelledError.
        """
        logger.info(
            "Transforming %d sample bytes at offset %d with %s",
            data_region.length,
            data_region.offset,
            operation.describe(),
        )
        try:
            self._copy_header(source, destination, header_length)
            window = self._allocate_window(data_region.length)
            processed = self._stream_payload(
                source, destination, data_region, operation, reporter, window, cancel_event
            )
            if self.copy_trailing:
                self._copy_trailing(source, destination, window)
            elif header_length >= RIFF_HEADER_SIZE:
                self._patch_riff_size(destination, header_length + processed)
            self._flush(destination)
        except WavBitwiseError as exc:
            logger.warning("Transform failed: %s", exc)
            reporter.finished(exc)
            raise

        reporter.finished(None)
        logger.info("Transformed %d bytes", processed)
        return processed

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _copy_header(self, source: BinaryIO, destination: BinaryIO, header_length: int) -> None:
        try:
            source.seek(0)
            header = source.read(header_length)
        except OSError as exc:
            raise HeaderIoError("Cannot read file header: {}".format(exc)) from exc
        if len(header) != header_length:
            raise HeaderIoError(
                "Cannot read file header: got {} of {} bytes".format(len(header), header_length)
            )
        try:
            written = _write_all(destination, memoryview(header))
        except OSError as exc:
            raise HeaderIoError("Cannot write file header: {}".format(exc)) from exc
        if written != header_length:
            raise HeaderIoError(
                "Cannot write file header: wrote {} of {} bytes".format(written, header_length)
            )

    def _allocate_window(self, payload_length: int) -> bytearray:
        # Never allocate more than the payload needs, but at least one byte
        capacity = max(1, min(self.window_size, payload_length))
        try:
            return bytearray(capacity)
        except MemoryError as exc:
            raise AllocationError(
                "Cannot allocate a {} byte transfer window".format(capacity)
            ) from exc

    def _stream_payload(
        self,
        source: BinaryIO,
        destination: BinaryIO,
        data_region: DataRegion,
        operation: OperationSpec,
        reporter: ProgressReporter,
        window: bytearray,
        cancel_event: Optional[threading.Event],
    ) -> int:
        table = translation_table(operation)
        total = data_region.length
        processed = 0
        remaining = total

        try:
            source.seek(data_region.offset)
        except OSError as exc:
            raise TruncatedDataError("Cannot seek to sample data: {}".format(exc)) from exc

        buffer = memoryview(window)
        while remaining > 0:
            if cancel_event is not None and cancel_event.is_set():
                raise CancelledError(
                    "Cancelled after {} of {} bytes".format(processed, total)
                )

            size = min(len(buffer), remaining)
            view = buffer[:size]

            try:
                got = _read_into(source, view)
            except OSError as exc:
                raise TruncatedDataError("Cannot read sample data: {}".format(exc)) from exc
            if got != size:
                raise TruncatedDataError(
                    "Read incomplete chunk: expected {} bytes at offset {}, got {} "
                    "(data chunk declares {} bytes)".format(
                        size, data_region.offset + processed, got, total
                    )
                )

            apply_operation(view, operation, table)

            try:
                written = _write_all(destination, view)
            except OSError as exc:
                raise DestinationIoError("Cannot write sample data: {}".format(exc)) from exc
            if written != size:
                raise DestinationIoError(
                    "Write incomplete chunk: wrote {} of {} bytes".format(written, size)
                )

            processed += size
            remaining -= size
            reporter.progress(processed, total)

        return processed

    def _copy_trailing(self, source: BinaryIO, destination: BinaryIO, window: bytearray) -> None:
        copied = 0
        buffer = memoryview(window)
        while True:
            try:
                got = _read_into(source, buffer)
            except OSError as exc:
                raise TruncatedDataError("Cannot read trailing chunks: {}".format(exc)) from exc
            if not got:
                break
            try:
                written = _write_all(destination, buffer[:got])
            except OSError as exc:
                raise DestinationIoError("Cannot write trailing chunks: {}".format(exc)) from exc
            if written != got:
                raise DestinationIoError(
                    "Write incomplete chunk: wrote {} of {} bytes".format(written, got)
                )
            copied += got
        if copied:
            logger.debug("Copied %d trailing bytes", copied)

    def _patch_riff_size(self, destination: BinaryIO, written: int) -> None:
        # Bytes after the payload were dropped; the copied size field is stale
        try:
            destination.seek(RIFF_SIZE_OFFSET)
            destination.write(struct.pack("<I", written - CHUNK_HEADER_SIZE))
            destination.seek(written)
        except OSError as exc:
            raise DestinationIoError("Cannot update RIFF size: {}".format(exc)) from exc

    def _flush(self, destination: BinaryIO) -> None:
        try:
            destination.flush()
        except OSError as exc:
            raise DestinationIoError("Cannot flush output file: {}".format(exc)) from exc
