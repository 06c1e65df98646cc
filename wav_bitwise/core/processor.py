"""One-call entry point used by the CLI and the GUI.

WHY: Both front-ends need the same sequence (open, parse, validate,
create output, stream) with the same resource handling. Keeping the
sequence here means neither front-end re-implements parsing or
transform logic.

HOW: process_wav_file() validates the operand first (no I/O), opens the
source, parses it, validates the format, creates the destination, then
hands both handles to TransformPipeline.run(). Handles are context
managers, so they are closed on every exit path.

RULES:
- Nothing is written unless parsing and validation both succeed
- The output path may not resolve to the input file
- Trailing chunks are always kept when the ``fmt `` chunk is among them
- Every failure reaches reporter.finished(error) exactly once
- A partially written output is left on disk for the caller to handle
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

from wav_bitwise.core.operations import OperationSpec
from wav_bitwise.core.pipeline import TransformPipeline
from wav_bitwise.core.riff import (
    DataRegion,
    RiffFormatDescriptor,
    format_follows_data,
    parse_wav,
)
from wav_bitwise.core.validator import validate, validate_operation
from wav_bitwise.errors import DestinationCreateError, SourceOpenError, WavBitwiseError
from wav_bitwise.reporters.base import NullReporter, ProgressReporter

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass(frozen=True)
class RunResult:
    """What a successful run produced."""

    input_path: Path
    output_path: Path
    operation: OperationSpec
    descriptor: RiffFormatDescriptor
    data_region: DataRegion
    bytes_processed: int


def open_source(path: PathLike) -> BinaryIO:
    """Open an input WAV for reading.

    Raises:
        SourceOpenError: if the file cannot be opened.
    """
    try:
        return open(path, "rb")
    except OSError as exc:
        raise SourceOpenError("Cannot open input file {}: {}".format(path, exc.strerror or exc)) from exc


def create_destination(path: PathLike) -> BinaryIO:
    """Create (or truncate) an output file for writing.

    Raises:
        DestinationCreateError: if the file cannot be created.
    """
    try:
        return open(path, "wb")
    except OSError as exc:
        raise DestinationCreateError(
            "Cannot create output file {}: {}".format(path, exc.strerror or exc)
        ) from exc


def inspect_wav_file(path: PathLike) -> Tuple[RiffFormatDescriptor, DataRegion]:
    """Parse a WAV file without transforming it."""
    with open_source(path) as source:
        return parse_wav(source)


def _same_file(a: Path, b: Path) -> bool:
    try:
        return b.exists() and os.path.samefile(a, b)
    except OSError:
        return a.resolve() == b.resolve()


def process_wav_file(
    input_path: PathLike,
    output_path: PathLike,
    operation: OperationSpec,
    reporter: Optional[ProgressReporter] = None,
    window_size: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
    copy_trailing: Optional[bool] = None,
) -> RunResult:
    """Apply ``operation`` to the samples of ``input_path``.

    WHY: This is the single code path behind "Process" in the GUI and
    the CLI's main action.

    HOW: Builds the pipeline first so a bad window size fails before any
    file is touched, then follows open → parse → validate → create →
    run. Errors raised before the pipeline starts are reported here;
    the pipeline reports its own.

    Returns:
        RunResult describing the completed run.

    Raises:
        WavBitwiseError: any parse, validation, or I/O failure.
        ValueError: invalid window size.
    """
    reporter = reporter or NullReporter()
    src_path = Path(input_path)
    dst_path = Path(output_path)
    pipeline = TransformPipeline(window_size=window_size, copy_trailing=copy_trailing)

    try:
        validate_operation(operation)
        source = open_source(src_path)
    except WavBitwiseError as exc:
        reporter.finished(exc)
        raise

    with source:
        try:
            descriptor, region = parse_wav(source)
            validate(descriptor, operation)
            if not pipeline.copy_trailing and format_follows_data(source, region):
                logger.info("'fmt ' chunk follows the sample data; keeping trailing chunks")
                pipeline.copy_trailing = True
            if _same_file(src_path, dst_path):
                raise DestinationCreateError(
                    "Output file must differ from input file: {}".format(dst_path)
                )
            destination = create_destination(dst_path)
        except WavBitwiseError as exc:
            reporter.finished(exc)
            raise

        logger.info("Processing %s -> %s (%s)", src_path, dst_path, operation.describe())
        with destination:
            processed = pipeline.run(
                source,
                destination,
                region.offset,
                region,
                operation,
                reporter,
                cancel_event=cancel_event,
            )

    return RunResult(
        input_path=src_path,
        output_path=dst_path,
        operation=operation,
        descriptor=descriptor,
        data_region=region,
        bytes_processed=processed,
    )
