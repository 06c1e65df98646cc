"""RIFF/WAVE container walker.

WHY: Real WAV files are not always the textbook 44-byte header. Editors
insert LIST, bext, fact, JUNK and other chunks before the samples, and
some writers put ``fmt `` after ``data``. The pipeline needs the format
block and the exact position of the sample payload regardless of layout.

HOW: iter_chunks() reads 8-byte sub-chunk headers in physical order and
yields one ChunkHeader per chunk, seeking past each body before reading
the next header. parse_wav() consumes that stream: it decodes the first
``fmt `` block and records the first ``data`` chunk as a DataRegion,
stopping as soon as both are known.

RULES:
- The first 12 bytes must be "RIFF" <u32 size> "WAVE"
- All integers are little-endian
- Unknown chunks are skipped by exactly their declared size
- ``fmt `` must declare at least 16 bytes; extension bytes are skipped
- The first ``fmt `` and the first ``data`` win; later ones are ignored
- ``data`` before ``fmt `` is allowed: scanning continues past the payload
- A missing ``data`` is reported before a missing ``fmt ``
- The source must be a seekable binary stream; a read, seek, or tell
  failure (pipes, FIFOs) is SourceOpenError
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Tuple

from wav_bitwise.errors import (
    MalformedContainerError,
    MissingDataChunkError,
    MissingFormatChunkError,
    SourceOpenError,
)

logger = logging.getLogger(__name__)

RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"

WAVE_FORMAT_PCM = 1

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8

_FMT_STRUCT = struct.Struct("<HHIIHH")
FMT_BLOCK_SIZE = _FMT_STRUCT.size  # 16


@dataclass(frozen=True)
class RiffFormatDescriptor:
    """Decoded ``fmt `` block (the 16 fields common to every WAV)."""

    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int

    @classmethod
    def from_bytes(cls, block: bytes) -> RiffFormatDescriptor:
        """Decode a 16-byte format block."""
        return cls(*_FMT_STRUCT.unpack(block[:FMT_BLOCK_SIZE]))

    @property
    def is_pcm(self) -> bool:
        return self.audio_format == WAVE_FORMAT_PCM


@dataclass(frozen=True)
class DataRegion:
    """Where the sample payload lives in the source.

    Attributes:
        offset: Absolute byte offset of the first sample byte. Everything
            before it is the header region copied verbatim.
        length: Declared size of the ``data`` chunk in bytes. Not checked
            against the real file size here.
    """

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class ChunkHeader:
    """One sub-chunk as found while walking the container.

    ``offset`` is the position of the chunk body, just past its 8-byte
    header.
    """

    chunk_id: bytes
    size: int
    offset: int

    @property
    def name(self) -> str:
        return self.chunk_id.decode("ascii", errors="replace")


def _read(source: BinaryIO, size: int) -> bytes:
    try:
        return source.read(size)
    except OSError as exc:
        raise SourceOpenError("Cannot read input file: {}".format(exc)) from exc


def _tell(source: BinaryIO) -> int:
    try:
        return source.tell()
    except OSError as exc:
        raise SourceOpenError("Input file is not seekable: {}".format(exc)) from exc


def _seek(source: BinaryIO, offset: int) -> None:
    try:
        source.seek(offset)
    except OSError as exc:
        raise SourceOpenError("Input file is not seekable: {}".format(exc)) from exc


def read_riff_header(source: BinaryIO) -> int:
    """Validate the 12-byte container header and return the RIFF size field.

    Raises:
        MalformedContainerError: on a short header or wrong tags.
        SourceOpenError: if the source cannot be read.
    """
    header = _read(source, RIFF_HEADER_SIZE)
    if len(header) < RIFF_HEADER_SIZE:
        raise MalformedContainerError("File too small to be a WAV file")
    if header[0:4] != RIFF_ID:
        raise MalformedContainerError("Not a RIFF file (missing 'RIFF' tag)")
    if header[8:12] != WAVE_ID:
        raise MalformedContainerError("Not a WAVE file (missing 'WAVE' tag)")
    return struct.unpack("<I", header[4:8])[0]


def iter_chunks(source: BinaryIO) -> Iterator[ChunkHeader]:
    """Yield each sub-chunk header in physical order.

    The source must be positioned just after the RIFF header. On each
    yield the source is positioned at the chunk body; the caller may read
    from it. Before the next header is read the source is moved to the end
    of the declared body, whatever the caller consumed.
    """
    while True:
        raw = _read(source, CHUNK_HEADER_SIZE)
        if len(raw) < CHUNK_HEADER_SIZE:
            return
        chunk_id = raw[0:4]
        size = struct.unpack("<I", raw[4:8])[0]
        chunk = ChunkHeader(chunk_id=chunk_id, size=size, offset=_tell(source))
        logger.debug("Chunk %r at %d, size=%d", chunk.name, chunk.offset, size)
        yield chunk
        _seek(source, chunk.offset + size)


def _read_format_block(source: BinaryIO, chunk: ChunkHeader) -> RiffFormatDescriptor:
    if chunk.size < FMT_BLOCK_SIZE:
        raise MalformedContainerError(
            "'fmt ' chunk too small: {} bytes (need {})".format(chunk.size, FMT_BLOCK_SIZE)
        )
    block = _read(source, FMT_BLOCK_SIZE)
    if len(block) < FMT_BLOCK_SIZE:
        raise MalformedContainerError("Truncated 'fmt ' chunk")
    return RiffFormatDescriptor.from_bytes(block)


def parse_wav(source: BinaryIO) -> Tuple[RiffFormatDescriptor, DataRegion]:
    """Locate the format block and the sample payload of a WAV stream.

    Reads from the current position, which must be the start of the file.

    Returns:
        (descriptor, data_region). ``data_region.offset`` doubles as the
        length of the header region that the pipeline copies verbatim.

    Raises:
        MalformedContainerError: bad tags or an unreadable ``fmt `` chunk.
        MissingDataChunkError: no ``data`` chunk before end of stream.
        MissingFormatChunkError: ``data`` found but no ``fmt `` chunk.
        SourceOpenError: the source cannot be read or is not seekable.
    """
    read_riff_header(source)

    descriptor = None
    region = None

    for chunk in iter_chunks(source):
        if chunk.chunk_id == FMT_ID and descriptor is None:
            descriptor = _read_format_block(source, chunk)
        elif chunk.chunk_id == DATA_ID and region is None:
            region = DataRegion(offset=chunk.offset, length=chunk.size)
        if descriptor is not None and region is not None:
            break

    if region is None:
        raise MissingDataChunkError("No 'data' chunk found")
    if descriptor is None:
        raise MissingFormatChunkError("No 'fmt ' chunk found")

    logger.debug(
        "Parsed WAV: format=%d channels=%d rate=%d bits=%d data=%d@%d",
        descriptor.audio_format,
        descriptor.channels,
        descriptor.sample_rate,
        descriptor.bits_per_sample,
        region.length,
        region.offset,
    )
    return descriptor, region


def list_chunks(source: BinaryIO) -> List[ChunkHeader]:
    """Walk the whole container and return every chunk header.

    Used for file-info display; parse_wav() stops early instead.
    """
    _seek(source, 0)
    read_riff_header(source)
    return list(iter_chunks(source))


def format_follows_data(source: BinaryIO, region: DataRegion) -> bool:
    """True when the first ``fmt `` chunk lies after the sample payload.

    Such a file keeps its format block in the bytes after ``data``, so an
    output that drops those bytes would not be a WAV file.
    """
    for chunk in list_chunks(source):
        if chunk.chunk_id == FMT_ID:
            return chunk.offset > region.offset
    return False
