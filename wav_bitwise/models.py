"""Pydantic models for machine-readable CLI output.

WHY: Scripts that batch-process folders of WAV files want file info and
run results as JSON rather than scraping status text. Pydantic models
give those payloads a fixed, typed schema.

HOW: WavInfoReport describes a parsed file; RunSummary describes a
completed transform. Both are built from core dataclasses through
``from_*`` factories and serialized with model_dump_json().

RULES:
- All models use Field(description=...) so the schema documents itself
- Field names are snake_case and stable; add fields, never rename
- Chunk IDs are reported as ASCII strings (e.g. "fmt ", "LIST")
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from wav_bitwise.core.processor import RunResult
from wav_bitwise.core.riff import ChunkHeader, DataRegion, RiffFormatDescriptor


class ChunkReport(BaseModel):
    """One RIFF sub-chunk."""

    id: str = Field(description="Four-character chunk ID")
    offset: int = Field(description="Absolute offset of the chunk body")
    size: int = Field(description="Declared chunk body size in bytes")


class WavInfoReport(BaseModel):
    """Format and layout of a WAV file."""

    path: str = Field(description="Path of the inspected file")
    audio_format: int = Field(description="WAVE format tag (1 = PCM)")
    channels: int = Field(description="Number of interleaved channels")
    sample_rate: int = Field(description="Samples per second per channel")
    byte_rate: int = Field(description="Bytes per second of audio")
    block_align: int = Field(description="Bytes per sample frame")
    bits_per_sample: int = Field(description="Sample width in bits")
    data_offset: int = Field(description="Absolute offset of the first sample byte")
    data_size: int = Field(description="Declared size of the data chunk in bytes")
    duration_s: Optional[float] = Field(
        default=None, description="Payload duration in seconds, if byte_rate is non-zero"
    )
    chunks: List[ChunkReport] = Field(
        default_factory=list, description="Every chunk in physical order"
    )

    @classmethod
    def from_parse(
        cls,
        path: Path,
        descriptor: RiffFormatDescriptor,
        region: DataRegion,
        chunks: Optional[List[ChunkHeader]] = None,
    ) -> WavInfoReport:
        duration = region.length / descriptor.byte_rate if descriptor.byte_rate else None
        return cls(
            path=str(path),
            audio_format=descriptor.audio_format,
            channels=descriptor.channels,
            sample_rate=descriptor.sample_rate,
            byte_rate=descriptor.byte_rate,
            block_align=descriptor.block_align,
            bits_per_sample=descriptor.bits_per_sample,
            data_offset=region.offset,
            data_size=region.length,
            duration_s=duration,
            chunks=[
                ChunkReport(id=c.name, offset=c.offset, size=c.size) for c in (chunks or [])
            ],
        )


class RunSummary(BaseModel):
    """Outcome of a successful transform."""

    input_path: str = Field(description="Source WAV file")
    output_path: str = Field(description="Written WAV file")
    operation: str = Field(description="Canonical operation name")
    value: int = Field(description="Operand applied (0 for 'not')")
    bytes_processed: int = Field(description="Sample bytes transformed")
    data_offset: int = Field(description="Bytes of header region copied verbatim")

    @classmethod
    def from_result(cls, result: RunResult) -> RunSummary:
        return cls(
            input_path=str(result.input_path),
            output_path=str(result.output_path),
            operation=result.operation.tag.value,
            value=result.operation.value,
            bytes_processed=result.bytes_processed,
            data_offset=result.data_region.offset,
        )
