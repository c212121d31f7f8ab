"""Intermediate representation of a WAVE file and its markers.

WHY: The scanner, label parser, synthesizer, and assembler each need a
shared, well-typed picture of the container: which byte ranges to copy,
what the format is, and which markers to write. These dataclasses are
that contract; no stage reaches into another stage's internals.

HOW: Three groups of dataclasses:
  Input layout:  WaveHeader, FormatDescriptor, ByteRange, WaveLayout
  Labels:        LabelEntry
  Output chunks: CuePoint, CueChunk, LabelRecord, LabelListChunk
plus Marker, the read-back form used by the reader.

RULES:
- ByteRange never holds bytes; it only points into the input file
- Label text is raw bytes, never decoded or re-encoded
- Stored label length = len(text) + 1 (the trailing NUL is counted)
- Every chunk is padded to an even size; pad bytes are never counted in
  a chunk's own size field
"""

from __future__ import annotations

from dataclasses import dataclass, field

from wav_marker.config import DATA_ID

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8
FMT_CORE_SIZE = 16
CUE_POINT_SIZE = 24
LABL_RECORD_HEADER_SIZE = 12  # "labl" + size + cue ID


def pad_size(length: int) -> int:
    """Return 1 if a region of ``length`` bytes needs a pad byte, else 0."""
    return length % 2


@dataclass(frozen=True)
class ByteRange:
    """A contiguous region of the input file to copy verbatim.

    RULES:
    - start: absolute offset into the input file
    - length: bytes to copy, excluding any pad byte
    """

    start: int
    length: int

    @property
    def padded_length(self) -> int:
        return self.length + pad_size(self.length)


@dataclass(frozen=True)
class WaveHeader:
    """The 12-byte RIFF header. Only the size field varies."""

    riff_size: int


@dataclass(frozen=True)
class FormatDescriptor:
    """The 16-byte core of the ``fmt `` chunk, plus its opaque extension.

    WHY: The label parser needs the sample rate; the assembler re-emits the
    chunk. Everything past the first 16 bytes is format-specific and is
    copied as-is.

    RULES:
    - compression_code is 1 (PCM) or 3 (IEEE float); checked by the scanner
    - extension is None when the chunk size is exactly 16
    """

    compression_code: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    extension: ByteRange | None = None

    @property
    def chunk_size(self) -> int:
        """Value of the chunk's own size field."""
        extra = self.extension.length if self.extension is not None else 0
        return FMT_CORE_SIZE + extra


@dataclass
class WaveLayout:
    """Everything the scanner learned about the input file.

    RULES:
    - data covers the 8-byte data chunk header plus its payload
    - preserved holds unrecognized chunks (header + payload) in file order
    - discarded lists the tags of old cue/adtl chunks that were dropped
    """

    header: WaveHeader
    fmt: FormatDescriptor
    data: ByteRange
    preserved: list[ByteRange] = field(default_factory=list)
    discarded: list[bytes] = field(default_factory=list)


@dataclass(frozen=True)
class LabelEntry:
    """One accepted line of the label file."""

    sample_index: int
    text: bytes

    @property
    def stored_length(self) -> int:
        """Length written to the file: the text plus a NUL terminator."""
        return len(self.text) + 1


@dataclass(frozen=True)
class CuePoint:
    """One 24-byte record of the ``cue `` chunk.

    RULES:
    - cue_id starts at 1 and follows label order
    - position and frame_offset are both the sample index
    - chunk_start and block_start are 0 (no wave-list chunk)
    """

    cue_id: int
    position: int
    frame_offset: int
    data_chunk_id: bytes = DATA_ID
    chunk_start: int = 0
    block_start: int = 0


@dataclass
class CueChunk:
    points: list[CuePoint] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Value of the chunk's size field: count + points."""
        return 4 + CUE_POINT_SIZE * len(self.points)


@dataclass(frozen=True)
class LabelRecord:
    """One ``labl`` sub-record of the ``adtl`` list."""

    cue_id: int
    text: bytes

    @property
    def stored_length(self) -> int:
        return len(self.text) + 1

    @property
    def size(self) -> int:
        """Value of the sub-record's size field: cue ID + text + NUL."""
        return 4 + self.stored_length

    @property
    def padded_total(self) -> int:
        """Bytes the sub-record occupies on disk, header and pad included."""
        return LABL_RECORD_HEADER_SIZE + self.stored_length + pad_size(self.stored_length)


@dataclass
class LabelListChunk:
    records: list[LabelRecord] = field(default_factory=list)

    @property
    def size(self) -> int:
        """Value of the chunk's size field: "adtl" + every padded record."""
        return 4 + sum(record.padded_total for record in self.records)


@dataclass(frozen=True)
class Marker:
    """A cue point read back from a WAVE file, joined with its label."""

    cue_id: int
    position: int
    label: bytes | None = None
