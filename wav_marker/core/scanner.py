"""Chunk scanner: walks a RIFF/WAVE file and records what to keep.

WHY: The converter must relocate sample data and every chunk it does not
understand without loading any of it into memory, while replacing any
existing cue and label chunks. The scanner turns the input file into a
WaveLayout of byte ranges plus the decoded format descriptor.

HOW: Validate the 12-byte RIFF header, then read 8-byte chunk headers
until end of file. Each chunk's extent is checked against the file size
before it is classified:
  "fmt "         → decode the 16-byte core, record any extension range
  "data"         → record header + payload as one range
  "cue "         → discard
  "LIST"/"adtl"  → discard
  anything else  → record header + payload as a preserved range
Chunks are skipped with seek(), honouring the 2-byte alignment pad.

RULES:
- Bad tags, an empty payload, or truncated framing → FormatError
- Compression code other than PCM/IEEE float → UnsupportedFormatError
- Missing fmt or data chunk → IncompleteInputError
- More preserved chunks than the ceiling → ResourceLimitError
- A duplicate fmt or data chunk is a FormatError
- 1–3 stray bytes after the last chunk are ignored with a warning
- Only header-sized reads are made; payloads are never buffered
"""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Optional

from wav_marker.config import (
    ADTL_ID,
    CUE_ID,
    DATA_ID,
    FMT_ID,
    LIST_ID,
    MAX_PRESERVED_CHUNKS,
    RIFF_ID,
    SUPPORTED_COMPRESSION_CODES,
    WAVE_ID,
)
from wav_marker.core.endian import to_host_u16, to_host_u32
from wav_marker.core.errors import (
    FormatError,
    IncompleteInputError,
    ResourceLimitError,
    UnsupportedFormatError,
)
from wav_marker.core.ir import (
    CHUNK_HEADER_SIZE,
    FMT_CORE_SIZE,
    RIFF_HEADER_SIZE,
    ByteRange,
    FormatDescriptor,
    WaveHeader,
    WaveLayout,
    pad_size,
)

logger = logging.getLogger(__name__)


def stream_size(stream: BinaryIO) -> int:
    """Return the total length of a seekable stream, keeping its position."""
    position = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(position)
    return end


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise FormatError("Unexpected end of file reading {}".format(what))
    return data


def read_wave_header(stream: BinaryIO) -> WaveHeader:
    """Read and validate the 12-byte RIFF/WAVE header.

    Raises:
        FormatError: If the file is too short, either tag is wrong, or the
            declared size leaves no room for any chunk.
    """
    raw = stream.read(RIFF_HEADER_SIZE)
    if len(raw) < RIFF_HEADER_SIZE:
        raise FormatError("File too small to be a WAVE file")
    if raw[0:4] != RIFF_ID:
        raise FormatError("Input file is not a RIFF file")
    if raw[8:12] != WAVE_ID:
        raise FormatError("Input file is not a WAVE file")

    riff_size = to_host_u32(raw[4:8])
    # The size field counts the "WAVE" tag; anything left is the payload.
    if riff_size <= len(WAVE_ID):
        raise FormatError("Input file is an empty WAVE file")
    return WaveHeader(riff_size=riff_size)


def _decode_format(core: bytes, extension: Optional[ByteRange]) -> FormatDescriptor:
    """Decode the 16-byte fmt core and reject compressed encodings."""
    compression_code = to_host_u16(core[0:2])
    if compression_code not in SUPPORTED_COMPRESSION_CODES:
        raise UnsupportedFormatError(compression_code)
    return FormatDescriptor(
        compression_code=compression_code,
        channels=to_host_u16(core[2:4]),
        sample_rate=to_host_u32(core[4:8]),
        byte_rate=to_host_u32(core[8:12]),
        block_align=to_host_u16(core[12:14]),
        bits_per_sample=to_host_u16(core[14:16]),
        extension=extension,
    )


def scan_wave(
    stream: BinaryIO,
    max_preserved_chunks: Optional[int] = MAX_PRESERVED_CHUNKS,
) -> WaveLayout:
    """Scan a WAVE file and describe the chunks the converter needs.

    Args:
        stream: Seekable binary stream positioned at offset 0.
        max_preserved_chunks: Ceiling on unrecognized chunks, or None for
            no ceiling.

    Returns:
        WaveLayout with the header, format descriptor, data range,
        preserved chunk ranges (in file order), and discarded tags.
    """
    file_size = stream_size(stream)
    header = read_wave_header(stream)

    fmt: Optional[FormatDescriptor] = None
    data: Optional[ByteRange] = None
    preserved: list[ByteRange] = []
    discarded: list[bytes] = []

    while True:
        offset = stream.tell()
        chunk_header = stream.read(CHUNK_HEADER_SIZE)
        if not chunk_header:
            break
        if len(chunk_header) < 4:
            logger.warning(
                "Ignoring %d trailing byte(s) at offset %d", len(chunk_header), offset
            )
            break
        tag = chunk_header[0:4]
        if len(chunk_header) < CHUNK_HEADER_SIZE:
            raise FormatError(
                "Truncated header for chunk {!r} at offset {}".format(tag, offset)
            )

        size = to_host_u32(chunk_header[4:8])
        end = offset + CHUNK_HEADER_SIZE + size
        if end > file_size:
            raise FormatError(
                "Chunk {!r} at offset {} declares {} bytes but the file ends "
                "at {}".format(tag, offset, size, file_size)
            )

        if tag == FMT_ID:
            if fmt is not None:
                raise FormatError("Input file has more than one format chunk")
            if size < FMT_CORE_SIZE:
                raise FormatError(
                    "Format chunk is {} bytes; at least {} required".format(size, FMT_CORE_SIZE)
                )
            core = read_exact(stream, FMT_CORE_SIZE, "format chunk")
            extension = None
            if size > FMT_CORE_SIZE:
                extension = ByteRange(stream.tell(), size - FMT_CORE_SIZE)
            fmt = _decode_format(core, extension)
            logger.info(
                "Got format chunk: code %d, %d channel(s), %d Hz, %d bit",
                fmt.compression_code, fmt.channels, fmt.sample_rate, fmt.bits_per_sample,
            )

        elif tag == DATA_ID:
            if data is not None:
                raise FormatError("Input file has more than one data chunk")
            data = ByteRange(offset, CHUNK_HEADER_SIZE + size)
            logger.info("Got data chunk: %d bytes of sample data", size)

        elif tag == CUE_ID:
            discarded.append(tag)
            logger.info("Found existing cue chunk; it will be replaced")

        elif tag == LIST_ID and size >= 4 and read_exact(stream, 4, "list type") == ADTL_ID:
            discarded.append(tag)
            logger.info("Found existing label chunk; it will be replaced")

        else:
            if max_preserved_chunks is not None and len(preserved) >= max_preserved_chunks:
                raise ResourceLimitError(
                    "Input file has more chunks than the maximum supported "
                    "({})".format(max_preserved_chunks)
                )
            preserved.append(ByteRange(offset, CHUNK_HEADER_SIZE + size))
            logger.info("Found chunk type %r, size: %d bytes", tag.decode("latin-1"), size)

        stream.seek(end + pad_size(size))

    if fmt is None or data is None:
        raise IncompleteInputError(
            "Input file did not contain any format data or did not contain any sample data"
        )

    return WaveLayout(
        header=header,
        fmt=fmt,
        data=data,
        preserved=preserved,
        discarded=discarded,
    )
