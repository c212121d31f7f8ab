"""Output container assembly.

WHY: The new file must contain the original format and sample data, the
freshly synthesized cue and label chunks, and every preserved chunk,
byte-identical, correctly padded, under a RIFF header whose size field
matches what was actually written.

HOW: riff_size() adds up every region before anything is written, so
an oversized result is rejected up front. write_wave() then emits, in
this order:
  RIFF header → fmt chunk (+ extension + pad) → data chunk (+ pad)
  → cue chunk → LIST/adtl chunk (+ pad) → preserved chunks (+ pad each)
Byte ranges are copied from the input through one fixed-size buffer.

RULES:
- The RIFF size counts the "WAVE" tag and every pad byte
- Pad bytes are written as NUL
- Preserved chunks keep their original relative order
- Any exception leaves a partial output file that must be discarded;
  write_wave() is not restartable
"""

from __future__ import annotations

from typing import BinaryIO

from wav_marker.config import (
    COPY_BUFFER_SIZE,
    FMT_ID,
    MAX_UINT32,
    RIFF_ID,
    WAVE_ID,
)
from wav_marker.core.endian import from_host_u16, from_host_u32
from wav_marker.core.errors import FormatError, ResourceLimitError
from wav_marker.core.ir import (
    CHUNK_HEADER_SIZE,
    ByteRange,
    CueChunk,
    FormatDescriptor,
    LabelListChunk,
    WaveLayout,
    pad_size,
)
from wav_marker.core.markers import encode_cue_chunk, encode_label_list_chunk

_PAD = b"\x00"


def riff_size(layout: WaveLayout, cue: CueChunk, labels: LabelListChunk) -> int:
    """Compute the RIFF size field for the output file.

    Raises:
        ResourceLimitError: If the total does not fit in 32 bits.
    """
    fmt_size = layout.fmt.chunk_size
    total = len(WAVE_ID)
    total += CHUNK_HEADER_SIZE + fmt_size + pad_size(fmt_size)
    total += layout.data.padded_length
    total += CHUNK_HEADER_SIZE + cue.size + pad_size(cue.size)
    total += CHUNK_HEADER_SIZE + labels.size + pad_size(labels.size)
    total += sum(chunk.padded_length for chunk in layout.preserved)

    if total > MAX_UINT32:
        raise ResourceLimitError(
            "Output would be {} bytes, more than a RIFF file can hold".format(total + 8)
        )
    return total


def encode_format_chunk(fmt: FormatDescriptor) -> bytes:
    """Serialize the fmt chunk header and its 16-byte core (no extension)."""
    return b"".join((
        FMT_ID,
        from_host_u32(fmt.chunk_size),
        from_host_u16(fmt.compression_code),
        from_host_u16(fmt.channels),
        from_host_u32(fmt.sample_rate),
        from_host_u32(fmt.byte_rate),
        from_host_u16(fmt.block_align),
        from_host_u16(fmt.bits_per_sample),
    ))


def copy_range(
    source: BinaryIO,
    destination: BinaryIO,
    byte_range: ByteRange,
    buffer_size: int = COPY_BUFFER_SIZE,
) -> None:
    """Copy ``byte_range`` from source to destination in bounded pieces.

    Raises:
        FormatError: If the source ends before the range does.
    """
    source.seek(byte_range.start)
    remaining = byte_range.length
    buffer = memoryview(bytearray(min(buffer_size, remaining)))
    while remaining > 0:
        count = source.readinto(buffer[:min(remaining, len(buffer))])
        if not count:
            raise FormatError(
                "Unexpected end of input copying {} bytes from offset {}".format(
                    byte_range.length, byte_range.start
                )
            )
        destination.write(buffer[:count])
        remaining -= count


def _write_padded_range(source: BinaryIO, destination: BinaryIO, byte_range: ByteRange) -> None:
    copy_range(source, destination, byte_range)
    destination.write(_PAD * pad_size(byte_range.length))


def write_wave(
    source: BinaryIO,
    destination: BinaryIO,
    layout: WaveLayout,
    cue: CueChunk,
    labels: LabelListChunk,
) -> int:
    """Write the complete output file.

    Args:
        source: The scanned input, seekable.
        destination: Output stream, positioned at its start.
        layout: Result of scan_wave() on ``source``.
        cue: Synthesized cue chunk.
        labels: Synthesized label list chunk.

    Returns:
        Total bytes written.
    """
    size = riff_size(layout, cue, labels)

    destination.write(RIFF_ID + from_host_u32(size) + WAVE_ID)

    destination.write(encode_format_chunk(layout.fmt))
    if layout.fmt.extension is not None:
        _write_padded_range(source, destination, layout.fmt.extension)

    _write_padded_range(source, destination, layout.data)

    destination.write(encode_cue_chunk(cue))

    destination.write(encode_label_list_chunk(labels))
    destination.write(_PAD * pad_size(labels.size))

    for chunk in layout.preserved:
        _write_padded_range(source, destination, chunk)

    return size + CHUNK_HEADER_SIZE
