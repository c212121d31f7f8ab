"""Read existing cue markers and their labels back from a WAVE file.

WHY: Callers need a way to see which markers a file already carries,
to check a freshly written file, or to inspect one before replacing its
markers.

HOW: Walk the chunks after the RIFF header. The ``cue `` payload yields
(cue ID, sample offset) pairs; ``labl`` records inside a ``LIST``/``adtl``
chunk yield texts keyed by cue ID. The two are joined on cue ID.

RULES:
- Markers come back in cue chunk order
- The position is the cue point's sample (frame) offset
- Label text stops at the first NUL; a cue without a labl gets label=None
- Other adtl sub-records (note, ltxt) are skipped
- A cue or labl record cut short by its chunk → FormatError
"""

from __future__ import annotations

from typing import BinaryIO

from wav_marker.config import ADTL_ID, CUE_ID, LABL_ID, LIST_ID
from wav_marker.core.endian import to_host_u32
from wav_marker.core.errors import FormatError
from wav_marker.core.ir import CHUNK_HEADER_SIZE, CUE_POINT_SIZE, Marker, pad_size
from wav_marker.core.scanner import read_exact, read_wave_header, stream_size


def _parse_cue_payload(payload: bytes) -> dict[int, int]:
    if len(payload) < 4:
        raise FormatError("Cue chunk is too short to hold a point count")
    count = to_host_u32(payload[0:4])
    if 4 + count * CUE_POINT_SIZE > len(payload):
        raise FormatError("Cue chunk declares {} points but is too short".format(count))

    positions: dict[int, int] = {}
    for index in range(count):
        record = payload[4 + index * CUE_POINT_SIZE:4 + (index + 1) * CUE_POINT_SIZE]
        positions[to_host_u32(record[0:4])] = to_host_u32(record[20:24])
    return positions


def _parse_adtl_payload(payload: bytes) -> dict[int, bytes]:
    labels: dict[int, bytes] = {}
    position = 4  # past "adtl"
    while position + CHUNK_HEADER_SIZE <= len(payload):
        sub_tag = payload[position:position + 4]
        sub_size = to_host_u32(payload[position + 4:position + 8])
        body = payload[position + CHUNK_HEADER_SIZE:position + CHUNK_HEADER_SIZE + sub_size]
        if len(body) < sub_size:
            raise FormatError("Label record {!r} runs past its list chunk".format(sub_tag))
        if sub_tag == LABL_ID and sub_size >= 4:
            labels[to_host_u32(body[0:4])] = body[4:].split(b"\x00", 1)[0]
        position += CHUNK_HEADER_SIZE + sub_size + pad_size(sub_size)
    return labels


def read_markers(stream: BinaryIO) -> list[Marker]:
    """Return every cue point in the file, joined with its label text."""
    file_size = stream_size(stream)
    read_wave_header(stream)

    positions: dict[int, int] = {}
    labels: dict[int, bytes] = {}

    while True:
        offset = stream.tell()
        chunk_header = stream.read(CHUNK_HEADER_SIZE)
        if len(chunk_header) < CHUNK_HEADER_SIZE:
            break
        tag = chunk_header[0:4]
        size = to_host_u32(chunk_header[4:8])
        if offset + CHUNK_HEADER_SIZE + size > file_size:
            raise FormatError("Chunk {!r} at offset {} is truncated".format(tag, offset))

        if tag == CUE_ID:
            positions.update(_parse_cue_payload(read_exact(stream, size, "cue chunk")))
        elif tag == LIST_ID and size >= 4:
            payload = read_exact(stream, size, "list chunk")
            if payload[0:4] == ADTL_ID:
                labels.update(_parse_adtl_payload(payload))

        stream.seek(offset + CHUNK_HEADER_SIZE + size + pad_size(size))

    return [
        Marker(cue_id=cue_id, position=position, label=labels.get(cue_id))
        for cue_id, position in positions.items()
    ]
