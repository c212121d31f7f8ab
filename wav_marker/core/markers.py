"""Cue and label chunk synthesis.

WHY: DAWs and podcast tools read markers from two chunks: ``cue ``
(positions) and ``LIST``/``adtl`` (texts, via ``labl`` sub-records keyed
by cue ID). This module builds both from the parsed label list and
serializes them byte-exactly.

HOW: synthesize_markers() is a pure function from LabelEntry list to
(CueChunk, LabelListChunk). encode_cue_chunk() and
encode_label_list_chunk() produce the wire bytes, chunk header included.

RULES:
- Cue IDs are 1..N in label order; ties in position keep label order
- Cue position and frame offset are both the sample index
- Cue chunk size = 4 + 24 * N
- labl size = 4 + len(text) + 1; a pad byte follows when len(text) + 1 is odd
- List chunk size = 4 + Σ(12 + stored length + pad)
"""

from __future__ import annotations

from wav_marker.config import ADTL_ID, CUE_ID, LABL_ID, LIST_ID, MAX_UINT32
from wav_marker.core.endian import from_host_u32
from wav_marker.core.errors import ResourceLimitError
from wav_marker.core.ir import (
    CueChunk,
    CuePoint,
    LabelEntry,
    LabelListChunk,
    LabelRecord,
    pad_size,
)


def synthesize_markers(entries: list[LabelEntry]) -> tuple[CueChunk, LabelListChunk]:
    """Build the cue chunk and the label list chunk for the given labels.

    Raises:
        ResourceLimitError: If either chunk would not fit a 32-bit size field.
    """
    cue = CueChunk()
    labels = LabelListChunk()
    for index, entry in enumerate(entries):
        cue_id = index + 1
        cue.points.append(CuePoint(
            cue_id=cue_id,
            position=entry.sample_index,
            frame_offset=entry.sample_index,
        ))
        labels.records.append(LabelRecord(cue_id=cue_id, text=entry.text))

    if cue.size > MAX_UINT32 or labels.size > MAX_UINT32:
        raise ResourceLimitError("Too many labels to fit in a RIFF chunk")
    return cue, labels


def encode_cue_point(point: CuePoint) -> bytes:
    return b"".join((
        from_host_u32(point.cue_id),
        from_host_u32(point.position),
        point.data_chunk_id,
        from_host_u32(point.chunk_start),
        from_host_u32(point.block_start),
        from_host_u32(point.frame_offset),
    ))


def encode_cue_chunk(cue: CueChunk) -> bytes:
    """Serialize the whole ``cue `` chunk: tag, size, count, points."""
    parts = [CUE_ID, from_host_u32(cue.size), from_host_u32(len(cue.points))]
    parts.extend(encode_cue_point(point) for point in cue.points)
    return b"".join(parts)


def encode_label_record(record: LabelRecord) -> bytes:
    """Serialize one ``labl`` sub-record, NUL terminator and pad included."""
    return b"".join((
        LABL_ID,
        from_host_u32(record.size),
        from_host_u32(record.cue_id),
        record.text,
        b"\x00",
        b"\x00" * pad_size(record.stored_length),
    ))


def encode_label_list_chunk(labels: LabelListChunk) -> bytes:
    """Serialize the ``LIST`` chunk with type ``adtl``. Never needs padding."""
    parts = [LIST_ID, from_host_u32(labels.size), ADTL_ID]
    parts.extend(encode_label_record(record) for record in labels.records)
    return b"".join(parts)
