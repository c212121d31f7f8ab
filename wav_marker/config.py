"""Configuration constants: RIFF tags, accepted formats, and resource ceilings.

WHY: Centralizes every fixed value the converter depends on so they are
easy to find and change: FourCC tags, the accepted compression codes,
the copy buffer size, and the ceilings on preserved chunks and labels.
Plain data, not buried in logic.

HOW: Module-level constants only. Functions that enforce a ceiling take
it as a keyword argument defaulting to the value here; passing None
removes the ceiling.

RULES:
- All FourCC tags are 4-byte ``bytes`` values
- No environment variables; the CLI contract is three positional paths
- MAX_SAMPLE_INDEX is the real domain limit (32-bit cue position);
  the other ceilings are legacy resource limits
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# FourCC tags
# ---------------------------------------------------------------------------

RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"
CUE_ID = b"cue "
LIST_ID = b"LIST"
ADTL_ID = b"adtl"
LABL_ID = b"labl"

# ---------------------------------------------------------------------------
# Audio format codes
# ---------------------------------------------------------------------------

WAVE_FORMAT_PCM = 0x0001
WAVE_FORMAT_IEEE_FLOAT = 0x0003

SUPPORTED_COMPRESSION_CODES: frozenset[int] = frozenset({
    WAVE_FORMAT_PCM,
    WAVE_FORMAT_IEEE_FLOAT,
})
"""Uncompressed encodings. Anything else is rejected as compressed audio."""

# ---------------------------------------------------------------------------
# Sizes and limits
# ---------------------------------------------------------------------------

COPY_BUFFER_SIZE = 64 * 1024
"""Bytes moved per read/write when copying a chunk from input to output."""

MAX_PRESERVED_CHUNKS: int | None = 256
"""Most unrecognized chunks a single input may carry."""

MAX_LABELS: int | None = 500
"""Most labels accepted from one label file."""

MAX_UINT32 = 0xFFFFFFFF

MAX_SAMPLE_INDEX = MAX_UINT32
"""Largest sample index a cue point can address."""

LEGACY_MAX_START_TIME_S = 48660.0
"""Legacy start-time cut-off, applied regardless of sample rate.

Kept for reference only: the label parser computes the true overflow
boundary from the sample rate instead. 48660 s matches the boundary only
near 88.2 kHz; it rejects valid times at 44.1 kHz and lets 96 kHz wrap.
"""
