"""Audacity label file parser.

WHY: Audacity exports labels as ``start<TAB>end<TAB>text`` lines. The
converter needs each start time as a sample index and each text as the
raw bytes that end up in a ``labl`` record.

HOW: The file is read as bytes and split on universal line endings.
Each line is matched against two whitespace-separated numeric fields;
one separator character after the end time is consumed and the rest of
the line is the label. The start time becomes
``floor(start_seconds * sample_rate)``.

RULES:
- Line endings: "\\n", "\\r" and "\\r\\n" are all accepted
- The end time must parse as a number but is otherwise ignored
- Label text is opaque bytes, never decoded or validated
- Malformed lines are logged and skipped, never fatal
- Start times that are negative, not finite, or past the 32-bit sample
  index boundary at the file's sample rate are logged and skipped
- Blank lines are skipped silently
- An empty result is returned as-is; the caller decides if that is an error
- More accepted labels than the ceiling → ResourceLimitError
"""

from __future__ import annotations

import logging
import math
import re
from typing import BinaryIO, Optional

from wav_marker.config import MAX_LABELS, MAX_SAMPLE_INDEX
from wav_marker.core.errors import ResourceLimitError
from wav_marker.core.ir import FormatDescriptor, LabelEntry

logger = logging.getLogger(__name__)

# start, end, then an optional single separator followed by the label.
_LINE_RE = re.compile(rb"^\s*(\S+)\s+(\S+)(?:\s(.*))?$", re.DOTALL)


def max_start_time(sample_rate: int) -> float:
    """Return the first start time (seconds) whose sample index overflows 32 bits."""
    if sample_rate <= 0:
        return math.inf
    return (MAX_SAMPLE_INDEX + 1) / sample_rate


def time_to_index(seconds: float, sample_rate: int) -> int:
    """Convert a non-negative time in seconds to a sample index, truncating."""
    return int(seconds * sample_rate)


def _parse_number(token: bytes) -> Optional[float]:
    try:
        return float(token.decode("ascii"))
    except ValueError:
        return None


def parse_label_line(line: bytes) -> Optional[tuple[float, bytes]]:
    """Split one label line into ``(start_seconds, text)``.

    Returns None when the line does not start with two numeric fields.
    """
    match = _LINE_RE.match(line)
    if match is None:
        return None
    start = _parse_number(match.group(1))
    end = _parse_number(match.group(2))
    if start is None or end is None:
        return None
    return start, match.group(3) or b""


def parse_labels(
    stream: BinaryIO,
    fmt: FormatDescriptor,
    max_labels: Optional[int] = MAX_LABELS,
) -> list[LabelEntry]:
    """Read a label file and convert each usable line to a LabelEntry.

    Args:
        stream: Binary stream over the label file.
        fmt: Format descriptor of the WAVE file; only sample_rate is used.
        max_labels: Ceiling on accepted labels, or None for no ceiling.

    Returns:
        Accepted entries in file order.
    """
    entries: list[LabelEntry] = []
    limit_s = max_start_time(fmt.sample_rate)

    for line_number, line in enumerate(stream.read().splitlines(), start=1):
        if not line.strip():
            continue

        parsed = parse_label_line(line)
        if parsed is None:
            logger.warning(
                "Line %d in label file is not formatted correctly; it should be "
                "\"startTime(sec) \\t endTime(sec) \\t Label\"",
                line_number,
            )
            continue

        start_s, text = parsed
        in_range = math.isfinite(start_s) and 0 <= start_s < limit_s
        if in_range:
            sample_index = time_to_index(start_s, fmt.sample_rate)
            # Rounding in the product can still land on 2**32.
            in_range = sample_index <= MAX_SAMPLE_INDEX
        if not in_range:
            logger.warning(
                "Line %d in label file has start time %s outside the representable "
                "range (0 to %.3f seconds at %d Hz)",
                line_number, start_s, limit_s, fmt.sample_rate,
            )
            continue

        if max_labels is not None and len(entries) >= max_labels:
            raise ResourceLimitError(
                "Label file has more labels than the maximum supported ({})".format(max_labels)
            )
        entries.append(LabelEntry(sample_index=sample_index, text=text))

    return entries
