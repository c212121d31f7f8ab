"""Command-line interface and conversion pipeline.

WHY: Users export labels from Audacity and want them as markers inside
the WAVE file, readable by DAWs and podcast tools. The CLI wires the
whole pipeline (scan, parse labels, synthesize markers, write) behind
one command with three paths.

HOW: add_markers() runs the pipeline with every file handle owned by a
``with`` block, so each exit path closes everything it opened. The output
file is created only after scanning, label parsing and synthesis have
all succeeded. main() parses the three positionals with argparse, reports
progress to stderr, and maps failures to a non-zero exit status.

RULES:
- Exactly three positional arguments: INPUT LABELS OUTPUT; no flags
- Wrong argument count → usage on stderr, exit status 2
- Any WavMarkerError or OSError → "Error: ..." on stderr, exit status 1
- Status and diagnostics go to stderr (not stdout)
- Unsupported format, missing chunks, or zero labels never create OUTPUT
- A failure while writing leaves a partial OUTPUT that must not be used
- OUTPUT must not be the same file as INPUT or LABELS
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from wav_marker.config import MAX_LABELS, MAX_PRESERVED_CHUNKS
from wav_marker.core.assembler import riff_size, write_wave
from wav_marker.core.errors import NoLabelsError, UsageError, WavMarkerError
from wav_marker.core.labels import parse_labels
from wav_marker.core.markers import synthesize_markers
from wav_marker.core.scanner import scan_wave


def _status(msg: str) -> None:
    """Print a status message to stderr, flushed immediately."""
    print(msg, file=sys.stderr, flush=True)


@dataclass
class MarkerSummary:
    """What a successful conversion produced."""

    output_path: Path
    marker_count: int
    preserved_chunks: int
    discarded_chunks: int
    bytes_written: int


def _same_file(a: Path, b: Path) -> bool:
    if a.exists() and b.exists():
        return os.path.samefile(a, b)
    return a.resolve() == b.resolve()


def add_markers(
    input_path: str | Path,
    label_path: str | Path,
    output_path: str | Path,
    max_labels: Optional[int] = MAX_LABELS,
    max_preserved_chunks: Optional[int] = MAX_PRESERVED_CHUNKS,
    on_status: Optional[Callable[[str], None]] = None,
) -> MarkerSummary:
    """Write a copy of a WAVE file with one cue marker per label.

    Args:
        input_path: Uncompressed RIFF/WAVE file to read.
        label_path: Audacity label file (start, end, text per line).
        output_path: Where to write the new WAVE file.
        max_labels: Ceiling on accepted labels, or None.
        max_preserved_chunks: Ceiling on copied unknown chunks, or None.
        on_status: Optional callback for progress messages.

    Returns:
        MarkerSummary describing the written file.

    Raises:
        UsageError: If output_path names the input or label file.
        FormatError: If the input is not a usable WAVE file (including
            UnsupportedFormatError and IncompleteInputError).
        NoLabelsError: If the label file yields no usable labels.
        ResourceLimitError: If a ceiling or 32-bit size is exceeded.
        OSError: If any file cannot be opened, read or written.
    """
    input_path = Path(input_path)
    label_path = Path(label_path)
    output_path = Path(output_path)

    def _emit(msg: str) -> None:
        if on_status is not None:
            on_status(msg)

    for other in (input_path, label_path):
        if _same_file(output_path, other):
            raise UsageError("Output file must not be the same as {}".format(other))

    with open(input_path, "rb") as source:
        with open(label_path, "rb") as label_file:
            _emit("Reading input wave file.")
            layout = scan_wave(source, max_preserved_chunks=max_preserved_chunks)

            _emit("Reading label file.")
            entries = parse_labels(label_file, layout.fmt, max_labels=max_labels)

        if not entries:
            raise NoLabelsError("Did not find any cue point locations in the label file")
        _emit("Read {} cue locations from label file.".format(len(entries)))

        _emit("Preparing new cue and label chunks.")
        cue, labels = synthesize_markers(entries)
        # Rejects an oversized result before the output file exists.
        riff_size(layout, cue, labels)

        _emit("Writing output file.")
        with open(output_path, "wb") as destination:
            bytes_written = write_wave(source, destination, layout, cue, labels)

    return MarkerSummary(
        output_path=output_path,
        marker_count=len(entries),
        preserved_chunks=len(layout.preserved),
        discarded_chunks=len(layout.discarded),
        bytes_written=bytes_written,
    )


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser: three positional paths, no options."""
    parser = _ArgumentParser(
        prog="wav-marker",
        description="Embed Audacity labels into a WAVE file as cue markers.",
        add_help=False,
    )
    parser.add_argument("input_file", help="Uncompressed WAVE file to read.")
    parser.add_argument("label_file", help="Audacity label file.")
    parser.add_argument("output_file", help="WAVE file to write.")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for ``wav-marker`` and ``python -m wav_marker``.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Returns the process exit status
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print("Error: {}".format(e), file=sys.stderr)
        return 2

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)

    try:
        summary = add_markers(
            args.input_file,
            args.label_file,
            args.output_file,
            on_status=_status,
        )
    except (WavMarkerError, OSError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    _status("Finished. Wrote {} marker(s) to {} ({} bytes).".format(
        summary.marker_count, summary.output_path, summary.bytes_written
    ))
    return 0


if __name__ == "__main__":
    sys.exit(main())
