"""Exception taxonomy for the marker writer.

WHY: Callers (the CLI, tests, embedding applications) need to tell a bad
input file apart from an unsupported one, a missing chunk, an empty label
file, or a resource ceiling. Typed exceptions make each failure explicit.

HOW: Every error the converter raises itself derives from WavMarkerError.
I/O failures are not wrapped; they surface as the built-in OSError.

RULES:
- Per-line label problems are NOT exceptions; they are logged and skipped
- Every other error is fatal for the whole conversion
- No retries anywhere: the same input fails the same way every time
"""

from __future__ import annotations


class WavMarkerError(Exception):
    """Base class for all converter errors."""


class UsageError(WavMarkerError):
    """Raised when the command line does not have exactly three paths."""


class FormatError(WavMarkerError):
    """Raised when the input is not a well-formed RIFF/WAVE file.

    WHY: Bad magic tags, an empty payload, or chunk framing that runs past
    the end of the file all mean the container cannot be trusted.

    RULES:
    - Message names the offending tag or offset where possible
    """


class UnsupportedFormatError(FormatError):
    """Raised when the fmt chunk declares a compressed encoding.

    HOW: Carries the compression code so the caller can report it.
    """

    def __init__(self, compression_code: int) -> None:
        self.compression_code = compression_code
        super().__init__(
            "Compressed audio formats are not supported "
            "(compression code 0x{:04x})".format(compression_code)
        )


class IncompleteInputError(FormatError):
    """Raised when the input has no fmt chunk or no data chunk."""


class ResourceLimitError(WavMarkerError):
    """Raised when a configured ceiling or a 32-bit size field is exceeded.

    WHY: The preserved-chunk and label lists are bounded, and RIFF sizes
    are 32-bit. Exceeding either is a hard limit, not a recoverable state.
    """


class NoLabelsError(WavMarkerError):
    """Raised when the label file yields zero usable entries."""
