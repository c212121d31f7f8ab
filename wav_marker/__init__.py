"""WAV Marker: embed Audacity labels in WAVE files as cue markers.

WHY: Audacity exports labels as a text file, but DAWs and podcast tools
look for markers inside the audio file itself, in ``cue `` and
``LIST``/``adtl`` chunks. This package writes those chunks without
touching the audio.

HOW: Four-stage pipeline. Scan the container, parse the label file,
synthesize the marker chunks, assemble the output. Each stage is
independently testable.

RULES:
- Sample data is relocated byte-for-byte, never decoded
- Unknown chunks survive unchanged and in order
- Existing cue and adtl chunks are replaced, never merged
"""

__version__ = "0.1.0"
