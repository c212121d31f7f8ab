"""Shared builders and fixtures for the wav_marker test suite.

WHY: Nearly every test needs a small, hand-assembled WAVE file with a
known chunk layout. Building them with ``struct`` here (not with the
package's own codec) keeps the expected bytes independent of the code
under test.

HOW: Plain helper functions assemble chunks and RIFF containers;
fixtures write them to ``tmp_path``.

RULES:
- Default format: PCM, mono, 44100 Hz, 16 bit
- Helpers add the pad byte for odd-sized chunk payloads
"""

import struct

import pytest

SAMPLE_RATE = 44100
SAMPLE_DATA = bytes(range(100))


def chunk(tag: bytes, payload: bytes) -> bytes:
    """A complete chunk: tag, size, payload, and pad byte if odd."""
    raw = tag + struct.pack("<I", len(payload)) + payload
    if len(payload) % 2:
        raw += b"\x00"
    return raw


def fmt_payload(code=1, channels=1, rate=SAMPLE_RATE, bits=16, extension=b""):
    block_align = channels * bits // 8
    core = struct.pack("<HHIIHH", code, channels, rate, rate * block_align, block_align, bits)
    return core + extension


def riff(*chunks: bytes) -> bytes:
    """Wrap chunks in a RIFF/WAVE header with the correct size field."""
    body = b"WAVE" + b"".join(chunks)
    return b"RIFF" + struct.pack("<I", len(body)) + body


def simple_wave(data=SAMPLE_DATA, **fmt_kwargs) -> bytes:
    return riff(chunk(b"fmt ", fmt_payload(**fmt_kwargs)), chunk(b"data", data))


def split_chunks(raw: bytes):
    """Split a RIFF file into (tag, payload) pairs after the 12-byte header."""
    chunks = []
    position = 12
    while position + 8 <= len(raw):
        tag = raw[position:position + 4]
        size = struct.unpack("<I", raw[position + 4:position + 8])[0]
        chunks.append((tag, raw[position + 8:position + 8 + size]))
        position += 8 + size + (size % 2)
    return chunks


@pytest.fixture
def wave_path(tmp_path):
    """A minimal PCM mono 44.1 kHz WAVE file on disk."""
    path = tmp_path / "input.wav"
    path.write_bytes(simple_wave())
    return path


@pytest.fixture
def write_labels(tmp_path):
    """Factory: write label file bytes and return the path."""

    def _write(content: bytes, name: str = "labels.txt"):
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _write
