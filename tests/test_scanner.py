"""Unit tests for the chunk scanner.

WHY: The scanner decides what survives into the output. A wrong offset
or a missed pad byte silently corrupts every chunk after it.

HOW: Hand-built WAVE files (see conftest) are scanned from BytesIO and
the resulting WaveLayout is compared against offsets computed by hand.

RULES:
- Offsets are absolute positions in the input bytes
- Preserved ranges include the 8-byte chunk header, exclude the pad byte
"""

import io
import logging

import pytest

from tests.conftest import SAMPLE_DATA, chunk, fmt_payload, riff, simple_wave
from wav_marker.core.errors import (
    FormatError,
    IncompleteInputError,
    ResourceLimitError,
    UnsupportedFormatError,
)
from wav_marker.core.ir import ByteRange
from wav_marker.core.scanner import scan_wave


def _scan(raw, **kwargs):
    return scan_wave(io.BytesIO(raw), **kwargs)


class TestHeaderValidation:

    def test_rejects_non_riff(self):
        raw = b"RIFX" + simple_wave()[4:]
        with pytest.raises(FormatError, match="not a RIFF"):
            _scan(raw)

    def test_rejects_non_wave(self):
        raw = simple_wave()[:8] + b"AVI " + simple_wave()[12:]
        with pytest.raises(FormatError, match="not a WAVE"):
            _scan(raw)

    def test_rejects_short_file(self):
        with pytest.raises(FormatError):
            _scan(b"RIFF\x04\x00")

    def test_rejects_empty_payload(self):
        with pytest.raises(FormatError, match="empty"):
            _scan(b"RIFF\x04\x00\x00\x00WAVE")

    def test_header_size_recorded(self):
        raw = simple_wave()
        layout = _scan(raw)
        assert layout.header.riff_size == len(raw) - 8


class TestFormatChunk:

    def test_pcm_fields(self):
        layout = _scan(simple_wave(channels=2, rate=48000, bits=24))
        fmt = layout.fmt
        assert fmt.compression_code == 1
        assert fmt.channels == 2
        assert fmt.sample_rate == 48000
        assert fmt.bits_per_sample == 24
        assert fmt.block_align == 6
        assert fmt.byte_rate == 48000 * 6
        assert fmt.extension is None
        assert fmt.chunk_size == 16

    def test_ieee_float_accepted(self):
        layout = _scan(simple_wave(code=3, bits=32))
        assert layout.fmt.compression_code == 3

    def test_compressed_rejected(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            _scan(simple_wave(code=0x55))
        assert exc_info.value.compression_code == 0x55

    def test_extension_recorded_as_range(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload(extension=b"\x02\x00ab")),
            chunk(b"data", SAMPLE_DATA),
        )
        layout = _scan(raw)
        # RIFF header (12) + fmt header (8) + core (16)
        assert layout.fmt.extension == ByteRange(36, 4)
        assert layout.fmt.chunk_size == 20

    def test_odd_extension_skips_pad(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload(extension=b"\x01\x00z")),
            chunk(b"data", SAMPLE_DATA),
        )
        layout = _scan(raw)
        assert layout.fmt.extension == ByteRange(36, 3)
        # fmt chunk: 8 + 19 + 1 pad, so data starts at 12 + 28
        assert layout.data.start == 40

    def test_too_small_format_chunk(self):
        raw = riff(chunk(b"fmt ", b"\x01\x00" * 4), chunk(b"data", SAMPLE_DATA))
        with pytest.raises(FormatError, match="Format chunk"):
            _scan(raw)

    def test_duplicate_format_chunk(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", SAMPLE_DATA),
        )
        with pytest.raises(FormatError, match="more than one format"):
            _scan(raw)


class TestDataChunk:

    def test_range_covers_header_and_payload(self):
        layout = _scan(simple_wave())
        assert layout.data == ByteRange(36, 8 + len(SAMPLE_DATA))

    def test_odd_payload(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", b"\x01\x02\x03"),
            chunk(b"junk", b"zz"),
        )
        layout = _scan(raw)
        assert layout.data == ByteRange(36, 11)
        # data chunk plus its pad byte ends at 36 + 12
        assert layout.preserved == [ByteRange(48, 10)]

    def test_payload_past_end_of_file(self):
        raw = simple_wave()[:-10]
        with pytest.raises(FormatError, match="file ends"):
            _scan(raw)

    def test_duplicate_data_chunk(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", SAMPLE_DATA),
            chunk(b"data", SAMPLE_DATA),
        )
        with pytest.raises(FormatError, match="more than one data"):
            _scan(raw)


class TestMissingChunks:

    def test_missing_data(self):
        with pytest.raises(IncompleteInputError):
            _scan(riff(chunk(b"fmt ", fmt_payload())))

    def test_missing_format(self):
        with pytest.raises(IncompleteInputError):
            _scan(riff(chunk(b"data", SAMPLE_DATA)))


class TestOtherChunks:

    def test_unknown_chunks_preserved_in_order(self):
        raw = riff(
            chunk(b"bext", b"A" * 10),
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", SAMPLE_DATA),
            chunk(b"iXML", b"<x/>"),
        )
        layout = _scan(raw)
        assert [raw[r.start:r.start + 4] for r in layout.preserved] == [b"bext", b"iXML"]
        assert layout.preserved[0] == ByteRange(12, 18)

    def test_existing_cue_discarded(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", SAMPLE_DATA),
            chunk(b"cue ", b"\x00" * 4),
        )
        layout = _scan(raw)
        assert layout.preserved == []
        assert layout.discarded == [b"cue "]

    def test_existing_adtl_list_discarded(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", SAMPLE_DATA),
            chunk(b"LIST", b"adtl" + chunk(b"labl", b"\x01\x00\x00\x00old\x00")),
        )
        layout = _scan(raw)
        assert layout.preserved == []
        assert layout.discarded == [b"LIST"]

    def test_info_list_preserved(self):
        info = b"INFO" + chunk(b"INAM", b"Title\x00")
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", SAMPLE_DATA),
            chunk(b"LIST", info),
        )
        layout = _scan(raw)
        assert len(layout.preserved) == 1
        kept = layout.preserved[0]
        assert raw[kept.start:kept.start + kept.length] == chunk(b"LIST", info)

    def test_odd_unknown_chunk_skips_pad(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"odd ", b"abc"),
            chunk(b"data", SAMPLE_DATA),
        )
        layout = _scan(raw)
        assert layout.preserved == [ByteRange(36, 11)]
        assert layout.data.start == 48

    def test_preserved_ceiling(self):
        raw = riff(
            chunk(b"fmt ", fmt_payload()),
            chunk(b"data", SAMPLE_DATA),
            chunk(b"aaaa", b""),
            chunk(b"bbbb", b""),
            chunk(b"cccc", b""),
        )
        with pytest.raises(ResourceLimitError):
            _scan(raw, max_preserved_chunks=2)

    def test_no_ceiling(self):
        chunks = [chunk("x{:03d}".format(i).encode(), b"") for i in range(300)]
        raw = riff(chunk(b"fmt ", fmt_payload()), chunk(b"data", SAMPLE_DATA), *chunks)
        layout = _scan(raw, max_preserved_chunks=None)
        assert len(layout.preserved) == 300

    def test_trailing_bytes_ignored(self, caplog):
        raw = simple_wave() + b"\x00\x00"
        with caplog.at_level(logging.WARNING):
            layout = _scan(raw)
        assert layout.data.length == 8 + len(SAMPLE_DATA)
        assert "trailing" in caplog.text

    def test_truncated_chunk_header(self):
        raw = simple_wave() + b"junk\x01"
        with pytest.raises(FormatError, match="Truncated"):
            _scan(raw)
