from __future__ import annotations

import gzip

import brotli

from eastwest.caching.compression import (
    Encoding,
    compress_bytes,
    compress_text,
    detect_encoding,
    should_compress,
)


class TestDetectEncoding:
    def test_brotli_preferred(self):
        assert detect_encoding("gzip, deflate, br") is Encoding.BROTLI

    def test_gzip_when_no_brotli(self):
        assert detect_encoding("gzip, deflate") is Encoding.GZIP

    def test_none_for_other_codings(self):
        assert detect_encoding("deflate, identity") is None

    def test_none_for_missing_header(self):
        assert detect_encoding(None) is None
        assert detect_encoding("") is None

    def test_quality_values_are_ignored(self):
        assert detect_encoding("br;q=0.1, gzip;q=1.0") is Encoding.BROTLI

    def test_tokens_not_substrings(self):
        assert detect_encoding("x-gzipped") is None
        assert detect_encoding("brx") is None

    def test_case_and_whitespace(self):
        assert detect_encoding("  GZIP ") is Encoding.GZIP


def test_compress_bytes_round_trips():
    data = b"East @ West " * 200
    assert brotli.decompress(compress_bytes(data, Encoding.BROTLI)) == data
    assert gzip.decompress(compress_bytes(data, Encoding.GZIP)) == data


def test_compress_text_encodes_utf8():
    text = "Guide des Mezze Végétariens " * 50
    assert gzip.decompress(compress_text(text, Encoding.GZIP)).decode("utf-8") == text


def test_should_compress_threshold():
    assert not should_compress("a" * 1023)
    assert should_compress("a" * 1024)
    assert should_compress(b"a" * 10, min_size=10)
