from __future__ import annotations

import gzip
from enum import Enum

import brotli


class Encoding(str, Enum):
    """Negotiated content codings, valued as sent in ``Content-Encoding``."""

    BROTLI = "br"
    GZIP = "gzip"


def _tokens(accept_encoding: str) -> set[str]:
    tokens = set()
    for part in accept_encoding.split(","):
        # Parameters such as ``;q=0.5`` are dropped, not interpreted.
        name = part.split(";", 1)[0].strip().lower()
        if name:
            tokens.add(name)
    return tokens


def detect_encoding(accept_encoding: str | None) -> Encoding | None:
    """Pick brotli over gzip over nothing.

    Only the presence of a token matters; quality values and the order
    the client listed codings in are ignored.
    """
    tokens = _tokens(accept_encoding or "")
    if "br" in tokens:
        return Encoding.BROTLI
    if "gzip" in tokens:
        return Encoding.GZIP
    return None


def compress_bytes(data: bytes, encoding: Encoding) -> bytes:
    if encoding is Encoding.BROTLI:
        return brotli.compress(data, quality=6)
    return gzip.compress(data, compresslevel=9)


def compress_text(text: str, encoding: Encoding) -> bytes:
    return compress_bytes(text.encode("utf-8"), encoding)


def should_compress(content: str | bytes, min_size: int = 1024) -> bool:
    return len(content) >= min_size
