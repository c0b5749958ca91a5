"""
CBOR map reading — decode an encoded map pair by pair, keeping every key.

cbor2 decodes a map straight into a dict, which silently keeps the last of
any repeated keys. The claims extractor has to see every key exactly as it
appears on the wire, so only the head of the top-level map is read here
(RFC 8949 section 3). Each key and each value after it is decoded by a
cbor2.CBORDecoder positioned just past the head, one item at a time.
"""

from __future__ import annotations

import io
from typing import Any

import cbor2

from hcert_parser.adapters.cose import CBOR_ERRORS

MAJOR_MAP = 5

_INDEFINITE = 31
_BREAK = 0xFF


class MalformedCBORError(ValueError):
    """The bytes are not a single well-formed CBOR data item."""


class NotAMapError(TypeError):
    """The bytes are well-formed CBOR, but the top-level item is not a map."""


def _map_head(data: bytes) -> tuple[int | None, int]:
    """Return (pair count or None when indefinite, offset of the first key)."""
    info = data[0] & 0x1F
    if info < 24:
        return info, 1
    if info <= 27:
        end = 1 + (1 << (info - 24))
        if end > len(data):
            raise MalformedCBORError("truncated map head")
        return int.from_bytes(data[1:end], "big"), end
    if info == _INDEFINITE:
        return None, 1
    raise MalformedCBORError(f"reserved additional information {info} in map head")


def _decode(decoder: cbor2.CBORDecoder, *, immutable: bool = False) -> Any:
    try:
        return decoder.decode(immutable=immutable)
    except CBOR_ERRORS as e:
        raise MalformedCBORError(str(e) or type(e).__name__) from e


def _check_end(data: bytes, fp: io.BytesIO) -> None:
    extra = len(data) - fp.tell()
    if extra:
        raise MalformedCBORError(f"{extra} unexpected bytes after the top-level item")


def map_items(data: bytes) -> list[tuple[bytes, Any, Any]]:
    """
    Decode an encoded CBOR map into (encoded key, key, value) triples, in wire order.

    Repeated keys are all returned. Keys are decoded immutable, so array and
    map keys come back hashable. Bytes after the map are rejected.
    """
    if not data:
        raise MalformedCBORError("empty input")

    fp = io.BytesIO(data)
    # One byte per read keeps fp.tell() on the item boundary.
    decoder = cbor2.CBORDecoder(fp, read_size=1)

    if data[0] >> 5 != MAJOR_MAP:
        item = _decode(decoder)
        _check_end(data, fp)
        raise NotAMapError(f"expected a CBOR map, got {type(item).__name__}")

    count, offset = _map_head(data)
    fp.seek(offset)
    items: list[tuple[bytes, Any, Any]] = []
    while True:
        start = fp.tell()
        if count is None:
            if start >= len(data):
                raise MalformedCBORError("indefinite-length map is missing its break")
            if data[start] == _BREAK:
                fp.seek(start + 1)
                break
        elif len(items) == count:
            break
        key = _decode(decoder, immutable=True)
        raw_key = data[start : fp.tell()]
        items.append((raw_key, key, _decode(decoder)))

    _check_end(data, fp)
    return items
