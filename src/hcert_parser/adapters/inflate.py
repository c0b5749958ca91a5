"""
Inflate adapter — zlib-wrapped DEFLATE decompression.

Implements the Decompressor port using the standard library zlib module,
as every HC1 reader does. Output is produced in bounded chunks through
`decompressobj` and `max_length`, so the buffer grows with the data
instead of being sized up front.
"""

from __future__ import annotations

import zlib

from hcert_parser.domain.failure import FormatError
from hcert_parser.result import Result

CHUNK_SIZE = 4096


class TruncatedStreamError(ValueError):
    """The zlib stream ended before its end-of-stream marker."""


def inflate(data: bytes, chunk_size: int = CHUNK_SIZE) -> bytes:
    """
    Decompress a complete zlib stream.

    Raises zlib.error on a corrupt stream or checksum mismatch, and
    TruncatedStreamError when input runs out before the stream is complete.
    Bytes after the end of the stream are ignored.
    """
    decompressor = zlib.decompressobj()
    out = bytearray()
    pending = data
    while pending and not decompressor.eof:
        out += decompressor.decompress(pending, chunk_size)
        pending = decompressor.unconsumed_tail
    while not decompressor.eof:
        chunk = decompressor.decompress(b"", chunk_size)
        if not chunk:
            break
        out += chunk
    if not decompressor.eof:
        raise TruncatedStreamError(f"stream truncated after {len(data)} bytes of input")
    return bytes(out)


class ZlibInflater:
    """
    Inflate the Base45-decoded bytes into the COSE CBOR stream.

    Implements the Decompressor port.
    """

    def __init__(self, chunk_size: int = CHUNK_SIZE) -> None:
        self._chunk_size = chunk_size

    def inflate(self, data: bytes) -> Result[bytes]:
        """
        Returns Result[bytes] with the decompressed stream on success.
        Returns Result.failure(DECOMPRESSION_FAILED, ...) on a corrupt or truncated stream.
        """
        return Result.from_computation(
            lambda: inflate(data, self._chunk_size),
            FormatError.DECOMPRESSION_FAILED,
            "Token payload is not a valid zlib stream",
            catch=(zlib.error, TruncatedStreamError),
        )
