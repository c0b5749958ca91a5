"""
Base45 adapter — the QR alphanumeric-mode text encoding (RFC 9285).

Implements the TextDecoder port using the base45 package.
"""

from __future__ import annotations

import base45

from hcert_parser.domain.failure import FormatError
from hcert_parser.result import Result


class Base45Decoder:
    """
    Decode the HC1 body from Base45 into the compressed byte stream.

    Implements the TextDecoder port. Stateless and safe to share across threads.
    """

    def decode(self, text: str) -> Result[bytes]:
        """
        Returns Result[bytes] on success.
        Returns Result.failure(INVALID_BASE45, ...) on a character outside the
        alphabet, a dangling character, or a group that overflows its bytes.
        """
        return Result.from_computation(
            lambda: base45.b45decode(text),
            FormatError.INVALID_BASE45,
            "Token body is not valid Base45",
            catch=(ValueError,),
        )
