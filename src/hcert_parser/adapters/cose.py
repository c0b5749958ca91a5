"""
COSE adapter — structural unwrapping of the COSE_Sign1 envelope.

Implements the EnvelopeParser port using cbor2.

    COSE_Sign1 = #6.18([
        protected   : bstr,      ; serialized header map, kept opaque
        unprotected : {* any},   ; kept as decoded
        payload     : bstr,      ; CWT claims, handed to the claims extractor
        signature   : bstr,      ; kept opaque, never verified
    ])
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import cbor2

from hcert_parser.domain.failure import FormatError
from hcert_parser.domain.models import CoseSign1Envelope
from hcert_parser.result import Result

COSE_SIGN1_TAG = 18

# Decode errors raised by cbor2, plus the interpreter limit hit by deeply nested input.
CBOR_ERRORS: tuple[type[Exception], ...] = (cbor2.CBORDecodeError, ValueError, EOFError, RecursionError)


def _to_envelope(value: Any) -> Result[CoseSign1Envelope]:
    """Check tag and arity, then package the four elements."""
    if not isinstance(value, cbor2.CBORTag):
        return Result.failure(
            FormatError.NOT_COSE_SIGN1,
            f"Expected CBOR tag {COSE_SIGN1_TAG}, got untagged {type(value).__name__}",
        )
    if value.tag != COSE_SIGN1_TAG:
        return Result.failure(
            FormatError.NOT_COSE_SIGN1,
            f"Expected CBOR tag {COSE_SIGN1_TAG}, got tag {value.tag}",
        )

    content = value.value
    # cbor2 returns the contents of a tagged array as a tuple.
    if not isinstance(content, (list, tuple)) or len(content) != 4:
        shape = f"array of {len(content)}" if isinstance(content, (list, tuple)) else type(content).__name__
        return Result.failure(
            FormatError.NOT_COSE_SIGN1,
            f"COSE_Sign1 must be an array of 4 elements, got {shape}",
        )

    protected, unprotected, payload, signature = content
    if not isinstance(protected, bytes):
        return Result.failure(FormatError.NOT_COSE_SIGN1, "COSE_Sign1 protected header must be a byte string")
    if not isinstance(unprotected, Mapping):
        return Result.failure(FormatError.NOT_COSE_SIGN1, "COSE_Sign1 unprotected header must be a map")
    if not isinstance(payload, bytes):
        return Result.failure(FormatError.NOT_COSE_SIGN1, "COSE_Sign1 payload must be a byte string")
    if not isinstance(signature, bytes):
        return Result.failure(FormatError.NOT_COSE_SIGN1, "COSE_Sign1 signature must be a byte string")

    return Result.success(
        CoseSign1Envelope(
            protected=protected,
            unprotected=unprotected,
            payload=payload,
            signature=signature,
        )
    )


class CoseSign1Unwrapper:
    """
    Parse the inflated bytes as a tagged COSE_Sign1 structure.

    Implements the EnvelopeParser port. Signature and headers are carried
    through untouched; a structurally valid envelope with a forged
    signature unwraps successfully.
    """

    def unwrap(self, data: bytes) -> Result[CoseSign1Envelope]:
        """
        Returns Result[CoseSign1Envelope] on success.
        Returns Result.failure(CBOR_DECODE, ...) when the bytes are not CBOR,
        or Result.failure(NOT_COSE_SIGN1, ...) on a wrong tag or arity.
        """
        try:
            value = cbor2.loads(data)
        except CBOR_ERRORS as e:
            return Result.failure(FormatError.CBOR_DECODE, f"Envelope is not well-formed CBOR: {e}", e)
        return _to_envelope(value)
