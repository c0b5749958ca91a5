"""
hcert_parser — EU Digital COVID Certificate (HC1) token decoder.

Turns a scanned HC1: string into a typed Certificate record:
prefix → Base45 → zlib → COSE_Sign1 → CWT claims → EUDCC v1 schema.

Reads certificates, does not verify them: the COSE signature is parsed
but never checked.

Built on a Railway-Oriented Programming Result type for explicit,
composable error handling.
"""

from hcert_parser.pipeline import decode, decode_claims, decode_or_raise

__all__ = ["decode", "decode_claims", "decode_or_raise"]

__version__ = "0.1.0"
