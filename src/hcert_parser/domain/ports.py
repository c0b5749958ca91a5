"""
Ports — Protocol-based interfaces for the decode stages.

These define WHAT each stage of the pipeline must do without specifying
HOW. Each port is a Protocol (structural typing) so adapters satisfy the
contract simply by implementing the method — no inheritance.

  TextDecoder      → Base45 text to raw bytes
  Decompressor     → zlib stream to CBOR bytes
  EnvelopeParser   → CBOR bytes to COSE_Sign1 envelope
  ClaimsExtractor  → COSE payload to typed claims
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from hcert_parser.domain.models import CoseSign1Envelope, HealthCertificateClaims
from hcert_parser.result import Result


@runtime_checkable
class TextDecoder(Protocol):
    """Port: decode the text after the HC1: prefix into raw bytes."""

    def decode(self, text: str) -> Result[bytes]: ...


@runtime_checkable
class Decompressor(Protocol):
    """
    Port: fully decompress the raw bytes.

    The output size is not known in advance; implementations must not
    assume a fixed buffer.
    """

    def inflate(self, data: bytes) -> Result[bytes]: ...


@runtime_checkable
class EnvelopeParser(Protocol):
    """
    Port: unwrap the signed envelope and expose its payload.

    Implementations check structure only. The signature is never verified.
    """

    def unwrap(self, data: bytes) -> Result[CoseSign1Envelope]: ...


@runtime_checkable
class ClaimsExtractor(Protocol):
    """
    Port: parse the envelope payload into claims and the typed certificate.

    Implementations must tolerate any key ordering, reject duplicate keys,
    and ignore keys they do not recognize.
    """

    def extract(self, payload: bytes) -> Result[HealthCertificateClaims]: ...
