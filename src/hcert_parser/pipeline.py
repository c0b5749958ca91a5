"""
Pipeline — the core ROP pipeline decoding an HC1 token.

Domain layer — PURE DECODING LOGIC. No I/O, no logging, no shared state.
Each stage is injected via a port (Protocol interface) and returns a Result;
stages are connected with flat_map, forming a railway:

  strip_prefix(token)
    → text_decoder.decode(body)              Base45
      → decompressor.inflate(raw)            zlib
        → envelope_parser.unwrap(cbor)       COSE_Sign1
          → claims_extractor.extract(payload) CWT claims → Certificate

Failures short-circuit automatically through the railway. The signature in
the envelope is never verified.
"""

from __future__ import annotations

from typing import NoReturn

from hcert_parser.adapters.base45_decoder import Base45Decoder
from hcert_parser.adapters.claims import CwtClaimsExtractor
from hcert_parser.adapters.cose import CoseSign1Unwrapper
from hcert_parser.adapters.inflate import ZlibInflater
from hcert_parser.domain.failure import FailureDescription, FormatError, HCertDecodeError
from hcert_parser.domain.models import Certificate, HealthCertificateClaims
from hcert_parser.domain.ports import (
    ClaimsExtractor,
    Decompressor,
    EnvelopeParser,
    TextDecoder,
)
from hcert_parser.result import Result

PREFIX = "HC1:"


def strip_prefix(token: str) -> Result[str]:
    """
    Trim trailing whitespace and remove the HC1: marker.

    Returns Result[str] with the Base45 body, or
    Result.failure(MISSING_PREFIX, ...) when the marker is absent.
    """
    trimmed = token.rstrip()
    if not trimmed.startswith(PREFIX):
        return Result.failure(FormatError.MISSING_PREFIX, f"Token must start with {PREFIX!r}")
    return Result.success(trimmed[len(PREFIX) :])


def run_pipeline(
    token: str,
    text_decoder: TextDecoder,
    decompressor: Decompressor,
    envelope_parser: EnvelopeParser,
    claims_extractor: ClaimsExtractor,
) -> Result[HealthCertificateClaims]:
    """
    Decode an HC1 token through the given stage adapters.

    Flow:
      1. Strip the HC1: prefix
      2. Base45-decode the body
      3. Inflate the zlib stream
      4. Unwrap the COSE_Sign1 envelope
      5. Extract the CWT claims and the typed certificate

    Returns Result[HealthCertificateClaims] on success, or the failure from
    the first failing stage.
    """
    return (
        strip_prefix(token)
        .flat_map(text_decoder.decode)
        .flat_map(decompressor.inflate)
        .flat_map(envelope_parser.unwrap)
        .flat_map(lambda envelope: claims_extractor.extract(envelope.payload))
    )


def decode_claims(token: str) -> Result[HealthCertificateClaims]:
    """Decode a token with the default adapters, keeping issuer and timestamps."""
    return run_pipeline(
        token,
        text_decoder=Base45Decoder(),
        decompressor=ZlibInflater(),
        envelope_parser=CoseSign1Unwrapper(),
        claims_extractor=CwtClaimsExtractor(),
    )


def decode(token: str) -> Result[Certificate]:
    """Decode a token into its Certificate."""
    return decode_claims(token).map(lambda claims: claims.certificate)


def decode_or_raise(token: str) -> Certificate:
    """Decode a token into its Certificate, raising HCertDecodeError on failure."""

    def _raise(failure: FailureDescription) -> NoReturn:
        raise HCertDecodeError(failure) from failure.exception

    return decode(token).either(lambda certificate: certificate, _raise)
