"""
Failure description — structured error information for the failure track.

Every decode failure carries a FormatError code identifying the pipeline
stage that rejected the input, a human-readable message, and (when a
third-party codec raised) the original exception for diagnostics.

All failures are expected, recoverable-by-caller conditions: the input was
malformed or foreign. None of them is fatal to the decoder itself.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique


@unique
class FormatError(Enum):
    """
    Structured error codes, one per way a token can be rejected.

    The `stage` property names the pipeline step (1-5) that raises it:
      1. prefix stripping
      2. Base45 decoding
      3. zlib inflation
      4. COSE_Sign1 unwrapping
      5. claim extraction and certificate deserialization
    """

    MISSING_PREFIX = "MISSING_PREFIX"
    """Input does not start with the HC1: marker."""

    INVALID_BASE45 = "INVALID_BASE45"
    """Character outside the Base45 alphabet, or malformed final group."""

    DECOMPRESSION_FAILED = "DECOMPRESSION_FAILED"
    """Corrupt, truncated, or checksum-failing zlib stream."""

    NOT_COSE_SIGN1 = "NOT_COSE_SIGN1"
    """CBOR value is not tag 18 wrapping a 4-element array."""

    CBOR_DECODE = "CBOR_DECODE"
    """Bytes are not well-formed CBOR."""

    MISSING_CLAIM = "MISSING_CLAIM"
    """A required CWT claim is absent."""

    DUPLICATE_CLAIM = "DUPLICATE_CLAIM"
    """A claim key appears more than once in the claims map."""

    UNSUPPORTED_SCHEMA_VERSION = "UNSUPPORTED_SCHEMA_VERSION"
    """The health-certificate claim has no schema version this decoder knows."""

    SCHEMA_MISMATCH = "SCHEMA_MISMATCH"
    """A claim or certificate value does not have the expected shape."""

    @property
    def stage(self) -> int:
        return _STAGES[self]


_STAGES: dict[FormatError, int] = {
    FormatError.MISSING_PREFIX: 1,
    FormatError.INVALID_BASE45: 2,
    FormatError.DECOMPRESSION_FAILED: 3,
    FormatError.NOT_COSE_SIGN1: 4,
    FormatError.CBOR_DECODE: 4,
    FormatError.MISSING_CLAIM: 5,
    FormatError.DUPLICATE_CLAIM: 5,
    FormatError.UNSUPPORTED_SCHEMA_VERSION: 5,
    FormatError.SCHEMA_MISMATCH: 5,
}


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception, and timestamp.

    >>> desc = FailureDescription(FormatError.MISSING_PREFIX, "Token must start with 'HC1:'")
    >>> desc.code.stage
    1
    """

    code: FormatError
    message: str
    exception: BaseException | None = field(default=None, repr=False)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def full_stack_trace(self) -> str:
        """Message followed by the formatted exception chain, if any."""
        if self.exception is None:
            return self.message
        tb = "".join(
            traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__)
        )
        return f"{self.message}\n{tb}"

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class HCertDecodeError(ValueError):
    """
    Raised by `decode_or_raise` for callers that prefer exceptions over Result.

    Wraps the FailureDescription produced by the failing stage.
    """

    def __init__(self, failure: FailureDescription) -> None:
        super().__init__(str(failure))
        self.failure = failure

    @property
    def code(self) -> FormatError:
        return self.failure.code
