"""
Claims adapter — CWT claim extraction and schema dispatch.

Implements the ClaimsExtractor port using cbor_map, which decodes the
claims map with cbor2 while keeping repeated keys.

Pipeline:
  COSE payload bytes
    → map_items(): (raw key, key, value) triples in wire order
    → single pass: dispatch on key into four slots, reject repeats, skip unknowns
    → completeness check: issuer (1), issued-at (6), expires-at (4), hcert (-260)
    → hcert map → schema registry by version key → Certificate
    → HealthCertificateClaims (domain model)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from hcert_parser.adapters.cbor_map import MalformedCBORError, NotAMapError, map_items
from hcert_parser.adapters.schema_v1 import SchemaMismatchError, parse_v1_certificate
from hcert_parser.domain.failure import FormatError
from hcert_parser.domain.models import Certificate, HealthCertificateClaims
from hcert_parser.result import Result

# ─────────────────────── CWT claim keys ───────────────────────

ISSUER = 1
EXPIRES_AT = 4
ISSUED_AT = 6
HCERT = -260

CLAIM_NAMES: dict[int, str] = {
    ISSUER: "issuer",
    ISSUED_AT: "issued_at",
    EXPIRES_AT: "expires_at",
    HCERT: "health_certificate",
}

# Closed set of certificate schemas, keyed by their hcert map key.
SCHEMAS: dict[int, Callable[[Any], Certificate]] = {
    1: parse_v1_certificate,
}


@dataclass(slots=True)
class _ClaimSlots:
    """Accumulator for the single pass over the claims map."""

    values: dict[int, Any] = field(default_factory=dict)
    seen: set[tuple[type, Any]] = field(default_factory=set)

    def missing(self) -> list[str]:
        return [name for key, name in CLAIM_NAMES.items() if key not in self.values]


def _key_identity(key: Any, raw_key: bytes) -> tuple[type, Any]:
    # True and 1 compare equal in Python but are distinct CBOR keys.
    if isinstance(key, (int, str, bytes)):
        return type(key), key
    return bytes, raw_key


def _describe_key(key: Any) -> str:
    if type(key) is int and key in CLAIM_NAMES:
        return f"{CLAIM_NAMES[key]} ({key})"
    return repr(key)


def _scan(payload: bytes) -> Result[_ClaimSlots]:
    """Visit every claim once, filling the slots for the four known keys."""
    try:
        items = map_items(payload)
    except MalformedCBORError as e:
        return Result.failure(FormatError.CBOR_DECODE, f"Claims payload is not well-formed CBOR: {e}", e)
    except NotAMapError as e:
        return Result.failure(FormatError.SCHEMA_MISMATCH, f"Claims payload must be a map: {e}", e)

    slots = _ClaimSlots()
    for raw_key, key, value in items:
        identity = _key_identity(key, raw_key)
        if identity in slots.seen:
            return Result.failure(FormatError.DUPLICATE_CLAIM, f"Claim {_describe_key(key)} appears more than once")
        slots.seen.add(identity)

        if type(key) is not int or key not in CLAIM_NAMES:
            continue
        slots.values[key] = value
    return Result.success(slots)


def _check_complete(slots: _ClaimSlots) -> Result[_ClaimSlots]:
    missing = slots.missing()
    if missing:
        return Result.failure(FormatError.MISSING_CLAIM, f"Missing required claim(s): {', '.join(missing)}")
    return Result.success(slots)


def _check_types(slots: _ClaimSlots) -> Result[_ClaimSlots]:
    issuer = slots.values[ISSUER]
    if not isinstance(issuer, str):
        return Result.failure(FormatError.SCHEMA_MISMATCH, "Claim issuer (1) must be text")
    for key in (ISSUED_AT, EXPIRES_AT):
        timestamp = slots.values[key]
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            return Result.failure(FormatError.SCHEMA_MISMATCH, f"Claim {_describe_key(key)} must be an integer")
    if not isinstance(slots.values[HCERT], Mapping):
        return Result.failure(FormatError.SCHEMA_MISMATCH, "Claim health_certificate (-260) must be a map")
    return Result.success(slots)


def _build_claims(slots: _ClaimSlots) -> Result[HealthCertificateClaims]:
    hcert: Mapping[Any, Any] = slots.values[HCERT]
    version = next((v for v in SCHEMAS if any(type(k) is int and k == v for k in hcert)), None)
    if version is None:
        found = ", ".join(repr(k) for k in hcert) or "none"
        return Result.failure(
            FormatError.UNSUPPORTED_SCHEMA_VERSION,
            f"Health certificate claim has no supported schema version (found keys: {found})",
        )

    try:
        certificate = SCHEMAS[version](hcert[version])
    except SchemaMismatchError as e:
        return Result.failure(FormatError.SCHEMA_MISMATCH, f"Certificate does not match schema v{version}: {e}", e)

    return Result.success(
        HealthCertificateClaims(
            issuer=slots.values[ISSUER],
            issued_at=slots.values[ISSUED_AT],
            expires_at=slots.values[EXPIRES_AT],
            certificate=certificate,
            schema_version=version,
        )
    )


class CwtClaimsExtractor:
    """
    Extract the CWT claims and the versioned health certificate from a COSE payload.

    Implements the ClaimsExtractor port. Unknown claim keys are checked
    for repeats and otherwise ignored, so newer tokens remain readable.
    """

    def extract(self, payload: bytes) -> Result[HealthCertificateClaims]:
        """
        Returns Result[HealthCertificateClaims] on success, or the failure of
        the first check that rejects the payload:
          CBOR_DECODE → SCHEMA_MISMATCH (not a map) → DUPLICATE_CLAIM →
          MISSING_CLAIM → SCHEMA_MISMATCH (claim types) →
          UNSUPPORTED_SCHEMA_VERSION → SCHEMA_MISMATCH (certificate shape)
        """
        return _scan(payload).flat_map(_check_complete).flat_map(_check_types).flat_map(_build_claims)
