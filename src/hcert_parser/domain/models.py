"""
Domain models — immutable data structures for decoded health certificates.

These are pure value objects with no behavior beyond a few computed
properties. They represent the data extracted from an HC1 token:

  CoseSign1Envelope → HealthCertificateClaims → Certificate
                                                  ├─ Name
                                                  ├─ VaccineRecord*
                                                  ├─ RecoveryRecord*
                                                  └─ TestRecord*

All models are frozen dataclasses; record collections are tuples so a
decoded certificate cannot be mutated after construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Name:
    """Holder name as printed (`fn`, `gn`) and ICAO 9303 transliterated (`fnt`, `gnt`)."""

    surname: str
    surname_transliterated: str
    given_name: str
    given_name_transliterated: str


@dataclass(frozen=True, slots=True)
class VaccineRecord:
    """One vaccination event (`v` array entry)."""

    disease_target: str
    vaccine_prophylaxis: str
    vaccine_product: str
    manufacturer: str
    dose_number: int
    total_doses: int
    vaccination_date: str
    country: str
    issuer: str
    certificate_id: str


@dataclass(frozen=True, slots=True)
class RecoveryRecord:
    """One recovery statement (`r` array entry)."""

    disease_target: str
    first_positive_test_date: str
    country: str
    issuer: str
    valid_from: str
    valid_until: str
    certificate_id: str


@dataclass(frozen=True, slots=True)
class TestRecord:
    """
    One test result (`t` array entry).

    `test_name` (NAAT) and `test_device_manufacturer` (RAT) are mutually
    exclusive in practice, so either may be empty. `result_date` is optional
    in the schema. Absent optional fields decode to empty strings.
    """

    __test__ = False  # not a pytest test class

    disease_target: str
    test_type: str
    sample_collected_at: str
    test_result: str
    testing_centre: str
    country: str
    issuer: str
    certificate_id: str
    test_name: str = ""
    test_device_manufacturer: str = ""
    result_date: str = ""


@dataclass(frozen=True, slots=True)
class Certificate:
    """
    The EUDCC v1 health certificate carried under hcert claim key 1.

    Real-world certificates carry exactly one non-empty record collection,
    but any combination decodes.
    """

    version: str
    name: Name
    date_of_birth: str
    vaccinations: tuple[VaccineRecord, ...] = ()
    recoveries: tuple[RecoveryRecord, ...] = ()
    tests: tuple[TestRecord, ...] = ()

    @property
    def certificate_ids(self) -> tuple[str, ...]:
        """Unique certificate identifiers of every record, in collection order."""
        records: tuple[VaccineRecord | RecoveryRecord | TestRecord, ...] = (
            *self.vaccinations,
            *self.recoveries,
            *self.tests,
        )
        return tuple(record.certificate_id for record in records)


@dataclass(frozen=True, slots=True)
class CoseSign1Envelope:
    """
    A structurally unwrapped COSE_Sign1 message (CBOR tag 18).

    The protected header, unprotected header and signature are kept as
    inert pass-through values: nothing in this package validates them, so a
    forged signature decodes exactly like a genuine one.
    """

    protected: bytes = field(repr=False)
    unprotected: Mapping[Any, Any]
    payload: bytes = field(repr=False)
    signature: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class HealthCertificateClaims:
    """
    The CWT claims of an HC1 token.

    issued_at and expires_at are seconds since the Unix epoch, reported as
    found; no expiry check is applied.
    """

    issuer: str
    issued_at: int
    expires_at: int
    certificate: Certificate
    schema_version: int = 1
