"""
Unit tests for domain models — value objects.

Verifies frozen dataclass behavior, defaults,
and computed properties.
"""

from __future__ import annotations

import dataclasses

import pytest

from hcert_parser.domain.models import (
    Certificate,
    CoseSign1Envelope,
    HealthCertificateClaims,
    Name,
    RecoveryRecord,
    TestRecord,
    VaccineRecord,
)


def _name() -> Name:
    return Name("Di Caprio", "DI<CAPRIO", "Marilù Teresa", "MARILU<TERESA")


def _vaccine(certificate_id: str = "v-1") -> VaccineRecord:
    return VaccineRecord(
        disease_target="840539006",
        vaccine_prophylaxis="1119349007",
        vaccine_product="EU/1/20/1528",
        manufacturer="ORG-100030215",
        dose_number=2,
        total_doses=2,
        vaccination_date="2021-04-10",
        country="IT",
        issuer="IT",
        certificate_id=certificate_id,
    )


class TestCertificate:
    """Verify Certificate value object behavior."""

    def test_collections_default_to_empty(self) -> None:
        """
        GIVEN a Certificate with only the required fields
        WHEN accessed
        THEN every record collection is an empty tuple.
        """
        cert = Certificate(version="1.0.0", name=_name(), date_of_birth="1977-06-16")
        assert cert.vaccinations == ()
        assert cert.recoveries == ()
        assert cert.tests == ()
        assert cert.certificate_ids == ()

    def test_frozen_prevents_mutation(self) -> None:
        cert = Certificate(version="1.0.0", name=_name(), date_of_birth="1977-06-16")
        with pytest.raises(dataclasses.FrozenInstanceError):
            cert.version = "2.0.0"  # type: ignore[misc]

    def test_equal_by_value(self) -> None:
        a = Certificate("1.0.0", _name(), "1977-06-16", vaccinations=(_vaccine(),))
        b = Certificate("1.0.0", _name(), "1977-06-16", vaccinations=(_vaccine(),))
        assert a == b
        assert hash(a) == hash(b)

    def test_certificate_ids_in_collection_order(self) -> None:
        """
        GIVEN one record of each kind
        WHEN certificate_ids is read
        THEN vaccination, recovery and test ids follow each other in that order.
        """
        recovery = RecoveryRecord("840539006", "2021-02-20", "AT", "AT", "2021-05-02", "2021-10-31", "r-1")
        test = TestRecord(
            disease_target="840539006",
            test_type="LP217198-3",
            sample_collected_at="2021-05-30T10:12:22Z",
            test_result="260415000",
            testing_centre="Testzentrum",
            country="DE",
            issuer="DE",
            certificate_id="t-1",
        )
        cert = Certificate(
            "1.0.0",
            _name(),
            "1977-06-16",
            vaccinations=(_vaccine("v-1"), _vaccine("v-2")),
            recoveries=(recovery,),
            tests=(test,),
        )
        assert cert.certificate_ids == ("v-1", "v-2", "r-1", "t-1")


class TestTestRecord:
    def test_optional_fields_default_to_empty_string(self) -> None:
        test = TestRecord("840539006", "LP6464-4", "2021-05-30T10:12:22Z", "260415000", "Lab", "DE", "DE", "t-1")
        assert test.test_name == ""
        assert test.test_device_manufacturer == ""
        assert test.result_date == ""

    def test_not_collected_by_pytest(self) -> None:
        assert TestRecord.__test__ is False


class TestCoseSign1Envelope:
    def test_repr_hides_bytes(self) -> None:
        """
        GIVEN an envelope with a large payload
        WHEN repr'd
        THEN the payload and signature bytes are not dumped.
        """
        envelope = CoseSign1Envelope(b"\xa1\x01\x26", {4: b"kid"}, b"\x00" * 1024, b"\x01" * 64)
        text = repr(envelope)
        assert "unprotected={4: b'kid'}" in text
        assert "\\x00" not in text


class TestHealthCertificateClaims:
    def test_schema_version_defaults_to_one(self) -> None:
        cert = Certificate("1.0.0", _name(), "1977-06-16")
        claims = HealthCertificateClaims(issuer="IT", issued_at=1, expires_at=2, certificate=cert)
        assert claims.schema_version == 1

    def test_asdict_is_json_shaped(self) -> None:
        cert = Certificate("1.0.0", _name(), "1977-06-16", vaccinations=(_vaccine(),))
        claims = HealthCertificateClaims(issuer="IT", issued_at=1, expires_at=2, certificate=cert)
        data = dataclasses.asdict(claims)
        assert data["certificate"]["name"]["given_name"] == "Marilù Teresa"
        assert data["certificate"]["vaccinations"][0]["dose_number"] == 2
