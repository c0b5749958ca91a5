"""
Token builders — the inverse of the decode pipeline, for test vectors.

    certificate dict → CWT claims map → cbor2.dumps → COSE_Sign1 (tag 18)
      → cbor2.dumps → zlib.compress → base45.b45encode → "HC1:" + text

The signature is random filler; nothing in the decoder looks at it.
"""

from __future__ import annotations

import copy
import zlib
from typing import Any

import base45
import cbor2

from hcert_parser.domain.models import Certificate

ISSUED_AT = 1620000000
EXPIRES_AT = 1651536000

# Protected header {1: -7} (alg: ES256), as issued by real signers.
PROTECTED_HEADER = cbor2.dumps({1: -7})
SIGNATURE = bytes(range(64))

ITALIAN_VACCINATION: dict[str, Any] = {
    "ver": "1.0.0",
    "nam": {
        "fn": "Di Caprio",
        "fnt": "DI<CAPRIO",
        "gn": "Marilù Teresa",
        "gnt": "MARILU<TERESA",
    },
    "dob": "1977-06-16",
    "v": [
        {
            "tg": "840539006",
            "vp": "1119349007",
            "mp": "EU/1/20/1528",
            "ma": "ORG-100030215",
            "dn": 2,
            "sd": 2,
            "dt": "2021-04-10",
            "co": "IT",
            "is": "IT",
            "ci": "01ITE7300E1AB2A84C719004F103DCB1F70A#6",
        }
    ],
}

RECOVERY: dict[str, Any] = {
    "ver": "1.0.0",
    "nam": {
        "fn": "Musterfrau-Gößinger",
        "fnt": "MUSTERFRAU<GOESSINGER",
        "gn": "Gabriele",
        "gnt": "GABRIELE",
    },
    "dob": "1998-02-26",
    "r": [
        {
            "tg": "840539006",
            "fr": "2021-02-20",
            "co": "AT",
            "is": "Ministry of Health, Austria",
            "df": "2021-05-02",
            "du": "2021-10-31",
            "ci": "URN:UVCI:01:AT:858CC18CFCF5965EF82F60E493349AA5#K",
        }
    ],
}

RAPID_TEST: dict[str, Any] = {
    "ver": "1.0.0",
    "nam": {
        "fn": "Mustermann",
        "fnt": "MUSTERMANN",
        "gn": "Erika",
        "gnt": "ERIKA",
    },
    "dob": "1964-08-12",
    "t": [
        {
            "tg": "840539006",
            "tt": "LP217198-3",
            "nm": "",
            "ma": "",
            "sc": "2021-05-30T10:12:22Z",
            "tr": "260415000",
            "tc": "Testzentrum Köln Hbf",
            "co": "DE",
            "is": "Robert Koch-Institut",
            "ci": "URN:UVCI:01DE/IZ12345A/5CWLU12RNOB9RXSEOP6FG8#W",
        }
    ],
}


def certificate(base: dict[str, Any] = ITALIAN_VACCINATION, **overrides: Any) -> dict[str, Any]:
    """Deep copy of a certificate dict with top-level fields replaced (None removes)."""
    cert = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            cert.pop(key, None)
        else:
            cert[key] = value
    return cert


def claims(cert: Any = None, **overrides: Any) -> dict[Any, Any]:
    """
    CWT claims map around a certificate.

    Overrides use claim keys: issuer=1, expires_at=4, issued_at=6, hcert=-260.
    Passing None removes the claim.
    """
    mapping: dict[Any, Any] = {
        1: "IT",
        6: ISSUED_AT,
        4: EXPIRES_AT,
        -260: {1: certificate() if cert is None else cert},
    }
    names = {"issuer": 1, "expires_at": 4, "issued_at": 6, "hcert": -260}
    for name, value in overrides.items():
        key = names[name]
        if value is None:
            mapping.pop(key, None)
        else:
            mapping[key] = value
    return mapping


def cose_sign1(payload: bytes, tag: int = 18) -> bytes:
    """Encode a COSE_Sign1 message around an already encoded payload."""
    return cbor2.dumps(cbor2.CBORTag(tag, [PROTECTED_HEADER, {}, payload, SIGNATURE]))


def to_token(cbor_bytes: bytes) -> str:
    """Compress, Base45-encode and prefix raw envelope bytes."""
    return "HC1:" + base45.b45encode(zlib.compress(cbor_bytes, 9)).decode("ascii")


def token_from_payload(payload: bytes, tag: int = 18) -> str:
    return to_token(cose_sign1(payload, tag=tag))


def token_for(cert: Any = None, **claim_overrides: Any) -> str:
    """Full HC1 token for a certificate dict."""
    return token_from_payload(cbor2.dumps(claims(cert, **claim_overrides)))


def to_wire(cert: Certificate) -> dict[str, Any]:
    """Inverse of the v1 schema parser: Certificate → short-key certificate dict."""
    wire: dict[str, Any] = {
        "ver": cert.version,
        "nam": {
            "fn": cert.name.surname,
            "fnt": cert.name.surname_transliterated,
            "gn": cert.name.given_name,
            "gnt": cert.name.given_name_transliterated,
        },
        "dob": cert.date_of_birth,
    }
    if cert.vaccinations:
        wire["v"] = [
            {
                "tg": v.disease_target,
                "vp": v.vaccine_prophylaxis,
                "mp": v.vaccine_product,
                "ma": v.manufacturer,
                "dn": v.dose_number,
                "sd": v.total_doses,
                "dt": v.vaccination_date,
                "co": v.country,
                "is": v.issuer,
                "ci": v.certificate_id,
            }
            for v in cert.vaccinations
        ]
    if cert.recoveries:
        wire["r"] = [
            {
                "tg": r.disease_target,
                "fr": r.first_positive_test_date,
                "co": r.country,
                "is": r.issuer,
                "df": r.valid_from,
                "du": r.valid_until,
                "ci": r.certificate_id,
            }
            for r in cert.recoveries
        ]
    if cert.tests:
        wire["t"] = [
            {
                "tg": t.disease_target,
                "tt": t.test_type,
                "nm": t.test_name,
                "ma": t.test_device_manufacturer,
                "sc": t.sample_collected_at,
                "dr": t.result_date,
                "tr": t.test_result,
                "tc": t.testing_centre,
                "co": t.country,
                "is": t.issuer,
                "ci": t.certificate_id,
            }
            for t in cert.tests
        ]
    return wire
