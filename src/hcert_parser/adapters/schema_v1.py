"""
EUDCC v1 schema — structural deserialization of the hcert[1] value.

Maps the short wire keys of the EU DCC JSON schema onto the domain
dataclasses, field by field:

    ver → version        nam → Name(fn, fnt, gn, gnt)       dob → date_of_birth
    v   → VaccineRecord  r   → RecoveryRecord               t   → TestRecord

Unknown keys are ignored. A missing required field or a value of the
wrong CBOR type raises SchemaMismatchError naming the field path
(e.g. `v[0].dn`). Absent record collections decode to empty tuples and
absent optional test-record fields (nm, ma, dr) to empty strings.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from hcert_parser.domain.models import (
    Certificate,
    Name,
    RecoveryRecord,
    TestRecord,
    VaccineRecord,
)

SCHEMA_VERSION = 1

R = TypeVar("R")

_MISSING = object()


class SchemaMismatchError(ValueError):
    """A certificate value does not have the shape the v1 schema requires."""

    def __init__(self, path: str, problem: str) -> None:
        super().__init__(f"{path}: {problem}")
        self.path = path


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


def _mapping(value: Any, path: str) -> Mapping[Any, Any]:
    if not isinstance(value, Mapping):
        raise SchemaMismatchError(path or "<certificate>", f"expected a map, got {_type_name(value)}")
    return value


def _text(obj: Mapping[Any, Any], key: str, path: str, default: str | None = None) -> str:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        if default is None:
            raise SchemaMismatchError(_join(path, key), "required field is missing")
        return default
    if not isinstance(value, str):
        raise SchemaMismatchError(_join(path, key), f"expected text, got {_type_name(value)}")
    return value


def _integer(obj: Mapping[Any, Any], key: str, path: str) -> int:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        raise SchemaMismatchError(_join(path, key), "required field is missing")
    if isinstance(value, bool) or not isinstance(value, int):
        raise SchemaMismatchError(_join(path, key), f"expected an integer, got {_type_name(value)}")
    return value


def _records(
    obj: Mapping[Any, Any],
    key: str,
    parse: Callable[[Mapping[Any, Any], str], R],
) -> tuple[R, ...]:
    value = obj.get(key, _MISSING)
    if value is _MISSING:
        return ()
    if not isinstance(value, (list, tuple)):
        raise SchemaMismatchError(key, f"expected an array, got {_type_name(value)}")
    return tuple(
        parse(_mapping(entry, f"{key}[{index}]"), f"{key}[{index}]")
        for index, entry in enumerate(value)
    )


# ─────────────────────── Record parsers ───────────────────────


def _parse_name(obj: Mapping[Any, Any], path: str) -> Name:
    return Name(
        surname=_text(obj, "fn", path),
        surname_transliterated=_text(obj, "fnt", path),
        given_name=_text(obj, "gn", path),
        given_name_transliterated=_text(obj, "gnt", path),
    )


def _parse_vaccine(obj: Mapping[Any, Any], path: str) -> VaccineRecord:
    return VaccineRecord(
        disease_target=_text(obj, "tg", path),
        vaccine_prophylaxis=_text(obj, "vp", path),
        vaccine_product=_text(obj, "mp", path),
        manufacturer=_text(obj, "ma", path),
        dose_number=_integer(obj, "dn", path),
        total_doses=_integer(obj, "sd", path),
        vaccination_date=_text(obj, "dt", path),
        country=_text(obj, "co", path),
        issuer=_text(obj, "is", path),
        certificate_id=_text(obj, "ci", path),
    )


def _parse_recovery(obj: Mapping[Any, Any], path: str) -> RecoveryRecord:
    return RecoveryRecord(
        disease_target=_text(obj, "tg", path),
        first_positive_test_date=_text(obj, "fr", path),
        country=_text(obj, "co", path),
        issuer=_text(obj, "is", path),
        valid_from=_text(obj, "df", path),
        valid_until=_text(obj, "du", path),
        certificate_id=_text(obj, "ci", path),
    )


def _parse_test(obj: Mapping[Any, Any], path: str) -> TestRecord:
    return TestRecord(
        disease_target=_text(obj, "tg", path),
        test_type=_text(obj, "tt", path),
        test_name=_text(obj, "nm", path, default=""),
        test_device_manufacturer=_text(obj, "ma", path, default=""),
        sample_collected_at=_text(obj, "sc", path),
        result_date=_text(obj, "dr", path, default=""),
        test_result=_text(obj, "tr", path),
        testing_centre=_text(obj, "tc", path),
        country=_text(obj, "co", path),
        issuer=_text(obj, "is", path),
        certificate_id=_text(obj, "ci", path),
    )


def parse_v1_certificate(value: Any) -> Certificate:
    """
    Deserialize the hcert[1] value into a Certificate.

    Raises SchemaMismatchError on any structural mismatch.
    """
    obj = _mapping(value, "")
    if "nam" not in obj:
        raise SchemaMismatchError("nam", "required field is missing")
    return Certificate(
        version=_text(obj, "ver", ""),
        name=_parse_name(_mapping(obj["nam"], "nam"), "nam"),
        date_of_birth=_text(obj, "dob", ""),
        vaccinations=_records(obj, "v", _parse_vaccine),
        recoveries=_records(obj, "r", _parse_recovery),
        tests=_records(obj, "t", _parse_test),
    )
