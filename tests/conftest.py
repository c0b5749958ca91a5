"""
Shared test fixtures for the hcert-parser test suite.

Most tokens are built at test time with the inverse pipeline in
tests.builders, so every vector is reproducible from the certificate dicts
it was made from. Tokens captured from real issuers live in tests/fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from tests import builders

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def fixture_path(filename: str) -> Path:
    """
    Resolve the absolute path to a test fixture file.

    Raises FileNotFoundError if the fixture does not exist.
    """
    path = FIXTURES_DIR / filename
    if not path.exists():
        raise FileNotFoundError(f"Test fixture not found: {path}")
    return path


def fixture_text(filename: str) -> str:
    """Read a text fixture as UTF-8."""
    return fixture_path(filename).read_text(encoding="utf-8")


@pytest.fixture()
def vaccination_token() -> str:
    """HC1 token for the Italian two-dose vaccination certificate."""
    return builders.token_for(builders.certificate(builders.ITALIAN_VACCINATION))


@pytest.fixture()
def recovery_token() -> str:
    """HC1 token for the Austrian recovery certificate."""
    return builders.token_for(builders.certificate(builders.RECOVERY), issuer="AT")


@pytest.fixture()
def rapid_test_token() -> str:
    """HC1 token for the German rapid antigen test certificate (empty nm/ma)."""
    return builders.token_for(builders.certificate(builders.RAPID_TEST), issuer="DE")


@pytest.fixture()
def who_gdhcn_token() -> str:
    """HC1 token published by the WHO GDHCN interoperability test bed."""
    return fixture_text("who_gdhcn_token.txt")
