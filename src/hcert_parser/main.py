"""
Application entry point — reads an HC1 token from stdin and prints the certificate.

Composition root: loads settings, configures structlog, runs the decode
pipeline with its default adapters, and presents the result.

Responsibilities:
  1. Load and validate configuration from environment
  2. Configure structlog (stderr, so stdout carries only the decoded record)
  3. Read the token from standard input
  4. Decode and print as a pretty dataclass dump or JSON

Exit status: 0 on success, 1 when the token cannot be decoded, 2 on a
configuration error.
"""

from __future__ import annotations

import json
import logging
import pprint
import sys
from dataclasses import asdict
from typing import Any

import structlog
from pydantic import ValidationError

from hcert_parser import __version__
from hcert_parser.config import AppSettings
from hcert_parser.pipeline import decode_claims

EXIT_DECODE_ERROR = 1
EXIT_CONFIG_ERROR = 2


def configure_structlog(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog for structured logging on stderr.

    Console rendering by default; JSON lines when json_logs is set.
    """
    renderer: Any = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def render(value: Any, output_format: str = "pretty") -> str:
    """Render a decoded dataclass as JSON or as a pretty-printed dataclass dump."""
    if output_format == "json":
        return json.dumps(asdict(value), indent=2, ensure_ascii=False)
    return pprint.pformat(value, width=100, sort_dicts=False)


def main() -> None:
    """Decode the token on stdin and print it."""
    try:
        settings = AppSettings()
    except ValidationError as e:
        print(f"FATAL: Configuration error: {e}", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_CONFIG_ERROR)

    configure_structlog(settings.log_level, settings.log_json)
    log = structlog.get_logger()
    log.debug("cli.starting", version=__version__, output_format=settings.output_format)

    token = sys.stdin.read()
    result = decode_claims(token)

    if result.is_failure():
        error = result.error()
        log.info("cli.decode_failed", code=error.code.value, stage=error.code.stage, error=error.message)
        print(f"error: {error}", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_DECODE_ERROR)

    claims = result.value()
    log.info(
        "cli.decode_completed",
        issuer=claims.issuer,
        schema_version=claims.schema_version,
        records=len(claims.certificate.certificate_ids),
    )
    print(render(claims if settings.include_claims else claims.certificate, settings.output_format))  # noqa: T201


if __name__ == "__main__":
    main()
