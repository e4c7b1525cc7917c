"""Translate domain errors into click errors."""

from __future__ import annotations

import logging

import click

from rpos.domain.exceptions import DomainException

logger = logging.getLogger(__name__)


def to_click_error(exc: DomainException) -> click.ClickException:
    if exc.is_server_fault:
        logger.error("Server fault (%s): %s", type(exc).__name__, exc)
        return click.ClickException(f"Internal error: {exc}")
    return click.ClickException(str(exc))
