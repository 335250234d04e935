"""CLI error handling helpers."""

import logging

import click

from ledgerkit.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error on stderr and exit with status 1."""
    logger.debug("Command '%s' failed: %r", ctx.command_path, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
