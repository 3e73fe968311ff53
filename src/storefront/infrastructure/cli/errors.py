"""Error translation shared by the CLI commands."""

from __future__ import annotations

import click


def store_busy() -> click.ClickException:
    """Raised when the database stayed locked through every retry."""
    return click.ClickException("The store is busy right now, try again in a moment.")
