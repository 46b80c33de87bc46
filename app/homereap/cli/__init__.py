"""CLI package for homereap.

This package contains the Typer application.
"""

from homereap.cli.main import app

__all__ = ["app"]
