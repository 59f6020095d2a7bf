"""Command-line interface."""

from .cli import app

__all__ = ["app"]
