"""Command line interface for Mintgate."""

from .app import app

__all__ = ["app"]
