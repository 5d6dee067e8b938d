"""Process bootstrap: logging setup shared by the CLI and the HTTP server."""

from __future__ import annotations

from .logging import configure_logging

__all__ = ["configure_logging"]
