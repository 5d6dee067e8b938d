"""Plant care watering reminders."""

from __future__ import annotations

import sys

__version__ = "0.1.0"

__all__ = ["__version__", "main"]


def main() -> None:
    from .cli import main as cli_main

    sys.exit(cli_main())
