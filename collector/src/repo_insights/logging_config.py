from __future__ import annotations

import logging
from typing import Final


DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: int = logging.WARNING) -> None:
    """Send log records to stderr; click.echo owns stdout for progress lines."""
    logging.basicConfig(level=level, format=DEFAULT_LOG_FORMAT, handlers=[logging.StreamHandler()])
