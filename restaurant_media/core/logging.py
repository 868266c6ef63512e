"""Logging configuration."""

import logging
import os


def setup_logging(level: str | None = None) -> None:
    """Configure application logging.

    The level comes from ``LOG_LEVEL`` unless passed explicitly. httpx request
    lines are kept at WARNING so upload URLs do not flood INFO output.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))
