"""Logging bootstrap for scripts and services embedding panelforge."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from panelforge.config import settings

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Load .env and configure the root logger once."""
    load_dotenv()
    name = (level or settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
    )
