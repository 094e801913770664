"""Lightweight logging utilities for matches and debugging."""

import datetime
import logging

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def log_event(message):
    timestamp = datetime.datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {message}")


def configure(level="WARNING"):
    """Route engine loggers (Gobang_AI.*) to stderr at the given level."""
    logging.basicConfig(level=getattr(logging, str(level).upper()), format=LOG_FORMAT, datefmt="%H:%M:%S")
