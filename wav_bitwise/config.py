"""Configuration defaults, .env loading, and logging setup.

WHY: Window size, trailing-chunk handling, and log verbosity are tuning
knobs that users occasionally need to change without touching code or
passing flags on every run. Keeping them in one module makes them easy
to find and override.

HOW: python-dotenv loads the .env file on import. Constants are read from
the environment with os.getenv and parsed by small helpers that raise a
clear ValueError on bad input. configure_logging() sets up the root
logger for the CLI and GUI entry points.

RULES:
- All defaults can be overridden via environment variables (or .env)
- WAV_BITWISE_WINDOW_SIZE must be a positive integer (bytes)
- Boolean variables accept true/false, yes/no, 1/0 (case-insensitive)
- Library code never calls configure_logging(); only entry points do
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

from dotenv import load_dotenv

# Load .env from the working directory (where the tool is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Supported files
# ---------------------------------------------------------------------------

SUPPORTED_EXTENSIONS: set[str] = {".wav", ".wave"}
"""File extensions offered by the file pickers (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_window_size(raw: Union[str, int]) -> int:
    """Parse a transfer window size in bytes.

    Raises:
        ValueError: if the value is not an integer or is not positive.
    """
    try:
        size = int(str(raw).strip())
    except ValueError:
        raise ValueError(
            "Window size must be an integer number of bytes, got {!r}".format(raw)
        ) from None
    if size <= 0:
        raise ValueError("Window size must be positive, got {}".format(size))
    return size


def parse_bool(raw: str) -> bool:
    """Parse a boolean environment value."""
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError("Expected a boolean (true/false), got {!r}".format(raw))


def parse_log_level(raw: str) -> int:
    """Map a level name such as "info" or "DEBUG" to a logging constant."""
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError("Unknown log level {!r}".format(raw))
    return level


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_WINDOW_SIZE = 1024 * 1024
"""Transfer window capacity: 1 MiB."""

WINDOW_SIZE = parse_window_size(
    os.getenv("WAV_BITWISE_WINDOW_SIZE", str(DEFAULT_WINDOW_SIZE))
)
COPY_TRAILING = parse_bool(os.getenv("WAV_BITWISE_COPY_TRAILING", "true"))
LOG_LEVEL = os.getenv("WAV_BITWISE_LOG_LEVEL", "WARNING")
DEFAULT_OPERATION = os.getenv("WAV_BITWISE_DEFAULT_OPERATION", "right")

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for a front-end process.

    WHY: The core logs chunk walking and run milestones; the CLI and GUI
    decide how much of that the user sees.

    HOW: logging.basicConfig with a timestamped format on stderr. The
    level comes from the argument, else WAV_BITWISE_LOG_LEVEL.
    """
    logging.basicConfig(
        level=parse_log_level(level or LOG_LEVEL),
        format=LOG_FORMAT,
    )
