import logging
import re
import sys
from typing import Optional

TRUE_TOKENS = ("1", "true", "yes", "y", "on")
FALSE_TOKENS = ("0", "false", "no", "n", "off")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(logger_name, level=logging.INFO):
    """Attach a stdout handler at ``level`` to the named logger."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    return logger


def get_logger(logger_name, level=logging.INFO):
    """Return the named logger, configuring it on first use only."""
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger
    return setup_logging(logger_name, level)


def parse_weight_value(raw) -> Optional[float]:
    """
    Parse a user-supplied weight string.

    Whitespace is trimmed, a comma is accepted as decimal separator and a
    trailing percent sign is dropped.

    Args:
        raw: Raw value, usually a string from the environment or the terminal

    Returns:
        Parsed float, or None when the value cannot be read as a number

    Example:
        >>> parse_weight_value(" 55% ")
        55.0
        >>> parse_weight_value("7,5")
        7.5
    """
    if raw is None:
        return None
    normalized = str(raw).strip().replace(",", ".").lower()
    if normalized.endswith("%"):
        normalized = normalized[:-1].strip()
    try:
        value = float(normalized)
    except ValueError:
        return None
    # float() accepts "nan" and "inf", which are never usable weights
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value


def parse_bool(raw) -> Optional[bool]:
    """Interpret common on/off tokens; None when the token is unclear."""
    if raw is None:
        return None
    normalized = str(raw).strip().lower()
    if normalized in TRUE_TOKENS:
        return True
    if normalized in FALSE_TOKENS:
        return False
    return None


def slugify(name: str) -> str:
    """Filesystem-safe lowercase name, e.g. for saved plots."""
    slug = re.sub(r"[^a-z0-9]+", "_", str(name).strip().lower())
    slug = re.sub(r"_+", "_", slug).strip("_")
    return slug or "region"
