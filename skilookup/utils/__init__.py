"""Shared helpers: logging setup and tolerant string parsing."""

from .helpers import (
    get_logger,
    parse_bool,
    parse_weight_value,
    setup_logging,
    slugify,
)

__all__ = [
    "get_logger",
    "parse_bool",
    "parse_weight_value",
    "setup_logging",
    "slugify",
]
