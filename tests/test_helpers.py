"""Tests for parsing and logging helpers."""
import logging

import pytest

from skilookup.utils.helpers import get_logger, parse_bool, parse_weight_value, slugify


class TestParseWeightValue:
    """Test the weight value grammar."""

    @pytest.mark.parametrize("raw, expected", [
        ("25", 25.0),
        (" 55% ", 55.0),
        ("7,5", 7.5),
        ("12.5 %", 12.5),
        ("0", 0.0),
        ("-3", -3.0),
    ])
    def test_accepts_numbers(self, raw, expected):
        """Plain, percent and comma-decimal values parse to floats."""
        assert parse_weight_value(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "1.2.3", "nan", "inf", None])
    def test_rejects_non_numbers(self, raw):
        """Unreadable values return None."""
        assert parse_weight_value(raw) is None


class TestParseBool:
    """Test boolean token parsing."""

    def test_true_and_false_tokens(self):
        """Common on/off tokens are recognised regardless of case."""
        assert parse_bool("Yes") is True
        assert parse_bool(" 1 ") is True
        assert parse_bool("off") is False
        assert parse_bool("FALSE") is False

    def test_unclear_token(self):
        """Anything else is None."""
        assert parse_bool("maybe") is None
        assert parse_bool(None) is None


def test_slugify():
    """Region names become filesystem-safe."""
    assert slugify("St. Anton am Arlberg") == "st_anton_am_arlberg"
    assert slugify("  ") == "region"


def test_get_logger_attaches_handler_once():
    """Repeated calls do not stack console handlers."""
    name = "skilookup.tests.helpers"
    first = get_logger(name)
    second = get_logger(name)
    try:
        assert first is second
        assert len(first.handlers) == 1
    finally:
        for handler in list(first.handlers):
            first.removeHandler(handler)
