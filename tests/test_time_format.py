"""Countdown formatting and logging bootstrap."""

import logging

import pytest

from assessment_engine.core.time_format import format_remaining, is_low_on_time
from assessment_engine.utils.logging_config import configure_logging


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0:00"),
        (59, "0:59"),
        (61, "1:01"),
        (1800, "30:00"),
        (3600, "1:00:00"),
        (7322, "2:02:02"),
        (-5, "0:00"),
    ],
)
def test_format_remaining(seconds, expected):
    assert format_remaining(seconds) == expected


def test_low_on_time_threshold():
    assert is_low_on_time(299)
    assert not is_low_on_time(300)
    assert is_low_on_time(10, threshold=20)


def test_configure_logging_returns_package_logger():
    logger = configure_logging(logging.DEBUG)
    assert logger.name == "assessment_engine"
