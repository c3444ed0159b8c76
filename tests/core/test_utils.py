"""
Tests for the console formatters.
"""

import logging

from gagsim.core.logging import SEARCH_LOGGER, setup_logging
from gagsim.core.utils import damage_bar, format_accuracy, hint_bar


def test_format_accuracy():
    assert format_accuracy(0.5) == "50.0%"
    assert format_accuracy(1.0) == "100.0%"


def test_damage_bar_color_follows_lethality():
    lethal = damage_bar(30, 30)
    assert lethal.endswith(" 30/30")
    assert "[green]" in lethal
    short = damage_bar(10, 30)
    assert short.endswith(" 10/30")
    assert "[red]" in short


def test_hint_bar():
    assert hint_bar(None) == ""
    assert "[orange3]" in hint_bar(0.5)


def test_search_stats_logging():
    setup_logging(search_stats=True)
    assert logging.getLogger(SEARCH_LOGGER).level == logging.DEBUG
