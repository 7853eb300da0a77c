"""Unit tests for core/parse.py"""

import pytest

from mdsite.core.parse import leading_h1


@pytest.mark.parametrize("body,expected", [
    ("# Overview\n\nText.\n", "Overview"),
    ("\n\n# Spaced  \n", "Spaced"),
    ("Intro text.\n\n# Later\n", None),
    ("## Second level\n", None),
    ("", None),
])
def test_leading_h1(body, expected):
    """leading_h1 returns the first block's text only when it is a level-1 heading."""
    assert leading_h1(body) == expected
