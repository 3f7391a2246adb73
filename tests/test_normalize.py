"""Text normalization"""

import pytest

from quickapply.reasoning.normalize import (
    is_placeholder_option,
    normalize_option_text,
    normalize_text,
    to_decimal_string,
)


def test_normalize_text():
    assert normalize_text("  Years of   Experience?* ") == "years of experience"
    assert normalize_text(None) == ""


def test_placeholder_options_normalize_to_empty():
    assert normalize_option_text("-- Select --") == ""
    assert normalize_option_text("Select an option") == ""
    assert normalize_option_text("Yes") == "yes"


def test_is_placeholder_by_value():
    assert is_placeholder_option("Choose wisely", value="")
    assert not is_placeholder_option("Yes", value="yes")


@pytest.mark.parametrize(
    "answer, expected",
    [
        (5, "5"),
        (2.5, "2.5"),
        (3.0, "3"),
        ("3+ years", "3"),
        ("2.50", "2.5"),
        ("120,000", "120000"),
        ("Yes", None),
        (True, None),
        (None, None),
    ],
)
def test_to_decimal_string(answer, expected):
    assert to_decimal_string(answer) == expected
