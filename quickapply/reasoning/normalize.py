"""Text normalization utilities"""

import re
import string

_PUNCT_TABLE = str.maketrans('', '', string.punctuation)

# Option texts that stand for "nothing selected yet"
PLACEHOLDER_OPTIONS = {
    "",
    "select",
    "select an option",
    "select one",
    "please select",
    "please select one",
    "choose",
    "choose one",
    "choose an option",
    "none selected",
}

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def normalize_text(text):
    """Normalize text for matching - lowercase, strip punctuation, collapse whitespace"""
    if not text:
        return ""
    text = str(text).lower()
    text = text.translate(_PUNCT_TABLE)
    return ' '.join(text.split())


def normalize_option_text(text):
    """Normalize dropdown/radio option text; placeholder texts become ''"""
    text = normalize_text(text)
    if text in PLACEHOLDER_OPTIONS:
        return ""
    return text


def is_placeholder_option(text, value=None):
    """True for the "-- Select --" style entry at the top of most dropdowns"""
    if value is not None and str(value).strip().lower() in ("", "select an option", "placeholder"):
        return True
    return normalize_option_text(text) == ""


def to_decimal_string(answer):
    """Render an answer as a plain decimal number, or None if it has none.

    5 -> "5", 2.50 -> "2.5", "3+ years" -> "3", True -> None
    """
    if isinstance(answer, bool) or answer is None:
        return None
    if isinstance(answer, int):
        return str(answer)
    if isinstance(answer, float):
        return str(int(answer)) if answer.is_integer() else repr(answer)
    match = _NUMBER.search(str(answer).replace(",", ""))
    if not match:
        return None
    number = match.group(0)
    if "." in number:
        number = number.rstrip("0").rstrip(".")
    return number
